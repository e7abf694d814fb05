"""Locate import path literals in Go source.

Only the import declarations are of interest, so this is a token-level scan
rather than a parser: it skips comments and literals, reads the package
clause and then every ``import`` declaration up to the first other top-level
token.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple


class ImportScanError(ValueError):
    """Go source could not be tokenized far enough to find its imports."""


@dataclass(frozen=True)
class ImportSpec:
    """One import path literal.

    ``start``/``end`` delimit the literal including its quotes; ``line`` and
    ``column`` are 1-based and point at the opening quote.
    """
    path: str
    start: int
    end: int
    line: int
    column: int
    quote: str = '"'


@dataclass(frozen=True)
class _Token:
    kind: str  # "ident", "string", "punct", "other"
    text: str
    start: int
    end: int


def _tokens(src: str) -> Iterator[_Token]:
    i = 1 if src.startswith("\ufeff") else 0
    n = len(src)
    while i < n:
        c = src[i]
        if c.isspace():
            i += 1
            continue
        if src.startswith("//", i):
            nl = src.find("\n", i)
            i = n if nl < 0 else nl + 1
            continue
        if src.startswith("/*", i):
            close = src.find("*/", i + 2)
            if close < 0:
                raise ImportScanError(f"unterminated comment at offset {i}")
            i = close + 2
            continue
        if c == '"' or c == "'":
            j = i + 1
            while j < n and src[j] != c:
                if src[j] == "\\":
                    j += 1
                elif src[j] == "\n":
                    raise ImportScanError(f"newline in literal at offset {i}")
                j += 1
            if j >= n:
                raise ImportScanError(f"unterminated literal at offset {i}")
            yield _Token("string" if c == '"' else "other", src[i:j + 1], i, j + 1)
            i = j + 1
            continue
        if c == "`":
            close = src.find("`", i + 1)
            if close < 0:
                raise ImportScanError(f"unterminated raw string at offset {i}")
            yield _Token("string", src[i:close + 1], i, close + 1)
            i = close + 1
            continue
        if c.isalpha() or c == "_":
            j = i + 1
            while j < n and (src[j].isalnum() or src[j] == "_"):
                j += 1
            yield _Token("ident", src[i:j], i, j)
            i = j
            continue
        yield _Token("punct", c, i, i + 1)
        i += 1


def _position(src: str, offset: int) -> Tuple[int, int]:
    line = src.count("\n", 0, offset) + 1
    line_start = src.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def _spec(src: str, tok: _Token) -> ImportSpec:
    line, column = _position(src, tok.start)
    return ImportSpec(
        path=tok.text[1:-1],
        start=tok.start,
        end=tok.end,
        line=line,
        column=column,
        quote=tok.text[0],
    )


def scan_imports(src: str) -> List[ImportSpec]:
    """Return the import path literals of a Go source file in source order."""
    tokens = _tokens(src)
    specs: List[ImportSpec] = []

    def next_token() -> _Token:
        for tok in tokens:
            if tok.text != ";":
                return tok
        return _Token("eof", "", len(src), len(src))

    tok = next_token()
    if tok.text != "package":
        raise ImportScanError("missing package clause")
    if next_token().kind != "ident":
        raise ImportScanError("missing package name")

    tok = next_token()
    while tok.text == "import":
        tok = next_token()
        if tok.text == "(":
            tok = next_token()
            while tok.text != ")":
                if tok.kind == "eof":
                    raise ImportScanError("unterminated import block")
                if tok.kind in ("ident", "punct") and tok.text != ")":
                    # import name: identifier, "." or "_"
                    tok = next_token()
                if tok.kind != "string":
                    raise ImportScanError(f"expected import path at offset {tok.start}")
                specs.append(_spec(src, tok))
                tok = next_token()
            tok = next_token()
        else:
            if tok.kind in ("ident", "punct"):
                tok = next_token()
            if tok.kind != "string":
                raise ImportScanError(f"expected import path at offset {tok.start}")
            specs.append(_spec(src, tok))
            tok = next_token()
    return specs
