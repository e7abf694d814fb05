"""Tests for package spec and version query parsing."""

import pytest

from versioning.errors import InvalidVersionError, MissingSpecError
from versioning.models import QueryKind, VersionQuery
from versioning.parser import parse_package_spec, parse_path_version, parse_query


class TestParseQuery:
    """Query classification."""

    def test_empty(self):
        assert parse_query("") == VersionQuery(kind=QueryKind.UNSPECIFIED)

    def test_latest(self):
        assert parse_query("latest").kind is QueryKind.LATEST

    @pytest.mark.parametrize("raw", ["master", "default"])
    def test_default_branch(self, raw):
        query = parse_query(raw)
        assert query.kind is QueryKind.DEFAULT
        assert query.raw == raw

    @pytest.mark.parametrize("raw", ["v2", "v2.1", "v2.0.0", "v3.0.0-rc.1"])
    def test_explicit(self, raw):
        assert parse_query(raw) == VersionQuery(kind=QueryKind.EXPLICIT, raw=raw)

    @pytest.mark.parametrize("raw", ["2.0.0", "vfoo", "v1.2.3.4", "LATEST"])
    def test_invalid(self, raw):
        with pytest.raises(InvalidVersionError):
            parse_query(raw)


class TestParsePackageSpec:
    """Spec tokens from the command line."""

    def test_path_and_query(self):
        path, query = parse_package_spec("github.com/foo/bar/pkg@v2.0.0")
        assert path == "github.com/foo/bar/pkg"
        assert query.kind is QueryKind.EXPLICIT

    def test_path_only(self):
        path, query = parse_package_spec("github.com/foo/bar")
        assert path == "github.com/foo/bar"
        assert query.kind is QueryKind.UNSPECIFIED

    @pytest.mark.parametrize("token", [None, "", "   ", "@v2.0.0"])
    def test_missing(self, token):
        with pytest.raises(MissingSpecError):
            parse_package_spec(token)


class TestParsePathVersion:
    """Versions given to the path command."""

    def test_bare_number(self):
        assert parse_path_version("3").raw == "v3"

    def test_token(self):
        assert parse_path_version("v4").raw == "v4"

    def test_empty(self):
        assert parse_path_version("").kind is QueryKind.UNSPECIFIED

    def test_invalid(self):
        with pytest.raises(InvalidVersionError):
            parse_path_version("four")
