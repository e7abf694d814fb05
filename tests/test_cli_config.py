"""Tests for configuration loading and precedence."""

from types import SimpleNamespace

import pytest

from cli_config import apply_config, apply_env_overrides, configure, load_config, proxy_from_env
from constants import Constants
from versioning.errors import InputError


class TestLoadConfig:
    """YAML config files."""

    def test_no_path(self):
        assert load_config(None) == {}

    def test_loads_mapping(self, tmp_path):
        cfg = tmp_path / "gomajor.yml"
        cfg.write_text("proxy: https://goproxy.example.com/\nprivate:\n  - '*.corp.com'\n  - github.com/acme\n")
        assert load_config(str(cfg)) == {
            "proxy": "https://goproxy.example.com/",
            "private": ["*.corp.com", "github.com/acme"],
        }

    def test_empty_file(self, tmp_path):
        cfg = tmp_path / "empty.yml"
        cfg.write_text("")
        assert load_config(str(cfg)) == {}

    def test_missing(self, tmp_path):
        with pytest.raises(InputError, match="not found"):
            load_config(str(tmp_path / "nope.yml"))

    @pytest.mark.parametrize("text", ["- a\n- b\n", "proxy: [unclosed\n"])
    def test_invalid(self, tmp_path, text):
        cfg = tmp_path / "bad.yml"
        cfg.write_text(text)
        with pytest.raises(InputError):
            load_config(str(cfg))


class TestApplyConfig:
    """Mapping YAML keys onto runtime settings."""

    def test_all_keys(self):
        apply_config({
            "proxy": "https://goproxy.example.com/",
            "private": ["*.corp.com", "github.com/acme"],
            "timeout": 5,
            "list": {"cached_concurrency": 8, "uncached_concurrency": 0},
        })
        assert Constants.PROXY_URL == "https://goproxy.example.com"
        assert Constants.PRIVATE_PATTERNS == "*.corp.com,github.com/acme"
        assert Constants.REQUEST_TIMEOUT == 5
        assert Constants.LIST_CONCURRENCY_CACHED == 8
        assert Constants.LIST_CONCURRENCY_UNCACHED == 1

    def test_empty(self):
        before = Constants.PROXY_URL
        apply_config({})
        assert Constants.PROXY_URL == before

    @pytest.mark.parametrize("cfg", [
        {"list": [1, 2]},
        {"list": "fast"},
        {"timeout": "soon"},
        {"timeout": True},
        {"list": {"cached_concurrency": "many"}},
        {"proxy": ["https://a.example.com"]},
        {"private": 42},
    ])
    def test_malformed_values(self, cfg):
        with pytest.raises(InputError, match="invalid config value"):
            apply_config(cfg)

    def test_numeric_strings_accepted(self):
        apply_config({"timeout": "7", "list": {"uncached_concurrency": "3"}})
        assert Constants.REQUEST_TIMEOUT == 7
        assert Constants.LIST_CONCURRENCY_UNCACHED == 3


class TestEnvironment:
    """Go environment variables."""

    @pytest.mark.parametrize("value,expected", [
        ("https://a.example.com,direct", "https://a.example.com"),
        ("direct", None),
        ("https://a.example.com/|https://b.example.com", "https://a.example.com"),
        ("direct,https://b.example.com", "https://b.example.com"),
    ])
    def test_proxy_from_env(self, value, expected):
        assert proxy_from_env(value) == expected

    def test_proxy_off(self):
        with pytest.raises(InputError):
            proxy_from_env("off")

    def test_private_prefers_gonoproxy(self):
        apply_env_overrides({"GOPRIVATE": "github.com/a", "GONOPROXY": "github.com/b"})
        assert Constants.PRIVATE_PATTERNS == "github.com/b"

    def test_direct_only_keeps_default(self):
        before = Constants.PROXY_URL
        apply_env_overrides({"GOPROXY": "direct"})
        assert Constants.PROXY_URL == before


class TestPrecedence:
    """CLI over environment over YAML."""

    def test_layers(self, tmp_path):
        cfg = tmp_path / "gomajor.yml"
        cfg.write_text("proxy: https://yaml.example.com\nprivate: yaml.example.com\n")
        args = SimpleNamespace(CONFIG=str(cfg), PROXY=None)

        configure(args, env={})
        assert Constants.PROXY_URL == "https://yaml.example.com"
        assert Constants.PRIVATE_PATTERNS == "yaml.example.com"

        configure(args, env={"GOPROXY": "https://env.example.com", "GOPRIVATE": "env.example.com"})
        assert Constants.PROXY_URL == "https://env.example.com"
        assert Constants.PRIVATE_PATTERNS == "env.example.com"

        args.PROXY = "https://cli.example.com/"
        configure(args, env={"GOPROXY": "https://env.example.com"})
        assert Constants.PROXY_URL == "https://cli.example.com"
