"""Tests for get/list/path version resolution against an in-memory proxy."""

from unittest.mock import patch

import pytest

from modproxy import ModProxyClient, Module
from modproxy.module import sort_versions
from versioning.errors import InvalidVersionError, LookupFailure, ModuleNotFound
from versioning.models import DependencyRecord, QueryKind, VersionQuery
from versioning.resolver import VersionResolver, next_major

MODULES = {
    "github.com/foo/bar": ["v1.0.0", "v1.2.0", "v0.9.0"],
    "github.com/foo/bar/v2": ["v2.0.0", "v2.1.0", "v2.2.0-rc.1"],
    "github.com/old/lib": ["v1.0.0", "v2.0.0+incompatible", "v3.1.0+incompatible"],
    "github.com/up/todate": ["v1.4.0", "v1.5.0"],
    "gopkg.in/yaml.v2": ["v2.4.0"],
    "gopkg.in/yaml.v3": ["v3.0.0", "v3.0.1"],
}


class FakeProxy(ModProxyClient):
    """Proxy client whose version lists come from a dict."""

    def __init__(self, modules=None, broken=()):
        super().__init__("https://proxy.invalid")
        self.modules = dict(MODULES if modules is None else modules)
        self.broken = set(broken)
        self.calls = []

    def request(self, path, cached=True):
        self.calls.append(path)
        if path in self.broken:
            raise LookupFailure(f"{path}: connection refused")
        if path not in self.modules:
            raise ModuleNotFound(f"{path}: not found")
        return Module(path=path, versions=sort_versions(self.modules[path]))


@pytest.fixture
def proxy():
    return FakeProxy()


@pytest.fixture
def resolver(proxy):
    return VersionResolver(proxy)


class TestNextMajor:
    """Major increment used by the path command."""

    @pytest.mark.parametrize("version,expected", [
        ("", "v2"),
        ("v0", "v2"),
        ("v1", "v2"),
        ("v3.1.0", "v4"),
    ])
    def test_next(self, version, expected):
        assert next_major(version) == expected

    def test_invalid(self):
        with pytest.raises(InvalidVersionError):
            next_major("bad")


class TestResolveGet:
    """Planning a get request."""

    def test_latest_major_for_package(self, resolver):
        plan = resolver.resolve_get("github.com/foo/bar/pkg")
        assert plan.module_prefix == "github.com/foo/bar"
        assert plan.subpath == "pkg"
        assert plan.resolved.version == "v2.1.0"
        assert plan.fetch_spec == "github.com/foo/bar/v2/pkg"
        assert plan.mapping("github.com/foo/bar/pkg") == ("github.com/foo/bar/v2/pkg", True)
        assert plan.mapping("github.com/foo/bar/other") == ("github.com/foo/bar/other", False)

    def test_whole_module(self, resolver):
        plan = resolver.resolve_get("github.com/foo/bar")
        assert plan.subpath == ""
        assert plan.mapping("github.com/foo/bar/other") == ("github.com/foo/bar/v2/other", True)

    def test_prerelease(self, resolver):
        plan = resolver.resolve_get("github.com/foo/bar", pre=True)
        assert plan.resolved.version == "v2.2.0-rc.1"
        assert plan.resolved.allow_prerelease is True

    def test_latest_query_pins_version(self, resolver):
        plan = resolver.resolve_get("github.com/foo/bar@latest")
        assert plan.resolved.query.kind is QueryKind.LATEST
        assert plan.fetch_spec == "github.com/foo/bar/v2@v2.1.0"

    def test_default_branch_query_kept(self, resolver):
        plan = resolver.resolve_get("github.com/foo/bar/pkg@master")
        assert plan.fetch_spec == "github.com/foo/bar/v2/pkg@master"

    def test_explicit_major_prefix(self, resolver):
        plan = resolver.resolve_get("github.com/foo/bar@v2")
        assert plan.resolved.version == "v2.1.0"
        assert plan.fetch_spec == "github.com/foo/bar/v2@v2"

    def test_explicit_incompatible(self, resolver):
        plan = resolver.resolve_get("github.com/old/lib@v2.0.0")
        assert plan.resolved.version == "v2.0.0+incompatible"
        assert plan.fetch_spec == "github.com/old/lib@v2.0.0"
        assert plan.mapping("github.com/old/lib/sub") == ("github.com/old/lib/sub", False)

    def test_unspecified_on_incompatible_module(self, resolver):
        plan = resolver.resolve_get("github.com/old/lib")
        assert plan.resolved.version == "v3.1.0+incompatible"
        assert plan.fetch_spec == "github.com/old/lib"

    def test_explicit_unknown_version_used_literally(self, resolver):
        plan = resolver.resolve_get("github.com/foo/bar@v9.0.0")
        assert plan.resolved.version == "v9.0.0"
        assert plan.fetch_spec == "github.com/foo/bar/v9@v9.0.0"

    def test_legacy_host(self, resolver):
        plan = resolver.resolve_get("gopkg.in/yaml.v2")
        assert plan.module_prefix == "gopkg.in/yaml"
        assert plan.resolved.version == "v3.0.1"
        assert plan.fetch_spec == "gopkg.in/yaml.v3"
        assert plan.mapping("gopkg.in/yaml.v2") == ("gopkg.in/yaml.v3", True)

    def test_invalid_version_rejected_before_lookup(self, resolver, proxy):
        with pytest.raises(InvalidVersionError):
            resolver.resolve_get("github.com/foo/bar@vx")
        assert proxy.calls == []

    def test_unknown_module(self, resolver):
        with pytest.raises(ModuleNotFound):
            resolver.resolve_get("github.com/nobody/home/pkg")

    def test_no_stable_versions(self):
        resolver = VersionResolver(FakeProxy({"github.com/rc/only": ["v1.0.0-rc.1"]}))
        with pytest.raises(LookupFailure):
            resolver.resolve_get("github.com/rc/only")


class TestResolveList:
    """Batch checks for newer versions."""

    def test_updates_and_failures_in_order(self):
        proxy = FakeProxy(broken={"github.com/broken/x"})
        records = [
            DependencyRecord("github.com/foo/bar", "v1.0.0"),
            DependencyRecord("github.com/missing/x", "v1.0.0"),
            DependencyRecord("github.com/up/todate", "v1.5.0"),
            DependencyRecord("github.com/broken/x", "v1.0.0"),
            DependencyRecord("gopkg.in/yaml", "v2.4.0"),
        ]
        report = VersionResolver(proxy).resolve_list(records, concurrency=3)

        assert [(e.path, e.current, e.latest) for e in report.updates] == [
            ("github.com/foo/bar", "v1.0.0", "v2.1.0"),
            ("gopkg.in/yaml.v2", "v2.4.0", "v3.0.1"),
        ]
        assert [f.path for f in report.failures] == ["github.com/missing/x", "github.com/broken/x"]
        assert "connection refused" in report.failures[1].error

    def test_malformed_latest_reply_isolated(self):
        def fake_get(url, *, headers=None, use_cache=True, **kwargs):
            if "/github.com/bad/x/" in url:
                return 200, {}, ""
            if "/v2/" in url:
                return 404, {}, "not found"
            return 200, {}, "v1.0.0\nv1.2.0\n"

        records = [
            DependencyRecord("github.com/bad/x", "v1.0.0"),
            DependencyRecord("github.com/good/y", "v1.0.0"),
        ]
        proxy = ModProxyClient("https://proxy.invalid")
        with patch("modproxy.client.robust_get", side_effect=fake_get), \
                patch("modproxy.client.get_json", return_value=(200, {}, {"Version": 123})):
            report = VersionResolver(proxy).resolve_list(records)

        assert [(e.path, e.latest) for e in report.updates] == [("github.com/good/y", "v1.2.0")]
        assert [f.path for f in report.failures] == ["github.com/bad/x"]

    def test_unexpected_error_isolated(self):
        class ExplodingProxy(FakeProxy):
            def request(self, path, cached=True):
                if path == "github.com/boom/x":
                    raise AttributeError("'int' object has no attribute 'startswith'")
                return super().request(path, cached)

        records = [
            DependencyRecord("github.com/boom/x", "v1.0.0"),
            DependencyRecord("github.com/foo/bar", "v1.0.0"),
        ]
        report = VersionResolver(ExplodingProxy()).resolve_list(records)

        assert [e.path for e in report.updates] == ["github.com/foo/bar"]
        assert report.failures[0].path == "github.com/boom/x"
        assert report.failures[0].error.startswith("AttributeError")

    def test_major_only(self):
        records = [
            DependencyRecord("github.com/foo/bar", "v2.0.0"),
            DependencyRecord("github.com/up/todate", "v1.4.0"),
        ]
        resolver = VersionResolver(FakeProxy())
        assert resolver.resolve_list(records, major_only=True).updates == []
        minor = resolver.resolve_list(records)
        assert [e.latest for e in minor.updates] == ["v2.1.0", "v1.5.0"]

    def test_private_modules_skipped(self):
        proxy = FakeProxy({"github.com/foo/bar": ["v1.0.0"]})
        records = [
            DependencyRecord("git.corp.example.com/team/mod", "v1.0.0"),
            DependencyRecord("github.com/foo/bar", "v1.0.0"),
        ]
        report = VersionResolver(proxy).resolve_list(records, private="*.corp.example.com")
        assert report.skipped == ["git.corp.example.com/team/mod"]
        assert all("corp" not in call for call in proxy.calls)
        assert report.updates == []

    def test_empty(self, resolver, proxy):
        report = resolver.resolve_list([])
        assert report.updates == [] and report.failures == []
        assert proxy.calls == []


class TestResolvePath:
    """Planning a module path change."""

    def test_keep_current_major(self):
        plan = VersionResolver.resolve_path("github.com/me/proj/v2")
        assert plan.new_module_path == "github.com/me/proj/v2"
        assert plan.version == "v2"

    def test_increment_from_v1(self):
        plan = VersionResolver.resolve_path("github.com/me/proj", increment=True)
        assert plan.new_module_path == "github.com/me/proj/v2"
        assert plan.mapping("github.com/me/proj/internal/x") == ("github.com/me/proj/v2/internal/x", True)

    def test_increment_query_kind(self):
        query = VersionQuery(kind=QueryKind.INCREMENT_MAJOR)
        plan = VersionResolver.resolve_path("github.com/me/proj/v3", version=query)
        assert plan.new_module_path == "github.com/me/proj/v4"

    def test_explicit_bare_number(self):
        plan = VersionResolver.resolve_path("github.com/me/proj/v2", version="5")
        assert plan.new_module_path == "github.com/me/proj/v5"
        assert plan.mapping("github.com/me/proj/v2/x") == ("github.com/me/proj/v5/x", True)

    def test_back_to_v1(self):
        plan = VersionResolver.resolve_path("github.com/me/proj/v3", version="v1")
        assert plan.new_module_path == "github.com/me/proj"
        assert plan.mapping("github.com/me/proj/v3/x") == ("github.com/me/proj/x", True)

    def test_rename(self):
        plan = VersionResolver.resolve_path("github.com/me/proj/v2", "github.com/you/proj/v2")
        assert plan.old_prefix == "github.com/me/proj"
        assert plan.new_prefix == "github.com/you/proj"
        assert plan.mapping("github.com/me/proj/v2/x") == ("github.com/you/proj/v2/x", True)
        assert plan.mapping("github.com/you/proj/v2/x") == ("github.com/you/proj/v2/x", False)

    def test_legacy_host(self):
        plan = VersionResolver.resolve_path("gopkg.in/me/proj.v1", increment=True)
        assert plan.new_module_path == "gopkg.in/me/proj.v2"

    def test_invalid_version(self):
        with pytest.raises(InvalidVersionError):
            VersionResolver.resolve_path("github.com/me/proj", version="four")
