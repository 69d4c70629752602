# tests/core/test_file_loader.py
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from loader.errors import LoaderError, NoResolverError
from loader.model import LoaderSettings
from loader.resolvers.fs_resolver import FSResolver
from loader.resolvers.http_resolver import HttpResolver
from loader.resolvers.noop_resolver import NoopResolver
from loader.services.file_loader import FileLoader


@pytest.fixture
def site(tmp_path):
    """Een kleine site op schijf."""
    (tmp_path / "elements").mkdir()
    (tmp_path / "index.html").write_text('<link rel="import" href="elements/x-a.html">', encoding="utf-8")
    (tmp_path / "elements" / "x-a.html").write_text("<script>Polymer({is: 'x-a'});</script>", encoding="utf-8")
    return tmp_path


# --- FileLoader ---

def test_concurrent_requests_share_one_load(make_loader):
    loader, resolver = make_loader({"http://h/a.html": "A"}, delays={"http://h/a.html": 0.01})

    async def scenario():
        first = loader.request("http://h/a.html")
        second = loader.request("http://h/a.html")
        assert first is second
        return await asyncio.gather(first, second, loader.request("http://h/a.html"))

    assert asyncio.run(scenario()) == ["A", "A", "A"]
    assert resolver.loads == ["http://h/a.html"]


def test_first_accepting_resolver_wins(make_loader):
    loader, resolver = make_loader({"http://h/skip.js": "real content"})
    loader.resolvers.insert(0, NoopResolver(r"skip\.js$"))

    async def scenario():
        return await loader.request("http://h/skip.js")

    assert asyncio.run(scenario()) == ""
    assert resolver.loads == []


def test_unknown_url_raises_no_resolver_error():
    loader = FileLoader()

    async def scenario():
        return await loader.request("ftp://h/a.html")

    with pytest.raises(NoResolverError) as excinfo:
        asyncio.run(scenario())
    assert excinfo.value.url == "ftp://h/a.html"


def test_on_loaded_callback_counts_loads(make_loader):
    seen = []
    loader, _ = make_loader({"http://h/a.html": "A", "http://h/b.html": "B"})
    loader.on_loaded = seen.append

    async def scenario():
        await loader.request("http://h/a.html")
        await loader.request("http://h/b.html")
        await loader.request("http://h/a.html")

    asyncio.run(scenario())
    assert seen == ["http://h/a.html", "http://h/b.html"]


def test_from_settings_builds_resolver_chain(site):
    settings = LoaderSettings(root=str(site), host="example.com", noop_patterns=["analytics"])
    loader = FileLoader.from_settings(settings)

    assert [type(r) for r in loader.resolvers] == [NoopResolver, FSResolver, HttpResolver]


# --- FSResolver ---

def test_fs_resolver_serves_file_urls(site):
    resolver = FSResolver(site)
    url = (site / "index.html").as_uri()

    assert resolver.accept(url)
    assert asyncio.run(resolver.load(url)).startswith('<link rel="import"')


def test_fs_resolver_maps_host_onto_root(site):
    resolver = FSResolver(site, host="example.com")

    assert resolver.accept("http://example.com/elements/x-a.html")
    assert not resolver.accept("http://other.org/elements/x-a.html")
    assert resolver.to_path("https://example.com/elements/x-a.html") == (site / "elements" / "x-a.html").resolve()
    assert "x-a" in asyncio.run(resolver.load("http://example.com/elements/x-a.html"))


def test_fs_resolver_missing_file_raises(site):
    resolver = FSResolver(site, host="example.com")
    with pytest.raises(LoaderError):
        asyncio.run(resolver.load("http://example.com/nope.html"))


def test_fs_resolver_refuses_paths_outside_root(site):
    resolver = FSResolver(site / "elements", host="example.com")
    with pytest.raises(LoaderError):
        resolver.to_path("http://example.com/%2E%2E/index.html")


def test_fs_resolver_refuses_file_urls_outside_root(site):
    """Ook file:// URLs blijven binnen de root."""
    resolver = FSResolver(site / "elements")
    url = (site / "index.html").as_uri()

    assert resolver.accept(url)
    with pytest.raises(LoaderError) as excinfo:
        asyncio.run(resolver.load(url))
    assert excinfo.value.url == url


# --- HttpResolver ---

def _mock_session(status, text="body"):
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=text)

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.closed = False
    session.get.return_value = context
    return session


def test_http_resolver_returns_text():
    resolver = HttpResolver(LoaderSettings(max_redirects=3))
    resolver.session = _mock_session(200, "<html></html>")

    assert asyncio.run(resolver.load("https://example.com/a.html")) == "<html></html>"
    resolver.session.get.assert_called_once_with("https://example.com/a.html", max_redirects=3)


def test_http_resolver_raises_on_error_status():
    resolver = HttpResolver()
    resolver.session = _mock_session(404)

    with pytest.raises(LoaderError) as excinfo:
        asyncio.run(resolver.load("https://example.com/missing.html"))
    assert "404" in str(excinfo.value)


def test_http_resolver_accepts_only_http():
    resolver = HttpResolver()
    assert resolver.accept("https://example.com/a.html")
    assert not resolver.accept("file:///tmp/a.html")
