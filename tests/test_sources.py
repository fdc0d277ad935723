from __future__ import annotations

import pytest

from audioscribe.core.sources import AudioSourceRegistry, SourceOrigin


class TestObjectUrls:
    def test_create_and_resolve(self):
        registry = AudioSourceRegistry()
        locator = registry.create_object_url(b"audio")
        assert locator.startswith("blob:")
        assert registry.resolve(locator) == b"audio"

    def test_revoke(self):
        registry = AudioSourceRegistry()
        locator = registry.create_object_url(b"audio")
        registry.revoke_object_url(locator)
        assert registry.resolve(locator) is None

    def test_revoke_unknown_is_noop(self):
        AudioSourceRegistry().revoke_object_url("blob:nope")

    def test_locators_are_unique(self):
        registry = AudioSourceRegistry()
        assert registry.create_object_url(b"a") != registry.create_object_url(b"a")


class TestSelection:
    def test_select_file(self):
        registry = AudioSourceRegistry()
        source = registry.select_file(b"wav", name="talk.wav")
        assert source.origin is SourceOrigin.LOCAL_FILE
        assert source.name == "talk.wav"
        assert registry.selected == source
        assert registry.resolve(source.locator) == b"wav"

    def test_new_file_revokes_previous(self):
        registry = AudioSourceRegistry()
        first = registry.select_file(b"one")
        second = registry.select_file(b"two")
        assert registry.resolve(first.locator) is None
        assert registry.resolve(second.locator) == b"two"

    def test_url_selection_revokes_previous_file(self):
        registry = AudioSourceRegistry()
        local = registry.select_file(b"one")
        remote = registry.select_url("https://example.com/a.wav")
        assert remote.origin is SourceOrigin.URL
        assert remote.locator == "https://example.com/a.wav"
        assert registry.resolve(local.locator) is None
        assert registry.selected == remote

    def test_clear_releases_everything(self):
        registry = AudioSourceRegistry()
        source = registry.select_file(b"one")
        extra = registry.create_object_url(b"two")
        registry.clear()
        assert registry.selected is None
        assert registry.resolve(source.locator) is None
        assert registry.resolve(extra) is None

    @pytest.mark.parametrize("url", ["/etc/passwd", "file:///etc/passwd", "relative.wav", "https://"])
    def test_select_url_requires_remote_scheme(self, url):
        registry = AudioSourceRegistry()
        with pytest.raises(ValueError, match="http"):
            registry.select_url(url)
        assert registry.selected is None

    def test_select_url_accepts_plain_http(self):
        source = AudioSourceRegistry().select_url("http://example.com/a.wav")
        assert source.origin is SourceOrigin.URL
