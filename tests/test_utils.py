"""
Tests for shared helpers: base-URL derivation and resource eligibility.
"""

from artifact_scanner.models import ArtifactKind
from artifact_scanner.utils import derive_base_url, is_eligible


def test_base_url_lowercases_host_and_drops_default_port():
    assert derive_base_url("https://Example.COM:443/app.js") == "https://example.com"
    assert derive_base_url("http://Example.com:80/a.js") == "http://example.com"
    assert derive_base_url("HTTPS://CDN.example.com/x.js") == "https://cdn.example.com"


def test_base_url_keeps_other_ports_and_drops_userinfo():
    assert derive_base_url("https://example.com:8443/app.js") == "https://example.com:8443"
    assert derive_base_url("http://user:pw@example.com:443/a.js") == "http://example.com:443"
    assert derive_base_url("http://[::1]:8080/a.js") == "http://[::1]:8080"


def test_base_url_unparseable():
    assert derive_base_url("https://[::1/app.js") == ""
    assert derive_base_url("https://example.com:notaport/a.js") == ""
    assert derive_base_url("app.js") == ""
    assert derive_base_url("") == ""
    assert derive_base_url(None) == ""


def test_eligibility_malformed_url_falls_back():
    assert is_eligible("https://[::1/app.js?v=1", "", ArtifactKind.ENDPOINT)
    assert not is_eligible("https://[::1/style.css", "", ArtifactKind.ENDPOINT)


def test_eligibility_non_string_inputs():
    assert not is_eligible(None, None, ArtifactKind.ENDPOINT)
    assert not is_eligible(123, 456, ArtifactKind.SECRET)


def test_eligibility_by_kind():
    assert is_eligible("https://example.com/data.json", "", ArtifactKind.SECRET)
    assert not is_eligible("https://example.com/data.json", "", ArtifactKind.ENDPOINT)
    assert is_eligible("https://example.com/api", "application/json; charset=utf-8", ArtifactKind.SECRET)
