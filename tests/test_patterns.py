"""
Unit tests for the pattern library.
"""

import re
import tempfile
from pathlib import Path

import pytest

from artifact_scanner.exceptions import ConfigurationError, PatternError
from artifact_scanner.extractors.patterns import (
    ENDPOINT_PATTERNS,
    SECRET_PATTERNS,
    PatternLibrary,
    compile_pattern,
    load_patterns_file,
    patterns_from_config,
)
from artifact_scanner.models import ArtifactKind


def test_default_library_order_and_kinds():
    """Endpoint patterns come first, in declaration order, followed by secrets."""
    lib = PatternLibrary.default()
    names = lib.names()

    assert len(lib) == len(ENDPOINT_PATTERNS) + len(SECRET_PATTERNS)
    assert names[:3] == ["api_path", "versioned_path", "full_url"]
    assert [p.name for p in lib.for_kind(ArtifactKind.ENDPOINT)][-1] == "rest_endpoint"
    assert all(p.kind is ArtifactKind.SECRET for p in lib.for_kind(ArtifactKind.SECRET))
    assert "aws_access_key" in lib
    assert lib.get("nope") is None


def test_title_is_human_readable():
    lib = PatternLibrary.default()
    assert lib.get("aws_access_key").title == "Aws Access Key"


def test_invalid_regex_fails_at_construction():
    """Malformed matchers are rejected eagerly."""
    with pytest.raises(PatternError):
        compile_pattern("broken", ArtifactKind.ENDPOINT, r"([unclosed")

    # PatternError is a configuration error
    with pytest.raises(ConfigurationError):
        compile_pattern("broken", ArtifactKind.ENDPOINT, r"(?P<x")


def test_capture_slot_out_of_range():
    with pytest.raises(PatternError):
        compile_pattern("slots", ArtifactKind.ENDPOINT, r"(a)(b)", capture_slots=(3,))
    with pytest.raises(PatternError):
        compile_pattern("slots", ArtifactKind.ENDPOINT, r"(a)", capture_slots=())


def test_unknown_kind_and_bad_confidence():
    with pytest.raises(PatternError):
        compile_pattern("kind", "cookie", r"(a)")
    with pytest.raises(PatternError):
        compile_pattern("conf", ArtifactKind.SECRET, r"(a)", confidence=150)


def test_duplicate_names_rejected():
    p = compile_pattern("dup", ArtifactKind.ENDPOINT, r'"(/x/[a-z]+)"')
    with pytest.raises(PatternError):
        PatternLibrary([p, p])


def test_axios_method_yields_url_not_verb():
    """The verb group precedes the URL group; the URL slot is the candidate."""
    pat = PatternLibrary.default().get("axios_method")
    cands = list(pat.candidates('axios.get("/api/items")', "https://a.test/app.js"))

    assert len(cands) == 1
    assert cands[0].raw_value == "/api/items"
    assert cands[0].pattern_name == "axios_method"
    assert cands[0].match_index == 0


def test_first_non_empty_slot_wins():
    pat = compile_pattern("either", ArtifactKind.ENDPOINT, r"a=(\S*);b=(\S*)", capture_slots=(1, 2))
    values = [c.raw_value for c in pat.candidates("a=;b=/two a=/one;b=/x", "src")]
    assert values == ["/two", "/one"]


def test_matching_is_stateless_across_calls():
    """Running a pattern twice over the same text yields identical candidates."""
    pat = PatternLibrary.default().get("relative_path")
    content = 'x("/foo/bar"); y("/baz/qux")'
    first = [c.raw_value for c in pat.candidates(content, "a.js")]
    second = [c.raw_value for c in pat.candidates(content, "b.js")]
    assert first == second == ["/foo/bar", "/baz/qux"]


def test_graphql_pattern_is_case_insensitive():
    pat = PatternLibrary.default().get("graphql_path")
    values = [c.raw_value for c in pat.candidates("u = '/GraphQL'; v = \"/gql\"", "a.js")]
    assert values == ["/GraphQL", "/gql"]


def test_extend_appends_patterns():
    lib = PatternLibrary.default()
    extra = compile_pattern("rpc_path", ArtifactKind.ENDPOINT, r'"(/rpc/[a-z_]+)"')
    bigger = lib.extend([extra])

    assert len(bigger) == len(lib) + 1
    assert bigger.names()[-1] == "rpc_path"
    assert "rpc_path" not in lib


def test_patterns_from_config():
    section = {
        "endpoints": {"rpc_path": r'"(/rpc/[a-z_]+)"'},
        "secrets": {"acme_token": {"regex": r"acme_[a-f0-9]{32}", "slots": 0, "confidence": 80}},
    }
    pats = patterns_from_config(section)

    assert [p.name for p in pats] == ["rpc_path", "acme_token"]
    assert pats[0].kind is ArtifactKind.ENDPOINT
    assert pats[1].kind is ArtifactKind.SECRET
    assert pats[1].capture_slots == (0,)
    assert pats[1].confidence == 80
    assert patterns_from_config(None) == []


def test_patterns_from_config_rejects_bad_regex():
    with pytest.raises(PatternError):
        patterns_from_config({"secrets": {"bad": {"regex": "(oops"}}})


def test_load_patterns_file():
    """KEY=REGEX files load as secret patterns; comments are skipped."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "patterns.env"
        path.write_text(
            "# custom patterns\n"
            "\n"
            "ACME_TOKEN=acme_[a-f0-9]{32}\n"
            "INTERNAL_KEY=ik=([A-Z0-9]{20})\n",
            encoding="utf-8",
        )
        pats = load_patterns_file(path)

    assert [p.name for p in pats] == ["acme_token", "internal_key"]
    assert pats[0].capture_slots == (0,)
    assert pats[1].capture_slots == (1,)
    assert all(p.kind is ArtifactKind.SECRET for p in pats)


def test_load_patterns_file_reports_bad_line():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "patterns.env"
        path.write_text("GOOD=abc\nBAD=([\n", encoding="utf-8")
        with pytest.raises(PatternError, match=":2:"):
            load_patterns_file(path)

        with pytest.raises(PatternError):
            load_patterns_file(Path(tmpdir) / "missing.env")


def test_precompiled_regex_accepted():
    pat = compile_pattern("pre", ArtifactKind.SECRET, re.compile(r"k_(\w+)"), confidence=40)
    assert [c.raw_value for c in pat.candidates("k_abc k_def", "s")] == ["abc", "def"]
