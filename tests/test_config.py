"""
Unit tests for YAML configuration loading and validation.
"""

import tempfile
from pathlib import Path

import pytest

from artifact_scanner.cli.config import create_default_config, load_config, validate_config
from artifact_scanner.exceptions import ValidationError
from artifact_scanner.extractors.orchestrator import ScanOptions
from artifact_scanner.extractors.patterns import patterns_from_config


def test_default_config_round_trip():
    """The generated default config loads and validates."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "artifact-scanner.yaml"
        create_default_config(str(path))
        config = load_config(str(path))

    assert validate_config(config)
    assert config["scan"]["min_confidence"] == 30
    assert config["scan"]["workers"] == 1
    assert ScanOptions.from_config(config) == ScanOptions()
    assert patterns_from_config(config["patterns"]) == []


def test_missing_config_file():
    with pytest.raises(FileNotFoundError):
        load_config("/nonexistent/artifact-scanner.yaml")


def test_invalid_yaml():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "bad.yaml"
        path.write_text("scan: [unclosed\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(str(path))

        listy = Path(tmpdir) / "list.yaml"
        listy.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(str(listy))


def test_empty_config_is_empty_dict():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == {}


@pytest.mark.parametrize("config", [
    {"scan": {"min_confidence": 150}},
    {"scan": {"min_confidence": "high"}},
    {"scan": {"workers": 0}},
    {"scan": {"max_content_size": -5}},
    {"scan": {"kind": "cookies"}},
    {"scan": "fast"},
    {"patterns": ["a"]},
    {"unknown_section": {}},
])
def test_invalid_values_rejected(config):
    with pytest.raises(ValidationError):
        validate_config(config)


def test_custom_patterns_in_yaml():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "custom.yaml"
        path.write_text(
            "scan:\n"
            "  min_confidence: 40\n"
            "patterns:\n"
            "  endpoints:\n"
            "    rpc_path: '\"(/rpc/[a-z_]+)\"'\n"
            "  secrets:\n"
            "    acme_token:\n"
            "      regex: 'acme_[a-f0-9]{32}'\n"
            "      slots: [0]\n"
            "      confidence: 80\n",
            encoding="utf-8",
        )
        config = load_config(str(path))

    assert validate_config(config)
    pats = patterns_from_config(config["patterns"])
    assert [p.name for p in pats] == ["rpc_path", "acme_token"]
    assert ScanOptions.from_config(config).min_confidence == 40
