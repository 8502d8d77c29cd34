"""
Configuration loader for YAML-based scanner settings.

Supports loading scan options and extra extraction patterns from a YAML
file instead of long command-line arguments.
"""

import yaml
from pathlib import Path
from typing import Dict, Any

from ..config import DEFAULT_MIN_CONFIDENCE
from ..exceptions import ValidationError


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config format is invalid

    Example:
        >>> config = load_config("artifact-scanner.yaml")
        >>> print(config["scan"]["min_confidence"])
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Create a config file using: artifact-scanner init-config"
        )

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in config file: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValidationError("Config file must contain a YAML dictionary")

    return config


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Pattern entries are validated separately when the pattern library is
    built (see extractors.patterns.patterns_from_config).

    Raises:
        ValidationError: If configuration is invalid
    """
    unknown = set(config) - {"scan", "patterns", "patterns_file", "output"}
    if unknown:
        raise ValidationError(f"Unknown config sections: {', '.join(sorted(unknown))}")

    scan = config.get("scan") or {}
    if not isinstance(scan, dict):
        raise ValidationError("'scan' must be a mapping")

    if "min_confidence" in scan:
        mc = scan["min_confidence"]
        if not isinstance(mc, int) or isinstance(mc, bool) or not 0 <= mc <= 100:
            raise ValidationError("scan.min_confidence must be an integer between 0 and 100")

    if "workers" in scan:
        w = scan["workers"]
        if not isinstance(w, int) or isinstance(w, bool) or w <= 0:
            raise ValidationError("scan.workers must be a positive integer")

    if scan.get("max_content_size") is not None:
        size = scan["max_content_size"]
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            raise ValidationError("scan.max_content_size must be a positive integer or null")

    if "kind" in scan and scan["kind"] not in ("endpoints", "secrets", "all"):
        raise ValidationError("scan.kind must be one of: endpoints, secrets, all")

    patterns = config.get("patterns")
    if patterns is not None and not isinstance(patterns, dict):
        raise ValidationError("'patterns' must be a mapping with 'endpoints' and/or 'secrets'")

    if "patterns_file" in config and not isinstance(config["patterns_file"], str):
        raise ValidationError("patterns_file must be a path string")

    return True


def create_default_config(output_path: str = "artifact-scanner.yaml"):
    """
    Create a default configuration file with all options.

    Example:
        >>> create_default_config("my-config.yaml")
    """
    default_config = {
        "scan": {
            "kind": "all",
            "min_confidence": DEFAULT_MIN_CONFIDENCE,
            "workers": 1,
            "max_content_size": None,
        },
        "patterns": {
            "endpoints": {},
            "secrets": {},
        },
        "output": {
            "report": "artifact_report.json",
        },
    }

    with open(output_path, "w", encoding="utf-8") as f:
        yaml.dump(default_config, f, default_flow_style=False, sort_keys=False)

    return output_path
