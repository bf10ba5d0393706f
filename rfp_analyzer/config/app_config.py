#!/usr/bin/env python3
# CUI // SP-PROPIN
"""Application settings loader.

Reads args/rfp_analyzer_config.yaml (or the file named by the
RFP_ANALYZER_CONFIG environment variable) and merges each top-level section
over the built-in defaults, so a partial file only overrides what it names.
A missing file means defaults only.

Usage:
    python -m rfp_analyzer.config.app_config --json
"""

import argparse
import copy
import json
import logging
import os
from pathlib import Path

import yaml

logger = logging.getLogger("rfp_analyzer.config")

BASE_DIR = Path(__file__).resolve().parent.parent.parent
CONFIG_PATH = Path(os.environ.get(
    "RFP_ANALYZER_CONFIG", str(BASE_DIR / "args" / "rfp_analyzer_config.yaml")
))

DEFAULTS = {
    "upload": {
        "max_bytes": 10 * 1024 * 1024,
        "allowed_extensions": [".txt", ".md", ".text", ".pdf", ".docx"],
    },
    "review": {
        "confidence_bands": {"high": 0.8, "medium": 0.6},
        "preview_chars": 100,
    },
    "export": {
        "filename_stem": "rfp_export",
    },
    "compliance_frameworks": ["NIST 800-53", "ISO 27001", "SOC 2"],
    "dashboard": {
        "port": 5001,
        "log_level": "INFO",
    },
}


class ConfigError(Exception):
    """Config file exists but cannot be parsed."""


def load_config(path=None) -> dict:
    """Return settings with file values layered over DEFAULTS."""
    config = copy.deepcopy(DEFAULTS)
    config_path = Path(path or CONFIG_PATH)

    if not config_path.exists():
        logger.info("Config not found at %s — using defaults", config_path)
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"Expected a mapping at top level of {config_path}")

    for key, value in loaded.items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            config[key].update(value)
        else:
            config[key] = value
    return config


def validate_config(config: dict) -> list[str]:
    """Return a list of human-readable problems (empty when valid)."""
    issues = []
    upload = config.get("upload", {})
    if not isinstance(upload.get("max_bytes"), int) or upload["max_bytes"] <= 0:
        issues.append("upload.max_bytes must be a positive integer")
    for ext in upload.get("allowed_extensions") or []:
        if not str(ext).startswith("."):
            issues.append(f"upload.allowed_extensions entry {ext!r} must start with '.'")

    bands = config.get("review", {}).get("confidence_bands", {})
    high, medium = bands.get("high"), bands.get("medium")
    if not all(isinstance(v, (int, float)) for v in (high, medium)):
        issues.append("review.confidence_bands needs numeric high and medium")
    elif not 0 <= medium <= high <= 1:
        issues.append("review.confidence_bands must satisfy 0 <= medium <= high <= 1")

    port = config.get("dashboard", {}).get("port")
    if not isinstance(port, int) or not 0 < port < 65536:
        issues.append("dashboard.port must be an integer between 1 and 65535")
    return issues


def main():
    parser = argparse.ArgumentParser(description="Show RFP Analyzer settings")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--json", action="store_true", help="JSON output")
    args = parser.parse_args()

    config = load_config(args.config)
    issues = validate_config(config)

    if args.json:
        print(json.dumps({"config": config, "issues": issues}, indent=2))
    else:
        for section, value in config.items():
            print(f"{section}: {value}")
        for issue in issues:
            print(f"  ! {issue}")


if __name__ == "__main__":
    main()
