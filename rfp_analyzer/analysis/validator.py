#!/usr/bin/env python3
# CUI // SP-PROPIN
"""Response validator: four independent quality checks on a drafted answer.

  spelling         — length proxy: more than 10 characters passes
  length           — at least 20 whitespace-separated words passes
  placeholders     — ``[...]``, TBD or TODO anywhere fails
  policyAlignment  — mentions we / our / policy / procedure passes

Only the placeholder check can ``fail``; the others stop at ``warning``.
The report is recomputed from scratch for every edit.

Usage:
    python -m rfp_analyzer.analysis.validator --text "We follow our policy." --json
"""

import argparse
import json
import re

from rfp_analyzer.analysis.models import FAIL, PASS, WARNING, QualityReport

SPELLING_MIN_CHARS = 10
LENGTH_MIN_WORDS = 20

_PLACEHOLDER = re.compile(r"\[.*?\]|TBD|TODO", re.IGNORECASE)
_POLICY_TERMS = re.compile(r"we|our|policy|procedure", re.IGNORECASE)


def check_spelling(text: str) -> str:
    return PASS if len(text) > SPELLING_MIN_CHARS else WARNING


def check_length(text: str) -> str:
    return PASS if len(text.split()) >= LENGTH_MIN_WORDS else WARNING


def check_placeholders(text: str) -> str:
    return FAIL if _PLACEHOLDER.search(text) else PASS


def check_policy_alignment(text: str) -> str:
    return PASS if _POLICY_TERMS.search(text) else WARNING


def validate(text: str) -> QualityReport:
    """Build a QualityReport for ``text``."""
    text = text or ""
    return QualityReport(
        spelling=check_spelling(text),
        length=check_length(text),
        placeholders=check_placeholders(text),
        policy_alignment=check_policy_alignment(text),
    )


def main():
    parser = argparse.ArgumentParser(description="Quality-check an RFP response.")
    parser.add_argument("--text", required=True, help="Response text to check")
    parser.add_argument("--json", action="store_true", help="JSON output")
    args = parser.parse_args()

    report = validate(args.text)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        for axis, verdict in report.to_dict().items():
            print(f"  {axis:<16} {verdict}")


if __name__ == "__main__":
    main()
