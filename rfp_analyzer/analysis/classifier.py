#!/usr/bin/env python3
# CUI // SP-PROPIN
"""Rule-based question classifier: question type and compliance category.

Type detection looks for a question mark and a yes/no opening verb.
Category detection walks an ordered keyword table and returns the first
family with a (case-insensitive, substring) hit.  ``audit`` appears in both
security_operations and compliance; table order decides.
"""

import re

from rfp_analyzer.analysis.models import NARRATIVE, YES_NO

# Opening words that make a ``?`` question answerable yes/no (prefix match)
_YES_NO_OPENERS = re.compile(r"^(do|does|have|did|is|are)", re.IGNORECASE)

# Ordered keyword families; first match wins
CATEGORY_RULES = [
    ("incident_response", ["incident", "response", "breach", "alert", "detection"]),
    ("security_operations", ["soc", "monitoring", "siem", "audit", "logging"]),
    ("data_protection", ["data", "encryption", "classification", "confidential", "pii"]),
    ("access_control", ["access", "authentication", "mfa", "permission", "role"]),
    ("compliance", ["compliance", "regulation", "audit", "policy", "framework"]),
]

_CATEGORY_PATTERNS = [
    (category, re.compile("|".join(re.escape(k) for k in keywords), re.IGNORECASE))
    for category, keywords in CATEGORY_RULES
]

DEFAULT_CATEGORY = "other"


def detect_question_type(text: str) -> str:
    """Return ``yes_no`` or ``narrative``."""
    if "?" in text and _YES_NO_OPENERS.match(text):
        return YES_NO
    return NARRATIVE


def detect_category(text: str) -> str:
    """Return the first keyword family matching ``text``, else ``other``."""
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(text):
            return category
    return DEFAULT_CATEGORY


def classify(text: str) -> tuple[str, str]:
    """Classify a question's raw text. Returns ``(type, category)``."""
    return detect_question_type(text), detect_category(text)
