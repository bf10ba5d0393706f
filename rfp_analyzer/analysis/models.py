#!/usr/bin/env python3
# CUI // SP-PROPIN
"""Plain data types shared by the segmenter, classifier, validator and session.

Records serialize to the wire shape used by the JSON export (camelCase
``policyAlignment``, ``uploadDate``) and load back from it unchanged.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

# Verdicts
PASS = "pass"
WARNING = "warning"
FAIL = "fail"

# Question types
YES_NO = "yes_no"
NARRATIVE = "narrative"

QUESTION_TYPES = (YES_NO, NARRATIVE)

CATEGORIES = (
    "incident_response",
    "security_operations",
    "data_protection",
    "access_control",
    "compliance",
    "other",
)

# Rule-based extractor, so every record gets the same score.
DEFAULT_CONFIDENCE = 0.85


def question_id(index: int) -> str:
    """Positional id for the question created at 0-based ``index``."""
    return f"q_{index}"


@dataclass
class QualityReport:
    """Four independent pass/warning/fail verdicts for one response."""
    spelling: str = WARNING
    length: str = WARNING
    placeholders: str = PASS
    policy_alignment: str = WARNING

    def to_dict(self) -> Dict[str, str]:
        return {
            "spelling": self.spelling,
            "length": self.length,
            "placeholders": self.placeholders,
            "policyAlignment": self.policy_alignment,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QualityReport":
        return cls(
            spelling=data.get("spelling", WARNING),
            length=data.get("length", WARNING),
            placeholders=data.get("placeholders", PASS),
            policy_alignment=data.get("policyAlignment", WARNING),
        )

    @property
    def all_pass(self) -> bool:
        return all(v == PASS for v in self.to_dict().values())


@dataclass
class QuestionRecord:
    """One numbered question extracted from an RFP document."""
    id: str
    number: int
    text: str
    type: str = NARRATIVE
    category: str = "other"
    confidence: float = DEFAULT_CONFIDENCE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "text": self.text,
            "type": self.type,
            "category": self.category,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuestionRecord":
        return cls(
            id=str(data["id"]),
            number=int(data["number"]),
            text=data.get("text", ""),
            type=data.get("type", NARRATIVE),
            category=data.get("category", "other"),
            confidence=float(data.get("confidence", DEFAULT_CONFIDENCE)),
        )


@dataclass
class ResponseRecord:
    """User-authored response to a question, with its latest quality report."""
    text: str
    timestamp: str
    quality: QualityReport = field(default_factory=QualityReport)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "timestamp": self.timestamp,
            "quality": self.quality.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResponseRecord":
        return cls(
            text=data.get("text", ""),
            timestamp=data.get("timestamp", ""),
            quality=QualityReport.from_dict(data.get("quality") or {}),
        )
