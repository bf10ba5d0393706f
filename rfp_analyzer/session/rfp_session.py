#!/usr/bin/env python3
# CUI // SP-PROPIN
"""RFP review session: the current document, its questions and the drafted
responses.

Loading a document is a hard reset: the question list is rebuilt from the
new text and every previous response is discarded.  Responses are keyed by
question id and rebuilt in full (text, timestamp, quality) on every edit.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from rfp_analyzer.analysis.models import QuestionRecord, ResponseRecord
from rfp_analyzer.analysis.segmenter import segment
from rfp_analyzer.analysis.validator import validate

logger = logging.getLogger("rfp_analyzer.session")

DEFAULT_CONFIDENCE_BANDS = {"high": 0.8, "medium": 0.6}
DEFAULT_PREVIEW_CHARS = 100


class UnknownQuestionError(KeyError):
    """A response referenced a question id not in the current document."""


def _now():
    """UTC ISO-8601 timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def confidence_level(confidence: float, bands: Optional[dict] = None) -> str:
    """Bucket a confidence score into high / medium / low."""
    bands = bands or DEFAULT_CONFIDENCE_BANDS
    if confidence >= bands["high"]:
        return "high"
    if confidence >= bands["medium"]:
        return "medium"
    return "low"


class RfpSession:
    """Owns one RFP's questions and responses for a single reviewer."""

    def __init__(self):
        self.metadata: Optional[dict] = None
        self.questions: List[QuestionRecord] = []
        self.responses: Dict[str, ResponseRecord] = {}

    # ── lifecycle ──────────────────────────────────────────────────────────

    def load_document(self, text: str, filename: str = "") -> List[QuestionRecord]:
        """Segment ``text`` and replace all session state with the result."""
        questions = segment(text)
        self.questions = questions
        self.responses = {}
        self.metadata = {
            "filename": filename,
            "uploadDate": _now(),
            "totalQuestions": len(questions),
        }
        logger.info("Extracted %d questions from %s", len(questions), filename or "<text>")
        return questions

    def restore(self, metadata: Optional[dict], questions: List[QuestionRecord],
                responses: Dict[str, ResponseRecord]):
        """Replace state wholesale with previously exported data."""
        self.metadata = dict(metadata) if metadata else None
        self.questions = list(questions)
        self.responses = dict(responses)
        logger.info("Restored session with %d questions, %d responses",
                    len(self.questions), len(self.responses))

    def clear(self):
        self.metadata = None
        self.questions = []
        self.responses = {}
        logger.info("Session cleared")

    @property
    def loaded(self) -> bool:
        return self.metadata is not None

    # ── questions / responses ──────────────────────────────────────────────

    def get_question(self, question_id: str) -> Optional[QuestionRecord]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None

    def set_response(self, question_id: str, text: str) -> ResponseRecord:
        """Store ``text`` as the response to ``question_id``.

        Raises UnknownQuestionError if the id is not in the current document.
        """
        if self.get_question(question_id) is None:
            raise UnknownQuestionError(question_id)
        record = ResponseRecord(text=text, timestamp=_now(), quality=validate(text))
        self.responses[question_id] = record
        return record

    def get_response(self, question_id: str) -> Optional[ResponseRecord]:
        return self.responses.get(question_id)

    # ── views ──────────────────────────────────────────────────────────────

    def summary(self) -> dict:
        total = len(self.questions)
        completed = len(self.responses)
        # Half-up, so 1 of 8 reports 13 rather than 12
        rate = int(completed * 100 / total + 0.5) if total else 0
        return {
            "totalQuestions": total,
            "completedResponses": completed,
            "completionRate": rate,
        }

    def question_view(self, question: QuestionRecord,
                      bands: Optional[dict] = None,
                      preview_chars: int = DEFAULT_PREVIEW_CHARS) -> dict:
        """Review-list entry: the record plus confidence band and a preview."""
        view = question.to_dict()
        view["confidenceLevel"] = confidence_level(question.confidence, bands)
        response = self.responses.get(question.id)
        view["responsePreview"] = response.text[:preview_chars] if response else None
        return view
