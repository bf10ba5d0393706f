#!/usr/bin/env python3
# CUI // SP-PROPIN
"""Export a reviewed RFP as JSON or plain text, and load JSON exports back.

JSON shape:
    {
      "rfp":       {"filename", "uploadDate", "totalQuestions"} or null,
      "questions": [QuestionRecord, ...],
      "responses": {question_id: ResponseRecord, ...}
    }

Text shape:
    RFP ANALYZER - EXPORT
    <blank>
    Q1: <question text>
    Response: <response text | No response provided>
    <blank>
    ...
"""

import json
import logging

from rfp_analyzer.analysis.models import QuestionRecord, ResponseRecord

logger = logging.getLogger("rfp_analyzer.export")

EXPORT_FORMATS = ("json", "text")
TEXT_HEADER = "RFP ANALYZER - EXPORT"
NO_RESPONSE = "No response provided"


class ExportError(Exception):
    """Export or import could not be completed."""


def to_json(session) -> str:
    """Serialize the session's metadata, questions and responses."""
    payload = {
        "rfp": session.metadata,
        "questions": [q.to_dict() for q in session.questions],
        "responses": {qid: r.to_dict() for qid, r in session.responses.items()},
    }
    return json.dumps(payload, indent=2)


def to_text(session) -> str:
    """Human-readable Q/Response listing in question order."""
    content = f"{TEXT_HEADER}\n\n"
    for q in session.questions:
        response = session.responses.get(q.id)
        content += f"Q{q.number}: {q.text}\n"
        content += f"Response: {(response.text if response else '') or NO_RESPONSE}\n\n"
    return content


def export_session(session, fmt: str = "json") -> str:
    """Render ``session`` in ``fmt`` (``json`` or ``text``)."""
    if fmt == "json":
        content = to_json(session)
    elif fmt == "text":
        content = to_text(session)
    else:
        raise ExportError(f"Unknown export format: {fmt!r}")
    logger.info("Exported %d questions as %s", len(session.questions), fmt)
    return content


def export_filename(fmt: str, stem: str = "rfp_export") -> str:
    return f"{stem}.{'json' if fmt == 'json' else 'txt'}"


def load_json(content: str) -> dict:
    """Parse a JSON export back into records.

    Returns {"rfp": dict | None, "questions": [QuestionRecord],
    "responses": {id: ResponseRecord}}.
    """
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, TypeError) as e:
        raise ExportError(f"Invalid JSON export: {e}") from e
    if not isinstance(data, dict):
        raise ExportError("JSON export must be an object")

    try:
        questions = [QuestionRecord.from_dict(q) for q in data.get("questions") or []]
        responses = {
            qid: ResponseRecord.from_dict(r)
            for qid, r in (data.get("responses") or {}).items()
        }
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ExportError(f"Malformed record in JSON export: {e}") from e

    metadata = data.get("rfp")
    if metadata is not None and not isinstance(metadata, dict):
        raise ExportError("'rfp' must be an object or null")

    # One response per question, keyed by an id that exists in the export
    ids = [q.id for q in questions]
    duplicates = sorted({str(qid) for qid in ids if ids.count(qid) > 1})
    if duplicates:
        raise ExportError(f"Duplicate question ids: {', '.join(duplicates)}")
    orphans = sorted(str(qid) for qid in set(responses) - set(ids))
    if orphans:
        raise ExportError(f"Responses for unknown questions: {', '.join(orphans)}")

    return {"rfp": metadata, "questions": questions, "responses": responses}
