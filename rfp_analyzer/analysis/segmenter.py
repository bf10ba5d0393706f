#!/usr/bin/env python3
# CUI // SP-PROPIN
"""Segmenter: split raw RFP text into an ordered list of numbered questions.

A line opens a new question when it starts with a numeral followed by ``.``
or ``)`` and whitespace (``1. ...``, ``12) ...``).  Every other non-blank
line is folded into the open question, joined by a single space.  Lines seen
before the first numbered line are dropped.  The source numeral is only a
marker: records are renumbered 1..n in document order and get positional ids
(``q_0``, ``q_1``, ...), so re-uploading the same text yields the same ids.

Usage:
    python -m rfp_analyzer.analysis.segmenter --file /path/to/rfp.txt --json
    python -m rfp_analyzer.analysis.segmenter --text "1. Do you use MFA?" --json
"""

import argparse
import json
import re
import sys
from typing import List, Optional

from rfp_analyzer.analysis.classifier import classify
from rfp_analyzer.analysis.models import (
    DEFAULT_CONFIDENCE,
    QuestionRecord,
    question_id,
)

# Numbered question start: "1. text" / "12) text"
_QUESTION_START = re.compile(r"^[0-9]+[.)]\s+(.+)")


def _open_question(index: int, first_line: str) -> QuestionRecord:
    q_type, category = classify(first_line)
    return QuestionRecord(
        id=question_id(index),
        number=index + 1,
        text=first_line,
        type=q_type,
        category=category,
        confidence=DEFAULT_CONFIDENCE,
    )


def segment(text: str) -> List[QuestionRecord]:
    """Extract numbered questions from ``text``.

    Returns an empty list when no line matches the numbered pattern.
    Type and category are decided from the numbered line when the question
    opens; continuation lines extend ``text`` only.
    """
    lines = [line for line in (text or "").splitlines() if line.strip()]

    questions: List[QuestionRecord] = []
    current: Optional[QuestionRecord] = None

    for line in lines:
        m = _QUESTION_START.match(line)
        if m:
            if current is not None:
                questions.append(current)
            current = _open_question(len(questions), m.group(1).strip())
        elif current is not None:
            current.text += " " + line.strip()

    if current is not None:
        questions.append(current)

    return questions


def main():
    parser = argparse.ArgumentParser(
        description="Extract numbered questions from an RFP document."
    )
    parser.add_argument("--file", help="Path to RFP document (TXT, PDF, DOCX)")
    parser.add_argument("--text", help="Raw text to segment directly")
    parser.add_argument("--json", action="store_true", help="JSON output")
    args = parser.parse_args()

    if args.text is not None:
        content = args.text
    elif args.file:
        from rfp_analyzer.config.app_config import load_config
        from rfp_analyzer.ingest.document_reader import DocumentReadError, read_document
        upload_cfg = load_config()["upload"]
        try:
            content = read_document(
                args.file,
                allowed_extensions=upload_cfg["allowed_extensions"],
                max_bytes=upload_cfg["max_bytes"],
            )
        except DocumentReadError as e:
            print(f"Error processing file: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        parser.error("one of --file or --text is required")

    questions = segment(content)

    if args.json:
        print(json.dumps([q.to_dict() for q in questions], indent=2))
    else:
        print(f"Extracted {len(questions)} question(s)")
        for q in questions:
            print(f"  Q{q.number} [{q.type} / {q.category}] {q.text}")


if __name__ == "__main__":
    main()
