#!/usr/bin/env python3
# CUI // SP-PROPIN
"""End-to-end RFP pipeline CLI.

Runs the whole review flow without the dashboard:
  1. Read the RFP document (TXT, PDF, DOCX)
  2. Extract and classify numbered questions
  3. Apply drafted responses from a JSON file (optional)
  4. Export as JSON or text to a file or stdout

The responses file maps question id (or question number) to response text:
    {"q_0": "We enforce MFA for all staff...", "2": "Our SOC operates 24/7..."}

Usage examples:
  python -m rfp_analyzer.scripts.rfp_pipeline --file rfp.txt
  python -m rfp_analyzer.scripts.rfp_pipeline --file rfp.docx --format text
  python -m rfp_analyzer.scripts.rfp_pipeline --file rfp.txt \\
      --responses answers.json --output rfp_export.json
"""

import argparse
import json
import sys
from pathlib import Path

from rfp_analyzer.config.app_config import load_config
from rfp_analyzer.export.exporter import EXPORT_FORMATS, ExportError, export_session
from rfp_analyzer.ingest.document_reader import DocumentReadError, read_document
from rfp_analyzer.session.rfp_session import RfpSession, UnknownQuestionError

GREEN  = "\033[32m"
RED    = "\033[31m"
YELLOW = "\033[33m"
CYAN   = "\033[36m"
RESET  = "\033[0m"
BOLD   = "\033[1m"


def _ok(msg):   print(f"{GREEN}  ✓{RESET} {msg}", file=sys.stderr)
def _warn(msg): print(f"{YELLOW}  ⚠{RESET} {msg}", file=sys.stderr)
def _err(msg):  print(f"{RED}  ✗{RESET} {msg}", file=sys.stderr)
def _info(msg): print(f"{CYAN}  →{RESET} {msg}", file=sys.stderr)


def _resolve_question_id(session: RfpSession, key: str) -> str:
    """Accept either a question id (q_0) or a 1-based question number ("1")."""
    if session.get_question(key) is not None:
        return key
    if key.isdigit():
        for q in session.questions:
            if q.number == int(key):
                return q.id
    return key


def apply_responses(session: RfpSession, responses: dict) -> tuple[int, list[str]]:
    """Store each response; returns (applied_count, unknown_keys)."""
    applied = 0
    unknown = []
    for key, text in responses.items():
        try:
            session.set_response(_resolve_question_id(session, str(key)), str(text))
            applied += 1
        except UnknownQuestionError:
            unknown.append(str(key))
    return applied, unknown


def run(args) -> int:
    config = load_config(args.config)
    upload_cfg = config["upload"]

    try:
        text = read_document(
            args.file,
            allowed_extensions=upload_cfg["allowed_extensions"],
            max_bytes=upload_cfg["max_bytes"],
        )
    except DocumentReadError as e:
        _err(f"Error processing file: {e}")
        return 1

    session = RfpSession()
    questions = session.load_document(text, Path(args.file).name)
    _ok(f"Successfully extracted {len(questions)} questions from {Path(args.file).name}")

    if args.responses:
        try:
            responses = json.loads(Path(args.responses).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            _err(f"Could not load responses: {e}")
            return 1
        if not isinstance(responses, dict):
            _err("Responses file must contain a JSON object")
            return 1
        applied, unknown = apply_responses(session, responses)
        _ok(f"Applied {applied} response(s)")
        for key in unknown:
            _warn(f"No question matches response key {key!r}")

        for qid, record in session.responses.items():
            failing = [k for k, v in record.quality.to_dict().items() if v != "pass"]
            if failing:
                _info(f"{qid}: {', '.join(failing)} need attention")

    summary = session.summary()
    _info(f"{summary['completedResponses']}/{summary['totalQuestions']} answered "
          f"({summary['completionRate']}%)")

    try:
        content = export_session(session, args.format)
    except ExportError as e:
        _err(f"Export failed: {e}")
        return 1

    if args.output:
        Path(args.output).write_text(content, encoding="utf-8")
        _ok(f"Successfully exported as {args.format.upper()} → {args.output}")
    else:
        sys.stdout.write(content)
    return 0


def main():
    parser = argparse.ArgumentParser(description="RFP question extraction and export pipeline")
    parser.add_argument("--file", required=True, help="RFP document (TXT, PDF, DOCX)")
    parser.add_argument("--responses", help="JSON file of responses keyed by question id or number")
    parser.add_argument("--format", choices=EXPORT_FORMATS, default="json")
    parser.add_argument("--output", help="Write export here instead of stdout")
    parser.add_argument("--config", help="Alternate YAML config file")
    args = parser.parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    main()
