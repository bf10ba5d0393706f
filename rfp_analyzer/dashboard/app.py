#!/usr/bin/env python3
# CUI // SP-PROPIN
"""RFP Analyzer Dashboard — Flask JSON API over a single review session.

Routes:
    /api/health                — Health check
    /api/upload                — Upload an RFP (POST multipart "file", or JSON {text, filename})
    /api/questions             — Extracted questions with confidence band and response preview
    /api/questions/<id>        — One question with its response, quality and frameworks
    /api/responses/<id>        — Store a response (PUT JSON {text}); returns quality report
    /api/validate              — Quality-check text without storing (POST JSON {text})
    /api/summary               — Total / completed / completion rate
    /api/export?format=json    — Download rfp_export.json (or format=text → rfp_export.txt)
    /api/import                — Restore a session from a JSON export (POST JSON body)
    /api/reset                 — Discard the current document and responses (POST)

Rendering is left to the client; every route returns plain data.

Usage:
    python -m rfp_analyzer.dashboard.app [--port 5001] [--debug]
"""

import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, Response, jsonify, request

from rfp_analyzer.analysis.validator import validate
from rfp_analyzer.config.app_config import load_config
from rfp_analyzer.export.exporter import (
    EXPORT_FORMATS,
    ExportError,
    export_filename,
    export_session,
    load_json,
)
from rfp_analyzer.ingest.document_reader import DocumentReadError, decode_upload
from rfp_analyzer.session.rfp_session import RfpSession, UnknownQuestionError

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# ── Load .env file if present (real env vars win) ─────────────────────────────
_env_path = BASE_DIR / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)

CONFIG = load_config()

logging.basicConfig(
    level=getattr(logging, str(CONFIG["dashboard"]["log_level"]).upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger("rfp_analyzer")


# =========================================================================
# APP SETUP
# =========================================================================
app = Flask(__name__)
app.secret_key = os.environ.get("RFP_ANALYZER_SECRET", "dev-secret-change-in-prod")
app.config["MAX_CONTENT_LENGTH"] = CONFIG["upload"]["max_bytes"] + 64 * 1024

# One reviewer, one session; the dev server is threaded.
SESSION = RfpSession()
_session_lock = threading.Lock()


def _now():
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _json_body():
    return request.get_json(silent=True) or {}


# =========================================================================
# ERROR HANDLERS
# =========================================================================
@app.errorhandler(404)
def not_found(e):
    return jsonify({"error": "Not found"}), 404


@app.errorhandler(413)
def too_large(e):
    return jsonify({"error": "Error processing file: upload too large"}), 413


@app.errorhandler(500)
def internal_server_error(e):
    logger.error("500 Internal Server Error: %s", e)
    return jsonify({"error": "Internal server error"}), 500


# =========================================================================
# AUTH (before_request)
# =========================================================================
_API_KEY = os.environ.get("RFP_ANALYZER_API_KEY", "").strip()


@app.before_request
def _before_request():
    if _API_KEY and request.path.startswith("/api/") and request.path != "/api/health":
        provided = request.headers.get("X-Api-Key", "") or request.args.get("api_key", "")
        if provided != _API_KEY:
            return jsonify({"error": "Unauthorized. Provide X-Api-Key header."}), 401


# =========================================================================
# ROUTES
# =========================================================================
@app.route("/api/health")
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "rfp-analyzer-dashboard",
        "document_loaded": SESSION.loaded,
        "timestamp": _now(),
    })


@app.route("/api/upload", methods=["POST"])
def api_upload():
    """Load an RFP and replace the current session."""
    upload_cfg = CONFIG["upload"]

    if "file" in request.files:
        f = request.files["file"]
        filename = f.filename or "upload.txt"
        try:
            text = decode_upload(
                filename, f.read(),
                allowed_extensions=upload_cfg["allowed_extensions"],
                max_bytes=upload_cfg["max_bytes"],
            )
        except DocumentReadError as e:
            return jsonify({"error": f"Error processing file: {e}"}), 400
    else:
        body = _json_body()
        if "text" not in body:
            return jsonify({"error": "No file provided"}), 400
        text = body["text"]
        if not isinstance(text, str):
            return jsonify({"error": "'text' must be a string"}), 400
        filename = body.get("filename") or "pasted.txt"

    with _session_lock:
        questions = SESSION.load_document(text, filename)
        metadata = dict(SESSION.metadata)

    return jsonify({
        "message": f"Successfully extracted {len(questions)} questions from {filename}",
        "rfp": metadata,
        "questions": [q.to_dict() for q in questions],
    })


@app.route("/api/questions")
def api_questions():
    review_cfg = CONFIG["review"]
    with _session_lock:
        items = [
            SESSION.question_view(
                q, bands=review_cfg["confidence_bands"],
                preview_chars=review_cfg["preview_chars"],
            )
            for q in SESSION.questions
        ]
    return jsonify({"count": len(items), "questions": items})


@app.route("/api/questions/<question_id>")
def api_question_detail(question_id):
    with _session_lock:
        question = SESSION.get_question(question_id)
        if question is None:
            return jsonify({"error": f"Unknown question: {question_id}"}), 404
        response = SESSION.get_response(question_id)
        text = response.text if response else ""
        quality = response.quality if response else validate(text)

    return jsonify({
        "question": question.to_dict(),
        "response": response.to_dict() if response else None,
        "quality": quality.to_dict(),
        "frameworks": CONFIG["compliance_frameworks"],
    })


@app.route("/api/responses/<question_id>", methods=["PUT", "POST"])
def api_set_response(question_id):
    body = _json_body()
    text = body.get("text")
    if not isinstance(text, str):
        return jsonify({"error": "JSON body must include a 'text' string"}), 400

    with _session_lock:
        try:
            record = SESSION.set_response(question_id, text)
        except UnknownQuestionError:
            return jsonify({"error": f"Unknown question: {question_id}"}), 404

    return jsonify({"question_id": question_id, "response": record.to_dict()})


@app.route("/api/validate", methods=["POST"])
def api_validate():
    text = _json_body().get("text", "")
    if not isinstance(text, str):
        return jsonify({"error": "'text' must be a string"}), 400
    return jsonify(validate(text).to_dict())


@app.route("/api/summary")
def api_summary():
    with _session_lock:
        summary = SESSION.summary()
    return jsonify(summary)


@app.route("/api/export")
def api_export():
    fmt = request.args.get("format", "json")
    try:
        with _session_lock:
            content = export_session(SESSION, fmt)
    except ExportError as e:
        return jsonify({"error": f"Export failed: {e}"}), 400

    filename = export_filename(fmt, CONFIG["export"]["filename_stem"])
    mimetype = "application/json" if fmt == "json" else "text/plain"
    return Response(
        content,
        mimetype=mimetype,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@app.route("/api/import", methods=["POST"])
def api_import():
    try:
        loaded = load_json(request.get_data(as_text=True))
    except ExportError as e:
        return jsonify({"error": f"Import failed: {e}"}), 400

    with _session_lock:
        SESSION.restore(loaded["rfp"], loaded["questions"], loaded["responses"])
        summary = SESSION.summary()
    return jsonify({"status": "success", "summary": summary})


@app.route("/api/reset", methods=["POST"])
def api_reset():
    with _session_lock:
        SESSION.clear()
    return jsonify({"status": "success"})


# =========================================================================
# MAIN
# =========================================================================
if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="RFP Analyzer Dashboard")
    parser.add_argument("--port", type=int,
                        default=int(os.environ.get("FLASK_PORT", CONFIG["dashboard"]["port"])))
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--host", default="127.0.0.1")
    args = parser.parse_args()

    print(f"RFP Analyzer Dashboard starting on http://{args.host}:{args.port}")
    print(f"Export formats: {', '.join(EXPORT_FORMATS)}")
    app.run(host=args.host, port=args.port, debug=args.debug)
