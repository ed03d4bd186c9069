#!/usr/bin/env python3
"""
speedread_web.py

Local web API (Flask) over the speed reading engine.

Features:
- Segment text into the three reading streams (words, chunks, bionic)
- Mechanical or phrase-aware chunking, per-language phrase starters
- ORP focus index per word
- Per-step delays and an estimated reading time for a given WPM

Rendering, uploads and position storage live with the client.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from flask import Flask, jsonify, request

from speedread import settings
from speedread.logging_config import setup_logging
from speedread.pacing import PacingScheduler, ReadingMode, SessionConfig
from speedread.segmentation import compute_orp_index

logger = logging.getLogger(__name__)


# ============================================================
# Function List
# ============================================================
# parse_segment_request
# build_payload
# api_segment
# api_health
# main


class RequestError(ValueError):
    pass


def _as_int(value, name: str) -> int:
    if isinstance(value, bool):
        raise RequestError(f"'{name}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise RequestError(f"'{name}' must be an integer") from None


def parse_segment_request(data: object) -> SessionConfig:
    if not isinstance(data, dict):
        raise RequestError("Expected a JSON object body")

    text = data.get("text")
    if not isinstance(text, str) or not text.strip():
        raise RequestError("Missing text")
    if len(text) > settings.MAX_TEXT_CHARS:
        raise RequestError(f"Text too long (limit {settings.MAX_TEXT_CHARS} characters)")

    chunk_size = _as_int(data.get("chunk_size", settings.DEFAULT_CHUNK_SIZE), "chunk_size")
    if chunk_size < 1:
        raise RequestError("'chunk_size' must be at least 1")

    wpm = _as_int(data.get("wpm", settings.DEFAULT_WPM), "wpm")

    smart_chunking = data.get("smart_chunking", settings.SMART_CHUNKING)
    if not isinstance(smart_chunking, bool):
        raise RequestError("'smart_chunking' must be a boolean")

    languages: Tuple[str, ...] = settings.LANGUAGES
    if "languages" in data:
        raw = data["languages"]
        if not isinstance(raw, list) or not all(isinstance(x, str) for x in raw):
            raise RequestError("'languages' must be a list of language codes")
        languages = tuple(raw)

    return SessionConfig(
        text=text,
        mode=ReadingMode.WORD,
        initial_speed_wpm=wpm,
        chunk_size=chunk_size,
        use_smart_chunking=smart_chunking,
        languages=languages,
    )


def build_payload(config: SessionConfig) -> dict:
    # Only the derived streams and delays are read; no timer is ever armed.
    engine = PacingScheduler(config)
    words = engine.words
    chunks = engine.chunks
    word_delay_ms = engine.delay_ms()
    engine.set_mode(ReadingMode.CHUNK)
    chunk_delay_ms = engine.delay_ms()
    engine.dispose()

    focus_indices: List[int] = [compute_orp_index(w) for w in words]
    return {
        "ok": True,
        "words": words,
        "chunks": chunks,
        "bionic": [
            {"bold": b.bold, "normal": b.normal, "original": b.original}
            for b in engine.bionic_words
        ],
        "focus_indices": focus_indices,
        "word_count": len(words),
        "chunk_count": len(chunks),
        "char_count": len(config.text),
        "wpm": engine.speed_wpm,
        "word_delay_ms": word_delay_ms,
        "chunk_delay_ms": chunk_delay_ms,
        "estimated_seconds": len(words) * word_delay_ms / 1000.0,
    }


app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = 4 * settings.MAX_TEXT_CHARS + 64 * 1024


@app.route("/api/health", methods=["GET"])
def api_health():
    return jsonify({"ok": True})


@app.route("/api/segment", methods=["POST"])
def api_segment():
    try:
        config = parse_segment_request(request.get_json(silent=True))
    except RequestError as e:
        logger.warning("Rejected segment request: %s", e)
        return jsonify({"ok": False, "error": str(e)}), 400

    try:
        return jsonify(build_payload(config))
    except Exception as e:
        logger.exception("Segmentation failed")
        return jsonify({"ok": False, "error": str(e)}), 500


def main() -> None:
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    logger.info("Starting speed reading API on http://%s:%d", settings.HOST, settings.PORT)
    app.run(host=settings.HOST, port=settings.PORT, debug=False)


if __name__ == "__main__":
    main()
