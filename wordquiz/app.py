"""FastAPI application with all routes."""
from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from wordquiz.config import Settings, check_setting, load_settings, save_settings
from wordquiz.db import Database
from wordquiz.errors import InvalidRequest, NotFound
from wordquiz.parsers.word_table_parser import parse_word_table_file
from wordquiz.providers import create_llm
from wordquiz.question_generator import generate_batch

VERSION = "1.0.0"

app = FastAPI(title="Word Quiz Generator")

_log = logging.getLogger("wordquiz.api")

# Global state (initialized in startup)
_db: Database | None = None
_settings: Settings | None = None
_started_at = time.monotonic()


def get_db() -> Database:
    assert _db is not None
    return _db


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def _get_llm():
    return create_llm(get_settings())


def _import_word_files(db: Database, settings: Settings) -> dict:
    imported = 0
    files = []
    for wf in settings.resolved_word_files():
        if not wf.exists():
            _log.info("Skipping missing word file: %s", wf)
            continue
        n = db.import_words(parse_word_table_file(wf))
        _log.info("Imported %d words from %s", n, wf.name)
        imported += n
        files.append(wf.name)
    return {"words_imported": imported, "files": files, "total_words": db.get_word_count()}


@app.on_event("startup")
async def startup():
    global _db, _settings
    if _db is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _db = Database(_settings.db_full_path)
    _log.info("Database ready at %s (%d words)", _settings.db_full_path, _db.get_word_count())


@app.on_event("shutdown")
async def shutdown():
    if _db:
        _db.close()


# ── API: Health ───────────────────────────────────────────────────────────

@app.get("/api/health")
async def api_health():
    return {
        "status": "OK",
        "message": "Question Generator Backend is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": f"{int(time.monotonic() - _started_at)} seconds",
        "environment": os.environ.get("WORDQUIZ_ENV", "development"),
        "version": VERSION,
    }


@app.get("/api/health/ping")
async def api_ping():
    return PlainTextResponse("pong")


# ── API: Words ────────────────────────────────────────────────────────────

@app.get("/api/words")
async def api_words():
    try:
        words = get_db().get_all_words()
    except Exception as e:
        _log.exception("Listing words failed")
        return JSONResponse(
            status_code=500,
            content={"error": "Could not load words", "message": str(e)},
        )
    return {
        "words": words,
        "total": len(words),
        "message": f"{len(words)} words loaded",
    }


@app.post("/api/import")
async def api_import():
    return _import_word_files(get_db(), get_settings())


# ── API: Questions ────────────────────────────────────────────────────────

@app.get("/api/questions")
async def api_questions(word_id: int | None = None):
    questions = get_db().get_questions(word_id)
    return {"questions": questions, "total": len(questions)}


@app.post("/api/questions/generate")
async def api_generate(request: Request):
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(400, "Request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(400, "Request body must be a JSON object")
    word_ids = body.get("wordIds", body.get("word_ids"))

    s = get_settings()
    try:
        llm = _get_llm()
        result = await generate_batch(
            llm,
            get_db(),
            word_ids,
            pacing_seconds=s.pacing_seconds,
            default_difficulty=s.default_difficulty,
            temperature=s.llm_temperature,
        )
    except InvalidRequest as e:
        raise HTTPException(400, str(e))
    except NotFound as e:
        raise HTTPException(404, str(e))
    except Exception as e:
        _log.exception("Question generation failed before the batch started")
        return JSONResponse(
            status_code=500,
            content={"error": "Question generation failed", "message": str(e)},
        )
    return result.to_response()


# ── API: Diagnostics ──────────────────────────────────────────────────────

@app.get("/api/database-info")
async def api_database_info():
    try:
        info = get_db().get_table_info()
    except Exception as e:
        _log.exception("Database info failed")
        return JSONResponse(
            status_code=500,
            content={"error": "Could not read database info", "message": str(e)},
        )
    return {
        "success": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **info,
    }


@app.get("/api/test-llm")
async def api_test_llm():
    try:
        llm = _get_llm()
        text = await llm.generate("Test message", temperature=get_settings().llm_temperature)
    except Exception as e:
        raise HTTPException(500, f"LLM error: {e}")
    return {"success": True, "provider": llm.name(), "response": text}


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await request.json()
    if not isinstance(body, dict):
        raise HTTPException(400, "Request body must be a JSON object")
    s = get_settings()
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    updates = {}
    for k, v in body.items():
        if k in known:
            try:
                updates[k] = check_setting(k, v)
            except ValueError as e:
                raise HTTPException(400, str(e))
    for k, v in updates.items():
        setattr(s, k, v)
    save_settings(s)
    return s.to_dict()
