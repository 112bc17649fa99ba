"""CLI entry point for wordquiz.

Usage:
  python -m wordquiz serve [--port PORT] [--host HOST]
  python -m wordquiz stop
  python -m wordquiz restart [--port PORT]
  python -m wordquiz status
  python -m wordquiz import [FILE ...]
  python -m wordquiz generate --ids 1,2,3
  python -m wordquiz stats
"""
from __future__ import annotations

import asyncio
import os
import signal
import sys
from pathlib import Path

PID_FILE = Path(__file__).resolve().parent.parent / ".server.pid"


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "stop":
        _stop()
    elif command == "restart":
        _restart(args[1:])
    elif command == "status":
        _status()
    elif command == "import":
        _import_words(args[1:])
    elif command == "generate":
        _generate(args[1:])
    elif command == "stats":
        _stats()
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, stop, restart, status, import, generate, stats")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _read_pid() -> int | None:
    """Read PID from file, return None if stale or missing."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
        os.kill(pid, 0)
        return pid
    except (ValueError, ProcessLookupError, PermissionError):
        PID_FILE.unlink(missing_ok=True)
        return None


def _stop() -> bool:
    """Stop a running server. Returns True if a server was stopped."""
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
        return False
    try:
        os.kill(pid, signal.SIGTERM)
        print(f"Stopped server (PID {pid}).")
        PID_FILE.unlink(missing_ok=True)
        return True
    except ProcessLookupError:
        print("Server was not running (stale PID file removed).")
        PID_FILE.unlink(missing_ok=True)
        return False


def _status():
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
    else:
        print(f"Server is running (PID {pid}).")


def _restart(args: list[str]):
    import time
    _stop()
    time.sleep(1)
    _serve(args)


def _serve(args: list[str]):
    import uvicorn

    existing = _read_pid()
    if existing is not None:
        print(f"Server already running (PID {existing}). Use 'restart' or 'stop' first.")
        sys.exit(1)

    port = int(_parse_flag(args, "--port", "5001"))
    host = _parse_flag(args, "--host", "127.0.0.1")
    PID_FILE.write_text(str(os.getpid()))

    print(f"Starting Word Quiz Generator on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    try:
        uvicorn.run(
            "wordquiz.app:app",
            host=host,
            port=port,
            reload=False,
            timeout_graceful_shutdown=5,
        )
    finally:
        PID_FILE.unlink(missing_ok=True)


def _import_words(args: list[str]):
    from wordquiz.config import load_settings
    from wordquiz.db import Database
    from wordquiz.parsers.word_table_parser import parse_word_table_file

    settings = load_settings()
    db = Database(settings.db_full_path)

    files = [Path(a) for a in args] if args else settings.resolved_word_files()
    total = 0
    for wf in files:
        if not wf.exists():
            print(f"  Skipping (not found): {wf}")
            continue
        words = parse_word_table_file(wf)
        n = db.import_words(words)
        total += n
        print(f"  {wf.name}: {len(words)} parsed, {n} new")

    print(f"\nImported {total} words. Total in DB: {db.get_word_count()}")
    db.close()


def _parse_ids(raw: str) -> list[int]:
    try:
        return [int(p) for p in raw.split(",") if p.strip()]
    except ValueError:
        print(f"Invalid --ids value: {raw!r} (expected e.g. 1,2,3)")
        sys.exit(1)


def _generate(args: list[str]):
    from wordquiz.config import load_settings
    from wordquiz.db import Database
    from wordquiz.errors import InvalidRequest, NotFound
    from wordquiz.providers import create_llm
    from wordquiz.question_generator import generate_batch

    word_ids = _parse_ids(_parse_flag(args, "--ids", ""))

    settings = load_settings()
    db = Database(settings.db_full_path)
    try:
        llm = create_llm(settings)
    except ValueError as e:
        print(e)
        db.close()
        sys.exit(1)

    print(f"Generating questions for {len(word_ids)} words using {llm.name()}...")
    try:
        result = asyncio.run(generate_batch(
            llm, db, word_ids,
            pacing_seconds=settings.pacing_seconds,
            default_difficulty=settings.default_difficulty,
            temperature=settings.llm_temperature,
        ))
    except (InvalidRequest, NotFound) as e:
        print(f"Rejected: {e}")
        db.close()
        sys.exit(1)

    for o in result.outcomes:
        if o.success:
            print(f"  OK    {o.word} -> question {o.question_id}")
        else:
            print(f"  FAIL  {o.word}: {o.error}")
    if result.missing_word_ids:
        print(f"  Not found or inactive: {', '.join(map(str, result.missing_word_ids))}")
    print(f"\n{result.successful}/{result.total_requested} succeeded ({result.success_rate})")
    db.close()


def _stats():
    from wordquiz.config import load_settings
    from wordquiz.db import Database

    settings = load_settings()
    db = Database(settings.db_full_path)
    info = db.get_table_info()

    print("Word Quiz Stats")
    print("=" * 40)
    for table, t in info.items():
        print(f"{table:20s} {t['total_rows']} rows, {t['column_count']} columns")
    db.close()


if __name__ == "__main__":
    main()
