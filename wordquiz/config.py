from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "llm_provider": "gemini",
    "llm_model": "gemini-2.0-flash-001",
    "llm_temperature": 0.7,
    "llm_timeout": 120.0,
    "gemini_url": "https://generativelanguage.googleapis.com/v1beta",
    "ollama_url": "http://localhost:11434",
    "db_path": "quiz.db",
    "word_files": [],
    "pacing_seconds": 1.0,
    "default_difficulty": "intermediate",
}


@dataclass
class Settings:
    llm_provider: str = DEFAULTS["llm_provider"]
    llm_model: str = DEFAULTS["llm_model"]
    llm_temperature: float = DEFAULTS["llm_temperature"]
    llm_timeout: float = DEFAULTS["llm_timeout"]
    gemini_url: str = DEFAULTS["gemini_url"]
    ollama_url: str = DEFAULTS["ollama_url"]
    db_path: str = DEFAULTS["db_path"]
    word_files: list[str] = field(default_factory=lambda: list(DEFAULTS["word_files"]))
    pacing_seconds: float = DEFAULTS["pacing_seconds"]
    default_difficulty: str = DEFAULTS["default_difficulty"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def data_dir(self) -> Path:
        return self.project_root / "data"

    @property
    def db_full_path(self) -> Path:
        return self.project_root / self.db_path

    def resolved_word_files(self) -> list[Path]:
        if self.word_files:
            root = self.project_root
            return [root / f for f in self.word_files]
        return sorted(self.data_dir.glob("*.md"))

    def to_dict(self) -> dict:
        return {
            "llm_provider": self.llm_provider,
            "llm_model": self.llm_model,
            "llm_temperature": self.llm_temperature,
            "llm_timeout": self.llm_timeout,
            "gemini_url": self.gemini_url,
            "ollama_url": self.ollama_url,
            "db_path": self.db_path,
            "word_files": self.word_files,
            "pacing_seconds": self.pacing_seconds,
            "default_difficulty": self.default_difficulty,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")


def check_setting(name: str, value: object) -> object:
    """Return *value* if it fits setting *name*, else raise ``ValueError``.

    Integers are accepted (and converted) for float settings.
    """
    expected = type(DEFAULTS[name])
    if isinstance(value, bool):
        raise ValueError(f"{name} must be {expected.__name__}, got bool")
    if expected is float and isinstance(value, int):
        return float(value)
    if not isinstance(value, expected):
        raise ValueError(f"{name} must be {expected.__name__}, got {type(value).__name__}")
    if expected is list and not all(isinstance(v, str) for v in value):
        raise ValueError(f"{name} must be a list of strings")
    return value
