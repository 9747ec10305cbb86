"""Configuration helpers for the scaffolding CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _default_templates_dir() -> Path:
    return Path.home() / ".config" / "cgi-scaffold" / "templates"


@dataclass(frozen=True)
class Settings:
    templates_dir: Path
    check_timeout: float
    log_level: str


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings() -> Settings:
    load_dotenv()

    templates_dir = os.getenv("CGI_SCAFFOLD_TEMPLATES_DIR")

    return Settings(
        templates_dir=Path(templates_dir).expanduser() if templates_dir else _default_templates_dir(),
        check_timeout=_float_env("CGI_SCAFFOLD_CHECK_TIMEOUT", 10.0),
        log_level=os.getenv("CGI_SCAFFOLD_LOG_LEVEL", "INFO"),
    )


def ensure_templates_dir(settings: Settings) -> None:
    settings.templates_dir.mkdir(parents=True, exist_ok=True)
