from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

EVALUATION_ERROR_POLICIES = ("raise", "exclude")


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    log_dir: str = "logs"
    evaluation_errors: str = "raise"
    completed_statuses: tuple[str, ...] = ("done",)


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


load_env()

DATABASE_URL = os.getenv("DATABASE_URL", "").strip() or f"sqlite:///{PROJECT_ROOT / 'task_filters.db'}"

EVALUATION_ERRORS = os.getenv("FILTER_EVALUATION_ERRORS", "raise").strip().lower()
if EVALUATION_ERRORS not in EVALUATION_ERROR_POLICIES:
    raise RuntimeError(
        f"FILTER_EVALUATION_ERRORS must be one of {', '.join(EVALUATION_ERROR_POLICIES)}, "
        f"got {EVALUATION_ERRORS!r}."
    )

SETTINGS = Settings(
    database_url=DATABASE_URL,
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_dir=os.getenv("LOG_DIR", "logs"),
    evaluation_errors=EVALUATION_ERRORS,
    completed_statuses=_split_csv(os.getenv("COMPLETED_STATUSES", "done")) or ("done",),
)
