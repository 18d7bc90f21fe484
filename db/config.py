"""
Environment-driven database configuration for the invoice import service.
"""

from __future__ import annotations

import os
from pathlib import Path

_ENV_FILENAMES = (".env", ".env.local")
_URL_VARIABLES = ("DATABASE_URL", "LOCAL_DATABASE_URL")


def load_env_files() -> None:
    """
    Load KEY=VALUE pairs from `.env` then `.env.local` in the project root.

    Variables already present in the process environment win.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in _ENV_FILENAMES:
        env_path = project_root / filename
        if not env_path.is_file():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.removeprefix("export ").strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def normalize_postgres_url(url: str) -> str:
    """
    Rewrite bare postgres URLs to the psycopg 3 SQLAlchemy driver form.
    """

    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def resolve_database_url() -> str:
    """
    Resolve the invoice database URL from DATABASE_URL, falling back to
    LOCAL_DATABASE_URL. Only PostgreSQL URLs are accepted.
    """

    load_env_files()

    for name in _URL_VARIABLES:
        value = os.getenv(name, "").strip()
        if not value:
            continue
        url = normalize_postgres_url(value)
        if not url.startswith("postgresql"):
            raise RuntimeError(f"{name} must point at PostgreSQL.")
        return url

    raise RuntimeError("No database URL configured. Set DATABASE_URL or LOCAL_DATABASE_URL.")
