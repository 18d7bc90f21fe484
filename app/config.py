"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class InvoiceImportSettings:
    """
    Runtime settings for invoice CSV imports.

    ``max_workers`` of 1 submits invoices strictly one after another.
    """

    max_workers: int = 1
    lookup_timeout_seconds: float = 10.0
    submit_timeout_seconds: float = 30.0
    log_failures: bool = True


@lru_cache(maxsize=1)
def get_invoice_import_settings() -> InvoiceImportSettings:
    """
    Return cached invoice import settings from environment variables.
    """

    return InvoiceImportSettings(
        max_workers=max(1, _get_int_env("INVOICE_IMPORT_MAX_WORKERS", 1)),
        lookup_timeout_seconds=max(0.1, _get_float_env("INVOICE_IMPORT_LOOKUP_TIMEOUT_SECONDS", 10.0)),
        submit_timeout_seconds=max(0.1, _get_float_env("INVOICE_IMPORT_SUBMIT_TIMEOUT_SECONDS", 30.0)),
        log_failures=_get_bool_env("INVOICE_IMPORT_LOG_FAILURES", True),
    )
