"""
Supabase persistence for merchant applications.

Insert-only: each lead becomes one row in `merchant_applications` (override
with MERCHANT_INTAKE_TABLE). A failed insert fails the request.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import anyio
from supabase import Client, create_client

from merchant_intake.record import SubmissionRecord
from merchant_intake.utils import env_str

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "merchant_applications"

_client: Optional[Client] = None


class PersistenceError(Exception):
    """The lead could not be written to the database."""


def get_supabase_client() -> Optional[Client]:
    """Get or create Supabase client (singleton)."""
    global _client

    if _client is not None:
        return _client

    # NEXT_PUBLIC_SUPABASE_URL is what the web frontend's env already carries.
    url = os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

    if not url or not key:
        return None

    try:
        _client = create_client(url, key)
    except Exception as e:
        logger.error("failed to create Supabase client: %s", e)
        return None
    return _client


def reset_supabase_client() -> None:
    global _client
    _client = None


def _insert_row(table: str, row: Dict[str, Any]) -> None:
    client = get_supabase_client()
    if client is None:
        raise PersistenceError("Supabase is not configured (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)")
    try:
        client.table(table).insert(row).execute()
    except Exception as e:
        raise PersistenceError(f"insert into {table} failed: {e}") from e


async def insert_merchant_application(record: SubmissionRecord) -> None:
    table = env_str("MERCHANT_INTAKE_TABLE", DEFAULT_TABLE)
    row = record.to_row()
    # supabase-py is synchronous; keep it off the event loop.
    await anyio.to_thread.run_sync(_insert_row, table, row)
    logger.info("stored merchant application in %s", table)
