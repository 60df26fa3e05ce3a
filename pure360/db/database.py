# db/database.py

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import streamlit as st
from postgrest.exceptions import APIError
from supabase import create_client, Client

logger = logging.getLogger(__name__)


class DataAccessError(Exception):
    """A backend select/insert/update/upload failed (network, auth or constraint)."""


def get_supabase_client() -> Client:
    """
    Returns the Supabase client cached for this browser session.
    Uses the anon key: every request runs as the signed-in user so the
    row-level policies decide what each role may read and write.
    """

    if "supabase_client" not in st.session_state:
        url = st.secrets["supabase"]["url"]
        key = st.secrets["supabase"]["anon_key"]
        st.session_state.supabase_client = create_client(url, key)

    return st.session_state.supabase_client


def _error_message(e: Exception) -> str:
    if getattr(e, "message", None):
        return e.message
    if getattr(e, "details", None):
        return e.details
    return str(e)


# ----------------- COLLECTION HELPERS ------------------------

def select_rows(
    table: str,
    filters: Optional[Dict[str, Any]] = None,
    newest_first: bool = True,
    client: Optional[Client] = None,
) -> List[Dict[str, Any]]:
    supabase = client or get_supabase_client()
    try:
        query = supabase.table(table).select("*")
        for column, value in (filters or {}).items():
            if isinstance(value, (list, tuple)):
                query = query.in_(column, list(value))
            else:
                query = query.eq(column, value)
        if newest_first:
            query = query.order("created_at", desc=True)
        response = query.execute()
    except (APIError, httpx.HTTPError) as e:
        logger.error("Select from %s failed: %s", table, _error_message(e))
        raise DataAccessError(_error_message(e)) from e
    return response.data or []


def select_one(
    table: str, column: str, value: Any, client: Optional[Client] = None
) -> Optional[Dict[str, Any]]:
    supabase = client or get_supabase_client()
    try:
        response = supabase.table(table).select("*").eq(column, value).limit(1).execute()
    except (APIError, httpx.HTTPError) as e:
        logger.error("Lookup in %s failed: %s", table, _error_message(e))
        raise DataAccessError(_error_message(e)) from e
    return response.data[0] if response.data else None


def insert_row(table: str, values: Dict[str, Any], client: Optional[Client] = None) -> Dict[str, Any]:
    supabase = client or get_supabase_client()
    try:
        response = supabase.table(table).insert(values).execute()
    except (APIError, httpx.HTTPError) as e:
        logger.error("Insert into %s failed: %s", table, _error_message(e))
        raise DataAccessError(_error_message(e)) from e

    if not response.data:
        raise DataAccessError(f"Failed to insert into {table}. No data returned.")
    invalidate(table)
    return response.data[0]


def update_rows(
    table: str,
    values: Dict[str, Any],
    column: str,
    value: Any,
    client: Optional[Client] = None,
) -> List[Dict[str, Any]]:
    """Plain update with no version check: the last write wins."""
    supabase = client or get_supabase_client()
    try:
        response = supabase.table(table).update(values).eq(column, value).execute()
    except (APIError, httpx.HTTPError) as e:
        logger.error("Update of %s failed: %s", table, _error_message(e))
        raise DataAccessError(_error_message(e)) from e
    invalidate(table)
    return response.data or []


# ----------------- QUERY CACHE ------------------------
# Results keyed by (collection, user id), dropped after any successful
# mutation of that collection so the next read refetches.

def _cache() -> Dict[Tuple[str, Optional[str]], Any]:
    if "query_cache" not in st.session_state:
        st.session_state.query_cache = {}
    return st.session_state.query_cache


def cached_query(table: str, user_id: Optional[str], loader: Callable[[], Any]) -> Any:
    cache = _cache()
    key = (table, user_id)
    if key not in cache:
        cache[key] = loader()
    return cache[key]


def invalidate(table: str) -> None:
    cache = _cache()
    for key in [k for k in cache if k[0] == table]:
        del cache[key]
