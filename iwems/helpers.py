"""Remote data client: the one shared handle to Supabase query, auth and storage.

Everything above this module depends only on the narrow contract of
``SupabaseDataClient`` (select / insert / update / delete, storage upload and
public URLs, auth sign-in/out and state-change events). Results come back as
status dicts, ``{"status": "success", "data": [...]}`` or
``{"status": "error", "error": "..."}``, so callers never have to catch
transport exceptions.
"""
import asyncio
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from supabase import create_client, Client

from config import SUPABASE_URL, SUPABASE_KEY
from iwems.models import Identity

_supabase_client: Optional[Client] = None

AuthListener = Callable[[str, Optional[Identity]], None]


def init_supabase_client() -> Client:
    global _supabase_client

    if _supabase_client is not None:
        logging.debug("init_supabase_client: Supabase client already initialized. Reusing it.")
        return _supabase_client

    if not SUPABASE_URL or not SUPABASE_KEY:
        logging.error("init_supabase_client: SUPABASE_URL or SUPABASE_KEY is not set.")
        raise ValueError("SUPABASE_URL and SUPABASE_KEY environment variables must be set.")

    _supabase_client = create_client(SUPABASE_URL, SUPABASE_KEY)
    logging.info("init_supabase_client: Supabase client initialized.")
    return _supabase_client


def identity_from_user(user: Any) -> Optional[Identity]:
    """Build an Identity from a gotrue User (or None)."""
    if user is None:
        return None
    metadata = getattr(user, "user_metadata", None) or {}
    return Identity(id=str(user.id), email=getattr(user, "email", None), full_name=metadata.get("full_name"))


def _error(operation: str, table: str, start_time: float, e: Exception) -> Dict[str, Any]:
    duration = (time.perf_counter() - start_time) * 1000
    logging.error(f"{operation}: {table} failed after {duration:.2f}ms: {e}")
    return {"status": "error", "error": str(e)}


class SupabaseDataClient:
    """Async facade over the (blocking) supabase-py client.

    Each call runs in a worker thread via ``asyncio.to_thread`` so independent
    loads issued with ``asyncio.gather`` overlap on the network.
    """

    def __init__(self, client: Client):
        self._client = client

    # --- rows ---

    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, Iterable[Any]]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        nulls_first: bool = False,
        count_only: bool = False,
    ) -> Dict[str, Any]:
        start_time = time.perf_counter()
        logging.debug(f"select: table={table} columns={columns} eq={eq} in={in_} order_by={order_by}")

        def _run():
            query = self._client.table(table).select(columns, count="exact" if count_only else None)
            for column, value in (eq or {}).items():
                query = query.eq(column, value)
            for column, values in (in_ or {}).items():
                query = query.in_(column, list(values))
            if order_by:
                query = query.order(order_by, desc=not ascending, nullsfirst=nulls_first)
            if count_only:
                query = query.limit(1)
            return query.execute()

        try:
            response = await asyncio.to_thread(_run)
        except Exception as e:
            return _error("select", table, start_time, e)

        duration = (time.perf_counter() - start_time) * 1000
        logging.debug(f"select: {table} returned {len(response.data or [])} rows in {duration:.2f}ms")
        if count_only:
            return {"status": "success", "data": [], "count": response.count or 0}
        return {"status": "success", "data": response.data or [], "count": response.count}

    async def insert(self, table: str, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
        start_time = time.perf_counter()
        logging.debug(f"insert: table={table} rows={rows}")
        try:
            response = await asyncio.to_thread(lambda: self._client.table(table).insert(rows).execute())
        except Exception as e:
            return _error("insert", table, start_time, e)
        return {"status": "success", "data": response.data or []}

    async def update(self, table: str, values: Dict[str, Any], *, eq: Dict[str, Any]) -> Dict[str, Any]:
        start_time = time.perf_counter()
        logging.debug(f"update: table={table} values={values} eq={eq}")

        def _run():
            query = self._client.table(table).update(values)
            for column, value in eq.items():
                query = query.eq(column, value)
            return query.execute()

        try:
            response = await asyncio.to_thread(_run)
        except Exception as e:
            return _error("update", table, start_time, e)
        return {"status": "success", "data": response.data or []}

    async def delete(self, table: str, *, eq: Dict[str, Any]) -> Dict[str, Any]:
        start_time = time.perf_counter()
        logging.debug(f"delete: table={table} eq={eq}")

        def _run():
            query = self._client.table(table).delete()
            for column, value in eq.items():
                query = query.eq(column, value)
            return query.execute()

        try:
            response = await asyncio.to_thread(_run)
        except Exception as e:
            return _error("delete", table, start_time, e)
        return {"status": "success", "data": response.data or []}

    # --- storage ---

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> Dict[str, Any]:
        start_time = time.perf_counter()
        logging.info(f"upload: bucket={bucket} path={path} size={len(content)} content_type={content_type}")
        try:
            await asyncio.to_thread(
                lambda: self._client.storage.from_(bucket).upload(path, content, file_options={"content-type": content_type})
            )
        except Exception as e:
            return _error("upload", bucket, start_time, e)
        return {"status": "success", "path": path}

    def get_public_url(self, bucket: str, path: str) -> str:
        return self._client.storage.from_(bucket).get_public_url(path)

    async def remove(self, bucket: str, paths: List[str]) -> Dict[str, Any]:
        start_time = time.perf_counter()
        try:
            await asyncio.to_thread(lambda: self._client.storage.from_(bucket).remove(paths))
        except Exception as e:
            return _error("remove", bucket, start_time, e)
        return {"status": "success", "paths": paths}

    # --- auth ---

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        start_time = time.perf_counter()
        try:
            response = await asyncio.to_thread(
                lambda: self._client.auth.sign_in_with_password({"email": email, "password": password})
            )
        except Exception as e:
            return _error("sign_in", "auth", start_time, e)
        return {"status": "success", "identity": identity_from_user(response.user)}

    async def sign_up(self, email: str, password: str, full_name: str) -> Dict[str, Any]:
        start_time = time.perf_counter()
        try:
            response = await asyncio.to_thread(
                lambda: self._client.auth.sign_up({
                    "email": email,
                    "password": password,
                    "options": {"data": {"full_name": full_name}},
                })
            )
        except Exception as e:
            return _error("sign_up", "auth", start_time, e)
        return {"status": "success", "identity": identity_from_user(response.user)}

    async def sign_out(self) -> Dict[str, Any]:
        start_time = time.perf_counter()
        try:
            await asyncio.to_thread(self._client.auth.sign_out)
        except Exception as e:
            return _error("sign_out", "auth", start_time, e)
        return {"status": "success"}

    async def get_session_identity(self) -> Dict[str, Any]:
        start_time = time.perf_counter()
        try:
            session = await asyncio.to_thread(self._client.auth.get_session)
        except Exception as e:
            return _error("get_session", "auth", start_time, e)
        user = getattr(session, "user", None) if session else None
        return {"status": "success", "identity": identity_from_user(user)}

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Subscribe to sign-in/sign-out events; returns the unsubscribe callable.

        gotrue fires its callbacks on whichever thread ran the auth call (a
        worker thread here), so events are handed back to the event loop that
        subscribed.
        """
        loop = asyncio.get_running_loop()
        loop_thread = threading.get_ident()

        def _dispatch(event, session):
            identity = identity_from_user(getattr(session, "user", None) if session else None)
            if threading.get_ident() == loop_thread:
                listener(str(event), identity)
            else:
                loop.call_soon_threadsafe(listener, str(event), identity)

        subscription = self._client.auth.on_auth_state_change(_dispatch)
        return subscription.unsubscribe


def get_data_client() -> SupabaseDataClient:
    return SupabaseDataClient(init_supabase_client())
