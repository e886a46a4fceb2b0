"""User record adapter implementing the TinyDB-backed port.

Records live in the ``users`` table keyed by ``path``, the escaped
``users/<user id>`` string, so identifiers containing store-unsafe
characters map to a stable, unambiguous key.
"""

from __future__ import annotations

import asyncio
import functools
import threading
from json import JSONDecodeError
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, TypeVar, cast

from tinydb import Query, TinyDB

from psychic_engine.core.config import config
from psychic_engine.core.exceptions import StoreUnavailableError
from psychic_engine.core.identifiers import user_record_path
from psychic_engine.core.logging import get_logger
from psychic_engine.core.models import LOCATION_FIELD, NAME_FIELD, UserRecord
from psychic_engine.core.ports import UserRecordPort

# Provide a QueryLike alias for static checkers; at runtime use Any.
if TYPE_CHECKING:  # pragma: no cover - typing only
    from tinydb.queries import QueryLike  # type: ignore
else:
    QueryLike = Any  # type: ignore[misc,assignment]

logger = get_logger(__name__)

USERS_TABLE = "users"
WRITABLE_FIELDS = {NAME_FIELD, LOCATION_FIELD}

T = TypeVar("T")


def default_db_path() -> Path:
    """Return the TinyDB file path under the configured data directory."""
    data_dir = Path(getattr(config, "DATA_DIR", Path("/data")))
    return data_dir / "psychic_users.json"


class TinyDBUserRecordAdapter(UserRecordPort):
    """Concrete adapter persisting user records in a TinyDB JSON file."""

    def __init__(self, db: Optional[TinyDB] = None, *, db_path: Optional[Path] = None) -> None:
        if db is None:
            path = db_path or default_db_path()
            path.parent.mkdir(parents=True, exist_ok=True)
            db = TinyDB(str(path))
        self._db = db
        self._lock = threading.Lock()

    @property
    def db(self) -> TinyDB:
        return self._db

    async def get_user_record(self, user_id: str) -> UserRecord:
        raw = await self._run(self._read_document, user_record_path(user_id))
        return UserRecord.from_mapping(raw)

    async def update_user_field(self, user_id: str, field: str, value: str) -> None:
        if field not in WRITABLE_FIELDS:
            raise ValueError(f"unsupported user record field: {field}")
        if not value:
            raise ValueError("refusing to overwrite a user record field with empty data")
        await self._run(self._upsert_field, user_record_path(user_id), field, value)

    def _read_document(self, path: str) -> Optional[Dict[str, Any]]:
        q = Query()
        cond = cast(QueryLike, q.path == path)
        with self._lock:
            raw = self._db.table(USERS_TABLE).get(cond)
        result = cast(Optional[Dict[str, Any]], raw)
        return dict(result) if result else None

    def _upsert_field(self, path: str, field: str, value: str) -> None:
        q = Query()
        cond = cast(QueryLike, q.path == path)
        with self._lock:
            # TinyDB upsert only touches the keys given, so sibling fields survive.
            self._db.table(USERS_TABLE).upsert({"path": path, field: value}, cond)

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, functools.partial(func, *args))
        except (OSError, JSONDecodeError) as exc:
            logger.warning("user record store failure: %s", exc)
            raise StoreUnavailableError(str(exc)) from exc


__all__ = ["TinyDBUserRecordAdapter", "default_db_path", "USERS_TABLE"]
