"""
Bootstrap de la base Mongo: índices mínimos para `user` y `note`.
Se ejecuta al inicio de la app. No tumba la app si algo falla; deja warnings.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from marksense.repositories.note_repo import COLLECTION as NOTE_COLL
from marksense.repositories.user_repo import COLLECTION as USER_COLL

_log = logging.getLogger("marksense.mongo.bootstrap")

INDEXES: Dict[str, List[Dict[str, Any]]] = {
    USER_COLL: [
        {"keys": [("email", ASCENDING)], "name": "uniq_email", "unique": True},
        {"keys": [("username", ASCENDING)], "name": "uniq_username", "unique": True},
    ],
    NOTE_COLL: [
        {"keys": [("user_id", ASCENDING), ("updated_at", DESCENDING)], "name": "user_updated"},
        {"keys": [("user_id", ASCENDING), ("created_at", DESCENDING)], "name": "user_created"},
    ],
}


async def _ensure_indexes(db: AsyncIOMotorDatabase, name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = db[name]
    for ix in indexes:
        opts = dict(ix)
        keys = opts.pop("keys")
        try:
            await coll.create_index(keys, **opts)
        except PyMongoError as e:
            # Ignora fallas de índice (e.g., datos no únicos previos)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


async def ensure_collections(db: AsyncIOMotorDatabase) -> None:
    """Garantiza índices mínimos (unicidad de credenciales y orden de notas)."""
    for name, indexes in INDEXES.items():
        await _ensure_indexes(db, name, indexes)
    _log.info("Índices verificados: %s", ", ".join(INDEXES))
