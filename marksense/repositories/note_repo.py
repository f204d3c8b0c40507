"""Repo de la colección `note`.

Todas las consultas van acotadas por `user_id`: una nota de otro usuario
simplemente no existe para quien consulta.
"""
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

COLLECTION = "note"


def _oid(value: str) -> Optional[ObjectId]:
    return ObjectId(value) if ObjectId.is_valid(value) else None


class NoteRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._coll = db[COLLECTION]

    async def list_by_owner(self, user_id: str) -> List[Dict[str, Any]]:
        """Lista notas del usuario (ordenadas por updated_at desc)."""
        cursor = self._coll.find({"user_id": user_id}).sort("updated_at", DESCENDING)
        return await cursor.to_list(length=None)

    async def get_owned(self, note_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        oid = _oid(note_id)
        if oid is None:
            return None
        return await self._coll.find_one({"_id": oid, "user_id": user_id})

    async def insert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Inserta la nota y devuelve el documento con `_id`."""
        data = dict(doc)
        res = await self._coll.insert_one(data)
        data["_id"] = res.inserted_id
        return data

    async def update_owned(self, note_id: str, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Aplica `$set` sobre la nota del usuario y devuelve el documento actualizado."""
        oid = _oid(note_id)
        if oid is None:
            return None
        return await self._coll.find_one_and_update(
            {"_id": oid, "user_id": user_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_owned(self, note_id: str, user_id: str) -> bool:
        oid = _oid(note_id)
        if oid is None:
            return False
        doc = await self._coll.find_one_and_delete({"_id": oid, "user_id": user_id})
        return doc is not None
