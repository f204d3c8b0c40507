"""
Repositorio para la colección `user` (credenciales).
"""
from typing import Any, Dict, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

COLLECTION = "user"


def _oid(value: str) -> Optional[ObjectId]:
    return ObjectId(value) if ObjectId.is_valid(value) else None


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._coll = db[COLLECTION]

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Busca usuario por email (email en minúsculas)."""
        return await self._coll.find_one({"email": email})

    async def find_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        return await self._coll.find_one({"username": username})

    async def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Obtiene usuario por id (str); None si el id no es un ObjectId válido."""
        oid = _oid(user_id)
        if oid is None:
            return None
        return await self._coll.find_one({"_id": oid})

    async def insert(self, doc: Dict[str, Any]) -> str:
        """Inserta usuario y devuelve el id (str).

        Lanza `DuplicateKeyError` si choca con los índices únicos (email/username).
        """
        data = dict(doc)
        res = await self._coll.insert_one(data)
        return str(res.inserted_id)
