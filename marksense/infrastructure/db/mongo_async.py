"""Cliente MongoDB asíncrono (Motor).

El cliente se construye explícitamente en el arranque y se inyecta en los
repositorios; no hay instancias globales.
"""
from __future__ import annotations

import certifi
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from marksense.core.config import Settings

_log = logging.getLogger("marksense.mongo")


def build_async_client(settings: Settings) -> AsyncIOMotorClient:
    uri = settings.mongo_uri
    kwargs = dict(serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms)
    # SRV ya implica TLS; proveemos CA bundle para robustez
    if uri.startswith("mongodb+srv://"):
        kwargs["tlsCAFile"] = certifi.where()
    elif settings.mongo_tls:
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        if settings.mongo_tls_insecure:
            kwargs["tlsAllowInvalidCertificates"] = True
    return AsyncIOMotorClient(uri, **kwargs)


def get_async_db(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    db = client[settings.mongo_db]
    _log.info("Motor listo (db=%s)", settings.mongo_db)
    return db


async def ping(db: AsyncIOMotorDatabase) -> bool:
    """True si el servidor responde; nunca lanza."""
    try:
        await db.command("ping")
        return True
    except Exception as e:
        _log.warning("Mongo no accesible: %s", e)
        return False
