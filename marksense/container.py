"""Contenedor de servicios: construye clientes y servicios una sola vez al arranque.

Los routers obtienen los servicios de `app.state.container`; en tests se
arma un contenedor con repositorios/cliente falsos.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from marksense.core.config import Settings
from marksense.infrastructure.ai.openai_client import build_openai
from marksense.infrastructure.db.bootstrap import ensure_collections
from marksense.infrastructure.db.mongo_async import build_async_client, get_async_db, ping
from marksense.repositories.note_repo import NoteRepository
from marksense.repositories.user_repo import UserRepository
from marksense.services.ai_service import AIService
from marksense.services.auth_service import AuthService
from marksense.services.note_service import NoteService
from marksense.services.token_service import TokenService

_log = logging.getLogger("marksense.startup")


@dataclass
class ServiceContainer:
    auth: AuthService
    notes: NoteService
    ai: AIService
    mongo_client: Any = None
    ai_client: Any = None

    async def aclose(self) -> None:
        if self.ai_client is not None:
            await self.ai_client.close()
        if self.mongo_client is not None:
            self.mongo_client.close()


async def build_container(settings: Settings) -> ServiceContainer:
    if not settings.jwt_secret:
        _log.warning("JWT_SECRET no configurado: login y registro fallarán")
    mongo_client = build_async_client(settings)
    db = get_async_db(mongo_client, settings)
    # Garantiza índices si hay conexión; no impide el arranque
    if await ping(db):
        await ensure_collections(db)
    else:
        _log.warning("Mongo no listo; omitiendo ensure_collections()")

    ai_client = build_openai(settings)
    if ai_client is None:
        _log.warning("OPENROUTER_API_KEY/OPENAI_API_KEY ausente: la IA devolverá respuestas por defecto")

    tokens = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in=settings.jwt_expire_delta,
    )
    return ServiceContainer(
        auth=AuthService(UserRepository(db), tokens),
        notes=NoteService(NoteRepository(db)),
        ai=AIService(ai_client, settings.ai_model),
        mongo_client=mongo_client,
        ai_client=ai_client,
    )

