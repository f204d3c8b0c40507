"""
Dependencias reutilizables para routers (FastAPI Depends).

- Servicios: se leen del contenedor en `app.state.container`.
- Autenticación: extrae y valida el Bearer token, devuelve el usuario actual.
- Mantener esta capa delgada: sin lógica de negocio pesada.
"""
from typing import Any, Dict, Optional
from fastapi import Header, Request

from marksense.container import ServiceContainer
from marksense.core.exceptions import Unauthorized
from marksense.services.ai_service import AIService
from marksense.services.auth_service import AuthService
from marksense.services.note_service import NoteService


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_auth_service(request: Request) -> AuthService:
    return get_container(request).auth


def get_note_service(request: Request) -> NoteService:
    return get_container(request).notes


def get_ai_service(request: Request) -> AIService:
    return get_container(request).ai


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("No token, authorization denied")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise Unauthorized("No token, authorization denied")
    return token


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> Dict[str, Any]:
    """Usuario público `{id, username, email}`; también queda en `request.state.user`."""
    token = _bearer_token(authorization)
    user = await get_auth_service(request).resolve_user(token)
    request.state.user = user
    return user
