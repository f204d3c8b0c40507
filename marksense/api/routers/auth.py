"""Rutas de autenticación: registro, login y perfil básico."""
from fastapi import APIRouter, Depends, status

from marksense.api.deps import get_auth_service, get_current_user
from marksense.api.schemas.auth import LoginBody, RegisterBody
from marksense.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar usuario",
    description="Crea el usuario (password con argon2) y devuelve token + usuario público.",
)
async def register(payload: RegisterBody, service: AuthService = Depends(get_auth_service)):
    res = await service.register(payload.username, payload.email, payload.password)
    return {"success": True, "message": "User registered successfully", **res}


@router.post(
    "/login",
    response_model=dict,
    summary="Login con email y password",
    description="Valida credenciales y emite un token de sesión.",
)
async def login(payload: LoginBody, service: AuthService = Depends(get_auth_service)):
    res = await service.login(payload.email, payload.password)
    return {"success": True, "message": "Login successful", **res}


@router.get(
    "/me",
    response_model=dict,
    summary="Perfil básico del usuario",
    description="Devuelve la proyección pública del usuario autenticado.",
)
async def me(user=Depends(get_current_user)):
    return {"success": True, "user": user}
