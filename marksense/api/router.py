"""Agregador de routers de la API."""
from fastapi import APIRouter
from marksense.api.routers import ai, auth, health, note

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(note.router)
api_router.include_router(ai.router)
