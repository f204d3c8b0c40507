"""Health (sin auth), salidas estables."""
from fastapi import APIRouter, status


router = APIRouter(tags=["Health"])


@router.get("/health", status_code=status.HTTP_200_OK, response_model=dict, summary="Salud básica")
async def health() -> dict:
    return {"success": True, "status": "ok"}
