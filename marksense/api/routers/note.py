"""
Endpoints para notas del usuario autenticado.
"""
from fastapi import APIRouter, Depends, status

from marksense.api.deps import get_current_user, get_note_service
from marksense.api.schemas.note import NoteCreate, NoteUpdate
from marksense.services.note_service import NoteService


router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get(
    "",
    response_model=dict,
    summary="Listar notas",
    description="Notas del usuario ordenadas por última modificación (desc).",
)
async def list_notes(user=Depends(get_current_user), service: NoteService = Depends(get_note_service)):
    notes = await service.list(user["id"])
    return {"success": True, "count": len(notes), "data": [n.to_json() for n in notes]}


@router.get("/{note_id}", response_model=dict, summary="Obtener nota")
async def get_note(note_id: str, user=Depends(get_current_user), service: NoteService = Depends(get_note_service)):
    note = await service.get(user["id"], note_id)
    return {"success": True, "data": note.to_json()}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=dict,
    summary="Crear nota",
    description="Crea una nota (título ≤100, contenido ≤10000, máximo 10 tags).",
)
async def create_note(
    payload: NoteCreate,
    user=Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.create(user["id"], payload.title, payload.content, payload.tags)
    return {"success": True, "message": "Note created successfully", "data": note.to_json()}


@router.put(
    "/{note_id}",
    response_model=dict,
    summary="Actualizar nota",
    description="Actualización parcial: sólo se aplican los campos enviados; `tags: []` vacía los tags.",
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    user=Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.update(user["id"], note_id, payload)
    return {"success": True, "message": "Note updated successfully", "data": note.to_json()}


@router.delete("/{note_id}", response_model=dict, summary="Eliminar nota")
async def delete_note(note_id: str, user=Depends(get_current_user), service: NoteService = Depends(get_note_service)):
    await service.delete(user["id"], note_id)
    return {"success": True, "message": "Note deleted successfully"}
