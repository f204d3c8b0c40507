"""
Esquemas Pydantic para `note`.

- Los cuerpos de entrada son permisivos (campos opcionales): las reglas de
  negocio (obligatorios, longitudes, límite de tags) las aplica NoteService
  para que el mensaje de error sea siempre el mismo.
- `NoteUpdate` distingue "campo ausente" de "campo presente" vía `model_fields_set`.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

TITLE_MAX_CHARS = 100
CONTENT_MAX_CHARS = 10_000
MAX_TAGS = 10


def normalize_tags(tags: Optional[List[str]]) -> List[str]:
    """trim + minúsculas por tag; conserva orden y cantidad tal como llegan."""
    return [t.strip().lower() for t in (tags or [])]


class NoteCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None


class NoteUpdate(BaseModel):
    """Parche parcial de una nota.

    Sólo los campos presentes en el cuerpo y con valor no nulo se aplican;
    `tags: []` es un valor presente (vacía la lista).
    """
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None

    def changes(self) -> Dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }


class NoteOut(BaseModel):
    """Proyección pública de una nota (camelCase, como la consume el cliente)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(serialization_alias="userId")
    title: str
    content: str
    tags: List[str]
    created_at: str = Field(serialization_alias="createdAt")
    updated_at: str = Field(serialization_alias="updatedAt")

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "NoteOut":
        return cls(
            id=str(doc["_id"]),
            user_id=str(doc["user_id"]),
            title=doc["title"],
            content=doc["content"],
            tags=list(doc.get("tags") or []),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    def to_json(self) -> Dict[str, Any]:
        # `_id` se mantiene por compatibilidad con clientes existentes
        return {"_id": self.id, **self.model_dump(by_alias=True)}
