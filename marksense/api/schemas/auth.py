"""
Esquemas Pydantic para operaciones de autenticación.

- `RegisterBody`/`LoginBody` son los cuerpos HTTP (permisivos).
- `RegisterPayload` concentra las validaciones y normalizaciones
  (username recortado, email en minúsculas, longitud mínima de password).
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

USERNAME_MIN_CHARS = 3
USERNAME_MAX_CHARS = 30
PASSWORD_MIN_CHARS = 6


class RegisterBody(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginBody(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterPayload(BaseModel):
    """Datos de registro ya validados."""

    username: str
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_CHARS)

    @field_validator("username")
    @classmethod
    def _check_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < USERNAME_MIN_CHARS:
            raise ValueError(f"Username must be at least {USERNAME_MIN_CHARS} characters")
        if len(v) > USERNAME_MAX_CHARS:
            raise ValueError(f"Username cannot exceed {USERNAME_MAX_CHARS} characters")
        return v

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: EmailStr) -> str:
        return str(v).lower()


class UserOut(BaseModel):
    """Respuesta pública de usuario (sin secretos)."""
    id: str
    username: str
    email: str

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "UserOut":
        return cls(id=str(doc["_id"]), username=doc["username"], email=doc["email"])
