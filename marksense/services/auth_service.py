"""
Lógica de autenticación: registro, login y resolución del usuario del token.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from argon2.low_level import Type
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import DuplicateKeyError

from marksense.api.schemas.auth import RegisterPayload, UserOut
from marksense.core.exceptions import Conflict, InvalidCredentials, Unauthorized, ValidationError
from marksense.core.time import iso_utc, now_utc
from marksense.repositories.user_repo import UserRepository
from marksense.services.token_service import TokenService

EMAIL_TAKEN = "User with this email already exists"
USERNAME_TAKEN = "Username already taken"

_log = logging.getLogger("marksense.auth")


def default_password_hasher() -> PasswordHasher:
    return PasswordHasher(time_cost=2, memory_cost=51200, parallelism=2, hash_len=32, salt_len=16, type=Type.ID)


def _duplicate_message(exc: DuplicateKeyError) -> str:
    # Carrera entre el chequeo previo y el insert: el índice único decide
    key = (exc.details or {}).get("keyPattern") or {}
    if "email" in key or "email" in str(exc):
        return EMAIL_TAKEN
    return USERNAME_TAKEN


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        *,
        hasher: Optional[PasswordHasher] = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._ph = hasher or default_password_hasher()
        self._clock = clock

    def hash_password(self, password: str) -> str:
        return self._ph.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return self._ph.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False

    def _session(self, user: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "token": self._tokens.create_access_token(str(user["_id"])),
            "user": UserOut.from_doc(user).model_dump(),
        }

    async def register(self, username: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """
        Registra un usuario local. El email se revisa antes que el username
        para que el mensaje de conflicto apunte al campo correcto.
        """
        if not username or not email or not password:
            raise ValidationError("Username, email and password are required")
        try:
            data = RegisterPayload(username=username, email=email, password=password)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e)

        if await self._users.find_by_email(data.email):
            raise Conflict(EMAIL_TAKEN)
        if await self._users.find_by_username(data.username):
            raise Conflict(USERNAME_TAKEN)

        doc = {
            "username": data.username,
            "email": data.email,
            "password_hash": self.hash_password(data.password),
            "created_at": iso_utc(self._clock()),
        }
        try:
            inserted_id = await self._users.insert(doc)
        except DuplicateKeyError as e:
            raise Conflict(_duplicate_message(e))
        doc["_id"] = inserted_id
        _log.info("Usuario registrado user_id=%s", inserted_id)
        return self._session(doc)

    async def login(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not email or not password:
            raise ValidationError("Email and password are required")
        u = await self._users.find_by_email(email.strip().lower())
        # Mismo mensaje para email inexistente y password incorrecto
        if not u or not u.get("password_hash"):
            raise InvalidCredentials()
        if not self.verify_password(password, u["password_hash"]):
            raise InvalidCredentials()
        _log.info("Login correcto user_id=%s", u["_id"])
        return self._session(u)

    async def resolve_user(self, token: Optional[str]) -> Dict[str, Any]:
        """Valida el token y devuelve la proyección pública del usuario."""
        payload = self._tokens.verify_access_token(token)
        u = await self._users.get_by_id(str(payload["sub"]))
        if not u:
            raise Unauthorized("User not found")
        return UserOut.from_doc(u).model_dump()
