"""
Creación y verificación de JWTs de sesión.

El token no se persiste: su validez depende sólo de la firma y de `exp`.
El reloj es inyectable para poder probar el límite de expiración.
"""
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

import jwt as pyjwt

from marksense.core.exceptions import Unauthorized
from marksense.core.time import now_utc


class TokenService:
    def __init__(
        self,
        *,
        secret: Optional[str],
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in
        self._clock = clock

    @property
    def expires_in(self) -> timedelta:
        return self._expires_in

    def _require_secret(self) -> str:
        if not self._secret:
            raise RuntimeError("JWT_SECRET no configurado")
        return self._secret

    def create_access_token(self, user_id: str) -> str:
        """
        Genera un JWT válido por `expires_in`.
        Claims: sub(user_id), iat, exp, jti.
        """
        now = self._clock()
        exp = now + self._expires_in
        payload = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "jti": str(uuid4()),
        }
        return pyjwt.encode(payload, self._require_secret(), algorithm=self._algorithm)

    def verify_access_token(self, token: Optional[str]) -> Dict[str, Any]:
        """
        Valida firma y expiración contra el reloj inyectado. Devuelve el payload.
        Cualquier fallo se reporta como `Unauthorized`.
        """
        if not token:
            raise Unauthorized("No token, authorization denied")
        try:
            payload = pyjwt.decode(
                token,
                key=self._require_secret(),
                algorithms=[self._algorithm],
                # exp/iat se evalúan contra el reloj propio, no el de PyJWT
                options={"verify_exp": False, "verify_iat": False, "require": ["exp", "sub"]},
            )
        except pyjwt.InvalidTokenError:
            raise Unauthorized("Token is not valid")
        try:
            exp = int(payload["exp"])
        except (TypeError, ValueError):
            raise Unauthorized("Token is not valid")
        if int(self._clock().timestamp()) >= exp:
            raise Unauthorized("Token has expired")
        return payload
