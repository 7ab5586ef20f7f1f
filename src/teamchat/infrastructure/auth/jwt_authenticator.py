from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from typing import Any

import jwt

from teamchat.application.dto.identity import Identity
from teamchat.application.exceptions import AuthError, ErrorKind
from teamchat.application.ports.clock import Clock, SystemClock
from teamchat.domain.value_objects.enums import Role
from teamchat.domain.value_objects.ids import UserId

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class TokenAuthenticator:
    """Issue and verify HS256 access and refresh tokens."""

    def __init__(
        self,
        secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        *,
        access_ttl: timedelta = timedelta(hours=1),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Clock | None = None,
    ) -> None:
        self._secret = secret
        self._refresh_secret = refresh_secret
        self._algorithm = algorithm
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._clock = clock or SystemClock()

    @property
    def refresh_ttl(self) -> timedelta:
        return self._refresh_ttl

    def _encode(self, claims: dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = self._clock.now()
        payload = {**claims, "iat": now, "exp": now + ttl}
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def _decode(self, token: str, secret: str, expected_type: str) -> dict[str, Any]:
        try:
            payload = jwt.decode(token, secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthError("Token expired", kind=ErrorKind.EXPIRED) from exc
        except jwt.PyJWTError as exc:
            logger.debug("token rejected: %s", exc)
            raise AuthError("Invalid token", kind=ErrorKind.INVALID_TOKEN) from exc

        if payload.get("type") != expected_type or not payload.get("sub"):
            raise AuthError("Invalid token", kind=ErrorKind.INVALID_TOKEN)
        return payload

    def issue_access(self, identity: Identity, ttl: timedelta | None = None) -> str:
        claims = {
            "sub": identity.id,
            "email": identity.email,
            "role": identity.role.value,
            "type": ACCESS,
        }
        return self._encode(claims, self._secret, ttl or self._access_ttl)

    def issue_refresh(self, user_id: str, ttl: timedelta | None = None) -> str:
        claims = {"sub": user_id, "type": REFRESH, "jti": uuid.uuid4().hex}
        return self._encode(claims, self._refresh_secret, ttl or self._refresh_ttl)

    async def verify(self, token: str) -> Identity:
        payload = self._decode(token, self._secret, ACCESS)
        return Identity(
            id=UserId(str(payload["sub"])),
            role=Role.from_claim(payload.get("role")),
            email=payload.get("email"),
        )

    async def verify_refresh(self, token: str) -> str:
        payload = self._decode(token, self._refresh_secret, REFRESH)
        return str(payload["sub"])
