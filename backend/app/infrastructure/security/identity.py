"""Identity provider adapter — turns a bearer token into a Caller.

Tokens are issued by the external auth service and signed with the shared
``JWT_SECRET``. Only the ``sub``, ``roles`` and ``status`` claims are read.
"""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from app.domain.entities import AccountStatus, Caller

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    sub: str
    roles: list[str] = []
    status: AccountStatus = AccountStatus.PENDING


def decode_caller(token: str, secret: str, algorithm: str) -> Caller | None:
    """Return the Caller asserted by ``token``, or None if it cannot be trusted."""
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
        claims = TokenPayload(**payload)
    except (JWTError, ValidationError) as exc:
        logger.debug("Rejected bearer token: %s", exc)
        return None
    return Caller(id=claims.sub, roles=frozenset(claims.roles), status=claims.status)


def create_access_token(
    subject: str,
    secret: str,
    algorithm: str,
    *,
    roles: list[str] | None = None,
    status: AccountStatus = AccountStatus.APPROVED,
    expires_delta: timedelta = timedelta(hours=1),
) -> str:
    """Mint a token in the auth service's format (local tooling and tests)."""
    to_encode = {
        "sub": subject,
        "roles": roles or [],
        "status": status.value,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(to_encode, secret, algorithm=algorithm)
