"""
Session token issuance and verification

Session tokens are HS256 JWTs bound to a Discord user ID.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from joserfc import jwt as jose_jwt
from joserfc.errors import JoseError
from joserfc.jwk import OctKey
from joserfc.jwt import JWTClaimsRegistry
import structlog

from kanbancord.core.config import settings
from kanbancord.core.exceptions import TokenIssuanceError, UnauthorizedError

logger = structlog.get_logger()


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    username: Optional[str]
    global_name: Optional[str]
    expires_at: datetime


def _signing_key() -> OctKey:
    return OctKey.import_key(settings.JWT_SECRET_KEY)


def create_session_token(
    user_id: str,
    username: Optional[str] = None,
    global_name: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a session token for a user

    Args:
        user_id: Discord user ID
        username: Discord username
        global_name: Discord display name
        expires_delta: Custom lifetime, defaults to JWT_EXPIRES_HOURS

    Returns:
        Encoded JWT

    Raises:
        TokenIssuanceError: If no signing secret is configured
    """
    if not settings.JWT_SECRET_KEY:
        logger.error("Cannot issue session token: JWT_SECRET_KEY is not set")
        raise TokenIssuanceError("Error while generating token")

    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.JWT_EXPIRES_HOURS))

    claims = {
        "sub": str(user_id),
        "userId": str(user_id),
        "username": username,
        "globalName": global_name,
        "iss": settings.JWT_ISSUER,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }

    token = jose_jwt.encode({"alg": settings.JWT_ALGORITHM}, claims, _signing_key())

    logger.debug("Session token created", user_id=user_id, expires=expire)
    return token


def verify_session_token(token: str) -> SessionClaims:
    """
    Verify a session token and return the identity it carries

    Raises:
        UnauthorizedError: If the token is malformed, forged, expired or
            issued by someone else
    """
    if not settings.JWT_SECRET_KEY:
        logger.error("Cannot verify session token: JWT_SECRET_KEY is not set")
        raise UnauthorizedError("Could not validate credentials")

    registry = JWTClaimsRegistry(
        iss={"essential": True, "value": settings.JWT_ISSUER},
        sub={"essential": True},
        exp={"essential": True},
    )

    try:
        token_obj = jose_jwt.decode(token, _signing_key(), algorithms=[settings.JWT_ALGORITHM])
        registry.validate(token_obj.claims)
    except (JoseError, ValueError) as exc:
        logger.warning("Session token verification failed", error=str(exc))
        raise UnauthorizedError("Invalid or missing token")

    claims = token_obj.claims
    user_id = claims.get("userId") or claims["sub"]
    logger.debug("Session token verified", user_id=user_id)

    return SessionClaims(
        user_id=str(user_id),
        username=claims.get("username"),
        global_name=claims.get("globalName"),
        expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    )
