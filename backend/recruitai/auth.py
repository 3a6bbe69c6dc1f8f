from fastapi import HTTPException, Request
from jose import JWTError, jwt
import os
import logging

logger = logging.getLogger("recruitai.auth")


def _settings() -> tuple[str | None, str, bool]:
    secret = os.getenv("JWT_SECRET") or None
    environment = os.getenv("ENV", "development").lower()
    allow_unverified = str(os.getenv("ALLOW_UNVERIFIED_JWT_DEV", "false")).strip().lower() in {"1", "true", "yes", "on"}
    return secret, environment, allow_unverified


def resolve_user_id_from_token(token: str) -> str:
    secret, environment, allow_unverified = _settings()

    if secret:
        try:
            payload = jwt.decode(token, secret, algorithms=["HS256"])
        except JWTError:
            raise HTTPException(401, "Invalid token")
    else:
        if environment == "production":
            raise HTTPException(500, "JWT_SECRET is not configured")
        if not allow_unverified:
            raise HTTPException(
                401,
                "Token verification unavailable in development; configure JWT_SECRET or set ALLOW_UNVERIFIED_JWT_DEV=true",
            )
        try:
            payload = jwt.get_unverified_claims(token)
            logger.warning("ALLOW_UNVERIFIED_JWT_DEV enabled; using unverified token claims in non-production mode")
        except JWTError:
            raise HTTPException(401, "Invalid token")

    user_id = (payload or {}).get("sub")
    if not user_id:
        raise HTTPException(401, "Invalid token")
    return str(user_id)


def get_user_id(request: Request) -> str:
    auth = request.headers.get("Authorization")
    if not auth:
        raise HTTPException(401, "Unauthorized")

    if not auth.startswith("Bearer "):
        raise HTTPException(401, "Unauthorized")

    token = auth.replace("Bearer ", "", 1)
    return resolve_user_id_from_token(token)
