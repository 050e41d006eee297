import logging

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from booking_api.auth import jwt_handler
from booking_api.auth.roles import Role, is_authorized, normalize_email, resolve_role
from booking_api.database import get_db

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "unauthorized access"
FORBIDDEN_MESSAGE = "forbidden access"


def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED_MESSAGE)

    try:
        payload = jwt_handler.decode_access_token(credentials.credentials)
    except jwt.PyJWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_MESSAGE) from exc

    if not normalize_email(payload.get("email")):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_MESSAGE)
    return payload


def get_current_email(claims: dict = Depends(get_token_claims)) -> str:
    return normalize_email(claims.get("email"))


def require_role(required_role: Role):
    def dependency(
        email: str = Depends(get_current_email),
        db: Session = Depends(get_db),
    ) -> str:
        caller_role = resolve_role(db, email)
        if not is_authorized(required_role, email, caller_role):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_MESSAGE)
        return email

    return dependency


require_admin = require_role(Role.ADMIN)
require_instructor = require_role(Role.INSTRUCTOR)


def ensure_self(owner_email: str | None, caller_email: str) -> None:
    if not is_authorized(None, caller_email, owner_email=owner_email or ""):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_MESSAGE)
