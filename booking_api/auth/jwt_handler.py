from datetime import datetime, timedelta, timezone

import jwt

from booking_api.core import config

RESERVED_CLAIMS = {"exp", "iat", "sub", "nbf", "aud", "iss", "jti"}


def create_access_token(claims: dict, expires_minutes: int | None = None) -> str:
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    now = datetime.now(timezone.utc)
    payload = {key: value for key, value in claims.items() if key not in RESERVED_CLAIMS}
    payload.update({
        "sub": claims["email"],
        "iat": now,
        "exp": now + timedelta(minutes=expire_minutes),
    })
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
