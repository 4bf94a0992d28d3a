# profesiones/utils/auth_utils.py
import logging
from datetime import datetime, timedelta
from typing import Optional

import jwt

from profesiones.core.config import settings
from profesiones.core.error_messages import ErrorResponses

logger = logging.getLogger("profesiones.auth")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS))
    to_encode.update({
        "exp": expire,
        "type": "access"
    })
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str, expected_type: str = "access") -> dict:
    try:
        decoded = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise ErrorResponses.TOKEN_EXPIRED
    except jwt.InvalidTokenError as e:
        logger.info("Rejected invalid token: %s", e)
        raise ErrorResponses.INVALID_TOKEN

    if decoded.get("type") != expected_type:
        raise ErrorResponses.INVALID_TOKEN
    return decoded
