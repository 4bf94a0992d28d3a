# app/middleware/rbac.py
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from profesiones.core.error_messages import ErrorResponses
from profesiones.db.database import USERS, get_db
from profesiones.service.auth_service import ROLE_CLIENT, ROLE_PROFESSIONAL
from profesiones.utils.auth_utils import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db=Depends(get_db),
):
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise ErrorResponses.NOT_AUTHENTICATED

    payload = decode_token(credentials.credentials)
    user_id = payload.get("id")
    if not user_id:
        raise ErrorResponses.INVALID_TOKEN

    try:
        oid = ObjectId(user_id)
    except (InvalidId, TypeError):
        raise ErrorResponses.INVALID_TOKEN

    user = await db[USERS].find_one({"_id": oid})
    if not user:
        # Account removed after the token was issued
        raise ErrorResponses.INVALID_TOKEN
    return user


async def get_current_client(user: dict = Depends(get_current_user)):
    if user["role"] != ROLE_CLIENT:
        raise ErrorResponses.CLIENT_ONLY
    return user


async def get_current_professional(user: dict = Depends(get_current_user)):
    if user["role"] != ROLE_PROFESSIONAL:
        raise ErrorResponses.PROFESSIONAL_ONLY
    return user


def ensure_owner(user: dict, user_id: str) -> None:
    if str(user["_id"]) != user_id:
        raise ErrorResponses.FORBIDDEN
