# profesiones/service/auth_service.py
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from starlette.concurrency import run_in_threadpool

from profesiones.core.config import settings
from profesiones.core.error_messages import ErrorResponses
from profesiones.db.database import USERS
from profesiones.serialize import serialize_doc
from profesiones.utils.auth_utils import create_access_token
from profesiones.utils.hash_utils import hash_password, verify_and_upgrade_password

logger = logging.getLogger("profesiones.auth")

ROLE_CLIENT = "cliente"
ROLE_PROFESSIONAL = "profesional"
ROLES = (ROLE_CLIENT, ROLE_PROFESSIONAL)


def _client_defaults(data: dict) -> dict:
    return {
        "direccion": data.get("direccion"),
        "direccionesFavoritas": data.get("direccionesFavoritas") or [],
        "metodoPago": data.get("metodoPago") or [],
        "historialCitas": [],
        "historialServicios": [],
    }


def _professional_defaults(data: dict) -> dict:
    return {
        "profesion": data.get("profesion"),
        "especialidades": data.get("especialidades") or [],
        "experiencia": data.get("experiencia") or 0,
        "calificaciones": [],
        "promedioCalificacion": 0,
        "servicios": data.get("servicios") or [],
        "radio_cobertura": data.get("radio_cobertura") or 0,
        "disponibilidad": data.get("disponibilidad") or {"horarios": [], "estado": "disponible"},
        "documentosVerificados": {
            "dni": {"verificado": False},
            "matricula": {"verificado": False},
            "antecedentes": {"verificado": False},
        },
    }


async def register(db, role: str, data: dict) -> dict:
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")

    users = db[USERS]
    if await users.find_one({"email": data["email"]}):
        raise ErrorResponses.USER_EXISTS

    now = datetime.utcnow()
    user = {
        "email": data["email"],
        "password": hash_password(data["password"]),
        "nombre": data["nombre"],
        "apellido": data["apellido"],
        "telefono": data.get("telefono"),
        "role": role,
        "createdAt": now,
        "updatedAt": now,
    }
    user.update(_client_defaults(data) if role == ROLE_CLIENT else _professional_defaults(data))

    try:
        result = await users.insert_one(user)
    except DuplicateKeyError:
        # Lost a race against a concurrent registration with the same email
        raise ErrorResponses.USER_EXISTS

    user["_id"] = result.inserted_id
    logger.info("Registered %s %s", role, result.inserted_id)
    return serialize_doc(user)


async def login(db, email: str, password: str) -> dict:
    users = db[USERS]
    user = await users.find_one({"email": email})
    if not user:
        logger.info("Failed login: unknown email %s", email)
        raise ErrorResponses.INVALID_CREDENTIALS

    valid = await verify_and_upgrade_password(user["_id"], password, user.get("password"), users)
    if not valid:
        logger.info("Failed login: wrong password for %s", email)
        raise ErrorResponses.INVALID_CREDENTIALS

    token = create_access_token({"id": str(user["_id"]), "role": user["role"]})
    return {"token": token, "usuario": serialize_doc(user)}


async def forgot_password(db, email: str, send_email: Callable[[str, str, str], None]) -> None:
    users = db[USERS]
    user = await users.find_one({"email": email})
    if not user:
        raise ErrorResponses.USER_NOT_FOUND

    token = secrets.token_hex(20)
    expires = datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    await users.update_one(
        {"_id": user["_id"]},
        {"$set": {"reset_password_token": token, "reset_password_expires": expires}},
    )

    reset_url = f"{settings.FRONTEND_URL}/reset-password/{token}"
    subject = "Recuperación de Contraseña - Profesiones UY"
    body = f"""
<h1>Recuperación de Contraseña</h1>
<p>Has solicitado restablecer tu contraseña.</p>
<p>Haz click en el siguiente enlace para continuar:</p>
<a href="{reset_url}">{reset_url}</a>
<p>Este enlace expirará en {settings.RESET_TOKEN_EXPIRE_MINUTES} minutos.</p>
<p>Si no solicitaste este cambio, ignora este email.</p>
"""
    try:
        await run_in_threadpool(send_email, email, subject, body)
    except Exception:
        logger.exception("Could not deliver password reset email to %s", email)
        raise ErrorResponses.EMAIL_FAILED


async def reset_password(db, token: str, new_password: str) -> None:
    if not token:
        raise ErrorResponses.INVALID_RESET_TOKEN

    # Password swap and token removal happen in one document write
    user = await db[USERS].find_one_and_update(
        {"reset_password_token": token, "reset_password_expires": {"$gt": datetime.utcnow()}},
        {
            "$set": {"password": hash_password(new_password), "updatedAt": datetime.utcnow()},
            "$unset": {"reset_password_token": "", "reset_password_expires": ""},
        },
        return_document=ReturnDocument.AFTER,
    )
    if not user:
        raise ErrorResponses.INVALID_RESET_TOKEN
    logger.info("Password reset for user %s", user["_id"])
