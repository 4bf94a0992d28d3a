# profesiones/service/profile_service.py
import logging
import re
from datetime import datetime
from typing import Optional

from pymongo import DESCENDING, ReturnDocument

from profesiones.core.error_messages import ErrorResponses
from profesiones.db.database import USERS
from profesiones.serialize import serialize_doc, serialize_list, to_object_id
from profesiones.service.auth_service import ROLE_CLIENT, ROLE_PROFESSIONAL

logger = logging.getLogger("profesiones.profiles")

CLIENT_MUTABLE_FIELDS = {"nombre", "apellido", "telefono", "direccion", "direccionesFavoritas", "metodoPago"}
PROFESSIONAL_MUTABLE_FIELDS = {
    "nombre",
    "apellido",
    "telefono",
    "profesion",
    "especialidades",
    "experiencia",
    "servicios",
    "radio_cobertura",
    "disponibilidad",
}
RATING_WRITE_ATTEMPTS = 5


def _not_found(role: Optional[str]):
    if role == ROLE_CLIENT:
        return ErrorResponses.CLIENT_NOT_FOUND
    if role == ROLE_PROFESSIONAL:
        return ErrorResponses.PROFESSIONAL_NOT_FOUND
    return ErrorResponses.USER_NOT_FOUND


async def find_user(db, user_id, role: Optional[str] = None) -> dict:
    """Raw user document by id, optionally restricted to one variant."""
    query = {"_id": to_object_id(user_id)}
    if role:
        query["role"] = role
    user = await db[USERS].find_one(query)
    if not user:
        raise _not_found(role)
    return user


def average_rating(ratings) -> float:
    if not ratings:
        return 0
    return sum(r["puntuacion"] for r in ratings) / len(ratings)


async def get_client(db, client_id) -> dict:
    return serialize_doc(await find_user(db, client_id, ROLE_CLIENT))


async def get_professional(db, professional_id) -> dict:
    return serialize_doc(await find_user(db, professional_id, ROLE_PROFESSIONAL))


async def _update_user(db, user_id, role: str, changes: dict, allowed: set) -> dict:
    oid = to_object_id(user_id)
    updates = {k: v for k, v in changes.items() if k in allowed}
    if not updates:
        return serialize_doc(await find_user(db, oid, role))

    updates["updatedAt"] = datetime.utcnow()
    user = await db[USERS].find_one_and_update(
        {"_id": oid, "role": role},
        {"$set": updates},
        return_document=ReturnDocument.AFTER,
    )
    if not user:
        raise _not_found(role)
    logger.info("Updated %s profile %s: %s", role, oid, sorted(updates))
    return serialize_doc(user)


async def update_client(db, client_id, changes: dict) -> dict:
    return await _update_user(db, client_id, ROLE_CLIENT, changes, CLIENT_MUTABLE_FIELDS)


async def update_professional(db, professional_id, changes: dict) -> dict:
    return await _update_user(db, professional_id, ROLE_PROFESSIONAL, changes, PROFESSIONAL_MUTABLE_FIELDS)


async def list_professionals(db) -> list:
    cursor = db[USERS].find({"role": ROLE_PROFESSIONAL}).sort("promedioCalificacion", DESCENDING)
    return serialize_list(await cursor.to_list(length=None))


def _to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def _matches_filters(professional: dict, filters: dict) -> bool:
    especialidad = filters.get("especialidad")
    if especialidad:
        wanted = especialidad.lower()
        if not any(wanted in e.lower() for e in professional.get("especialidades", [])):
            return False

    precio_maximo = filters.get("precioMaximo")
    if precio_maximo is not None:
        if not any(s.get("precio", 0) <= precio_maximo for s in professional.get("servicios", [])):
            return False

    disponibilidad = filters.get("disponibilidad") or {}
    dia, hora = disponibilidad.get("dia"), disponibilidad.get("hora")
    if dia or hora:
        horarios = professional.get("disponibilidad", {}).get("horarios", [])
        if dia:
            horarios = [h for h in horarios if h["dia"] == dia]
        if hora:
            at = _to_minutes(hora)
            horarios = [h for h in horarios if _to_minutes(h["horaInicio"]) <= at < _to_minutes(h["horaFin"])]
        if not horarios:
            return False

    return True


async def search_professionals(db, filters: dict) -> list:
    query = {"role": ROLE_PROFESSIONAL}
    if filters.get("profesion"):
        query["profesion"] = {"$regex": re.escape(filters["profesion"]), "$options": "i"}
    if filters.get("calificacionMinima") is not None:
        query["promedioCalificacion"] = {"$gte": filters["calificacionMinima"]}

    cursor = db[USERS].find(query).sort("promedioCalificacion", DESCENDING)
    professionals = await cursor.to_list(length=None)
    return serialize_list(p for p in professionals if _matches_filters(p, filters))


async def rate_professional(db, professional_id, client: dict, score: int, comment: Optional[str] = None) -> dict:
    """Append a rating and store the new mean in the same write.

    The write is conditioned on the number of ratings read, so a concurrent
    rating makes it miss and the mean is recomputed from the fresh array.
    """
    if not isinstance(score, int) or isinstance(score, bool) or not 1 <= score <= 5:
        raise ErrorResponses.INVALID_RATING

    rating = {
        "cliente": str(client["_id"]),
        "puntuacion": score,
        "comentario": comment,
        "fecha": datetime.utcnow(),
    }
    for _ in range(RATING_WRITE_ATTEMPTS):
        professional = await find_user(db, professional_id, ROLE_PROFESSIONAL)
        ratings = professional.get("calificaciones") or []
        if ratings:
            unchanged = {"calificaciones": {"$size": len(ratings)}}
        else:
            unchanged = {"$or": [{"calificaciones": {"$size": 0}}, {"calificaciones": {"$exists": False}}]}

        average = average_rating(ratings + [rating])
        result = await db[USERS].update_one(
            {"_id": professional["_id"], **unchanged},
            {"$push": {"calificaciones": rating}, "$set": {"promedioCalificacion": average}},
        )
        if result.modified_count:
            return {"calificacion": rating, "promedioCalificacion": average}
        logger.info("Ratings of %s changed while rating, retrying", professional["_id"])

    raise ErrorResponses.CONCURRENT_UPDATE


async def get_ratings(db, professional_id) -> list:
    professional = await find_user(db, professional_id, ROLE_PROFESSIONAL)
    return professional.get("calificaciones", [])


async def set_schedule(db, professional_id, disponibilidad: dict) -> dict:
    oid = to_object_id(professional_id)
    professional = await db[USERS].find_one_and_update(
        {"_id": oid, "role": ROLE_PROFESSIONAL},
        {"$set": {"disponibilidad": disponibilidad, "updatedAt": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    if not professional:
        raise ErrorResponses.PROFESSIONAL_NOT_FOUND
    return professional["disponibilidad"]


async def get_schedule(db, professional_id) -> dict:
    professional = await find_user(db, professional_id, ROLE_PROFESSIONAL)
    return professional.get("disponibilidad") or {"horarios": [], "estado": "disponible"}
