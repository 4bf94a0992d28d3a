# profesiones/service/availability_service.py
"""Slot availability and the appointment lifecycle.

Slots are derived from a professional's weekly ``disponibilidad.horarios``
windows, cut into ``settings.SLOT_MINUTES`` increments on a grid anchored at
midnight. Each active (pending/confirmed) appointment occupies one slot-sized
interval starting at its ``time``.

Double booking is guarded at the store level by ``appointment_slots``: one
document per (professional, date, time) whose ``_id`` is that key. Inserting
it is the atomic claim; it is removed whenever the appointment stops being
active.
"""
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from profesiones.core.config import settings
from profesiones.core.error_messages import ErrorResponses
from profesiones.db.database import APPOINTMENT_SLOTS, APPOINTMENTS, USERS
from profesiones.serialize import serialize_doc, serialize_list, to_object_id
from profesiones.service.auth_service import ROLE_CLIENT, ROLE_PROFESSIONAL
from profesiones.service.profile_service import find_user

logger = logging.getLogger("profesiones.appointments")

WEEKDAYS = ["lunes", "martes", "miercoles", "jueves", "viernes", "sabado", "domingo"]

PENDING = "pending"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"
COMPLETED = "completed"
STATUSES = (PENDING, CONFIRMED, CANCELLED, COMPLETED)
ACTIVE_STATUSES = (PENDING, CONFIRMED)

ALLOWED_TRANSITIONS = {
    PENDING: {CONFIRMED, CANCELLED},
    CONFIRMED: {CANCELLED, COMPLETED},
}
# Transitions only the appointment's professional may perform
PROFESSIONAL_TRANSITIONS = {CONFIRMED, COMPLETED}


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def local_now() -> datetime:
    """Current wall-clock time in the marketplace timezone, as a naive datetime."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)


def compute_slots(
    horarios: Iterable[dict],
    dia: str,
    taken_times: Iterable[str],
    slot_minutes: int,
    not_before: Optional[int] = None,
) -> List[str]:
    """Open slot start times for one weekday.

    ``not_before`` is a minute-of-day; slots starting earlier are dropped.
    Window starts are rounded up to a multiple of ``slot_minutes``, so two
    slots either coincide or are disjoint.
    """
    taken = [to_minutes(t) for t in taken_times]
    slots = set()
    for horario in horarios:
        if horario.get("dia") != dia:
            continue
        start, end = to_minutes(horario["horaInicio"]), to_minutes(horario["horaFin"])
        current = -(-start // slot_minutes) * slot_minutes
        while current + slot_minutes <= end:
            overlaps = any(current < t + slot_minutes and t < current + slot_minutes for t in taken)
            if not overlaps and (not_before is None or current >= not_before):
                slots.add(current)
            current += slot_minutes
    return [format_minutes(s) for s in sorted(slots)]


def _slot_key(professional_id: str, day: str, time: str) -> str:
    return f"{professional_id}:{day}:{time}"


async def _taken_times(db, professional_id: str, day: str) -> List[str]:
    cursor = db[APPOINTMENTS].find(
        {"professional": professional_id, "date": day, "status": {"$in": list(ACTIVE_STATUSES)}}
    )
    return [a["time"] for a in await cursor.to_list(length=None)]


async def _slots_for(db, professional: dict, day: date, now: Optional[datetime]) -> List[str]:
    now = now or local_now()
    today = now.date()
    not_before = None
    if not settings.ALLOW_PAST_DATES:
        if day < today:
            return []
        if day == today:
            not_before = now.hour * 60 + now.minute

    disponibilidad = professional.get("disponibilidad") or {}
    if disponibilidad.get("estado") == "no_disponible":
        return []

    horarios = disponibilidad.get("horarios") or []
    dia = weekday_name(day)
    if not any(h.get("dia") == dia for h in horarios):
        return []

    professional_id = str(professional["_id"])
    taken = await _taken_times(db, professional_id, day.isoformat())
    return compute_slots(horarios, dia, taken, settings.SLOT_MINUTES, not_before)


async def get_available_slots(db, professional_id, day: date, now: Optional[datetime] = None) -> List[str]:
    professional = await find_user(db, professional_id, ROLE_PROFESSIONAL)
    return await _slots_for(db, professional, day, now)


async def _release_slot(db, appointment: dict) -> None:
    key = _slot_key(appointment["professional"], appointment["date"], appointment["time"])
    await db[APPOINTMENT_SLOTS].delete_one({"_id": key, "appointment": str(appointment["_id"])})


async def create_appointment(
    db,
    client: dict,
    professional_id,
    day: date,
    time: str,
    reason: str,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict:
    if not reason or not reason.strip():
        raise ErrorResponses.REASON_REQUIRED

    professional = await find_user(db, professional_id, ROLE_PROFESSIONAL)
    professional_id = str(professional["_id"])

    # Never trust the slot list the client rendered
    if time not in await _slots_for(db, professional, day, now):
        raise ErrorResponses.SLOT_UNAVAILABLE

    appointment_id = ObjectId()
    created = datetime.utcnow()
    try:
        await db[APPOINTMENT_SLOTS].insert_one({
            "_id": _slot_key(professional_id, day.isoformat(), time),
            "appointment": str(appointment_id),
            "createdAt": created,
        })
    except DuplicateKeyError:
        logger.info("Slot %s %s for %s claimed concurrently", day, time, professional_id)
        raise ErrorResponses.SLOT_UNAVAILABLE

    appointment = {
        "_id": appointment_id,
        "client": str(client["_id"]),
        "professional": professional_id,
        "date": day.isoformat(),
        "time": time,
        "reason": reason.strip(),
        "notes": notes,
        "status": PENDING,
        "createdAt": created,
        "updatedAt": created,
    }
    try:
        await db[APPOINTMENTS].insert_one(appointment)
    except Exception:
        await _release_slot(db, appointment)
        raise

    await db[USERS].update_one({"_id": client["_id"]}, {"$push": {"historialCitas": str(appointment_id)}})
    logger.info("Appointment %s booked with %s on %s %s", appointment_id, professional_id, day, time)
    return serialize_doc(appointment)


async def _find_appointment(db, appointment_id) -> dict:
    appointment = await db[APPOINTMENTS].find_one({"_id": to_object_id(appointment_id)})
    if not appointment:
        raise ErrorResponses.APPOINTMENT_NOT_FOUND
    return appointment


def _is_participant(appointment: dict, user: dict) -> bool:
    return str(user["_id"]) in (appointment["client"], appointment["professional"])


async def get_appointment(db, appointment_id, user: dict) -> dict:
    appointment = await _find_appointment(db, appointment_id)
    if not _is_participant(appointment, user):
        raise ErrorResponses.FORBIDDEN
    return serialize_doc(appointment)


async def update_appointment_status(db, appointment_id, new_status: str, user: dict) -> dict:
    appointment = await _find_appointment(db, appointment_id)
    if not _is_participant(appointment, user):
        raise ErrorResponses.FORBIDDEN

    current = appointment["status"]
    if new_status not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ErrorResponses.INVALID_TRANSITION
    if new_status in PROFESSIONAL_TRANSITIONS and str(user["_id"]) != appointment["professional"]:
        raise ErrorResponses.PROFESSIONAL_ONLY

    updated = await db[APPOINTMENTS].find_one_and_update(
        {"_id": appointment["_id"], "status": current},
        {"$set": {"status": new_status, "updatedAt": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise ErrorResponses.CONCURRENT_UPDATE

    if new_status not in ACTIVE_STATUSES:
        await _release_slot(db, updated)
    logger.info("Appointment %s: %s -> %s", appointment["_id"], current, new_status)
    return serialize_doc(updated)


async def update_appointment(db, appointment_id, changes: dict, user: dict) -> dict:
    """Edit reason/notes and route a status change through the state machine."""
    appointment = await _find_appointment(db, appointment_id)
    if not _is_participant(appointment, user):
        raise ErrorResponses.FORBIDDEN

    fields = {}
    if changes.get("notes") is not None:
        fields["notes"] = changes["notes"]
    if changes.get("reason") is not None:
        if not changes["reason"].strip():
            raise ErrorResponses.REASON_REQUIRED
        fields["reason"] = changes["reason"].strip()

    new_status = changes.get("status")
    if new_status is not None and new_status != appointment["status"]:
        result = await update_appointment_status(db, appointment["_id"], new_status, user)
    elif new_status is not None and not fields:
        raise ErrorResponses.INVALID_TRANSITION
    else:
        result = serialize_doc(appointment)

    if fields:
        fields["updatedAt"] = datetime.utcnow()
        updated = await db[APPOINTMENTS].find_one_and_update(
            {"_id": appointment["_id"]},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        result = serialize_doc(updated)
    return result


async def delete_appointment(db, appointment_id, user: dict) -> None:
    appointment = await _find_appointment(db, appointment_id)
    if not _is_participant(appointment, user):
        raise ErrorResponses.FORBIDDEN

    await db[APPOINTMENTS].delete_one({"_id": appointment["_id"]})
    await _release_slot(db, appointment)
    await db[USERS].update_one(
        {"_id": to_object_id(appointment["client"])},
        {"$pull": {"historialCitas": str(appointment["_id"])}},
    )
    logger.info("Appointment %s deleted by %s", appointment["_id"], user["_id"])


async def _list(db, query: dict) -> list:
    cursor = db[APPOINTMENTS].find(query).sort([("date", ASCENDING), ("time", ASCENDING)])
    return serialize_list(await cursor.to_list(length=None))


async def list_for_user(db, user: dict) -> list:
    field = "client" if user["role"] == ROLE_CLIENT else "professional"
    return await _list(db, {field: str(user["_id"])})


async def list_for_client(db, client_id: str, user: dict) -> list:
    if str(user["_id"]) != client_id:
        raise ErrorResponses.FORBIDDEN
    return await _list(db, {"client": client_id})


async def list_for_professional(db, professional_id: str, user: dict) -> list:
    if str(user["_id"]) != professional_id:
        raise ErrorResponses.FORBIDDEN
    return await _list(db, {"professional": professional_id})


async def complete_past_appointments(db, now: Optional[datetime] = None) -> int:
    """Move confirmed appointments dated before today to completed."""
    today = (now or local_now()).date().isoformat()
    query = {"status": CONFIRMED, "date": {"$lt": today}}
    past = await db[APPOINTMENTS].find(query).to_list(length=None)
    if not past:
        return 0

    ids = [a["_id"] for a in past]
    result = await db[APPOINTMENTS].update_many(
        {"_id": {"$in": ids}, "status": CONFIRMED},
        {"$set": {"status": COMPLETED, "updatedAt": datetime.utcnow()}},
    )
    for appointment in past:
        await _release_slot(db, appointment)
    logger.info("Marked %s past appointments as completed", result.modified_count)
    return result.modified_count
