from datetime import date, datetime

import pytest
from fastapi import HTTPException

from profesiones.service import auth_service, availability_service
from profesiones.service.availability_service import (
    compute_slots,
    create_appointment,
    get_available_slots,
    to_minutes,
    update_appointment_status,
)

# Sunday morning; the next day is a Monday
NOW = datetime(2026, 10, 18, 8, 0)
MONDAY = date(2026, 10, 19)
LUNES = [{"dia": "lunes", "horaInicio": "09:00", "horaFin": "12:00"}]


def test_compute_slots_excludes_taken_slot():
    assert compute_slots(LUNES, "lunes", ["10:00"], 30) == ["09:00", "09:30", "10:30", "11:00", "11:30"]


def test_compute_slots_only_full_slots_fit():
    horarios = [{"dia": "martes", "horaInicio": "09:00", "horaFin": "10:45"}]

    assert compute_slots(horarios, "martes", [], 30) == ["09:00", "09:30", "10:00"]
    assert compute_slots(horarios, "martes", [], 45) == ["09:00", "09:45"]


def test_compute_slots_merges_windows_of_the_same_day():
    horarios = [
        {"dia": "lunes", "horaInicio": "14:00", "horaFin": "15:00"},
        {"dia": "lunes", "horaInicio": "09:00", "horaFin": "10:00"},
        {"dia": "martes", "horaInicio": "09:00", "horaFin": "18:00"},
        {"dia": "lunes", "horaInicio": "09:30", "horaFin": "10:30"},
    ]

    assert compute_slots(horarios, "lunes", [], 30) == ["09:00", "09:30", "10:00", "14:00", "14:30"]


def test_compute_slots_off_grid_booking_blocks_both_neighbours():
    assert compute_slots(LUNES, "lunes", ["10:15"], 30) == ["09:00", "09:30", "11:00", "11:30"]


def test_compute_slots_rounds_window_starts_onto_the_grid():
    horarios = [
        {"dia": "lunes", "horaInicio": "09:00", "horaFin": "10:00"},
        {"dia": "lunes", "horaInicio": "09:15", "horaFin": "10:15"},
    ]

    assert compute_slots(horarios, "lunes", [], 30) == ["09:00", "09:30"]


def test_compute_slots_not_before():
    assert compute_slots(LUNES, "lunes", [], 30, not_before=to_minutes("10:10")) == ["10:30", "11:00", "11:30"]


def test_compute_slots_no_window_for_day():
    assert compute_slots(LUNES, "domingo", [], 30) == []


@pytest.mark.parametrize("taken", [[], ["09:00"], ["09:30", "11:30"], ["09:45", "10:50"], ["08:45", "11:59"]])
def test_compute_slots_never_overlaps_taken(taken):
    slots = compute_slots(LUNES, "lunes", taken, 30)

    for slot in slots:
        start = to_minutes(slot)
        for t in taken:
            assert not (start < to_minutes(t) + 30 and to_minutes(t) < start + 30)


async def _make_users(db, disponibilidad=None):
    pro = await auth_service.register(db, "profesional", {
        "email": "luis@correo.com.uy",
        "password": "secreto123",
        "nombre": "Luis",
        "apellido": "Suárez",
        "profesion": "Electricista",
        "disponibilidad": disponibilidad or {"horarios": LUNES, "estado": "disponible"},
    })
    cliente = await auth_service.register(db, "cliente", {
        "email": "ana@correo.com.uy",
        "password": "secreto123",
        "nombre": "Ana",
        "apellido": "Pérez",
    })
    pro_doc = await db.users.find_one({"email": "luis@correo.com.uy"})
    cliente_doc = await db.users.find_one({"email": "ana@correo.com.uy"})
    return pro, pro_doc, cliente_doc


async def test_confirmed_appointment_removes_its_slot(db):
    pro, pro_doc, cliente = await _make_users(db)
    appointment = await create_appointment(db, cliente, pro["_id"], MONDAY, "10:00", "Revisión", now=NOW)
    await update_appointment_status(db, appointment["_id"], "confirmed", pro_doc)

    slots = await get_available_slots(db, pro["_id"], MONDAY, now=NOW)

    assert slots == ["09:00", "09:30", "10:30", "11:00", "11:30"]


async def test_pending_blocks_and_cancelled_frees(db):
    pro, pro_doc, cliente = await _make_users(db)
    appointment = await create_appointment(db, cliente, pro["_id"], MONDAY, "09:00", "Revisión", now=NOW)

    assert "09:00" not in await get_available_slots(db, pro["_id"], MONDAY, now=NOW)

    await update_appointment_status(db, appointment["_id"], "cancelled", cliente)

    assert "09:00" in await get_available_slots(db, pro["_id"], MONDAY, now=NOW)


async def test_past_date_has_no_slots(db):
    pro, _, _ = await _make_users(db)

    assert await get_available_slots(db, pro["_id"], date(2026, 10, 12), now=NOW) == []


async def test_today_drops_elapsed_slots(db):
    pro, _, _ = await _make_users(db)

    slots = await get_available_slots(db, pro["_id"], MONDAY, now=datetime(2026, 10, 19, 10, 5))

    assert slots == ["10:30", "11:00", "11:30"]


async def test_weekday_without_window(db):
    pro, _, _ = await _make_users(db)

    assert await get_available_slots(db, pro["_id"], date(2026, 10, 20), now=NOW) == []


async def test_unavailable_professional_has_no_slots(db):
    pro, _, _ = await _make_users(db, {"horarios": LUNES, "estado": "no_disponible"})

    assert await get_available_slots(db, pro["_id"], MONDAY, now=NOW) == []


async def test_busy_professional_still_offers_slots(db):
    pro, _, _ = await _make_users(db, {"horarios": LUNES, "estado": "ocupado"})

    assert len(await get_available_slots(db, pro["_id"], MONDAY, now=NOW)) == 6


async def test_unknown_professional(db):
    with pytest.raises(HTTPException) as exc:
        await get_available_slots(db, "64b7f0c2a1b2c3d4e5f60718", MONDAY, now=NOW)

    assert exc.value.status_code == 404


async def test_slots_for_a_client_id_are_not_found(db):
    _, _, cliente = await _make_users(db)

    with pytest.raises(HTTPException) as exc:
        await get_available_slots(db, str(cliente["_id"]), MONDAY, now=NOW)

    assert exc.value.status_code == 404


async def test_overlapping_windows_cannot_be_double_booked_on_stale_read(db, monkeypatch):
    pro, _, cliente = await _make_users(db, {"horarios": [
        {"dia": "lunes", "horaInicio": "09:00", "horaFin": "10:00"},
        {"dia": "lunes", "horaInicio": "09:15", "horaFin": "10:15"},
    ]})
    await create_appointment(db, cliente, pro["_id"], MONDAY, "09:00", "Revisión", now=NOW)

    async def nothing_taken(db, professional_id, day):
        return []

    monkeypatch.setattr(availability_service, "_taken_times", nothing_taken)

    for time in ("09:00", "09:15"):
        with pytest.raises(HTTPException) as exc:
            await create_appointment(db, cliente, pro["_id"], MONDAY, time, "Otra", now=NOW)
        assert exc.value.status_code == 409

    assert await db.appointments.count_documents({}) == 1
