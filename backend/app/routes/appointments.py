from datetime import date

from fastapi import APIRouter, Depends

from app.middleware.rbac import get_current_client, get_current_user
from app.schemas.appointments import AppointmentCreate, AppointmentUpdate
from profesiones.core.responses import success
from profesiones.db.database import get_db
from profesiones.service import availability_service

appointment_router = APIRouter(prefix="/appointments", tags=["Appointments"])


@appointment_router.post("", status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    db=Depends(get_db),
    client: dict = Depends(get_current_client),
):
    appointment = await availability_service.create_appointment(
        db, client, data.professional, data.date, data.time, data.reason, data.notes
    )
    return success(appointment, "Cita agendada correctamente")


# Current user's appointments (as client or as professional)
@appointment_router.get("")
async def get_my_appointments(db=Depends(get_db), user: dict = Depends(get_current_user)):
    return success(await availability_service.list_for_user(db, user))


@appointment_router.get("/available-slots/{professional_id}/{day}")
async def get_available_slots(professional_id: str, day: date, db=Depends(get_db)):
    return success(await availability_service.get_available_slots(db, professional_id, day))


@appointment_router.get("/client/{client_id}")
async def get_client_appointments(client_id: str, db=Depends(get_db), user: dict = Depends(get_current_user)):
    return success(await availability_service.list_for_client(db, client_id, user))


@appointment_router.get("/professional/{professional_id}")
async def get_professional_appointments(
    professional_id: str, db=Depends(get_db), user: dict = Depends(get_current_user)
):
    return success(await availability_service.list_for_professional(db, professional_id, user))


@appointment_router.get("/{appointment_id}")
async def get_appointment(appointment_id: str, db=Depends(get_db), user: dict = Depends(get_current_user)):
    return success(await availability_service.get_appointment(db, appointment_id, user))


@appointment_router.put("/{appointment_id}")
async def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    db=Depends(get_db),
    user: dict = Depends(get_current_user),
):
    appointment = await availability_service.update_appointment(
        db, appointment_id, data.model_dump(exclude_unset=True), user
    )
    return success(appointment, "Cita actualizada")


@appointment_router.delete("/{appointment_id}")
async def delete_appointment(appointment_id: str, db=Depends(get_db), user: dict = Depends(get_current_user)):
    await availability_service.delete_appointment(db, appointment_id, user)
    return success(message="Cita eliminada")
