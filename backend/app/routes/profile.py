# app/routes/profile.py
from fastapi import APIRouter, Depends, Query

from app.middleware.rbac import ensure_owner, get_current_client, get_current_professional, get_current_user
from app.schemas.profile import CalificacionSchema, ClienteUpdateSchema, ProfesionalUpdateSchema
from app.schemas.user import Disponibilidad
from profesiones.core.responses import success
from profesiones.db.database import get_db
from profesiones.service import profile_service

profile_router = APIRouter(prefix="/profiles", tags=["Profile"])


# ------------------------
# Client Profile Endpoints
# ------------------------
@profile_router.get("/cliente/{client_id}")
async def get_client_profile(client_id: str, db=Depends(get_db), user: dict = Depends(get_current_user)):
    ensure_owner(user, client_id)
    return success(await profile_service.get_client(db, client_id))


@profile_router.put("/cliente/actualizar/{client_id}")
async def update_client_profile(
    client_id: str,
    data: ClienteUpdateSchema,
    db=Depends(get_db),
    user: dict = Depends(get_current_user),
):
    ensure_owner(user, client_id)
    cliente = await profile_service.update_client(db, client_id, data.model_dump(exclude_unset=True))
    return success(cliente, "Perfil actualizado exitosamente")


# ------------------------
# Professional Profile Endpoints
# ------------------------
@profile_router.get("/profesionales")
async def list_professionals(db=Depends(get_db)):
    return success(await profile_service.list_professionals(db))


@profile_router.get("/profesionales/buscar")
async def search_by_profession(profesion: str = Query(..., min_length=1), db=Depends(get_db)):
    return success(await profile_service.search_professionals(db, {"profesion": profesion}))


@profile_router.get("/profesional/{professional_id}")
async def get_professional_profile(professional_id: str, db=Depends(get_db)):
    return success(await profile_service.get_professional(db, professional_id))


@profile_router.put("/profesional/actualizar/{professional_id}")
async def update_professional_profile(
    professional_id: str,
    data: ProfesionalUpdateSchema,
    db=Depends(get_db),
    user: dict = Depends(get_current_professional),
):
    ensure_owner(user, professional_id)
    profesional = await profile_service.update_professional(
        db, professional_id, data.model_dump(exclude_unset=True)
    )
    return success(profesional, "Perfil actualizado exitosamente")


# ------------------------
# Ratings
# ------------------------
@profile_router.post("/profesional/calificacion/{professional_id}", status_code=201)
async def rate_professional(
    professional_id: str,
    data: CalificacionSchema,
    db=Depends(get_db),
    client: dict = Depends(get_current_client),
):
    result = await profile_service.rate_professional(
        db, professional_id, client, data.puntuacion, data.comentario
    )
    return success(result, "Calificación registrada")


@profile_router.get("/profesional/calificaciones/{professional_id}")
async def get_professional_ratings(professional_id: str, db=Depends(get_db)):
    return success(await profile_service.get_ratings(db, professional_id))


# ------------------------
# Weekly schedule
# ------------------------
@profile_router.post("/profesional/horario/{professional_id}")
async def set_professional_schedule(
    professional_id: str,
    data: Disponibilidad,
    db=Depends(get_db),
    user: dict = Depends(get_current_professional),
):
    ensure_owner(user, professional_id)
    disponibilidad = await profile_service.set_schedule(db, professional_id, data.model_dump())
    return success(disponibilidad, "Horario actualizado")


@profile_router.get("/profesional/horario/{professional_id}")
async def get_professional_schedule(professional_id: str, db=Depends(get_db)):
    return success(await profile_service.get_schedule(db, professional_id))
