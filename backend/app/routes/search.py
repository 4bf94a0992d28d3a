from fastapi import APIRouter, Depends

from app.schemas.profile import FiltrosBusqueda
from profesiones.core.responses import success
from profesiones.db.database import get_db
from profesiones.service import profile_service

search_router = APIRouter(prefix="/search", tags=["Search"])


@search_router.post("/professionals")
async def search_professionals(filtros: FiltrosBusqueda, db=Depends(get_db)):
    filters = filtros.model_dump(exclude_none=True)
    return success(await profile_service.search_professionals(db, filters))
