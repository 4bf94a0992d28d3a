from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.user import Direccion, DireccionFavorita, Disponibilidad, MetodoPago, Servicio


# ------------------------
# Profile updates (email, role and password are not editable here)
# ------------------------
class ClienteUpdateSchema(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1)
    apellido: Optional[str] = Field(None, min_length=1)
    telefono: Optional[str] = None
    direccion: Optional[Direccion] = None
    direccionesFavoritas: Optional[List[DireccionFavorita]] = None
    metodoPago: Optional[List[MetodoPago]] = None


class ProfesionalUpdateSchema(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1)
    apellido: Optional[str] = Field(None, min_length=1)
    telefono: Optional[str] = None
    profesion: Optional[str] = Field(None, min_length=1)
    especialidades: Optional[List[str]] = None
    experiencia: Optional[int] = Field(None, ge=0)
    servicios: Optional[List[Servicio]] = None
    radio_cobertura: Optional[float] = Field(None, ge=0)
    disponibilidad: Optional[Disponibilidad] = None


class CalificacionSchema(BaseModel):
    puntuacion: int
    comentario: Optional[str] = None


# ------------------------
# Search
# ------------------------
class UbicacionFiltro(BaseModel):
    lat: float
    lng: float
    radio: float


class DisponibilidadFiltro(BaseModel):
    dia: Optional[str] = None
    hora: Optional[str] = Field(None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")


class FiltrosBusqueda(BaseModel):
    profesion: Optional[str] = None
    especialidad: Optional[str] = None
    ubicacion: Optional[UbicacionFiltro] = None  # accepted, not applied: users carry no location
    calificacionMinima: Optional[float] = Field(None, ge=0, le=5)
    disponibilidad: Optional[DisponibilidadFiltro] = None
    precioMaximo: Optional[float] = Field(None, ge=0)
