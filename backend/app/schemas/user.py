from typing import Any, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from profesiones.service.availability_service import WEEKDAYS

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# ------------------------
# Shared sub-documents
# ------------------------
class Direccion(BaseModel):
    calle: Optional[str] = None
    numero: Optional[str] = None
    ciudad: Optional[str] = None
    codigoPostal: Optional[str] = None


class Ubicacion(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(..., min_length=2, max_length=2)  # [lng, lat]


class DireccionFavorita(BaseModel):
    nombre: str
    ubicacion: Ubicacion


class MetodoPago(BaseModel):
    tipo: Literal["tarjeta", "efectivo"]
    detalles: Optional[Any] = None


class Horario(BaseModel):
    dia: str
    horaInicio: str = Field(..., pattern=HHMM_PATTERN)
    horaFin: str = Field(..., pattern=HHMM_PATTERN)

    @field_validator("dia")
    @classmethod
    def valid_day(cls, v: str) -> str:
        if v not in WEEKDAYS:
            raise ValueError(f"dia must be one of {', '.join(WEEKDAYS)}")
        return v

    @model_validator(mode="after")
    def start_before_end(self):
        if self.horaInicio >= self.horaFin:
            raise ValueError("horaInicio must be earlier than horaFin")
        return self


class Disponibilidad(BaseModel):
    horarios: List[Horario] = []
    estado: Literal["disponible", "ocupado", "no_disponible"] = "disponible"


class Servicio(BaseModel):
    nombre: str
    descripcion: str = ""
    precio: float = Field(..., ge=0)
    duracionEstimada: int = Field(..., gt=0)  # minutes


# ------------------------
# Auth
# ------------------------
class BaseRegisterSchema(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    nombre: str = Field(..., min_length=1)
    apellido: str = Field(..., min_length=1)
    telefono: Optional[str] = None


class ClienteRegisterSchema(BaseRegisterSchema):
    direccion: Optional[Direccion] = None
    direccionesFavoritas: List[DireccionFavorita] = []
    metodoPago: List[MetodoPago] = []


class ProfesionalRegisterSchema(BaseRegisterSchema):
    profesion: str = Field(..., min_length=1)
    especialidades: List[str] = []
    experiencia: int = Field(0, ge=0)
    servicios: List[Servicio] = []
    radio_cobertura: float = Field(0, ge=0)  # km
    disponibilidad: Optional[Disponibilidad] = None


class LoginSchema(BaseModel):
    email: EmailStr
    password: str


class ForgotPasswordSchema(BaseModel):
    email: EmailStr


class ResetPasswordSchema(BaseModel):
    token: str
    newPassword: str = Field(..., min_length=6)
