from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field


class AppointmentCreate(BaseModel):
    professional: str
    date: date
    time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    reason: str
    notes: Optional[str] = None
    client: Optional[str] = None  # ignored; the client is the authenticated user


class AppointmentUpdate(BaseModel):
    status: Optional[Literal["pending", "confirmed", "cancelled", "completed"]] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
