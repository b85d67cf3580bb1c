"""Court domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...models import Court


class Slot(BaseModel):
    startTime: str
    endTime: str
    available: bool = True


class SlotRef(BaseModel):
    """A slot as referenced by bookings and payments (no availability flag)"""

    startTime: str
    endTime: str


class CourtCreate(BaseModel):
    name: str
    sportType: Optional[str] = None
    image: Optional[str] = None
    price: float = 0
    slots: list[Slot] = []


class CourtUpdate(BaseModel):
    name: Optional[str] = None
    sportType: Optional[str] = None
    image: Optional[str] = None
    price: Optional[float] = None
    slots: Optional[list[Slot]] = None


class CourtResponse(BaseModel):
    id: int
    name: str
    sportType: Optional[str] = None
    image: Optional[str] = None
    price: float
    slots: list[Slot]
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, court: Court) -> "CourtResponse":
        return cls(
            id=court.id,
            name=court.name,
            sportType=court.sport_type,
            image=court.image,
            price=court.price or 0,
            slots=court.slots or [],
            created_at=court.created_at,
        )


class CourtPage(BaseModel):
    courts: list[CourtResponse]
    totalPages: int
    currentPage: int
