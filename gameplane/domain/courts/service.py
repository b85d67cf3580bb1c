"""Court service - Business logic for court inventory"""

import logging
import math
from typing import Optional

from sqlalchemy.orm import Session

from .repository import CourtRepository
from .schemas import CourtCreate, CourtPage, CourtResponse, CourtUpdate

logger = logging.getLogger(__name__)


class CourtService:
    """Service layer for court business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CourtRepository()

    def list_courts(self, search: Optional[str] = None) -> list[CourtResponse]:
        return [CourtResponse.from_model(c) for c in self.repo.get_courts(self.db, search)]

    def paginate_courts(self, page: int, limit: int, search: Optional[str] = None) -> CourtPage:
        courts, total = self.repo.get_courts_page(self.db, page, limit, search)
        return CourtPage(
            courts=[CourtResponse.from_model(c) for c in courts],
            totalPages=math.ceil(total / limit),
            currentPage=page,
        )

    def get_court(self, court_id: int) -> Optional[CourtResponse]:
        court = self.repo.get_court_by_id(self.db, court_id)
        return CourtResponse.from_model(court) if court else None

    def create_court(self, data: CourtCreate) -> dict:
        court = self.repo.create_court(
            self.db,
            name=data.name,
            sport_type=data.sportType,
            image=data.image,
            price=data.price,
            slots=[s.model_dump() for s in data.slots],
        )
        logger.info(f"🏟️ Court created: {court.name} (id={court.id})")
        return {"insertedId": court.id}

    def update_court(self, court_id: int, data: CourtUpdate) -> dict:
        court = self.repo.get_court_by_id(self.db, court_id)
        if not court:
            return {"modifiedCount": 0}

        updates = {}
        if data.name is not None:
            updates["name"] = data.name
        if data.sportType is not None:
            updates["sport_type"] = data.sportType
        if data.image is not None:
            updates["image"] = data.image
        if data.price is not None:
            updates["price"] = data.price
        if data.slots is not None:
            updates["slots"] = [s.model_dump() for s in data.slots]

        return {"modifiedCount": self.repo.update_court(self.db, court, **updates)}

    def delete_court(self, court_id: int) -> dict:
        deleted = self.repo.delete_court(self.db, court_id)
        if deleted:
            logger.info(f"🗑️ Court {court_id} deleted")
        return {"deletedCount": deleted}
