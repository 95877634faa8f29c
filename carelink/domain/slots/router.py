"""Slot router - public search for open slots"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.validators import to_naive_utc
from .schemas import SlotResponse
from .service import SlotService

router = APIRouter(prefix="/slots", tags=["Slots"])


def get_slot_service(db: Session = Depends(get_db)) -> SlotService:
    """Dependency injection for SlotService"""
    return SlotService(db)


@router.get("", response_model=list[SlotResponse])
async def get_open_slots(
    department_id: Optional[int] = Query(None),
    start_at: Optional[datetime] = Query(None),
    end_at: Optional[datetime] = Query(None),
    service: SlotService = Depends(get_slot_service),
):
    """Open slots, earliest first"""
    slots = service.get_open_slots(department_id, to_naive_utc(start_at), to_naive_utc(end_at))
    return [SlotResponse.from_model(s) for s in slots]
