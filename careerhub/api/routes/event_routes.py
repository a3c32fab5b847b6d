"""
Event Routes

POST /events - Record a conference, meetup or other event
GET /events - List events (type filter, event_date window)
GET /events/{event_id}
PUT /events/{event_id}
DELETE /events/{event_id}
"""

from datetime import date
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import events
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, delete_entity_links
)
from careerhub.schemas.schemas import EventCreate, EventUpdate, EventResponse, EventType, MessageResponse

router = APIRouter(prefix="/events", tags=["Events"])


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(event: EventCreate, user: dict = Depends(get_current_user)):
    if event.event_end_date and event.event_end_date < event.event_date:
        raise HTTPException(status_code=400, detail="event_end_date must not be before event_date")
    with get_db_session() as db:
        row = insert_row(db, events, user["workspace_id"], event.model_dump())
    return EventResponse(**row)


@router.get("", response_model=List[EventResponse])
async def list_events(
    event_type: Optional[EventType] = Query(None),
    start_date: Optional[date] = Query(None, description="Events on or after this date"),
    end_date: Optional[date] = Query(None, description="Events on or before this date"),
    user: dict = Depends(get_current_user)
):
    stmt = select(events).where(events.c.workspace_id == user["workspace_id"])
    if event_type:
        stmt = stmt.where(events.c.event_type == event_type.value)
    if start_date:
        stmt = stmt.where(events.c.event_date >= start_date)
    if end_date:
        stmt = stmt.where(events.c.event_date <= end_date)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(events.c.event_date.desc()))
    return [EventResponse(**r) for r in rows]


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, events, event_id, user["workspace_id"], "Event")
    return EventResponse(**row)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(event_id: int, update: EventUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("title", "event_date"))
    with get_db_session() as db:
        row = update_row(db, events, event_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return EventResponse(**row)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(event_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, events, event_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Event not found")
        delete_entity_links(db, "event", event_id, user["workspace_id"])
    return MessageResponse(message="Event deleted successfully")
