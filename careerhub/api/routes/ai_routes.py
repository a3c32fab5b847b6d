"""
AI Assistant Routes

POST /ai/meeting-brief - Brief before meeting a person, built from their record
POST /ai/draft-content - Draft a LinkedIn post, article or email
POST /ai/career-narrative - Bio, LinkedIn summary, resume summary, cover letter intro or elevator pitch
POST /ai/chat - One chat turn about the user's career

Outputs are kept in MongoDB `ai_outputs`.
"""

import logging
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import or_, and_, select

from careerhub.db.mongodb import get_collection, COLLECTIONS
from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import people, interactions, feedback, relationships, ENTITY_TABLES
from careerhub.core.auth import get_current_user
from careerhub.services.ai_client import get_ai_client, ai_configured
from careerhub.services.career_context import assemble_career_context
from careerhub.services.crud import require_row, get_row
from careerhub.utils.dates import utcnow
from careerhub.schemas.schemas import (
    MeetingBriefRequest, MeetingBriefResponse, DraftContentRequest, DraftContentResponse,
    CareerNarrativeRequest, CareerNarrativeResponse, ChatRequest, ChatResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI Assistant"])

RECENT_LIMIT = 10

# column holding the display name for each entity type
_DISPLAY_COLUMNS = {"person": "name", "project": "name", "skill": "name", "institution": "name"}


def _require_configured() -> None:
    if not ai_configured():
        raise HTTPException(status_code=400, detail="AI assistant is not configured")


def _store_output(workspace_id: int, kind: str, text: str, **context) -> None:
    """Keep the generated text. Failures are logged, never raised."""
    try:
        get_collection(COLLECTIONS["ai_outputs"]).insert_one({
            "workspace_id": workspace_id,
            "kind": kind,
            "output": text,
            "context": context,
            "created_at": utcnow(),
        })
    except Exception as e:
        logger.warning("Could not store AI output: %s", e)


def _relationship_lines(db, person_id: int, workspace_id: int) -> list:
    edges = fetch_all(db, select(relationships).where(
        relationships.c.workspace_id == workspace_id,
        or_(
            and_(relationships.c.source_type == "person", relationships.c.source_id == person_id),
            and_(relationships.c.target_type == "person", relationships.c.target_id == person_id),
        ),
    ))
    lines = []
    for edge in edges:
        if edge["source_type"] == "person" and edge["source_id"] == person_id:
            other_type, other_id = edge["target_type"], edge["target_id"]
        else:
            other_type, other_id = edge["source_type"], edge["source_id"]
        other = get_row(db, ENTITY_TABLES[other_type], other_id, workspace_id) if other_type in ENTITY_TABLES else None
        if other is None:
            continue
        name = other.get(_DISPLAY_COLUMNS.get(other_type, "title"))
        label = f" ({edge['relationship_label']})" if edge["relationship_label"] else ""
        lines.append(f"{other_type} {name}{label}")
    return lines


@router.post("/meeting-brief", response_model=MeetingBriefResponse)
async def meeting_brief(request: MeetingBriefRequest, user: dict = Depends(get_current_user)):
    """
    Generate a brief before meeting someone.

    Context: the person, their recent interactions and feedback, and their
    relationships.
    """
    ws = user["workspace_id"]
    with get_db_session() as db:
        person = require_row(db, people, request.person_id, ws, "Person")
        recent = fetch_all(db, (
            select(interactions)
            .where(interactions.c.person_id == person["id"], interactions.c.workspace_id == ws)
            .order_by(interactions.c.interaction_date.desc(), interactions.c.id.desc())
            .limit(RECENT_LIMIT)
        ))
        given = fetch_all(db, (
            select(feedback)
            .where(feedback.c.person_id == person["id"], feedback.c.workspace_id == ws)
            .order_by(feedback.c.feedback_date.desc())
            .limit(RECENT_LIMIT)
        ))
        links = _relationship_lines(db, person["id"], ws)

    _require_configured()
    brief = get_ai_client().meeting_brief(person, recent, given, links)
    _store_output(ws, "meeting_brief", brief, person_id=person["id"])
    return MeetingBriefResponse(brief=brief, person_name=person["name"])


@router.post("/draft-content", response_model=DraftContentResponse)
async def draft_content(request: DraftContentRequest, user: dict = Depends(get_current_user)):
    _require_configured()
    draft = get_ai_client().draft_content(request.content_type, request.topic, request.context_notes)
    _store_output(user["workspace_id"], "draft_content", draft,
                  content_type=request.content_type, topic=request.topic)
    return DraftContentResponse(draft=draft, content_type=request.content_type)


@router.post("/career-narrative", response_model=CareerNarrativeResponse)
async def career_narrative(request: CareerNarrativeRequest, user: dict = Depends(get_current_user)):
    """
    Write a career narrative from the whole workspace: profile, jobs, skills,
    projects, goals, network, achievements and learning.
    """
    _require_configured()
    ws = user["workspace_id"]
    with get_db_session() as db:
        context = assemble_career_context(db, ws)

    narrative = get_ai_client().career_narrative(request.narrative_type, request.tone, context, request.target_role)
    _store_output(ws, "career_narrative", narrative, narrative_type=request.narrative_type,
                  tone=request.tone, target_role=request.target_role)
    return CareerNarrativeResponse(narrative=narrative, narrative_type=request.narrative_type, tone=request.tone)


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, user: dict = Depends(get_current_user)):
    """
    Answer one message. The client keeps the conversation and sends the
    earlier turns back as conversation_history.
    """
    _require_configured()
    ws = user["workspace_id"]
    with get_db_session() as db:
        context = assemble_career_context(db, ws)

    history = [turn.model_dump() for turn in request.conversation_history]
    reply = get_ai_client().chat(request.message, history, context)
    _store_output(ws, "chat", reply, message=request.message, turns=len(history))
    return ChatResponse(reply=reply)
