"""
Search Routes

GET /search?query= - Case-insensitive search over people, jobs, projects,
                     skills, events and content (5 hits per type)
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import case, func, or_, select

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import people, jobs, projects, skills, events, content
from careerhub.core.auth import get_current_user
from careerhub.services.crud import LIKE_ESCAPE, escape_like, like_pattern
from careerhub.schemas.schemas import SearchResponse, SearchResult

router = APIRouter(prefix="/search", tags=["Search"])

HITS_PER_TYPE = 5

# entity_type -> (table, title column, subtitle column, extra searched columns)
SEARCH_TARGETS = [
    ("person", people, people.c.name, people.c.company, (people.c.email, people.c.company, people.c.role)),
    ("job", jobs, jobs.c.title, jobs.c.company, (jobs.c.company,)),
    ("project", projects, projects.c.name, projects.c.status, (projects.c.description,)),
    ("skill", skills, skills.c.name, skills.c.proficiency, (skills.c.category,)),
    ("event", events, events.c.title, events.c.location, (events.c.description,)),
    ("content", content, content.c.title, content.c.platform, (content.c.description,)),
]


def _relevance(title_column, term: str):
    """0 exact title match, 1 title prefix, 2 anything else."""
    lowered = func.lower(title_column)
    return case(
        (lowered == term, 0),
        (lowered.like(f"{escape_like(term)}%", escape=LIKE_ESCAPE), 1),
        else_=2,
    )


@router.get("", response_model=SearchResponse)
async def search(query: str = Query(""), user: dict = Depends(get_current_user)):
    term = query.strip().lower()
    if not term:
        raise HTTPException(status_code=400, detail="Search query is required")
    pattern = like_pattern(term)

    results = []
    with get_db_session() as db:
        for entity_type, table, title, subtitle, extra in SEARCH_TARGETS:
            stmt = (
                select(table.c.id, title.label("title"), subtitle.label("subtitle"),
                       _relevance(title, term).label("relevance"))
                .where(
                    table.c.workspace_id == user["workspace_id"],
                    or_(*[func.lower(col).like(pattern, escape=LIKE_ESCAPE) for col in (title, *extra)]),
                )
                .order_by("relevance", func.lower(title), table.c.id)
                .limit(HITS_PER_TYPE)
            )
            for row in fetch_all(db, stmt):
                results.append((row["relevance"], SearchResult(
                    entity_type=entity_type,
                    id=row["id"],
                    title=row["title"],
                    subtitle=row["subtitle"] or "",
                )))

    # stable sort keeps the per-type order within each relevance tier
    ranked = [hit for _, hit in sorted(results, key=lambda pair: pair[0])]
    return SearchResponse(results=ranked, total_count=len(ranked))
