"""
Workspace-scoped row helpers shared by the entity routes.

Every career and resume table has an integer `id` and a `workspace_id`;
these helpers never touch a row outside the caller's workspace.
"""

from typing import Iterable, Optional

from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy import Table, and_, delete, insert, or_, select, update

from careerhub.db.postgres import fetch_one
from careerhub.db.tables import relationships
from careerhub.utils.dates import utcnow


def insert_row(db, table: Table, workspace_id: int, values: dict) -> dict:
    """Insert a row and return it as stored."""
    result = db.execute(insert(table).values(workspace_id=workspace_id, **values))
    row_id = result.inserted_primary_key[0]
    return fetch_one(db, select(table).where(table.c.id == row_id))


def get_row(db, table: Table, row_id: int, workspace_id: int) -> Optional[dict]:
    return fetch_one(
        db,
        select(table).where(table.c.id == row_id, table.c.workspace_id == workspace_id)
    )


def require_row(db, table: Table, row_id: int, workspace_id: int, label: str, status_code: int = 404) -> dict:
    """Fetch a row or raise `<label> not found`."""
    row = get_row(db, table, row_id, workspace_id)
    if row is None:
        raise HTTPException(status_code=status_code, detail=f"{label} not found")
    return row


def update_row(db, table: Table, row_id: int, workspace_id: int, values: dict) -> Optional[dict]:
    """Apply a partial update. Returns the updated row, or None if it does not exist."""
    if get_row(db, table, row_id, workspace_id) is None:
        return None
    if values:
        db.execute(
            update(table)
            .where(table.c.id == row_id, table.c.workspace_id == workspace_id)
            .values(updated_at=utcnow(), **values)
        )
    return get_row(db, table, row_id, workspace_id)


def delete_row(db, table: Table, row_id: int, workspace_id: int) -> bool:
    result = db.execute(
        delete(table).where(table.c.id == row_id, table.c.workspace_id == workspace_id)
    )
    return result.rowcount > 0


def update_values(payload: BaseModel, required: Iterable[str] = ()) -> dict:
    """
    Fields the client actually sent. A required column cannot be cleared.
    """
    values = payload.model_dump(exclude_unset=True)
    for field in required:
        if field in values and values[field] is None:
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")
    return values


LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Make % and _ in user text match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def like_pattern(term: str) -> str:
    """Substring pattern; use with escape=LIKE_ESCAPE."""
    return f"%{escape_like(term.strip().lower())}%"


def delete_entity_links(db, entity_type: str, entity_id: int, workspace_id: int) -> None:
    """Remove relationship edges that point at or from a deleted entity."""
    db.execute(
        delete(relationships).where(
            relationships.c.workspace_id == workspace_id,
            or_(
                and_(relationships.c.source_type == entity_type, relationships.c.source_id == entity_id),
                and_(relationships.c.target_type == entity_type, relationships.c.target_id == entity_id),
            )
        )
    )
