"""
Import Routes

POST /import/linkedin - Import one LinkedIn export CSV (all or nothing)
GET /import/history - Recent imports for the workspace
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from typing import List

from careerhub.db.postgres import get_db_session
from careerhub.core.auth import get_current_user
from careerhub.services.linkedin_import import import_linkedin_csv, record_import, list_imports
from careerhub.schemas.schemas import LinkedInImportRequest, LinkedInImportResponse, ImportHistoryItem

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import", tags=["Import"])


@router.post("/linkedin", response_model=LinkedInImportResponse)
async def import_linkedin(request: LinkedInImportRequest, user: dict = Depends(get_current_user)):
    """
    Import a LinkedIn CSV export.

    Detects the export type from the header row. A bad row is reported in
    `errors` and skipped; any other failure rolls the whole import back.
    """
    if not request.csv_data.strip():
        raise HTTPException(status_code=400, detail="csv_data is required")

    try:
        with get_db_session() as db:
            result, row_count = import_linkedin_csv(db, user["workspace_id"], request.csv_data)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("LinkedIn import failed for workspace %s", user["workspace_id"])
        return JSONResponse(status_code=400, content={
            "error": "Import failed",
            "detected_type": "Error",
            "imported": [],
            "skipped": 0,
            "errors": [str(e)],
        })

    record_import(user["workspace_id"], request.file_name, result, row_count)
    return LinkedInImportResponse(**result)


@router.get("/history", response_model=List[ImportHistoryItem])
async def import_history(user: dict = Depends(get_current_user)):
    return [ImportHistoryItem(**doc) for doc in list_imports(user["workspace_id"])]
