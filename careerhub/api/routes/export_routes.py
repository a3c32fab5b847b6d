"""
Export Routes

POST /export - Render a variant (or one of its snapshots) as json, markdown,
               txt, html, docx or pdf
POST /export/preview - The HTML rendering, served as a page
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from careerhub.db.postgres import get_db_session
from careerhub.db.tables import resume_variants
from careerhub.core.auth import get_current_user
from careerhub.services.crud import require_row
from careerhub.services.resume_service import resolve_resume_data
from careerhub.services.export_service import export_resume, to_html
from careerhub.schemas.schemas import ExportRequest, PreviewRequest, ExportResponse

router = APIRouter(prefix="/export", tags=["Export"])


def _load_resume(variant_id: int, snapshot_id, workspace_id: int):
    with get_db_session() as db:
        variant = require_row(db, resume_variants, variant_id, workspace_id, "Variant")
        data = resolve_resume_data(db, workspace_id, variant, snapshot_id)
    return variant, data


@router.post("", response_model=ExportResponse)
async def export_variant(request: ExportRequest, user: dict = Depends(get_current_user)):
    """
    Export a resume.

    Text formats come back in `content`; docx and pdf in `content_base64`.
    """
    variant, data = _load_resume(request.variant_id, request.snapshot_id, user["workspace_id"])
    result = export_resume(data, request.format, variant["name"], request.options.model_dump())
    return ExportResponse(**result)


@router.post("/preview", response_class=HTMLResponse)
async def preview_variant(request: PreviewRequest, user: dict = Depends(get_current_user)):
    _, data = _load_resume(request.variant_id, request.snapshot_id, user["workspace_id"])
    return HTMLResponse(content=to_html(data, request.options.model_dump()))
