"""
Profile Routes - the resume profile of the current workspace

GET /profile - Profile with work, education, skills and projects
PUT /profile/basics - Update name, contact details, summary, location, social profiles
GET /profile/work - List work experiences
POST /profile/work - Add a work experience
PUT /profile/work/{work_id} - Update a work experience
DELETE /profile/work/{work_id} - Delete a work experience
GET /profile/education - List education entries
POST /profile/education - Add an education entry
PUT /profile/education/{education_id} - Update an education entry
DELETE /profile/education/{education_id} - Delete an education entry
POST /profile/populate - Fill work and education from jobs and learning
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import select
from typing import List

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import profiles, work_experiences, education_entries, skills, projects
from careerhub.core.auth import get_current_user
from careerhub.services.crud import get_row, insert_row, update_row, delete_row, update_values
from careerhub.services.resume_service import (
    require_default_profile, list_work, list_education, populate_profile
)
from careerhub.schemas.schemas import (
    ProfileBasicsUpdate, ProfileResponse, FullProfileResponse,
    WorkExperienceCreate, WorkExperienceUpdate, WorkExperienceResponse,
    EducationCreate, EducationUpdate, EducationResponse,
    SkillResponse, ProjectResponse, PopulateRequest, PopulateResponse, MessageResponse,
)

router = APIRouter(prefix="/profile", tags=["Profile"])


def _check_dates(start, end) -> None:
    if start and end and end < start:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")


def _check_update_dates(db, table, row_id: int, workspace_id: int, values: dict) -> None:
    """Validate the dates the row will have once the partial update is applied."""
    if "start_date" not in values and "end_date" not in values:
        return
    current = get_row(db, table, row_id, workspace_id)
    if current is None:
        return
    merged = {**current, **values}
    _check_dates(merged["start_date"], merged["end_date"])


def _profile_response(row: dict) -> ProfileResponse:
    return ProfileResponse(**{**row, "social_profiles": row["social_profiles"] or []})


@router.get("", response_model=FullProfileResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    ws = user["workspace_id"]
    with get_db_session() as db:
        profile = require_default_profile(db, ws)
        work = list_work(db, profile["id"])
        education = list_education(db, profile["id"])
        skill_rows = fetch_all(db, select(skills).where(skills.c.workspace_id == ws).order_by(skills.c.name))
        project_rows = fetch_all(db, select(projects).where(projects.c.workspace_id == ws)
                                 .order_by(projects.c.start_date.desc(), projects.c.id))
    return FullProfileResponse(
        profile=_profile_response(profile),
        work=[WorkExperienceResponse(**w) for w in work],
        education=[EducationResponse(**e) for e in education],
        skills=[SkillResponse(**s) for s in skill_rows],
        projects=[ProjectResponse(**p) for p in project_rows],
    )


@router.put("/basics", response_model=ProfileResponse)
async def update_basics(update: ProfileBasicsUpdate, user: dict = Depends(get_current_user)):
    values = update.model_dump(exclude_unset=True)
    if "location" in values:
        values["location"] = values["location"] or {}
    if "social_profiles" in values:
        values["social_profiles"] = values["social_profiles"] or []
    with get_db_session() as db:
        profile = require_default_profile(db, user["workspace_id"])
        row = update_row(db, profiles, profile["id"], user["workspace_id"], values)
    return _profile_response(row)


# ============================================================
# WORK EXPERIENCE
# ============================================================

@router.get("/work", response_model=List[WorkExperienceResponse])
async def get_work(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        profile = require_default_profile(db, user["workspace_id"])
        rows = list_work(db, profile["id"])
    return [WorkExperienceResponse(**r) for r in rows]


@router.post("/work", response_model=WorkExperienceResponse, status_code=201)
async def create_work(work: WorkExperienceCreate, user: dict = Depends(get_current_user)):
    _check_dates(work.start_date, work.end_date)
    with get_db_session() as db:
        profile = require_default_profile(db, user["workspace_id"])
        row = insert_row(db, work_experiences, user["workspace_id"], {"profile_id": profile["id"], **work.model_dump()})
    return WorkExperienceResponse(**row)


@router.put("/work/{work_id}", response_model=WorkExperienceResponse)
async def update_work(work_id: int, update: WorkExperienceUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("company", "position", "highlights", "sort_order"))
    with get_db_session() as db:
        _check_update_dates(db, work_experiences, work_id, user["workspace_id"], values)
        row = update_row(db, work_experiences, work_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Work experience not found")
    return WorkExperienceResponse(**row)


@router.delete("/work/{work_id}", response_model=MessageResponse)
async def delete_work(work_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, work_experiences, work_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Work experience not found")
    return MessageResponse(message="Work experience deleted successfully")


# ============================================================
# EDUCATION
# ============================================================

@router.get("/education", response_model=List[EducationResponse])
async def get_education(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        profile = require_default_profile(db, user["workspace_id"])
        rows = list_education(db, profile["id"])
    return [EducationResponse(**r) for r in rows]


@router.post("/education", response_model=EducationResponse, status_code=201)
async def create_education(education: EducationCreate, user: dict = Depends(get_current_user)):
    _check_dates(education.start_date, education.end_date)
    with get_db_session() as db:
        profile = require_default_profile(db, user["workspace_id"])
        row = insert_row(db, education_entries, user["workspace_id"],
                         {"profile_id": profile["id"], **education.model_dump()})
    return EducationResponse(**row)


@router.put("/education/{education_id}", response_model=EducationResponse)
async def update_education(education_id: int, update: EducationUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("institution", "courses", "sort_order"))
    with get_db_session() as db:
        _check_update_dates(db, education_entries, education_id, user["workspace_id"], values)
        row = update_row(db, education_entries, education_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Education entry not found")
    return EducationResponse(**row)


@router.delete("/education/{education_id}", response_model=MessageResponse)
async def delete_education(education_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, education_entries, education_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Education entry not found")
    return MessageResponse(message="Education entry deleted successfully")


# ============================================================
# POPULATE
# ============================================================

@router.post("/populate", response_model=PopulateResponse)
async def populate(request: PopulateRequest, user: dict = Depends(get_current_user)):
    """
    Copy jobs into work experiences and learning into education.

    merge skips duplicates, replace clears the included sections first,
    dry_run only reports what would happen.
    """
    with get_db_session() as db:
        profile = require_default_profile(db, user["workspace_id"])
        result = populate_profile(
            db, user["workspace_id"], profile,
            dry_run=request.dry_run,
            mode=request.mode,
            include_jobs=request.include_jobs,
            include_learning=request.include_learning,
        )
    return PopulateResponse(**result)
