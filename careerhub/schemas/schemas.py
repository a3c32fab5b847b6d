"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Update schemas make every field optional; only fields present in the
request body are written.
"""

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Annotated, Optional, List, Any, Dict
from datetime import date, datetime
from enum import Enum


class Schema(BaseModel):
    """Base for all schemas: enums are stored and returned as plain strings."""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)


def _optional_url(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return value
    if not value.startswith(("http://", "https://")):
        raise ValueError("must be a valid http(s) URL")
    return value


OptionalUrl = Annotated[Optional[str], AfterValidator(_optional_url)]


# ============================================================
# ENUMS
# ============================================================

class ProficiencyLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    expert = "expert"


class InstitutionType(str, Enum):
    university = "university"
    school = "school"
    bootcamp = "bootcamp"
    company = "company"
    certification_authority = "certification_authority"
    other = "other"


class EventType(str, Enum):
    conference = "conference"
    meetup = "meetup"
    workshop = "workshop"
    webinar = "webinar"
    networking = "networking"
    other = "other"


class ProjectStatus(str, Enum):
    planning = "planning"
    active = "active"
    on_hold = "on_hold"
    completed = "completed"
    cancelled = "cancelled"


class InteractionType(str, Enum):
    meeting = "meeting"
    call = "call"
    email = "email"
    coffee = "coffee"
    message = "message"
    event = "event"
    other = "other"


class EntityType(str, Enum):
    person = "person"
    job = "job"
    institution = "institution"
    event = "event"
    project = "project"
    achievement = "achievement"
    feedback = "feedback"
    goal = "goal"
    learning = "learning"
    content = "content"
    skill = "skill"


class AchievementCategory(str, Enum):
    award = "award"
    promotion = "promotion"
    certification = "certification"
    publication = "publication"
    project = "project"
    recognition = "recognition"
    other = "other"


class FeedbackType(str, Enum):
    praise = "praise"
    constructive = "constructive"
    recognition = "recognition"
    mentoring = "mentoring"
    other = "other"


class GoalType(str, Enum):
    career = "career"
    skill = "skill"
    personal = "personal"
    financial = "financial"
    other = "other"


class GoalStatus(str, Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"
    abandoned = "abandoned"


class LearningType(str, Enum):
    course = "course"
    certification = "certification"
    book = "book"
    workshop = "workshop"
    conference = "conference"
    degree = "degree"
    other = "other"


class LearningStatus(str, Enum):
    planned = "planned"
    in_progress = "in_progress"
    completed = "completed"
    abandoned = "abandoned"


class ContentType(str, Enum):
    article = "article"
    linkedin_post = "linkedin_post"
    podcast = "podcast"
    video = "video"
    talk = "talk"
    newsletter = "newsletter"
    other = "other"


class ExportFormat(str, Enum):
    pdf = "pdf"
    docx = "docx"
    json = "json"
    markdown = "markdown"
    html = "html"
    txt = "txt"


class PaperSize(str, Enum):
    letter = "letter"
    a4 = "a4"


class ColorScheme(str, Enum):
    full = "full"
    minimal = "minimal"
    bw = "bw"


class PopulateMode(str, Enum):
    merge = "merge"
    replace = "replace"


class DraftContentType(str, Enum):
    linkedin_post = "linkedin_post"
    article = "article"
    email = "email"


class NarrativeType(str, Enum):
    bio = "bio"
    linkedin_summary = "linkedin_summary"
    resume_summary = "resume_summary"
    cover_letter_intro = "cover_letter_intro"
    elevator_pitch = "elevator_pitch"


class NarrativeTone(str, Enum):
    professional = "professional"
    conversational = "conversational"
    executive = "executive"


class ChatRole(str, Enum):
    user = "user"
    assistant = "assistant"


# ============================================================
# COMMON
# ============================================================

class MessageResponse(Schema):
    message: str
    success: bool = True


class Timestamped(Schema):
    id: int
    created_at: datetime
    updated_at: datetime


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(Schema):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    display_name: Optional[str] = Field(None, max_length=200)


class LoginRequest(Schema):
    email: EmailStr
    password: str


class UserResponse(Schema):
    user_id: int
    email: str
    display_name: Optional[str] = None
    workspace_id: int


class SessionResponse(Schema):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"


# ============================================================
# PEOPLE
# ============================================================

class PersonCreate(Schema):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    company: Optional[str] = Field(None, max_length=200)
    role: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None
    relationship_type: Optional[str] = Field(None, max_length=100)
    last_contacted_at: Optional[date] = None


class PersonUpdate(Schema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    company: Optional[str] = Field(None, max_length=200)
    role: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None
    relationship_type: Optional[str] = Field(None, max_length=100)
    last_contacted_at: Optional[date] = None


class PersonResponse(Timestamped):
    name: str
    email: Optional[str] = None
    company: Optional[str] = None
    role: Optional[str] = None
    notes: Optional[str] = None
    relationship_type: Optional[str] = None
    last_contacted_at: Optional[date] = None


# ============================================================
# JOBS
# ============================================================

class JobCreate(Schema):
    title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: bool = False
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None


class JobUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: Optional[bool] = None
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None


class JobResponse(Timestamped):
    title: str
    company: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: bool = False
    location: Optional[str] = None
    notes: Optional[str] = None


# ============================================================
# INSTITUTIONS
# ============================================================

class InstitutionCreate(Schema):
    name: str = Field(..., min_length=1, max_length=200)
    type: InstitutionType = InstitutionType.university
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    notes: Optional[str] = None


class InstitutionUpdate(Schema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[InstitutionType] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    notes: Optional[str] = None


class InstitutionResponse(Timestamped):
    name: str
    type: str
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    notes: Optional[str] = None


# ============================================================
# EVENTS
# ============================================================

class EventCreate(Schema):
    title: str = Field(..., min_length=1, max_length=200)
    event_type: Optional[EventType] = None
    event_date: date
    event_end_date: Optional[date] = None
    location: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None


class EventUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    event_type: Optional[EventType] = None
    event_date: Optional[date] = None
    event_end_date: Optional[date] = None
    location: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None


class EventResponse(Timestamped):
    title: str
    event_type: Optional[str] = None
    event_date: date
    event_end_date: Optional[date] = None
    location: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None


# ============================================================
# PROJECTS
# ============================================================

class ProjectCreate(Schema):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.active
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    url: OptionalUrl = None
    notes: Optional[str] = None


class ProjectUpdate(Schema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    url: OptionalUrl = None
    notes: Optional[str] = None


class ProjectResponse(Timestamped):
    name: str
    description: Optional[str] = None
    status: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    url: Optional[str] = None
    notes: Optional[str] = None


# ============================================================
# SKILLS
# ============================================================

class SkillCreate(Schema):
    name: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = Field(None, max_length=100)
    proficiency: ProficiencyLevel = ProficiencyLevel.beginner
    notes: Optional[str] = None


class SkillUpdate(Schema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, max_length=100)
    proficiency: Optional[ProficiencyLevel] = None
    notes: Optional[str] = None


class SkillResponse(Timestamped):
    name: str
    category: Optional[str] = None
    proficiency: str
    notes: Optional[str] = None


# ============================================================
# INTERACTIONS
# ============================================================

class InteractionCreate(Schema):
    person_id: int
    project_id: Optional[int] = None
    interaction_date: Optional[date] = None
    interaction_type: Optional[InteractionType] = None
    tags: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = None


class InteractionUpdate(Schema):
    person_id: Optional[int] = None
    project_id: Optional[int] = None
    interaction_date: Optional[date] = None
    interaction_type: Optional[InteractionType] = None
    tags: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = None


class InteractionResponse(Timestamped):
    person_id: int
    person_name: Optional[str] = None
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    interaction_date: Optional[date] = None
    interaction_type: Optional[str] = None
    tags: Optional[str] = None
    notes: Optional[str] = None


# ============================================================
# RELATIONSHIPS
# ============================================================

class RelationshipCreate(Schema):
    source_type: EntityType
    source_id: int
    target_type: EntityType
    target_id: int
    relationship_label: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None


class RelationshipUpdate(Schema):
    relationship_label: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None


class RelationshipResponse(Timestamped):
    source_type: str
    source_id: int
    target_type: str
    target_id: int
    relationship_label: Optional[str] = None
    notes: Optional[str] = None


# ============================================================
# ACHIEVEMENTS
# ============================================================

class AchievementCreate(Schema):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    achieved_date: date
    category: Optional[AchievementCategory] = None
    quantifiable_impact: Optional[str] = None
    evidence_url: OptionalUrl = None


class AchievementUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    achieved_date: Optional[date] = None
    category: Optional[AchievementCategory] = None
    quantifiable_impact: Optional[str] = None
    evidence_url: OptionalUrl = None


class AchievementResponse(Timestamped):
    title: str
    description: Optional[str] = None
    achieved_date: date
    category: Optional[str] = None
    quantifiable_impact: Optional[str] = None
    evidence_url: Optional[str] = None


# ============================================================
# FEEDBACK
# ============================================================

class FeedbackCreate(Schema):
    person_id: Optional[int] = None
    feedback_date: date
    feedback_type: Optional[FeedbackType] = None
    context: Optional[str] = None
    notes: str = Field(..., min_length=1)


class FeedbackUpdate(Schema):
    person_id: Optional[int] = None
    feedback_date: Optional[date] = None
    feedback_type: Optional[FeedbackType] = None
    context: Optional[str] = None
    notes: Optional[str] = Field(None, min_length=1)


class FeedbackResponse(Timestamped):
    person_id: Optional[int] = None
    person_name: Optional[str] = None
    feedback_date: date
    feedback_type: Optional[str] = None
    context: Optional[str] = None
    notes: str


# ============================================================
# GOALS
# ============================================================

class GoalCreate(Schema):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    target_date: Optional[date] = None
    goal_type: Optional[GoalType] = None
    status: GoalStatus = GoalStatus.not_started
    notes: Optional[str] = None


class GoalUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    target_date: Optional[date] = None
    goal_type: Optional[GoalType] = None
    status: Optional[GoalStatus] = None
    notes: Optional[str] = None


class GoalResponse(Timestamped):
    title: str
    description: str
    target_date: Optional[date] = None
    goal_type: Optional[str] = None
    status: str
    notes: Optional[str] = None


# ============================================================
# COMPENSATION
# ============================================================

class CompensationCreate(Schema):
    job_id: int
    base_salary: float = Field(..., ge=0)
    currency: str = Field("USD", min_length=3, max_length=10)
    bonus: Optional[float] = Field(None, ge=0)
    equity: Optional[str] = None
    benefits: Optional[str] = None
    effective_date: date
    notes: Optional[str] = None


class CompensationUpdate(Schema):
    job_id: Optional[int] = None
    base_salary: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=10)
    bonus: Optional[float] = Field(None, ge=0)
    equity: Optional[str] = None
    benefits: Optional[str] = None
    effective_date: Optional[date] = None
    notes: Optional[str] = None


class CompensationResponse(Timestamped):
    job_id: int
    job_title: Optional[str] = None
    job_company: Optional[str] = None
    base_salary: float
    currency: str
    bonus: Optional[float] = None
    equity: Optional[str] = None
    benefits: Optional[str] = None
    effective_date: date
    notes: Optional[str] = None


# ============================================================
# LEARNING
# ============================================================

class LearningCreate(Schema):
    title: str = Field(..., min_length=1, max_length=200)
    provider: Optional[str] = Field(None, max_length=200)
    learning_type: LearningType = LearningType.course
    status: LearningStatus = LearningStatus.planned
    start_date: Optional[date] = None
    completion_date: Optional[date] = None
    cost: Optional[float] = Field(None, ge=0)
    skills_gained: Optional[str] = None
    notes: Optional[str] = None


class LearningUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    provider: Optional[str] = Field(None, max_length=200)
    learning_type: Optional[LearningType] = None
    status: Optional[LearningStatus] = None
    start_date: Optional[date] = None
    completion_date: Optional[date] = None
    cost: Optional[float] = Field(None, ge=0)
    skills_gained: Optional[str] = None
    notes: Optional[str] = None


class LearningResponse(Timestamped):
    title: str
    provider: Optional[str] = None
    learning_type: str
    status: str
    start_date: Optional[date] = None
    completion_date: Optional[date] = None
    cost: Optional[float] = None
    skills_gained: Optional[str] = None
    notes: Optional[str] = None


# ============================================================
# CONTENT
# ============================================================

class ContentCreate(Schema):
    title: str = Field(..., min_length=1, max_length=200)
    content_type: ContentType = ContentType.article
    publication_date: date
    platform: Optional[str] = Field(None, max_length=100)
    url: OptionalUrl = None
    description: Optional[str] = None
    engagement_metrics: Optional[str] = None


class ContentUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content_type: Optional[ContentType] = None
    publication_date: Optional[date] = None
    platform: Optional[str] = Field(None, max_length=100)
    url: OptionalUrl = None
    description: Optional[str] = None
    engagement_metrics: Optional[str] = None


class ContentResponse(Timestamped):
    title: str
    content_type: str
    publication_date: date
    platform: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    engagement_metrics: Optional[str] = None


# ============================================================
# SEARCH
# ============================================================

class SearchResult(Schema):
    entity_type: str
    id: int
    title: str
    subtitle: str


class SearchResponse(Schema):
    results: List[SearchResult]
    total_count: int


# ============================================================
# TIMELINE
# ============================================================

class LinkedPerson(Schema):
    id: int
    name: str


class TimelineItem(Schema):
    id: int
    type: str
    title: str
    subtitle: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    linked_people: List[LinkedPerson] = []
    linked_people_count: int = 0


class TimelineYear(Schema):
    year: int
    items: List[TimelineItem]


class TimelineResponse(Schema):
    years: List[TimelineYear]
    all_people: List[LinkedPerson]


# ============================================================
# IMPORT
# ============================================================

class LinkedInImportRequest(Schema):
    csv_data: str = Field(..., min_length=1)
    file_name: Optional[str] = None


class ImportedCount(Schema):
    entity: str
    count: int


class LinkedInImportResponse(Schema):
    detected_type: str
    imported: List[ImportedCount]
    skipped: int
    errors: List[str]


class ImportHistoryItem(Schema):
    id: str
    file_name: Optional[str] = None
    detected_type: str
    row_count: int
    imported: List[ImportedCount]
    skipped: int
    error_count: int
    imported_at: datetime


# ============================================================
# PROFILE
# ============================================================

class Location(Schema):
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None


class SocialProfile(Schema):
    network: str = Field(..., min_length=1)
    username: Optional[str] = None
    url: OptionalUrl = None


class ProfileBasicsUpdate(Schema):
    full_name: Optional[str] = Field(None, max_length=200)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    label: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    url: OptionalUrl = None
    summary: Optional[str] = None
    location: Optional[Location] = None
    social_profiles: Optional[List[SocialProfile]] = None


class ProfileResponse(Timestamped):
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    label: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    url: Optional[str] = None
    summary: Optional[str] = None
    location: Optional[Location] = None
    social_profiles: List[SocialProfile] = []


class WorkExperienceCreate(Schema):
    company: str = Field(..., min_length=1, max_length=200)
    position: str = Field(..., min_length=1, max_length=200)
    url: OptionalUrl = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    summary: Optional[str] = None
    highlights: List[str] = []
    department: Optional[str] = None
    employment_type: Optional[str] = None
    sort_order: int = 0


class WorkExperienceUpdate(Schema):
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    position: Optional[str] = Field(None, min_length=1, max_length=200)
    url: OptionalUrl = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    summary: Optional[str] = None
    highlights: Optional[List[str]] = None
    department: Optional[str] = None
    employment_type: Optional[str] = None
    sort_order: Optional[int] = None


class WorkExperienceResponse(Timestamped):
    profile_id: int
    company: str
    position: str
    url: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    summary: Optional[str] = None
    highlights: List[str] = []
    department: Optional[str] = None
    employment_type: Optional[str] = None
    sort_order: int = 0


class EducationCreate(Schema):
    institution: str = Field(..., min_length=1, max_length=200)
    area: Optional[str] = None
    study_type: Optional[str] = None
    degree_type: Optional[str] = None
    minor: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    score: Optional[str] = None
    courses: List[str] = []
    url: OptionalUrl = None
    sort_order: int = 0


class EducationUpdate(Schema):
    institution: Optional[str] = Field(None, min_length=1, max_length=200)
    area: Optional[str] = None
    study_type: Optional[str] = None
    degree_type: Optional[str] = None
    minor: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    score: Optional[str] = None
    courses: Optional[List[str]] = None
    url: OptionalUrl = None
    sort_order: Optional[int] = None


class EducationResponse(Timestamped):
    profile_id: int
    institution: str
    area: Optional[str] = None
    study_type: Optional[str] = None
    degree_type: Optional[str] = None
    minor: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    score: Optional[str] = None
    courses: List[str] = []
    url: Optional[str] = None
    sort_order: int = 0


class FullProfileResponse(Schema):
    profile: ProfileResponse
    work: List[WorkExperienceResponse]
    education: List[EducationResponse]
    skills: List[SkillResponse]
    projects: List[ProjectResponse]


class PopulateRequest(Schema):
    dry_run: bool = False
    mode: PopulateMode = PopulateMode.merge
    include_jobs: bool = True
    include_learning: bool = True


class PopulateResponse(Schema):
    success: bool = True
    dry_run: bool
    work_created: int
    work_skipped: int
    education_created: int
    education_skipped: int
    preview: Optional[Dict[str, List[Dict[str, Any]]]] = None


# ============================================================
# VIEW DEFINITIONS
# ============================================================

class SectionConfig(Schema):
    visible: bool = True
    max_items: Optional[int] = Field(None, ge=1)


class ViewFormatting(Schema):
    date_format: str = Field("monthYear", pattern="^(full|monthYear|yearOnly)$")
    include_urls: bool = True
    include_location: bool = True


class ViewDefinitionCreate(Schema):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    sections: Dict[str, SectionConfig]
    formatting: ViewFormatting = ViewFormatting()


class ViewDefinitionResponse(Timestamped):
    slug: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    sections: Dict[str, SectionConfig]
    formatting: ViewFormatting
    is_preset: bool


# ============================================================
# VARIANTS & SNAPSHOTS
# ============================================================

class VariantCreate(Schema):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    target_role: Optional[str] = Field(None, max_length=200)
    view_definition_id: Optional[int] = None
    is_primary: bool = False
    profile_id: Optional[int] = None


class VariantUpdate(Schema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    target_role: Optional[str] = Field(None, max_length=200)
    view_definition_id: Optional[int] = None
    is_primary: Optional[bool] = None


class VariantDuplicate(Schema):
    new_name: str = Field(..., min_length=1, max_length=200)


class VariantResponse(Timestamped):
    profile_id: int
    name: str
    description: Optional[str] = None
    target_role: Optional[str] = None
    view_definition_id: Optional[int] = None
    is_primary: bool


class ResumeData(Schema):
    """
    Frozen resume document. Sections are lists of objects; unknown
    top-level keys are kept as sent.
    """
    model_config = ConfigDict(use_enum_values=True, validate_default=True, extra="allow")

    basics: Dict[str, Any] = {}
    work: List[Dict[str, Any]] = []
    education: List[Dict[str, Any]] = []
    skills: List[Dict[str, Any]] = []
    projects: List[Dict[str, Any]] = []
    certifications: List[Dict[str, Any]] = []
    publications: List[Dict[str, Any]] = []
    awards: List[Dict[str, Any]] = []
    volunteer: List[Dict[str, Any]] = []
    languages: List[Dict[str, Any]] = []
    interests: List[Dict[str, Any]] = []
    variant: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None


class SnapshotCreate(Schema):
    resume_variant_id: int
    label: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    snapshot_data: Optional[ResumeData] = None


class SnapshotSummary(Timestamped):
    resume_variant_id: int
    version_number: int
    label: Optional[str] = None
    notes: Optional[str] = None


class SnapshotResponse(SnapshotSummary):
    snapshot_data: Dict[str, Any]


class VariantDetailResponse(Schema):
    variant: VariantResponse
    snapshots: List[SnapshotSummary]
    view_definition: Optional[ViewDefinitionResponse] = None


class SetPrimaryResponse(Schema):
    variant: VariantResponse
    previous_primary: Optional[VariantResponse] = None


# ============================================================
# EXPORT
# ============================================================

class ExportOptions(Schema):
    include_photos: bool = False
    include_links: bool = True
    paper_size: PaperSize = PaperSize.letter
    color_scheme: ColorScheme = ColorScheme.full


class ExportRequest(Schema):
    variant_id: int
    snapshot_id: Optional[int] = None
    format: ExportFormat
    options: ExportOptions = ExportOptions()


class PreviewRequest(Schema):
    variant_id: int
    snapshot_id: Optional[int] = None
    options: ExportOptions = ExportOptions()


class ExportResponse(Schema):
    success: bool = True
    format: str
    filename: str
    content_type: str
    content: Optional[str] = None
    content_base64: Optional[str] = None


# ============================================================
# SHARE LINKS
# ============================================================

class ShareLinkCreate(Schema):
    resume_variant_id: int
    snapshot_id: Optional[int] = None
    label: Optional[str] = Field(None, max_length=200)
    expires_at: Optional[datetime] = None
    password: Optional[str] = Field(None, min_length=4, max_length=50)


class ShareLinkUpdate(Schema):
    label: Optional[str] = Field(None, max_length=200)
    expires_at: Optional[datetime] = None
    # empty string clears the password
    password: Optional[str] = Field(None, max_length=50)
    is_live: Optional[bool] = None

    @field_validator("password")
    @classmethod
    def password_length(cls, value: Optional[str]) -> Optional[str]:
        if value and len(value) < 4:
            raise ValueError("must be at least 4 characters")
        return value


class ShareLinkResponse(Timestamped):
    resume_variant_id: int
    snapshot_id: Optional[int] = None
    token: str
    share_url: str
    label: Optional[str] = None
    expires_at: Optional[datetime] = None
    has_password: bool
    is_live: bool
    is_revoked: bool
    view_count: int
    last_viewed_at: Optional[datetime] = None


class SharedResumeResponse(Schema):
    label: Optional[str] = None
    variant_name: str
    resume_html: str


# ============================================================
# DASHBOARD
# ============================================================

class StaleContact(Schema):
    id: int
    name: str
    company: Optional[str] = None
    last_interaction_date: Optional[date] = None
    days_since: Optional[int] = None


class TypeCount(Schema):
    type: str
    count: int


class TopConnector(Schema):
    id: int
    name: str
    project_count: int
    event_count: int
    total_connections: int


class RecentInteraction(Schema):
    id: int
    person_id: int
    person_name: Optional[str] = None
    project_name: Optional[str] = None
    interaction_date: Optional[date] = None
    interaction_type: Optional[str] = None
    notes: Optional[str] = None


class UpcomingEvent(Schema):
    id: int
    title: str
    event_type: Optional[str] = None
    event_date: date
    location: Optional[str] = None


class GoalProgress(Schema):
    id: int
    title: str
    goal_type: Optional[str] = None
    status: str
    target_date: Optional[date] = None
    days_until_target: Optional[int] = None
    is_overdue: bool


class SkillsGrowth(Schema):
    total: int
    added_last_12_months: int
    by_proficiency: List[TypeCount]
    recent: List[SkillResponse]


class FeedbackPreview(Schema):
    id: int
    feedback_type: Optional[str] = None
    feedback_date: date
    person_name: Optional[str] = None
    notes_preview: str


class FeedbackThemes(Schema):
    by_type: List[TypeCount]
    recent: List[FeedbackPreview]


class ContentActivity(Schema):
    total: int
    this_year: int
    by_type: List[TypeCount]
    recent: List[ContentResponse]


class DashboardStatsResponse(Schema):
    stale_contacts: List[StaleContact]
    productive_interaction_types: List[TypeCount]
    top_connectors: List[TopConnector]
    recent_interactions: List[RecentInteraction]
    upcoming_events: List[UpcomingEvent]
    goals_progress: List[GoalProgress]
    skills_growth: SkillsGrowth
    feedback_themes: FeedbackThemes
    content_activity: ContentActivity


# ============================================================
# AI ASSISTANT
# ============================================================

class MeetingBriefRequest(Schema):
    person_id: int


class MeetingBriefResponse(Schema):
    brief: str
    person_name: str


class DraftContentRequest(Schema):
    content_type: DraftContentType
    topic: str = Field(..., min_length=1)
    context_notes: Optional[str] = None


class DraftContentResponse(Schema):
    draft: str
    content_type: str


class CareerNarrativeRequest(Schema):
    narrative_type: NarrativeType
    tone: NarrativeTone = NarrativeTone.professional
    target_role: Optional[str] = Field(None, max_length=200)


class CareerNarrativeResponse(Schema):
    narrative: str
    narrative_type: str
    tone: str


class ChatTurn(Schema):
    role: ChatRole
    content: str = Field(..., min_length=1)


class ChatRequest(Schema):
    message: str = Field(..., min_length=1, max_length=4000)
    conversation_history: List[ChatTurn] = Field(default_factory=list, max_length=40)


class ChatResponse(Schema):
    reply: str
