"""
Relational schema - every table the application reads or writes.

Declared with SQLAlchemy Core so the same definitions create the schema on
PostgreSQL in production and on SQLite in the test suite. All career and
resume records carry a workspace_id; Relationships is the only table whose
endpoints are polymorphic (source_type/source_id, target_type/target_id).
"""

from sqlalchemy import (
    JSON, Boolean, Column, Date, DateTime, Float, ForeignKey, Index, Integer,
    MetaData, String, Table, Text, UniqueConstraint,
)

from careerhub.utils.dates import utcnow

metadata = MetaData()


def _timestamps():
    return [
        Column("created_at", DateTime, nullable=False, default=utcnow),
        Column("updated_at", DateTime, nullable=False, default=utcnow, onupdate=utcnow),
    ]


def _workspace_fk():
    return Column(
        "workspace_id", Integer,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )


# ============================================================
# ACCOUNTS
# ============================================================

users = Table(
    "users", metadata,
    Column("id", Integer, primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("display_name", String(200)),
    Column("is_active", Boolean, nullable=False, default=True),
    *_timestamps(),
)

workspaces = Table(
    "workspaces", metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(200), nullable=False),
    Column("owner_user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    *_timestamps(),
)

login_attempts = Table(
    "login_attempts", metadata,
    Column("id", Integer, primary_key=True),
    Column("email", String(255), nullable=False, index=True),
    Column("success", Boolean, nullable=False),
    Column("attempted_at", DateTime, nullable=False, default=utcnow),
)


# ============================================================
# CAREER ENTITIES
# ============================================================

people = Table(
    "people", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("name", String(200), nullable=False),
    Column("email", String(255)),
    Column("company", String(200)),
    Column("role", String(200)),
    Column("notes", Text),
    Column("relationship_type", String(100)),
    Column("last_contacted_at", Date),
    *_timestamps(),
)

jobs = Table(
    "jobs", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("title", String(200), nullable=False),
    Column("company", String(200), nullable=False),
    Column("description", Text),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("is_current", Boolean, nullable=False, default=False),
    Column("location", String(200)),
    Column("notes", Text),
    *_timestamps(),
)

institutions = Table(
    "institutions", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("name", String(200), nullable=False),
    Column("type", String(50), nullable=False, default="university"),
    Column("location", String(200)),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("degree", String(200)),
    Column("field_of_study", String(200)),
    Column("notes", Text),
    *_timestamps(),
)

events = Table(
    "events", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("title", String(200), nullable=False),
    Column("event_type", String(50)),
    Column("event_date", Date, nullable=False),
    Column("event_end_date", Date),
    Column("location", String(200)),
    Column("description", Text),
    Column("notes", Text),
    *_timestamps(),
)

projects = Table(
    "projects", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("name", String(200), nullable=False),
    Column("description", Text),
    Column("status", String(50), nullable=False, default="active"),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("url", String(500)),
    Column("notes", Text),
    *_timestamps(),
)

skills = Table(
    "skills", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("name", String(200), nullable=False),
    Column("category", String(100)),
    Column("proficiency", String(50), nullable=False, default="beginner"),
    Column("notes", Text),
    *_timestamps(),
)

interactions = Table(
    "interactions", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("person_id", Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="SET NULL"), index=True),
    Column("interaction_date", Date),
    Column("interaction_type", String(50)),
    Column("tags", String(500)),
    Column("notes", Text),
    *_timestamps(),
)

relationships = Table(
    "relationships", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("source_type", String(50), nullable=False),
    Column("source_id", Integer, nullable=False),
    Column("target_type", String(50), nullable=False),
    Column("target_id", Integer, nullable=False),
    Column("relationship_label", String(200)),
    Column("notes", Text),
    *_timestamps(),
    Index("ix_relationships_source", "source_type", "source_id"),
    Index("ix_relationships_target", "target_type", "target_id"),
)

achievements = Table(
    "achievements", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    Column("achieved_date", Date, nullable=False),
    Column("category", String(50)),
    Column("quantifiable_impact", Text),
    Column("evidence_url", String(500)),
    *_timestamps(),
)

feedback = Table(
    "feedback", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("person_id", Integer, ForeignKey("people.id", ondelete="SET NULL"), index=True),
    Column("feedback_date", Date, nullable=False),
    Column("feedback_type", String(50)),
    Column("context", Text),
    Column("notes", Text, nullable=False),
    *_timestamps(),
)

goals = Table(
    "goals", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=False),
    Column("target_date", Date),
    Column("goal_type", String(50)),
    Column("status", String(50), nullable=False, default="not_started"),
    Column("notes", Text),
    *_timestamps(),
)

compensation = Table(
    "compensation", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("job_id", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("base_salary", Float, nullable=False),
    Column("currency", String(10), nullable=False, default="USD"),
    Column("bonus", Float),
    Column("equity", Text),
    Column("benefits", Text),
    Column("effective_date", Date, nullable=False),
    Column("notes", Text),
    *_timestamps(),
)

learning = Table(
    "learning", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("title", String(200), nullable=False),
    Column("provider", String(200)),
    Column("learning_type", String(50), nullable=False, default="course"),
    Column("status", String(50), nullable=False, default="planned"),
    Column("start_date", Date),
    Column("completion_date", Date),
    Column("cost", Float),
    Column("skills_gained", Text),
    Column("notes", Text),
    *_timestamps(),
)

content = Table(
    "content", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("title", String(200), nullable=False),
    Column("content_type", String(50), nullable=False, default="article"),
    Column("publication_date", Date, nullable=False),
    Column("platform", String(100)),
    Column("url", String(500)),
    Column("description", Text),
    Column("engagement_metrics", Text),
    *_timestamps(),
)


# ============================================================
# RESUME ENTITIES
# ============================================================

profiles = Table(
    "profiles", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("full_name", String(200)),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("label", String(200)),
    Column("email", String(255)),
    Column("phone", String(50)),
    Column("url", String(500)),
    Column("summary", Text),
    Column("location", JSON),
    Column("social_profiles", JSON),
    *_timestamps(),
)

work_experiences = Table(
    "work_experiences", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("profile_id", Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("company", String(200), nullable=False),
    Column("position", String(200), nullable=False),
    Column("url", String(500)),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("summary", Text),
    Column("highlights", JSON),
    Column("department", String(200)),
    Column("employment_type", String(50)),
    Column("sort_order", Integer, nullable=False, default=0),
    *_timestamps(),
)

education_entries = Table(
    "education_entries", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("profile_id", Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("institution", String(200), nullable=False),
    Column("area", String(200)),
    Column("study_type", String(100)),
    Column("degree_type", String(100)),
    Column("minor", String(200)),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("score", String(50)),
    Column("courses", JSON),
    Column("url", String(500)),
    Column("sort_order", Integer, nullable=False, default=0),
    *_timestamps(),
)

view_definitions = Table(
    "view_definitions", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("slug", String(100), nullable=False),
    Column("name", String(200), nullable=False),
    Column("description", Text),
    Column("category", String(50)),
    Column("sections", JSON, nullable=False),
    Column("formatting", JSON, nullable=False),
    Column("is_preset", Boolean, nullable=False, default=False),
    *_timestamps(),
    UniqueConstraint("workspace_id", "slug", name="uq_view_definitions_slug"),
)

resume_variants = Table(
    "resume_variants", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("profile_id", Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("name", String(200), nullable=False),
    Column("description", Text),
    Column("target_role", String(200)),
    Column("view_definition_id", Integer, ForeignKey("view_definitions.id", ondelete="SET NULL")),
    Column("is_primary", Boolean, nullable=False, default=False),
    *_timestamps(),
)

version_snapshots = Table(
    "version_snapshots", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("resume_variant_id", Integer, ForeignKey("resume_variants.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("version_number", Integer, nullable=False),
    Column("label", String(100)),
    Column("notes", Text),
    Column("snapshot_data", JSON, nullable=False),
    *_timestamps(),
    UniqueConstraint("resume_variant_id", "version_number", name="uq_snapshot_version"),
)

public_share_links = Table(
    "public_share_links", metadata,
    Column("id", Integer, primary_key=True),
    _workspace_fk(),
    Column("resume_variant_id", Integer, ForeignKey("resume_variants.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("snapshot_id", Integer, ForeignKey("version_snapshots.id", ondelete="SET NULL")),
    Column("token", String(32), nullable=False, unique=True),
    Column("label", String(200)),
    Column("expires_at", DateTime),
    Column("password_hash", String(255)),
    Column("is_live", Boolean, nullable=False, default=True),
    Column("is_revoked", Boolean, nullable=False, default=False),
    Column("view_count", Integer, nullable=False, default=0),
    Column("last_viewed_at", DateTime),
    *_timestamps(),
)


# Entity type name -> table, used by relationships and search
ENTITY_TABLES = {
    "person": people,
    "job": jobs,
    "institution": institutions,
    "event": events,
    "project": projects,
    "achievement": achievements,
    "feedback": feedback,
    "goal": goals,
    "learning": learning,
    "content": content,
    "skill": skills,
}
