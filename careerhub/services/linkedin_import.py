"""
LinkedIn Import Service

Turns a LinkedIn data-export CSV into career records.

Flow:
1. parse_csv()         - rows as dicts; skips blank lines and the notes
                         preamble LinkedIn puts above Connections.csv
2. detect_csv_type()   - classify by header signature
3. LinkedInImporter    - deduplicated inserts, all inside the caller's
                         transaction; a bad row is recorded and skipped
4. record_import()     - audit document in MongoDB (best effort)
"""

import csv
import io
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from careerhub.db.mongodb import get_collection, COLLECTIONS
from careerhub.db.postgres import fetch_one
from careerhub.db.tables import people, skills, interactions, institutions, learning, jobs
from careerhub.services.crud import LIKE_ESCAPE, insert_row, like_pattern
from careerhub.utils.dates import parse_linkedin_date, utcnow

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

# Checked in order; the first signature whose headers are all present wins
SIGNATURES = [
    ("Connections", {"Connected On", "First Name"}),
    ("Endorsements", {"Endorser First Name", "Skill Name"}),
    ("Education", {"School Name", "Degree Name"}),
    ("Certifications", {"Authority", "License Number"}),
    ("Positions", {"Company Name", "Title"}),
]

PREAMBLE_SCAN_LINES = 20


def clean(value: Optional[str]) -> str:
    """Trim and collapse internal whitespace."""
    return " ".join((value or "").split())


def _error_message(exc: Exception) -> str:
    """Driver errors carry the whole statement; keep the database's own message."""
    return str(getattr(exc, "orig", None) or exc)


def _header_line_index(lines: List[str]) -> int:
    """Index of the real header row; Connections exports start with a notes block."""
    for i, line in enumerate(lines[:PREAMBLE_SCAN_LINES]):
        if "First Name" in line and "Last Name" in line:
            return i
    return 0


def parse_csv(csv_data: str) -> Tuple[List[str], List[Dict[str, str]]]:
    """
    Parse CSV text into (headers, rows).

    Handles quoted fields and "" escapes. Blank lines are skipped and every
    cell is trimmed.
    """
    text = csv_data.lstrip("\ufeff")
    lines = text.splitlines()
    start = _header_line_index(lines)
    reader = csv.reader(io.StringIO("\n".join(lines[start:])))

    headers: List[str] = []
    rows: List[Dict[str, str]] = []
    for record in reader:
        if not any(cell.strip() for cell in record):
            continue
        if not headers:
            headers = [cell.strip() for cell in record]
            continue
        row = {}
        for i, header in enumerate(headers):
            row[header] = record[i].strip() if i < len(record) else ""
        rows.append(row)
    return headers, rows


def detect_csv_type(headers: List[str]) -> str:
    present = set(headers)
    for name, required in SIGNATURES:
        if required <= present:
            return name
    if headers == ["Name"]:
        return "Skills"
    return UNKNOWN


def _lower_eq(column, value: str):
    return func.lower(column) == value.lower()


class LinkedInImporter:
    """
    Runs one import inside an open session. Counts are per entity name;
    rows that were already present count as skipped.
    """

    def __init__(self, db, workspace_id: int):
        self.db = db
        self.workspace_id = workspace_id
        self.counts: Dict[str, int] = {}
        self.skipped = 0
        self.errors: List[str] = []

    # ---------- lookups ----------

    def _first(self, table, *conditions) -> Optional[dict]:
        stmt = select(table).where(table.c.workspace_id == self.workspace_id, *conditions).limit(1)
        return fetch_one(self.db, stmt)

    def _insert(self, entity: str, table, values: dict) -> dict:
        for key, value in values.items():
            limit = getattr(table.c[key].type, "length", None)
            if isinstance(value, str) and limit and len(value) > limit:
                raise ValueError(f"{key} is longer than {limit} characters")
        row = insert_row(self.db, table, self.workspace_id, values)
        self.counts[entity] = self.counts.get(entity, 0) + 1
        return row

    def _find_or_create_person(self, name: str, relationship_type: str, **extra) -> dict:
        person = self._first(people, _lower_eq(people.c.name, name))
        if person:
            return person
        return self._insert("People", people, {"name": name, "relationship_type": relationship_type, **extra})

    def _find_or_create_skill(self, name: str) -> dict:
        skill = self._first(skills, _lower_eq(skills.c.name, name))
        if skill:
            return skill
        return self._insert("Skills", skills, {"name": name, "proficiency": "intermediate"})

    # ---------- per-type row handlers ----------

    def connection(self, row: dict) -> None:
        first, last = clean(row.get("First Name")), clean(row.get("Last Name"))
        if not first and not last:
            self.skipped += 1
            return
        name = f"{first} {last}".strip()
        email = clean(row.get("Email Address")) or None

        existing = None
        if email:
            existing = self._first(people, _lower_eq(people.c.email, email))
        if existing is None:
            existing = self._first(people, _lower_eq(people.c.name, name))
        if existing:
            self.skipped += 1
            return

        self._insert("People", people, {
            "name": name,
            "email": email,
            "company": clean(row.get("Company")) or None,
            "role": clean(row.get("Position")) or None,
            "relationship_type": "LinkedIn Connection",
            "last_contacted_at": parse_linkedin_date(row.get("Connected On")),
        })

    def endorsement(self, row: dict) -> None:
        first = clean(row.get("Endorser First Name"))
        last = clean(row.get("Endorser Last Name"))
        skill_name = clean(row.get("Skill Name"))
        if not skill_name or (not first and not last):
            self.skipped += 1
            return

        person = self._find_or_create_person(f"{first} {last}".strip(), "LinkedIn Endorser")
        self._find_or_create_skill(skill_name)

        duplicate = self._first(
            interactions,
            interactions.c.person_id == person["id"],
            interactions.c.interaction_type == "email",
            func.lower(interactions.c.notes).like(like_pattern(skill_name), escape=LIKE_ESCAPE),
        )
        if duplicate:
            self.skipped += 1
            return
        self._insert("Interactions", interactions, {
            "person_id": person["id"],
            "interaction_type": "email",
            "interaction_date": parse_linkedin_date(row.get("Endorsement Date")),
            "notes": f"LinkedIn endorsement for {skill_name}",
            "tags": "linkedin,endorsement",
        })

    def education(self, row: dict) -> None:
        school = clean(row.get("School Name"))
        if not school:
            self.skipped += 1
            return
        degree = clean(row.get("Degree Name")) or None
        conditions = [_lower_eq(institutions.c.name, school)]
        conditions.append(_lower_eq(institutions.c.degree, degree) if degree else institutions.c.degree.is_(None))
        if self._first(institutions, *conditions):
            self.skipped += 1
            return

        notes = clean(row.get("Notes"))
        activities = clean(row.get("Activities"))
        if activities:
            notes = f"{notes}\nActivities: {activities}" if notes else f"Activities: {activities}"
        self._insert("Institutions", institutions, {
            "name": school,
            "type": "university",
            "degree": degree,
            "start_date": parse_linkedin_date(row.get("Start Date")),
            "end_date": parse_linkedin_date(row.get("End Date")),
            "notes": notes or None,
        })

    def certification(self, row: dict) -> None:
        title = clean(row.get("Name"))
        if not title:
            self.skipped += 1
            return
        provider = clean(row.get("Authority")) or None
        conditions = [_lower_eq(learning.c.title, title)]
        conditions.append(_lower_eq(learning.c.provider, provider) if provider else learning.c.provider.is_(None))
        if self._first(learning, *conditions):
            self.skipped += 1
            return

        note_parts = []
        if clean(row.get("License Number")):
            note_parts.append(f"License: {clean(row.get('License Number'))}")
        if clean(row.get("Url")):
            note_parts.append(f"URL: {clean(row.get('Url'))}")
        start = parse_linkedin_date(row.get("Started On"))
        self._insert("Learning", learning, {
            "title": title,
            "provider": provider,
            "learning_type": "certification",
            "status": "completed",
            "start_date": start,
            "completion_date": start,
            "notes": "\n".join(note_parts) or None,
        })

    def position(self, row: dict) -> None:
        company = clean(row.get("Company Name"))
        title = clean(row.get("Title"))
        if not company or not title:
            self.skipped += 1
            return
        if self._first(jobs, _lower_eq(jobs.c.company, company), _lower_eq(jobs.c.title, title)):
            self.skipped += 1
            return
        end = parse_linkedin_date(row.get("Finished On"))
        self._insert("Jobs", jobs, {
            "company": company,
            "title": title,
            "description": clean(row.get("Description")) or None,
            "location": clean(row.get("Location")) or None,
            "start_date": parse_linkedin_date(row.get("Started On")),
            "end_date": end,
            "is_current": end is None,
        })

    def skill(self, row: dict) -> None:
        name = clean(row.get("Name"))
        if not name:
            self.skipped += 1
            return
        if self._first(skills, _lower_eq(skills.c.name, name)):
            self.skipped += 1
            return
        self._insert("Skills", skills, {"name": name, "proficiency": "intermediate"})

    HANDLERS = {
        "Connections": "connection",
        "Endorsements": "endorsement",
        "Education": "education",
        "Certifications": "certification",
        "Positions": "position",
        "Skills": "skill",
    }

    def run(self, detected_type: str, rows: List[Dict[str, str]]) -> None:
        """Each row runs in its own savepoint so a failed row leaves no partial writes."""
        handler = getattr(self, self.HANDLERS[detected_type])
        for number, row in enumerate(rows, start=1):
            counts, skipped = dict(self.counts), self.skipped
            try:
                with self.db.begin_nested():
                    handler(row)
            except (ValueError, TypeError, KeyError, SQLAlchemyError) as exc:
                self.counts = counts
                self.skipped = skipped + 1
                self.errors.append(f"Row {number}: {_error_message(exc)}")

    def result(self, detected_type: str) -> dict:
        return {
            "detected_type": detected_type,
            "imported": [{"entity": k, "count": v} for k, v in self.counts.items() if v > 0],
            "skipped": self.skipped,
            "errors": self.errors,
        }


def import_linkedin_csv(db, workspace_id: int, csv_data: str) -> Tuple[dict, int]:
    """
    Import one CSV inside the given session. Returns (result, data row count).

    The caller owns the transaction: everything commits or rolls back together.
    """
    headers, rows = parse_csv(csv_data)
    detected_type = detect_csv_type(headers)
    if detected_type == UNKNOWN:
        return {
            "detected_type": UNKNOWN,
            "imported": [],
            "skipped": len(rows),
            "errors": ["Unrecognized LinkedIn export. Expected Connections, Endorsements, "
                       "Education, Certifications, Positions or Skills."],
        }, len(rows)

    importer = LinkedInImporter(db, workspace_id)
    importer.run(detected_type, rows)
    result = importer.result(detected_type)
    logger.info("LinkedIn %s import: %s, %d skipped", detected_type, result["imported"], result["skipped"])
    return result, len(rows)


def record_import(workspace_id: int, file_name: Optional[str], result: dict, row_count: int) -> Optional[str]:
    """Store the audit document. Failures are logged, never raised."""
    doc = {
        "workspace_id": workspace_id,
        "file_name": file_name,
        "detected_type": result["detected_type"],
        "row_count": row_count,
        "imported": result["imported"],
        "skipped": result["skipped"],
        "error_count": len(result["errors"]),
        "imported_at": utcnow(),
    }
    try:
        inserted = get_collection(COLLECTIONS["raw_imports"]).insert_one(doc)
        return str(inserted.inserted_id)
    except Exception as e:
        logger.warning("Could not record import audit: %s", e)
        return None


def list_imports(workspace_id: int, limit: int = 20) -> List[dict]:
    cursor = (
        get_collection(COLLECTIONS["raw_imports"])
        .find({"workspace_id": workspace_id})
        .sort("imported_at", -1)
        .limit(limit)
    )
    history = []
    for doc in cursor:
        doc["id"] = str(doc.pop("_id"))
        history.append(doc)
    return history
