"""
Export Service - renders resume data into downloadable documents.

Formats:
- json      - the resume data as stored
- markdown  - string builder
- txt       - string builder
- html      - Jinja2 template (templates/resume.html)
- docx      - python-docx
- pdf       - WeasyPrint, from the HTML rendering

Binary formats come back base64 encoded.
"""

import base64
import io
import json
import logging
import re
from datetime import date
from pathlib import Path
from typing import List, Optional

from docx import Document
from docx.shared import Pt
from jinja2 import Environment, FileSystemLoader, select_autoescape

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

CONTENT_TYPES = {
    "json": "application/json",
    "markdown": "text/markdown",
    "txt": "text/plain",
    "html": "text/html",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "pdf": "application/pdf",
}

EXTENSIONS = {"json": "json", "markdown": "md", "txt": "txt", "html": "html", "docx": "docx", "pdf": "pdf"}

BINARY_FORMATS = {"docx", "pdf"}

COLOR_SCHEMES = {
    "full": {"text": "#1f2933", "accent": "#1d4ed8", "muted": "#52606d", "rule": "#93c5fd"},
    "minimal": {"text": "#222222", "accent": "#222222", "muted": "#666666", "rule": "#dddddd"},
    "bw": {"text": "#000000", "accent": "#000000", "muted": "#000000", "rule": "#000000"},
}

DATE_PATTERNS = {"full": "%b %d, %Y", "monthYear": "%b %Y", "yearOnly": "%Y"}


DEFAULT_OPTIONS = {"include_photos": False, "include_links": True, "paper_size": "letter", "color_scheme": "full"}


def _options(options: Optional[dict]) -> dict:
    return {**DEFAULT_OPTIONS, **(options or {})}


def format_resume_date(value: Optional[str], date_format: str = "monthYear", empty: str = "") -> str:
    """ISO date string -> display string in the view's date format."""
    if not value:
        return empty
    try:
        parsed = date.fromisoformat(str(value)[:10])
    except ValueError:
        return str(value)
    return parsed.strftime(DATE_PATTERNS.get(date_format, DATE_PATTERNS["monthYear"]))


def export_filename(variant_name: str, export_format: str) -> str:
    stem = re.sub(r"\s+", "_", variant_name.strip())
    return f"{stem}_resume.{EXTENSIONS[export_format]}"


def _date_format(data: dict) -> str:
    return ((data.get("meta") or {}).get("formatting") or {}).get("date_format", "monthYear")


def _date_range(start: Optional[str], end: Optional[str], date_format: str) -> str:
    if not start and not end:
        return ""
    return f"{format_resume_date(start, date_format)} - {format_resume_date(end, date_format, 'Present')}"


def _contact_parts(basics: dict, include_links: bool) -> List[str]:
    location = basics.get("location") or {}
    place = ", ".join(p for p in (location.get("city"), location.get("region"), location.get("country")) if p)
    parts = [basics.get("email"), basics.get("phone"), place]
    if include_links:
        parts.append(basics.get("url"))
    return [p for p in parts if p]


def _joined(sep: str, *parts) -> str:
    return sep.join(str(p) for p in parts if p)


# ============================================================
# TEXT BUILDERS
# ============================================================

def to_markdown(data: dict, options: Optional[dict] = None) -> str:
    opts = _options(options)
    fmt = _date_format(data)
    basics = data.get("basics") or {}
    lines = [f"# {basics.get('name') or 'Resume'}"]
    if basics.get("label"):
        lines.append(f"**{basics['label']}**")
    contact = _contact_parts(basics, opts["include_links"])
    if contact:
        lines += ["", " | ".join(contact)]
    if opts["include_links"]:
        for profile in basics.get("profiles") or []:
            if profile.get("url"):
                lines.append(f"- [{profile.get('network') or profile['url']}]({profile['url']})")

    if basics.get("summary"):
        lines += ["", "## Summary", "", basics["summary"]]

    if data.get("work"):
        lines += ["", "## Experience"]
        for w in data["work"]:
            lines += ["", f"### {_joined(' - ', w.get('position'), w.get('name'))}"]
            span = _date_range(w.get("startDate"), w.get("endDate"), fmt)
            if span:
                lines.append(f"*{span}*")
            if w.get("summary"):
                lines += ["", w["summary"]]
            if w.get("highlights"):
                lines.append("")
                lines += [f"- {h}" for h in w["highlights"]]

    if data.get("education"):
        lines += ["", "## Education"]
        for e in data["education"]:
            lines += ["", f"### {e.get('institution') or ''}".rstrip()]
            detail = _joined(", ", e.get("studyType"), e.get("area"))
            if detail:
                lines.append(detail)
            span = _date_range(e.get("startDate"), e.get("endDate"), fmt)
            if span:
                lines.append(f"*{span}*")

    if data.get("skills"):
        lines += ["", "## Skills", ""]
        lines += [f"- {s.get('name') or ''}" + (f" ({s['level']})" if s.get("level") else "") for s in data["skills"]]

    if data.get("projects"):
        lines += ["", "## Projects"]
        for p in data["projects"]:
            name = p.get("name") or ""
            title = f"[{name}]({p['url']})" if opts["include_links"] and p.get("url") else name
            lines += ["", f"### {title}"]
            if p.get("description"):
                lines.append(p["description"])

    if data.get("certifications"):
        lines += ["", "## Certifications", ""]
        lines += [f"- {_joined(', ', c.get('name'), c.get('issuer'))}" for c in data["certifications"]]

    if data.get("awards"):
        lines += ["", "## Awards", ""]
        lines += [f"- {a.get('title') or ''}" for a in data["awards"]]

    if data.get("publications"):
        lines += ["", "## Publications", ""]
        lines += [f"- {_joined(', ', p.get('name'), p.get('publisher'))}" for p in data["publications"]]

    return "\n".join(lines) + "\n"


def to_text(data: dict, options: Optional[dict] = None) -> str:
    opts = _options(options)
    fmt = _date_format(data)
    basics = data.get("basics") or {}
    name = basics.get("name") or "Resume"
    lines = [name.upper()]
    if basics.get("label"):
        lines.append(basics["label"])
    contact = _contact_parts(basics, opts["include_links"])
    if contact:
        lines.append(" | ".join(contact))

    def section(title: str) -> None:
        lines.extend(["", title.upper(), "-" * len(title)])

    if basics.get("summary"):
        section("Summary")
        lines.append(basics["summary"])

    if data.get("work"):
        section("Experience")
        for w in data["work"]:
            lines.append(_joined(", ", w.get("position"), w.get("name")))
            span = _date_range(w.get("startDate"), w.get("endDate"), fmt)
            if span:
                lines.append(f"  {span}")
            if w.get("summary"):
                lines.append(f"  {w['summary']}")
            lines += [f"  * {h}" for h in w.get("highlights") or []]

    if data.get("education"):
        section("Education")
        for e in data["education"]:
            lines.append(_joined(" - ", e.get("institution"), _joined(", ", e.get("studyType"), e.get("area"))))

    if data.get("skills"):
        section("Skills")
        lines.append(_joined(", ", *(s.get("name") for s in data["skills"])))

    if data.get("projects"):
        section("Projects")
        for p in data["projects"]:
            lines.append(_joined(": ", p.get("name"), p.get("description")))

    if data.get("certifications"):
        section("Certifications")
        lines += [c.get("name") or "" for c in data["certifications"]]

    if data.get("awards"):
        section("Awards")
        lines += [a.get("title") or "" for a in data["awards"]]

    if data.get("publications"):
        section("Publications")
        lines += [p.get("name") or "" for p in data["publications"]]

    return "\n".join(lines) + "\n"


# ============================================================
# HTML / PDF
# ============================================================

def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["resume_date"] = format_resume_date
    return env


def render_template(name: str, **context) -> str:
    return _get_env().get_template(name).render(context)


def to_html(data: dict, options: Optional[dict] = None) -> str:
    opts = _options(options)
    basics = data.get("basics") or {}
    context = {
        "basics": basics,
        "contact": _contact_parts(basics, opts["include_links"]),
        "work": data.get("work") or [],
        "education": data.get("education") or [],
        "skills": data.get("skills") or [],
        "projects": data.get("projects") or [],
        "certifications": data.get("certifications") or [],
        "awards": data.get("awards") or [],
        "publications": data.get("publications") or [],
        "variant": data.get("variant"),
        "date_format": _date_format(data),
        "include_links": opts["include_links"],
        "paper_size": opts["paper_size"],
        "colors": COLOR_SCHEMES.get(opts["color_scheme"], COLOR_SCHEMES["full"]),
    }
    return _get_env().get_template("resume.html").render(context)


def to_pdf(data: dict, options: Optional[dict] = None) -> bytes:
    """Render the HTML document to PDF bytes."""
    from weasyprint import HTML

    html = to_html(data, options)
    return HTML(string=html, base_url=str(TEMPLATE_DIR)).write_pdf()


# ============================================================
# DOCX
# ============================================================

def to_docx(data: dict, options: Optional[dict] = None) -> bytes:
    opts = _options(options)
    fmt = _date_format(data)
    basics = data.get("basics") or {}

    doc = Document()
    doc.styles["Normal"].font.size = Pt(11)
    doc.add_heading(basics.get("name") or "Resume", level=0)
    if basics.get("label"):
        doc.add_paragraph(basics["label"])
    contact = _contact_parts(basics, opts["include_links"])
    if contact:
        doc.add_paragraph(" | ".join(contact))

    if basics.get("summary"):
        doc.add_heading("Summary", level=1)
        doc.add_paragraph(basics["summary"])

    if data.get("work"):
        doc.add_heading("Experience", level=1)
        for w in data["work"]:
            doc.add_heading(_joined(", ", w.get("position"), w.get("name")), level=2)
            span = _date_range(w.get("startDate"), w.get("endDate"), fmt)
            if span:
                doc.add_paragraph(span).runs[0].italic = True
            if w.get("summary"):
                doc.add_paragraph(w["summary"])
            for highlight in w.get("highlights") or []:
                doc.add_paragraph(highlight, style="List Bullet")

    if data.get("education"):
        doc.add_heading("Education", level=1)
        for e in data["education"]:
            doc.add_paragraph(_joined(" - ", e.get("institution"), _joined(", ", e.get("studyType"), e.get("area"))))

    if data.get("skills"):
        doc.add_heading("Skills", level=1)
        doc.add_paragraph(_joined(", ", *(s.get("name") for s in data["skills"])))

    if data.get("projects"):
        doc.add_heading("Projects", level=1)
        for p in data["projects"]:
            doc.add_paragraph(_joined(": ", p.get("name"), p.get("description")), style="List Bullet")

    for key, title, field in (("certifications", "Certifications", "name"),
                              ("awards", "Awards", "title"),
                              ("publications", "Publications", "name")):
        if data.get(key):
            doc.add_heading(title, level=1)
            for item in data[key]:
                doc.add_paragraph(item.get(field) or "", style="List Bullet")

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


# ============================================================
# ENTRY POINT
# ============================================================

RENDERERS = {
    "json": lambda data, options: json.dumps(data, indent=2, default=str),
    "markdown": to_markdown,
    "txt": to_text,
    "html": to_html,
    "docx": to_docx,
    "pdf": to_pdf,
}


def export_resume(data: dict, export_format: str, variant_name: str, options: Optional[dict] = None) -> dict:
    """
    Render resume data in the requested format.

    Returns {success, format, filename, content_type, content | content_base64}.
    """
    rendered = RENDERERS[export_format](data, options)
    response = {
        "success": True,
        "format": export_format,
        "filename": export_filename(variant_name, export_format),
        "content_type": CONTENT_TYPES[export_format],
        "content": None,
        "content_base64": None,
    }
    if export_format in BINARY_FORMATS:
        response["content_base64"] = base64.b64encode(rendered).decode("ascii")
    else:
        response["content"] = rendered
    logger.info("Exported %s as %s", response["filename"], export_format)
    return response
