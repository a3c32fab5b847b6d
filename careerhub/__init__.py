"""
CareerHub
Personal career management and resume builder.

Architecture:
- PostgreSQL: Career and resume records (people, jobs, goals, variants, snapshots)
- MongoDB: Import audit history and AI outputs
- AI assistant: Meeting briefs and drafts only (never the source of truth)
"""

__version__ = "1.0.0"
