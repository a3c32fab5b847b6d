"""
CareerHub - Main Application

FastAPI backend with:
- PostgreSQL for career and resume records (SQLite works for local runs)
- MongoDB for import audit history and AI outputs
- OpenAI-compatible AI assistant for meeting briefs, drafts, career narratives and chat
- Session cookie / JWT authentication
- Public share pages at /r/{token}

Run: uvicorn careerhub.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from careerhub.api.routes import api_router, public_router
from careerhub.core.config import get_settings
from careerhub.core.errors import register_exception_handlers
from careerhub.db.mongodb import init_mongo_indexes, test_mongo_connection
from careerhub.db.postgres import init_schema, test_postgres_connection

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="CareerHub",
    description="""
    Personal career management and resume builder.

    ## Features
    - **Career record**: jobs, people, interactions, skills, goals, feedback,
      learning, achievements, content and the relationships between them
    - **Timeline**: every dated record grouped by year with linked people
    - **LinkedIn import**: connections, endorsements, education,
      certifications, positions and skills from export CSVs
    - **Dashboard**: stale contacts, top connectors, goal progress
    - **Resumes**: variants, version snapshots, export (json, markdown,
      txt, html, docx, pdf) and public share links
    - **AI assistant**: meeting briefs, content drafts, career narratives and chat

    ## Databases
    - PostgreSQL: every career and resume record
    - MongoDB: import audit history and AI outputs
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")
app.include_router(public_router)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create missing tables and MongoDB indexes."""
    try:
        init_schema()
        logger.info("Database schema ready")
    except Exception as e:
        logger.error("Database schema initialization failed: %s", e)
    try:
        init_mongo_indexes()
        logger.info("MongoDB indexes initialized")
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "CareerHub", "docs": "/docs"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
