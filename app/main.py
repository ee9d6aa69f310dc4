"""
CampusPrep Placement Portal - Main Application

FastAPI backend with:
- Key-value persistence (SQL via SQLAlchemy, or MongoDB)
- Single-session sign in for students and the admin
- OpenAI-compatible AI for roadmaps, mock tests, interview prep, resume feedback

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import api_router
from app.core.auth import get_kv_store, get_persistence_store
from app.core.config import get_settings
from app.core.errors import StoreUnavailableError

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="CampusPrep Placement Portal",
    description="""
    A placement-preparation portal with AI-generated study content.

    ## Features
    - **Authentication**: one active session, student sign up/in, admin login
    - **Drives**: browse placement drives; admins post and remove them
    - **Roadmaps**: AI career roadmaps with step tracking
    - **Mock Tests**: AI multiple-choice tests and score history
    - **Interview Prep**: AI interview questions with ideal answers
    - **Resume Feedback**: ATS score and suggestions from text or file
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error("Store unavailable during %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Storage is temporarily unavailable. Please retry."})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create the database record with seed drives on first run."""
    try:
        await get_persistence_store().initialize()
        logger.info("Store initialized (%s backend)", settings.store_backend)
    except StoreUnavailableError as e:
        logger.warning("Store initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "CampusPrep Placement Portal"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "store": "connected" if get_kv_store().ping() else "disconnected",
        "ai": "configured" if settings.ai_api_key else "not configured"
    }
