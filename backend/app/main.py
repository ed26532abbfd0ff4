"""FastAPI application entry point. Registers middleware and API routers."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401 - registers model metadata
from app.routers import auth, content, versions, departments, users, notifications, logs

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Department Roster & Knowledge Base",
    description="Roster, role management and versioned SOP/guide/policy library for emergency-services departments",
    version="1.0.0",
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(auth.router)
app.include_router(content.router)
app.include_router(versions.router)
app.include_router(departments.router)
app.include_router(users.router)
app.include_router(notifications.router)
app.include_router(logs.router)


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Department Roster & Knowledge Base"}
