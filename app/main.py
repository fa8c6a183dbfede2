from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.api.v1.api import api_router
from app.db.init_db import init_db
from app.middleware.logging import LoggingMiddleware

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_db()
    yield

app_config = {
    "title": "KPI Dashboard",
    "description": "KPI import, cascade, commitment, submission and approval with AI summaries",
    "version": "1.0.0",
    "lifespan": lifespan,
    "docs_url": "/api/docs",
}

app = FastAPI(**app_config)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS
)
app.add_middleware(LoggingMiddleware)

# Include routers
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {
        "message": "📊 Welcome to the KPI Dashboard API!",
        "status": "active",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
        "docs": "/api/docs"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "components": {
            "ai": "configured" if settings.OPENAI_API_KEY else "disabled",
        }
    }
