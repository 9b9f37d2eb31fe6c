import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text
from schoolhub.database import get_db, dispose_engine
from schoolhub.routers import (
    auth, tenant, user, role, teacher, parent, student, subject, school_class, schedule, content
)
from schoolhub.core.config import settings
from schoolhub.core.error_handlers import register_exception_handlers
from schoolhub.core.logging_config import logger

# Schema is managed by Alembic; no Base.metadata.create_all here


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting SchoolHub API ({settings.ENVIRONMENT})")
    yield
    dispose_engine()
    logger.info("SchoolHub API stopped")


app = FastAPI(
    title="SchoolHub API",
    version="1.0.0",
    redirect_slashes=False,  # Disable automatic redirects to prevent POST data loss
    lifespan=lifespan,
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    logger.info(f"{request.method} {request.url.path} {response.status_code} - {process_time:.3f}s")
    return response


# Configure CORS for the dashboard
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(tenant.router, prefix="/api/tenants", tags=["Tenants"])
app.include_router(user.router, prefix="/api/users", tags=["Users"])
app.include_router(role.router, prefix="/api/roles", tags=["Roles"])
app.include_router(teacher.router, prefix="/api/teachers", tags=["Teachers"])
app.include_router(parent.router, prefix="/api/parents", tags=["Parents"])
app.include_router(student.router, prefix="/api/students", tags=["Students"])
app.include_router(subject.router, prefix="/api/subjects", tags=["Subjects"])
app.include_router(school_class.router, prefix="/api/classes", tags=["Classes"])
app.include_router(schedule.router, prefix="/api/schedules", tags=["Schedules"])
app.include_router(content.router, prefix="/api/content", tags=["Content"])


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "database": "connected"
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy"
        )
