import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lineage.config import settings
from lineage.database import Base, engine
from lineage.core.errors import LineageError
from lineage.logging_config import setup_logging

# Import models so SQLAlchemy registers tables
from lineage.models import person, relationship  # noqa: F401

# Routers
from lineage.routers import person_router, relationship_router

setup_logging()
logger = logging.getLogger(__name__)

# -----------------------
# CREATE APP
# -----------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Family tree API: persons and bidirectional family relationships.",
    version="1.0.0",
)

# -----------------------
# CORS
# -----------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------
# DATABASE TABLES
# -----------------------
Base.metadata.create_all(bind=engine)


# -----------------------
# ERROR HANDLERS
# -----------------------
@app.exception_handler(LineageError)
async def lineage_error_handler(request: Request, exc: LineageError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "error_code": exc.error_code},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "error_code": "INTERNAL_ERROR"},
    )


# -----------------------
# ROUTES
# -----------------------
app.include_router(person_router.router)
app.include_router(relationship_router.router)


# -----------------------
# HEALTH CHECK
# -----------------------
@app.get("/")
def root():
    return {"message": f"{settings.PROJECT_NAME} is running!"}
