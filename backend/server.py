"""
Ink Request Tracker - inventory and request workflow for ink supplies
FastAPI + PostgreSQL backend
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
from pathlib import Path
import logging

# Load environment variables
ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

from database import Database, get_settings
from routes.auth_routes import auth_router
from routes.inventory_routes import inventory_router
from routes.assignment_routes import assignment_router
from routes.ink_request_routes import ink_request_router

# ==================== Logging Configuration ====================
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

settings = get_settings()

# Create the main app
app = FastAPI(
    title="Ink Request Tracker",
    description="Ink stock, per-user quotas and request review",
    version="1.0.0"
)


# Health check endpoint at root level (for liveness/readiness probes)
@app.get("/health")
async def root_health_check():
    return {"status": "healthy", "database": "PostgreSQL"}


app.include_router(auth_router)
app.include_router(inventory_router)
app.include_router(assignment_router)
app.include_router(ink_request_router)

# ==================== CORS Configuration ====================
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Startup & Shutdown Events ====================
@app.on_event("startup")
async def startup_db_client():
    """Create the database handle and tables on startup"""
    logger.info("Starting Ink Request Tracker...")

    database = Database.from_settings(settings)
    await database.create_all()
    app.state.database = database

    logger.info("Database initialized successfully")


@app.on_event("shutdown")
async def shutdown_db_client():
    """Close database connections on shutdown"""
    logger.info("Shutting down...")

    database = getattr(app.state, "database", None)
    if database is not None:
        await database.dispose()

    logger.info("Database connections closed")
