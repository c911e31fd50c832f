"""
Sequence Forecast - Main FastAPI Application

Stores observation sequences per session and returns short-term forecasts.
"""

from __future__ import annotations
from contextlib import asynccontextmanager

import logging
import os
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Database imports
from database import init_database, close_database, check_database_connection
from database.routes import router as db_router
from engine.routes import predict_router, upload_router

# Try to load environment variables from .env file
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

# Configure logging
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Database Lifespan Handler
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup, close on shutdown."""
    # Startup
    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        # Continue anyway - /api/predict works without a database
    yield
    # Shutdown
    await close_database()
    logger.info("Database connections closed")


app = FastAPI(
    title="Sequence Forecast API",
    description="Pattern detection and short-term forecasting for observation sequences",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS Configuration
ALLOWED_ORIGINS = [
    os.environ.get("FRONTEND_URL", "http://localhost:3000"),
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Routes
# =============================================================================

app.include_router(predict_router, prefix="/api/predict", tags=["predict"])
app.include_router(upload_router, prefix="/api/upload", tags=["upload"])
app.include_router(db_router, prefix="/api", tags=["database"])


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health")
async def health():
    """Health check endpoint with database status."""
    db_healthy = await check_database_connection()

    return {
        "status": "ok",
        "timestamp": datetime.now().isoformat(),
        "database": "connected" if db_healthy else "disconnected",
    }


# =============================================================================
# Run with uvicorn
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 3001)))
