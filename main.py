"""
FastAPI Main Application

This script wires the intervention routes and runs the FastAPI server on port 8000.
"""

import os
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
import uvicorn

# Load environment before importing modules that read configuration
load_dotenv()

from intervention import api as intervention_api
from intervention.history_store import InterventionHistory

# Setup logging with timestamps
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title="Habit Intervention API",
    description="Suggests alternative activities when a phone-reaching urge is detected",
    version="1.0.0"
)

app.state.intervention_history = InterventionHistory()
app.include_router(intervention_api.router)


@app.get("/")
async def root():
    """Root endpoint."""
    logger.info("GET / - Root endpoint called")
    return {"message": "Habit Intervention API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    logger.info("GET /health - Health check endpoint called")
    return {"status": "healthy"}


if __name__ == "__main__":
    # Run the server on port 8000 unless PORT is set
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True
    )
