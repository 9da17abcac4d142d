"""
FastAPI application - Main entry point

Run: uvicorn src.api.main:app --host 127.0.0.1 --port 8000
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.api.endpoints.deposits import deposits_api

# Setup logging
logging.basicConfig(
    level=logging.DEBUG if os.getenv("DEBUG", "").lower() in ("1", "true", "yes") else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Vertex Deposits API",
    description="Deposits by card, crypto wallet or M-Pesa via the Pesapal gateway",
    version="1.0.0",
)

_raw_origins = os.getenv("CORS_ORIGINS", "").strip()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _raw_origins.split(",") if o.strip()] or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.debug("Incoming request: %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Unhandled exception while processing request")
        raise
    logger.debug("Response status: %s for %s %s", response.status_code, request.method, request.url.path)
    return response


# Register deposits API router
app.include_router(deposits_api, prefix="/api/v1/deposits", tags=["Deposits"])


@app.get("/health")
def health():
    return {"status": "ok"}
