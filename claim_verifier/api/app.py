"""FastAPI application for the Claim Verifier service."""

import asyncio
import contextlib
import logging

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file
load_dotenv()

from ..infrastructure.dependencies import get_service_container
from .endpoints import health, verify

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Create providers and judges and start the source sweep on startup."""
    container = get_service_container()
    try:
        await container.get_fact_checking_service()
    except Exception as e:
        logger.error(f"❌ Failed to initialize fact checking service: {e}")
    sweep = asyncio.create_task(container.reverify_periodically())

    yield  # Application runs here

    sweep.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweep
    await container.shutdown()
    logger.info("🛑 Providers and judges shut down")


# Create FastAPI application
app = FastAPI(
    title="Claim Verifier API",
    description="Tiered claim verification over fact-check, reference, news and AI evidence",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(verify.router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
