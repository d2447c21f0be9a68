"""
FastAPI Application Entry Point

Integrates:
  - Student registration and edit pages
  - Global WhatsApp webhook (handshake + relay)
  - Health check and policies
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from api import edit_router, registration_router, site_router
from config import Config
from infra.bootstrap import InfraBootstrap, bootstrap_infrastructure
from transport.whatsapp.webhook import router as whatsapp_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    infra = bootstrap_infrastructure()
    logger.info("=" * 60)
    logger.info("WhatsApp students relay starting up...")
    logger.info(f"Service: {Config.SERVICE_NAME}")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"Infrastructure: {infra!r}")
    if not Config.validate():
        logger.warning("WEBHOOK_VERIFY_TOKEN is empty: handshake and edit fallback will reject every token")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("WhatsApp students relay shutting down...")
    await infra.shutdown()
    InfraBootstrap.reset()


# Create FastAPI app
app = FastAPI(
    title="WhatsApp Students Relay",
    description="Multi-tenant WhatsApp webhook relay to per-student AI flows",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict this in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Include routers
app.include_router(site_router)
app.include_router(registration_router)
app.include_router(edit_router)
app.include_router(whatsapp_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.PORT,
        reload=Config.ENVIRONMENT == "development",
    )
