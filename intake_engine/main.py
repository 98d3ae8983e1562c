"""
FastAPI app

- Intake validation, branching and submission endpoints under /api/v1
- CORS configured for the web/mobile intake wizard
- Basic health check
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables from .env file early (before config is read)
project_root = Path(__file__).parent.parent
load_dotenv(dotenv_path=project_root / '.env')

from intake_engine.api import router
from intake_engine.api.middleware import TimingMiddleware
from intake_engine.core.config import CORS_ORIGINS, LOG_LEVEL
from intake_engine.core.errors import IntakeConfigurationError

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Intake Engine")

# Logs request duration and device_id for all requests
app.add_middleware(TimingMiddleware)

# Explicitly allow X-Device-ID header for device-based identification
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.include_router(router, prefix="/api/v1")


@app.exception_handler(IntakeConfigurationError)
async def intake_configuration_error_handler(request: Request, exc: IntakeConfigurationError):
    # Broken question/condition definitions are a server-side problem, not bad input
    logger.error(f"Intake configuration error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": f"Intake configuration error: {exc}"},
    )


@app.get("/")
async def root():
    """
    Basic health check
    """
    return {"status": "ok"}
