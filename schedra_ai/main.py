"""
FastAPI entrypoint for the Schedra AI analytics route.

POST /api/predict/ai turns project data into a Gemini prompt and returns the
model's JSON. When Gemini is unavailable the dashboard still gets synthetic
data; only configuration problems and malformed replies surface as errors.
"""

import logging
from contextlib import asynccontextmanager
from functools import lru_cache

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from .config import load_settings

settings = load_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .analyzer import generate_fallback_data, run_analysis
from .errors import ConfigurationError, ResponseFormatError, UnrecognizedTypeError
from .llm_client import GenerationClient, KeyCursor
from .schemas import AnalysisRequest, ErrorResponse
from .utils import mask_key

# Shared by every request: rotation starts from the last key that worked
key_cursor = KeyCursor()


@lru_cache(maxsize=1)
def get_generation_client() -> GenerationClient:
    """Process-wide Gemini client built from settings."""
    return GenerationClient(
        api_keys=settings.api_keys,
        model=settings.model_name,
        fallback_model=settings.fallback_model_name,
        retries=settings.retries,
        initial_delay_ms=settings.initial_delay_ms,
        cursor=key_cursor,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    keys = settings.api_keys
    logger.info("==================================")
    logger.info("Schedra AI analytics service starting")
    if keys:
        logger.info(f"GEMINI_API_KEY: PRESENT ({len(keys)} key(s), first {mask_key(keys[0], 6)})")
    else:
        logger.warning("GEMINI_API_KEY: MISSING")
    logger.info(f"Models: {settings.model_name} -> {settings.fallback_model_name}")
    logger.info("==================================")
    yield


app = FastAPI(title="Schedra AI Analytics", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, error: str = None) -> JSONResponse:
    body = {"message": message}
    if error is not None:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=body)


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Schedra API is running..."


@app.post("/api/predict/ai", responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def predict_ai(
    request: AnalysisRequest,
    client: GenerationClient = Depends(get_generation_client),
):
    logger.info("--- NEW AI REQUEST ---")
    logger.info(f"Active keys available: {len(client.api_keys)}")

    try:
        if not client.api_keys:
            raise ConfigurationError("No Gemini API keys configured")
        return await run_analysis(request, client)

    except ConfigurationError as e:
        logger.error(f"CRITICAL: {e}")
        return _error(500, "Server misconfiguration: Missing API Keys")
    except UnrecognizedTypeError:
        return _error(400, "Invalid prediction type")
    except ResponseFormatError as e:
        return _error(500, "AI response format was invalid", str(e))
    except Exception as e:
        logger.exception(f"Critical AI route error: {e}")
        # Still answer with fallback data when there is enough to build it
        if request.type and request.project_data is not None:
            return generate_fallback_data(request.type, request.project_data)
        return _error(500, "Critical internal error", str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("schedra_ai.main:app", host="0.0.0.0", port=settings.port)
