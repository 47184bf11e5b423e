"""
FastAPI application entry point.

Main application module that sets up the FastAPI server,
configures CORS, and includes all API routes.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import topics, vocabularies
from config import settings
from services.translation_client import create_translation_client
from utils.error_handling import VocabdeskError, format_error_response
from logger_config import logger

# Create FastAPI app with metadata
app = FastAPI(
    title="Vocabdesk API",
    description="Vocabulary management and bulk import for a language-learning platform",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (for admin frontend access)
if settings.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Exception handlers
@app.exception_handler(VocabdeskError)
async def vocabdesk_error_handler(request: Request, exc: VocabdeskError):
    """Handle custom Vocabdesk errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error_response(exc)
    )

# Include routers
app.include_router(
    vocabularies.router, prefix="/api/admin/vocabularies", tags=["vocabularies"]
)
app.include_router(topics.router, prefix="/api/admin/topics", tags=["topics"])


@app.get("/")
def root() -> dict:
    """Root endpoint."""
    return {
        "message": "Vocabdesk API",
        "version": "1.0.0",
        "docs": "/docs"
    }


def translation_status() -> dict:
    """Describe the configured batch translation backend."""
    return {
        "provider": settings.translation_provider,
        "target_language": settings.translation_target_language,
        "enabled": create_translation_client() is not None,
    }


# Resolved once at startup
TRANSLATION_STATUS = translation_status()
logger.info(
    "Batch translation: provider={provider}, target={target_language}, "
    "enabled={enabled}".format(**TRANSLATION_STATUS)
)


@app.get("/health")
def health() -> dict:
    """Health check endpoint, including the translation backend state."""
    return {"status": "healthy", "translation": TRANSLATION_STATUS}


if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Vocabdesk API server")
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
