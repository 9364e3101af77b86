"""
Data Masking Tool - Main API
PII anonymization for GDPR/KVKK data-protection workflows
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import structlog

from src.api.routes import masking, rules
from src.utils.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Data Masking Tool", environment=settings.ENVIRONMENT)
    if settings.SEED_DEFAULT_RULES:
        await rules.rule_service.seed_defaults()
    yield
    logger.info("Shutting down Data Masking Tool")


app = FastAPI(
    title="Data Masking Tool",
    description="Masking and anonymization of personally identifiable information",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(masking.router, prefix=settings.API_PREFIX, tags=["Data Masking"])
app.include_router(rules.router, prefix=settings.API_PREFIX, tags=["Masking Rules"])


@app.get("/")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": "1.0.0",
        "status": "operational"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
