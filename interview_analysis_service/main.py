from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends

import schemas
from aws_clients import client_store, create_aws_clients, close_aws_clients
from config import Settings, settings, get_settings
from database import engine
from logging_config import configure_logging, get_logger
from models import Base
from routers import analysis as analysis_router
from routers import evaluation as evaluation_router
from routers import upload as upload_router
from scoring_rules import rules_store, load_scoring_rules

logger = get_logger(__name__)

async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created or already exist.")

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR, settings.FILE_LOGGING_ENABLED)
    logger.info("Interview Analysis Service starting up...")
    await create_db_and_tables()
    client_store.update(create_aws_clients(settings))
    if settings.SCORING_RULES_PATH:
        rules_store["rules"] = await load_scoring_rules(settings.SCORING_RULES_PATH)
    logger.info(f"Recording bucket: {settings.RECORDING_BUCKET}, analysis bucket: {settings.ANALYSIS_BUCKET}")
    yield
    close_aws_clients()
    rules_store.clear()
    logger.info("Interview Analysis Service shutting down...")

app = FastAPI(
    title="Interview Analysis Service",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(upload_router.router, prefix="/api/upload")
app.include_router(analysis_router.router, prefix="/api/analysis")
app.include_router(evaluation_router.router, prefix="/api/evaluation")

@app.get("/health", response_model=schemas.HealthResponse, tags=["Health"])
async def health(current_settings: Settings = Depends(get_settings)):
    logger.debug("Health endpoint was called")
    return schemas.HealthResponse(
        status="OK",
        message="Interview Analysis API Server is running",
        environment=schemas.EnvironmentInfo(
            aws_region=current_settings.AWS_REGION,
            aws_configured=current_settings.aws_configured,
            buckets=schemas.BucketInfo(
                video=current_settings.RECORDING_BUCKET,
                analysis=current_settings.ANALYSIS_BUCKET,
                profile=current_settings.PROFILE_BUCKET
            )
        )
    )

@app.get("/", tags=["Root"])
async def read_root():
    logger.info("Root endpoint was called")
    return {"message": "Welcome to the Interview Analysis Service!"}

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Interview Analysis Service on {settings.IAS_HOST}:{settings.IAS_PORT}")
    uvicorn.run("main:app", host=settings.IAS_HOST, port=settings.IAS_PORT)
