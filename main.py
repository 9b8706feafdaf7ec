from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel
import models.location  # Ensure tables are known by SQLModel for table creation
import models.shift
from core.errors import AppError
from db.session import engine
from contextlib import asynccontextmanager
from api.shift_routes import router as shift_router
from api.location_routes import router as location_router
from api.worker_routes import router as worker_router
import logging
import os
from dotenv import load_dotenv

# This file is the control center of the whole application

# Load environment variables from .env file, if it exists
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# Default values can be provided if the env var is not set
DEV_DOMAIN = os.getenv("DEV_DOMAIN", "http://localhost:5173")
PRODUCTION_DOMAIN = os.getenv("PRODUCTION_DOMAIN")

# Construct the list of allowed origins, always including both dev and production
allowed_origins_list = [
    DEV_DOMAIN,
    PRODUCTION_DOMAIN,
    "http://localhost:3000",  # Additional fallback for React dev
]

# Remove any None values and duplicates
allowed_origins_list = list(set([origin for origin in allowed_origins_list if origin]))

logger.info("CORS: allowing origins %s", allowed_origins_list)


# When We Start, Create the DB Tables if they don't exist
@asynccontextmanager
async def lifespan(app: FastAPI):
    SQLModel.metadata.create_all(engine)
    yield


# Starts Fast API Up; Init
app = FastAPI(title="Shift Scheduler", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Anything the engine did not raise on purpose
@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = "Internal server error" if ENVIRONMENT == "production" else str(exc)
    return JSONResponse(
        status_code=500,
        content={
            "message": message,
            "statusCode": 500,
            "errorCode": "INTERNAL_SERVER_ERROR",
        },
    )


app.include_router(shift_router, prefix="/api/shifts", tags=["Shifts"])
app.include_router(location_router, prefix="/api/locations", tags=["Locations"])
app.include_router(worker_router, prefix="/api/workers", tags=["Workers"])
