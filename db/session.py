import os

from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

# Load environment variables from .env file
load_dotenv()

# Connects app to the shift store (PostgreSQL in production)

# A full SQLAlchemy URL wins; otherwise build one from the DB_* variables
DATABASE_URL = os.getenv("DATABASE_URL")

DB_HOST = os.getenv("DB_HOST")
DB_PORT = os.getenv("DB_PORT", "5432")  # Default PostgreSQL port
DB_NAME = os.getenv("DB_NAME")
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
INSTANCE_CONNECTION_NAME = os.getenv("INSTANCE_CONNECTION_NAME")  # For Cloud SQL Proxy

required_vars_for_tcp = ["DB_HOST", "DB_NAME", "DB_USER", "DB_PASSWORD"]
required_vars_for_socket = ["DB_NAME", "DB_USER", "DB_PASSWORD", "INSTANCE_CONNECTION_NAME"]


def build_database_url() -> str:
    if DATABASE_URL:
        return DATABASE_URL

    if INSTANCE_CONNECTION_NAME:
        missing_vars = [var for var in required_vars_for_socket if not os.getenv(var)]
        if missing_vars:
            raise ValueError(f"Missing required environment variables for Cloud SQL (socket): {', '.join(missing_vars)}")
        # PostgreSQL over the Cloud SQL Unix socket
        return f"postgresql+psycopg2://{DB_USER}:{DB_PASSWORD}@/{DB_NAME}?host=/cloudsql/{INSTANCE_CONNECTION_NAME}"

    missing_vars = [var for var in required_vars_for_tcp if not os.getenv(var)]
    if missing_vars:
        raise ValueError(f"Missing required environment variables for TCP: {', '.join(missing_vars)}")
    return f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"


def build_engine(url: str, echo: bool = False):
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory SQLite must share a single connection across threads
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


# Note: echo=True will log all SQL statements, keep it False in production
engine = build_engine(build_database_url(), echo=False)


# Getter for a session, shaped for FastAPI dependency injection
def get_session():
    with Session(engine) as session:
        yield session
