from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from presensi.config import settings


def create_db_engine(url: str = None):
    """Create an engine; SQLite connections are shared across worker threads."""
    url = url or settings.database_url
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


engine = create_db_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
