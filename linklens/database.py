from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from linklens.config import settings


def make_engine(url: str):
    # SQLite connections are shared with the event loop thread
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
