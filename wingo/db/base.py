from sqlmodel import SQLModel, create_engine, Session
from wingo.config import settings
import os

# SQLite needs the data directory to exist
if settings.db_dsn.startswith("sqlite:///./data"):
    os.makedirs("data", exist_ok=True)

engine = create_engine(settings.db_dsn, echo=False)

def init_db(bind=None):
    # register the tables on SQLModel.metadata
    from wingo.db import models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)

def get_session():
    with Session(engine) as session:
        yield session
