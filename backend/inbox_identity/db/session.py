"""Engine and session factory bound to the configured database."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from inbox_identity.config import get_settings

_settings = get_settings()

engine = create_engine(_settings.database_url, echo=_settings.sql_echo, future=True, pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
