from .config import settings, get_settings
from .database import engine, SessionLocal, get_db, Base, build_engine
from .db_retry import with_retry

__all__ = ["settings", "get_settings", "engine", "SessionLocal", "get_db", "Base", "build_engine", "with_retry"]
