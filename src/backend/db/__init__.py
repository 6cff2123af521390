"""Database engine, sessions and declarative base."""

from db.base import Base
from db.session import async_session_maker, close_db, get_db, get_engine, init_db

__all__ = ["Base", "async_session_maker", "get_db", "get_engine", "init_db", "close_db"]
