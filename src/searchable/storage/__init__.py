from .database import get_engine, init_db, make_session_factory, session_scope

__all__ = ["get_engine", "init_db", "make_session_factory", "session_scope"]
