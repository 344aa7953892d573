from .mongo import connect_database, get_database, get_db

__all__ = ["connect_database", "get_database", "get_db"]
