"""
Database module - relational store (connection pool, schema) and MongoDB client.
"""
from app.db.postgres import Database, fetch_all, fetch_one, get_db

__all__ = [
    "Database",
    "fetch_all",
    "fetch_one",
    "get_db",
]
