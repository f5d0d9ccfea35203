"""
MongoDB Connection Utility

MongoDB backs the "gridfs" resume storage option: uploaded resume files are
kept in a GridFS bucket and only a reference URL is stored in PostgreSQL.
The client is built by the application lifespan and closed on shutdown;
pymongo pools its own connections.
"""
import structlog
from pymongo import MongoClient
from pymongo.database import Database

from app.core.config import Settings

logger = structlog.get_logger(__name__)


def create_mongo_client(settings: Settings) -> MongoClient:
    """Create a MongoClient for the configured URI. Connects lazily."""
    return MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)


def get_mongo_db(client: MongoClient, settings: Settings) -> Database:
    """Get the configured database from a client"""
    return client[settings.mongodb_db]


def ping_mongo(client: MongoClient) -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client.admin.command("ping")
        return True
    except Exception as e:
        logger.warning("mongodb ping failed", error=str(e))
        return False
