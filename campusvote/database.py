import logging

from pymongo import MongoClient

from campusvote import config

logger = logging.getLogger(__name__)


class MongoConnector:
    """Process-wide MongoDB client, created on first use."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super(MongoConnector, cls).__new__(cls)
            try:
                instance.client = MongoClient(config.MONGO_URI)
                instance.db = instance.client[config.MONGO_DB]
                instance.client.server_info()
                logger.info(f"Connected to MongoDB at {config.MONGO_URI}, database: {config.MONGO_DB}")
            except Exception as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                raise
            cls._instance = instance
        return cls._instance

    @classmethod
    def close(cls):
        if cls._instance is not None:
            cls._instance.client.close()
            cls._instance = None
            logger.info("MongoDB connection closed")
