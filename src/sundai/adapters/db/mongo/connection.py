"""
MongoDB connection setup (Motor client + Beanie registration).
"""

import logging

import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from sundai.core.config import DatabaseSettings

from .models.clinic_m import DOCUMENT_MODELS
from .repositories.clinic_repository import MongoClinicRepositories

logger = logging.getLogger(__name__)

SERVER_SELECTION_TIMEOUT_MS = 15000


def create_client(settings: DatabaseSettings) -> AsyncIOMotorClient:
    """Motor client for the configured URI; TLS only for Atlas SRV URIs."""
    if settings.uri.startswith("mongodb+srv://"):
        return AsyncIOMotorClient(
            settings.uri,
            serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    # Local/standard connection (no TLS)
    return AsyncIOMotorClient(settings.uri, serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS)


async def init_mongo(settings: DatabaseSettings) -> MongoClinicRepositories:
    """Connect, register the document models and return the repository bundle."""
    client = create_client(settings)
    await init_beanie(database=client[settings.db_name], document_models=DOCUMENT_MODELS)
    logger.info(f"✅ Database connection established ({settings.db_name})")
    return MongoClinicRepositories(client)
