"""
Contatore della numerazione progressiva su MongoDB.

Un solo documento per sequenza: {"_id": "documents", "last_number": "2026/007"}.
L'aggiornamento è un compare-and-swap: update_one filtrato sul valore letto.
"""
from datetime import datetime, timezone
from typing import Optional
import logging

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError

from fatturazione.db_collections import SEQUENCE_DOCUMENTS

logger = logging.getLogger(__name__)


class SequenceRepository:
    """SequenceStore persistente."""

    def __init__(self, collection: AsyncIOMotorCollection, sequence_key: str = SEQUENCE_DOCUMENTS):
        self.collection = collection
        self.sequence_key = sequence_key

    async def get_last_number(self) -> Optional[str]:
        document = await self.collection.find_one({"_id": self.sequence_key})
        return document.get("last_number") if document else None

    async def compare_and_swap(self, expected: Optional[str], new: str) -> bool:
        """
        Returns:
            True se il contatore valeva ancora `expected` ed è stato aggiornato
        """
        now = datetime.now(timezone.utc)

        if expected is None:
            # Primo numero: l'inserimento fallisce se un altro processo ci ha preceduto
            try:
                await self.collection.insert_one({
                    "_id": self.sequence_key,
                    "last_number": new,
                    "updated_at": now
                })
                return True
            except DuplicateKeyError:
                logger.warning(f"Sequence {self.sequence_key} already initialised")
                return False

        result = await self.collection.update_one(
            {"_id": self.sequence_key, "last_number": expected},
            {"$set": {"last_number": new, "updated_at": now}}
        )
        return result.modified_count == 1
