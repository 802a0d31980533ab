# persistence_adapter.py
import json
import os
from typing import Dict, Any, List
from loguru import logger

from Your_bags_tracker.configuration_manager import DEFAULT_STORAGE_KEY
from Your_bags_tracker.models import as_finite


class SnapshotFormatError(ValueError):
    """Raised internally when a stored snapshot does not have the expected shape."""

    pass


class PersistenceAdapter:
    """
    Key-value JSON file holding the serialized portfolio.

    The file is a JSON object; the portfolio lives under one key as an ordered
    list of {id, name, symbol, quantity} records. Other keys are left untouched.
    """

    def __init__(self, storage_path: str, storage_key: str = DEFAULT_STORAGE_KEY):
        self.storage_path = storage_path
        self.storage_key = storage_key

    def _read_document(self) -> Dict[str, Any]:
        with open(self.storage_path, "r", encoding="utf-8") as f:
            document = json.load(f)
        if not isinstance(document, dict):
            raise SnapshotFormatError("Storage file is not a JSON object")
        return document

    def load(self) -> List[Dict[str, Any]]:
        """
        Read the stored portfolio records.

        Never raises. A missing file, a missing key or anything that fails to
        parse gives an empty portfolio.
        """
        if not os.path.exists(self.storage_path):
            logger.info("💼 No saved portfolio found, starting empty")
            return []

        try:
            document = self._read_document()
            if self.storage_key not in document:
                logger.info(f"💼 No '{self.storage_key}' entry in storage, starting empty")
                return []
            records = self._validate(document[self.storage_key])
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Saved portfolio is unreadable, starting empty: {e}")
            return []

        logger.info(f"💼 Loaded {len(records)} holdings from {self.storage_path}")
        return records

    def save(self, records: List[Dict[str, Any]]) -> bool:
        """
        Overwrite the stored portfolio with the given records.

        Best effort: failures are logged and reported through the return value.
        """
        try:
            document = {}
            if os.path.exists(self.storage_path):
                try:
                    document = self._read_document()
                except (OSError, ValueError):
                    logger.warning("⚠️ Replacing unreadable storage file")
                    document = {}

            document[self.storage_key] = records
            directory = os.path.dirname(self.storage_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.storage_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)

            logger.debug(f"💾 Portfolio saved to {self.storage_path} ({len(records)} holdings)")
            return True

        except (OSError, TypeError, ValueError) as e:
            logger.error(f"💥 Failed to save portfolio: {e}")
            return False

    @staticmethod
    def _validate(raw: Any) -> List[Dict[str, Any]]:
        if not isinstance(raw, list):
            raise SnapshotFormatError("Portfolio entry is not a list")

        records = []
        seen = set()
        for item in raw:
            if not isinstance(item, dict):
                raise SnapshotFormatError(f"Holding is not an object: {item!r}")
            coin_id = item.get("id")
            if not isinstance(coin_id, str) or not coin_id:
                raise SnapshotFormatError(f"Holding has no id: {item!r}")
            quantity = as_finite(item.get("quantity"))
            if quantity is None or quantity < 0:
                raise SnapshotFormatError(f"Holding '{coin_id}' has invalid quantity")
            if coin_id in seen:
                logger.warning(f"⚠️ Dropping duplicate holding '{coin_id}' from storage")
                continue
            seen.add(coin_id)
            records.append(
                {
                    "id": coin_id,
                    "name": str(item.get("name") or coin_id),
                    "symbol": str(item.get("symbol") or ""),
                    "quantity": quantity,
                }
            )
        return records
