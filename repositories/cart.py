import json
import logging

from pydantic import ValidationError

from exceptions.storage import PersistenceWriteFailedException
from models.cart_line import CartLine, CartLineRecordDTO
from repositories.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class CartRepository:
    """
    Reads and writes the committed cart as a JSON array of line records under one key.

    Only committed quantities are written; pending edits never reach storage.
    """

    def __init__(self, store: KeyValueStore, storage_key: str = "shopcart_items"):
        self.store = store
        self.storage_key = storage_key

    def load(self) -> list[CartLine]:
        """
        Load the persisted cart.

        Missing or corrupt data is treated as an empty cart. Individual records that
        fail validation (bad quantity, missing price) or repeat a product id are dropped.

        Returns:
            Cart lines in their persisted order
        """
        try:
            raw = self.store.get(self.storage_key)
        except Exception as e:
            logger.warning(f"Could not read cart from storage key '{self.storage_key}': {e}")
            return []

        if not raw:
            return []

        try:
            records = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Corrupt cart data under '{self.storage_key}', starting with empty cart: {e}")
            return []

        if not isinstance(records, list):
            logger.warning(f"Cart data under '{self.storage_key}' is not a list, starting with empty cart")
            return []

        lines = []
        seen_ids = set()
        for record in records:
            try:
                line = CartLineRecordDTO.model_validate(record).to_line()
            except ValidationError as e:
                logger.warning(f"Dropping invalid cart record {record!r}: {e.error_count()} error(s)")
                continue
            if line.product_id in seen_ids:
                logger.warning(f"Dropping duplicate cart record for product {line.product_id}")
                continue
            seen_ids.add(line.product_id)
            lines.append(line)

        logger.info(f"Loaded {len(lines)} cart line(s) from '{self.storage_key}'")
        return lines

    def save(self, lines: list[CartLine]) -> None:
        """
        Write the full committed cart.

        Raises:
            PersistenceWriteFailedException: If the store rejected the write
        """
        payload = json.dumps(
            [line.to_record().model_dump(by_alias=True) for line in lines],
            ensure_ascii=False
        )
        try:
            self.store.set(self.storage_key, payload)
        except Exception as e:
            raise PersistenceWriteFailedException(self.storage_key, str(e)) from e
        logger.debug(f"Saved {len(lines)} cart line(s) to '{self.storage_key}'")
