import logging
from typing import Iterable

from models.product import ProductDTO, ProductId

logger = logging.getLogger(__name__)


class ProductCatalog:
    """
    Read-only view of the products the host page supplies.

    The cart re-reads it on every add and stage to pick up current stock.
    """

    def __init__(self, products: Iterable[ProductDTO | dict] = ()):
        self._products: dict[ProductId, ProductDTO] = {}
        self.set_products(products)

    def set_products(self, products: Iterable[ProductDTO | dict]) -> None:
        catalog = {}
        for product in products:
            product_dto = product if isinstance(product, ProductDTO) else ProductDTO.model_validate(product)
            catalog[product_dto.id] = product_dto
        self._products = catalog
        logger.info(f"Catalog loaded with {len(catalog)} product(s)")

    def get(self, product_id: ProductId) -> ProductDTO | None:
        return self._products.get(product_id)

    def all(self) -> list[ProductDTO]:
        return list(self._products.values())

    def __contains__(self, product_id: ProductId) -> bool:
        return product_id in self._products

    def __len__(self) -> int:
        return len(self._products)
