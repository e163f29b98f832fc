from pydantic import BaseModel, ConfigDict, Field

ProductId = int | str


class ProductDTO(BaseModel):
    """
    Read-only catalog entry supplied by the host page.

    A missing stock means the product is not stock-bounded.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: ProductId
    title: str
    price: float = Field(ge=0)
    stock: int | None = None
    image: str | None = None
    category: str | None = None

    @property
    def is_stock_bounded(self) -> bool:
        return self.stock is not None
