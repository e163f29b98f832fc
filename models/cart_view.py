from pydantic import BaseModel

from models.product import ProductId


class CartViewLineDTO(BaseModel):
    """One cart line as displayed, with unsaved edits overlaid."""
    product_id: ProductId
    title: str
    unit_price: float
    image: str | None = None
    category: str | None = None
    committed_quantity: int
    display_quantity: int
    is_pending: bool
    line_total: float          # committed quantity × unit price
    display_line_total: float  # display quantity × unit price


class CartViewDTO(BaseModel):
    lines: list[CartViewLineDTO]
    total: float            # committed lines only
    projected_total: float  # if every pending edit were saved
    item_count: int
    pending_count: int
