# A cart line is created when a product is first added and destroyed when its
# quantity reaches 0. The quantity state is a tagged union: a line is either
# plainly committed, or committed with exactly one pending (unsaved) edit.
# Pending edits are display-only and never written to storage.
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from models.product import ProductId


class Committed(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["committed"] = "committed"
    quantity: int = Field(ge=1)


class CommittedWithPendingEdit(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pending"] = "pending"
    quantity: int = Field(ge=1)
    proposed_quantity: int = Field(ge=0)  # 0 = proposed removal


LineQuantityState = Annotated[
    Union[Committed, CommittedWithPendingEdit],
    Field(discriminator="kind")
]


class CartLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: ProductId
    title: str
    unit_price: float
    image: str | None = None
    category: str | None = None
    state: LineQuantityState

    @property
    def quantity(self) -> int:
        """Committed quantity (used for pricing and persistence)."""
        return self.state.quantity

    @property
    def has_pending_edit(self) -> bool:
        return isinstance(self.state, CommittedWithPendingEdit)

    @property
    def pending_quantity(self) -> int | None:
        if isinstance(self.state, CommittedWithPendingEdit):
            return self.state.proposed_quantity
        return None

    @property
    def effective_quantity(self) -> int:
        """Pending value if present, else committed value."""
        pending = self.pending_quantity
        return self.quantity if pending is None else pending

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)

    def with_committed(self, quantity: int) -> "CartLine":
        return self.model_copy(update={"state": Committed(quantity=quantity)})

    def with_proposal(self, proposed_quantity: int) -> "CartLine":
        return self.model_copy(update={
            "state": CommittedWithPendingEdit(quantity=self.quantity, proposed_quantity=proposed_quantity)
        })

    def without_proposal(self) -> "CartLine":
        return self.with_committed(self.quantity)

    def to_record(self) -> "CartLineRecordDTO":
        return CartLineRecordDTO(
            product_id=self.product_id,
            title=self.title,
            price=self.unit_price,
            quantity=self.quantity,
            image=self.image,
            category=self.category
        )


class CartLineRecordDTO(BaseModel):
    """Persisted layout of one cart line: {"id", "title", "price", "quantity", "image", "category"}."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: ProductId = Field(alias="id")
    title: str = ""
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)
    image: str | None = None
    category: str | None = None

    def to_line(self) -> CartLine:
        return CartLine(
            product_id=self.product_id,
            title=self.title,
            unit_price=self.price,
            image=self.image,
            category=self.category,
            state=Committed(quantity=self.quantity)
        )
