"""Models for analyzed meals."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FoodItem(BaseModel):
    """Single food item identified in a meal photo.

    Fields are kept as the model reported them; nothing is coerced or checked
    beyond basic JSON scalar types.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str | int | float | None = None
    quantity: str | int | float | None = None
    protein: int | float | None = None


class MealAnalysis(BaseModel):
    """One completed photo-to-protein estimate.

    ``total_protein`` is whatever the model reported; it is not reconciled
    with the sum of ``foods[*].protein``. It is the only field that must be a
    number, since the daily total is built from it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    foods: tuple[FoodItem, ...] = ()
    total_protein: int | float = Field(alias="totalProtein")
    timestamp: str

    @field_validator("foods", mode="before")
    @classmethod
    def _keep_object_items(cls, value: object) -> object:
        if not isinstance(value, list | tuple):
            return ()
        return tuple(item for item in value if isinstance(item, dict | FoodItem))

    @classmethod
    def from_gateway(
        cls, payload: dict[str, object], timestamp: str
    ) -> "MealAnalysis":
        """Build an analysis from a gateway result and a client timestamp."""
        return cls.model_validate(
            {
                "foods": payload.get("foods") or (),
                "totalProtein": payload.get("totalProtein"),
                "timestamp": timestamp,
            }
        )

    @property
    def items_protein(self) -> int | float:
        """Return the sum of the per-item protein values that are present."""
        return sum(food.protein for food in self.foods if food.protein is not None)
