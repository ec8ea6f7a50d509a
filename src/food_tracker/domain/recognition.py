"""Models for validating raw recognition payloads."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from food_tracker.domain.nutrition import FoodItem


class RecognizedFood(BaseModel):
    """Single food entry as returned by the recognition service."""

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str = Field(min_length=1)
    quantity: str | None = None
    calories: float = Field(ge=0, allow_inf_nan=False)
    protein: float = Field(ge=0, allow_inf_nan=False)
    carbs: float = Field(ge=0, allow_inf_nan=False)
    fats: float = Field(ge=0, allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_to_text(cls, value: object) -> object:
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value

    def to_food_item(self) -> FoodItem:
        """Convert the validated entry into a domain food item."""
        return FoodItem(
            name=self.name,
            quantity=self.quantity,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fats=self.fats,
        )


class RecognitionPayload(BaseModel):
    """Structured recognition output containing detected foods."""

    model_config = ConfigDict(extra="ignore")

    foods: list[RecognizedFood]
