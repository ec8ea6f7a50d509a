"""Pydantic models for the ledger HTTP API."""

from datetime import date

from pydantic import BaseModel, Field


class TargetUpdate(BaseModel):
    """Request body for changing the daily calorie target."""

    target: int = Field(ge=0, strict=True)


class Macros(BaseModel):
    """Macro totals."""

    calories: int
    protein: int
    carbs: int
    fats: int


class FoodView(BaseModel):
    """Food item within a meal."""

    name: str
    quantity: str | None = None
    calories: float
    protein: float
    carbs: float
    fats: float


class MealView(BaseModel):
    """Meal with its position in today's ledger."""

    index: int
    date: date
    total_macros: Macros
    foods: list[FoodView]


class LedgerView(BaseModel):
    """Today's ledger with derived totals."""

    day: date | None
    target: int
    summary: Macros
    progress: float
    progress_percent: float
    meals: list[MealView]


class MealLogged(BaseModel):
    """Response after a meal photo was recognized and recorded."""

    meal: MealView
    ledger: LedgerView


class MealRemoved(BaseModel):
    """Response after a removal request."""

    removed: bool
    ledger: LedgerView
