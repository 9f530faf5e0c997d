"""Domain models for the weekly wellness tracker."""

import math
from datetime import datetime
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator
from pydantic.alias_generators import to_camel

from wellness_tracker.domain.errors import ProfileValidationError

DAYS_IN_WEEK = 7
DAY_NAMES = ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo")


class ActivityLevel(StrEnum):
    """Self-reported activity level for a day."""

    SEDENTARY = "Sedentario"
    LIGHT = "Ligero"
    MODERATE = "Moderado"
    ACTIVE = "Activo"
    VERY_ACTIVE = "Muy Activo"

    @property
    def description(self) -> str:
        """Return the hint shown next to the level in forms."""
        return _ACTIVITY_DESCRIPTIONS[self]


_ACTIVITY_DESCRIPTIONS = {
    ActivityLevel.SEDENTARY: "poco o ningún ejercicio",
    ActivityLevel.LIGHT: "ejercicio 1-3 días/semana",
    ActivityLevel.MODERATE: "ejercicio 3-5 días/semana",
    ActivityLevel.ACTIVE: "ejercicio 6-7 días/semana",
    ActivityLevel.VERY_ACTIVE: "ejercicio intenso/trabajo físico",
}


class View(StrEnum):
    """Top-level screen selection."""

    PROFILE = "profile"
    TRACKER = "tracker"


class Tab(StrEnum):
    """Tracker tab selection."""

    LOG = "log"
    METRICS = "metrics"


def coerce_weight(value: object) -> float:
    """Coerce a form value into a weight, treating anything invalid as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        weight = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(weight) or weight < 0:
        return 0.0
    return weight


class _Entity(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class UserProfile(_Entity):
    """Validated identity and weight goal of the user."""

    name: str = Field(min_length=1)
    age: int = Field(gt=0)
    objective: str = Field(min_length=1)
    initial_weight: float = Field(gt=0)
    weight_goal: float = Field(gt=0)


class ProfileDraft(_Entity):
    """Profile as edited in the form, before validation."""

    name: str = ""
    age: float = 0
    objective: str = ""
    initial_weight: float = 0
    weight_goal: float = 0

    @field_validator("age", "initial_weight", "weight_goal", mode="before")
    @classmethod
    def _lenient_number(cls, value: object) -> float:
        return coerce_weight(value)

    @classmethod
    def from_profile(cls, profile: UserProfile | None) -> "ProfileDraft":
        """Pre-fill a draft from a saved profile."""
        if profile is None:
            return cls()
        return cls(
            name=profile.name,
            age=profile.age,
            objective=profile.objective,
            initial_weight=profile.initial_weight,
            weight_goal=profile.weight_goal,
        )

    def validate_profile(self) -> UserProfile:
        """Return a validated profile or raise with every failing field."""
        errors: dict[str, str] = {}
        if not self.name.strip():
            errors["name"] = "El nombre es obligatorio."
        if not self.objective.strip():
            errors["objective"] = "El objetivo es obligatorio."
        if self.age <= 0 or not float(self.age).is_integer():
            errors["age"] = "La edad debe ser un número positivo."
        if self.initial_weight <= 0:
            errors["initial_weight"] = "El peso inicial debe ser un número positivo."
        if self.weight_goal <= 0:
            errors["weight_goal"] = "El peso meta debe ser un número positivo."
        if errors:
            raise ProfileValidationError(errors)
        return UserProfile(
            name=self.name.strip(),
            age=int(self.age),
            objective=self.objective.strip(),
            initial_weight=self.initial_weight,
            weight_goal=self.weight_goal,
        )


class DailyFoodLog(_Entity):
    """Free-text meals of a single day; empty means not logged."""

    breakfast: str = ""
    lunch: str = ""
    snack: str = ""
    dinner: str = ""
    other: str = ""

    @property
    def has_entries(self) -> bool:
        return any((self.breakfast, self.lunch, self.snack, self.dinner, self.other))


class DailyLog(_Entity):
    """One positional slot of the week."""

    weight: float = Field(default=0.0, ge=0)
    food: DailyFoodLog = Field(default_factory=DailyFoodLog)
    mood: str = ""
    activity_level: ActivityLevel = ActivityLevel.MODERATE

    @field_validator("weight", mode="before")
    @classmethod
    def _lenient_weight(cls, value: object) -> float:
        return coerce_weight(value)

    @property
    def has_data(self) -> bool:
        """Return True when weight, food or mood was recorded."""
        return self.weight > 0 or self.food.has_entries or bool(self.mood)


_WeekDays = Annotated[
    tuple[DailyLog, ...], Field(min_length=DAYS_IN_WEEK, max_length=DAYS_IN_WEEK)
]


class WeeklyLog(RootModel[_WeekDays]):
    """Exactly seven daily logs mapped to ``DAY_NAMES`` by position."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def blank(cls) -> "WeeklyLog":
        return cls(tuple(DailyLog() for _ in range(DAYS_IN_WEEK)))

    @property
    def days(self) -> tuple[DailyLog, ...]:
        return self.root

    def day(self, index: int) -> DailyLog:
        _check_day_index(index)
        return self.root[index]

    def replace_day(self, index: int, day: DailyLog) -> "WeeklyLog":
        """Return a new week with the day at ``index`` replaced."""
        _check_day_index(index)
        days = list(self.root)
        days[index] = day
        return WeeklyLog(tuple(days))

    def latest_weight(self) -> float | None:
        """Return the last non-zero weight of the week, if any."""
        weights = [day.weight for day in self.root if day.weight > 0]
        return weights[-1] if weights else None

    @property
    def has_data(self) -> bool:
        return any(day.has_data for day in self.root)


class Metrics(_Entity):
    """Free-form notes kept alongside the week."""

    strength: str = ""
    measurements: str = ""
    bmi: str = ""
    daily_activity: str = ""

    @property
    def has_data(self) -> bool:
        return any((self.strength, self.measurements, self.bmi, self.daily_activity))


class Summary(_Entity):
    """Most recently generated weekly report."""

    content: str
    week_epoch: int
    generated_at: datetime


def _check_day_index(index: int) -> None:
    if not 0 <= index < DAYS_IN_WEEK:
        raise IndexError(f"Day index out of range: {index}")
