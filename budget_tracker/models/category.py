"""
Category Models

Two related types:

- TransactionCategory: the fixed set of predefined spending categories
  (enum with display metadata).
- Category: the entity stored alongside transactions. Predefined
  categories are seeded from TransactionCategory; users may add custom
  ones.

POLICY: Only custom categories can be edited or deleted. Checking that
no transaction still references a category before deletion is the
storage layer's job.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Callable, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from budget_tracker.models.date_range import ensure_aware, utc_now
from budget_tracker.models.errors import BudgetTrackerError


CATEGORY_NAME_MAX_LENGTH = 50
CUSTOM_CATEGORY_SORT_ORDER = 100
DEFAULT_COLOR_HEX = "#999999"

_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


class CategoryErrorCode(str, Enum):
    EMPTY_NAME = "empty_name"
    NAME_TOO_LONG = "name_too_long"
    EMPTY_ICON = "empty_icon"
    INVALID_COLOR_FORMAT = "invalid_color_format"
    INVALID_SORT_ORDER = "invalid_sort_order"
    CANNOT_DELETE_PREDEFINED_CATEGORY = "cannot_delete_predefined_category"
    CATEGORY_NOT_FOUND = "category_not_found"


class CategoryError(BudgetTrackerError):
    messages = {
        CategoryErrorCode.EMPTY_NAME: "Category name cannot be empty",
        CategoryErrorCode.NAME_TOO_LONG:
            f"Category name must be {CATEGORY_NAME_MAX_LENGTH} characters or less",
        CategoryErrorCode.EMPTY_ICON: "Category icon cannot be empty",
        CategoryErrorCode.INVALID_COLOR_FORMAT: "Color must be in hex format (#RRGGBB)",
        CategoryErrorCode.INVALID_SORT_ORDER: "Sort order must be non-negative",
        CategoryErrorCode.CANNOT_DELETE_PREDEFINED_CATEGORY:
            "Predefined categories cannot be deleted",
        CategoryErrorCode.CATEGORY_NOT_FOUND: "Category not found",
    }


# =============================================================================
# PREDEFINED CATEGORIES
# =============================================================================

class TransactionCategory(str, Enum):
    """
    Predefined spending categories.

    The value doubles as the display name of the seeded Category.
    """
    FOOD = "Food"
    RESTAURANTS = "Restaurants"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    SPORT = "Sport"
    BILLS = "Bills"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    OTHER = "Other"

    @property
    def icon(self) -> str:
        return _PRESETS[self][0]

    @property
    def color_hex(self) -> str:
        return _PRESETS[self][1]

    @property
    def sort_order(self) -> int:
        return _PRESETS[self][2]

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def sorted_by_order(cls) -> list["TransactionCategory"]:
        return sorted(cls, key=lambda category: category.sort_order)

    @classmethod
    def from_string(cls, value: str) -> Optional["TransactionCategory"]:
        """Case-insensitive lookup; None when unknown."""
        wanted = value.strip().lower()
        for category in cls:
            if category.value.lower() == wanted:
                return category
        return None


# icon, color, sort order
_PRESETS: dict[TransactionCategory, tuple[str, str, int]] = {
    TransactionCategory.FOOD: ("cart.fill", "#FF6B6B", 1),
    TransactionCategory.RESTAURANTS: ("fork.knife", "#FFA07A", 2),
    TransactionCategory.TRANSPORT: ("car.fill", "#4ECDC4", 3),
    TransactionCategory.SHOPPING: ("bag.fill", "#95E1D3", 4),
    TransactionCategory.ENTERTAINMENT: ("ticket.fill", "#A8E6CF", 5),
    TransactionCategory.HEALTH: ("heart.fill", "#FFD93D", 6),
    TransactionCategory.SPORT: ("figure.run", "#6BCB77", 7),
    TransactionCategory.BILLS: ("doc.text.fill", "#4D96FF", 8),
    TransactionCategory.EDUCATION: ("book.fill", "#B565D8", 9),
    TransactionCategory.TRAVEL: ("airplane", "#FF9A76", 10),
    TransactionCategory.OTHER: ("questionmark.circle.fill", "#999999", 99),
}


# =============================================================================
# INVARIANT CHECKS (shared by construction and updates)
# =============================================================================

def check_name(name: str) -> None:
    if not name.strip():
        raise CategoryError(CategoryErrorCode.EMPTY_NAME)
    if len(name) > CATEGORY_NAME_MAX_LENGTH:
        raise CategoryError(CategoryErrorCode.NAME_TOO_LONG)


def check_icon(icon: str) -> None:
    if not icon.strip():
        raise CategoryError(CategoryErrorCode.EMPTY_ICON)


def check_color(color_hex: str) -> None:
    if not _COLOR_PATTERN.fullmatch(color_hex):
        raise CategoryError(CategoryErrorCode.INVALID_COLOR_FORMAT)


def check_sort_order(sort_order: int) -> None:
    if sort_order < 0:
        raise CategoryError(CategoryErrorCode.INVALID_SORT_ORDER)


# =============================================================================
# CATEGORY ENTITY
# =============================================================================

class Category(BaseModel):
    """
    A spending classification, predefined or user-defined.

    Frozen: update_* methods return a new Category with a refreshed
    updated_at and leave this one untouched.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    name: str
    icon: str
    color_hex: str = DEFAULT_COLOR_HEX
    is_custom: bool = False
    sort_order: int = 999
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @model_validator(mode="after")
    def validate_invariants(self) -> "Category":
        check_name(self.name)
        check_icon(self.icon)
        check_color(self.color_hex)
        check_sort_order(self.sort_order)
        return self

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def predefined(
        cls,
        transaction_category: TransactionCategory,
        sort_order: Optional[int] = None,
    ) -> "Category":
        return cls(
            name=transaction_category.display_name,
            icon=transaction_category.icon,
            color_hex=transaction_category.color_hex,
            is_custom=False,
            sort_order=transaction_category.sort_order if sort_order is None else sort_order,
        )

    @classmethod
    def custom(cls, name: str, icon: str, color_hex: str = DEFAULT_COLOR_HEX) -> "Category":
        """Custom categories sort after the predefined ones."""
        return cls(
            name=name,
            icon=icon,
            color_hex=color_hex,
            is_custom=True,
            sort_order=CUSTOM_CATEGORY_SORT_ORDER,
        )

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def _revised(self, **changes) -> "Category":
        return self.model_copy(update={**changes, "updated_at": utc_now()})

    def update_name(self, new_name: str) -> "Category":
        check_name(new_name)
        return self._revised(name=new_name)

    def update_icon(self, new_icon: str) -> "Category":
        check_icon(new_icon)
        return self._revised(icon=new_icon)

    def update_color(self, new_color_hex: str) -> "Category":
        check_color(new_color_hex)
        return self._revised(color_hex=new_color_hex)

    def update_sort_order(self, new_sort_order: int) -> "Category":
        check_sort_order(new_sort_order)
        return self._revised(sort_order=new_sort_order)

    # -------------------------------------------------------------------------
    # Policy
    # -------------------------------------------------------------------------

    @property
    def can_be_deleted(self) -> bool:
        return self.is_custom

    @property
    def can_be_edited(self) -> bool:
        return self.is_custom

    def ensure_deletable(self) -> None:
        if not self.can_be_deleted:
            raise CategoryError(
                CategoryErrorCode.CANNOT_DELETE_PREDEFINED_CATEGORY,
                category_id=self.id,
                name=self.name,
            )


CategoryLookup = Callable[[UUID], Optional[Category]]


def default_categories() -> list[Category]:
    """Seed list: one predefined Category per TransactionCategory."""
    return [Category.predefined(preset) for preset in TransactionCategory.sorted_by_order()]
