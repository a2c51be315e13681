"""Closed category vocabulary shared by transactions and rules."""

from dataclasses import dataclass
from typing import Optional

from ledgerline.domain.errors import ValidationError, unknown_category


@dataclass(frozen=True)
class CategoryItem:
    """A category id with its display name and the transaction type it belongs to."""

    id: str
    name: str
    type: str


INCOME_CATEGORIES = [
    CategoryItem("income", "Income", "income"),
    CategoryItem("salary", "Salary", "income"),
    CategoryItem("other_income", "Other Income", "income"),
]

EXPENSE_CATEGORIES = [
    CategoryItem("groceries", "Groceries", "expense"),
    CategoryItem("utilities", "Utilities", "expense"),
    CategoryItem("subscriptions", "Subscriptions", "expense"),
    CategoryItem("home_maintenance", "Home Maintenance", "expense"),
    CategoryItem("pet_care", "Pet Care", "expense"),
    CategoryItem("childcare", "Childcare", "expense"),
    CategoryItem("travel", "Travel", "expense"),
    CategoryItem("meals", "Meals & Entertainment", "expense"),
    CategoryItem("insurance", "Insurance", "expense"),
    CategoryItem("rent", "Rent & Mortgage", "expense"),
    CategoryItem("vehicle", "Vehicle", "expense"),
    CategoryItem("healthcare", "Healthcare", "expense"),
    CategoryItem("supplies", "Supplies", "expense"),
    CategoryItem("other", "Other", "expense"),
]

CATEGORIES_BY_ID = {c.id: c for c in INCOME_CATEGORIES + EXPENSE_CATEGORIES}


def is_known_category(category_id: str) -> bool:
    """Return True if the id belongs to the vocabulary."""
    return category_id in CATEGORIES_BY_ID


def require_category(category_id: str) -> str:
    """Return the id unchanged, or raise ValidationError if it is unknown."""
    if not is_known_category(category_id):
        raise ValidationError(unknown_category(category_id))
    return category_id


def category_name(category_id: Optional[str]) -> str:
    """Display name for a category id; ``None`` renders as Uncategorized."""
    if not category_id:
        return "Uncategorized"
    item = CATEGORIES_BY_ID.get(category_id)
    return item.name if item else category_id
