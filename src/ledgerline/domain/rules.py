"""Categorization rule engine.

A rule says "transactions whose vendor or description looks like X belong to
category Y". Matching is done on normalized text (lowercased, trimmed,
whitespace collapsed). Rules are evaluated in priority order, lowest number
first, with the most recently created rule winning ties. The first rule that
matches decides the category.

The functions at module level are pure; ``CategoryRuleService`` adds
persistence on top of them.
"""

import re
from datetime import datetime
from typing import Iterable, Optional

from ledgerline.database.base import Database
from ledgerline.domain.categories import require_category
from ledgerline.domain.entities import (
    CategoryRule,
    RuleCandidate,
    RuleDraft,
    RULE_APPLIES_TO,
    RULE_CONFIDENCE_SOURCES,
    RULE_MATCH_TYPES,
)
from ledgerline.domain.errors import NotFoundError, ValidationError, invalid_choice, rule_not_found
from ledgerline.log import get_logger

logger = get_logger(__name__)

DEFAULT_RULE_PRIORITY = 100
MAX_DESCRIPTION_MATCH_LENGTH = 100

_WHITESPACE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """Lowercase, trim, and collapse internal whitespace runs to one space."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text.lower().strip())


def rule_key(match_type: str, match_value: str) -> tuple[str, str]:
    """Identity of a rule for upserts: match type plus normalized value."""
    return match_type, normalize(match_value)


def rule_applies_to(rule: CategoryRule, txn_type: str) -> bool:
    """Return True if the rule may categorize a transaction of this type."""
    if rule.applies_to == "both":
        return True
    return rule.applies_to == txn_type


def sort_rules(rules: Iterable[CategoryRule]) -> list[CategoryRule]:
    """Order rules by priority ascending, newest first within a priority."""
    by_newest = sorted(rules, key=lambda r: r.created_at or datetime.min, reverse=True)
    return sorted(by_newest, key=lambda r: r.priority)


def _rule_matches(rule: CategoryRule, vendor: str, description: str) -> bool:
    value = normalize(rule.match_value)
    if not value:
        return False
    if rule.match_type == "vendor_exact":
        return bool(vendor) and vendor == value
    if rule.match_type == "vendor_contains":
        return bool(vendor) and value in vendor
    if rule.match_type == "description_contains":
        return bool(description) and value in description
    return False


def match_rule(candidate: RuleCandidate, rules: Iterable[CategoryRule]) -> Optional[CategoryRule]:
    """Find the rule that decides the candidate's category.

    Args:
        candidate: Vendor, description and type of the transaction
        rules: Rules to consider; inactive ones are ignored

    Returns:
        The first matching rule in evaluation order, or None
    """
    txn_type = candidate.type or "expense"
    vendor = normalize(candidate.vendor)
    description = normalize(candidate.description)

    eligible = [r for r in rules if r.is_active and rule_applies_to(r, txn_type)]
    for rule in sort_rules(eligible):
        if _rule_matches(rule, vendor, description):
            return rule
    return None


def apply_rules(candidate: RuleCandidate, rules: Iterable[CategoryRule]) -> Optional[str]:
    """Return the category chosen by the rules, or None if nothing matches."""
    rule = match_rule(candidate, rules)
    return rule.category if rule else None


def build_suggested_rule(
    new_category: str,
    vendor: Optional[str],
    description: Optional[str],
    txn_type: str,
    old_category: Optional[str] = None,
) -> Optional[RuleDraft]:
    """Suggest a rule that would reproduce a manual category edit.

    A vendor gives a ``vendor_exact`` rule; without one the description
    (first 100 characters) gives a ``description_contains`` rule.

    Args:
        new_category: Category the user chose
        vendor: Transaction vendor
        description: Transaction description
        txn_type: Transaction type; the rule applies to this type only
        old_category: Previous category (informational)

    Returns:
        RuleDraft, or None if the category is blank or there is nothing to
        match on
    """
    if not new_category or not new_category.strip():
        return None

    if vendor and vendor.strip():
        match_type, match_value = "vendor_exact", vendor.strip()
    elif description and description.strip():
        match_type = "description_contains"
        match_value = description.strip()[:MAX_DESCRIPTION_MATCH_LENGTH]
    else:
        return None

    return RuleDraft(
        match_type=match_type,
        match_value=match_value,
        category=new_category,
        applies_to=txn_type,
        priority=DEFAULT_RULE_PRIORITY,
        is_active=True,
        confidence_source="user",
    )


class CategoryRuleService:
    """Service for managing category rules."""

    def __init__(self, db: Database):
        """Initialize category rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_rules(self, active_only: bool = False) -> list[CategoryRule]:
        """List rules in evaluation order.

        Args:
            active_only: If True, skip disabled rules

        Returns:
            List of rule entities
        """
        return sort_rules(self.db.list_rules(active_only=active_only))

    def get_rule(self, rule_id: int) -> Optional[CategoryRule]:
        """Get rule by ID."""
        return self.db.get_rule(rule_id)

    def find_rule(self, match_type: str, match_value: str) -> Optional[CategoryRule]:
        """Find the rule with the same match type and normalized value."""
        key = rule_key(match_type, match_value)
        for rule in self.db.list_rules():
            if rule_key(rule.match_type, rule.match_value) == key:
                return rule
        return None

    def upsert_rule(
        self,
        match_type: str,
        match_value: str,
        category: str,
        applies_to: str = "both",
        priority: int = DEFAULT_RULE_PRIORITY,
        confidence_source: str = "user",
    ) -> tuple[int, bool]:
        """Create a rule, or update the existing rule with the same key.

        An existing rule gets the new category and is re-enabled. The key is
        the match type plus the normalized match value, so at most one rule
        exists per key.

        Args:
            match_type: vendor_exact, vendor_contains or description_contains
            match_value: Text to match
            category: Category ID to assign
            applies_to: expense, income or both
            priority: Evaluation priority (lower first)
            confidence_source: user or ai

        Returns:
            Tuple of (rule ID, True if a new rule was created)

        Raises:
            ValidationError: If any field is invalid
        """
        if match_type not in RULE_MATCH_TYPES:
            raise ValidationError(invalid_choice("match type", match_type, RULE_MATCH_TYPES))
        if applies_to not in RULE_APPLIES_TO:
            raise ValidationError(invalid_choice("applies_to", applies_to, RULE_APPLIES_TO))
        if confidence_source not in RULE_CONFIDENCE_SOURCES:
            raise ValidationError(
                invalid_choice("confidence source", confidence_source, RULE_CONFIDENCE_SOURCES)
            )
        if not normalize(match_value):
            raise ValidationError("Rule match value cannot be empty")
        require_category(category)

        existing = self.find_rule(match_type, match_value)
        if existing is not None:
            self.db.update_rule(existing.id, category=category, is_active=True)
            logger.info("rule_upserted", rule_id=existing.id, created=False, category=category)
            return existing.id, False

        rule_id = self.db.create_rule(
            match_type=match_type,
            match_value=match_value.strip(),
            category=category,
            applies_to=applies_to,
            priority=priority,
            is_active=True,
            confidence_source=confidence_source,
        )
        logger.info("rule_upserted", rule_id=rule_id, created=True, category=category)
        return rule_id, True

    def save_draft(self, draft: RuleDraft) -> tuple[int, bool]:
        """Persist a suggested rule through the upsert path."""
        return self.upsert_rule(
            match_type=draft.match_type,
            match_value=draft.match_value,
            category=draft.category,
            applies_to=draft.applies_to,
            priority=draft.priority,
            confidence_source=draft.confidence_source,
        )

    def _require_rule(self, rule_id: int) -> CategoryRule:
        rule = self.db.get_rule(rule_id)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id))
        return rule

    def set_active(self, rule_id: int, is_active: bool) -> None:
        """Enable or disable a rule.

        Raises:
            NotFoundError: If the rule doesn't exist
        """
        self._require_rule(rule_id)
        self.db.update_rule(rule_id, is_active=is_active)
        logger.info("rule_toggled", rule_id=rule_id, is_active=is_active)

    def update_rule(
        self,
        rule_id: int,
        category: Optional[str] = None,
        priority: Optional[int] = None,
        applies_to: Optional[str] = None,
    ) -> None:
        """Change a rule's category, priority or scope.

        Raises:
            NotFoundError: If the rule doesn't exist
            ValidationError: If a new value is invalid
        """
        self._require_rule(rule_id)
        if category is not None:
            require_category(category)
        if applies_to is not None and applies_to not in RULE_APPLIES_TO:
            raise ValidationError(invalid_choice("applies_to", applies_to, RULE_APPLIES_TO))
        self.db.update_rule(rule_id, category=category, priority=priority, applies_to=applies_to)

    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule.

        Raises:
            NotFoundError: If the rule doesn't exist
        """
        self._require_rule(rule_id)
        self.db.delete_rule(rule_id)
        logger.info("rule_deleted", rule_id=rule_id)

    def suggest_category(self, candidate: RuleCandidate) -> Optional[str]:
        """Category the active rules assign to the candidate, if any."""
        return apply_rules(candidate, self.db.list_rules(active_only=True))
