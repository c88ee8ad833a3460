"""
services/categories.py
──────────────────────────────────────────────────────────────────────────────
Category hierarchy resolution and the attribute-translatability policy.

Everything in this module is a pure function over an in-memory snapshot —
no I/O, no network, no mutation of the inputs — so it can be unit-tested
with hand-built lists of Category / Attribute records.

Attribute inheritance:
  A category inherits the attribute codes of its whole ancestor chain.
  For a chain A → B → C the inherited list is A's own codes, then B's,
  then C's, duplicates kept.

Outcomes of a lookup:
  • a fresh Category                 — found
  • None                             — code absent from the snapshot
  • EmptySnapshotError               — nothing to look in
  • DanglingParentError              — an ancestor is missing (policy RAISE)
  • CategoryCycleError               — parent chain loops back on itself
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from ritws.domain.exceptions import (
    CategoryCycleError,
    DanglingParentError,
    EmptySnapshotError,
)
from ritws.domain.models import (
    Attribute,
    AttributeSnapshot,
    Category,
    CategorySnapshot,
    ValidatorType,
)

logger = logging.getLogger(__name__)

# Administrative geography: voivodeship, county, commune, locality.
# Their values are proper names and are never sent per language.
NON_TRANSLATABLE_CODES: frozenset[str] = frozenset({"A009", "A010", "A011", "A012"})

TRANSLATABLE_VALIDATORS: frozenset[ValidatorType] = frozenset({
    ValidatorType.SHORT_TEXT,
    ValidatorType.LONG_TEXT,
    ValidatorType.MULTIPLY_LIST,
    ValidatorType.SINGLE_LIST,
})


class MissingParentPolicy(str, Enum):
    """What resolve_by_code does when an ancestor is absent."""
    RAISE    = "raise"      # DanglingParentError
    TRUNCATE = "truncate"   # keep what resolved so far, log a warning


# ── Lookups ────────────────────────────────────────────────────────────────

def find_category(snapshot: CategorySnapshot, code: str) -> Optional[Category]:
    """First category whose code equals ``code``, or None."""
    for category in snapshot:
        if category.code == code:
            return category
    return None


def lookup_attribute(attributes: AttributeSnapshot, code: str) -> Optional[Attribute]:
    """First attribute whose code equals ``code``, or None."""
    for attribute in attributes:
        if attribute.code == code:
            return attribute
    return None


def resolve_by_code(
    snapshot: CategorySnapshot,
    code: str,
    inherit_attributes: bool = True,
    on_missing_parent: MissingParentPolicy = MissingParentPolicy.RAISE,
) -> Optional[Category]:
    """Resolve a category by code, optionally with inherited attribute codes.

    If the snapshot holds duplicate codes the first one wins.  The returned
    object is always a new Category; the snapshot is left untouched, so
    resolving the same code twice yields identical results.

    Args:
        snapshot:           Categories to search (one language).
        code:               Category code to resolve.
        inherit_attributes: Append the ancestors' attribute codes.
        on_missing_parent:  Behaviour when an ancestor code is absent.

    Returns:
        The resolved Category, or None if ``code`` is not in the snapshot.

    Raises:
        EmptySnapshotError:  If ``snapshot`` is empty.
        DanglingParentError: If an ancestor is missing and the policy is RAISE.
        CategoryCycleError:  If the parent chain contains a cycle.
    """
    if not snapshot:
        raise EmptySnapshotError(f"Cannot resolve category '{code}': snapshot is empty")

    category = find_category(snapshot, code)
    if category is None:
        return None
    if not inherit_attributes or category.parent_code is None:
        return category.with_attribute_codes(category.attribute_codes)

    codes = list(category.attribute_codes)
    chain = [category.code]
    current = category
    while current.parent_code is not None:
        parent_code = current.parent_code
        if parent_code in chain:
            raise CategoryCycleError(chain + [parent_code])

        parent = find_category(snapshot, parent_code)
        if parent is None:
            if on_missing_parent is MissingParentPolicy.RAISE:
                raise DanglingParentError(current.code, parent_code)
            logger.warning(
                "Category %s: parent %s missing from snapshot — "
                "inheritance truncated after %s",
                code,
                parent_code,
                " -> ".join(chain),
            )
            break

        codes.extend(parent.attribute_codes)
        chain.append(parent.code)
        current = parent

    return category.with_attribute_codes(codes)


def childless_categories(snapshot: CategorySnapshot) -> set[str]:
    """Codes of categories that no other category names as its parent.

    These are the leaves of the forest implied by parent pointers.  The
    result is a set; callers must not rely on its order.
    """
    all_codes: dict[str, None] = {}
    parent_codes: set[str] = set()
    for category in snapshot:
        all_codes.setdefault(category.code, None)
        if category.parent_code is not None:
            parent_codes.add(category.parent_code)
    return {c for c in all_codes if c not in parent_codes}


# ── Translatability policy ─────────────────────────────────────────────────

def is_translatable_type(code: str, validator: Optional[ValidatorType]) -> bool:
    """Decision table: do per-language values make sense for this attribute?

    ``validator`` is the parsed type (see ``Attribute.validator``); None
    stands for a validator RIT declared but this client does not know.
    """
    if code in NON_TRANSLATABLE_CODES:
        return False
    return validator in TRANSLATABLE_VALIDATORS


def is_translatable(attributes: AttributeSnapshot, code: str) -> bool:
    """Whether attribute ``code`` takes one value per language.

    Reserved geography codes are rejected before any lookup.  An attribute
    that is not in the snapshot is treated as non-translatable.
    """
    if code in NON_TRANSLATABLE_CODES:
        return False
    attribute = lookup_attribute(attributes, code)
    if attribute is None:
        logger.warning("Attribute %s not in metadata — treating as non-translatable", code)
        return False
    return is_translatable_type(code, attribute.validator)
