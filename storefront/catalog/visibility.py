"""Visibility policy for catalog records.

A single rule decides which products and variants a caller may see:

- soft-deleted records are never eligible, whatever the role;
- admins see every remaining record;
- shoppers (and anonymous callers) only see records flagged visible.

The rule is available both as a plain predicate over loaded records and as
a SQLAlchemy expression so queries filter with exactly the same logic.
"""

from typing import Any, Protocol

from sqlalchemy import ColumnElement, and_, false, true

from storefront.domain.principal import Principal, Role, role_of


class Flagged(Protocol):
    """Anything carrying visibility flags."""

    visible: bool
    deleted: bool


def is_eligible(record: Flagged, role: Role | None = Role.SHOPPER) -> bool:
    """Check whether a record may be served to a caller with the given role.

    Args:
        record: Product, variant or any object with visible/deleted flags.
        role: Caller role; None is treated as shopper.

    Returns:
        True if the record is eligible.
    """
    if record.deleted:
        return False
    if role is Role.ADMIN:
        return True
    return bool(record.visible)


def is_eligible_for(record: Flagged, principal: Principal | None) -> bool:
    """Same as is_eligible, taking the caller instead of the role."""
    return is_eligible(record, role_of(principal))


def eligibility_clause(model: Any, role: Role | None = Role.SHOPPER) -> ColumnElement[bool]:
    """Render the policy as a WHERE clause for a flagged model.

    Args:
        model: Mapped class with ``visible`` and ``deleted`` columns.
        role: Caller role; None is treated as shopper.

    Returns:
        Boolean SQL expression.
    """
    not_deleted = model.deleted == false()
    if role is Role.ADMIN:
        return not_deleted
    return and_(not_deleted, model.visible == true())


def not_deleted_clause(model: Any) -> ColumnElement[bool]:
    """Deleted-only exclusion, i.e. the policy as applied to admins."""
    return eligibility_clause(model, Role.ADMIN)
