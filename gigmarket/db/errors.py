from __future__ import annotations

from typing import Sequence

from sqlalchemy.exc import IntegrityError


def is_unique_violation(exc: IntegrityError, constraint: str, columns: Sequence[str]) -> bool:
    """
    True when `exc` was raised by the unique constraint/index `constraint`.

    Postgres drivers report the constraint name through `diag`; SQLite only
    names the columns ("UNIQUE constraint failed: bids.gig_id, bids.freelancer_id").
    `columns` are table-qualified, in index order.
    """
    orig = exc.orig
    diag = getattr(orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name:
        return name == constraint

    message = str(orig)
    if constraint in message:
        return True
    return f"UNIQUE constraint failed: {', '.join(columns)}" in message
