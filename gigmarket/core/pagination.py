from __future__ import annotations

from typing import Any, Dict, List, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session


def paginate(db: Session, stmt: Select, page: int, limit: int) -> Tuple[List[Any], Dict[str, int]]:
    """
    Run `stmt` for one page and count the full result set.
    `stmt` must already carry its ORDER BY.
    """
    page = max(int(page or 1), 1)
    limit = max(int(limit or 10), 1)

    items = list(
        db.execute(stmt.offset((page - 1) * limit).limit(limit)).scalars().all()
    )
    total = db.execute(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    ).scalar_one()
    total_pages = (total + limit - 1) // limit
    return items, {"total": total, "page": page, "limit": limit, "total_pages": total_pages}
