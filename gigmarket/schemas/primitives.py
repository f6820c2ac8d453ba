from __future__ import annotations

from typing import Annotated

from pydantic import Field, StringConstraints

# --- Numeric primitives ---
Money = Annotated[float, Field(ge=5, description="USD amount, minimum $5")]
DeliveryDays = Annotated[int, Field(ge=1, le=365, description="Delivery time in days")]

# --- Text primitives ---
Proposal = Annotated[str, StringConstraints(strip_whitespace=True, min_length=50, max_length=1000)]

# document/image links only
AttachmentUrl = Annotated[
    str,
    StringConstraints(pattern=r"(?i)^https?://.+\.(pdf|doc|docx|txt|jpg|jpeg|png|gif)$"),
]
