#gigmarket/models/enums.py
from __future__ import annotations
from enum import Enum


class UserRole(str, Enum):
    freelancer = "freelancer"
    client = "client"


class BidStatus(str, Enum):
    # only pending may transition; the rest are terminal
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    withdrawn = "withdrawn"


class PricingType(str, Enum):
    fixed = "fixed"
    hourly = "hourly"
