from fastapi import APIRouter

from gigmarket.api.v1.auth import router as auth_router
from gigmarket.api.v1.bids import router as bids_router
from gigmarket.api.v1.gigs import router as gigs_router
from gigmarket.api.v1.health import router as health_router

v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM / CORE
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(auth_router, tags=["auth"])

# ------------------------------------------------------------------
# MARKETPLACE
# ------------------------------------------------------------------
v1_router.include_router(gigs_router, tags=["gigs"])
v1_router.include_router(bids_router, tags=["bids"])
