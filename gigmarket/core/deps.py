# /gigmarket/core/deps.py
from fastapi import Depends

from gigmarket.core.clock import Clock, system_clock
from gigmarket.core.config import Settings, get_settings
from gigmarket.services.auth_service import AuthService
from gigmarket.services.bid_service import BidService
from gigmarket.services.gig_service import GigService
from gigmarket.services.token_service import TokenService


def get_clock() -> Clock:
    return system_clock


def get_token_service(
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
) -> TokenService:
    return TokenService(settings, clock=clock)


def get_auth_service(
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
    clock: Clock = Depends(get_clock),
) -> AuthService:
    return AuthService(settings, tokens=tokens, clock=clock)


def get_gig_service() -> GigService:
    return GigService()


def get_bid_service() -> BidService:
    return BidService()
