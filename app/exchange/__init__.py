# ============================================================================
# Project Appeal Desk v1.0.0
# Exchange Integration Module - Steam Trading Connectivity
# ============================================================================
#
# Reliability Level: L6 Critical
# Purpose: Steam trading session shared by every appeal
#
# Components:
#   - SessionGateway: Abstract interface consumed by the appeal handler
#   - SteamSessionGateway: steampy-backed implementation
#   - partner_steam_id_from_trade_url: Trade URL -> 64-bit Steam id
#
# ============================================================================

from app.exchange.session_gateway import (
    STEAM_ID64_BASE,
    GatewayError,
    GatewayErrorCode,
    InvalidTradeUrlError,
    SessionGateway,
    partner_steam_id_from_trade_url,
)
from app.exchange.steam_gateway import SteamSessionGateway

__all__ = [
    # Gateway interface
    'STEAM_ID64_BASE',
    'GatewayError',
    'GatewayErrorCode',
    'InvalidTradeUrlError',
    'SessionGateway',
    'partner_steam_id_from_trade_url',
    # Steam implementation
    'SteamSessionGateway',
]

# Version tracking
__version__ = '1.0.0'
