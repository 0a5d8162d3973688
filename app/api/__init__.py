# ============================================================================
# Project Appeal Desk v1.0.0
# API Routes Module
# ============================================================================

from app.api.appeal import router as appeal_router

__all__ = ["appeal_router"]
