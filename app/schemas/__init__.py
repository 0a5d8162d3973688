# ============================================================================
# Project Appeal Desk v1.0.0
# Pydantic Schemas - Data Validation Layer
# ============================================================================

from app.schemas.appeal import AppealIn, AppealOut, AppealErrorOut

__all__ = ["AppealIn", "AppealOut", "AppealErrorOut"]
