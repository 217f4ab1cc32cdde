"""FastAPI dependency helpers."""
from __future__ import annotations

from ..config import get_settings
from ..domain.checker_service import PlanChecker


def get_plan_checker() -> PlanChecker:
    return PlanChecker(get_settings())


__all__ = ["get_plan_checker"]
