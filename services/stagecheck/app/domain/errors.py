"""Errors raised while turning caller data into a plan."""
from __future__ import annotations


class InvalidPlanInput(ValueError):
    """The caller's data could not be turned into a Plan; validation cannot run."""

    kind = "InvalidInput"

    def __init__(self, message: str, location: str | None = None) -> None:
        self.message = message
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


__all__ = ["InvalidPlanInput"]
