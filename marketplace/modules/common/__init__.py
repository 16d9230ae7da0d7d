"""Shared value objects."""

from .models import UNSET, Page

__all__ = ["Page", "UNSET"]
