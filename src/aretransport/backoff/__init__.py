r"""Backoff strategies for retry delays."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from aretransport.backoff.base import BaseBackoffStrategy
from aretransport.backoff.exponential import ExponentialBackoff
