# backend/market_sum/schemas/api.py
"""Uniform response envelope"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, Field

from market_sum.results import Failed

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
    # True when `data` is fabricated fallback instead of live upstream data
    degraded: bool = False
    reason: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_result(cls, result) -> "ApiResponse":
        """Wrap an Ok/Degraded/Failed fetch result"""
        if isinstance(result, Failed):
            return cls(success=False, error=result.reason, degraded=True, reason=result.reason)
        return cls(data=result.data, degraded=result.degraded, reason=result.reason)
