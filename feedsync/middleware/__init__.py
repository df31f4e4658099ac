"""
Middleware components for FastAPI
"""

from .request_id import RequestIDMiddleware
from .timing import TimingMiddleware

__all__ = ["RequestIDMiddleware", "TimingMiddleware"]
