"""HTTP middleware: timeout and request ID (pure ASGI classes).

Applied in main app; order matters (last added = outermost).
"""

from taskboard.middleware.request_id import RequestIDMiddleware, get_request_id
from taskboard.middleware.timeout import TimeoutMiddleware

__all__ = ["RequestIDMiddleware", "TimeoutMiddleware", "get_request_id"]
