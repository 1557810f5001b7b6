"""HTTP and WebSocket routes.

Layout:
- routes/auth/: account endpoints
- routes/crops/: crop endpoints
- routes/realtime/: room subscriptions
- routes/health/: liveness and readiness

Aggregation:
- router.py: registers every router on the application
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
