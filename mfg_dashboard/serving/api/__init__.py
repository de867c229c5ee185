"""
Dashboard HTTP layer: routers and the request middleware stack
"""
from .middleware import RateLimitMiddleware, RequestLoggingMiddleware, SecurityHeadersMiddleware
from .routes import dashboard_router, health_router

__all__ = [
    "dashboard_router",
    "health_router",
    "RateLimitMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
