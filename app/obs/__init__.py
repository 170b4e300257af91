"""Observability: request context, structured logging, metrics, middleware."""

__all__ = [
    "middleware",
    "metrics",
    "logger",
    "context",
]
