"""
HTTP surface: FastAPI application, health checks and metrics.
"""
