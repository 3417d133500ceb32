"""Web API for report generation."""

from .app import ReportRequest, create_app

__all__ = ["ReportRequest", "create_app"]
