"""REST client shared with the dashboard's CRUD screens."""

from .client import ApiError, DashboardApiClient

__all__ = ["ApiError", "DashboardApiClient"]
