"""
Domain exceptions shared by the storage, services and route layers.

Routes translate these into HTTP status codes; nothing below the
route layer knows about HTTP.
"""


class DashboardError(Exception):
    """Base class for all dashboard domain errors."""


class NotFoundError(DashboardError):
    """Referenced entity does not exist."""


class DuplicateUsernameError(DashboardError):
    """Username is already taken."""

    def __init__(self, username: str):
        super().__init__("Username already exists")
        self.username = username


class InvalidCredentialsError(DashboardError):
    """Username/password pair did not match a user."""

    def __init__(self):
        super().__init__("Invalid username or password")


class AnalysisFailedError(DashboardError):
    """Upstream AI call failed or returned an unusable response."""
