class AlteranError(Exception):
    """Base exception for the alteran application."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AlteranError):
    """Raised when admin input fails validation."""

    status_code = 400


class ProjectNotFoundError(AlteranError):
    """Raised when a project lookup by id or slug misses."""

    status_code = 404

    def __init__(self, message: str = "Project not found"):
        super().__init__(message)


class GitHubApiError(AlteranError):
    """Raised when the GitHub API call fails.

    ``status_code`` carries the failure class: 400 bad input, 401 auth failed,
    403 forbidden, 404 not found, 429 rate limited.
    """


class FeatureNotConfiguredError(AlteranError):
    """Raised when an optional integration is missing its credentials."""

    status_code = 503
