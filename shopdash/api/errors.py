# shopdash/api/errors.py

"""Exception taxonomy shared by the API client, services and forms."""


class DashboardError(Exception):
    """Base class for every error raised by shopdash."""


class NotAuthenticatedError(DashboardError):
    """No signed-in identity, or the remote rejected the identity header."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class NotFoundError(DashboardError):
    """The requested entity has no match on the remote API."""


class FormValidationError(DashboardError):
    """Local form constraints were violated; nothing was sent.

    ``errors`` maps a field name (``name``, ``price``, ``images``) to the
    message shown next to that field.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__(
            "; ".join(f"{k}: {v}" for k, v in self.errors.items())
        )


class RemoteApiError(DashboardError):
    """Transport failure or unexpected response from the remote API."""

    def __init__(
        self, message: str, status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message)
