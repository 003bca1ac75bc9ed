from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotConnectedError(AppError):
    def __init__(self, detail: str = "WhatsApp is not connected") -> None:
        super().__init__(detail)


class BackendError(AppError):
    pass


class ValidationError(AppError):
    pass


class InvalidTransitionError(AppError):
    pass
