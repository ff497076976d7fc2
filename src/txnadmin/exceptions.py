"""Error taxonomy for the transactions admin tooling."""

from __future__ import annotations


class TxnAdminError(Exception):
    """Base class for every error raised by txnadmin."""


class ValidationError(TxnAdminError):
    """Operator input was rejected before any remote call was attempted."""


class ParameterError(ValidationError):
    def __init__(self, message: str, flag: str | None = None):
        super().__init__(message)
        self.flag = flag


class MissingFlagError(ValidationError):
    def __init__(self, flag: str):
        super().__init__(f"Missing required flag: {flag}")
        self.flag = flag


class UnknownCommandError(TxnAdminError):
    def __init__(self, name: str):
        super().__init__(f"unknown command: {name}")
        self.name = name


class TransportError(TxnAdminError):
    """The admin service could not be reached or the exchange failed."""


class AdminServerError(TransportError):
    def __init__(self, status_code: int, reason: str):
        super().__init__(f"HTTP {status_code}: {reason}")
        self.status_code = status_code
        self.reason = reason
