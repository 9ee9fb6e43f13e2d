"""Cadence exceptions."""


class CadenceError(Exception):
    """Base exception for Cadence."""

    def __init__(self, message: str, code: str = "CADENCE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "code": self.code,
        }


class InvalidPhoneError(CadenceError):
    """A DNC check was requested without any usable phone number."""

    def __init__(self, message: str = "A phone number is required"):
        super().__init__(message, code="INVALID_PHONE")
