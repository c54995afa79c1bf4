"""Core error types for :mod:`otelecs`."""


class ECSLogError(Exception):
    """Base class for all otelecs exceptions."""


class FieldEncodingError(ECSLogError):
    """
    A field payload could not be written to an object encoder.

    ``key`` names the failed field and ``cause`` is the original error. Bucket
    encoders turn it into a ``<key>Error`` entry holding ``str(cause)``.
    """

    def __init__(self, key: str, cause: BaseException):
        super().__init__(f"{key}: {cause}")
        self.key = key
        self.cause = cause

    @property
    def error_key(self) -> str:
        return f"{self.key}Error"


class SinkError(ECSLogError):
    """The record sink failed to write or flush."""


class PanicError(ECSLogError):
    """Raised by :meth:`ECSLogger.panic` after the record has been written."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
