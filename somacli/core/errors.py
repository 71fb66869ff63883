from __future__ import annotations


class SomaError(Exception):
    """Base class for everything somacli raises on purpose."""


class NetworkError(SomaError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(SomaError):
    pass


class StreamResolutionError(SomaError):
    pass


class ProcessError(SomaError):
    pass
