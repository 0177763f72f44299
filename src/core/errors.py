# core/errors.py
from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    FETCH = "fetch"
    DELETE = "delete"
    IMPORT = "import"
    ATTACH = "attach"


class AppError(Exception):
    """
    Base for every failure the UI can recover from.
    Handlers branch on `kind`, the message is only for display.
    """
    kind: ErrorKind = ErrorKind.FETCH
    title: str = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FetchFailure(AppError):
    kind = ErrorKind.FETCH
    title = "Could not load tracks"


class DeleteFailure(AppError):
    kind = ErrorKind.DELETE
    title = "Could not delete track"


class ImportFailure(AppError):
    kind = ErrorKind.IMPORT
    title = "Import finished with errors"


class AttachFailure(AppError):
    kind = ErrorKind.ATTACH
    title = "Playback error"


def as_app_error(exc: BaseException, default: type[AppError] = FetchFailure) -> AppError:
    if isinstance(exc, AppError):
        return exc
    return default(str(exc) or exc.__class__.__name__)
