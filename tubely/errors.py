"""
Failure kinds for the API and the upload pipeline.
Every error carries a kind, an HTTP status and a public message; `detail` is for logs only.
The handler in tubely.main turns them into {"error": message, "kind": kind}.
"""
from fastapi import status


class TubelyError(Exception):
    kind = "InternalError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str | None = None, detail: str | None = None):
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(detail or self.message)


class Unauthenticated(TubelyError):
    kind = "Unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Couldn't validate credentials"


class Forbidden(TubelyError):
    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    message = "Unauthorized access"


class NotFound(TubelyError):
    # Upload handlers do not distinguish a missing record from other lookup failures
    kind = "NotFound"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Couldn't get video"


class BadRequest(TubelyError):
    kind = "BadRequest"
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad request"


class UnsupportedMediaType(TubelyError):
    kind = "UnsupportedMediaType"
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Unsupported file type"


class StagingError(TubelyError):
    kind = "IOError"
    message = "Couldn't save upload"


class ProbeFailed(TubelyError):
    kind = "ProbeFailed"
    message = "Couldn't determine aspect ratio"


class NoStreams(TubelyError):
    kind = "NoStreams"
    message = "No video streams found"


class InvalidDimensions(TubelyError):
    kind = "InvalidDimensions"
    message = "Invalid video dimensions"


class RemuxFailed(TubelyError):
    kind = "RemuxFailed"
    message = "Failed to process video"

    def __init__(self, diagnostics: str, detail: str | None = None):
        # ffmpeg stderr is surfaced verbatim for operators
        super().__init__(f"Failed to process video: {diagnostics.strip()}", detail=detail or diagnostics)
        self.diagnostics = diagnostics


class EntropyUnavailable(TubelyError):
    kind = "EntropyUnavailable"
    message = "Couldn't generate key"


class StoreUnavailable(TubelyError):
    kind = "StoreUnavailable"
    message = "Couldn't store upload"


class PersistFailed(TubelyError):
    kind = "PersistFailed"
    message = "Couldn't update video"
