"""Relay error taxonomy and its JSON rendering."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from chat_relay.models import ErrorResponse

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """Base class for failures the relay reports as a JSON body."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Failed to process request"

    def __init__(self, details: str | None = None) -> None:
        super().__init__(details or self.error)
        self.details = details

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, details=self.details)


class EmptyBodyError(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Request body is empty"


class InvalidMessagesError(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Messages must be an array"


class InvalidMessageFormatError(RelayError):
    """A message entry has an unknown role or non-string content."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid message format"


class ProviderFailure(RelayError):
    """Anything else: malformed JSON, provider or network faults."""

    def __init__(self, details: str) -> None:
        super().__init__(details)


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Render a RelayError as ``{"error", "details"?}``."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.details}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.error}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(exclude_none=True),
    )
