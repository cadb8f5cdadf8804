"""Mapping of domain exceptions to HTTP errors."""

from fastapi import HTTPException, status

from answer_cache.exceptions import InvalidInputError, NotFoundError


def to_http_error(error: Exception, action: str) -> HTTPException:
    """Translate an exception raised while performing ``action``.

    NotFoundError -> 404, InvalidInputError -> 400, anything else -> 500.
    """
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, InvalidInputError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {error}",
    )
