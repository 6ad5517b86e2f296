"""Domain exception → HTTP status mapping shared by the v1 endpoints."""

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from app.domain.exceptions import (
    DependencyFailureError,
    EntityNotFoundError,
    InvalidArgumentError,
)


@contextmanager
def domain_errors() -> Iterator[None]:
    try:
        yield
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DependencyFailureError as e:
        # Driver text stays in the server log.
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Record store unavailable during '{e.operation}'",
        )
