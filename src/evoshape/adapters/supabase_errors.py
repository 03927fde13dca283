"""Translate PostgREST failures into domain storage errors."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime

import httpx
from postgrest.exceptions import APIError

from evoshape.domain.errors import StorageError


@contextmanager
def storage_errors() -> Iterator[None]:
    """Re-raise PostgREST API and transport errors as ``StorageError``."""
    try:
        yield
    except APIError as exc:
        raise StorageError(exc.message or "Database request failed") from exc
    except httpx.HTTPError as exc:
        raise StorageError(str(exc) or "Database request failed") from exc


def parse_date(value: object) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def optional_float(value: object) -> float | None:
    return float(value) if value is not None else None
