"""Translation of Supabase client errors into domain errors."""

from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from supabase import PostgrestAPIError

from myfridge.domain.errors import RemoteReadFailure, RemoteWriteFailure


@contextmanager
def remote_read(action: str) -> Iterator[None]:
    """Raise RemoteReadFailure for API or transport errors during a read."""
    try:
        yield
    except (PostgrestAPIError, httpx.HTTPError) as exc:
        raise RemoteReadFailure(f"Failed to {action}: {exc}") from exc


@contextmanager
def remote_write(action: str) -> Iterator[None]:
    """Raise RemoteWriteFailure for API or transport errors during a write."""
    try:
        yield
    except (PostgrestAPIError, httpx.HTTPError) as exc:
        raise RemoteWriteFailure(f"Failed to {action}: {exc}") from exc

