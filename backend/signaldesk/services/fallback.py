from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

from ..schemas import DataSource, ServiceResult
from .backend_client import BackendClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


def call_with_fallback(
    operation: str,
    backend: Optional[BackendClient],
    remote: Optional[Callable[[BackendClient], Optional[T]]],
    fallback: Callable[[], T],
    delay: float = 0.0,
) -> ServiceResult[T]:
    """
    Run `remote` against the backend and fall back to the mock data.

    - No backend (or no remote step for this call): mock path.
    - `remote` returns None: the backend has nothing usable, mock path.
    - `remote` raises: the error is logged and swallowed, mock path, and the
      result is flagged as degraded.

    The mock path waits `delay` seconds to mimic network latency. Errors
    raised by `fallback` itself are hard failures and propagate.
    """
    source = DataSource.MOCK
    error: Optional[str] = None

    if backend is not None and remote is not None:
        try:
            value = remote(backend)
        except Exception as e:
            logger.warning("[%s] %s call failed, falling back to mock data: %s", operation, backend.name, e)
            source = DataSource.DEGRADED
            error = str(e)
        else:
            if value is not None:
                return ServiceResult(data=value, source=DataSource.BACKEND)
            logger.info("[%s] %s returned no data, using mock data", operation, backend.name)

    if delay > 0:
        time.sleep(delay)
    return ServiceResult(data=fallback(), source=source, error=error)
