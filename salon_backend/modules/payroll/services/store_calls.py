# salon_backend/modules/payroll/services/store_calls.py

"""
Run blocking repository calls from async services with a deadline.
"""

import asyncio
import logging
from typing import Any, Callable

from ..exceptions import DataUnavailableError

logger = logging.getLogger(__name__)


async def call_store(
    operation: str, timeout: float, func: Callable[..., Any], *args, **kwargs
) -> Any:
    """
    Execute ``func`` in a worker thread, bounded by ``timeout`` seconds.

    Raises:
        DataUnavailableError: the call timed out or the store connection failed
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(func, *args, **kwargs), timeout=timeout
        )
    except asyncio.TimeoutError as e:
        logger.warning(f"Data store call '{operation}' timed out after {timeout}s")
        raise DataUnavailableError(
            f"timed out after {timeout} seconds", operation=operation
        ) from e
    except ConnectionError as e:
        logger.error(f"Data store unreachable during '{operation}': {str(e)}")
        raise DataUnavailableError(str(e), operation=operation) from e
