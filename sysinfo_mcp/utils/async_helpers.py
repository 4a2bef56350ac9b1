"""Async helpers for running blocking psutil/platform calls from tool handlers."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FLAG = os.getenv("SYSINFO_ENABLE_TO_THREAD")
if _FLAG is None:
    _USE_THREADS = True
else:
    _USE_THREADS = _FLAG.lower() in {"1", "true", "yes", "on"}


async def _run_in_thread(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Helper that wraps asyncio.to_thread with graceful fallback."""
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    except (RuntimeError, PermissionError) as exc:
        logger.warning("asyncio.to_thread unavailable (%s); falling back to sync execution", exc)
        return func(*args, **kwargs)


async def run_sync(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Execute blocking function, offloading to a background thread when possible."""
    if _USE_THREADS:
        return await _run_in_thread(func, *args, **kwargs)
    return func(*args, **kwargs)


async def run_optional(func: Callable[..., Optional[T]], *args: Any, default: Optional[T] = None) -> Optional[T]:
    """Run a sub-query that may be unsupported on this host.

    The failure is logged and replaced by ``default`` so a single missing
    sensor never fails the whole tool call.
    """
    try:
        result = await run_sync(func, *args)
    except Exception as exc:
        logger.debug("Optional query %s unavailable: %s", getattr(func, "__name__", func), exc)
        return default
    return default if result is None else result


__all__ = ["run_sync", "run_optional"]
