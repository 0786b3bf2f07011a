"""Invoke helpers — call sync or async callables uniformly.

Service methods, lifecycle hooks, and error handlers can be ``def`` or
``async def``. Any code that calls user-provided code goes through
:func:`invoke` so the sync/async check lives in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    result = await invoke(service.doEditName, "42")
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
