"""Call sync or async user callables uniformly.

Route handlers, middleware, and the 404/405/500 handlers can all be
``def`` or ``async def``. The sync/async check lives here only.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it is awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
