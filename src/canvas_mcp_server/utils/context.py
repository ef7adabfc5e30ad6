"""
Request Context Helpers

Tools and resources run on the server's event loop, while the Canvas
accessors block on HTTP and on retry backoff. These helpers move accessor
calls into worker threads.
"""

from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")


async def run_accessor(ctx: Any, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Run a blocking accessor call in a worker thread.

    The call goes through the request's InsightsService, so it shares the
    concurrency limit with the composite accessors.

    Args:
        ctx: Request context whose lifespan context holds "insights"
        func: Blocking accessor, usually a bound CanvasApiAdapter method
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Whatever func returns; its exceptions propagate
    """
    insights = ctx.request_context.lifespan_context["insights"]
    return await insights.run(func, *args, **kwargs)
