# richter/utils/upstream.py
import asyncio
import functools
import logging

from richter.core.exceptions import UpstreamFailure

logger = logging.getLogger(__name__)


async def run_blocking(component: str, timeout: float, func, *args, **kwargs):
    """Run a blocking SDK call off the event loop, bounded by ``timeout`` seconds."""
    call = functools.partial(func, *args, **kwargs)
    try:
        return await asyncio.wait_for(asyncio.to_thread(call), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error("%s call timed out after %.1fs", component, timeout)
        raise UpstreamFailure(component, f"{component} timed out")
