"""
Placeholder restorer, the only asynchronous stage of the pipeline.

Every pending block collected by earlier stages is awaited concurrently and
its token replaced with the resulting HTML. Substitution is by exact token, so
completion order does not affect the output. Tokens are replaced newest
first, since an emoji token can wrap an inline-code token. A block whose
resolver fails is replaced with its fallback instead of failing the render.
"""

import asyncio
import inspect
import logging

from ..utils import get_pending_blocks

logger = logging.getLogger(__name__)


async def _resolve(block) -> str:
    if inspect.isawaitable(block.html):
        return await block.html
    return block.html


async def restore_placeholders(html: str, context: dict) -> str:
    blocks = get_pending_blocks(context)
    if not blocks:
        return html

    results = await asyncio.gather(
        *(_resolve(block) for block in blocks), return_exceptions=True
    )

    # Newest first: resolved HTML may still contain older tokens
    for block, result in reversed(list(zip(blocks, results))):
        if isinstance(result, BaseException):
            logger.error(
                f"Resolving {block.placeholder} failed: {result}",
                exc_info=(type(result), result, result.__traceback__),
            )
            result = block.fallback
        html = html.replace(block.placeholder, result)

    blocks.clear()
    return html


def discard_pending_blocks(context: dict) -> None:
    """Close resolvers that will never be awaited (after a failed render)."""
    for block in get_pending_blocks(context):
        if inspect.iscoroutine(block.html):
            block.html.close()
    get_pending_blocks(context).clear()
