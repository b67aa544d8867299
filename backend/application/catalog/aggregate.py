from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Mapping

logger = logging.getLogger(__name__)


async def gather_partial(
    fetches: Mapping[str, Awaitable[Any]],
    *,
    defaults: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Run page fetches concurrently; keep what succeeded, default the rest.

    A fetch that raises or returns None gets `defaults[name]` (None when no
    default is given). One failing section never aborts the whole page.
    """
    names = list(fetches.keys())
    defaults = dict(defaults or {})
    results = await asyncio.gather(*(fetches[n] for n in names), return_exceptions=True)

    out: dict[str, Any] = {}
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            logger.warning("catalog fetch failed name=%s: %s", name, result)
            out[name] = defaults.get(name)
        elif result is None:
            out[name] = defaults.get(name)
        else:
            out[name] = result
    return out
