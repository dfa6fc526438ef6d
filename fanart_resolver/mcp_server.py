"""MCP server exposing the artwork resolver as tools."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from .config import ResolverConfig
from .models import ImageType
from .resolver import SUPPORTED_IMAGE_TYPES, ArtworkResolver
from .transport import CancellationToken

logger = logging.getLogger("fanart_resolver.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="fanart-resolver")

async def _resolve_once(
    resolver: ArtworkResolver,
    identifier: str,
    language: str,
    image_types: Optional[List[ImageType]],
) -> List[Dict[str, Any]]:
    token = CancellationToken()
    try:
        results = await asyncio.to_thread(
            resolver.resolve_images,
            identifier,
            language,
            image_types,
            token,
        )
    except asyncio.CancelledError:
        token.cancel()
        raise
    return [result.to_dict() for result in results]


@mcp.tool()
async def resolve_images(
    identifier: str,
    language: str = "en",
    image_types: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    """Return ranked artwork for an artist identifier, best candidate first."""

    kinds = [ImageType(value) for value in image_types] if image_types else None
    with ArtworkResolver(ResolverConfig.from_env()) as resolver:
        return await _resolve_once(resolver, identifier, language, kinds)


@mcp.tool()
async def image_types() -> List[str]:
    """List the image types this resolver can supply."""

    return [kind.value for kind in SUPPORTED_IMAGE_TYPES]


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
