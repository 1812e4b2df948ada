"""Kida environment setup and the template render bridge.

Creates a kida Environment from wren's AppConfig. The environment is
created once during App._freeze() and passed through the request
pipeline to each ``ResponseContext``.
"""

from collections.abc import Iterator
from typing import Any

import anyio.lowlevel
from kida import Environment, FileSystemLoader

from wren.config import AppConfig


def create_environment(config: AppConfig) -> Environment:
    """Create a kida Environment rooted at ``config.template_dir``."""
    return Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
    )


async def render_to_string(env: Environment, name: str, context: dict[str, Any]) -> str:
    """Stream template *name* with *context* and return the joined output.

    Yields to the event loop between chunks. Missing templates and
    template errors propagate to the caller.
    """
    template = env.get_template(name)
    chunks: Iterator[str] = template.render_stream(context)
    buffer: list[str] = []
    for chunk in chunks:
        if chunk:
            buffer.append(chunk)
        await anyio.lowlevel.checkpoint()
    return "".join(buffer)
