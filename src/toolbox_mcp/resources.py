"""Local file resources served through ``resources/read``.

Only ``file:///`` URIs are readable. Failures (unsupported scheme, missing
file, permission denied, undecodable bytes) are domain errors: the reader
returns contents describing the failure with ``isError`` set and never
raises.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from toolbox_mcp.mcp.protocol import ReadResourceResult, TextResourceContents
from toolbox_mcp.observability import get_logger

logger = get_logger(__name__)

FILE_SCHEME_PREFIX = "file:///"
READ_MIME_TYPE = "text/plain"


class UnsupportedSchemeError(ValueError):
    """Raised internally for URIs that do not use the file:/// scheme."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Unsupported URI scheme: {uri}")
        self.uri = uri


def resolve_file_uri(uri: str, root: Path) -> Path:
    """Map a ``file:///`` URI to a filesystem path.

    The part after ``file:///`` is tried relative to ``root`` first, so
    ``file:///README.md`` names the project README; if no such file exists
    it is taken as an absolute path (``file:///etc/hosts`` -> ``/etc/hosts``).

    Raises:
        UnsupportedSchemeError: If ``uri`` does not start with ``file:///``.
    """
    if not uri.startswith(FILE_SCHEME_PREFIX):
        raise UnsupportedSchemeError(uri)
    remainder = uri[len(FILE_SCHEME_PREFIX):]
    relative = root / remainder
    if relative.exists():
        return relative
    return Path("/") / remainder


class FileResourceReader:
    """Reads ``file:///`` resources as UTF-8 text.

    Args:
        root: Directory that resource paths are resolved against first.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    async def __call__(self, uri: str) -> ReadResourceResult:
        try:
            path = resolve_file_uri(uri, self._root)
            # blocking read runs off the event loop
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, ValueError) as exc:
            logger.warning("mcp.resource.read_failed", uri=uri, error=str(exc))
            return ReadResourceResult(
                contents=[
                    TextResourceContents(
                        uri=uri,
                        mime_type=READ_MIME_TYPE,
                        text=f"Error reading resource: {exc}",
                    )
                ],
                is_error=True,
            )
        logger.debug("mcp.resource.read", uri=uri, path=str(path), size=len(text))
        return ReadResourceResult(
            contents=[TextResourceContents(uri=uri, mime_type=READ_MIME_TYPE, text=text)],
        )
