"""
Content hashing of hookfiles.

The checksum is a cache-key component only: base32 (lowercase, unpadded) of
the md5 digest of the file's bytes with CRLF line endings normalized, so a
checkout on Windows hashes the same as one on Linux.
"""

import asyncio
import base64
import hashlib
from pathlib import Path


def create_base32_hash(content: str | bytes) -> str:
    """Base32 md5 digest of ``content`` (text is hashed as UTF-8)."""
    data = content.encode("utf-8") if isinstance(content, str) else content
    digest = hashlib.md5(data, usedforsecurity=False).digest()
    return base64.b32encode(digest).decode("ascii").rstrip("=").lower()


def _read_normalized(path: Path) -> bytes:
    # Raw bytes: a hookfile may declare any source encoding
    return path.read_bytes().replace(b"\r\n", b"\n")


async def create_base32_hash_from_file(path: Path | str) -> str:
    """Hash the file at ``path``. Raises ``OSError`` if it cannot be read."""
    loop = asyncio.get_running_loop()
    content = await loop.run_in_executor(None, _read_normalized, Path(path))
    return create_base32_hash(content)
