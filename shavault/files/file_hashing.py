"""
File Hashing Module

Streams files and binary streams through the incremental SHA-256 context:
- Fixed-size chunked reads (doesn't load entire file into RAM)
- Works on paths and on any binary file-like object (including stdin)
"""

import logging
from pathlib import Path
from typing import BinaryIO, Union

from ..core_crypto.sha256 import SHA256Context, InvalidArgumentError


logger = logging.getLogger(__name__)

# Chunk size for streaming (1 MB default)
DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1 MB


def hash_stream(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Compute SHA-256 of everything left in a binary stream.

    Args:
        stream: Readable binary file-like object
        chunk_size: Read chunk size

    Returns:
        32-byte SHA-256 hash
    """
    if chunk_size <= 0:
        raise InvalidArgumentError(f"Chunk size must be positive, got {chunk_size}")

    with SHA256Context() as ctx:
        while chunk := stream.read(chunk_size):
            ctx.update(chunk)
        logger.debug("Hashed %d bytes in chunks of %d", ctx.byte_count, chunk_size)
        return ctx.final()


def hash_file(file_path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Compute SHA-256 hash of a file (streaming).

    Args:
        file_path: Path to file
        chunk_size: Read chunk size

    Returns:
        32-byte SHA-256 hash
    """
    with open(file_path, 'rb') as f:
        return hash_stream(f, chunk_size)


def hash_file_hex(file_path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Compute SHA-256 of a file as a 64-character hex string."""
    return hash_file(file_path, chunk_size).hex()
