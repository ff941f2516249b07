# File Hashing Module
"""
Streaming SHA-256 over files and binary streams.
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues when running module directly."""
    from . import file_hashing
    return getattr(file_hashing, name)

__all__ = [
    'hash_stream',
    'hash_file',
    'hash_file_hex',
    'DEFAULT_CHUNK_SIZE',
]
