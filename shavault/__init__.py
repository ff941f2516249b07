# SHAVault
"""
Pure Python SHA-256 (FIPS 180-4) with one-shot and incremental APIs.

Subpackages:
- core_crypto: the hash core (sha256, SHA256Context, hash_into)
- files: streaming file hashing
- kat: known-answer test vectors and runner
"""

__version__ = "0.1.0"
