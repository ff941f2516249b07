"""
SHA-256 Hash Implementation (From Scratch)

Implements the SHA-256 cryptographic hash function as defined in FIPS 180-4,
in both one-shot and incremental (streaming) form. No hashlib involved.

Components:
- Word codec: big-endian conversion between blocks and 32-bit words
- Padding: closing bytes (0x80, zeros, 64-bit bit length)
- Message Schedule: expands 16 words to 64 words
- Compression: 64 rounds mixing a schedule into the hash state
- SHA256Context: buffers arbitrary chunks and drives compression
- One-shot API: sha256(), sha256_hex(), sha256_string(), hash_into()

A context moves through FRESH -> ACCUMULATING -> FINALIZED -> RELEASED.
Misuse (update after final, double free, ...) raises immediately instead
of producing a digest that looks valid.
"""

import logging
from enum import Enum, IntEnum
from typing import List, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)


# Initial hash values: first 32 bits of fractional parts of square roots of first 8 primes
H_INITIAL: Tuple[int, ...] = (
    0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a,
    0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19,
)

# Round constants: first 32 bits of fractional parts of cube roots of first 64 primes
K: Tuple[int, ...] = (
    0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5,
    0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
    0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3,
    0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
    0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc,
    0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
    0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7,
    0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
    0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13,
    0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
    0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3,
    0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
    0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5,
    0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
    0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208,
    0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2,
)

# Mask for 32-bit arithmetic
MASK_32 = 0xFFFFFFFF

BLOCK_SIZE = 64             # 512-bit block
DIGEST_SIZE = 32            # 256-bit digest
WORD_SIZE = 4
LENGTH_FIELD_SIZE = 8       # 64-bit big-endian bit length
PAD_BOUNDARY = BLOCK_SIZE - LENGTH_FIELD_SIZE  # 56

# The length field is 64 bits wide; longer messages are not supported
MAX_MESSAGE_BITS = (1 << 64) - 1


# ============================================================================
# Errors
# ============================================================================

class Status(IntEnum):
    """Status codes returned by the status-style API (hash_into)."""
    OK = 0
    ALLOCATION_FAILURE = 1
    INVALID_STATE = 2
    INVALID_ARGUMENT = 3
    MESSAGE_TOO_LONG = 4


class HashError(Exception):
    """Base class for all SHA-256 errors."""
    status = Status.INVALID_ARGUMENT


class AllocationError(HashError, MemoryError):
    """Raised when a context cannot be allocated."""
    status = Status.ALLOCATION_FAILURE


class InvalidStateError(HashError, RuntimeError):
    """Raised when a context is used after final() or free()."""
    status = Status.INVALID_STATE


class InvalidArgumentError(HashError, ValueError):
    """Raised for missing, mistyped or wrongly sized buffers."""
    status = Status.INVALID_ARGUMENT


class MessageTooLongError(HashError, OverflowError):
    """Raised when the total message would exceed 2^64 - 1 bits."""
    status = Status.MESSAGE_TOO_LONG


# ============================================================================
# Bitwise mixing functions
# ============================================================================

def _right_rotate(value: int, amount: int) -> int:
    """Right rotate a 32-bit integer by the specified amount."""
    return ((value >> amount) | (value << (32 - amount))) & MASK_32


def _ch(x: int, y: int, z: int) -> int:
    """Choice function: if x then y else z (bitwise)."""
    return (x & y) ^ (~x & z & MASK_32)


def _maj(x: int, y: int, z: int) -> int:
    """Majority function: majority vote of bits."""
    return (x & y) ^ (x & z) ^ (y & z)


def _sigma0(x: int) -> int:
    """Lowercase sigma 0: used in message schedule."""
    return _right_rotate(x, 7) ^ _right_rotate(x, 18) ^ (x >> 3)


def _sigma1(x: int) -> int:
    """Lowercase sigma 1: used in message schedule."""
    return _right_rotate(x, 17) ^ _right_rotate(x, 19) ^ (x >> 10)


def _big_sigma0(x: int) -> int:
    """Uppercase Sigma 0: used in compression."""
    return _right_rotate(x, 2) ^ _right_rotate(x, 13) ^ _right_rotate(x, 22)


def _big_sigma1(x: int) -> int:
    """Uppercase Sigma 1: used in compression."""
    return _right_rotate(x, 6) ^ _right_rotate(x, 11) ^ _right_rotate(x, 25)


# ============================================================================
# Word codec
# ============================================================================

def bytes_to_words(block: bytes) -> List[int]:
    """
    Convert a 64-byte block into 16 32-bit words (big-endian).

    Args:
        block: Exactly 64 bytes (bytes, bytearray or memoryview)

    Returns:
        List of 16 integers in [0, 2^32)

    Raises:
        InvalidArgumentError: If the block is not 64 bytes long
    """
    if len(block) != BLOCK_SIZE:
        raise InvalidArgumentError(
            f"Block must be {BLOCK_SIZE} bytes, got {len(block)}"
        )
    return [
        int.from_bytes(block[i:i + WORD_SIZE], byteorder='big')
        for i in range(0, BLOCK_SIZE, WORD_SIZE)
    ]


def words_to_bytes(words: Sequence[int]) -> bytes:
    """Serialize 32-bit words as big-endian bytes."""
    return b''.join(
        (word & MASK_32).to_bytes(WORD_SIZE, byteorder='big') for word in words
    )


# ============================================================================
# Padding
# ============================================================================

def pad_message_tail(buffered_len: int, bit_length: int) -> bytes:
    """
    Build the closing bytes that finalize a message.

    Padding rules:
    1. Append bit '1' to message (0x80 byte)
    2. Append zeros until length ≡ 56 (mod 64) bytes
    3. Append the total message length in bits as a 64-bit big-endian integer

    When fewer than 9 bytes are left in the current block, the padding
    spills into a second block.

    Args:
        buffered_len: Bytes already sitting in the partial block (0-63)
        bit_length: Total message length in bits

    Returns:
        Padding bytes; buffered_len + len(result) is 64 or 128

    Raises:
        InvalidArgumentError: If either argument is out of range
    """
    if not 0 <= buffered_len < BLOCK_SIZE:
        raise InvalidArgumentError(
            f"Buffered length must be in [0, {BLOCK_SIZE}), got {buffered_len}"
        )
    if not 0 <= bit_length <= MAX_MESSAGE_BITS:
        raise InvalidArgumentError("Bit length does not fit in 64 bits")

    padding_length = (PAD_BOUNDARY - (buffered_len + 1)) % BLOCK_SIZE
    return (
        b'\x80'
        + b'\x00' * padding_length
        + bit_length.to_bytes(LENGTH_FIELD_SIZE, byteorder='big')
    )


# ============================================================================
# Message schedule and compression
# ============================================================================

def create_message_schedule(words: Sequence[int]) -> List[int]:
    """
    Expand 16 words into 64 words for the message schedule.

    For i from 16 to 63:
        W[i] = σ1(W[i-2]) + W[i-7] + σ0(W[i-15]) + W[i-16]
    """
    if len(words) != 16:
        raise InvalidArgumentError(f"Schedule needs 16 words, got {len(words)}")

    w = list(words)
    for i in range(16, 64):
        s0 = _sigma0(w[i - 15])
        s1 = _sigma1(w[i - 2])
        w.append((w[i - 16] + s0 + w[i - 7] + s1) & MASK_32)
    return w


def compress(state: Sequence[int], w: Sequence[int]) -> Tuple[int, ...]:
    """
    Perform 64 rounds of compression on the state.

    The input state is never modified; a new 8-word tuple is returned,
    so callers only ever observe a complete update.

    Args:
        state: Current hash state (8 32-bit words)
        w: Message schedule (64 32-bit words)

    Returns:
        Updated hash state
    """
    # Initialize working variables
    a, b, c, d, e, f, g, h = state

    for i in range(64):
        t1 = (h + _big_sigma1(e) + _ch(e, f, g) + K[i] + w[i]) & MASK_32
        t2 = (_big_sigma0(a) + _maj(a, b, c)) & MASK_32

        h = g
        g = f
        f = e
        e = (d + t1) & MASK_32
        d = c
        c = b
        b = a
        a = (t1 + t2) & MASK_32

    return tuple(
        (old + new) & MASK_32
        for old, new in zip(state, (a, b, c, d, e, f, g, h))
    )


def compress_block(state: Sequence[int], block: bytes) -> Tuple[int, ...]:
    """Run one 64-byte block through the schedule and compression."""
    return compress(state, create_message_schedule(bytes_to_words(block)))


# ============================================================================
# Incremental context
# ============================================================================

class ContextState(Enum):
    """Lifecycle of a SHA256Context."""
    FRESH = "fresh"
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"
    RELEASED = "released"


def _as_byte_view(data, length: Optional[int]) -> memoryview:
    """Turn (data, length) into a flat byte view, validating both."""
    if data is None:
        if length == 0:
            return memoryview(b'')
        raise InvalidArgumentError("Data is None but a non-zero length was requested")

    if isinstance(data, str):
        raise InvalidArgumentError("Data must be bytes-like, not str (encode it first)")
    try:
        view = memoryview(data)
    except TypeError as exc:
        raise InvalidArgumentError(
            f"Data must be bytes-like, got {type(data).__name__}"
        ) from exc
    if not view.c_contiguous:
        view = memoryview(view.tobytes())
    if view.ndim != 1 or view.format != 'B':
        view = view.cast('B')

    if length is None:
        return view
    if length < 0:
        raise InvalidArgumentError(f"Length must be non-negative, got {length}")
    if length > len(view):
        raise InvalidArgumentError(
            f"Length {length} exceeds the {len(view)} bytes supplied"
        )
    return view[:length]


def _as_digest_target(out) -> memoryview:
    """Validate a caller-supplied output buffer of exactly 32 bytes."""
    if out is None:
        raise InvalidArgumentError("Output buffer is None")
    try:
        view = memoryview(out)
    except TypeError as exc:
        raise InvalidArgumentError(
            f"Output must be a writable buffer, got {type(out).__name__}"
        ) from exc
    if view.readonly:
        raise InvalidArgumentError("Output buffer is read-only")
    if not view.c_contiguous:
        raise InvalidArgumentError("Output buffer must be contiguous")
    if view.nbytes != DIGEST_SIZE:
        raise InvalidArgumentError(
            f"Output buffer must be {DIGEST_SIZE} bytes, got {view.nbytes}"
        )
    return view.cast('B')


class SHA256Context:
    """
    Incremental SHA-256 computation.

    Feed any number of chunks of any size to update(), then call final()
    exactly once. The digest is identical to hashing the concatenation
    of all chunks in one go.

    Calling free() twice on the same context is a programming error and
    raises InvalidStateError. Using the context as a context manager frees
    it on exit.

    Not thread-safe: each concurrent computation needs its own context.

    Example:
        >>> with SHA256Context() as ctx:
        ...     _ = ctx.update(b"hello ").update(b"world")
        ...     ctx.final().hex()[:16]
        'b94d27b9934d3e08'
    """

    name = "sha256"
    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self):
        """Initialize a fresh context with the standard initial hash values."""
        try:
            self._buffer = bytearray()
            self._state: Tuple[int, ...] = tuple(H_INITIAL)
        except MemoryError as exc:
            raise AllocationError("Could not allocate SHA-256 context") from exc
        self._bit_length = 0
        self._lifecycle = ContextState.FRESH

    def __enter__(self) -> 'SHA256Context':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._lifecycle is not ContextState.RELEASED:
            self.free()

    def __repr__(self) -> str:
        return (
            f"<SHA256Context {self._lifecycle.value} "
            f"bytes={self.byte_count} buffered={len(self._buffer)}>"
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def lifecycle(self) -> ContextState:
        """Current lifecycle state."""
        return self._lifecycle

    @property
    def state(self) -> Tuple[int, ...]:
        """Current 8-word hash state."""
        return self._state

    @property
    def buffered(self) -> int:
        """Number of bytes waiting for a full block (always < 64)."""
        return len(self._buffer)

    @property
    def bit_length(self) -> int:
        """Total bits passed to update() so far."""
        return self._bit_length

    @property
    def byte_count(self) -> int:
        """Total bytes passed to update() so far."""
        return self._bit_length // 8

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _require_open(self, operation: str) -> None:
        if self._lifecycle in (ContextState.FINALIZED, ContextState.RELEASED):
            logger.debug("%s() rejected on %s context", operation, self._lifecycle.value)
            raise InvalidStateError(
                f"Cannot {operation}(): context is {self._lifecycle.value}"
            )

    def update(self, data, length: Optional[int] = None) -> 'SHA256Context':
        """
        Absorb more message bytes.

        Args:
            data: Bytes-like object (None is only accepted with length=0)
            length: Number of leading bytes of data to use (default: all)

        Returns:
            self, to allow chaining

        Raises:
            InvalidStateError: If the context was finalized or freed
            InvalidArgumentError: If data/length are inconsistent
            MessageTooLongError: If the total would exceed 2^64 - 1 bits
        """
        self._require_open("update")
        view = _as_byte_view(data, length)

        if self._lifecycle is ContextState.FRESH:
            self._lifecycle = ContextState.ACCUMULATING

        size = len(view)
        if size == 0:
            return self

        new_bit_length = self._bit_length + size * 8
        if new_bit_length > MAX_MESSAGE_BITS:
            raise MessageTooLongError(
                "Message length exceeds the 64-bit SHA-256 length field"
            )

        offset = 0
        state = self._state

        # Top up a partially filled block first
        if self._buffer:
            take = min(BLOCK_SIZE - len(self._buffer), size)
            self._buffer += view[:take]
            offset = take
            if len(self._buffer) == BLOCK_SIZE:
                state = compress_block(state, self._buffer)
                self._buffer.clear()

        # Buffer is empty here unless the input ran out; whole blocks go straight through
        while size - offset >= BLOCK_SIZE:
            state = compress_block(state, view[offset:offset + BLOCK_SIZE])
            offset += BLOCK_SIZE

        if offset < size:
            self._buffer += view[offset:]

        self._state = state
        self._bit_length = new_bit_length
        return self

    def final(self, out=None) -> bytes:
        """
        Finish the computation and return the 32-byte digest.

        Args:
            out: Optional writable 32-byte buffer that also receives the digest.
                 It is validated first and left untouched on any error.

        Returns:
            256-bit (32-byte) digest as bytes

        Raises:
            InvalidStateError: If final() was already called or the context freed
            InvalidArgumentError: If out is not a writable 32-byte buffer
        """
        self._require_open("final")
        target = _as_digest_target(out) if out is not None else None

        closing = bytes(self._buffer) + pad_message_tail(len(self._buffer), self._bit_length)
        state = self._state
        for i in range(0, len(closing), BLOCK_SIZE):
            state = compress_block(state, closing[i:i + BLOCK_SIZE])

        digest = words_to_bytes(state)

        self._state = state
        self._wipe_buffer()
        self._lifecycle = ContextState.FINALIZED

        if target is not None:
            target[:] = digest
        return digest

    def copy(self) -> 'SHA256Context':
        """Return an independent context with the same progress."""
        self._require_open("copy")
        clone = SHA256Context()
        clone._state = self._state
        clone._buffer = bytearray(self._buffer)
        clone._bit_length = self._bit_length
        clone._lifecycle = self._lifecycle
        return clone

    def free(self) -> None:
        """
        Release the context, wiping buffered message bytes and state.

        Safe on a finalized context. A second call raises InvalidStateError.
        """
        if self._lifecycle is ContextState.RELEASED:
            logger.debug("free() called twice on the same context")
            raise InvalidStateError("Context already released")
        self._wipe_buffer()
        self._state = (0,) * 8
        self._bit_length = 0
        self._lifecycle = ContextState.RELEASED

    def _wipe_buffer(self) -> None:
        self._buffer[:] = bytes(len(self._buffer))
        self._buffer.clear()


# ============================================================================
# One-shot API
# ============================================================================

def sha256(data: bytes) -> bytes:
    """
    Compute the SHA-256 hash of the input data.

    Args:
        data: Input bytes to hash

    Returns:
        256-bit (32-byte) digest as bytes

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    with SHA256Context() as ctx:
        ctx.update(data)
        return ctx.final()


def sha256_hex(data: bytes) -> str:
    """
    Compute SHA-256 hash and return as hexadecimal string.

    Args:
        data: Input bytes to hash

    Returns:
        64-character hexadecimal string
    """
    return sha256(data).hex()


def sha256_string(text: str, encoding: str = 'utf-8') -> bytes:
    """
    Compute SHA-256 hash of a string.

    Args:
        text: Input string to hash
        encoding: String encoding (default: utf-8)

    Returns:
        256-bit (32-byte) digest as bytes
    """
    return sha256(text.encode(encoding))


def hash_into(out, data, length: Optional[int] = None) -> Status:
    """
    Hash data into a caller-supplied 32-byte buffer and report a status.

    Errors are reported through the returned Status instead of being
    raised. On any failure out is left exactly as it was.

    Args:
        out: Writable buffer of exactly 32 bytes
        data: Input bytes to hash
        length: Number of leading bytes of data to hash (default: all)

    Returns:
        Status.OK on success, otherwise the status of the failure
    """
    try:
        target = _as_digest_target(out)
        with SHA256Context() as ctx:
            ctx.update(data, length)
            digest = ctx.final()
    except HashError as exc:
        logger.debug("hash_into failed: %s", exc)
        return exc.status
    target[:] = digest
    return Status.OK


__all__ = [
    'H_INITIAL',
    'K',
    'MASK_32',
    'BLOCK_SIZE',
    'DIGEST_SIZE',
    'MAX_MESSAGE_BITS',
    'Status',
    'HashError',
    'AllocationError',
    'InvalidStateError',
    'InvalidArgumentError',
    'MessageTooLongError',
    'ContextState',
    'SHA256Context',
    'bytes_to_words',
    'words_to_bytes',
    'pad_message_tail',
    'create_message_schedule',
    'compress',
    'compress_block',
    'sha256',
    'sha256_hex',
    'sha256_string',
    'hash_into',
]
