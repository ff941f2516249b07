"""
Unit tests for the SHA-256 core.

Tests:
- Known-answer vectors (one-shot)
- Word codec
- Padding
- Message schedule and compression
- Incremental context and chunking invariance
"""

import hashlib
import random

import pytest
from shavault.core_crypto.sha256 import (
    H_INITIAL, K, BLOCK_SIZE, DIGEST_SIZE, MASK_32,
    SHA256Context, ContextState,
    bytes_to_words, words_to_bytes, pad_message_tail,
    create_message_schedule, compress, compress_block,
    sha256, sha256_hex, sha256_string,
)


class TestSHA256:
    """Unit tests for SHA-256 implementation."""

    def test_empty_string(self):
        """Test SHA-256 of empty string."""
        expected = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        assert sha256_hex(b"") == expected

    def test_abc(self):
        """Test SHA-256 of 'abc'."""
        expected = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        assert sha256_hex(b"abc") == expected

    def test_long_message(self):
        """Test SHA-256 of the two-block 448-bit NIST message."""
        msg = b"abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq"
        expected = "248d6a61d20638b8e5c026930c3e6039a33ce45964ff2167f6ecedd419db06c1"
        assert sha256_hex(msg) == expected

    def test_896_bit_message(self):
        """Test SHA-256 of the 896-bit NIST message."""
        msg = (b"abcdefghbcdefghicdefghijdefghijkefghijklfghijklmghijklmn"
               b"hijklmnoijklmnopjklmnopqklmnopqrlmnopqrsmnopqrstnopqrstu")
        expected = "cf5b16a778af8380036ce59e7b0492370b249b11e8f07a51afac45037afee9d1"
        assert sha256_hex(msg) == expected

    def test_hello_world(self):
        """'hello world' must produce the canonical 32-byte digest."""
        expected = "b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9"
        assert len(bytes.fromhex(expected)) == DIGEST_SIZE
        assert sha256_string("hello world").hex() == expected

    def test_zero_blocks_match_reference(self):
        """64 and 128 zero bytes checked against hashlib."""
        assert sha256(bytes(64)) == hashlib.sha256(bytes(64)).digest()
        assert sha256(bytes(128)) == hashlib.sha256(bytes(128)).digest()
        assert sha256_hex(bytes(64)) == (
            "f5a5fd42d16a20302798ef6ed309979b43003d2320d9f0e8ea9831a92759fb4b"
        )

    def test_million_a(self):
        """One million 'a' in 1000-byte chunks (not block aligned)."""
        ctx = SHA256Context()
        chunk = b"a" * 1000
        for _ in range(1000):
            ctx.update(chunk)
        digest = ctx.final()
        ctx.free()
        assert digest.hex() == (
            "cdc76e5c9914fb9281a1c7e284d73e67f1809a48a497200e046d39ccc7112cd0"
        )

    def test_deterministic(self):
        """SHA-256 should be deterministic."""
        msg = b"test message"
        assert sha256(msg) == sha256(msg)

    def test_returns_32_bytes(self):
        """SHA-256 should return 32 bytes."""
        assert len(sha256(b"test")) == 32

    def test_different_inputs_different_hashes(self):
        """Different inputs should produce different hashes."""
        assert sha256(b"a") != sha256(b"b")

    def test_matches_hashlib_on_random_lengths(self):
        """Lengths around every block boundary agree with hashlib."""
        rng = random.Random(7)
        for length in list(range(0, 130)) + [1000, 4095, 4096]:
            data = rng.randbytes(length)
            assert sha256(data) == hashlib.sha256(data).digest(), length

    def test_accepts_bytearray_and_memoryview(self):
        """Any bytes-like input is accepted."""
        expected = sha256(b"abc")
        assert sha256(bytearray(b"abc")) == expected
        assert sha256(memoryview(b"xabcx")[1:4]) == expected

    def test_single_bit_flip_avalanche(self):
        """Flipping one input bit changes roughly half of the output bits."""
        msg = bytearray(b"The quick brown fox jumps over the lazy dog")
        base = int.from_bytes(sha256(bytes(msg)), 'big')
        for bit in (0, 7, 100, len(msg) * 8 - 1):
            flipped = bytearray(msg)
            flipped[bit // 8] ^= 1 << (bit % 8)
            other = int.from_bytes(sha256(bytes(flipped)), 'big')
            changed = bin(base ^ other).count("1")
            assert 64 <= changed <= 192, f"bit {bit}: only {changed} bits changed"


class TestConstants:
    """Round constants and initial hash values."""

    def test_sizes(self):
        assert len(H_INITIAL) == 8
        assert len(K) == 64
        assert all(0 <= k <= MASK_32 for k in K)

    def test_immutable(self):
        """Constant tables are tuples and cannot be modified."""
        with pytest.raises(TypeError):
            K[0] = 0
        with pytest.raises(TypeError):
            H_INITIAL[0] = 0

    def test_known_values(self):
        assert H_INITIAL[0] == 0x6a09e667
        assert H_INITIAL[7] == 0x5be0cd19
        assert K[0] == 0x428a2f98
        assert K[63] == 0xc67178f2


class TestWordCodec:
    """Big-endian word conversion."""

    def test_bytes_to_words_big_endian(self):
        block = bytes(range(64))
        words = bytes_to_words(block)
        assert len(words) == 16
        assert words[0] == 0x00010203
        assert words[15] == 0x3c3d3e3f

    def test_words_to_bytes(self):
        assert words_to_bytes([0x01020304, 0xffffffff]) == b"\x01\x02\x03\x04\xff\xff\xff\xff"

    def test_inverse(self):
        block = bytes(range(100, 164))
        assert words_to_bytes(bytes_to_words(block)) == block

    def test_wrong_block_size_rejected(self):
        with pytest.raises(ValueError):
            bytes_to_words(bytes(63))
        with pytest.raises(ValueError):
            bytes_to_words(bytes(65))


class TestPadding:
    """Padding and length encoding."""

    def test_total_length_for_every_offset(self):
        """Buffered bytes plus padding is one block up to 55 bytes, two from 56."""
        for buffered in range(BLOCK_SIZE):
            tail = pad_message_tail(buffered, buffered * 8)
            expected = 64 if buffered <= 55 else 128
            assert buffered + len(tail) == expected, buffered

    def test_layout(self):
        """0x80, zeros, then the 64-bit big-endian bit length."""
        tail = pad_message_tail(3, 24)
        assert tail[0] == 0x80
        assert tail[1:-8] == bytes(len(tail) - 9)
        assert tail[-8:] == (24).to_bytes(8, 'big')

    def test_empty_message(self):
        tail = pad_message_tail(0, 0)
        assert tail == b"\x80" + bytes(63)

    def test_length_uses_total_bits(self):
        """The suffix encodes the whole message length, not the buffered part."""
        tail = pad_message_tail(1, (64 * 10 + 1) * 8)
        assert int.from_bytes(tail[-8:], 'big') == 5128

    def test_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            pad_message_tail(64, 0)
        with pytest.raises(ValueError):
            pad_message_tail(-1, 0)
        with pytest.raises(ValueError):
            pad_message_tail(0, 1 << 64)


class TestScheduleAndCompression:
    """Message schedule expansion and compression rounds."""

    def test_schedule_length_and_prefix(self):
        words = list(range(16))
        schedule = create_message_schedule(words)
        assert len(schedule) == 64
        assert schedule[:16] == words
        assert all(0 <= w <= MASK_32 for w in schedule)

    def test_schedule_for_abc_block(self):
        """W[16] for the padded 'abc' block matches FIPS 180-2 appendix B.1."""
        block = b"abc" + pad_message_tail(3, 24)
        schedule = create_message_schedule(bytes_to_words(block))
        assert schedule[0] == 0x61626380
        assert schedule[15] == 0x00000018
        assert schedule[16] == 0x61626380
        assert schedule[17] == 0x000f0000

    def test_schedule_wrong_word_count(self):
        with pytest.raises(ValueError):
            create_message_schedule([0] * 15)

    def test_compress_abc_single_block(self):
        """Compressing the padded 'abc' block from the IV yields the digest."""
        block = b"abc" + pad_message_tail(3, 24)
        state = compress_block(H_INITIAL, block)
        assert words_to_bytes(state).hex() == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_compress_does_not_mutate_input(self):
        state = list(H_INITIAL)
        schedule = create_message_schedule([0] * 16)
        result = compress(state, schedule)
        assert state == list(H_INITIAL)
        assert isinstance(result, tuple) and len(result) == 8

    def test_compress_wraps_modulo_2_32(self):
        """All-ones state and schedule wrap around instead of overflowing."""
        result = compress([MASK_32] * 8, [MASK_32] * 64)
        assert all(0 <= word <= MASK_32 for word in result)


class TestIncrementalContext:
    """Incremental hashing and chunking invariance."""

    MESSAGE = bytes(range(256)) * 5  # 1280 bytes

    def _chunked(self, data, sizes):
        ctx = SHA256Context()
        offset = 0
        for size in sizes:
            ctx.update(data[offset:offset + size])
            offset += size
        ctx.update(data[offset:])
        digest = ctx.final()
        ctx.free()
        return digest

    @pytest.mark.parametrize("chunk_size", [1, 7, 55, 56, 63, 64, 65, 128, 1000])
    def test_fixed_chunk_sizes(self, chunk_size):
        """Any chunk size gives the one-shot digest."""
        sizes = [chunk_size] * (len(self.MESSAGE) // chunk_size)
        assert self._chunked(self.MESSAGE, sizes) == sha256(self.MESSAGE)

    def test_zero_length_chunks_interspersed(self):
        sizes = [0, 3, 0, 0, 61, 0, 64, 0, 200, 0]
        assert self._chunked(self.MESSAGE, sizes) == sha256(self.MESSAGE)

    def test_random_partitions(self):
        rng = random.Random(42)
        data = rng.randbytes(3000)
        expected = sha256(data)
        for _ in range(20):
            sizes = [rng.randrange(0, 200) for _ in range(30)]
            assert self._chunked(data, sizes) == expected

    def test_direct_block_path_matches_buffered_path(self):
        """Whole blocks from an empty buffer give the same state as byte-by-byte."""
        data = bytes(range(192))
        direct = SHA256Context().update(data)
        bytewise = SHA256Context()
        for i in range(len(data)):
            bytewise.update(data[i:i + 1])
        assert direct.state == bytewise.state
        assert direct.buffered == bytewise.buffered == 0

    def test_buffer_never_reaches_block_size(self):
        ctx = SHA256Context()
        for size in (10, 54, 63, 1, 64, 127):
            ctx.update(bytes(size))
            assert ctx.buffered < BLOCK_SIZE
        assert ctx.buffered == (10 + 54 + 63 + 1 + 64 + 127) % BLOCK_SIZE

    def test_length_counter(self):
        ctx = SHA256Context()
        ctx.update(b"abc").update(b"").update(bytes(100))
        assert ctx.byte_count == 103
        assert ctx.bit_length == 824

    def test_update_with_explicit_length(self):
        """Only the first `length` bytes are used."""
        ctx = SHA256Context()
        ctx.update(b"abcdef", 3)
        assert ctx.final() == sha256(b"abc")

    def test_lifecycle_transitions(self):
        ctx = SHA256Context()
        assert ctx.lifecycle is ContextState.FRESH
        ctx.update(b"")
        assert ctx.lifecycle is ContextState.ACCUMULATING
        ctx.update(b"x")
        assert ctx.lifecycle is ContextState.ACCUMULATING
        ctx.final()
        assert ctx.lifecycle is ContextState.FINALIZED
        ctx.free()
        assert ctx.lifecycle is ContextState.RELEASED

    def test_final_without_update(self):
        """A fresh context can be finalized directly."""
        ctx = SHA256Context()
        assert ctx.final() == sha256(b"")

    def test_final_into_buffer(self):
        out = bytearray(32)
        ctx = SHA256Context()
        ctx.update(b"abc")
        digest = ctx.final(out)
        assert bytes(out) == digest == sha256(b"abc")

    def test_copy_is_independent(self):
        ctx = SHA256Context().update(b"hello ")
        clone = ctx.copy()
        ctx.update(b"world")
        clone.update(b"there")
        assert ctx.final() == sha256(b"hello world")
        assert clone.final() == sha256(b"hello there")

    def test_context_manager_frees(self):
        with SHA256Context() as ctx:
            ctx.update(b"abc")
            digest = ctx.final()
        assert ctx.lifecycle is ContextState.RELEASED
        assert digest == sha256(b"abc")

    def test_hashlib_style_attributes(self):
        assert SHA256Context.name == "sha256"
        assert SHA256Context.digest_size == 32
        assert SHA256Context.block_size == 64
