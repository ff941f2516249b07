"""
Known-Answer Test Runner

Drives the SHA-256 core with test vectors and consistency checks:
- Literal digest comparison for every vector that carries one
- Cross-check against an independent implementation (cryptography)
- One-shot vs incremental comparison with awkward chunk sizes
- One million 'a' fed in 1000-byte chunks
- Seeded random messages, one-shot vs incremental

Results are collected into a RunReport; print_summary() renders the
familiar PASS/FAIL listing.
"""

import logging
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from cryptography.hazmat.primitives import hashes

from ..core_crypto.sha256 import InvalidArgumentError, SHA256Context, sha256
from .loader import TestVector, load_vectors


logger = logging.getLogger(__name__)

# NIST digest of 1,000,000 repetitions of 'a'
MILLION_A_DIGEST = bytes.fromhex(
    "cdc76e5c9914fb9281a1c7e284d73e67f1809a48a497200e046d39ccc7112cd0"
)


@dataclass
class RunnerConfig:
    """Settings for a KAT run."""
    chunk_size: int = 7               # prime, never divides the block size
    random_seed: int = 42
    random_count: int = 1000
    random_max_len: int = 4096
    million_chunk: int = 1000
    million_rounds: int = 1000
    cross_check: bool = True
    include_million: bool = True

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise InvalidArgumentError(f"Chunk size must be positive, got {self.chunk_size}")
        if self.million_chunk <= 0:
            raise InvalidArgumentError(
                f"Million chunk size must be positive, got {self.million_chunk}"
            )


@dataclass
class CheckResult:
    """Outcome of one named check."""
    name: str
    passed: bool
    details: str = ""
    always_show_details: bool = False


@dataclass
class RunReport:
    """All check results of a run."""
    results: List[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failures(self) -> List[CheckResult]:
        return [r for r in self.results if not r.passed]

    @property
    def ok(self) -> bool:
        return self.passed == self.total


def reference_digest(data: bytes) -> bytes:
    """SHA-256 computed by the cryptography library (independent reference)."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()


def incremental_digest(data: bytes, chunk_size: int) -> bytes:
    """Hash data by feeding it to a context chunk_size bytes at a time."""
    if chunk_size <= 0:
        raise InvalidArgumentError(f"Chunk size must be positive, got {chunk_size}")
    with SHA256Context() as ctx:
        view = memoryview(data)
        for offset in range(0, len(view), chunk_size):
            ctx.update(view[offset:offset + chunk_size])
        return ctx.final()


def check_incremental(data: bytes, chunk_size: int = 7) -> bool:
    """One-shot and chunked hashing of data must agree."""
    return sha256(data) == incremental_digest(data, chunk_size)


def check_vector(vector: TestVector, config: Optional[RunnerConfig] = None) -> CheckResult:
    """
    Run every applicable check against one vector.

    Args:
        vector: Decoded test vector
        config: Runner settings

    Returns:
        CheckResult named after the vector
    """
    config = config or RunnerConfig()
    actual = sha256(vector.message)
    problems = []

    if vector.has_digest and actual != vector.digest:
        problems.append(f"expected {vector.digest.hex()}, got {actual.hex()}")

    if config.cross_check:
        expected = reference_digest(vector.message)
        if actual != expected:
            problems.append(f"reference gives {expected.hex()}, got {actual.hex()}")
    elif not vector.has_digest:
        problems.append("no digest to compare and cross-check disabled")

    if incremental_digest(vector.message, config.chunk_size) != actual:
        problems.append(f"incremental (chunk {config.chunk_size}) differs from one-shot")

    if problems:
        logger.warning("Vector failed: %s: %s", vector, "; ".join(problems))
    return CheckResult(str(vector), not problems, "; ".join(problems))


def run_vectors(
    vectors: Dict[str, List[TestVector]],
    config: Optional[RunnerConfig] = None,
) -> List[CheckResult]:
    """Check every vector of every category."""
    config = config or RunnerConfig()
    results = []
    for category, group in vectors.items():
        logger.info("Running %d vectors in %s", len(group), category)
        results.extend(check_vector(vector, config) for vector in group)
    return results


def run_million_a(config: Optional[RunnerConfig] = None) -> CheckResult:
    """Feed 1,000,000 'a' bytes in fixed chunks through one context."""
    config = config or RunnerConfig()
    block = b'a' * config.million_chunk

    with SHA256Context() as ctx:
        for _ in range(config.million_rounds):
            ctx.update(block)
        total = ctx.byte_count
        digest = ctx.final()

    name = f"{total:,} x 'a' in {config.million_chunk}-byte chunks"
    if total == 1_000_000:
        passed = digest == MILLION_A_DIGEST
        details = "" if passed else f"got {digest.hex()}"
    else:
        passed = digest == reference_digest(block * config.million_rounds)
        details = "" if passed else "differs from reference"
    if not passed:
        logger.warning("%s failed: %s", name, details)
    return CheckResult(name, passed, details)


def run_random_consistency(config: Optional[RunnerConfig] = None) -> CheckResult:
    """Seeded random messages: one-shot and chunked digests must agree."""
    config = config or RunnerConfig()
    rng = random.Random(config.random_seed)

    mismatches = 0
    for _ in range(config.random_count):
        length = rng.randrange(config.random_max_len)
        data = rng.randbytes(length)
        if not check_incremental(data, config.chunk_size):
            mismatches += 1
            logger.warning("Random consistency failed for %d-byte message", length)

    passed_count = config.random_count - mismatches
    return CheckResult(
        "Random consistency",
        mismatches == 0,
        f"{passed_count}/{config.random_count} passed",
        always_show_details=True,
    )


def run_all(
    config: Optional[RunnerConfig] = None,
    vector_path: Union[str, Path, None] = None,
) -> RunReport:
    """Run vectors, the million 'a' test and the random consistency test."""
    config = config or RunnerConfig()
    report = RunReport()
    report.results.extend(run_vectors(load_vectors(vector_path), config))
    if config.include_million:
        report.results.append(run_million_a(config))
    if config.random_count > 0:
        report.results.append(run_random_consistency(config))
    logger.info("KAT run finished: %d/%d passed", report.passed, report.total)
    return report


def print_summary(report: RunReport) -> None:
    """Print every check with its status and an overall verdict."""
    print("SHA-256 Known Answer Tests")
    print("=" * 60)

    for result in report.results:
        status = "✓ PASS" if result.passed else "✗ FAIL"
        print(f"  {status}  {result.name}")
        if result.details and (not result.passed or result.always_show_details):
            print(f"          {result.details}")

    print("=" * 60)
    print(f"Passed: {report.passed}/{report.total}")
    print(f"Overall: {'All tests passed!' if report.ok else 'Some tests failed!'}")
