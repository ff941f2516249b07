"""
Known-Answer Test (KAT) vector loading.

Vector files are JSON documents grouped by category:

    {
      "sha256": {
        "short_messages": [
          {"message": "616263", "digest": "ba78...15ad", "comment": "abc"}
        ],
        ...
      }
    }

A message is either a hex string or {"repeat": hex, "count": n} for long
inputs such as one million 'a'. A digest must be exactly 64 hex characters;
a missing or null digest means the vector is only cross-checked against a
reference implementation.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


logger = logging.getLogger(__name__)

ALGORITHM_KEY = "sha256"
CATEGORIES = ("short_messages", "block_boundaries", "nist_official", "special_cases")
DIGEST_HEX_LENGTH = 64

DEFAULT_VECTOR_PATH = Path(__file__).parent / "data" / "sha256_extended.json"


class VectorFormatError(ValueError):
    """Raised when a vector file or entry is malformed."""
    pass


@dataclass(frozen=True)
class TestVector:
    """A single decoded test vector."""
    __test__ = False  # not a pytest class

    message: bytes
    digest: Optional[bytes]
    comment: str
    category: str

    @property
    def has_digest(self) -> bool:
        return self.digest is not None

    def __str__(self) -> str:
        label = self.comment or f"{len(self.message)}-byte message"
        return f"[{self.category}] {label}"


def _decode_hex(value: str, what: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except (TypeError, ValueError) as exc:
        raise VectorFormatError(f"Invalid hex in {what}: {value[:40]!r}") from exc


def _decode_message(raw: Any, where: str) -> bytes:
    if isinstance(raw, str):
        return _decode_hex(raw, f"{where} message")

    if isinstance(raw, dict):
        pattern = _decode_hex(raw.get("repeat", ""), f"{where} repeat pattern")
        count = raw.get("count")
        if not pattern or not isinstance(count, int) or count < 0:
            raise VectorFormatError(f"{where}: repeat needs a pattern and a count >= 0")
        return pattern * count

    raise VectorFormatError(f"{where}: message must be a hex string or repeat object")


def _decode_digest(raw: Any, where: str) -> Optional[bytes]:
    if raw is None:
        return None
    if not isinstance(raw, str) or len(raw) != DIGEST_HEX_LENGTH:
        length = len(raw) if isinstance(raw, str) else type(raw).__name__
        raise VectorFormatError(
            f"{where}: digest must be {DIGEST_HEX_LENGTH} hex characters, got {length}"
        )
    return _decode_hex(raw, f"{where} digest")


def parse_vector(entry: Dict[str, Any], category: str, index: int = 0) -> TestVector:
    """
    Decode one {message, digest, comment} entry.

    Args:
        entry: Raw JSON object
        category: Category the entry belongs to
        index: Position inside the category (for error messages)

    Returns:
        Decoded TestVector

    Raises:
        VectorFormatError: If the message or digest is malformed
    """
    where = f"{category}[{index}]"
    if not isinstance(entry, dict) or "message" not in entry:
        raise VectorFormatError(f"{where}: entry needs a 'message' field")

    return TestVector(
        message=_decode_message(entry["message"], where),
        digest=_decode_digest(entry.get("digest"), where),
        comment=str(entry.get("comment") or ""),
        category=category,
    )


def parse_vectors(document: Dict[str, Any]) -> Dict[str, List[TestVector]]:
    """
    Decode a whole vector document.

    Known categories come first in their usual order, followed by any
    extra categories in file order.
    """
    groups = document.get(ALGORITHM_KEY) if isinstance(document, dict) else None
    if not isinstance(groups, dict):
        raise VectorFormatError(f"No '{ALGORITHM_KEY}' section found")

    ordered = [name for name in CATEGORIES if name in groups]
    ordered += [name for name in groups if name not in CATEGORIES]

    result: Dict[str, List[TestVector]] = {}
    for category in ordered:
        entries = groups[category]
        if not isinstance(entries, list):
            logger.warning("Skipping category %s: not a list", category)
            continue
        result[category] = [
            parse_vector(entry, category, index) for index, entry in enumerate(entries)
        ]
    return result


def load_vectors(path: Union[str, Path, None] = None) -> Dict[str, List[TestVector]]:
    """
    Load and decode a vector file.

    Args:
        path: JSON file to read (default: the packaged extended vector set)

    Returns:
        Mapping of category name to decoded vectors
    """
    vector_path = Path(path) if path is not None else DEFAULT_VECTOR_PATH
    with vector_path.open("r", encoding="utf-8") as handle:
        try:
            document = json.load(handle)
        except json.JSONDecodeError as exc:
            raise VectorFormatError(f"Invalid JSON in {vector_path}: {exc}") from exc

    vectors = parse_vectors(document)
    logger.info(
        "Loaded %d vectors from %s",
        sum(len(group) for group in vectors.values()),
        vector_path,
    )
    return vectors
