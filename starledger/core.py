"""
Core types and pure functions for the star registry ledger.

This module provides the foundational data structures and protocols for the chain:
1. Protocols: ChainView for read-only chain access
2. Immutable data structures: Block
3. Exceptions: LedgerError and domain-specific error types
4. Body codec: encode_body / decode_body
5. Hashing: canonical block records and their SHA-256 digest

All functions in this module are pure. Only Chain (chain.py) mutates state.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
import hashlib
import json
from typing import (
    Dict, List, Optional, Any, Protocol, Tuple, Iterator, runtime_checkable
)


# ============================================================================
# CONSTANTS
# ============================================================================

# Previous-hash sentinel carried by the genesis block only. Encoded as JSON null.
NO_PREVIOUS_HASH = None

# Fixed marker body of the genesis block.
GENESIS_BODY: Dict[str, Any] = {"data": "Genesis Block"}

# Domain tag closing every ownership challenge: "<address>:<seconds>:starRegistry".
# External verifiers depend on this exact spelling.
CHALLENGE_DOMAIN_TAG = "starRegistry"
CHALLENGE_SEPARATOR = ":"

# Maximum age of a challenge at submission time (5 minutes).
ELAPSED_TIME_LIMIT_SECONDS = 300

# Keys of the encoded block record, in documentation order.
RECORD_FIELDS = ("height", "timestamp", "previousHash", "body")


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Decoded block payload, e.g. {"data": "Genesis Block"} or {"address": ..., "star": {...}}.
BlockBody = Dict[str, Any]

# Encoded block record as hashed and exported.
BlockRecord = Dict[str, Any]


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class ChainCorruptError(LedgerError):
    """
    Raised when an append is refused because the chain failed validation.

    No mutation occurs. The violations found are kept on `errors`.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(
            f"Cannot add block because chain has errors: {'; '.join(self.errors)}"
        )


class MissingPreviousHashError(LedgerError):
    """Raised when the last stored block has no readable hash during an append."""
    pass


class MalformedChallengeError(LedgerError):
    """Raised when an ownership challenge cannot be parsed for its embedded timestamp."""
    pass


class ElapsedTimeError(LedgerError):
    """Raised when a proof is submitted more than ELAPSED_TIME_LIMIT_SECONDS after issuance."""

    def __init__(self, elapsed: int, limit: int = ELAPSED_TIME_LIMIT_SECONDS):
        self.elapsed = elapsed
        self.limit = limit
        super().__init__(f"Elapsed time is {elapsed}s, more than {limit}s")


class SignatureInvalidError(LedgerError):
    """Raised when a signature does not verify against the address and challenge."""
    pass


class NotFoundError(LedgerError):
    """Raised when no block carries the requested hash."""
    pass


class ChainReadError(LedgerError):
    """Raised when the validator meets an entry that cannot be read as a block."""
    pass


# ============================================================================
# BODY CODEC
# ============================================================================

def canonical_json(value: Any) -> str:
    """
    Serialize a value to canonical JSON.

    Keys are sorted and insignificant whitespace removed, so semantically
    equal payloads always produce identical strings regardless of dict
    insertion order.
    """
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def encode_body(data: BlockBody) -> str:
    """
    Encode a block payload for storage.

    The payload is serialized to canonical JSON and hex-encoded as UTF-8.

    Raises:
        ValueError: If data is not a dict or is not JSON serializable
    """
    if not isinstance(data, dict):
        raise ValueError(f"Block body must be a dict, got {type(data).__name__}")
    try:
        return canonical_json(data).encode("utf-8").hex()
    except TypeError as e:
        raise ValueError(f"Block body is not JSON serializable: {e}") from e


def decode_body(encoded: str) -> BlockBody:
    """Decode a stored block payload back to its structured form."""
    return json.loads(bytes.fromhex(encoded).decode("utf-8"))


# ============================================================================
# BLOCK
# ============================================================================

@dataclass(frozen=True, slots=True)
class Block:
    """
    A single sealed record in the chain.

    Attributes:
        height: Position in the chain (0 for genesis).
        timestamp: Unix seconds at which the block was appended.
        previous_hash: Hash of the preceding block, NO_PREVIOUS_HASH for genesis.
        body: Hex-encoded canonical JSON payload (see encode_body).
        hash: SHA-256 digest of the record without the hash field.
              Empty until the block is sealed.

    This class is immutable (frozen=True) and memory-optimized (slots=True).
    Use seal_block() to obtain the hashed version of an unsealed block.
    """
    height: int
    timestamp: int
    previous_hash: Optional[str]
    body: str
    hash: str = ""

    def __post_init__(self):
        if isinstance(self.height, bool) or not isinstance(self.height, int):
            raise ValueError(f"Block height must be int, got {type(self.height).__name__}")
        if self.height < 0:
            raise ValueError(f"Block height must be non-negative, got {self.height}")
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            raise ValueError(f"Block timestamp must be int seconds, got {type(self.timestamp).__name__}")
        if not isinstance(self.body, str):
            raise ValueError(f"Block body must be an encoded str, got {type(self.body).__name__}")

    @property
    def is_genesis(self) -> bool:
        return self.height == 0 and self.previous_hash is NO_PREVIOUS_HASH

    @property
    def is_sealed(self) -> bool:
        return bool(self.hash)

    def decode_body(self) -> BlockBody:
        """Return the decoded payload of this block."""
        return decode_body(self.body)

    def to_record(self, include_hash: bool = True) -> BlockRecord:
        """
        Return the encoded record of this block.

        The record carries exactly height, timestamp, previousHash and body,
        plus hash when include_hash is True.
        """
        record: BlockRecord = {
            "height": self.height,
            "timestamp": self.timestamp,
            "previousHash": self.previous_hash,
            "body": self.body,
        }
        if include_hash:
            record["hash"] = self.hash
        return record

    @classmethod
    def from_record(cls, record: BlockRecord) -> Block:
        """Rebuild a block from an encoded record (see to_record)."""
        return cls(
            height=record["height"],
            timestamp=record["timestamp"],
            previous_hash=record["previousHash"],
            body=record["body"],
            hash=record.get("hash", ""),
        )

    def __repr__(self) -> str:
        prev = self.previous_hash[:12] if self.previous_hash else "none"
        digest = self.hash[:12] if self.hash else "unsealed"
        return f"Block(#{self.height} {digest} <- {prev} @ {self.timestamp})"


def compute_block_hash(block: Block) -> str:
    """
    Compute the SHA-256 digest of a block.

    The digest covers the canonical JSON of the record without the hash field,
    so it is independent of whether (and with what) the block is sealed.
    """
    content = canonical_json(block.to_record(include_hash=False))
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def seal_block(block: Block) -> Block:
    """Return a copy of block carrying its computed hash."""
    return replace(block, hash=compute_block_hash(block))


def build_block(
    height: int,
    timestamp: int,
    previous_hash: Optional[str],
    data: BlockBody,
) -> Block:
    """
    Build and seal a block from a decoded payload.

    Args:
        height: Position in the chain
        timestamp: Unix seconds
        previous_hash: Hash of the previous block (NO_PREVIOUS_HASH for genesis)
        data: Decoded payload; encoded with encode_body()

    Returns:
        Sealed Block
    """
    unsealed = Block(
        height=height,
        timestamp=timestamp,
        previous_hash=previous_hash,
        body=encode_body(data),
    )
    return seal_block(unsealed)


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class ChainView(Protocol):
    """
    Read-only interface to chain state.

    Functions accepting a ChainView declare their read-only intent. Chain
    implements this protocol and additionally owns the mutation path.
    """

    @property
    def height(self) -> int:
        """Return the number of blocks in the chain."""
        ...

    @property
    def blocks(self) -> Tuple[Block, ...]:
        """Return a consistent snapshot of every stored block, in order."""
        ...

    def get_block_by_hash(self, block_hash: str) -> Block:
        """Return the first block with this hash, or raise NotFoundError."""
        ...

    def get_block_by_height(self, height: int) -> Optional[Block]:
        """Return the block at this height, or None."""
        ...

    def __iter__(self) -> Iterator[Block]:
        ...
