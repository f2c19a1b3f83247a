"""
chain.py - Stateful append-only block chain

The Chain class is the central state manager for the star registry.
It is the only module that mutates state, ensuring controlled and auditable changes.

Key responsibilities:
    - Implements the ChainView protocol for safe read-only access
    - Seeds the chain with the genesis block
    - Appends blocks atomically: validate, link, seal, store, or change nothing
    - Serves lookups by hash, by height and by star owner
    - Always validates before appending - no exceptions
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple, Iterator
import sys
import threading

from .core import (
    # Types
    Block, BlockBody,
    # Constants
    GENESIS_BODY, NO_PREVIOUS_HASH,
    # Exceptions
    ChainCorruptError, MissingPreviousHashError, NotFoundError,
    # Helper functions
    build_block,
)
from .clock import Clock, SystemClock
from .validation import validate_chain


class Chain:
    """
    Append-only, hash-linked chain of blocks with full validation.

    Implements the ChainView protocol, allowing the chain to be passed to pure
    functions that only read it.

    Design Principles:
        - Always validates: Every append re-validates the entire chain first and
          is refused if any tamper or linkage violation exists. No shortcuts.
        - Atomic appends: A failed append leaves the chain exactly as it was.
        - Immutable history: Stored blocks are frozen and the block list only
          ever grows.

    Thread Safety:
        Appends are serialized by an exclusive lock held across the whole
        validate-link-seal-store sequence. Readers copy a tuple snapshot under
        the same lock and never observe a partially appended block.

    Example:
        chain = Chain("main")
        chain.height                      # 1 (genesis)
        chain.get_block_by_height(0)      # Block(#0 ...)
        chain.validate_chain()            # []
    """

    def __init__(
        self,
        name: str = "main",
        clock: Optional[Clock] = None,
        verbose: bool = True,
        auto_initialize: bool = True,
    ):
        """
        Create a chain.

        Args:
            name: Chain identifier
            clock: Time source for block timestamps (default: SystemClock)
            verbose: Enable debug output (default: True)
            auto_initialize: Append the genesis block immediately (default: True)
        """
        self.name = name
        self.clock: Clock = clock or SystemClock()
        self.verbose = verbose
        self._blocks: List[Block] = []
        self._lock = threading.RLock()

        if auto_initialize:
            self.initialize()

    # ========================================================================
    # ChainView PROTOCOL IMPLEMENTATION (read-only methods)
    # ========================================================================

    @property
    def height(self) -> int:
        """Number of blocks currently in the chain."""
        with self._lock:
            return len(self._blocks)

    @property
    def blocks(self) -> Tuple[Block, ...]:
        """Consistent snapshot of every stored block, in chain order."""
        with self._lock:
            return tuple(self._blocks)

    @property
    def last_block(self) -> Optional[Block]:
        """The most recently appended block, or None if the chain is empty."""
        with self._lock:
            return self._blocks[-1] if self._blocks else None

    def __len__(self) -> int:
        return self.height

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def get_block_by_hash(self, block_hash: str) -> Block:
        """
        Find a block by its hash.

        Args:
            block_hash: Hex digest to look for

        Returns:
            The first block whose hash equals block_hash

        Raises:
            NotFoundError: If no block carries this hash
        """
        for block in self.blocks:
            if block.hash == block_hash:
                return block
        raise NotFoundError(f'Block with hash "{block_hash}" was not found.')

    def get_block_by_height(self, height: int) -> Optional[Block]:
        """
        Find a block by its height.

        Unlike get_block_by_hash, a miss is a normal outcome and returns None.

        Args:
            height: Block height

        Returns:
            The block at this height, or None
        """
        for block in self.blocks:
            if block.height == height:
                return block
        return None

    def get_stars_by_address(self, address: str) -> List[BlockBody]:
        """
        Collect the decoded star records owned by a wallet address.

        Every block body is decoded; those carrying a matching address and a
        non-empty star are returned in chain order. The genesis block has no
        address and is skipped naturally.

        Args:
            address: Wallet address

        Returns:
            List of decoded bodies, e.g. [{"address": ..., "star": {...}}]
        """
        stars: List[BlockBody] = []
        for block in self.blocks:
            data = block.decode_body()
            if data.get("address") == address and data.get("star"):
                stars.append(data)
        return stars

    def validate_chain(self) -> List[str]:
        """
        Validate the current chain.

        Returns:
            List of tamper/linkage violations (empty if the chain is consistent)
        """
        return validate_chain(self.blocks)

    # ========================================================================
    # MUTATION
    # ========================================================================

    def initialize(self) -> Optional[Block]:
        """
        Seed the chain with the genesis block if it is empty.

        Idempotent: does nothing on an already initialized chain.

        Returns:
            The genesis block if one was appended, otherwise None
        """
        with self._lock:
            if self._blocks:
                return None
            return self._add_block(dict(GENESIS_BODY))

    def _add_block(self, data: BlockBody) -> Block:
        """
        Append a block atomically.

        This is the only mutation path. It is internal to the package: only
        initialize() and StarRegistry.submit_star() call it.

        Steps (all under the exclusive lock):
        1. Validate the entire chain; refuse on any violation
        2. Read the hash of the last block (genesis links to NO_PREVIOUS_HASH)
        3. Build the block at height len(chain), timestamped now
        4. Seal it with its digest
        5. Store it

        Args:
            data: Decoded payload for the new block

        Returns:
            The sealed, stored block

        Raises:
            ChainCorruptError: If the current chain fails validation
            MissingPreviousHashError: If the last block has no readable hash
            ValueError: If data cannot be encoded
        """
        with self._lock:
            errors = validate_chain(self._blocks)
            if errors:
                if self.verbose:
                    print(f"✗ REJECTED: chain {self.name} has {len(errors)} error(s)")
                raise ChainCorruptError(errors)

            previous_hash = NO_PREVIOUS_HASH
            if self._blocks:
                previous_hash = getattr(self._blocks[-1], "hash", None)
                if not previous_hash:
                    if self.verbose:
                        print("✗ REJECTED: previous block hash not found")
                    raise MissingPreviousHashError("Previous block hash not found.")

            block = build_block(
                height=len(self._blocks),
                timestamp=self.clock.now(),
                previous_hash=previous_hash,
                data=data,
            )
            self._blocks.append(block)

            if self.verbose:
                print(f"✓ APPENDED: {block!r}")
            return block

    # ========================================================================
    # CHAIN OPERATIONS
    # ========================================================================

    def clone(self) -> Chain:
        """
        Create an independent copy of this chain.

        Blocks are immutable and shared; the block list and lock are new, so
        appends to the clone never affect the original, and vice versa.

        Returns:
            A new Chain instance with identical blocks
        """
        cloned = Chain.__new__(Chain)
        cloned.name = self.name
        cloned.clock = self.clock
        cloned.verbose = self.verbose
        cloned._blocks = list(self.blocks)
        cloned._lock = threading.RLock()
        return cloned

    def get_memory_stats(self) -> Dict[str, int]:
        """
        Estimate memory consumption of the block storage.

        Note: These are estimates using sys.getsizeof(), which may not capture
        all overhead.

        Returns:
            Dictionary with byte estimates:
            - 'blocks': Block list and block objects
            - 'bodies': Encoded payload strings
            - 'hashes': Hash strings
            - 'total': Sum of all components
        """
        snapshot = self.blocks
        blocks_size = sys.getsizeof(snapshot)
        bodies_size = 0
        hashes_size = 0
        for block in snapshot:
            blocks_size += sys.getsizeof(block)
            bodies_size += sys.getsizeof(block.body)
            hashes_size += sys.getsizeof(block.hash)
            if block.previous_hash is not None:
                hashes_size += sys.getsizeof(block.previous_hash)

        return {
            'blocks': blocks_size,
            'bodies': bodies_size,
            'hashes': hashes_size,
            'total': blocks_size + bodies_size + hashes_size,
        }

    def __repr__(self) -> str:
        return f"Chain({self.name!r}, height={self.height})"
