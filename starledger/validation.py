"""
validation.py - Read-only chain integrity checks

Functions:
- verify_block: recompute one block's digest and compare it to the stored hash
- validate_chain: full traversal producing a tamper/linkage report

Both functions are pure. validate_chain does not fail fast: every block is
inspected so the caller gets the complete report in one pass. An empty report
means the chain is fully consistent, which is what Chain's append path relies on.
"""

from __future__ import annotations
from typing import Iterable, List, Optional

from .core import Block, ChainReadError, NO_PREVIOUS_HASH, compute_block_hash


def verify_block(block: Block) -> bool:
    """
    Check that a block's stored hash matches its content.

    Returns:
        True if the stored hash equals the recomputed digest
    """
    return block.hash == compute_block_hash(block)


def tamper_message(block: Block) -> str:
    return f"Block {block.hash} was tampered."


def linkage_message(block: Block) -> str:
    return f"Previous block hash doesn't match with {block.hash} block's previous hash property."


def validate_chain(blocks: Iterable[Block]) -> List[str]:
    """
    Validate every block of a chain snapshot.

    For each block, in order:
    1. Recompute its digest; a mismatch records a tamper violation.
    2. Compare its previous_hash with the hash of the block before it
       (NO_PREVIOUS_HASH for the first block); a mismatch records a
       linkage violation.

    Args:
        blocks: Blocks in chain order

    Returns:
        List of violation descriptions (empty if the chain is consistent)

    Raises:
        ChainReadError: If an entry is not a Block at all
    """
    errors: List[str] = []
    prev_hash: Optional[str] = NO_PREVIOUS_HASH

    for position, block in enumerate(blocks):
        if not isinstance(block, Block):
            raise ChainReadError(
                f"Cannot read block at position {position}: got {type(block).__name__}"
            )

        if not verify_block(block):
            errors.append(tamper_message(block))

        if block.previous_hash != prev_hash:
            errors.append(linkage_message(block))

        prev_hash = block.hash

    return errors
