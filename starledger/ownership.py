"""
ownership.py - Time-boxed ownership proofs gating star registration

A wallet owner proves control of an address before a star block may be
appended:

1. request_ownership_challenge(address) returns "<address>:<seconds>:starRegistry"
2. The owner signs the challenge with their wallet (outside this package)
3. submit_star(address, challenge, signature, star) checks the challenge age
   and the signature, then appends {address, star} to the chain

Challenges are stateless: the issue time is embedded in the string itself and
nothing is stored server-side.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .core import (
    Block, BlockBody,
    CHALLENGE_DOMAIN_TAG, CHALLENGE_SEPARATOR, ELAPSED_TIME_LIMIT_SECONDS,
    MalformedChallengeError, ElapsedTimeError, SignatureInvalidError,
)
from .chain import Chain
from .clock import Clock, SystemClock
from .signatures import SignatureVerifier, Ed25519Verifier


@dataclass(frozen=True, slots=True)
class Challenge:
    """
    Parsed ownership challenge.

    Attributes:
        address: Wallet address the challenge was issued for
        timestamp: Issue time in Unix seconds
        tag: Domain tag (always CHALLENGE_DOMAIN_TAG once parsed)
    """
    address: str
    timestamp: int
    tag: str = CHALLENGE_DOMAIN_TAG

    def __str__(self) -> str:
        return build_challenge(self.address, self.timestamp)

    def elapsed(self, now: int) -> int:
        """Seconds between issuance and now. Negative if issued in the future."""
        return now - self.timestamp


def build_challenge(address: str, timestamp: int) -> str:
    """
    Format a challenge string.

    Raises:
        ValueError: If the address is empty or contains the separator
    """
    if not address or not address.strip():
        raise ValueError("Challenge address cannot be empty")
    if CHALLENGE_SEPARATOR in address:
        raise ValueError(f"Challenge address cannot contain {CHALLENGE_SEPARATOR!r}")
    return CHALLENGE_SEPARATOR.join([address, str(int(timestamp)), CHALLENGE_DOMAIN_TAG])


def parse_challenge(challenge: str) -> Challenge:
    """
    Parse a challenge string.

    Args:
        challenge: "<address>:<unixSeconds>:starRegistry"

    Returns:
        Challenge with the embedded address and timestamp

    Raises:
        MalformedChallengeError: If the string does not have exactly three
            parts, the timestamp is not an integer, or the tag is wrong
    """
    if not isinstance(challenge, str):
        raise MalformedChallengeError(f"Challenge must be a string, got {type(challenge).__name__}")

    parts = challenge.split(CHALLENGE_SEPARATOR)
    if len(parts) != 3:
        raise MalformedChallengeError(f"Challenge has {len(parts)} parts, expected 3: {challenge!r}")

    address, raw_timestamp, tag = parts
    if tag != CHALLENGE_DOMAIN_TAG:
        raise MalformedChallengeError(f"Challenge tag {tag!r} is not {CHALLENGE_DOMAIN_TAG!r}")
    if not (raw_timestamp.isascii() and raw_timestamp.isdigit()):
        raise MalformedChallengeError(f"Challenge timestamp {raw_timestamp!r} is not a number")

    return Challenge(address=address, timestamp=int(raw_timestamp), tag=tag)


class StarRegistry:
    """
    Ownership-proof front end to a Chain.

    Holds the only public path that appends non-genesis blocks. Read
    operations are delegated to the chain unchanged.

    Example:
        registry = StarRegistry(Chain("stars"))
        challenge = registry.request_ownership_challenge(address)
        signature = sign_message(private_key, challenge)
        block = registry.submit_star(address, challenge, signature, {"dec": "68° 52' 56.9"})
    """

    def __init__(
        self,
        chain: Optional[Chain] = None,
        verifier: Optional[SignatureVerifier] = None,
        clock: Optional[Clock] = None,
        verbose: bool = True,
    ):
        """
        Create a registry.

        Args:
            chain: Chain to append to (default: a new Chain sharing this clock)
            verifier: Signature primitive (default: Ed25519Verifier)
            clock: Time source for issuing and aging challenges
                   (default: the chain's clock, else SystemClock)
            verbose: Enable debug output (default: True)
        """
        if chain is None:
            chain = Chain("stars", clock=clock, verbose=verbose)
        self.chain = chain
        self.verifier: SignatureVerifier = verifier or Ed25519Verifier()
        self.clock: Clock = clock or chain.clock or SystemClock()
        self.verbose = verbose

    # ========================================================================
    # OWNERSHIP PROOF
    # ========================================================================

    def request_ownership_challenge(self, address: str) -> str:
        """
        Issue a challenge for an address to sign.

        Returns:
            "<address>:<unixSeconds>:starRegistry"
        """
        return build_challenge(address, self.clock.now())

    def submit_star(
        self,
        address: str,
        challenge: str,
        signature: str,
        star: Dict[str, Any],
    ) -> Block:
        """
        Register a star after verifying an ownership proof.

        Algorithm steps:
        1. Parse the issue time embedded in the challenge
        2. Refuse if more than ELAPSED_TIME_LIMIT_SECONDS have passed
           (a future issue time is accepted)
        3. Verify the signature over the challenge against the address
        4. Append {address, star} to the chain

        Args:
            address: Wallet address claiming the star
            challenge: Challenge previously issued and signed
            signature: Signature over the challenge
            star: Star payload

        Returns:
            The appended block

        Raises:
            MalformedChallengeError: If the challenge cannot be parsed
            ElapsedTimeError: If the challenge is too old
            SignatureInvalidError: If the signature does not verify
            ChainCorruptError: If the chain fails validation (no mutation)
            MissingPreviousHashError: If the last block has no readable hash
        """
        parsed = parse_challenge(challenge)

        elapsed = parsed.elapsed(self.clock.now())
        if elapsed > ELAPSED_TIME_LIMIT_SECONDS:
            if self.verbose:
                print(f"✗ REJECTED: challenge for {address} is {elapsed}s old")
            raise ElapsedTimeError(elapsed)

        if not self.verifier.verify(challenge, address, signature):
            if self.verbose:
                print(f"✗ REJECTED: signature does not verify for {address}")
            raise SignatureInvalidError(
                "Message validation with address and signature failed."
            )

        return self.chain._add_block({"address": address, "star": star})

    # ========================================================================
    # READ DELEGATION
    # ========================================================================

    def get_chain_height(self) -> int:
        return self.chain.height

    def get_block_by_hash(self, block_hash: str) -> Block:
        return self.chain.get_block_by_hash(block_hash)

    def get_block_by_height(self, height: int) -> Optional[Block]:
        return self.chain.get_block_by_height(height)

    def get_stars_by_wallet_address(self, address: str) -> List[BlockBody]:
        return self.chain.get_stars_by_address(address)

    def validate_chain(self) -> List[str]:
        return self.chain.validate_chain()

    def __repr__(self) -> str:
        return f"StarRegistry({self.chain!r}, verifier={self.verifier!r})"
