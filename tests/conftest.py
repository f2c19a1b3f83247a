"""
conftest.py - Shared pytest fixtures for starledger tests

Provides common fixtures used across unit, conformance and functional tests:
- Clocks pinned to a known time
- Chains (fresh, with stars)
- Registries backed by the fake verifier or real Ed25519 keys
- Tampering helpers that bypass the frozen Block
"""

import pytest
from dataclasses import replace
from typing import Any, Dict

from starledger import (
    Block, Chain, StarRegistry, ManualClock,
    encode_body, generate_keypair,
)

from tests.fake_verifier import FakeVerifier, fake_sign


T0 = 1_700_000_000

ALICE = "alice-wallet"
BOB = "bob-wallet"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def make_star(n: int = 1) -> Dict[str, Any]:
    """Create a star payload for testing."""
    return {
        "ra": f"{n}h 29m 1.0s",
        "dec": f"-26° 29' {n}.9",
        "story": f"Test star {n}",
    }


def replace_block(chain: Chain, index: int, **changes) -> Block:
    """
    Overwrite a stored block in place, without resealing it.

    Simulates tampering with chain internals; never used by library code.
    """
    tampered = replace(chain._blocks[index], **changes)
    chain._blocks[index] = tampered
    return tampered


def tamper_body(chain: Chain, index: int, data: Dict[str, Any]) -> Block:
    """Replace a stored block's body while keeping its old hash."""
    return replace_block(chain, index, body=encode_body(data))


def submit_signed(registry: StarRegistry, address: str, star: Dict[str, Any]) -> Block:
    """Run the full challenge/sign/submit flow with the fake verifier."""
    challenge = registry.request_ownership_challenge(address)
    return registry.submit_star(address, challenge, fake_sign(challenge, address), star)


# =============================================================================
# BASIC FIXTURES
# =============================================================================

@pytest.fixture
def clock():
    """Manual clock pinned to T0."""
    return ManualClock(T0)


@pytest.fixture
def chain(clock):
    """Fresh chain holding only the genesis block."""
    return Chain("test", clock=clock, verbose=False)


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def registry(chain, verifier, clock):
    """Registry over the fresh chain, using the fake verifier."""
    return StarRegistry(chain, verifier=verifier, clock=clock, verbose=False)


@pytest.fixture
def starred_registry(registry, clock):
    """Registry with two stars for alice and one for bob, a minute apart."""
    submit_signed(registry, ALICE, make_star(1))
    clock.advance(60)
    submit_signed(registry, BOB, make_star(2))
    clock.advance(60)
    submit_signed(registry, ALICE, make_star(3))
    return registry


# =============================================================================
# ED25519 FIXTURES
# =============================================================================

@pytest.fixture
def keypair():
    """Fresh Ed25519 (private_key, address) pair."""
    return generate_keypair()


@pytest.fixture
def ed25519_registry(clock):
    """Registry using the real Ed25519 verifier."""
    return StarRegistry(Chain("ed25519", clock=clock, verbose=False), clock=clock, verbose=False)
