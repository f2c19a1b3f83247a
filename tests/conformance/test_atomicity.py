"""
Atomicity Conformance Tests

INVARIANT: Appends are all-or-nothing.

    ∀ append A:
        A succeeds ⟹ exactly one sealed block is added
        A fails    ⟹ the chain is exactly as it was

No append ever succeeds on top of a corrupted chain.
"""

from dataclasses import replace

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from starledger import (
    Chain, StarRegistry, ManualClock, encode_body,
    ChainCorruptError, ElapsedTimeError, SignatureInvalidError, MalformedChallengeError,
)

from tests.fake_verifier import FakeVerifier, fake_sign


def _registry(n: int):
    clock = ManualClock(1_700_000_000)
    chain = Chain("atomic", clock=clock, verbose=False)
    registry = StarRegistry(chain, verifier=FakeVerifier(), clock=clock, verbose=False)
    for i in range(n):
        challenge = registry.request_ownership_challenge(f"addr-{i}")
        registry.submit_star(f"addr-{i}", challenge, fake_sign(challenge, f"addr-{i}"), {"n": i})
    return registry, chain, clock


class TestAtomicityProperties:

    @given(st.integers(min_value=0, max_value=6), st.data())
    @settings(max_examples=40)
    def test_corrupt_chain_blocks_every_append(self, n, data):
        """
        PROPERTY: Once any block is tampered, every append fails and nothing changes.
        """
        registry, chain, clock = _registry(n)
        index = data.draw(st.integers(min_value=0, max_value=chain.height - 1))
        chain._blocks[index] = replace(chain._blocks[index], body=encode_body({"evil": True}))
        snapshot = chain.blocks

        attempts = data.draw(st.integers(min_value=1, max_value=3))
        for _ in range(attempts):
            challenge = registry.request_ownership_challenge("late")
            with pytest.raises(ChainCorruptError):
                registry.submit_star("late", challenge, fake_sign(challenge, "late"), {"n": -1})

        assert chain.blocks == snapshot

    @given(st.integers(min_value=0, max_value=5), st.sampled_from(["expired", "forged", "malformed"]))
    @settings(max_examples=40)
    def test_rejected_proof_changes_nothing(self, n, failure):
        """
        PROPERTY: A rejected ownership proof leaves the chain unchanged.
        """
        registry, chain, clock = _registry(n)
        snapshot = chain.blocks
        challenge = registry.request_ownership_challenge("bob")
        signature = fake_sign(challenge, "bob")

        if failure == "expired":
            clock.advance(301)
            expected = ElapsedTimeError
        elif failure == "forged":
            signature = "forged"
            expected = SignatureInvalidError
        else:
            challenge = "bob:soon:starRegistry"
            expected = MalformedChallengeError

        with pytest.raises(expected):
            registry.submit_star("bob", challenge, signature, {"n": 0})

        assert chain.blocks == snapshot
        assert chain.validate_chain() == []


class TestAtomicityExamples:

    def test_restoring_tampered_block_reenables_appends(self):
        registry, chain, clock = _registry(2)
        original = chain._blocks[1]
        chain._blocks[1] = replace(original, body=encode_body({"evil": True}))

        challenge = registry.request_ownership_challenge("carol")
        with pytest.raises(ChainCorruptError):
            registry.submit_star("carol", challenge, fake_sign(challenge, "carol"), {"n": 9})

        chain._blocks[1] = original
        block = registry.submit_star("carol", challenge, fake_sign(challenge, "carol"), {"n": 9})

        assert block.height == 3
        assert chain.validate_chain() == []

    def test_failed_append_does_not_consume_height(self):
        registry, chain, clock = _registry(1)
        challenge = registry.request_ownership_challenge("dave")
        with pytest.raises(SignatureInvalidError):
            registry.submit_star("dave", challenge, "forged", {"n": 1})

        block = registry.submit_star("dave", challenge, fake_sign(challenge, "dave"), {"n": 1})
        assert block.height == 2
