"""
Tamper Detection Conformance Tests

INVARIANT: The validator reports exactly the blocks that were altered.

    body(chain[i]) changed, hash kept ⟹ validate() = ["Block <chain[i].hash> was tampered."]
    previous_hash(chain[i]) changed   ⟹ validate() reports a linkage violation for chain[i]
"""

from dataclasses import replace

from hypothesis import given, settings
from hypothesis import strategies as st

from starledger import Chain, ManualClock, encode_body
from starledger.validation import tamper_message, linkage_message


def _chain_of(n: int) -> Chain:
    chain = Chain("tamper", clock=ManualClock(1_700_000_000), verbose=False)
    for i in range(n):
        chain._add_block({"address": f"addr-{i}", "star": {"n": i}})
    return chain


class TestTamperDetectionProperties:

    @given(st.integers(min_value=0, max_value=8), st.data())
    @settings(max_examples=50)
    def test_body_tamper_reports_exactly_that_block(self, extra, data):
        """
        PROPERTY: Changing one body without resealing reports only that block.
        """
        chain = _chain_of(extra)
        index = data.draw(st.integers(min_value=0, max_value=chain.height - 1))
        target = chain._blocks[index]
        new_body = {"address": "mallory", "star": {"n": -1}}

        chain._blocks[index] = replace(target, body=encode_body(new_body))

        assert chain.validate_chain() == [tamper_message(target)]

    @given(st.integers(min_value=1, max_value=8), st.data())
    @settings(max_examples=50)
    def test_previous_hash_change_reports_linkage(self, extra, data):
        """
        PROPERTY: Changing one previous_hash reports a linkage violation for that block.
        """
        chain = _chain_of(extra)
        index = data.draw(st.integers(min_value=0, max_value=chain.height - 1))
        target = chain._blocks[index]

        chain._blocks[index] = replace(target, previous_hash="f" * 64)

        errors = chain.validate_chain()
        assert linkage_message(target) in errors
        assert all(target.hash in e for e in errors)

    @given(st.sets(st.integers(min_value=0, max_value=9), min_size=1))
    @settings(max_examples=30)
    def test_every_tampered_block_is_reported(self, indices):
        """
        PROPERTY: With several tampered blocks, all of them are reported in order.
        """
        chain = _chain_of(9)
        originals = {}
        for i in sorted(indices):
            originals[i] = chain._blocks[i]
            chain._blocks[i] = replace(chain._blocks[i], body=encode_body({"tampered": i}))

        assert chain.validate_chain() == [tamper_message(originals[i]) for i in sorted(indices)]
