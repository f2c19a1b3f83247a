"""
Concurrency Conformance Tests

INVARIANT: Concurrent appends are serialized.

    ∀ concurrent appends A1..An on one chain:
        exactly n blocks are added, heights are 1..n, linkage holds

Readers running alongside never see a partially appended block.
"""

from concurrent.futures import ThreadPoolExecutor

from starledger import Chain, StarRegistry, ManualClock, compute_block_hash

from tests.fake_verifier import FakeVerifier, fake_sign


class TestConcurrentAppends:

    def test_parallel_submissions_keep_linkage(self):
        clock = ManualClock(1_700_000_000)
        chain = Chain("threads", clock=clock, verbose=False)
        registry = StarRegistry(chain, verifier=FakeVerifier(), clock=clock, verbose=False)

        def submit(i):
            address = f"addr-{i}"
            challenge = registry.request_ownership_challenge(address)
            return registry.submit_star(address, challenge, fake_sign(challenge, address), {"n": i})

        with ThreadPoolExecutor(max_workers=8) as pool:
            blocks = list(pool.map(submit, range(64)))

        assert chain.height == 65
        assert sorted(b.height for b in blocks) == list(range(1, 65))
        assert chain.validate_chain() == []
        for i in range(64):
            assert len(chain.get_stars_by_address(f"addr-{i}")) == 1

    def test_readers_see_only_sealed_blocks(self):
        chain = Chain("readers", clock=ManualClock(0), verbose=False)

        def append(i):
            chain._add_block({"i": i})

        def read(_):
            snapshot = chain.blocks
            for block in snapshot:
                assert block.hash == compute_block_hash(block)
            return len(snapshot)

        with ThreadPoolExecutor(max_workers=8) as pool:
            writes = [pool.submit(append, i) for i in range(40)]
            reads = [pool.submit(read, i) for i in range(40)]
            for future in writes + reads:
                future.result()

        assert chain.height == 41
        assert chain.validate_chain() == []
