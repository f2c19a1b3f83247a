#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: Learn the Star Registry Step by Step

This is a pedagogical demonstration of how the star registry chain works.
Each step builds on the previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-3:  Foundation  - The genesis block, blocks and hashes, lookups
  4-6:  Ownership   - Challenges, signatures, registering a star
  7-8:  Rejections  - Expired and forged proofs
  9-10: Integrity   - Tampering, the validator, refused appends
  11:   Cost        - Why every append re-validates the whole chain

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass, replace
from functools import wraps
import sys
import time

from starledger import (
    # Core classes
    Chain, StarRegistry, ManualClock,
    # Wallet helpers
    generate_keypair, sign_message,
    # Codec
    encode_body,
    # Constants
    ELAPSED_TIME_LIMIT_SECONDS,
    # Exceptions
    ElapsedTimeError, SignatureInvalidError, ChainCorruptError, NotFoundError,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the tutorial. Modify these to experiment."""
    # Timing
    start_time: int = 1_735_722_000    # 2025-01-01 09:00 UTC

    # Star data
    star_ra: str = "16h 29m 1.0s"
    star_dec: str = "-26° 29' 24.9"
    star_story: str = "Antares, seen from the back yard"

    # Cost test parameters (Step 11)
    cost_test_blocks: int = 400


CONFIG = DemoConfig()

# Global state for interactive mode
QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    """Print a step header with learning objective."""
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def section_header(text: str):
    """Print a section header within a step."""
    print(f"\n--- {text} ---\n")


def timing(func):
    """Print how long the wrapped call took."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed_time = time.perf_counter() - start_time
        print(f"Function '{func.__name__}' executed in {1000*elapsed_time:.2f} milliseconds")
        return result

    return wrapper


def submit(registry: StarRegistry, private_key, address: str, story: str):
    """Run the challenge/sign/submit flow in one go."""
    challenge = registry.request_ownership_challenge(address)
    signature = sign_message(private_key, challenge)
    return registry.submit_star(address, challenge, signature, {
        "ra": CONFIG.star_ra, "dec": CONFIG.star_dec, "story": story,
    })


# ============================================================================
# PHASE 1: FOUNDATION (Steps 1-3)
# ============================================================================

def step_01_genesis():
    """Create a chain and look at its genesis block."""
    step_header(1, "The Genesis Block",
        "Understand that a chain is never empty: it starts with one fixed block.")

    print("""
    A chain is an ordered list of blocks. Each block records:

    1. height        - its position (genesis is 0)
    2. timestamp     - when it was appended (unix seconds)
    3. previousHash  - the hash of the block before it
    4. body          - the payload, stored hex-encoded
    5. hash          - SHA-256 of the four fields above

    The clock is a ManualClock so the demo is reproducible.
    """)

    wait_for_enter()

    clock = ManualClock(CONFIG.start_time)
    print(">>> chain = Chain('tutorial', clock=clock)")
    chain = Chain("tutorial", clock=clock, verbose=True)

    genesis = chain.get_block_by_height(0)
    section_header("Genesis Block")
    print(f"Height:         {genesis.height}")
    print(f"Timestamp:      {genesis.timestamp}")
    print(f"Previous hash:  {genesis.previous_hash}")
    print(f"Body (encoded): {genesis.body}")
    print(f"Body (decoded): {genesis.decode_body()}")
    print(f"Hash:           {genesis.hash}")

    section_header("Key Insight")
    print("""
    The genesis block is the only block whose previous hash is None.
    Every later block points back to the hash of its predecessor.
    """)

    return chain, clock


def step_02_records(chain: Chain):
    """Show what exactly is hashed."""
    step_header(2, "Records and Hashes",
        "See the exact record a block hash is computed over.")

    genesis = chain.last_block
    print(">>> genesis.to_record(include_hash=False)")
    print(genesis.to_record(include_hash=False))
    print("\n>>> genesis.to_record()")
    print(genesis.to_record())

    section_header("Key Insight")
    print("""
    The hash covers height, timestamp, previousHash and body. Change any of
    them and the stored hash no longer matches: that is how tampering shows.
    """)


def step_03_lookups(chain: Chain):
    """Lookups by height and by hash."""
    step_header(3, "Lookups",
        "Find blocks by height and by hash, and see how misses differ.")

    genesis = chain.last_block
    print(f">>> chain.get_block_by_height(0)  -> {chain.get_block_by_height(0)!r}")
    print(f">>> chain.get_block_by_height(99) -> {chain.get_block_by_height(99)!r}")
    print(f">>> chain.get_block_by_hash(genesis.hash) -> {chain.get_block_by_hash(genesis.hash)!r}")
    print(">>> chain.get_block_by_hash('nope')")
    try:
        chain.get_block_by_hash("nope")
    except NotFoundError as e:
        print(f"NotFoundError: {e}")

    section_header("Key Insight")
    print("""
    A missing height is a normal answer (None). A missing hash is an error.
    """)


# ============================================================================
# PHASE 2: OWNERSHIP (Steps 4-6)
# ============================================================================

def step_04_wallet():
    """Create a wallet."""
    step_header(4, "A Wallet",
        "Wallets live outside the registry; an address is a public key.")

    print(">>> private_key, address = generate_keypair()")
    private_key, address = generate_keypair()
    print(f"Address: {address}")
    return private_key, address


def step_05_challenge(registry: StarRegistry, private_key, address: str):
    """Request and sign a challenge."""
    step_header(5, "The Ownership Challenge",
        "Prove you control an address by signing a fresh challenge.")

    print(">>> challenge = registry.request_ownership_challenge(address)")
    challenge = registry.request_ownership_challenge(address)
    print(f"Challenge: {challenge}")

    print("\n>>> signature = sign_message(private_key, challenge)")
    signature = sign_message(private_key, challenge)
    print(f"Signature: {signature}")

    section_header("Key Insight")
    print(f"""
    The challenge embeds the time it was issued. Nothing is stored on the
    registry side. You have {ELAPSED_TIME_LIMIT_SECONDS} seconds to submit it.
    """)
    return challenge, signature


def step_06_register(registry: StarRegistry, clock: ManualClock, address: str,
                     challenge: str, signature: str):
    """Submit the proof with a star."""
    step_header(6, "Registering a Star",
        "Submit the signed challenge and watch a block get appended.")

    clock.advance(60)
    print(">>> registry.submit_star(address, challenge, signature, star)")
    block = registry.submit_star(address, challenge, signature, {
        "ra": CONFIG.star_ra, "dec": CONFIG.star_dec, "story": CONFIG.star_story,
    })

    section_header("New Block")
    print(f"Height:        {block.height}")
    print(f"Previous hash: {block.previous_hash}")
    print(f"Hash:          {block.hash}")

    section_header("Stars Owned")
    for star in registry.get_stars_by_wallet_address(address):
        print(star)


# ============================================================================
# PHASE 3: REJECTIONS (Steps 7-8)
# ============================================================================

def step_07_expired(registry: StarRegistry, clock: ManualClock, private_key, address: str):
    """A proof that arrives too late."""
    step_header(7, "Expired Proof",
        "Proofs are time-boxed: a valid signature does not save a stale challenge.")

    challenge = registry.request_ownership_challenge(address)
    signature = sign_message(private_key, challenge)
    clock.advance(ELAPSED_TIME_LIMIT_SECONDS + 1)
    print(f">>> (clock advanced {ELAPSED_TIME_LIMIT_SECONDS + 1}s)")
    try:
        registry.submit_star(address, challenge, signature, {"story": "too late"})
    except ElapsedTimeError as e:
        print(f"ElapsedTimeError: {e}")
    print(f"Height is still {registry.get_chain_height()}")


def step_08_forged(registry: StarRegistry, address: str):
    """A proof signed by someone else."""
    step_header(8, "Forged Proof",
        "Only the key behind an address can sign for it.")

    thief_key, _ = generate_keypair()
    challenge = registry.request_ownership_challenge(address)
    try:
        registry.submit_star(address, challenge, sign_message(thief_key, challenge), {"story": "stolen"})
    except SignatureInvalidError as e:
        print(f"SignatureInvalidError: {e}")
    print(f"Height is still {registry.get_chain_height()}")


# ============================================================================
# PHASE 4: INTEGRITY (Steps 9-10)
# ============================================================================

def step_09_tamper(registry: StarRegistry):
    """Rewrite history behind the chain's back."""
    step_header(9, "Tampering",
        "See the validator catch a block whose body was rewritten.")

    chain = registry.chain
    print(f">>> chain.validate_chain() -> {chain.validate_chain()}")

    # Reaching into chain internals is exactly what an attacker would do.
    print(">>> chain._blocks[1] = replace(chain._blocks[1], body=encode_body({...}))")
    original = chain._blocks[1]
    chain._blocks[1] = replace(original, body=encode_body({"address": "mallory", "star": {"story": "mine now"}}))

    section_header("Validation Report")
    for error in chain.validate_chain():
        print(f"  {error}")
    return original


def step_10_refused(registry: StarRegistry, private_key, address: str, original):
    """Appends are refused until the chain is consistent again."""
    step_header(10, "Refused Appends",
        "No block is ever built on top of a corrupted chain.")

    height = registry.get_chain_height()
    try:
        submit(registry, private_key, address, "blocked")
    except ChainCorruptError as e:
        print(f"ChainCorruptError: {len(e.errors)} error(s)")
    print(f"Height before: {height}, after: {registry.get_chain_height()}")

    print("\n>>> (restoring the original block)")
    registry.chain._blocks[1] = original
    block = submit(registry, private_key, address, "accepted again")
    print(f"Appended {block!r}")


# ============================================================================
# PHASE 5: COST (Step 11)
# ============================================================================

def step_11_cost():
    """Measure the price of full re-validation."""
    step_header(11, "The Cost of Always Validating",
        "Each append validates the whole chain: O(n) per append, O(n²) to build.")

    clock = ManualClock(CONFIG.start_time)
    chain = Chain("cost", clock=clock, verbose=False)

    @timing
    def build(n: int):
        for i in range(n):
            chain._add_block({"i": i})

    build(CONFIG.cost_test_blocks // 2)
    build(CONFIG.cost_test_blocks // 2)

    section_header("Key Insight")
    print("""
    The second batch is slower than the first: every append walks a longer
    chain. That is the price of never appending to a corrupt chain.
    """)


def main():
    """Run the full tutorial."""
    print("=" * 70)
    print("       STAR REGISTRY TUTORIAL")
    print("=" * 70)

    # Phase 1: Foundation
    chain, clock = step_01_genesis()
    wait_for_enter()
    step_02_records(chain)
    wait_for_enter()
    step_03_lookups(chain)
    wait_for_enter()

    # Phase 2: Ownership
    registry = StarRegistry(chain, clock=clock, verbose=True)
    private_key, address = step_04_wallet()
    wait_for_enter()
    challenge, signature = step_05_challenge(registry, private_key, address)
    wait_for_enter()
    step_06_register(registry, clock, address, challenge, signature)
    wait_for_enter()

    # Phase 3: Rejections
    step_07_expired(registry, clock, private_key, address)
    wait_for_enter()
    step_08_forged(registry, address)
    wait_for_enter()

    # Phase 4: Integrity
    original = step_09_tamper(registry)
    wait_for_enter()
    step_10_refused(registry, private_key, address, original)
    wait_for_enter()

    # Phase 5: Cost
    step_11_cost()

    print("\n" + "=" * 70)
    print("       TUTORIAL COMPLETE!")
    print("=" * 70)
    print("""
    You've learned:

    FOUNDATION
      - A chain starts with a genesis block
      - Every block hash covers height, timestamp, previousHash and body

    OWNERSHIP
      - Challenges embed their issue time
      - Only a signature from the address's key registers a star
      - Proofs expire after five minutes

    INTEGRITY
      - The validator reports every tampered or unlinked block
      - Appends are refused while the chain is inconsistent

    Next steps:
      - Run tests: pytest tests/
    """)


if __name__ == "__main__":
    main()
