"""
starledger - Star Registry Ledger

A minimal append-only ledger of hash-linked blocks, with a time-boxed
ownership-proof workflow gating who may register a star.

Usage:
    from starledger import Chain, StarRegistry, generate_keypair, sign_message

    registry = StarRegistry(Chain("stars"))
    private_key, address = generate_keypair()

    challenge = registry.request_ownership_challenge(address)
    signature = sign_message(private_key, challenge)
    block = registry.submit_star(address, challenge, signature, {
        "ra": "16h 29m 1.0s",
        "dec": "-26° 29' 24.9",
        "story": "Found it in the south",
    })

    registry.get_stars_by_wallet_address(address)
    registry.validate_chain()   # [] while nobody has tampered with the chain

Modules:
    core        - Block, exceptions, body codec, hashing, ChainView protocol
    validation  - Tamper/linkage validator
    chain       - Chain (the only stateful component)
    clock       - Time sources
    signatures  - Signature verification primitive adapter
    ownership   - Challenge format and StarRegistry workflow
"""

# Core types, constants and exceptions
from .core import (
    # Types
    Block, BlockBody, BlockRecord, ChainView,
    # Constants
    NO_PREVIOUS_HASH, GENESIS_BODY,
    CHALLENGE_DOMAIN_TAG, CHALLENGE_SEPARATOR, ELAPSED_TIME_LIMIT_SECONDS,
    # Exceptions
    LedgerError,
    ChainCorruptError,
    MissingPreviousHashError,
    MalformedChallengeError,
    ElapsedTimeError,
    SignatureInvalidError,
    NotFoundError,
    ChainReadError,
    # Codec and hashing
    canonical_json,
    encode_body,
    decode_body,
    compute_block_hash,
    seal_block,
    build_block,
)

# Validation
from .validation import (
    verify_block,
    validate_chain,
)

# Chain store
from .chain import Chain

# Time sources
from .clock import (
    Clock,
    SystemClock,
    ManualClock,
)

# Signatures
from .signatures import (
    SignatureVerifier,
    Ed25519Verifier,
    generate_keypair,
    address_for,
    sign_message,
)

# Ownership proof workflow
from .ownership import (
    Challenge,
    StarRegistry,
    build_challenge,
    parse_challenge,
)

__all__ = [
    # Core
    'Block', 'BlockBody', 'BlockRecord', 'ChainView',
    'NO_PREVIOUS_HASH', 'GENESIS_BODY',
    'CHALLENGE_DOMAIN_TAG', 'CHALLENGE_SEPARATOR', 'ELAPSED_TIME_LIMIT_SECONDS',
    'LedgerError', 'ChainCorruptError', 'MissingPreviousHashError',
    'MalformedChallengeError', 'ElapsedTimeError', 'SignatureInvalidError',
    'NotFoundError', 'ChainReadError',
    'canonical_json', 'encode_body', 'decode_body',
    'compute_block_hash', 'seal_block', 'build_block',
    # Validation
    'verify_block', 'validate_chain',
    # Chain
    'Chain',
    # Clock
    'Clock', 'SystemClock', 'ManualClock',
    # Signatures
    'SignatureVerifier', 'Ed25519Verifier',
    'generate_keypair', 'address_for', 'sign_message',
    # Ownership
    'Challenge', 'StarRegistry', 'build_challenge', 'parse_challenge',
]
