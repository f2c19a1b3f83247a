"""
signatures.py - Message signature verification for ownership proofs

The signing scheme itself is an external primitive. The registry only sees
the SignatureVerifier protocol: verify(message, address, signature) -> bool.

Classes:
- SignatureVerifier: Protocol defining the verification interface
- Ed25519Verifier: Ed25519 verification backed by the cryptography package

Address and signature formats for Ed25519Verifier:
- address: hex-encoded 32-byte raw Ed25519 public key
- signature: base64-encoded 64-byte raw signature over the UTF-8 message

Wallets live outside the registry; generate_keypair(), address_for() and
sign_message() exist so clients and tests can produce proofs.
"""

import base64
import binascii
from typing import Protocol, Tuple, runtime_checkable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)


@runtime_checkable
class SignatureVerifier(Protocol):
    """
    Protocol for signature verification primitives.

    verify() must return False for any signature that does not verify,
    including malformed inputs, and must not raise for them.
    """

    def verify(self, message: str, address: str, signature: str) -> bool:
        """Check that signature over message was produced by the owner of address."""
        ...


class Ed25519Verifier:
    """Verify base64 Ed25519 signatures against hex public-key addresses."""

    def verify(self, message: str, address: str, signature: str) -> bool:
        try:
            public_key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(address))
            raw_signature = base64.b64decode(signature, validate=True)
        except (ValueError, TypeError, binascii.Error):
            return False

        try:
            public_key.verify(raw_signature, message.encode("utf-8"))
        except (InvalidSignature, ValueError):
            return False
        return True

    def __repr__(self):
        return "Ed25519Verifier()"


def generate_keypair() -> Tuple[Ed25519PrivateKey, str]:
    """
    Generate a fresh Ed25519 key pair.

    Returns:
        (private_key, address) where address is the hex public key
    """
    private_key = Ed25519PrivateKey.generate()
    return private_key, address_for(private_key.public_key())


def address_for(public_key: Ed25519PublicKey) -> str:
    """Return the hex address of a public key."""
    raw = public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return raw.hex()


def sign_message(private_key: Ed25519PrivateKey, message: str) -> str:
    """Sign a message, returning the base64-encoded signature."""
    return base64.b64encode(private_key.sign(message.encode("utf-8"))).decode("ascii")
