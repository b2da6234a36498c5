"""
ECDSA (secp256k1) message signing.

The message is signed as-is: it is NOT hashed unless a ``hashfunc`` such as
``hashlib.sha256`` is passed. Messages longer than the curve order are
truncated to its bit length, exactly as ECDSA does with an oversized digest.

Signatures and public keys are rendered as lowercase hex of the big-endian
component bytes concatenated without padding (``R || S`` and ``X || Y``), so
their length varies when a component has leading zero bytes. Pass
``fixed_width=True`` to pad each component to 32 bytes instead.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

import ecdsa
from ecdsa.keys import BadDigestError, BadSignatureError

from dvfapi.errors import SigningError

CURVE = ecdsa.SECP256k1
COMPONENT_SIZE = CURVE.baselen  # 32 bytes
SIGNATURE_LABEL = "Signature : "

Message = Union[bytes, bytearray, str]


def _int_bytes(n: int, width: Optional[int] = None) -> bytes:
    if width is None:
        width = (n.bit_length() + 7) // 8
    return n.to_bytes(width, "big")


@dataclass(frozen=True)
class Signature:
    r: int
    s: int

    def to_bytes(self, fixed_width: bool = False) -> bytes:
        width = COMPONENT_SIZE if fixed_width else None
        return _int_bytes(self.r, width) + _int_bytes(self.s, width)

    def hex(self, fixed_width: bool = False) -> str:
        return self.to_bytes(fixed_width).hex()


def _sigencode_pair(r: int, s: int, order: int) -> Signature:
    return Signature(r, s)


def _sigdecode_pair(sig: Signature, order: int) -> Tuple[int, int]:
    return sig.r, sig.s


def to_bytes(message: Message) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return bytes(message)


def load_private_key(private_key: str) -> ecdsa.SigningKey:
    """Parse a 32-byte hex scalar (optional ``0x`` prefix) into a signing key."""
    h = (private_key or "").strip()
    if h[:2].lower() == "0x":
        h = h[2:]
    if not h or any(c not in string.hexdigits for c in h):
        raise SigningError("invalid private key: not a hex string")
    if len(h) != COMPONENT_SIZE * 2:
        raise SigningError(
            f"invalid private key length: want {COMPONENT_SIZE} bytes, got {len(h) / 2:g}"
        )
    secexp = int(h, 16)
    if not 0 < secexp < CURVE.order:
        raise SigningError("invalid private key: scalar out of range for secp256k1")
    return ecdsa.SigningKey.from_secret_exponent(secexp, curve=CURVE)


def _digest(message: Message, hashfunc: Optional[Callable]) -> bytes:
    data = to_bytes(message)
    if hashfunc is not None:
        data = hashfunc(data).digest()
    # b"" and b"\x00" are both the integer 0; python-ecdsa only accepts the latter
    return data or b"\x00"


def verify(
    vk: ecdsa.VerifyingKey,
    message: Message,
    signature: Signature,
    hashfunc: Optional[Callable] = None,
) -> bool:
    try:
        return vk.verify_digest(
            signature,
            _digest(message, hashfunc),
            sigdecode=_sigdecode_pair,
            allow_truncate=True,
        )
    except BadSignatureError:
        return False


def sign_digest(
    sk: ecdsa.SigningKey,
    message: Message,
    hashfunc: Optional[Callable] = None,
    entropy: Optional[Callable[[int], bytes]] = None,
) -> Signature:
    """
    Sign ``message`` with a fresh random nonce and check the result against
    the key's own public key before returning it.

    ``entropy`` defaults to ``os.urandom``; only override it in tests.
    """
    digest = _digest(message, hashfunc)
    try:
        sig = sk.sign_digest(
            digest,
            entropy=entropy,
            sigencode=_sigencode_pair,
            allow_truncate=True,
        )
    except (BadDigestError, ValueError) as e:
        raise SigningError(f"signing failed: {e}") from e
    if not verify(sk.get_verifying_key(), digest, sig):
        raise SigningError("signature failed self-verification")
    return sig


def encode_public_key(vk: ecdsa.VerifyingKey, fixed_width: bool = False) -> str:
    width = COMPONENT_SIZE if fixed_width else None
    point = vk.pubkey.point
    return (_int_bytes(point.x(), width) + _int_bytes(point.y(), width)).hex()


def format_signature(sig: Signature, fixed_width: bool = False) -> str:
    return SIGNATURE_LABEL + sig.hex(fixed_width)


def sign(
    private_key: str,
    message: Message,
    *,
    hashfunc: Optional[Callable] = None,
    fixed_width: bool = False,
    entropy: Optional[Callable[[int], bytes]] = None,
) -> str:
    sk = load_private_key(private_key)
    return format_signature(sign_digest(sk, message, hashfunc, entropy), fixed_width)


def sign_and_public_key(
    private_key: str,
    message: Message,
    *,
    hashfunc: Optional[Callable] = None,
    fixed_width: bool = False,
    entropy: Optional[Callable[[int], bytes]] = None,
) -> Tuple[str, str]:
    """Same as ``sign`` and also return the hex ``X || Y`` public key."""
    sk = load_private_key(private_key)
    sig = sign_digest(sk, message, hashfunc, entropy)
    return (
        format_signature(sig, fixed_width),
        encode_public_key(sk.get_verifying_key(), fixed_width),
    )
