# Secret-prefix MAC: H(key || message)

from __future__ import annotations

from sha256 import sha256_hex

def compute_mac(key: bytes, message: bytes) -> str:
    return sha256_hex(key + message)

def verify_mac(key: bytes, message: bytes, mac: str) -> bool:
    # plain string equality, not constant time
    return compute_mac(key, message) == mac
