# Length-extension attack on the secret-prefix SHA-256 MAC

from __future__ import annotations
import logging
from typing import NamedTuple

from sha256_errors import ConfigurationError
from sha256_mac import compute_mac, verify_mac
from sha256 import pad, sha256_hex, state_from_hex

logger = logging.getLogger(__name__)

class Forgery(NamedTuple):
    mac: str
    message: bytes
    glue: bytes

def glue_padding(message: bytes, key_len: int) -> bytes:
    """
    Padding that followed ``key || message`` when the MAC was computed.
    Only the key's length is needed, never its bytes.
    """
    if key_len <= 0:
        raise ConfigurationError("key length must be greater than zero")
    return pad(message, length_override=key_len * 8, skip=key_len)[len(message):]

def forge(mac: str, key_len: int, message: bytes, suffix: bytes) -> Forgery:
    """
    Given ``mac = H(key || message)`` and ``len(key)``, compute
    ``H(key || message || glue || suffix)`` without the key.

    Returns the forged MAC and the bytes to submit in place of ``message``.
    """
    if not suffix:
        raise ConfigurationError("suffix to append must not be empty")
    glue = glue_padding(message, key_len)
    state = state_from_hex(mac)
    consumed = key_len + len(message) + len(glue)
    logger.debug("glue is %d bytes, resuming after %d bytes from %s",
                 len(glue), consumed, mac.lower())
    forged = sha256_hex(suffix, initial_state=state, length_override=consumed * 8)
    return Forgery(forged, message + glue + suffix, glue)

def _escape(data: bytes) -> str:
    return ''.join(chr(b) if 0x20 <= b < 0x7F else f"\\x{b:02x}" for b in data)

def render_forged_message(message: bytes, glue: bytes, suffix: bytes) -> str:
    # the 64-bit length field is always escaped, even when its bytes are printable
    return (
        _escape(message + glue[:-8])
        + ''.join(f"\\x{b:02x}" for b in glue[-8:])
        + suffix.decode("utf-8", errors="backslashreplace")
    )

def demo():
    secret_key = b"SECRET=top:very:confidential"
    public = b"user=alice&coin=100"
    mac = compute_mac(secret_key, public)
    S = b"&admin=true"
    forged = forge(mac, len(secret_key), public, S)
    honest = compute_mac(secret_key, forged.message)
    return {
        "orig_mac": mac,
        "suffix": S.decode(),
        "glue_len": len(forged.glue),
        "forged_mac": forged.mac,
        "honest_mac": honest,
        "match": forged.mac == honest,
        "accepted": verify_mac(secret_key, forged.message, forged.mac),
    }

if __name__ == "__main__":
    import json
    print(json.dumps(demo(), indent=2))
