# SHA-256 (FIPS 180-4)

from __future__ import annotations
import logging
from typing import Iterable, List, Tuple

from sha256_errors import ParseError

logger = logging.getLogger(__name__)

MASK32 = 0xFFFFFFFF
BLOCK_SIZE = 64
DIGEST_SIZE = 32

IV = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19
)

K = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5, 0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3, 0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC, 0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7, 0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13, 0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3, 0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5, 0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208, 0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2
)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & MASK32

def _shr(x: int, n: int) -> int:
    return x >> n

def _sigma0(x: int) -> int:
    return _rotr(x, 7) ^ _rotr(x, 18) ^ _shr(x, 3)

def _sigma1(x: int) -> int:
    return _rotr(x, 17) ^ _rotr(x, 19) ^ _shr(x, 10)

def _big_sigma0(x: int) -> int:
    return _rotr(x, 2) ^ _rotr(x, 13) ^ _rotr(x, 22)

def _big_sigma1(x: int) -> int:
    return _rotr(x, 6) ^ _rotr(x, 11) ^ _rotr(x, 25)

def _ch(x: int, y: int, z: int) -> int:
    return (x & y) ^ (~x & z)

def _maj(x: int, y: int, z: int) -> int:
    return (x & y) ^ (x & z) ^ (y & z)

def pad(message: bytes, length_override: int = 0, skip: int = 0) -> bytes:
    """
    Pad ``message`` to a whole number of 64-byte blocks.

    ``skip`` counts bytes that logically precede ``message`` in the first
    block but are not present (an unknown secret prefix). ``length_override``
    is a bit count added to the encoded length, rounded up to whole bytes.
    """
    padded = bytearray(message)
    padded.append(0x80)
    while ((len(padded) + skip) * 8) % 512 != 448:
        padded.append(0x00)
    if length_override % 8:
        length_override = (length_override // 8 + 1) * 8
    bit_len = (len(message) * 8 + length_override) & ((1 << 64) - 1)
    padded += bit_len.to_bytes(8, 'big')
    return bytes(padded)

def _blocks(data: bytes) -> Iterable[bytes]:
    for i in range(0, len(data), BLOCK_SIZE):
        yield data[i:i+BLOCK_SIZE]

def expand(block: bytes) -> List[int]:
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"expected a {BLOCK_SIZE}-byte block, got {len(block)}")
    W = [0]*64
    for i in range(16):
        W[i] = int.from_bytes(block[4*i:4*i+4], 'big')
    for i in range(16, 64):
        W[i] = (W[i-16] + _sigma0(W[i-15]) + W[i-7] + _sigma1(W[i-2])) & MASK32
    return W

def compress(V: Tuple[int, ...], W: List[int]) -> Tuple[int, ...]:
    # V may be the IV or any chaining value, including one read back from a digest
    a, b, c, d, e, f, g, h = V
    for j in range(64):
        T1 = (h + _big_sigma1(e) + _ch(e, f, g) + K[j] + W[j]) & MASK32
        T2 = (_big_sigma0(a) + _maj(a, b, c)) & MASK32
        h = g
        g = f
        f = e
        e = (d + T1) & MASK32
        d = c
        c = b
        b = a
        a = (T1 + T2) & MASK32
    return tuple(
        (x + y) & MASK32 for x, y in zip(V, (a, b, c, d, e, f, g, h))
    )

def _fold(state: Tuple[int, ...], data: bytes) -> Tuple[int, ...]:
    for block in _blocks(data):
        state = compress(state, expand(block))
    return state

def state_to_bytes(state: Iterable[int]) -> bytes:
    return b''.join(x.to_bytes(4, 'big') for x in state)

def state_to_hex(state: Iterable[int]) -> str:
    return state_to_bytes(state).hex()

def state_from_hex(digest: str) -> Tuple[int, ...]:
    """
    Read a 64-character hex digest back into eight chaining words.
    """
    if not isinstance(digest, str):
        raise ParseError(f"digest must be a str, got {type(digest).__name__}")
    if len(digest) != 2 * DIGEST_SIZE:
        raise ParseError(f"digest must be {2 * DIGEST_SIZE} hex characters, got {len(digest)}")
    bad = sorted(set(digest) - _HEX_DIGITS)
    if bad:
        raise ParseError(f"digest contains non-hex characters: {''.join(bad)!r}")
    return tuple(int(digest[i:i+8], 16) for i in range(0, 2 * DIGEST_SIZE, 8))

def _check_state(state: Iterable[int]) -> Tuple[int, ...]:
    words = tuple(state)
    if len(words) != 8:
        raise ValueError(f"hash state must have 8 words, got {len(words)}")
    for w in words:
        if not 0 <= w <= MASK32:
            raise ValueError(f"hash state word out of range: {w:#x}")
    return words

class Hasher:
    __slots__ = ("_state", "_buf", "_length")
    def __init__(self, data: bytes | None = None):
        self._state = IV
        self._buf = bytearray()
        self._length = 0
        if data:
            self.update(data)
    def update(self, data: bytes) -> 'Hasher':
        if not data:
            return self
        self._length += len(data)
        self._buf.extend(data)
        while len(self._buf) >= BLOCK_SIZE:
            block = bytes(self._buf[:BLOCK_SIZE])
            del self._buf[:BLOCK_SIZE]
            self._state = compress(self._state, expand(block))
        return self
    def copy(self) -> 'Hasher':
        h = Hasher()
        h._state = tuple(self._state)
        h._buf = bytearray(self._buf)
        h._length = self._length
        return h
    def digest(self) -> bytes:
        # everything before the buffer has already been compressed in whole blocks
        consumed = self._length - len(self._buf)
        tail = pad(bytes(self._buf), length_override=consumed * 8)
        return state_to_bytes(_fold(self._state, tail))
    def hexdigest(self) -> str:
        return self.digest().hex()
    @classmethod
    def from_state(cls, state_words: Iterable[int], total_len_bytes: int) -> 'Hasher':
        """
        Resume hashing from a chaining value after ``total_len_bytes`` bytes
        (a multiple of the block size) have been absorbed.
        """
        if total_len_bytes < 0 or total_len_bytes % BLOCK_SIZE:
            raise ValueError("resumed length must be a non-negative multiple of the block size")
        h = Hasher()
        h._state = _check_state(state_words)
        h._length = total_len_bytes
        return h

def sha256(message: bytes, initial_state: Iterable[int] = IV, length_override: int = 0) -> bytes:
    state = _check_state(initial_state)
    padded = pad(message, length_override)
    logger.debug("hashing %d bytes in %d blocks", len(message), len(padded) // BLOCK_SIZE)
    return state_to_bytes(_fold(state, padded))

def sha256_hex(message: bytes, initial_state: Iterable[int] = IV, length_override: int = 0) -> str:
    return sha256(message, initial_state, length_override).hex()
