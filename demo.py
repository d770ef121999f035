# demo.py


# 1. Check SHA-256 against the published FIPS 180-4 vectors
# 2. Run the length-extension attack against the secret-prefix MAC

from sha256 import sha256_hex
from length_extension import demo as le_demo

VECTORS = [
    (b"", "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"),
    (b"abc", "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"),
    (b"abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq",
     "248d6a61d20638b8e5c026930c3e6039a33ce45964ff2167f6ecedd419db06c1"),
]

def test_vectors():
    """
    Hash each message and compare with its published digest.
    Returns a list of (ok, got, expected).
    """
    results = []
    for msg, expected in VECTORS:
        got = sha256_hex(msg)
        results.append((got == expected, got, expected))
    return results

if __name__ == "__main__":
    # 1. Test vectors
    print("SHA-256 test vectors:")
    for ok, got, exp in test_vectors():
        print(" ok:", ok)
        print("  got:     ", got)
        print("  expected:", exp)
    print()

    # 2. Length-extension attack
    print("Length-extension attack:")
    print(le_demo())
