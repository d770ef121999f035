import contextlib
import hashlib
import io
import os
import unittest

import sha256_cli
from sha256_mac import compute_mac

def run(argv, stdin=b""):
    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        try:
            code = sha256_cli.main(argv, stdin=io.BytesIO(stdin))
        except SystemExit as e:
            code = e.code
    return code, out.getvalue(), err.getvalue()

class TestCLI(unittest.TestCase):
    def test_hash(self):
        code, out, err = run(["-c"], b"abc\n")
        self.assertEqual(code, 0)
        self.assertEqual(out, hashlib.sha256(b"abc").hexdigest() + "\n")

    def test_only_last_newline_dropped(self):
        code, out, _ = run(["--chash"], b"a\n\n")
        self.assertEqual(out.strip(), hashlib.sha256(b"a\n").hexdigest())

    def test_mac(self):
        code, out, _ = run(["-s", "-k", "key"], b"message")
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), compute_mac(b"key", b"message"))

    def test_verify(self):
        mac = compute_mac(b"key", b"message")
        self.assertEqual(run(["-v", "-k", "key", "-m", mac], b"message")[0], 0)
        self.assertEqual(run(["-v", "-k", "key", "-m", mac], b"messagf")[0], 1)
        self.assertEqual(run(["-v", "-k", "key", "-m", "abc"], b"message")[0], 1)

    def test_verify_prints_nothing(self):
        mac = compute_mac(b"key", b"message")
        code, out, err = run(["-v", "-k", "key", "-m", mac], b"message")
        self.assertEqual((out, err), ("", ""))

    def test_attack(self):
        key = b"secret"
        mac = compute_mac(key, b"hello")
        code, out, err = run(["-e", "-n", "6", "-m", mac, "-a", "&admin=true"], b"hello\n")
        self.assertEqual(code, 0)
        forged_mac, rendered = out.splitlines()
        glue = b"\x80" + b"\x00" * 44 + (88).to_bytes(8, "big")
        self.assertEqual(forged_mac, compute_mac(key, b"hello" + glue + b"&admin=true"))
        self.assertEqual(rendered, "hello\\x80" + "\\x00" * 51 + "\\x58&admin=true")

    def test_non_utf8_key(self):
        key = os.fsdecode(b"k\xff")
        code, out, err = run(["-s", "-k", key], b"msg")
        self.assertEqual(code, 0, err)
        self.assertEqual(out.strip(), compute_mac(b"k\xff", b"msg"))
        mac = compute_mac(b"k\xff", b"msg")
        self.assertEqual(run(["-v", "-k", key, "-m", mac], b"msg")[0], 0)

    def test_non_utf8_suffix(self):
        key = b"abc"
        mac = compute_mac(key, b"m")
        code, out, err = run(["-e", "-n", "3", "-m", mac, "-a", os.fsdecode(b"x\xfe")], b"m")
        self.assertEqual(code, 0, err)
        forged_mac, rendered = out.splitlines()
        glue = b"\x80" + b"\x00" * 51 + (32).to_bytes(8, "big")
        self.assertEqual(forged_mac, compute_mac(key, b"m" + glue + b"x\xfe"))
        self.assertTrue(rendered.endswith("\\x20x\\xfe"))

    def test_missing_options(self):
        mac = compute_mac(b"key", b"m")
        for argv in (["-s"], ["-s", "-k", ""], ["-v", "-k", "key"], ["-v", "-m", mac],
                     ["-e", "-n", "3", "-m", mac], ["-e", "-n", "3", "-a", "x"],
                     ["-e", "-m", mac, "-a", "x"], ["-e", "-n", "0", "-m", mac, "-a", "x"]):
            code, out, err = run(argv, b"m")
            self.assertEqual(code, 1, argv)
            self.assertEqual(out, "", argv)
            self.assertIn("Error:", err)

    def test_malformed_mac_in_attack(self):
        code, out, err = run(["-e", "-n", "3", "-m", "1234", "-a", "x"], b"m")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("64 hex characters", err)

    def test_no_arguments(self):
        code, out, err = run([])
        self.assertEqual(code, 1)
        self.assertIn("usage", err)

    def test_conflicting_modes(self):
        code, out, err = run(["-c", "-s", "-k", "k"])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")

    def test_no_mode(self):
        self.assertEqual(run(["-k", "key"])[0], 1)

if __name__ == '__main__':
    unittest.main(verbosity=2)
