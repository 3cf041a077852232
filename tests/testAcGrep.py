import io
import os
import tempfile
import unittest
import sys
from unittest import mock

pwd = os.path.dirname(os.path.realpath(__file__))
sys.path.append(os.path.join(pwd, "..", "src"))
import ac_grep  # noqa: E402
import ac_common as acc  # noqa: E402


class testAcGrep(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.corpus_path = os.path.join(self.tmp.name, "corpus.txt")
        with open(self.corpus_path, "w") as f:
            f.write("ushers")
        self.pattern_path = os.path.join(self.tmp.name, "patterns.txt")
        with open(self.pattern_path, "w") as f:
            f.write("he\nshe\n\nhers\n")

    def tearDown(self):
        self.tmp.cleanup()

    def run_main(self, argv):
        out = io.StringIO()
        status = ac_grep.main(argv, out=out)
        return status, out.getvalue().splitlines()

    def test_expr(self):
        status, lines = self.run_main(["-e", "he", "-e", "she", self.corpus_path])
        self.assertEqual(status, 0)
        self.assertEqual(
            lines, [f"{self.corpus_path}:1:1:she", f"{self.corpus_path}:2:0:he"]
        )

    def test_pattern_file(self):
        status, lines = self.run_main(["-f", self.pattern_path, self.corpus_path])
        self.assertEqual(status, 0)
        self.assertEqual(
            lines,
            [
                f"{self.corpus_path}:1:1:she",
                f"{self.corpus_path}:2:0:he",
                f"{self.corpus_path}:2:2:hers",
            ],
        )

    def test_first(self):
        status, lines = self.run_main(["-e", "rs", "-e", "she", "--first", self.corpus_path])
        self.assertEqual(status, 0)
        self.assertEqual(lines, [f"{self.corpus_path}:1"])

    def test_bytes(self):
        status, lines = self.run_main(["--bytes", "-e", "her", self.corpus_path])
        self.assertEqual(status, 0)
        self.assertEqual(lines, [f"{self.corpus_path}:2:0:her"])

    def test_no_match(self):
        status, lines = self.run_main(["-e", "xyz", self.corpus_path])
        self.assertEqual(status, 1)
        self.assertEqual(lines, [])
        status, lines = self.run_main(["-e", "xyz", "--first", self.corpus_path])
        self.assertEqual(status, 1)

    def test_missing_file(self):
        status, _ = self.run_main(["-e", "he", os.path.join(self.tmp.name, "nope")])
        self.assertEqual(status, 2)

    def test_pattern_file_too_large(self):
        with mock.patch.dict(os.environ, {"AC_MAX_PATTERN_BYTES": "4"}):
            status, _ = self.run_main(["-f", self.pattern_path, self.corpus_path])
        self.assertEqual(status, 2)

    def test_needs_patterns(self):
        with mock.patch("sys.stderr", new=io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                ac_grep.parse_args([self.corpus_path])
        self.assertEqual(cm.exception.code, 2)

    def test_load_patterns_bytes(self):
        self.assertEqual(
            acc.load_patterns(self.pattern_path, as_bytes=True), [b"he", b"she", b"hers"]
        )


class testAcCommon(unittest.TestCase):
    def test_kind_of_sequence(self):
        self.assertEqual(acc.kind_of_sequence("ab"), "str")
        self.assertEqual(acc.kind_of_sequence(b"ab"), "int")
        self.assertEqual(acc.kind_of_sequence(memoryview(b"ab")), "int")
        self.assertEqual(acc.kind_of_sequence([1.5]), "float")
        self.assertIsNone(acc.kind_of_sequence([]))
        self.assertIsNone(acc.kind_of_sequence(iter("ab")))

    def test_freeze_pattern(self):
        self.assertEqual(acc.freeze_pattern(bytearray(b"ab")), b"ab")
        self.assertEqual(acc.freeze_pattern(["a", "b"]), ("a", "b"))
        self.assertEqual(acc.freeze_pattern("ab"), "ab")

    def test_env_config(self):
        with mock.patch.dict(os.environ, {"AC_LOG_TZ_OFFSET": "9"}):
            self.assertEqual(acc.read_tz_offset(), 9.0)
        with mock.patch.dict(os.environ, {"AC_LOG_TZ_OFFSET": "JST"}):
            with self.assertRaises(ValueError):
                acc.read_tz_offset()
        with mock.patch.dict(os.environ, {"AC_LOG": "1"}):
            self.assertTrue(acc.logging_enabled_by_env())
        with mock.patch.dict(os.environ, {"AC_LOG": "0"}):
            self.assertFalse(acc.logging_enabled_by_env())


if __name__ == "__main__":
    unittest.main()
