import os
import unittest
import sys

pwd = os.path.dirname(os.path.realpath(__file__))
sys.path.append(os.path.join(pwd, "..", "src"))
from NaiveSearch import naive_find_all, naive_search  # noqa: E402


class testNaiveSearch(unittest.TestCase):
    def test_first_match(self):
        self.assertEqual(naive_search("ANPANMANAP", "ANPANMAN"), 0)
        self.assertEqual(naive_search("ABC ABCDAB ABCDABCDABDE", "ABCDABD"), 15)
        self.assertEqual(naive_search("abracadabra", "abracadabra"), 0)
        self.assertEqual(naive_search("AAAAAAAA", "NOT FOUND"), 8)
        self.assertEqual(naive_search("x", ""), 0)
        self.assertEqual(naive_search("", "abc"), 0)
        self.assertEqual(naive_search("ab", "abc"), 2)

    def test_bounds(self):
        self.assertEqual(naive_search("xxABCxx", "ABC", 3), 7)
        self.assertEqual(naive_search("xxABCxx", "ABC", 0, 4), 4)
        self.assertEqual(naive_search("xxABCxx", "", 3, 5), 3)
        with self.assertRaises(IndexError):
            naive_search("abc", "a", 2, 1)

    def test_find_all(self):
        self.assertEqual(naive_find_all("AAAA", "AAA"), [0, 1])
        self.assertEqual(naive_find_all("abab", "ab"), [0, 2])
        self.assertEqual(naive_find_all("ab", ""), [0, 1, 2])
        self.assertEqual(naive_find_all("", ""), [])
        self.assertEqual(naive_find_all(b"\x00\x01\x00", b"\x00"), [0, 2])
        self.assertEqual(naive_find_all(["GET", "/", "GET"], ("GET",)), [0, 2])


if __name__ == "__main__":
    unittest.main()
