import os
import unittest
from unittest import mock

from sidebyside.config.env import get_resolver_config, get_wikipedia_config
from sidebyside.resolver.query import is_side_by_side, tokenize_query


class TestQuery(unittest.TestCase):
    def test_detects_trigger(self):
        self.assertTrue(is_side_by_side("side by side lebron james"))
        self.assertTrue(is_side_by_side("Michael Jordan SIDE BY SIDE kobe"))
        self.assertFalse(is_side_by_side("lebron james stats"))
        self.assertFalse(is_side_by_side(""))

    def test_tokenize_strips_trigger_once(self):
        self.assertEqual(tokenize_query('side by side "Michael Jordan" lebron james'),
                         ['"Michael', 'Jordan"', "lebron", "james"])
        self.assertEqual(tokenize_query("side by side side by side"), ["side", "by", "side"])
        self.assertEqual(tokenize_query("  kobe   bryant  "), ["kobe", "bryant"])
        self.assertEqual(tokenize_query(""), [])


class TestConfig(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            w = get_wikipedia_config()
            r = get_resolver_config()
        self.assertEqual(w.api_url, "https://en.wikipedia.org/w/api.php")
        self.assertEqual(w.search_limit, 3)
        self.assertEqual(w.thumb_size, 500)
        self.assertEqual(r.quote_mode, "boundary")
        self.assertFalse(r.positional_quotes)
        self.assertEqual(r.lookup_timeout, 15.0)

    def test_env_overrides(self):
        env = {"QUOTE_MODE": "Positional", "LOOKUP_TIMEOUT": "0", "WIKIPEDIA_SEARCH_LIMIT": "5"}
        with mock.patch.dict(os.environ, env, clear=True):
            r = get_resolver_config()
            w = get_wikipedia_config()
        self.assertTrue(r.positional_quotes)
        self.assertIsNone(r.lookup_timeout)
        self.assertEqual(w.search_limit, 5)

    def test_unknown_quote_mode(self):
        with mock.patch.dict(os.environ, {"QUOTE_MODE": "fuzzy"}, clear=True):
            with self.assertRaises(ValueError):
                get_resolver_config()


if __name__ == '__main__':
    unittest.main()
