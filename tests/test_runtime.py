from __future__ import annotations

import json
import unittest

from jsxtv.languages import HANDLEBARS, PHP
from jsxtv.runtime import render_runtime, runtime_table


class RuntimeTests(unittest.TestCase):
    def test_runtime_table(self) -> None:
        table = runtime_table(PHP)
        self.assertEqual(table['name'], 'php')
        self.assertEqual(table['contextBase'], PHP.context_base)
        self.assertEqual(table['replace'], PHP.replace)
        self.assertEqual(table['control'], PHP.control)

    def test_render_defines_marker_helpers(self) -> None:
        code = render_runtime(HANDLEBARS)
        self.assertTrue(code.startswith('/* jsxtv runtime (handlebars) */\n'))
        for helper in ('getLanguageString', 'getLanguageReplace', 'getLanguageList', 'getLanguageControl'):
            with self.subTest(helper=helper):
                self.assertIn(f'function {helper}(', code)

    def test_render_inlines_table_as_json(self) -> None:
        code = render_runtime(HANDLEBARS)
        prefix = 'const __jsxtvLanguage = '
        start = code.index(prefix) + len(prefix)
        end = code.index(';\nfunction getLanguageString')
        self.assertEqual(json.loads(code[start:end]), runtime_table(HANDLEBARS))

    def test_token_pattern_is_escaped_for_javascript(self) -> None:
        self.assertIn(r'/\|\|%(\d+|var|subVar)\|\|/g', render_runtime(PHP))


if __name__ == '__main__':
    unittest.main()
