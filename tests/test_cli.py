from __future__ import annotations

import json
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]

CARD = "const Card = (props) => <p>{title}</p>;\nCard.templateVars = ['title'];\n"


def run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, '-m', 'jsxtv.cli', *args],
        cwd=PROJECT_ROOT,
        text=True,
        capture_output=True,
        check=False,
    )


class CLITests(unittest.TestCase):
    def test_transform_inline(self) -> None:
        result = run_cli('transform', '--code', CARD)
        self.assertEqual(result.returncode, 0)
        self.assertIn("getLanguageReplace('format', { type: 'identifier', value: 'title' }, _uid2)", result.stdout)
        self.assertNotIn('templateVars', result.stdout)

    def test_transform_tidy_only(self) -> None:
        result = run_cli('transform', '--code', CARD, '--tidy-only')
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout, 'const Card = (props) => <p>{title}</p>;\n')

    def test_transform_with_runtime_and_output_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / 'Card.js'
            result = run_cli('transform', '--code', CARD, '--language', 'php', '--runtime', '-o', str(out))
            self.assertEqual(result.returncode, 0)
            self.assertEqual(result.stdout, '')
            self.assertTrue(out.read_text(encoding='utf-8').startswith('/* jsxtv runtime (php) */'))

    def test_transform_debug_summary(self) -> None:
        result = run_cli('transform', '--code', CARD, '--debug')
        self.assertEqual(result.returncode, 0)
        self.assertIn('debug: language=handlebars components=1', result.stderr)
        self.assertIn('debug: component=Card control=0 lists=0 renamed=1 contexts=0', result.stderr)

    def test_check(self) -> None:
        result = run_cli('check', '--code', CARD + "Ghost.templateVars = [];\n")
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout.strip(), 'OK (1/2 components rewritten)')

    def test_explain_json(self) -> None:
        result = run_cli('explain', '--code', CARD)
        self.assertEqual(result.returncode, 0)
        payload = json.loads(result.stdout)
        self.assertEqual(payload['language'], 'handlebars')
        self.assertEqual(payload['components'][0]['markers']['replace'], {'title': '{{title}}'})

    def test_languages(self) -> None:
        result = run_cli('languages')
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout.splitlines(), ['handlebars (hbs, mustache)', 'php (php-block)'])

    def test_languages_with_json_spec(self) -> None:
        table = {
            'name': 'plain',
            'replace': {'format': '$||%1||'},
            'list': {'open': '[', 'close': ']', 'formatObjectProperty': '||%1||', 'formatPrimitive': '.'},
            'control': {
                intent: {'open': '(', 'close': ')'} for intent in ('ifTruthy', 'ifFalsy', 'ifEqual', 'ifNotEqual')
            },
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            spec = Path(tmpdir) / 'plain.json'
            spec.write_text(json.dumps(table), encoding='utf-8')
            result = run_cli('languages', '--json', '--language-spec', str(spec))
        self.assertEqual(result.returncode, 0)
        names = [language['name'] for language in json.loads(result.stdout)]
        self.assertEqual(names, ['handlebars', 'php', 'plain'])

    def test_runtime(self) -> None:
        result = run_cli('runtime', '--language', 'hbs')
        self.assertEqual(result.returncode, 0)
        self.assertTrue(result.stdout.startswith('/* jsxtv runtime (handlebars) */'))

    def test_syntax_error_exit_code(self) -> None:
        result = run_cli('transform', '--code', 'const = 1;')
        self.assertEqual(result.returncode, 1)
        self.assertIn('PAR002', result.stderr)
        self.assertIn('const = 1;', result.stderr)

    def test_unknown_language_exit_code(self) -> None:
        result = run_cli('transform', '--code', CARD, '--language', 'erb')
        self.assertEqual(result.returncode, 1)
        self.assertIn('LNG001', result.stderr)

    def test_bad_config_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Path(tmpdir) / 'jsxtv.json'
            config.write_text('{"colour": "red"}', encoding='utf-8')
            result = run_cli('check', '--code', CARD, '--config', str(config))
        self.assertEqual(result.returncode, 1)
        self.assertIn('CFG002', result.stderr)

    def test_usage_error_exit_code(self) -> None:
        result = run_cli('transform')
        self.assertEqual(result.returncode, 2)
        self.assertIn('CLI001', result.stderr)

    def test_missing_input_file(self) -> None:
        result = run_cli('check', 'does-not-exist.jsx')
        self.assertEqual(result.returncode, 2)
        self.assertIn('Input file not found', result.stderr)


if __name__ == '__main__':
    unittest.main()
