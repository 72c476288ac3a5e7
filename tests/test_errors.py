from __future__ import annotations

import unittest

from jsxtv.errors import CompilerError, Diagnostic, ParseError, format_diagnostic, source_excerpt
from jsxtv.parser import parse_source
from jsxtv.source_map import SourceSpan


SPAN = SourceSpan(file='Card.jsx', line=2, column=7, end_line=2, end_column=9)


class DiagnosticTests(unittest.TestCase):
    def test_format_with_span_and_hint(self) -> None:
        diag = Diagnostic(code='PAR001', message='Unexpected token.', span=SPAN, hint='Check the syntax.')
        self.assertEqual(format_diagnostic(diag), 'PAR001 Card.jsx:2:7: Unexpected token. Hint: Check the syntax.')

    def test_format_without_span(self) -> None:
        diag = Diagnostic(code='LNG001', message="Unknown language 'erb'.")
        self.assertEqual(format_diagnostic(diag), "LNG001: Unknown language 'erb'.")
        self.assertNotIn('span', diag.to_dict())

    def test_excerpt_marks_the_span(self) -> None:
        source = 'const a = 1;\nconst b == 2;\n'
        self.assertEqual(source_excerpt(source, SPAN), '  const b == 2;\n        ^^')
        diag = Diagnostic(code='PAR001', message='Unexpected token.', span=SPAN)
        self.assertTrue(format_diagnostic(diag, source).endswith('\n  const b == 2;\n        ^^'))

    def test_excerpt_outside_source(self) -> None:
        self.assertEqual(source_excerpt('one line', SPAN), '')

    def test_error_str_and_payload(self) -> None:
        err = CompilerError(code='CFG001', message='Cannot read config file.', hint='Pass a file.')
        self.assertEqual(str(err), '[CFG001] Cannot read config file.')
        self.assertEqual(
            err.to_diagnostic().to_dict(),
            {'code': 'CFG001', 'message': 'Cannot read config file.', 'hint': 'Pass a file.'},
        )

    def test_parse_errors_carry_location(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse_source('let a = 1;\nconst = 2;', 'broken.jsx')
        diag = ctx.exception.to_diagnostic()
        self.assertTrue(diag.location.startswith('broken.jsx:2:'))
        self.assertIn('(broken.jsx:2:', str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
