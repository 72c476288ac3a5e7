from __future__ import annotations

import unittest

from jsxtv.errors import LexError
from jsxtv.lexer import Lexer, split_template
from jsxtv.tokens import TokenType


def kinds_and_values(source: str) -> list[tuple[TokenType, str]]:
    return [(token.token_type, token.value) for token in Lexer(source).tokenize()]


class LexerTests(unittest.TestCase):
    def test_tokenizes_declaration(self) -> None:
        self.assertEqual(
            kinds_and_values("const total = price * 2;"),
            [
                (TokenType.KEYWORD, 'const'),
                (TokenType.IDENT, 'total'),
                (TokenType.PUNCT, '='),
                (TokenType.IDENT, 'price'),
                (TokenType.PUNCT, '*'),
                (TokenType.NUMBER, '2'),
                (TokenType.PUNCT, ';'),
                (TokenType.EOF, ''),
            ],
        )

    def test_longest_punctuator_wins(self) -> None:
        values = [value for _, value in kinds_and_values('a ?? b === c ?. d >>>= e')]
        self.assertIn('??', values)
        self.assertIn('===', values)
        self.assertIn('?.', values)
        self.assertIn('>>>=', values)

    def test_slash_after_operand_is_division(self) -> None:
        tokens = kinds_and_values('a / b / c')
        self.assertEqual([kind for kind, _ in tokens].count(TokenType.PUNCT), 2)

    def test_slash_after_operator_starts_regex(self) -> None:
        tokens = Lexer('x = /ab+c/gi.test(s)').tokenize()
        regex = [token for token in tokens if token.token_type == TokenType.REGEX]
        self.assertEqual(len(regex), 1)
        self.assertEqual(regex[0].raw, '/ab+c/gi')

    def test_strings_decode_escapes_and_keep_raw(self) -> None:
        token = Lexer(r"'it\'s\n'").tokenize()[0]
        self.assertEqual(token.token_type, TokenType.STRING)
        self.assertEqual(token.value, "it's\n")
        self.assertEqual(token.raw, r"'it\'s\n'")

    def test_comments_are_skipped_and_newlines_recorded(self) -> None:
        tokens = Lexer('a // trailing\n/* block\n */ b').tokenize()
        self.assertEqual([token.value for token in tokens], ['a', 'b', ''])
        self.assertTrue(tokens[1].newline_before)
        self.assertEqual(tokens[1].span.line, 3)

    def test_template_literal_token(self) -> None:
        token = Lexer('`a ${b + `c`} d`').tokenize()[0]
        self.assertEqual(token.token_type, TokenType.TEMPLATE)
        self.assertEqual(token.value, 'a ${b + `c`} d')

    def test_split_template(self) -> None:
        quasis, expressions = split_template('Hello ${name}, you have ${count} items')
        self.assertEqual(quasis, ['Hello ', ', you have ', ' items'])
        self.assertEqual(expressions, ['name', 'count'])

    def test_jsx_child_mode_reads_text_until_brace(self) -> None:
        lexer = Lexer('Hello, {name}')
        text = lexer.next_jsx_child_token()
        self.assertEqual(text.token_type, TokenType.JSX_TEXT)
        self.assertEqual(text.value, 'Hello, ')
        self.assertTrue(lexer.next_jsx_child_token().is_punct('{'))

    def test_jsx_tag_mode_allows_dashed_names(self) -> None:
        lexer = Lexer('data-id="7"')
        name = lexer.next_jsx_tag_token()
        self.assertEqual((name.token_type, name.value), (TokenType.JSX_IDENT, 'data-id'))
        self.assertTrue(lexer.next_jsx_tag_token().is_punct('='))
        value = lexer.next_jsx_tag_token()
        self.assertEqual((value.token_type, value.value), (TokenType.JSX_STRING, '7'))

    def test_snapshot_and_restore(self) -> None:
        lexer = Lexer('a b')
        lexer.next_token()
        state = lexer.snapshot()
        self.assertEqual(lexer.next_token().value, 'b')
        lexer.restore(state)
        self.assertEqual(lexer.next_token().value, 'b')

    def test_rejects_unexpected_character(self) -> None:
        with self.assertRaises(LexError) as ctx:
            Lexer('a § b').tokenize()
        self.assertEqual(ctx.exception.code, 'LEX001')

    def test_rejects_unterminated_constructs(self) -> None:
        cases = {
            "'open": 'LEX002',
            '`open': 'LEX003',
            'x = /open': 'LEX004',
            '/* open': 'LEX005',
        }
        for source, code in cases.items():
            with self.subTest(source=source):
                with self.assertRaises(LexError) as ctx:
                    Lexer(source).tokenize()
                self.assertEqual(ctx.exception.code, code)


if __name__ == '__main__':
    unittest.main()
