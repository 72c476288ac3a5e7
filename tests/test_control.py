from __future__ import annotations

import unittest

from jsxtv.parser import parse_expression, parse_source
from jsxtv.passes.control import ControlPass
from jsxtv.printer import print_node, print_program
from jsxtv.scope import UidGenerator
from jsxtv.variables import VAR_CONTROL, TemplateVar, register


def marker(intent: str, edge: str, *args: str, ctx: str = '_uid3') -> str:
    rendered = ', '.join(args)
    return f"getLanguageControl(['{intent}', '{edge}'], [{rendered}], {ctx})"


def ident(name: str) -> str:
    return f"{{ type: 'identifier', value: '{name}' }}"


def value(text: str) -> str:
    escaped = text.replace("'", "\\'")
    return f"{{ type: 'value', value: '{escaped}' }}"


def control_pass() -> ControlPass:
    registry = register(
        [TemplateVar(name='flag', type=VAR_CONTROL), TemplateVar(name='mode', type=VAR_CONTROL)],
        UidGenerator(),
    )
    return ControlPass(registry)


def rewrite(source: str) -> tuple[str, ControlPass]:
    pass_ = control_pass()
    return print_node(pass_.transform(parse_expression(source))), pass_


class ControlPassTests(unittest.TestCase):
    def test_logical_guard_child_is_bracketed(self) -> None:
        output, pass_ = rewrite('<div>{flag && <Badge />}</div>')
        self.assertEqual(
            output,
            '<div>'
            f"{{{marker('ifTruthy', 'open', ident('flag'))}}}"
            '<Badge />'
            f"{{{marker('ifTruthy', 'close', ident('flag'))}}}"
            '</div>',
        )
        self.assertEqual(pass_.rewrites, 1)

    def test_negated_guard(self) -> None:
        output, _ = rewrite('<p>{!flag && "off"}</p>')
        self.assertEqual(
            output,
            f"<p>{{{marker('ifFalsy', 'open', ident('flag'))}}}"
            '{"off"}'
            f"{{{marker('ifFalsy', 'close', ident('flag'))}}}</p>",
        )

    def test_ternary_child_uses_complement_for_else(self) -> None:
        output, _ = rewrite("<div>{mode === 'wide' ? <Wide /> : <Narrow />}</div>")
        args = (ident('mode'), value("'wide'"))
        self.assertEqual(
            output,
            '<div>'
            f"{{{marker('ifEqual', 'open', *args)}}}<Wide />{{{marker('ifEqual', 'close', *args)}}}"
            f"{{{marker('ifNotEqual', 'open', *args)}}}<Narrow />{{{marker('ifNotEqual', 'close', *args)}}}"
            '</div>',
        )

    def test_nested_guards_are_expanded(self) -> None:
        output, pass_ = rewrite("<div>{flag && (mode !== 'a' ? <A /> : null)}</div>")
        args = (ident('mode'), value("'a'"))
        self.assertEqual(
            output,
            '<div>'
            f"{{{marker('ifTruthy', 'open', ident('flag'))}}}"
            f"{{{marker('ifNotEqual', 'open', *args)}}}<A />{{{marker('ifNotEqual', 'close', *args)}}}"
            f"{{{marker('ifEqual', 'open', *args)}}}{{null}}{{{marker('ifEqual', 'close', *args)}}}"
            f"{{{marker('ifTruthy', 'close', ident('flag'))}}}"
            '</div>',
        )
        self.assertEqual(pass_.rewrites, 2)

    def test_ternary_outside_markup_becomes_concatenation(self) -> None:
        pass_ = control_pass()
        program = pass_.transform(parse_source("const label = flag ? 'on' : 'off';"))
        expected = (
            f"const label = {marker('ifTruthy', 'open', ident('flag'))} + 'on' + "
            f"{marker('ifTruthy', 'close', ident('flag'))} + "
            f"{marker('ifFalsy', 'open', ident('flag'))} + 'off' + "
            f"{marker('ifFalsy', 'close', ident('flag'))};\n"
        )
        self.assertEqual(print_program(program), expected)

    def test_ternary_with_markup_branch_becomes_fragment(self) -> None:
        pass_ = control_pass()
        program = pass_.transform(parse_source('const x = flag ? <A /> : null;'))
        expected = (
            'const x = <>'
            f"{{{marker('ifTruthy', 'open', ident('flag'))}}}<A />{{{marker('ifTruthy', 'close', ident('flag'))}}}"
            f"{{{marker('ifFalsy', 'open', ident('flag'))}}}{{null}}{{{marker('ifFalsy', 'close', ident('flag'))}}}"
            '</>;\n'
        )
        self.assertEqual(print_program(program), expected)
        self.assertEqual(pass_.rewrites, 1)

    def test_ternary_in_attribute_becomes_concatenation(self) -> None:
        output, _ = rewrite("<div className={flag ? 'a' : 'b'} />")
        self.assertTrue(output.startswith(f"<div className={{{marker('ifTruthy', 'open', ident('flag'))} + 'a' + "))

    def test_member_guard_on_control_variable(self) -> None:
        output, _ = rewrite('<div>{!flag.ready && <Spinner />}</div>')
        self.assertIn(marker('ifFalsy', 'open', ident('flag.ready')), output)

    def test_unresolved_guards_are_left_as_written(self) -> None:
        for source in (
            '<div>{other && <A />}</div>',
            '<div>{flag > 1 && <A />}</div>',
            '<div>{flag.ready && <A />}</div>',
            '<div>{other ? <A /> : <B />}</div>',
        ):
            with self.subTest(source=source):
                output, pass_ = rewrite(source)
                self.assertEqual(output, source)
                self.assertEqual(pass_.rewrites, 0)

    def test_logical_guard_outside_children_is_untouched(self) -> None:
        pass_ = control_pass()
        program = pass_.transform(parse_source('const shown = flag && items;'))
        self.assertEqual(print_program(program), 'const shown = flag && items;\n')

    def test_fragment_children(self) -> None:
        output, _ = rewrite('<>{flag && <A />}</>')
        self.assertTrue(output.startswith('<>{' + marker('ifTruthy', 'open', ident('flag'))))


if __name__ == '__main__':
    unittest.main()
