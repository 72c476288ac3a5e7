from __future__ import annotations

import unittest

from jsxtv.ast import JSXIdentifier
from jsxtv.parser import parse_expression
from jsxtv.passes.context import ContextInjectionPass, default_is_component, is_text_input
from jsxtv.printer import print_node


def inject(source: str, **options) -> tuple[str, ContextInjectionPass]:
    pass_ = ContextInjectionPass('_ctx', **options)
    return print_node(pass_.transform(parse_expression(source))), pass_


class ContextInjectionTests(unittest.TestCase):
    def test_component_receives_context(self) -> None:
        output, pass_ = inject('<div><Row /></div>')
        self.assertEqual(output, '<div><Row __context__={_ctx} /></div>')
        self.assertEqual(pass_.injected, 1)

    def test_component_inside_map_receives_next_level(self) -> None:
        output, _ = inject('<ul>{rows.map((r) => <Item key={r} />)}</ul>')
        self.assertEqual(output, '<ul>{rows.map((r) => <Item key={r} __context__={_ctx + 1} />)}</ul>')

    def test_member_tags_are_components(self) -> None:
        output, _ = inject('<UI.Row>text</UI.Row>')
        self.assertEqual(output, '<UI.Row __context__={_ctx}>text</UI.Row>')

    def test_existing_context_is_kept(self) -> None:
        output, pass_ = inject('<Row __context__={depth} />')
        self.assertEqual(output, '<Row __context__={depth} />')
        self.assertEqual(pass_.injected, 0)

    def test_html_elements_are_untouched(self) -> None:
        output, pass_ = inject('<section><p>hi</p></section>')
        self.assertEqual(output, '<section><p>hi</p></section>')
        self.assertEqual(pass_.injected, 0)

    def test_text_input_value_is_mirrored(self) -> None:
        output, _ = inject('<input type="text" value={v} />')
        self.assertEqual(output, '<input type="text" value={v} jsxtv_value={v} />')

    def test_other_inputs_are_untouched(self) -> None:
        for source in ('<input type="checkbox" value={v} />', '<input value={v} />', '<input type="text" />'):
            with self.subTest(source=source):
                output, _ = inject(source)
                self.assertEqual(output, source)

    def test_custom_names_and_predicate(self) -> None:
        output, pass_ = inject(
            '<div><row /><Row /></div>',
            context_prop='depth',
            is_component=lambda name: isinstance(name, JSXIdentifier) and name.name == 'row',
        )
        self.assertEqual(output, '<div><row depth={_ctx} /><Row /></div>')
        self.assertEqual(pass_.injected, 1)


class PredicateTests(unittest.TestCase):
    def test_default_is_component(self) -> None:
        self.assertTrue(default_is_component(parse_expression('<Row />').name))
        self.assertTrue(default_is_component(parse_expression('<a.b />').name))
        self.assertFalse(default_is_component(parse_expression('<row />').name))

    def test_is_text_input(self) -> None:
        self.assertTrue(is_text_input(parse_expression('<input type="text" />')))
        self.assertFalse(is_text_input(parse_expression('<input type={kind} />')))
        self.assertFalse(is_text_input(parse_expression('<textarea type="text" />')))


if __name__ == '__main__':
    unittest.main()
