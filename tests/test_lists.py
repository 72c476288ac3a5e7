from __future__ import annotations

import unittest

from jsxtv.parser import parse_expression, parse_source
from jsxtv.passes.lists import (
    ListMarkupPass,
    collect_map_aliases,
    is_map_call,
    list_placeholder_declarations,
    map_call_base,
)
from jsxtv.printer import print_node
from jsxtv.scope import UidGenerator
from jsxtv.variables import CHILD_OBJECT, VAR_LIST, ChildShape, TemplateVar, register


def list_marker(edge: str, name: str, ctx: str = '_uid3') -> str:
    return f"{{getLanguageList('{edge}', {{ type: 'identifier', value: '{name}' }}, {ctx})}}"


def list_registry():
    return register(
        [
            TemplateVar(name='items', type=VAR_LIST, child=ChildShape(), aliases=('entries',)),
            TemplateVar(name='users', type=VAR_LIST, child=ChildShape(CHILD_OBJECT, ('id', 'name'))),
        ],
        UidGenerator(),
    )


class MapCallTests(unittest.TestCase):
    def test_map_call_base(self) -> None:
        self.assertEqual(map_call_base(parse_expression('items.map(f)')), 'items')
        self.assertIsNone(map_call_base(parse_expression('props.items.map(f)')))
        self.assertIsNone(map_call_base(parse_expression('items.filter(f)')))
        self.assertIsNone(map_call_base(parse_expression('items["map"](f)')))

    def test_is_map_call_accepts_any_base(self) -> None:
        self.assertTrue(is_map_call(parse_expression('props.items.map(f)')))
        self.assertFalse(is_map_call(parse_expression('map(f)')))


class AliasTests(unittest.TestCase):
    def test_declared_aliases_and_map_results(self) -> None:
        registry = list_registry()
        body = parse_source(
            'const rows = items.map((i) => i * 2);\n'
            'const cells = rows.map((r) => r);\n'
            'const other = others.map((o) => o);\n'
            'let plain = items;'
        )
        to_tag = collect_map_aliases(body, registry.list)
        self.assertEqual(
            to_tag,
            {'items': 'items', 'entries': 'items', 'users': 'users', 'rows': 'items', 'cells': 'items'},
        )
        self.assertIs(registry.list.to_tag, to_tag)


class ListMarkupTests(unittest.TestCase):
    def rewrite(self, source: str, to_tag: dict[str, str] | None = None) -> tuple[str, ListMarkupPass]:
        registry = list_registry()
        pass_ = ListMarkupPass(to_tag or registry.list.to_tag, registry.context)
        return print_node(pass_.transform(parse_expression(source))), pass_

    def test_identifier_child(self) -> None:
        output, pass_ = self.rewrite('<ul>{items}</ul>')
        self.assertEqual(output, f"<ul>{list_marker('open', 'items')}{{items}}{list_marker('close', 'items')}</ul>")
        self.assertEqual(pass_.rewrites, 1)

    def test_alias_child_is_keyed_to_origin(self) -> None:
        output, _ = self.rewrite('<ul>{entries}</ul>')
        self.assertEqual(output, f"<ul>{list_marker('open', 'items')}{{entries}}{list_marker('close', 'items')}</ul>")

    def test_map_child(self) -> None:
        output, _ = self.rewrite('<ul>{users.map((u) => <li>{u.name}</li>)}</ul>')
        self.assertEqual(
            output,
            f"<ul>{list_marker('open', 'users')}"
            '{users.map((u) => <li>{u.name}</li>)}'
            f"{list_marker('close', 'users')}</ul>",
        )

    def test_map_result_alias(self) -> None:
        output, _ = self.rewrite('<ul>{rows}</ul>', {'items': 'items', 'rows': 'items'})
        self.assertIn(list_marker('open', 'items'), output)

    def test_untracked_expressions_are_left_alone(self) -> None:
        for source in ('<ul>{props.items.map((i) => i)}</ul>', '<ul>{others}</ul>', '<ul>{items.length}</ul>'):
            with self.subTest(source=source):
                output, pass_ = self.rewrite(source)
                self.assertEqual(output, source)
                self.assertEqual(pass_.rewrites, 0)

    def test_attribute_values_are_not_bracketed(self) -> None:
        output, _ = self.rewrite('<List data={items} />')
        self.assertEqual(output, '<List data={items} />')


class PlaceholderTests(unittest.TestCase):
    def test_primitive_and_object_placeholders(self) -> None:
        registry = list_registry()
        declarations = list_placeholder_declarations(registry.list, registry.context)
        self.assertEqual(
            [print_node(decl) for decl in declarations],
            [
                "let _uid = [getLanguageList('formatPrimitive', null, _uid3)];",
                "let _uid2 = [{ id: getLanguageList('formatObjectProperty', { type: 'identifier', value: 'id' }, _uid3), "
                "name: getLanguageList('formatObjectProperty', { type: 'identifier', value: 'name' }, _uid3) }];",
            ],
        )


if __name__ == '__main__':
    unittest.main()
