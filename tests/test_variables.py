from __future__ import annotations

import unittest

from jsxtv.parser import parse_expression
from jsxtv.scope import UidGenerator, collect_names
from jsxtv.variables import (
    CHILD_OBJECT,
    CHILD_PRIMITIVE,
    VAR_CONTROL,
    VAR_LIST,
    VAR_REPLACE,
    ChildShape,
    TemplateVar,
    node_to_value,
    parse_template_vars,
    register,
    template_vars_from_data,
)


class TemplateVarParsingTests(unittest.TestCase):
    def test_bare_names_and_pairs(self) -> None:
        node = parse_expression(
            "['title', ['isOpen', { type: 'control' }], "
            "['rows', { type: 'list', child: { type: 'object', props: ['id', 'label'] }, aliases: ['lines'] }]]"
        )
        self.assertEqual(
            parse_template_vars(node),
            [
                TemplateVar(name='title'),
                TemplateVar(name='isOpen', type=VAR_CONTROL),
                TemplateVar(
                    name='rows',
                    type=VAR_LIST,
                    child=ChildShape(type=CHILD_OBJECT, props=('id', 'label')),
                    aliases=('lines',),
                ),
            ],
        )

    def test_list_without_child_is_primitive(self) -> None:
        [var] = parse_template_vars(parse_expression("[['tags', { type: 'list' }]]"))
        self.assertEqual(var.child, ChildShape(type=CHILD_PRIMITIVE))

    def test_single_element_pair_defaults_to_replace(self) -> None:
        [var] = parse_template_vars(parse_expression("[['title']]"))
        self.assertEqual(var.type, VAR_REPLACE)

    def test_malformed_entries_are_skipped(self) -> None:
        node = parse_expression("[42, [], [7, {}], ['ok'], '', compute()]")
        self.assertEqual([var.name for var in parse_template_vars(node)], ['ok'])

    def test_unknown_type_falls_back_to_replace(self) -> None:
        with self.assertLogs('jsxtv.variables', level='WARNING'):
            [var] = parse_template_vars(parse_expression("[['x', { type: 'table' }]]"))
        self.assertEqual(var.type, VAR_REPLACE)

    def test_non_array_configuration(self) -> None:
        with self.assertLogs('jsxtv.variables', level='WARNING'):
            self.assertEqual(parse_template_vars(parse_expression("{ title: 1 }")), [])

    def test_plain_data_form(self) -> None:
        variables = template_vars_from_data(['a', ['b', {'type': 'control'}], None])
        self.assertEqual([(var.name, var.type) for var in variables], [('a', VAR_REPLACE), ('b', VAR_CONTROL)])

    def test_node_to_value(self) -> None:
        value = node_to_value(parse_expression("{ a: [1, 'x', true, null], 'b': { c: 2 }, [d]: 3 }"))
        self.assertEqual(value, {'a': [1, 'x', True, None], 'b': {'c': 2}})

    def test_to_dict(self) -> None:
        var = TemplateVar(name='rows', type=VAR_LIST, child=ChildShape(CHILD_OBJECT, ('id',)), aliases=('r',))
        self.assertEqual(
            var.to_dict(),
            {'name': 'rows', 'type': 'list', 'child': {'type': 'object', 'props': ['id']}, 'aliases': ['r']},
        )


class RegistryTests(unittest.TestCase):
    def test_buckets_and_generated_names(self) -> None:
        variables = [
            TemplateVar(name='title'),
            TemplateVar(name='isFeatured', type=VAR_CONTROL),
            TemplateVar(name='items', type=VAR_LIST, child=ChildShape(), aliases=('rows',)),
            TemplateVar(name='subtitle'),
        ]
        registry = register(variables, UidGenerator())
        self.assertEqual(registry.replace.mapped, {'title': '_uid', 'subtitle': '_uid2'})
        self.assertEqual(registry.control.mapped, {'isFeatured': '_uid3'})
        self.assertEqual(registry.list.mapped, {'items': '_uid4'})
        self.assertEqual(registry.context, '_uid5')
        self.assertEqual(registry.replace.names, ['title', 'subtitle'])
        self.assertEqual(registry.list.to_tag, {'items': 'items', 'rows': 'items'})
        self.assertIn('title', registry.replace)
        self.assertNotIn('title', registry.list)

    def test_repeated_name_keeps_latest(self) -> None:
        registry = register([TemplateVar(name='a'), TemplateVar(name='a')], UidGenerator())
        self.assertEqual(registry.replace.mapped, {'a': '_uid2'})
        self.assertEqual(registry.replace.names, ['a'])

    def test_generated_names_avoid_existing_identifiers(self) -> None:
        uids = UidGenerator.for_tree(parse_expression('_uid + _uid2 + <_uid3 />'))
        self.assertEqual(uids.generate(), '_uid4')
        self.assertEqual(uids.generate(), '_uid5')

    def test_collect_names(self) -> None:
        names = collect_names(parse_expression('<Row key={id}>{label}</Row>'))
        self.assertEqual(names, {'Row', 'key', 'id', 'label'})

    def test_uid_hint_and_reserve(self) -> None:
        uids = UidGenerator(['_ctx'])
        uids.reserve('_ctx2')
        self.assertTrue(uids.is_used('_ctx2'))
        self.assertEqual(uids.generate('ctx'), '_ctx3')


if __name__ == '__main__':
    unittest.main()
