from __future__ import annotations

import unittest

from jsxtv.ast import ArrowFunctionExpression, BlockStatement, FunctionDeclaration, ReturnStatement
from jsxtv.component import (
    ComponentReport,
    find_config_statements,
    locate_component,
    normalize_body,
    plumb_context_param,
    rewrite_component,
)
from jsxtv.config import TransformConfig
from jsxtv.parser import parse_expression, parse_source
from jsxtv.passes.declarations import build_declarations, context_declaration, context_source
from jsxtv.printer import print_node
from jsxtv.scope import UidGenerator
from jsxtv.variables import VAR_CONTROL, VAR_LIST, ChildShape, TemplateVar, register


def params_of(source: str):
    fn = parse_expression(source)
    assert isinstance(fn, ArrowFunctionExpression)
    return fn.params


class DeclarationTests(unittest.TestCase):
    def test_context_declaration_from_props(self) -> None:
        decl = context_declaration('_ctx', context_source('props'))
        self.assertEqual(
            print_node(decl),
            "let _ctx = typeof props.__context__ === 'number' ? props.__context__ : 0;",
        )

    def test_context_declaration_from_destructured_prop(self) -> None:
        decl = context_declaration('_ctx', context_source(None, 'depth'))
        self.assertEqual(print_node(decl), "let _ctx = typeof depth === 'number' ? depth : 0;")

    def test_build_declarations_order(self) -> None:
        registry = register(
            [
                TemplateVar(name='items', type=VAR_LIST, child=ChildShape()),
                TemplateVar(name='flag', type=VAR_CONTROL),
                TemplateVar(name='title'),
            ],
            UidGenerator(),
        )
        # title -> _uid, flag -> _uid2, items -> _uid3, context -> _uid4
        printed = [print_node(stmt) for stmt in build_declarations(registry, context_source('props'))]
        self.assertEqual(
            printed,
            [
                "let _uid4 = typeof props.__context__ === 'number' ? props.__context__ : 0;",
                "let _uid = getLanguageReplace('format', { type: 'identifier', value: 'title' }, _uid4);",
                "let _uid3 = [getLanguageList('formatPrimitive', null, _uid4)];",
            ],
        )


class ContextParamTests(unittest.TestCase):
    def plumb(self, source: str) -> tuple[list[str], str]:
        params, context = plumb_context_param(params_of(source))
        return [print_node(param) for param in params], print_node(context)

    def test_no_parameters(self) -> None:
        self.assertEqual(self.plumb('() => null'), (['{ __context__ }'], '__context__'))

    def test_identifier_parameter(self) -> None:
        self.assertEqual(self.plumb('(props, ref) => null'), (['props', 'ref'], 'props.__context__'))

    def test_identifier_with_default(self) -> None:
        self.assertEqual(self.plumb('(props = {}) => null'), (['props = {}'], 'props.__context__'))

    def test_object_pattern_before_rest(self) -> None:
        self.assertEqual(
            self.plumb('({ a, ...rest }) => null'),
            (['{ a, __context__, ...rest }'], '__context__'),
        )

    def test_object_pattern_with_default(self) -> None:
        self.assertEqual(self.plumb('({ a } = {}) => null'), (['{ a, __context__ } = {}'], '__context__'))

    def test_existing_context_prop_is_not_duplicated(self) -> None:
        self.assertEqual(self.plumb('({ __context__, a }) => null'), (['{ __context__, a }'], '__context__'))


class ComponentLookupTests(unittest.TestCase):
    def test_find_config_statements(self) -> None:
        program = parse_source(
            "Card.templateVars = ['a'];\n"
            "Card.other = [];\n"
            "Card['templateVars'] = [];\n"
            "if (ready) { List.templateVars = []; }\n"
            "List.templateVars = [];"
        )
        found = find_config_statements(program)
        self.assertEqual([(stmt.index, stmt.component) for stmt in found], [(0, 'Card'), (4, 'List')])
        self.assertEqual([stmt.index for stmt in find_config_statements(program, 'other')], [1])

    def test_locate_component_forms(self) -> None:
        program = parse_source(
            'const helper = 1;\n'
            'export const Card = (props) => <div />;\n'
            'export default function List() { return null; }\n'
            'let Other = function () { return null; };'
        )
        index, fn = locate_component(program, 'Card')
        self.assertEqual(index, 1)
        self.assertIsInstance(fn, ArrowFunctionExpression)
        index, fn = locate_component(program, 'List')
        self.assertEqual(index, 2)
        self.assertIsInstance(fn, FunctionDeclaration)
        self.assertEqual(locate_component(program, 'Other')[0], 3)
        self.assertIsNone(locate_component(program, 'helper'))
        self.assertIsNone(locate_component(program, 'Missing'))

    def test_normalize_expression_body(self) -> None:
        fn = parse_expression('(p) => <div />')
        body = normalize_body(fn)
        self.assertIsInstance(body, BlockStatement)
        self.assertIsInstance(body.body[0], ReturnStatement)
        self.assertEqual(print_node(body.body[0]), 'return <div />;')

    def test_normalize_block_body_is_kept(self) -> None:
        fn = parse_expression('(p) => { return 1; }')
        self.assertIs(normalize_body(fn), fn.body)

    def test_rewrite_expression_bodied_component(self) -> None:
        fn = parse_expression('(p) => <p>{title}</p>')
        registry = register([TemplateVar(name='title')], UidGenerator())
        report = ComponentReport(name='Title', found=True)
        rewritten = rewrite_component(fn, registry, TransformConfig(), report)
        self.assertIsInstance(rewritten.body, BlockStatement)
        self.assertEqual(print_node(rewritten.body.body[-1]), 'return <p>{_uid}</p>;')
        self.assertEqual(report.renamed, 1)


if __name__ == '__main__':
    unittest.main()
