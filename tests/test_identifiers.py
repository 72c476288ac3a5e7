from __future__ import annotations

import unittest

from jsxtv.ast import Identifier
from jsxtv.parser import parse_source
from jsxtv.passes.identifiers import IdentifierRenamePass, is_binding_position
from jsxtv.printer import print_program
from jsxtv.scope import UidGenerator
from jsxtv.traverse import iter_paths
from jsxtv.variables import VAR_LIST, ChildShape, TemplateVar, register


def rename(source: str) -> tuple[str, IdentifierRenamePass]:
    # title -> _uid, items -> _uid2, context -> _uid3
    registry = register(
        [TemplateVar(name='title'), TemplateVar(name='items', type=VAR_LIST, child=ChildShape())],
        UidGenerator(),
    )
    pass_ = IdentifierRenamePass(registry)
    return print_program(pass_.transform(parse_source(source))), pass_


class RenameTests(unittest.TestCase):
    def test_uses_are_renamed(self) -> None:
        output, pass_ = rename('const n = title.length + items.length;')
        self.assertIn('const n = _uid.length + _uid2.length;', output)
        self.assertEqual(pass_.renamed, 2)

    def test_bindings_and_member_properties_are_kept(self) -> None:
        output, _ = rename('let title = props.title;\nconst z = obj.title + title;')
        self.assertIn('let title = props.title;', output)
        self.assertIn('const z = obj.title + _uid;', output)

    def test_computed_member_property_is_renamed(self) -> None:
        output, _ = rename('const v = data[title];')
        self.assertIn('const v = data[_uid];', output)

    def test_object_literals(self) -> None:
        output, _ = rename('const o = { title: 1, x: title, title };\nconst w = { items };')
        self.assertIn('const o = { title: 1, x: _uid, title: _uid };', output)
        self.assertIn('const w = { items };', output)

    def test_destructuring_targets_are_kept(self) -> None:
        output, _ = rename('const { title, items: rows } = props;\n[title] = pair;')
        self.assertIn('const { title, items: rows } = props;', output)
        self.assertIn('[title] = pair;', output)

    def test_renaming_ignores_shadowing(self) -> None:
        output, _ = rename('function show(title) {\n  return title;\n}')
        self.assertIn('function show(title) {', output)
        self.assertIn('return _uid;', output)

    def test_jsx_children_and_attributes(self) -> None:
        output, _ = rename('const el = <h1 title={title}>{title}</h1>;')
        self.assertIn('const el = <h1 title={_uid}>{_uid}</h1>;', output)


class BindingPositionTests(unittest.TestCase):
    def positions(self, source: str) -> dict[str, bool]:
        result: dict[str, bool] = {}
        for path in iter_paths(parse_source(source)):
            if isinstance(path.node, Identifier):
                result.setdefault(path.node.name, is_binding_position(path))
        return result

    def test_declarations_and_parameters(self) -> None:
        positions = self.positions('const a = b;\nfunction f(c, d = e) {}\nconst g = (...h) => i;')
        self.assertTrue(positions['a'])
        self.assertFalse(positions['b'])
        self.assertTrue(positions['f'])
        self.assertTrue(positions['c'])
        self.assertTrue(positions['d'])
        self.assertFalse(positions['e'])
        self.assertTrue(positions['h'])
        self.assertFalse(positions['i'])

    def test_imports_and_catch(self) -> None:
        positions = self.positions("import x, { y as z } from 'mod';\ntry { run(); } catch (err) { log(reason); }")
        self.assertTrue(positions['x'])
        self.assertTrue(positions['z'])
        self.assertTrue(positions['err'])
        self.assertFalse(positions['run'])


if __name__ == '__main__':
    unittest.main()
