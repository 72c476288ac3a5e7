"""AST model for JavaScript/JSX component sources.

Node and field names follow ESTree/Babel, spelled in snake_case. Passes treat
nodes as values: a rewrite builds new nodes instead of mutating shared ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from jsxtv.source_map import SourceSpan


@dataclass
class Node:
    """Base class for AST nodes with an optional provenance span."""

    span: SourceSpan | None = field(default=None, kw_only=True, compare=False, repr=False)

    @property
    def type(self) -> str:
        return type(self).__name__


@dataclass
class Program(Node):
    """Root node of one source unit."""

    body: list[Node] = field(default_factory=list)


# -- statements ------------------------------------------------------------


@dataclass
class ExpressionStatement(Node):
    expression: Node


@dataclass
class BlockStatement(Node):
    body: list[Node] = field(default_factory=list)


@dataclass
class EmptyStatement(Node):
    pass


@dataclass
class VariableDeclarator(Node):
    id: Node
    init: Node | None = None


@dataclass
class VariableDeclaration(Node):
    """`var`, `let` or `const` declaration list."""

    kind: str
    declarations: list[VariableDeclarator]


@dataclass
class FunctionDeclaration(Node):
    id: Identifier | None
    params: list[Node]
    body: BlockStatement
    is_async: bool = False


@dataclass
class ReturnStatement(Node):
    argument: Node | None = None


@dataclass
class IfStatement(Node):
    test: Node
    consequent: Node
    alternate: Node | None = None


@dataclass
class ForStatement(Node):
    init: Node | None
    test: Node | None
    update: Node | None
    body: Node


@dataclass
class ForInStatement(Node):
    left: Node
    right: Node
    body: Node


@dataclass
class ForOfStatement(Node):
    left: Node
    right: Node
    body: Node


@dataclass
class WhileStatement(Node):
    test: Node
    body: Node


@dataclass
class DoWhileStatement(Node):
    body: Node
    test: Node


@dataclass
class BreakStatement(Node):
    label: Identifier | None = None


@dataclass
class ContinueStatement(Node):
    label: Identifier | None = None


@dataclass
class ThrowStatement(Node):
    argument: Node


@dataclass
class CatchClause(Node):
    param: Node | None
    body: BlockStatement


@dataclass
class TryStatement(Node):
    block: BlockStatement
    handler: CatchClause | None = None
    finalizer: BlockStatement | None = None


@dataclass
class SwitchCase(Node):
    """`case test:` clause; `test` is None for `default:`."""

    test: Node | None
    consequent: list[Node] = field(default_factory=list)


@dataclass
class SwitchStatement(Node):
    discriminant: Node
    cases: list[SwitchCase] = field(default_factory=list)


# -- modules ---------------------------------------------------------------


@dataclass
class ImportSpecifier(Node):
    imported: Identifier
    local: Identifier


@dataclass
class ImportDefaultSpecifier(Node):
    local: Identifier


@dataclass
class ImportNamespaceSpecifier(Node):
    local: Identifier


@dataclass
class ImportDeclaration(Node):
    specifiers: list[Node]
    source: StringLiteral


@dataclass
class ExportSpecifier(Node):
    local: Identifier
    exported: Identifier


@dataclass
class ExportNamedDeclaration(Node):
    declaration: Node | None = None
    specifiers: list[ExportSpecifier] = field(default_factory=list)
    source: StringLiteral | None = None


@dataclass
class ExportDefaultDeclaration(Node):
    declaration: Node


@dataclass
class ExportAllDeclaration(Node):
    source: StringLiteral
    exported: Identifier | None = None


# -- expressions -----------------------------------------------------------


@dataclass
class Identifier(Node):
    name: str


@dataclass
class StringLiteral(Node):
    """String literal; `raw` keeps the source quoting, empty for created nodes."""

    value: str
    raw: str = ""


@dataclass
class NumericLiteral(Node):
    value: Union[int, float]
    raw: str = ""


@dataclass
class BooleanLiteral(Node):
    value: bool


@dataclass
class NullLiteral(Node):
    pass


@dataclass
class RegExpLiteral(Node):
    raw: str


@dataclass
class TemplateLiteral(Node):
    """Template literal; `quasis` are raw text chunks around `expressions`."""

    quasis: list[str]
    expressions: list[Node] = field(default_factory=list)


@dataclass
class TaggedTemplateExpression(Node):
    tag: Node
    quasi: TemplateLiteral


@dataclass
class ThisExpression(Node):
    pass


@dataclass
class ArrayExpression(Node):
    elements: list[Node | None] = field(default_factory=list)


@dataclass
class Property(Node):
    """Object literal or object pattern member.

    `kind` is `init`, `get` or `set`; `method` marks `foo() {}` shorthand.
    """

    key: Node
    value: Node
    computed: bool = False
    shorthand: bool = False
    kind: str = "init"
    method: bool = False


@dataclass
class ObjectExpression(Node):
    properties: list[Node] = field(default_factory=list)


@dataclass
class SpreadElement(Node):
    argument: Node


@dataclass
class FunctionExpression(Node):
    id: Identifier | None
    params: list[Node]
    body: BlockStatement
    is_async: bool = False


@dataclass
class ArrowFunctionExpression(Node):
    """Arrow function; `body` is a BlockStatement or an expression."""

    params: list[Node]
    body: Node
    is_async: bool = False


@dataclass
class UnaryExpression(Node):
    operator: str
    argument: Node


@dataclass
class UpdateExpression(Node):
    operator: str
    argument: Node
    prefix: bool


@dataclass
class BinaryExpression(Node):
    operator: str
    left: Node
    right: Node


@dataclass
class LogicalExpression(Node):
    """`&&`, `||` or `??` expression."""

    operator: str
    left: Node
    right: Node


@dataclass
class AssignmentExpression(Node):
    operator: str
    left: Node
    right: Node


@dataclass
class ConditionalExpression(Node):
    test: Node
    consequent: Node
    alternate: Node


@dataclass
class CallExpression(Node):
    callee: Node
    arguments: list[Node] = field(default_factory=list)
    optional: bool = False


@dataclass
class NewExpression(Node):
    callee: Node
    arguments: list[Node] = field(default_factory=list)


@dataclass
class MemberExpression(Node):
    object: Node
    property: Node
    computed: bool = False
    optional: bool = False


@dataclass
class SequenceExpression(Node):
    expressions: list[Node]


@dataclass
class AwaitExpression(Node):
    argument: Node


# -- patterns --------------------------------------------------------------


@dataclass
class ObjectPattern(Node):
    properties: list[Node] = field(default_factory=list)


@dataclass
class ArrayPattern(Node):
    elements: list[Node | None] = field(default_factory=list)


@dataclass
class AssignmentPattern(Node):
    """Binding with a default value (`a = 1`)."""

    left: Node
    right: Node


@dataclass
class RestElement(Node):
    argument: Node


# -- JSX -------------------------------------------------------------------


@dataclass
class JSXIdentifier(Node):
    name: str


@dataclass
class JSXMemberExpression(Node):
    object: Node
    property: JSXIdentifier


@dataclass
class JSXNamespacedName(Node):
    namespace: JSXIdentifier
    name: JSXIdentifier


@dataclass
class JSXAttribute(Node):
    """`name`, `name="x"` or `name={expr}`."""

    name: Node
    value: Node | None = None


@dataclass
class JSXSpreadAttribute(Node):
    argument: Node


@dataclass
class JSXEmptyExpression(Node):
    pass


@dataclass
class JSXExpressionContainer(Node):
    expression: Node


@dataclass
class JSXSpreadChild(Node):
    expression: Node


@dataclass
class JSXText(Node):
    """Raw text between tags, kept verbatim."""

    value: str


@dataclass
class JSXElement(Node):
    name: Node
    attributes: list[Node] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)
    self_closing: bool = False


@dataclass
class JSXFragment(Node):
    children: list[Node] = field(default_factory=list)
