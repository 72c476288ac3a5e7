"""JavaScript/JSX code generator for rewritten component trees."""

from __future__ import annotations

from typing import Final

from jsxtv.ast import (
    ArrayExpression,
    ArrayPattern,
    ArrowFunctionExpression,
    AssignmentExpression,
    AssignmentPattern,
    AwaitExpression,
    BinaryExpression,
    BlockStatement,
    BooleanLiteral,
    BreakStatement,
    CallExpression,
    ConditionalExpression,
    ContinueStatement,
    DoWhileStatement,
    EmptyStatement,
    ExportAllDeclaration,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    ExpressionStatement,
    ForInStatement,
    ForOfStatement,
    ForStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    IfStatement,
    ImportDeclaration,
    ImportDefaultSpecifier,
    ImportNamespaceSpecifier,
    JSXAttribute,
    JSXElement,
    JSXEmptyExpression,
    JSXExpressionContainer,
    JSXFragment,
    JSXSpreadAttribute,
    JSXSpreadChild,
    JSXText,
    LogicalExpression,
    MemberExpression,
    NewExpression,
    Node,
    NullLiteral,
    NumericLiteral,
    ObjectExpression,
    ObjectPattern,
    Program,
    Property,
    RegExpLiteral,
    RestElement,
    ReturnStatement,
    SequenceExpression,
    SpreadElement,
    StringLiteral,
    SwitchStatement,
    TaggedTemplateExpression,
    TemplateLiteral,
    ThisExpression,
    ThrowStatement,
    TryStatement,
    UnaryExpression,
    UpdateExpression,
    VariableDeclaration,
    WhileStatement,
)
from jsxtv.parser import jsx_name_text


PREC_SEQUENCE: Final = 1
PREC_ASSIGN: Final = 2
PREC_CONDITIONAL: Final = 3
PREC_UNARY: Final = 16
PREC_POSTFIX: Final = 17
PREC_CALL: Final = 18
PREC_PRIMARY: Final = 19

_BINARY_PRECEDENCE: Final[dict[str, int]] = {
    "??": 4,
    "||": 5,
    "&&": 6,
    "|": 7,
    "^": 8,
    "&": 9,
    "==": 10,
    "!=": 10,
    "===": 10,
    "!==": 10,
    "<": 11,
    ">": 11,
    "<=": 11,
    ">=": 11,
    "in": 11,
    "instanceof": 11,
    "<<": 12,
    ">>": 12,
    ">>>": 12,
    "+": 13,
    "-": 13,
    "*": 14,
    "/": 14,
    "%": 14,
    "**": 15,
}

_STRING_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\0": "\\0",
}


def quote_string(value: str) -> str:
    """Render `value` as a single-quoted JavaScript string literal."""
    return "'" + "".join(_STRING_ESCAPES.get(ch, ch) for ch in value) + "'"


def expression_precedence(node: Node) -> int:
    """Binding strength of an expression node, higher binds tighter."""
    if isinstance(node, SequenceExpression):
        return PREC_SEQUENCE
    if isinstance(node, (AssignmentExpression, ArrowFunctionExpression)):
        return PREC_ASSIGN
    if isinstance(node, ConditionalExpression):
        return PREC_CONDITIONAL
    if isinstance(node, (BinaryExpression, LogicalExpression)):
        return _BINARY_PRECEDENCE[node.operator]
    if isinstance(node, (UnaryExpression, AwaitExpression)):
        return PREC_UNARY
    if isinstance(node, UpdateExpression):
        return PREC_UNARY if node.prefix else PREC_POSTFIX
    if isinstance(node, (CallExpression, MemberExpression, NewExpression, TaggedTemplateExpression)):
        return PREC_CALL
    return PREC_PRIMARY


class Printer:
    """Regenerates source text from an AST, one statement per line."""

    def __init__(self, indent_unit: str = "  ") -> None:
        self.indent_unit = indent_unit
        self._level = 0

    def print_program(self, program: Program) -> str:
        lines: list[str] = []
        for stmt in program.body:
            lines.extend(self._emit_stmt(stmt, 0))
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def print_node(self, node: Node) -> str:
        """Render a single statement or expression node."""
        if isinstance(node, Program):
            return self.print_program(node).rstrip("\n")
        if _is_statement(node):
            return "\n".join(self._emit_stmt(node, 0))
        return self._emit_expr(node)

    # -- statements ------------------------------------------------------

    def _line(self, level: int, text: str) -> str:
        return self.indent_unit * level + text

    def _emit_stmt(self, node: Node, level: int) -> list[str]:
        self._level = level

        if isinstance(node, ExpressionStatement):
            text = self._emit_expr(node.expression)
            if text.startswith(("{", "function", "async function")):
                text = f"({text})"
            return [self._line(level, f"{text};")]

        if isinstance(node, VariableDeclaration):
            return [self._line(level, f"{self._emit_declaration(node)};")]

        if isinstance(node, FunctionDeclaration):
            return [self._line(level, self._emit_function(node))]

        if isinstance(node, ReturnStatement):
            if node.argument is None:
                return [self._line(level, "return;")]
            return [self._line(level, f"return {self._emit_expr(node.argument)};")]

        if isinstance(node, BlockStatement):
            return [self._line(level, self._emit_block(node))]

        if isinstance(node, EmptyStatement):
            return [self._line(level, ";")]

        if isinstance(node, IfStatement):
            return self._emit_if(node, level)

        if isinstance(node, ForStatement):
            init = ""
            if isinstance(node.init, VariableDeclaration):
                init = self._emit_declaration(node.init)
            elif node.init is not None:
                init = self._emit_expr(node.init)
            test = "" if node.test is None else self._emit_expr(node.test)
            update = "" if node.update is None else self._emit_expr(node.update)
            return self._emit_body(f"for ({init}; {test}; {update})", node.body, level)

        if isinstance(node, (ForInStatement, ForOfStatement)):
            if isinstance(node.left, VariableDeclaration):
                left = self._emit_declaration(node.left)
            else:
                left = self._emit_expr(node.left)
            keyword = "of" if isinstance(node, ForOfStatement) else "in"
            return self._emit_body(f"for ({left} {keyword} {self._emit_expr(node.right)})", node.body, level)

        if isinstance(node, WhileStatement):
            return self._emit_body(f"while ({self._emit_expr(node.test)})", node.body, level)

        if isinstance(node, DoWhileStatement):
            lines = self._emit_body("do", node.body, level)
            test = self._emit_expr(node.test)
            self._level = level
            if isinstance(node.body, BlockStatement):
                lines[-1] = f"{lines[-1]} while ({test});"
            else:
                lines.append(self._line(level, f"while ({test});"))
            return lines

        if isinstance(node, (BreakStatement, ContinueStatement)):
            keyword = "break" if isinstance(node, BreakStatement) else "continue"
            label = "" if node.label is None else f" {node.label.name}"
            return [self._line(level, f"{keyword}{label};")]

        if isinstance(node, ThrowStatement):
            return [self._line(level, f"throw {self._emit_expr(node.argument)};")]

        if isinstance(node, TryStatement):
            text = f"try {self._emit_block(node.block)}"
            if node.handler is not None:
                param = "" if node.handler.param is None else f" ({self._emit_expr(node.handler.param)})"
                text += f" catch{param} {self._emit_block(node.handler.body)}"
            if node.finalizer is not None:
                text += f" finally {self._emit_block(node.finalizer)}"
            return [self._line(level, text)]

        if isinstance(node, SwitchStatement):
            lines = [self._line(level, f"switch ({self._emit_expr(node.discriminant)}) {{")]
            for case in node.cases:
                self._level = level + 1
                label = "default:" if case.test is None else f"case {self._emit_expr(case.test)}:"
                lines.append(self._line(level + 1, label))
                for stmt in case.consequent:
                    lines.extend(self._emit_stmt(stmt, level + 2))
            lines.append(self._line(level, "}"))
            return lines

        if isinstance(node, ImportDeclaration):
            return [self._line(level, self._emit_import(node))]

        if isinstance(node, ExportNamedDeclaration):
            if node.declaration is not None:
                inner = self._emit_stmt(node.declaration, level)
                inner[0] = self._line(level, "export " + inner[0][len(self.indent_unit * level) :])
                return inner
            specifiers = ", ".join(
                spec.local.name if spec.local.name == spec.exported.name else f"{spec.local.name} as {spec.exported.name}"
                for spec in node.specifiers
            )
            source = "" if node.source is None else f" from {self._emit_expr(node.source)}"
            return [self._line(level, f"export {{ {specifiers} }}{source};" if specifiers else f"export {{}}{source};")]

        if isinstance(node, ExportDefaultDeclaration):
            if isinstance(node.declaration, FunctionDeclaration):
                return [self._line(level, f"export default {self._emit_function(node.declaration)}")]
            return [self._line(level, f"export default {self._emit_expr(node.declaration, PREC_ASSIGN)};")]

        if isinstance(node, ExportAllDeclaration):
            exported = "" if node.exported is None else f" as {node.exported.name}"
            return [self._line(level, f"export *{exported} from {self._emit_expr(node.source)};")]

        return [self._line(level, f"{self._emit_expr(node)};")]

    def _emit_if(self, node: IfStatement, level: int) -> list[str]:
        lines = self._emit_body(f"if ({self._emit_expr(node.test)})", node.consequent, level)
        if node.alternate is None:
            return lines
        self._level = level
        if isinstance(node.consequent, BlockStatement):
            alternate_lines = self._emit_else(node.alternate, level)
            lines[-1] = f"{lines[-1]} {alternate_lines[0].lstrip()}"
            lines.extend(alternate_lines[1:])
            return lines
        lines.extend(self._emit_else(node.alternate, level))
        return lines

    def _emit_else(self, alternate: Node, level: int) -> list[str]:
        if isinstance(alternate, IfStatement):
            nested = self._emit_if(alternate, level)
            nested[0] = self._line(level, "else " + nested[0].lstrip())
            return nested
        return self._emit_body("else", alternate, level)

    def _emit_body(self, header: str, body: Node, level: int) -> list[str]:
        if isinstance(body, BlockStatement):
            self._level = level
            return [self._line(level, f"{header} {self._emit_block(body)}")]
        return [self._line(level, header), *self._emit_stmt(body, level + 1)]

    def _emit_block(self, block: BlockStatement) -> str:
        if not block.body:
            return "{}"
        saved = self._level
        lines: list[str] = []
        for stmt in block.body:
            lines.extend(self._emit_stmt(stmt, saved + 1))
        self._level = saved
        return "{\n" + "\n".join(lines) + "\n" + self.indent_unit * saved + "}"

    def _emit_declaration(self, node: VariableDeclaration) -> str:
        parts: list[str] = []
        for decl in node.declarations:
            target = self._emit_expr(decl.id)
            if decl.init is None:
                parts.append(target)
            else:
                parts.append(f"{target} = {self._emit_expr(decl.init, PREC_ASSIGN)}")
        return f"{node.kind} {', '.join(parts)}"

    def _emit_function(self, node: FunctionDeclaration | FunctionExpression) -> str:
        prefix = "async function" if node.is_async else "function"
        name = "" if node.id is None else f" {node.id.name}"
        return f"{prefix}{name}({self._emit_params(node.params)}) {self._emit_block(node.body)}"

    def _emit_params(self, params: list[Node]) -> str:
        return ", ".join(self._emit_expr(param, PREC_ASSIGN) for param in params)

    def _emit_import(self, node: ImportDeclaration) -> str:
        source = self._emit_expr(node.source)
        if not node.specifiers:
            return f"import {source};"
        parts: list[str] = []
        named: list[str] = []
        for spec in node.specifiers:
            if isinstance(spec, ImportDefaultSpecifier):
                parts.append(spec.local.name)
            elif isinstance(spec, ImportNamespaceSpecifier):
                parts.append(f"* as {spec.local.name}")
            elif spec.imported.name == spec.local.name:
                named.append(spec.local.name)
            else:
                named.append(f"{spec.imported.name} as {spec.local.name}")
        if named:
            parts.append("{ " + ", ".join(named) + " }")
        return f"import {', '.join(parts)} from {source};"

    # -- expressions -----------------------------------------------------

    def _emit_expr(self, node: Node | None, min_prec: int = PREC_SEQUENCE) -> str:
        if node is None:
            return ""
        text = self._emit_expr_inner(node)
        if expression_precedence(node) < min_prec:
            return f"({text})"
        return text

    def _emit_expr_inner(self, node: Node) -> str:
        if isinstance(node, Identifier):
            return node.name

        if isinstance(node, StringLiteral):
            return node.raw or quote_string(node.value)

        if isinstance(node, NumericLiteral):
            if node.raw:
                return node.raw
            value = node.value
            if isinstance(value, float) and value.is_integer():
                return str(int(value))
            return str(value)

        if isinstance(node, BooleanLiteral):
            return "true" if node.value else "false"

        if isinstance(node, NullLiteral):
            return "null"

        if isinstance(node, ThisExpression):
            return "this"

        if isinstance(node, RegExpLiteral):
            return node.raw

        if isinstance(node, TemplateLiteral):
            return self._emit_template(node)

        if isinstance(node, TaggedTemplateExpression):
            return f"{self._emit_expr(node.tag, PREC_CALL)}{self._emit_template(node.quasi)}"

        if isinstance(node, ArrayExpression):
            return self._emit_array(node.elements)

        if isinstance(node, ArrayPattern):
            return self._emit_array(node.elements)

        if isinstance(node, (ObjectExpression, ObjectPattern)):
            if not node.properties:
                return "{}"
            return "{ " + ", ".join(self._emit_object_member(prop) for prop in node.properties) + " }"

        if isinstance(node, (SpreadElement, RestElement)):
            return f"...{self._emit_expr(node.argument, PREC_ASSIGN)}"

        if isinstance(node, AssignmentPattern):
            return f"{self._emit_expr(node.left)} = {self._emit_expr(node.right, PREC_ASSIGN)}"

        if isinstance(node, FunctionExpression):
            return self._emit_function(node)

        if isinstance(node, ArrowFunctionExpression):
            prefix = "async " if node.is_async else ""
            if isinstance(node.body, BlockStatement):
                body = self._emit_block(node.body)
            elif isinstance(node.body, ObjectExpression):
                body = f"({self._emit_expr(node.body)})"
            else:
                body = self._emit_expr(node.body, PREC_ASSIGN)
            return f"{prefix}({self._emit_params(node.params)}) => {body}"

        if isinstance(node, UnaryExpression):
            argument = self._emit_expr(node.argument, PREC_UNARY)
            if node.operator.isalpha():
                return f"{node.operator} {argument}"
            if argument.startswith(node.operator):
                return f"{node.operator} {argument}"
            return f"{node.operator}{argument}"

        if isinstance(node, AwaitExpression):
            return f"await {self._emit_expr(node.argument, PREC_UNARY)}"

        if isinstance(node, UpdateExpression):
            if node.prefix:
                return f"{node.operator}{self._emit_expr(node.argument, PREC_UNARY)}"
            return f"{self._emit_expr(node.argument, PREC_POSTFIX)}{node.operator}"

        if isinstance(node, (BinaryExpression, LogicalExpression)):
            return self._emit_binary(node)

        if isinstance(node, AssignmentExpression):
            return f"{self._emit_expr(node.left)} {node.operator} {self._emit_expr(node.right, PREC_ASSIGN)}"

        if isinstance(node, ConditionalExpression):
            test = self._emit_expr(node.test, PREC_CONDITIONAL + 1)
            consequent = self._emit_expr(node.consequent, PREC_ASSIGN)
            alternate = self._emit_expr(node.alternate, PREC_ASSIGN)
            return f"{test} ? {consequent} : {alternate}"

        if isinstance(node, SequenceExpression):
            return ", ".join(self._emit_expr(expr, PREC_ASSIGN) for expr in node.expressions)

        if isinstance(node, CallExpression):
            callee = self._emit_callee(node.callee)
            args = ", ".join(self._emit_expr(arg, PREC_ASSIGN) for arg in node.arguments)
            return f"{callee}?.({args})" if node.optional else f"{callee}({args})"

        if isinstance(node, NewExpression):
            callee = self._emit_expr(node.callee, PREC_CALL)
            if _contains_call(node.callee):
                callee = f"({self._emit_expr(node.callee)})"
            args = ", ".join(self._emit_expr(arg, PREC_ASSIGN) for arg in node.arguments)
            return f"new {callee}({args})"

        if isinstance(node, MemberExpression):
            obj = self._emit_callee(node.object)
            if isinstance(node.object, NumericLiteral) and obj.isdigit():
                obj = f"({obj})"
            if node.computed:
                prop = self._emit_expr(node.property)
                return f"{obj}?.[{prop}]" if node.optional else f"{obj}[{prop}]"
            prop = self._emit_expr(node.property)
            return f"{obj}?.{prop}" if node.optional else f"{obj}.{prop}"

        if isinstance(node, (JSXElement, JSXFragment)):
            return self._emit_jsx(node)

        raise TypeError(f"Cannot print node of type {node.type}")

    def _emit_callee(self, node: Node) -> str:
        if isinstance(node, NewExpression) and not node.arguments:
            return f"({self._emit_expr(node)})"
        return self._emit_expr(node, PREC_CALL)

    def _emit_binary(self, node: BinaryExpression | LogicalExpression) -> str:
        prec = _BINARY_PRECEDENCE[node.operator]
        if node.operator == "**":
            left = self._emit_expr(node.left, PREC_POSTFIX)
            right = self._emit_expr(node.right, prec)
        else:
            left = self._emit_operand(node, node.left, prec)
            right = self._emit_operand(node, node.right, prec + 1)
        return f"{left} {node.operator} {right}"

    def _emit_operand(self, parent: Node, child: Node, min_prec: int) -> str:
        # `??` cannot be mixed with `||`/`&&` without parentheses.
        if isinstance(child, LogicalExpression) and isinstance(parent, LogicalExpression):
            if (parent.operator == "??") != (child.operator == "??"):
                return f"({self._emit_expr(child)})"
        return self._emit_expr(child, min_prec)

    def _emit_array(self, elements: list[Node | None]) -> str:
        parts = ["" if element is None else self._emit_expr(element, PREC_ASSIGN) for element in elements]
        if elements and elements[-1] is None:
            parts.append("")
        return "[" + ", ".join(parts) + "]"

    def _emit_object_member(self, prop: Node) -> str:
        if not isinstance(prop, Property):
            return self._emit_expr(prop, PREC_ASSIGN)

        key = f"[{self._emit_expr(prop.key, PREC_ASSIGN)}]" if prop.computed else self._emit_expr(prop.key)

        if prop.kind in ("get", "set") or prop.method:
            func = prop.value
            prefix = "" if prop.kind == "init" else f"{prop.kind} "
            if isinstance(func, FunctionExpression) and func.is_async:
                prefix = "async "
            return f"{prefix}{key}({self._emit_params(func.params)}) {self._emit_block(func.body)}"

        if prop.shorthand and not prop.computed and isinstance(prop.key, Identifier):
            value = prop.value
            if isinstance(value, Identifier) and value.name == prop.key.name:
                return key
            if (
                isinstance(value, AssignmentPattern)
                and isinstance(value.left, Identifier)
                and value.left.name == prop.key.name
            ):
                return f"{key} = {self._emit_expr(value.right, PREC_ASSIGN)}"
        return f"{key}: {self._emit_expr(prop.value, PREC_ASSIGN)}"

    def _emit_template(self, node: TemplateLiteral) -> str:
        parts = ["`"]
        for index, quasi in enumerate(node.quasis):
            parts.append(quasi)
            if index < len(node.expressions):
                parts.append("${" + self._emit_expr(node.expressions[index]) + "}")
        parts.append("`")
        return "".join(parts)

    # -- JSX -------------------------------------------------------------

    def _emit_jsx(self, node: JSXElement | JSXFragment) -> str:
        if isinstance(node, JSXFragment):
            return "<>" + "".join(self._emit_jsx_child(child) for child in node.children) + "</>"

        name = jsx_name_text(node.name)
        attrs = "".join(" " + self._emit_jsx_attribute(attr) for attr in node.attributes)
        if node.self_closing and not node.children:
            return f"<{name}{attrs} />"
        children = "".join(self._emit_jsx_child(child) for child in node.children)
        return f"<{name}{attrs}>{children}</{name}>"

    def _emit_jsx_attribute(self, attr: Node) -> str:
        if isinstance(attr, JSXSpreadAttribute):
            return f"{{...{self._emit_expr(attr.argument, PREC_ASSIGN)}}}"
        if not isinstance(attr, JSXAttribute):
            raise TypeError(f"Cannot print node of type {attr.type} as a JSX attribute")
        name = jsx_name_text(attr.name)
        value = attr.value
        if value is None:
            return name
        if isinstance(value, StringLiteral):
            if value.raw:
                return f"{name}={value.raw}"
            quote = "'" if '"' in value.value else '"'
            return f"{name}={quote}{value.value}{quote}"
        if isinstance(value, JSXExpressionContainer):
            return f"{name}={{{self._emit_expr(value.expression)}}}"
        return f"{name}={self._emit_expr(value)}"

    def _emit_jsx_child(self, child: Node) -> str:
        if isinstance(child, JSXText):
            return child.value
        if isinstance(child, JSXExpressionContainer):
            if isinstance(child.expression, JSXEmptyExpression):
                return "{}"
            return f"{{{self._emit_expr(child.expression)}}}"
        if isinstance(child, JSXSpreadChild):
            return f"{{...{self._emit_expr(child.expression)}}}"
        return self._emit_expr(child)


_STATEMENT_TYPES = (
    ExpressionStatement,
    VariableDeclaration,
    FunctionDeclaration,
    ReturnStatement,
    BlockStatement,
    EmptyStatement,
    IfStatement,
    ForStatement,
    ForInStatement,
    ForOfStatement,
    WhileStatement,
    DoWhileStatement,
    BreakStatement,
    ContinueStatement,
    ThrowStatement,
    TryStatement,
    SwitchStatement,
    ImportDeclaration,
    ExportNamedDeclaration,
    ExportDefaultDeclaration,
    ExportAllDeclaration,
)


def _is_statement(node: Node) -> bool:
    return isinstance(node, _STATEMENT_TYPES)


def _contains_call(node: Node) -> bool:
    while isinstance(node, MemberExpression):
        node = node.object
    return isinstance(node, CallExpression)


def print_program(program: Program, indent_unit: str = "  ") -> str:
    """Render a program back to JavaScript source."""
    return Printer(indent_unit).print_program(program)


def print_node(node: Node, indent_unit: str = "  ") -> str:
    """Render one node; handy in tests and diagnostics."""
    return Printer(indent_unit).print_node(node)
