"""JavaScript/JSX parser producing the jsxtv AST."""

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
    CatchClause,
    ConditionalExpression,
    ContinueStatement,
    DoWhileStatement,
    EmptyStatement,
    ExportAllDeclaration,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    ExportSpecifier,
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
    ImportSpecifier,
    JSXAttribute,
    JSXElement,
    JSXEmptyExpression,
    JSXExpressionContainer,
    JSXFragment,
    JSXIdentifier,
    JSXMemberExpression,
    JSXNamespacedName,
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
    SwitchCase,
    SwitchStatement,
    TaggedTemplateExpression,
    TemplateLiteral,
    ThisExpression,
    ThrowStatement,
    TryStatement,
    UnaryExpression,
    UpdateExpression,
    VariableDeclaration,
    VariableDeclarator,
    WhileStatement,
)
from jsxtv.errors import ParseError
from jsxtv.lexer import Lexer, split_template
from jsxtv.source_map import SourceSpan, merge_spans
from jsxtv.tokens import Token, TokenType


_PRECEDENCE: Final[dict[str, int]] = {
    "??": 1,
    "||": 2,
    "&&": 3,
    "|": 4,
    "^": 5,
    "&": 6,
    "==": 7,
    "!=": 7,
    "===": 7,
    "!==": 7,
    "<": 8,
    ">": 8,
    "<=": 8,
    ">=": 8,
    "instanceof": 8,
    "in": 8,
    "<<": 9,
    ">>": 9,
    ">>>": 9,
    "+": 10,
    "-": 10,
    "*": 11,
    "/": 11,
    "%": 11,
    "**": 12,
}

_LOGICAL_OPERATORS: Final = frozenset({"&&", "||", "??"})

_ASSIGNMENT_OPERATORS: Final = frozenset(
    {"=", "+=", "-=", "*=", "/=", "%=", "**=", "<<=", ">>=", ">>>=", "&=", "|=", "^=", "&&=", "||=", "??="}
)

_UNARY_OPERATORS: Final = frozenset({"!", "~", "+", "-"})
_UNARY_KEYWORDS: Final = frozenset({"typeof", "void", "delete"})

# Tokens after which a bare `await` is an identifier rather than an operator.
_AWAIT_TERMINATORS: Final = frozenset({")", "]", "}", ";", ",", ":", "=", ".", "?"})

_NORMAL, _TAG, _CHILDREN = "normal", "tag", "children"


class Parser:
    """Recursive-descent + Pratt parser for JavaScript with JSX.

    The parser drives the lexer token by token, choosing the lexing mode
    (normal, JSX tag, JSX children) for every token it requests.
    """

    def __init__(self, source: str, filename: str = "<input>") -> None:
        self.filename = filename
        self._lexer = Lexer(source, filename)
        self._parenthesized: set[int] = set()
        self._no_in = False
        self._current = self._lexer.next_token()
        self._prev = self._current

    def parse_program(self) -> Program:
        """Parse the full source unit into a program AST."""
        body: list[Node] = []
        while not self._is_at_end():
            body.append(self._parse_statement())
        span = merge_spans(body[0].span, body[-1].span) if body else self._current.span
        return Program(body=body, span=span)

    def parse_expression_only(self) -> Node:
        """Parse a standalone expression and require end of input."""
        expr = self._parse_expression()
        if not self._is_at_end():
            self._error("PAR001", f"Unexpected token {self._current.value!r} after expression.", self._current)
        return expr

    # -- statements ------------------------------------------------------

    def _parse_statement(self) -> Node:
        tok = self._current

        if tok.token_type == TokenType.PUNCT:
            if tok.value == "{":
                return self._parse_block()
            if tok.value == ";":
                self._advance()
                return EmptyStatement(span=tok.span)

        if tok.token_type == TokenType.KEYWORD:
            value = tok.value
            if value in ("var", "const"):
                decl = self._parse_variable_declaration()
                self._consume_semicolon()
                return decl
            if value == "function":
                return self._parse_function(declaration=True)
            if value == "return":
                return self._parse_return()
            if value == "if":
                return self._parse_if()
            if value == "for":
                return self._parse_for()
            if value == "while":
                return self._parse_while()
            if value == "do":
                return self._parse_do_while()
            if value in ("break", "continue"):
                return self._parse_jump()
            if value == "throw":
                return self._parse_throw()
            if value == "try":
                return self._parse_try()
            if value == "switch":
                return self._parse_switch()
            if value == "import" and not self._peek_next().is_punct("(", "."):
                return self._parse_import()
            if value == "export":
                return self._parse_export()
            if value == "class":
                self._unsupported_class(tok)

        if tok.token_type == TokenType.IDENT:
            if tok.value == "let" and self._is_let_declaration():
                decl = self._parse_variable_declaration()
                self._consume_semicolon()
                return decl
            if tok.value == "async" and self._is_async_function():
                return self._parse_function(declaration=True)

        expr = self._parse_expression()
        self._consume_semicolon()
        return ExpressionStatement(expression=expr, span=self._span_from(tok))

    def _parse_block(self) -> BlockStatement:
        start = self._expect_punct("{", "Expected '{' to open block.")
        body: list[Node] = []
        while not self._check_punct("}"):
            if self._is_at_end():
                self._error("PAR002", "Expected '}' to close block.", self._current, hint="Close the block with '}'.")
            body.append(self._parse_statement())
        self._advance()
        return BlockStatement(body=body, span=self._span_from(start))

    def _parse_variable_declaration(self) -> VariableDeclaration:
        kind_tok = self._advance()
        declarations: list[VariableDeclarator] = []
        while True:
            target = self._parse_binding_target()
            init: Node | None = None
            if self._match_punct("="):
                init = self._parse_assignment()
            declarations.append(VariableDeclarator(id=target, init=init, span=merge_spans(target.span, self._prev.span)))
            if not self._match_punct(","):
                break
        return VariableDeclaration(kind=kind_tok.value, declarations=declarations, span=self._span_from(kind_tok))

    def _parse_function(self, *, declaration: bool) -> Node:
        start = self._current
        is_async = False
        if start.token_type == TokenType.IDENT and start.value == "async":
            is_async = True
            self._advance()
        self._expect_keyword("function", "Expected 'function'.")
        if self._check_punct("*"):
            self._error("PAR009", "Generator functions are not supported.", self._current)

        ident: Identifier | None = None
        if self._current.token_type == TokenType.IDENT:
            name_tok = self._advance()
            ident = Identifier(name=name_tok.value, span=name_tok.span)
        elif declaration and not self._check_punct("("):
            self._error("PAR002", "Expected function name.", self._current)

        params = self._parse_params()
        body = self._parse_function_body()
        span = self._span_from(start)
        if declaration:
            return FunctionDeclaration(id=ident, params=params, body=body, is_async=is_async, span=span)
        return FunctionExpression(id=ident, params=params, body=body, is_async=is_async, span=span)

    def _parse_function_body(self) -> BlockStatement:
        saved_no_in = self._no_in
        self._no_in = False
        try:
            return self._parse_block()
        finally:
            self._no_in = saved_no_in

    def _parse_params(self) -> list[Node]:
        self._expect_punct("(", "Expected '(' before parameters.")
        params: list[Node] = []
        while not self._check_punct(")"):
            if self._check_punct("..."):
                rest_tok = self._advance()
                argument = self._parse_binding_target()
                params.append(RestElement(argument=argument, span=self._span_from(rest_tok)))
                if not self._check_punct(")"):
                    self._error("PAR006", "Rest parameter must be last.", self._current)
                break
            params.append(self._parse_binding_element())
            if not self._match_punct(","):
                break
        self._expect_punct(")", "Expected ')' after parameters.")
        return params

    def _parse_return(self) -> ReturnStatement:
        start = self._advance()
        argument: Node | None = None
        if not self._at_statement_end():
            argument = self._parse_expression()
        self._consume_semicolon()
        return ReturnStatement(argument=argument, span=self._span_from(start))

    def _parse_if(self) -> IfStatement:
        start = self._advance()
        test = self._parse_paren_expression()
        consequent = self._parse_statement()
        alternate: Node | None = None
        if self._current.is_keyword("else"):
            self._advance()
            alternate = self._parse_statement()
        return IfStatement(test=test, consequent=consequent, alternate=alternate, span=self._span_from(start))

    def _parse_for(self) -> Node:
        start = self._advance()
        self._expect_punct("(", "Expected '(' after 'for'.")

        init: Node | None = None
        if not self._check_punct(";"):
            self._no_in = True
            try:
                if self._current.is_keyword("var", "const") or (
                    self._current.token_type == TokenType.IDENT
                    and self._current.value == "let"
                    and self._is_let_declaration()
                ):
                    init = self._parse_variable_declaration()
                else:
                    init = self._parse_expression()
            finally:
                self._no_in = False

            is_of = self._current.token_type == TokenType.IDENT and self._current.value == "of"
            if is_of or self._current.is_keyword("in"):
                self._advance()
                left = init if isinstance(init, VariableDeclaration) else self._to_pattern(init)
                right = self._parse_assignment() if is_of else self._parse_expression()
                self._expect_punct(")", "Expected ')' after for header.")
                body = self._parse_statement()
                node_type = ForOfStatement if is_of else ForInStatement
                return node_type(left=left, right=right, body=body, span=self._span_from(start))

        self._expect_punct(";", "Expected ';' in for header.")
        test = None if self._check_punct(";") else self._parse_expression()
        self._expect_punct(";", "Expected ';' in for header.")
        update = None if self._check_punct(")") else self._parse_expression()
        self._expect_punct(")", "Expected ')' after for header.")
        body = self._parse_statement()
        return ForStatement(init=init, test=test, update=update, body=body, span=self._span_from(start))

    def _parse_while(self) -> WhileStatement:
        start = self._advance()
        test = self._parse_paren_expression()
        body = self._parse_statement()
        return WhileStatement(test=test, body=body, span=self._span_from(start))

    def _parse_do_while(self) -> DoWhileStatement:
        start = self._advance()
        body = self._parse_statement()
        self._expect_keyword("while", "Expected 'while' after do body.")
        test = self._parse_paren_expression()
        self._match_punct(";")
        return DoWhileStatement(body=body, test=test, span=self._span_from(start))

    def _parse_jump(self) -> Node:
        start = self._advance()
        label: Identifier | None = None
        if self._current.token_type == TokenType.IDENT and not self._current.newline_before:
            label_tok = self._advance()
            label = Identifier(name=label_tok.value, span=label_tok.span)
        self._consume_semicolon()
        node_type = BreakStatement if start.value == "break" else ContinueStatement
        return node_type(label=label, span=self._span_from(start))

    def _parse_throw(self) -> ThrowStatement:
        start = self._advance()
        if self._current.newline_before:
            self._error("PAR002", "Illegal newline after 'throw'.", self._current)
        argument = self._parse_expression()
        self._consume_semicolon()
        return ThrowStatement(argument=argument, span=self._span_from(start))

    def _parse_try(self) -> TryStatement:
        start = self._advance()
        block = self._parse_block()
        handler: CatchClause | None = None
        finalizer: BlockStatement | None = None

        if self._current.is_keyword("catch"):
            catch_tok = self._advance()
            param: Node | None = None
            if self._match_punct("("):
                param = self._parse_binding_target()
                self._expect_punct(")", "Expected ')' after catch parameter.")
            handler = CatchClause(param=param, body=self._parse_block(), span=self._span_from(catch_tok))
        if self._current.is_keyword("finally"):
            self._advance()
            finalizer = self._parse_block()
        if handler is None and finalizer is None:
            self._error("PAR002", "Expected 'catch' or 'finally' after try block.", self._current)
        return TryStatement(block=block, handler=handler, finalizer=finalizer, span=self._span_from(start))

    def _parse_switch(self) -> SwitchStatement:
        start = self._advance()
        discriminant = self._parse_paren_expression()
        self._expect_punct("{", "Expected '{' after switch discriminant.")
        cases: list[SwitchCase] = []
        while not self._check_punct("}"):
            case_tok = self._current
            test: Node | None = None
            if self._current.is_keyword("case"):
                self._advance()
                test = self._parse_expression()
            else:
                self._expect_keyword("default", "Expected 'case' or 'default'.")
            self._expect_punct(":", "Expected ':' after case label.")
            consequent: list[Node] = []
            while not (self._check_punct("}") or self._current.is_keyword("case", "default")):
                if self._is_at_end():
                    self._error("PAR002", "Expected '}' to close switch.", self._current)
                consequent.append(self._parse_statement())
            cases.append(SwitchCase(test=test, consequent=consequent, span=self._span_from(case_tok)))
        self._advance()
        return SwitchStatement(discriminant=discriminant, cases=cases, span=self._span_from(start))

    def _parse_import(self) -> ImportDeclaration:
        start = self._advance()
        specifiers: list[Node] = []

        if self._current.token_type != TokenType.STRING:
            if self._current.token_type == TokenType.IDENT:
                local = self._parse_identifier()
                specifiers.append(ImportDefaultSpecifier(local=local, span=local.span))
                self._match_punct(",")
            if self._check_punct("*"):
                star = self._advance()
                self._expect_contextual("as")
                local = self._parse_identifier()
                specifiers.append(ImportNamespaceSpecifier(local=local, span=self._span_from(star)))
            elif self._match_punct("{"):
                while not self._check_punct("}"):
                    imported = self._parse_identifier_name()
                    local = imported
                    if self._current.token_type == TokenType.IDENT and self._current.value == "as":
                        self._advance()
                        local = self._parse_identifier()
                    specifiers.append(ImportSpecifier(imported=imported, local=local, span=merge_spans(imported.span, local.span)))
                    if not self._match_punct(","):
                        break
                self._expect_punct("}", "Expected '}' after import specifiers.")
            self._expect_contextual("from")

        source = self._parse_module_source()
        self._consume_semicolon()
        return ImportDeclaration(specifiers=specifiers, source=source, span=self._span_from(start))

    def _parse_export(self) -> Node:
        start = self._advance()

        if self._current.is_keyword("default"):
            self._advance()
            declaration: Node
            if self._current.is_keyword("function") or (
                self._current.token_type == TokenType.IDENT
                and self._current.value == "async"
                and self._is_async_function()
            ):
                declaration = self._parse_function(declaration=True)
            elif self._current.is_keyword("class"):
                self._unsupported_class(self._current)
            else:
                declaration = self._parse_assignment()
                self._consume_semicolon()
            return ExportDefaultDeclaration(declaration=declaration, span=self._span_from(start))

        if self._check_punct("*"):
            self._advance()
            exported: Identifier | None = None
            if self._current.token_type == TokenType.IDENT and self._current.value == "as":
                self._advance()
                exported = self._parse_identifier_name()
            self._expect_contextual("from")
            source = self._parse_module_source()
            self._consume_semicolon()
            return ExportAllDeclaration(source=source, exported=exported, span=self._span_from(start))

        if self._match_punct("{"):
            specifiers: list[ExportSpecifier] = []
            while not self._check_punct("}"):
                local = self._parse_identifier_name()
                exported_name = local
                if self._current.token_type == TokenType.IDENT and self._current.value == "as":
                    self._advance()
                    exported_name = self._parse_identifier_name()
                specifiers.append(ExportSpecifier(local=local, exported=exported_name, span=merge_spans(local.span, exported_name.span)))
                if not self._match_punct(","):
                    break
            self._expect_punct("}", "Expected '}' after export specifiers.")
            source: StringLiteral | None = None
            if self._current.token_type == TokenType.IDENT and self._current.value == "from":
                self._advance()
                source = self._parse_module_source()
            self._consume_semicolon()
            return ExportNamedDeclaration(specifiers=specifiers, source=source, span=self._span_from(start))

        declaration = self._parse_statement()
        if not isinstance(declaration, (VariableDeclaration, FunctionDeclaration)):
            self._error("PAR002", "Expected a declaration after 'export'.", start)
        return ExportNamedDeclaration(declaration=declaration, span=self._span_from(start))

    def _parse_module_source(self) -> StringLiteral:
        tok = self._current
        if tok.token_type != TokenType.STRING:
            self._error("PAR002", "Expected module source string.", tok)
        self._advance()
        return StringLiteral(value=tok.value, raw=tok.raw, span=tok.span)

    # -- expressions -----------------------------------------------------

    def _parse_expression(self) -> Node:
        start = self._current
        expr = self._parse_assignment()
        if not self._check_punct(","):
            return expr
        expressions = [expr]
        while self._match_punct(","):
            expressions.append(self._parse_assignment())
        return SequenceExpression(expressions=expressions, span=self._span_from(start))

    def _parse_paren_expression(self) -> Node:
        self._expect_punct("(", "Expected '('.")
        saved_no_in = self._no_in
        self._no_in = False
        try:
            expr = self._parse_expression()
        finally:
            self._no_in = saved_no_in
        self._expect_punct(")", "Expected ')'.")
        return expr

    def _parse_assignment(self) -> Node:
        start = self._current

        if start.token_type == TokenType.IDENT and start.value == "async":
            arrow = self._try_parse_async_arrow()
            if arrow is not None:
                return arrow

        left = self._parse_conditional()
        if self._is_bare_arrow(left):
            return left

        tok = self._current
        if tok.token_type == TokenType.PUNCT and tok.value in _ASSIGNMENT_OPERATORS:
            self._advance()
            if tok.value == "=":
                target = self._to_pattern(left)
            elif isinstance(left, (Identifier, MemberExpression)):
                target = left
            else:
                self._error("PAR007", "Invalid assignment target.", start)
            right = self._parse_assignment()
            return AssignmentExpression(operator=tok.value, left=target, right=right, span=self._span_from(start))
        return left

    def _parse_conditional(self) -> Node:
        start = self._current
        test = self._parse_binary(0)
        if self._is_bare_arrow(test) or not self._check_punct("?"):
            return test
        self._advance()
        saved_no_in = self._no_in
        self._no_in = False
        try:
            consequent = self._parse_assignment()
        finally:
            self._no_in = saved_no_in
        self._expect_punct(":", "Expected ':' in conditional expression.")
        alternate = self._parse_assignment()
        return ConditionalExpression(test=test, consequent=consequent, alternate=alternate, span=self._span_from(start))

    def _parse_binary(self, min_prec: int) -> Node:
        start = self._current
        left = self._parse_unary()
        if self._is_bare_arrow(left):
            return left

        while True:
            operator = self._binary_operator()
            if operator is None:
                break
            prec = _PRECEDENCE[operator]
            if prec <= min_prec:
                break
            self._advance()
            # `**` is right-associative.
            right = self._parse_binary(prec - 1 if operator == "**" else prec)
            span = self._span_from(start)
            if operator in _LOGICAL_OPERATORS:
                left = LogicalExpression(operator=operator, left=left, right=right, span=span)
            else:
                left = BinaryExpression(operator=operator, left=left, right=right, span=span)
        return left

    def _binary_operator(self) -> str | None:
        tok = self._current
        if tok.token_type == TokenType.PUNCT and tok.value in _PRECEDENCE:
            return tok.value
        if tok.is_keyword("instanceof"):
            return "instanceof"
        if tok.is_keyword("in") and not self._no_in:
            return "in"
        return None

    def _parse_unary(self) -> Node:
        tok = self._current
        if tok.token_type == TokenType.PUNCT and tok.value in _UNARY_OPERATORS:
            self._advance()
            argument = self._parse_unary()
            return UnaryExpression(operator=tok.value, argument=argument, span=self._span_from(tok))
        if tok.token_type == TokenType.KEYWORD and tok.value in _UNARY_KEYWORDS:
            self._advance()
            argument = self._parse_unary()
            return UnaryExpression(operator=tok.value, argument=argument, span=self._span_from(tok))
        if tok.is_punct("++", "--"):
            self._advance()
            argument = self._parse_unary()
            if not isinstance(argument, (Identifier, MemberExpression)):
                self._error("PAR007", "Invalid update target.", tok)
            return UpdateExpression(operator=tok.value, argument=argument, prefix=True, span=self._span_from(tok))
        if tok.token_type == TokenType.IDENT and tok.value == "await" and self._is_await_operator():
            self._advance()
            argument = self._parse_unary()
            return AwaitExpression(argument=argument, span=self._span_from(tok))
        return self._parse_postfix()

    def _parse_postfix(self) -> Node:
        start = self._current
        expr = self._parse_call_member()
        if self._is_bare_arrow(expr):
            return expr
        tok = self._current
        if tok.is_punct("++", "--") and not tok.newline_before:
            if not isinstance(expr, (Identifier, MemberExpression)):
                self._error("PAR007", "Invalid update target.", tok)
            self._advance()
            return UpdateExpression(operator=tok.value, argument=expr, prefix=False, span=self._span_from(start))
        return expr

    def _parse_call_member(self) -> Node:
        start = self._current
        if start.is_keyword("new"):
            expr = self._parse_new()
        else:
            expr = self._parse_primary()
            if self._is_bare_arrow(expr):
                return expr
        return self._parse_call_tail(expr, start, allow_calls=True)

    def _parse_call_tail(self, expr: Node, start: Token, *, allow_calls: bool) -> Node:
        while True:
            tok = self._current
            if tok.is_punct("."):
                self._advance()
                prop = self._parse_identifier_name()
                expr = MemberExpression(object=expr, property=prop, span=self._span_from(start))
            elif tok.is_punct("?."):
                self._advance()
                if allow_calls and self._check_punct("("):
                    args = self._parse_arguments()
                    expr = CallExpression(callee=expr, arguments=args, optional=True, span=self._span_from(start))
                elif self._match_punct("["):
                    prop = self._parse_expression()
                    self._expect_punct("]", "Expected ']' after computed member.")
                    expr = MemberExpression(object=expr, property=prop, computed=True, optional=True, span=self._span_from(start))
                else:
                    prop = self._parse_identifier_name()
                    expr = MemberExpression(object=expr, property=prop, optional=True, span=self._span_from(start))
            elif tok.is_punct("["):
                self._advance()
                saved_no_in = self._no_in
                self._no_in = False
                try:
                    prop = self._parse_expression()
                finally:
                    self._no_in = saved_no_in
                self._expect_punct("]", "Expected ']' after computed member.")
                expr = MemberExpression(object=expr, property=prop, computed=True, span=self._span_from(start))
            elif allow_calls and tok.is_punct("("):
                args = self._parse_arguments()
                expr = CallExpression(callee=expr, arguments=args, span=self._span_from(start))
            elif tok.token_type == TokenType.TEMPLATE:
                quasi = self._parse_template(tok)
                expr = TaggedTemplateExpression(tag=expr, quasi=quasi, span=self._span_from(start))
            else:
                return expr

    def _parse_new(self) -> Node:
        start = self._advance()
        if self._current.is_keyword("new"):
            callee = self._parse_new()
        else:
            callee = self._parse_primary()
        callee = self._parse_call_tail(callee, start, allow_calls=False)
        args: list[Node] = []
        if self._check_punct("("):
            args = self._parse_arguments()
        return NewExpression(callee=callee, arguments=args, span=self._span_from(start))

    def _parse_arguments(self) -> list[Node]:
        self._expect_punct("(", "Expected '('.")
        saved_no_in = self._no_in
        self._no_in = False
        args: list[Node] = []
        try:
            while not self._check_punct(")"):
                if self._check_punct("..."):
                    spread_tok = self._advance()
                    args.append(SpreadElement(argument=self._parse_assignment(), span=self._span_from(spread_tok)))
                else:
                    args.append(self._parse_assignment())
                if not self._match_punct(","):
                    break
        finally:
            self._no_in = saved_no_in
        self._expect_punct(")", "Expected ')' after arguments.")
        return args

    def _parse_primary(self) -> Node:
        tok = self._current
        token_type = tok.token_type

        if token_type == TokenType.IDENT:
            self._advance()
            ident = Identifier(name=tok.value, span=tok.span)
            if self._check_punct("=>") and not self._current.newline_before:
                return self._parse_arrow_body([ident], tok, is_async=False)
            return ident

        if token_type == TokenType.NUMBER:
            self._advance()
            return NumericLiteral(value=_number_value(tok.value), raw=tok.raw, span=tok.span)

        if token_type == TokenType.STRING:
            self._advance()
            return StringLiteral(value=tok.value, raw=tok.raw, span=tok.span)

        if token_type == TokenType.TEMPLATE:
            return self._parse_template(tok)

        if token_type == TokenType.REGEX:
            self._advance()
            return RegExpLiteral(raw=tok.raw, span=tok.span)

        if token_type == TokenType.KEYWORD:
            if tok.value in ("true", "false"):
                self._advance()
                return BooleanLiteral(value=tok.value == "true", span=tok.span)
            if tok.value == "null":
                self._advance()
                return NullLiteral(span=tok.span)
            if tok.value == "this":
                self._advance()
                return ThisExpression(span=tok.span)
            if tok.value == "function":
                return self._parse_function(declaration=False)
            if tok.value in ("super", "import"):
                self._advance()
                return Identifier(name=tok.value, span=tok.span)
            if tok.value == "class":
                self._unsupported_class(tok)

        if token_type == TokenType.PUNCT:
            if tok.value == "(":
                return self._parse_parenthesized()
            if tok.value == "[":
                return self._parse_array_literal()
            if tok.value == "{":
                return self._parse_object_literal()
            if tok.value == "<":
                return self._parse_jsx(_NORMAL)

        if token_type == TokenType.EOF:
            self._error("PAR001", "Unexpected end of input.", tok, hint="The expression is incomplete.")
        self._error("PAR001", f"Unexpected token {tok.value!r}.", tok, hint="Expected an expression.")

    def _parse_parenthesized(self) -> Node:
        start = self._advance()
        saved_no_in = self._no_in
        self._no_in = False
        items: list[Node] = []
        rest: RestElement | None = None
        try:
            while not self._check_punct(")"):
                if self._check_punct("..."):
                    rest_tok = self._advance()
                    rest = RestElement(argument=self._parse_binding_target(), span=self._span_from(rest_tok))
                    break
                items.append(self._parse_assignment())
                if not self._match_punct(","):
                    break
        finally:
            self._no_in = saved_no_in
        self._expect_punct(")", "Expected ')'.")

        if self._check_punct("=>") and not self._current.newline_before:
            params = [self._to_param(item) for item in items]
            if rest is not None:
                params.append(rest)
            return self._parse_arrow_body(params, start, is_async=False)

        if rest is not None or not items:
            self._error("PAR005", "Expected '=>' after arrow parameters.", self._current)
        expr = items[0] if len(items) == 1 else SequenceExpression(expressions=items, span=self._span_from(start))
        self._parenthesized.add(id(expr))
        return expr

    def _try_parse_async_arrow(self) -> Node | None:
        next_tok = self._peek_next()
        if next_tok.newline_before:
            return None
        start = self._current
        if next_tok.token_type == TokenType.IDENT:
            self._advance()
            param_tok = self._advance()
            if not self._check_punct("=>"):
                self._error("PAR005", "Expected '=>' after async arrow parameter.", self._current)
            return self._parse_arrow_body([Identifier(name=param_tok.value, span=param_tok.span)], start, is_async=True)
        if next_tok.is_punct("("):
            self._advance()
            args = self._parse_arguments()
            if self._check_punct("=>") and not self._current.newline_before:
                params = [self._to_param(arg) for arg in args]
                return self._parse_arrow_body(params, start, is_async=True)
            callee = Identifier(name="async", span=start.span)
            call = CallExpression(callee=callee, arguments=args, span=self._span_from(start))
            return self._parse_call_tail(call, start, allow_calls=True)
        return None

    def _parse_arrow_body(self, params: list[Node], start: Token, *, is_async: bool) -> ArrowFunctionExpression:
        self._expect_punct("=>", "Expected '=>'.")
        if self._check_punct("{"):
            body: Node = self._parse_function_body()
        else:
            body = self._parse_assignment()
        return ArrowFunctionExpression(params=params, body=body, is_async=is_async, span=self._span_from(start))

    def _parse_array_literal(self) -> ArrayExpression:
        start = self._advance()
        saved_no_in = self._no_in
        self._no_in = False
        elements: list[Node | None] = []
        try:
            while not self._check_punct("]"):
                if self._check_punct(","):
                    self._advance()
                    elements.append(None)
                    continue
                if self._check_punct("..."):
                    spread_tok = self._advance()
                    elements.append(SpreadElement(argument=self._parse_assignment(), span=self._span_from(spread_tok)))
                else:
                    elements.append(self._parse_assignment())
                if not self._match_punct(","):
                    break
        finally:
            self._no_in = saved_no_in
        self._expect_punct("]", "Expected ']' after array elements.")
        return ArrayExpression(elements=elements, span=self._span_from(start))

    def _parse_object_literal(self) -> ObjectExpression:
        start = self._advance()
        saved_no_in = self._no_in
        self._no_in = False
        properties: list[Node] = []
        try:
            while not self._check_punct("}"):
                properties.append(self._parse_object_member())
                if not self._match_punct(","):
                    break
        finally:
            self._no_in = saved_no_in
        self._expect_punct("}", "Expected '}' after object properties.")
        return ObjectExpression(properties=properties, span=self._span_from(start))

    def _parse_object_member(self) -> Node:
        start = self._current
        if self._check_punct("..."):
            self._advance()
            return SpreadElement(argument=self._parse_assignment(), span=self._span_from(start))

        kind = "init"
        is_async = False
        if start.token_type == TokenType.IDENT and start.value in ("get", "set", "async"):
            following = self._peek_next()
            if not following.is_punct("(", ",", ":", "}", "="):
                self._advance()
                if start.value == "async":
                    is_async = True
                else:
                    kind = start.value

        key, computed = self._parse_property_key()

        if self._check_punct("("):
            params = self._parse_params()
            body = self._parse_function_body()
            value = FunctionExpression(id=None, params=params, body=body, is_async=is_async, span=self._span_from(start))
            return Property(key=key, value=value, computed=computed, kind=kind, method=kind == "init", span=self._span_from(start))

        if self._match_punct(":"):
            value = self._parse_assignment()
            return Property(key=key, value=value, computed=computed, span=self._span_from(start))

        if computed or not isinstance(key, Identifier):
            self._error("PAR002", "Expected ':' after property key.", self._current)
        if self._match_punct("="):
            default = self._parse_assignment()
            value = AssignmentPattern(left=key, right=default, span=self._span_from(start))
            return Property(key=key, value=value, shorthand=True, span=self._span_from(start))
        return Property(key=key, value=key, shorthand=True, span=self._span_from(start))

    def _parse_property_key(self) -> tuple[Node, bool]:
        tok = self._current
        if tok.is_punct("["):
            self._advance()
            key = self._parse_assignment()
            self._expect_punct("]", "Expected ']' after computed key.")
            return key, True
        if tok.token_type == TokenType.STRING:
            self._advance()
            return StringLiteral(value=tok.value, raw=tok.raw, span=tok.span), False
        if tok.token_type == TokenType.NUMBER:
            self._advance()
            return NumericLiteral(value=_number_value(tok.value), raw=tok.raw, span=tok.span), False
        return self._parse_identifier_name(), False

    def _parse_template(self, tok: Token) -> TemplateLiteral:
        self._advance()
        quasis, sources = split_template(tok.value)
        expressions = [Parser(source, self.filename).parse_expression_only() for source in sources]
        return TemplateLiteral(quasis=quasis, expressions=expressions, span=tok.span)

    # -- patterns --------------------------------------------------------

    def _parse_binding_target(self) -> Node:
        tok = self._current
        if tok.is_punct("["):
            return self._parse_array_pattern()
        if tok.is_punct("{"):
            return self._parse_object_pattern()
        return self._parse_identifier()

    def _parse_binding_element(self) -> Node:
        start = self._current
        target = self._parse_binding_target()
        if self._match_punct("="):
            default = self._parse_assignment()
            return AssignmentPattern(left=target, right=default, span=self._span_from(start))
        return target

    def _parse_array_pattern(self) -> ArrayPattern:
        start = self._advance()
        elements: list[Node | None] = []
        while not self._check_punct("]"):
            if self._check_punct(","):
                self._advance()
                elements.append(None)
                continue
            if self._check_punct("..."):
                rest_tok = self._advance()
                elements.append(RestElement(argument=self._parse_binding_target(), span=self._span_from(rest_tok)))
                break
            elements.append(self._parse_binding_element())
            if not self._match_punct(","):
                break
        self._expect_punct("]", "Expected ']' after array pattern.")
        return ArrayPattern(elements=elements, span=self._span_from(start))

    def _parse_object_pattern(self) -> ObjectPattern:
        start = self._advance()
        properties: list[Node] = []
        while not self._check_punct("}"):
            prop_start = self._current
            if self._check_punct("..."):
                self._advance()
                properties.append(RestElement(argument=self._parse_identifier(), span=self._span_from(prop_start)))
                break
            key, computed = self._parse_property_key()
            if self._match_punct(":"):
                value = self._parse_binding_element()
                properties.append(Property(key=key, value=value, computed=computed, span=self._span_from(prop_start)))
            else:
                if computed or not isinstance(key, Identifier):
                    self._error("PAR002", "Expected ':' in object pattern.", self._current)
                value = key
                if self._match_punct("="):
                    value = AssignmentPattern(left=key, right=self._parse_assignment(), span=self._span_from(prop_start))
                properties.append(Property(key=key, value=value, shorthand=True, span=self._span_from(prop_start)))
            if not self._match_punct(","):
                break
        self._expect_punct("}", "Expected '}' after object pattern.")
        return ObjectPattern(properties=properties, span=self._span_from(start))

    def _to_pattern(self, node: Node) -> Node:
        """Reinterpret an expression as an assignment target."""
        if isinstance(node, (Identifier, MemberExpression, ObjectPattern, ArrayPattern, AssignmentPattern)):
            return node
        if isinstance(node, ObjectExpression):
            properties: list[Node] = []
            for prop in node.properties:
                if isinstance(prop, SpreadElement):
                    properties.append(RestElement(argument=self._to_pattern(prop.argument), span=prop.span))
                elif isinstance(prop, Property) and prop.kind == "init" and not prop.method:
                    properties.append(
                        Property(
                            key=prop.key,
                            value=self._to_pattern(prop.value),
                            computed=prop.computed,
                            shorthand=prop.shorthand,
                            span=prop.span,
                        )
                    )
                else:
                    self._invalid_target(prop)
            return ObjectPattern(properties=properties, span=node.span)
        if isinstance(node, ArrayExpression):
            elements: list[Node | None] = []
            for element in node.elements:
                if element is None:
                    elements.append(None)
                elif isinstance(element, SpreadElement):
                    elements.append(RestElement(argument=self._to_pattern(element.argument), span=element.span))
                else:
                    elements.append(self._to_pattern(element))
            return ArrayPattern(elements=elements, span=node.span)
        if isinstance(node, AssignmentExpression) and node.operator == "=":
            return AssignmentPattern(left=node.left, right=node.right, span=node.span)
        self._invalid_target(node)

    def _to_param(self, node: Node) -> Node:
        if isinstance(node, MemberExpression) or id(node) in self._parenthesized:
            self._invalid_target(node, code="PAR005", message="Invalid arrow function parameter.")
        return self._to_pattern(node)

    def _invalid_target(self, node: Node, code: str = "PAR007", message: str = "Invalid assignment target.") -> None:
        raise ParseError(
            code=code,
            message=message,
            span=node.span,
            hint="Only identifiers, member expressions and destructuring patterns can be assigned.",
        )

    # -- JSX -------------------------------------------------------------

    def _parse_jsx(self, after_mode: str) -> Node:
        lt = self._current
        self._advance(_TAG)
        return self._parse_jsx_after_lt(lt, after_mode)

    def _parse_jsx_after_lt(self, lt: Token, after_mode: str) -> Node:
        if self._check_punct(">"):
            self._advance(_CHILDREN)
            children = self._parse_jsx_children(None, after_mode)
            return JSXFragment(children=children, span=self._span_from(lt))

        name = self._parse_jsx_element_name()
        attributes: list[Node] = []
        while True:
            tok = self._current
            if tok.is_punct("/"):
                self._advance(_TAG)
                self._expect_jsx_punct(">", after_mode, "Expected '>' after '/' in self-closing tag.")
                return JSXElement(name=name, attributes=attributes, self_closing=True, span=self._span_from(lt))
            if tok.is_punct(">"):
                self._advance(_CHILDREN)
                children = self._parse_jsx_children(name, after_mode)
                return JSXElement(name=name, attributes=attributes, children=children, span=self._span_from(lt))
            if tok.is_punct("{"):
                self._advance()
                self._expect_punct("...", "Expected '...' in JSX spread attribute.")
                argument = self._parse_assignment()
                self._expect_jsx_punct("}", _TAG, "Expected '}' after JSX spread attribute.")
                attributes.append(JSXSpreadAttribute(argument=argument, span=self._span_from(tok)))
                continue
            if tok.token_type == TokenType.JSX_IDENT:
                attributes.append(self._parse_jsx_attribute())
                continue
            if tok.token_type == TokenType.EOF:
                self._error("PAR003", "Unterminated JSX tag.", lt, hint="Close the tag with '>' or '/>'.")
            self._error("PAR001", f"Unexpected token {tok.value!r} in JSX tag.", tok)

    def _parse_jsx_element_name(self) -> Node:
        tok = self._current
        if tok.token_type != TokenType.JSX_IDENT:
            self._error("PAR002", "Expected JSX tag name.", tok)
        self._advance(_TAG)
        name: Node = JSXIdentifier(name=tok.value, span=tok.span)
        if self._check_punct(":"):
            self._advance(_TAG)
            local = self._expect_jsx_ident()
            return JSXNamespacedName(namespace=name, name=local, span=self._span_from(tok))
        while self._check_punct("."):
            self._advance(_TAG)
            prop = self._expect_jsx_ident()
            name = JSXMemberExpression(object=name, property=prop, span=self._span_from(tok))
        return name

    def _parse_jsx_attribute(self) -> JSXAttribute:
        start = self._current
        name: Node = self._expect_jsx_ident()
        if self._check_punct(":"):
            self._advance(_TAG)
            local = self._expect_jsx_ident()
            name = JSXNamespacedName(namespace=name, name=local, span=self._span_from(start))
        if not self._check_punct("="):
            return JSXAttribute(name=name, span=self._span_from(start))

        self._advance(_TAG)
        tok = self._current
        value: Node
        if tok.token_type == TokenType.JSX_STRING:
            self._advance(_TAG)
            value = StringLiteral(value=tok.value, raw=tok.raw, span=tok.span)
        elif tok.is_punct("{"):
            self._advance()
            if self._check_punct("}"):
                self._error("PAR001", "JSX attribute value must not be an empty expression.", self._current)
            expression = self._parse_assignment()
            self._expect_jsx_punct("}", _TAG, "Expected '}' after JSX attribute expression.")
            value = JSXExpressionContainer(expression=expression, span=self._span_from(tok))
        elif tok.is_punct("<"):
            value = self._parse_jsx(_TAG)
        else:
            self._error("PAR002", "Expected JSX attribute value.", tok)
        return JSXAttribute(name=name, value=value, span=self._span_from(start))

    def _parse_jsx_children(self, opening_name: Node | None, after_mode: str) -> list[Node]:
        children: list[Node] = []
        while True:
            tok = self._current
            if tok.token_type == TokenType.JSX_TEXT:
                self._advance(_CHILDREN)
                children.append(JSXText(value=tok.value, span=tok.span))
            elif tok.is_punct("{"):
                children.append(self._parse_jsx_child_expression())
            elif tok.is_punct("<"):
                self._advance(_TAG)
                if self._check_punct("/"):
                    self._advance(_TAG)
                    self._parse_jsx_closing(tok, opening_name, after_mode)
                    return children
                children.append(self._parse_jsx_after_lt(tok, _CHILDREN))
            else:
                self._error("PAR003", "Unterminated JSX element.", tok, hint="Add the matching closing tag.")

    def _parse_jsx_child_expression(self) -> Node:
        start = self._current
        self._advance()
        if self._check_punct("}"):
            empty = JSXEmptyExpression(span=self._current.span)
            self._expect_jsx_punct("}", _CHILDREN, "Expected '}'.")
            return JSXExpressionContainer(expression=empty, span=self._span_from(start))
        if self._match_punct("..."):
            expression = self._parse_expression()
            self._expect_jsx_punct("}", _CHILDREN, "Expected '}' after JSX spread child.")
            return JSXSpreadChild(expression=expression, span=self._span_from(start))
        expression = self._parse_expression()
        self._expect_jsx_punct("}", _CHILDREN, "Expected '}' after JSX expression.")
        return JSXExpressionContainer(expression=expression, span=self._span_from(start))

    def _parse_jsx_closing(self, lt: Token, opening_name: Node | None, after_mode: str) -> None:
        if opening_name is None:
            self._expect_jsx_punct(">", after_mode, "Expected '>' to close JSX fragment.")
            return
        closing_name = self._parse_jsx_element_name()
        if jsx_name_text(closing_name) != jsx_name_text(opening_name):
            raise ParseError(
                code="PAR004",
                message=(
                    f"Expected corresponding closing tag for <{jsx_name_text(opening_name)}>, "
                    f"found </{jsx_name_text(closing_name)}>."
                ),
                span=self._span_from(lt),
                hint="Check the nesting of JSX tags.",
            )
        self._expect_jsx_punct(">", after_mode, "Expected '>' after closing tag name.")

    def _expect_jsx_ident(self) -> JSXIdentifier:
        tok = self._current
        if tok.token_type != TokenType.JSX_IDENT:
            self._error("PAR002", "Expected JSX identifier.", tok)
        self._advance(_TAG)
        return JSXIdentifier(name=tok.value, span=tok.span)

    def _expect_jsx_punct(self, value: str, next_mode: str, message: str) -> Token:
        if not self._check_punct(value):
            self._error("PAR002", message, self._current, hint="Adjust token order to match grammar.")
        if next_mode == _NORMAL:
            self._lexer.mark_operand_end()
        return self._advance(next_mode)

    # -- token helpers ---------------------------------------------------

    def _advance(self, mode: str = _NORMAL) -> Token:
        self._prev = self._current
        if self._current.token_type != TokenType.EOF:
            if mode == _TAG:
                self._current = self._lexer.next_jsx_tag_token()
            elif mode == _CHILDREN:
                self._current = self._lexer.next_jsx_child_token()
            else:
                self._current = self._lexer.next_token()
        return self._prev

    def _peek_next(self) -> Token:
        state = self._lexer.snapshot()
        try:
            return self._lexer.next_token()
        finally:
            self._lexer.restore(state)

    def _check_punct(self, value: str) -> bool:
        return self._current.is_punct(value)

    def _match_punct(self, value: str) -> bool:
        if self._check_punct(value):
            self._advance()
            return True
        return False

    def _expect_punct(self, value: str, message: str) -> Token:
        if self._check_punct(value):
            return self._advance()
        self._error("PAR002", message, self._current, hint="Adjust token order to match grammar.")

    def _expect_keyword(self, value: str, message: str) -> Token:
        if self._current.is_keyword(value):
            return self._advance()
        self._error("PAR002", message, self._current, hint="Adjust token order to match grammar.")

    def _expect_contextual(self, value: str) -> Token:
        if self._current.token_type == TokenType.IDENT and self._current.value == value:
            return self._advance()
        self._error("PAR002", f"Expected '{value}'.", self._current)

    def _parse_identifier(self) -> Identifier:
        tok = self._current
        if tok.token_type != TokenType.IDENT:
            self._error("PAR002", f"Expected identifier, found {tok.value!r}.", tok)
        self._advance()
        return Identifier(name=tok.value, span=tok.span)

    def _parse_identifier_name(self) -> Identifier:
        """Identifier where reserved words are allowed (`a.default`, `{ if: 1 }`)."""
        tok = self._current
        if tok.token_type not in (TokenType.IDENT, TokenType.KEYWORD):
            self._error("PAR002", f"Expected property name, found {tok.value!r}.", tok)
        self._advance()
        return Identifier(name=tok.value, span=tok.span)

    def _consume_semicolon(self) -> None:
        if self._match_punct(";"):
            return
        if self._at_statement_end():
            return
        self._error("PAR002", "Expected ';' after statement.", self._current, hint="Insert ';' or a line break.")

    def _at_statement_end(self) -> bool:
        tok = self._current
        return tok.is_punct(";", "}") or tok.token_type == TokenType.EOF or tok.newline_before

    def _is_let_declaration(self) -> bool:
        following = self._peek_next()
        return following.token_type == TokenType.IDENT or following.is_punct("[", "{")

    def _is_async_function(self) -> bool:
        following = self._peek_next()
        return following.is_keyword("function") and not following.newline_before

    def _is_await_operator(self) -> bool:
        following = self._peek_next()
        if following.token_type == TokenType.EOF:
            return False
        return not (following.token_type == TokenType.PUNCT and following.value in _AWAIT_TERMINATORS)

    def _is_bare_arrow(self, node: Node) -> bool:
        return isinstance(node, ArrowFunctionExpression) and id(node) not in self._parenthesized

    def _is_at_end(self) -> bool:
        return self._current.token_type == TokenType.EOF

    def _span_from(self, start: Token) -> SourceSpan | None:
        return merge_spans(start.span, self._prev.span)

    def _unsupported_class(self, tok: Token) -> None:
        raise ParseError(
            code="PAR010",
            message="Class declarations are not supported.",
            span=tok.span,
            hint="Write the component as a function.",
        )

    def _error(self, code: str, message: str, tok: Token, hint: str = "") -> None:
        raise ParseError(code=code, message=message, span=tok.span, hint=hint)


def _number_value(text: str) -> int | float:
    cleaned = text.replace("_", "")
    if cleaned.endswith("n"):
        return int(cleaned[:-1], 0)
    if cleaned[:2].lower() in ("0x", "0o", "0b"):
        return int(cleaned, 0)
    if any(ch in cleaned for ch in ".eE"):
        return float(cleaned)
    return int(cleaned)


def jsx_name_text(name: Node) -> str:
    """Render a JSX tag name (`div`, `UI.Button`, `svg:path`) as text."""
    if isinstance(name, JSXIdentifier):
        return name.name
    if isinstance(name, JSXMemberExpression):
        return f"{jsx_name_text(name.object)}.{name.property.name}"
    if isinstance(name, JSXNamespacedName):
        return f"{name.namespace.name}:{name.name.name}"
    return ""


def parse_source(source: str, filename: str = "<input>") -> Program:
    """Parse JavaScript/JSX source text into a program AST."""
    return Parser(source, filename).parse_program()


def parse_expression(source: str, filename: str = "<snippet>") -> Node:
    """Parse a single expression snippet."""
    return Parser(source, filename).parse_expression_only()
