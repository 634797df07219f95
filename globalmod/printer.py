# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Render an `ast.Program` back to JavaScript source.

Output is deterministic: two-space indentation, one statement per line,
explicit semicolons, parentheses only where precedence requires them.
Literals parsed from source keep their raw spelling; synthesized string
literals are printed with double quotes.
"""

from __future__ import annotations

import json
from typing import List, Optional

from globalmod.parser import ast as js

_INDENT = "  "

# Expression precedence, loosest first.
SEQUENCE = 1
ASSIGN = 2
CONDITIONAL = 3
LOGICAL_OR = 4
LOGICAL_AND = 5
BIT_OR = 6
BIT_XOR = 7
BIT_AND = 8
EQUALITY = 9
RELATIONAL = 10
SHIFT = 11
ADDITIVE = 12
MULTIPLICATIVE = 13
EXPONENT = 14
UNARY = 15
POSTFIX = 16
CALL = 17
MEMBER = 18
PRIMARY = 19

_BINARY_PRECEDENCE = {
	"||": LOGICAL_OR,
	"??": LOGICAL_OR,
	"&&": LOGICAL_AND,
	"|": BIT_OR,
	"^": BIT_XOR,
	"&": BIT_AND,
	"==": EQUALITY,
	"!=": EQUALITY,
	"===": EQUALITY,
	"!==": EQUALITY,
	"<": RELATIONAL,
	">": RELATIONAL,
	"<=": RELATIONAL,
	">=": RELATIONAL,
	"instanceof": RELATIONAL,
	"in": RELATIONAL,
	"<<": SHIFT,
	">>": SHIFT,
	">>>": SHIFT,
	"+": ADDITIVE,
	"-": ADDITIVE,
	"*": MULTIPLICATIVE,
	"/": MULTIPLICATIVE,
	"%": MULTIPLICATIVE,
	"**": EXPONENT,
}


def print_module(program: js.Program) -> str:
	"""Render `program`; the result ends with a newline unless the body is empty."""
	lines = _Printer().statements(program.body, 0)
	return "\n".join(lines) + "\n" if lines else ""


def print_expression(expr: js.Node) -> str:
	return _Printer().expr(expr, SEQUENCE)


def precedence(expr: js.Node) -> int:
	if isinstance(expr, js.SequenceExpression):
		return SEQUENCE
	if isinstance(expr, (js.AssignmentExpression, js.ArrowFunctionExpression, js.YieldExpression)):
		return ASSIGN
	if isinstance(expr, js.ConditionalExpression):
		return CONDITIONAL
	if isinstance(expr, (js.BinaryExpression, js.LogicalExpression)):
		return _BINARY_PRECEDENCE[expr.operator]
	if isinstance(expr, (js.UnaryExpression, js.AwaitExpression)):
		return UNARY
	if isinstance(expr, js.UpdateExpression):
		return UNARY if expr.prefix else POSTFIX
	if isinstance(expr, (js.CallExpression, js.ImportExpression)):
		return CALL
	if isinstance(expr, (js.MemberExpression, js.NewExpression, js.TaggedTemplateExpression)):
		return MEMBER
	return PRIMARY


def _quote(value: str) -> str:
	return json.dumps(value, ensure_ascii=False)


class _Printer:
	def __init__(self) -> None:
		# Indent depth of the statement being printed; nested function bodies use it.
		self.depth = 0
		# Inside a `for (init;;)` head, where a bare `in` would read as for-in.
		self.no_in = False

	# --- statements ------------------------------------------------------------

	def statements(self, body: List[js.Stmt], depth: int) -> List[str]:
		lines: List[str] = []
		for stmt in body:
			lines.extend(self.stmt(stmt, depth))
		return lines

	def block(self, block: js.BlockStatement, depth: int) -> str:
		"""Render a block opened on the current line; inner lines carry their own indent."""
		if not block.body:
			return "{}"
		inner = self.statements(block.body, depth + 1)
		return "{\n" + "\n".join(inner) + "\n" + _INDENT * depth + "}"

	def stmt(self, stmt: js.Stmt, depth: int) -> List[str]:
		pad = _INDENT * depth
		return [pad + self.stmt_text(stmt, depth)]

	def stmt_text(self, stmt: js.Stmt, depth: int) -> str:
		saved, self.depth = self.depth, depth
		saved_no_in, self.no_in = self.no_in, False
		try:
			return self._stmt_text(stmt, depth)
		finally:
			self.depth = saved
			self.no_in = saved_no_in

	def _stmt_text(self, stmt: js.Stmt, depth: int) -> str:
		if isinstance(stmt, js.ExpressionStatement):
			text = self.expr(stmt.expression, SEQUENCE)
			if _needs_statement_parens(stmt.expression):
				text = f"({text})"
			return text + ";"
		if isinstance(stmt, js.VariableDeclaration):
			return self.var_decl(stmt) + ";"
		if isinstance(stmt, js.FunctionDeclaration):
			return self.function(stmt, depth, "function")
		if isinstance(stmt, js.ClassDeclaration):
			return self.class_(stmt, depth)
		if isinstance(stmt, js.BlockStatement):
			return self.block(stmt, depth)
		if isinstance(stmt, js.EmptyStatement):
			return ";"
		if isinstance(stmt, js.ReturnStatement):
			if stmt.argument is None:
				return "return;"
			return f"return {self.expr(stmt.argument, SEQUENCE)};"
		if isinstance(stmt, js.ThrowStatement):
			return f"throw {self.expr(stmt.argument, SEQUENCE)};"
		if isinstance(stmt, js.BreakStatement):
			return "break;"
		if isinstance(stmt, js.ContinueStatement):
			return "continue;"
		if isinstance(stmt, js.IfStatement):
			return self.if_(stmt, depth)
		if isinstance(stmt, js.ForStatement):
			init = ""
			self.no_in = True
			try:
				if isinstance(stmt.init, js.VariableDeclaration):
					init = self.var_decl(stmt.init)
				elif stmt.init is not None:
					init = self.expr(stmt.init, SEQUENCE)
			finally:
				self.no_in = False
			test = self.expr(stmt.test, SEQUENCE) if stmt.test is not None else ""
			update = self.expr(stmt.update, SEQUENCE) if stmt.update is not None else ""
			head = f"for ({init};{' ' + test if test else ''};{' ' + update if update else ''})"
			return head + self.body(stmt.body, depth)
		if isinstance(stmt, js.ForInStatement):
			return f"for ({self.var_decl(stmt.left)} in {self.expr(stmt.right, SEQUENCE)})" + self.body(stmt.body, depth)
		if isinstance(stmt, js.ForOfStatement):
			keyword = "for await" if stmt.is_await else "for"
			return f"{keyword} ({self.var_decl(stmt.left)} of {self.expr(stmt.right, ASSIGN)})" + self.body(stmt.body, depth)
		if isinstance(stmt, js.WhileStatement):
			return f"while ({self.expr(stmt.test, SEQUENCE)})" + self.body(stmt.body, depth)
		if isinstance(stmt, js.DoWhileStatement):
			tail = f"while ({self.expr(stmt.test, SEQUENCE)});"
			if isinstance(stmt.body, js.BlockStatement):
				return "do " + self.block(stmt.body, depth) + " " + tail
			return "do" + self.body(stmt.body, depth) + "\n" + _INDENT * depth + tail
		if isinstance(stmt, js.TryStatement):
			text = "try " + self.block(stmt.block, depth)
			if stmt.handler is not None:
				param = f"({self.pattern(stmt.handler.param)}) " if stmt.handler.param is not None else ""
				text += f" catch {param}" + self.block(stmt.handler.body, depth)
			if stmt.finalizer is not None:
				text += " finally " + self.block(stmt.finalizer, depth)
			return text
		if isinstance(stmt, js.SwitchStatement):
			pad = _INDENT * (depth + 1)
			lines = [f"switch ({self.expr(stmt.discriminant, SEQUENCE)}) {{"]
			for case in stmt.cases:
				label = f"case {self.expr(case.test, SEQUENCE)}:" if case.test is not None else "default:"
				lines.append(pad + label)
				lines.extend(self.statements(case.consequent, depth + 2))
			lines.append(_INDENT * depth + "}")
			return "\n".join(lines)
		if isinstance(stmt, js.ImportDeclaration):
			return self.import_(stmt)
		if isinstance(stmt, js.ExportNamedDeclaration):
			if stmt.declaration is not None:
				return "export " + self.stmt_text(stmt.declaration, depth)
			specs = ", ".join(self.export_spec(spec) for spec in stmt.specifiers)
			text = f"export {{ {specs} }}" if specs else "export {}"
			if stmt.source is not None:
				text += f" from {self.literal(stmt.source)}"
			return text + ";"
		if isinstance(stmt, js.ExportDefaultDeclaration):
			decl = stmt.declaration
			if isinstance(decl, js.FunctionDeclaration):
				return "export default " + self.function(decl, depth, "function")
			if isinstance(decl, js.ClassDeclaration):
				return "export default " + self.class_(decl, depth)
			text = self.expr(decl, ASSIGN)
			if _leftmost(decl, (js.FunctionExpression, js.ClassExpression)):
				text = f"({text})"
			return f"export default {text};"
		if isinstance(stmt, js.ExportAllDeclaration):
			alias = f" as {self.module_name(stmt.exported)}" if stmt.exported is not None else ""
			return f"export *{alias} from {self.literal(stmt.source)};"
		raise TypeError(f"cannot print statement {type(stmt).__name__}")

	def body(self, stmt: js.Stmt, depth: int) -> str:
		"""Loop/if bodies: blocks stay on the header line, other statements follow it."""
		if isinstance(stmt, js.BlockStatement):
			return " " + self.block(stmt, depth)
		if isinstance(stmt, js.EmptyStatement):
			return ";"
		return "\n" + _INDENT * (depth + 1) + self.stmt_text(stmt, depth + 1)

	def if_(self, stmt: js.IfStatement, depth: int) -> str:
		consequent = stmt.consequent
		if stmt.alternate is not None and _ends_with_open_if(consequent):
			consequent = js.BlockStatement(body=[consequent])
		text = f"if ({self.expr(stmt.test, SEQUENCE)})" + self.body(consequent, depth)
		if stmt.alternate is None:
			return text
		if isinstance(consequent, js.BlockStatement):
			text += " else"
		else:
			text += "\n" + _INDENT * depth + "else"
		if isinstance(stmt.alternate, js.IfStatement):
			return text + " " + self.if_(stmt.alternate, depth)
		return text + self.body(stmt.alternate, depth)

	def var_decl(self, decl: js.VariableDeclaration) -> str:
		parts = []
		for declarator in decl.declarations:
			text = self.pattern(declarator.id)
			if declarator.init is not None:
				text += " = " + self.expr(declarator.init, ASSIGN)
			parts.append(text)
		return f"{decl.kind} " + ", ".join(parts)

	def function(self, fn, depth: int, keyword: str) -> str:
		prefix = "async " if fn.is_async else ""
		star = "*" if fn.generator else ""
		name = f" {fn.id.name}" if fn.id is not None else ""
		return f"{prefix}{keyword}{star}{name}({self.params(fn.params)}) " + self.block(fn.body, depth)

	def params(self, params: List[js.Node]) -> str:
		return ", ".join(self.pattern(param) for param in params)

	def class_(self, cls, depth: int) -> str:
		text = "class"
		if cls.id is not None:
			text += f" {cls.id.name}"
		if cls.superclass is not None:
			text += f" extends {self.expr(cls.superclass, CALL)}"
		if not cls.body:
			return text + " {}"
		lines = [text + " {"]
		pad = _INDENT * (depth + 1)
		for member in cls.body:
			lines.append(pad + self.class_member(member, depth + 1))
		lines.append(_INDENT * depth + "}")
		return "\n".join(lines)

	def class_member(self, member: js.Node, depth: int) -> str:
		static = "static " if getattr(member, "static", False) else ""
		if isinstance(member, js.PropertyDefinition):
			text = static + self.key(member.key, member.computed)
			if member.value is not None:
				text += " = " + self.expr(member.value, ASSIGN)
			return text + ";"
		if isinstance(member, js.MethodDefinition):
			return static + self.method(member.key, member.computed, member.value, member.kind, depth)
		raise TypeError(f"cannot print class member {type(member).__name__}")

	def method(self, key: js.Expr, computed: bool, fn: js.FunctionExpression, kind: str, depth: int) -> str:
		prefix = ""
		if kind in ("get", "set"):
			prefix = kind + " "
		else:
			prefix = ("async " if fn.is_async else "") + ("*" if fn.generator else "")
		return f"{prefix}{self.key(key, computed)}({self.params(fn.params)}) " + self.block(fn.body, depth)

	def import_(self, decl: js.ImportDeclaration) -> str:
		source = self.literal(decl.source)
		if not decl.specifiers:
			return f"import {source};"
		parts = []
		named = []
		for spec in decl.specifiers:
			if isinstance(spec, js.ImportDefaultSpecifier):
				parts.append(spec.local.name)
			elif isinstance(spec, js.ImportNamespaceSpecifier):
				parts.append(f"* as {spec.local.name}")
			else:
				imported = self.module_name(spec.imported)
				named.append(imported if imported == spec.local.name else f"{imported} as {spec.local.name}")
		if named:
			parts.append("{ " + ", ".join(named) + " }")
		return f"import {', '.join(parts)} from {source};"

	def export_spec(self, spec: js.ExportSpecifier) -> str:
		local = self.module_name(spec.local)
		exported = self.module_name(spec.exported)
		return local if local == exported else f"{local} as {exported}"

	def module_name(self, name: js.ModuleExportName) -> str:
		if isinstance(name, js.Identifier):
			return name.name
		return self.literal(name)

	# --- patterns ----------------------------------------------------------------

	def pattern(self, node: js.Node) -> str:
		if isinstance(node, js.ArrayPattern):
			return self.array(node.elements, self.pattern)
		if isinstance(node, js.ObjectPattern):
			if not node.properties:
				return "{}"
			return "{ " + ", ".join(self.pattern_prop(prop) for prop in node.properties) + " }"
		if isinstance(node, js.AssignmentPattern):
			return f"{self.pattern(node.left)} = {self.expr(node.right, ASSIGN)}"
		if isinstance(node, js.RestElement):
			return "..." + self.pattern(node.argument)
		return self.expr(node, ASSIGN)

	def pattern_prop(self, prop: js.Node) -> str:
		if isinstance(prop, js.RestElement):
			return self.pattern(prop)
		if prop.shorthand:
			return self.pattern(prop.value)
		return f"{self.key(prop.key, prop.computed)}: {self.pattern(prop.value)}"

	# --- expressions -------------------------------------------------------------

	def expr(self, expr: js.Node, min_prec: int) -> str:
		text = self.expr_text(expr)
		if precedence(expr) < min_prec or (self.no_in and isinstance(expr, js.BinaryExpression) and expr.operator == "in"):
			return f"({text})"
		return text

	def expr_text(self, expr: js.Node) -> str:
		if isinstance(expr, js.Identifier):
			return expr.name
		if isinstance(expr, js.Literal):
			return self.literal(expr)
		if isinstance(expr, (js.TemplateLiteral, js.RegExpLiteral)):
			return expr.raw
		if isinstance(expr, js.ThisExpression):
			return "this"
		if isinstance(expr, js.Super):
			return "super"
		if isinstance(expr, js.ArrayExpression):
			return self.array(expr.elements, lambda item: self.expr(item, ASSIGN))
		if isinstance(expr, js.ObjectExpression):
			return self.object(expr)
		if isinstance(expr, js.SpreadElement):
			return "..." + self.expr(expr.argument, ASSIGN)
		if isinstance(expr, js.FunctionExpression):
			return self.function(expr, self.depth, "function")
		if isinstance(expr, js.ClassExpression):
			return self.class_(expr, self.depth)
		if isinstance(expr, js.ArrowFunctionExpression):
			return self.arrow(expr)
		if isinstance(expr, js.UnaryExpression):
			argument = self.expr(expr.argument, UNARY)
			if expr.operator.isalpha():
				return f"{expr.operator} {argument}"
			if expr.operator in ("+", "-") and argument.startswith(expr.operator):
				# `- -a`, `- --a`
				return f"{expr.operator} {argument}"
			return expr.operator + argument
		if isinstance(expr, js.AwaitExpression):
			return "await " + self.expr(expr.argument, UNARY)
		if isinstance(expr, js.UpdateExpression):
			if expr.prefix:
				return expr.operator + self.expr(expr.argument, UNARY)
			return self.expr(expr.argument, CALL) + expr.operator
		if isinstance(expr, (js.BinaryExpression, js.LogicalExpression)):
			return self.binary(expr)
		if isinstance(expr, js.AssignmentExpression):
			if isinstance(expr.left, js.Expr):
				left = self.expr(expr.left, CALL)
			else:
				left = self.pattern(expr.left)
			return f"{left} {expr.operator} {self.expr(expr.right, ASSIGN)}"
		if isinstance(expr, js.ConditionalExpression):
			test = self.expr(expr.test, LOGICAL_OR)
			return f"{test} ? {self.expr(expr.consequent, ASSIGN)} : {self.expr(expr.alternate, ASSIGN)}"
		if isinstance(expr, js.CallExpression):
			callee = self.expr(expr.callee, CALL)
			return callee + ("?." if expr.optional else "") + self.arguments(expr.arguments)
		if isinstance(expr, js.NewExpression):
			callee = self.expr(expr.callee, MEMBER)
			if _contains_call(expr.callee):
				callee = f"({self.expr_text(expr.callee)})"
			return f"new {callee}" + self.arguments(expr.arguments)
		if isinstance(expr, js.MemberExpression):
			return self.member(expr)
		if isinstance(expr, js.TaggedTemplateExpression):
			return self.expr(expr.tag, CALL) + expr.quasi.raw
		if isinstance(expr, js.ImportExpression):
			return f"import({self.expr(expr.source, ASSIGN)})"
		if isinstance(expr, js.MetaProperty):
			return f"{expr.meta.name}.{expr.property.name}"
		if isinstance(expr, js.SequenceExpression):
			return ", ".join(self.expr(item, ASSIGN) for item in expr.expressions)
		if isinstance(expr, js.YieldExpression):
			keyword = "yield*" if expr.delegate else "yield"
			if expr.argument is None:
				return keyword
			return f"{keyword} {self.expr(expr.argument, ASSIGN)}"
		if isinstance(expr, (js.ArrayPattern, js.ObjectPattern, js.AssignmentPattern, js.RestElement)):
			return self.pattern(expr)
		if isinstance(expr, js.Invalid):
			raise ValueError("invalid expression left in tree")
		raise TypeError(f"cannot print expression {type(expr).__name__}")

	def literal(self, lit: js.Literal) -> str:
		if lit.raw is not None:
			return lit.raw
		value = lit.value
		if value is None:
			return "null"
		if isinstance(value, bool):
			return "true" if value else "false"
		if isinstance(value, str):
			return _quote(value)
		return repr(value)

	def array(self, elements: List[Optional[js.Node]], render) -> str:
		items = ["" if item is None else render(item) for item in elements]
		text = ", ".join(items)
		if elements and elements[-1] is None:
			text += ","
		return f"[{text}]"

	def object(self, obj: js.ObjectExpression) -> str:
		if not obj.properties:
			return "{}"
		return "{ " + ", ".join(self.property(prop) for prop in obj.properties) + " }"

	def property(self, prop: js.Node) -> str:
		if isinstance(prop, js.SpreadElement):
			return "..." + self.expr(prop.argument, ASSIGN)
		if prop.kind in ("get", "set") or prop.method:
			return self.method(prop.key, prop.computed, prop.value, prop.kind if prop.kind != "init" else "method", self.depth)
		if prop.shorthand:
			if isinstance(prop.value, js.AssignmentPattern):
				return self.pattern(prop.value)
			return self.expr(prop.value, ASSIGN)
		return f"{self.key(prop.key, prop.computed)}: {self.expr(prop.value, ASSIGN)}"

	def key(self, key: js.Expr, computed: bool) -> str:
		if computed:
			return f"[{self.expr(key, ASSIGN)}]"
		if isinstance(key, js.Identifier):
			return key.name
		return self.expr_text(key)

	def arrow(self, fn: js.ArrowFunctionExpression) -> str:
		prefix = "async " if fn.is_async else ""
		if len(fn.params) == 1 and isinstance(fn.params[0], js.Identifier):
			params = fn.params[0].name
		else:
			params = f"({self.params(fn.params)})"
		if isinstance(fn.body, js.BlockStatement):
			body = self.block(fn.body, self.depth)
		else:
			body = self.expr(fn.body, ASSIGN)
			if _leftmost(fn.body, js.ObjectExpression):
				body = f"({body})"
		return f"{prefix}{params} => {body}"

	def arguments(self, args: List[js.Expr]) -> str:
		return "(" + ", ".join(self.expr(arg, ASSIGN) for arg in args) + ")"

	def member(self, expr: js.MemberExpression) -> str:
		obj = self.expr(expr.object, CALL)
		if isinstance(expr.object, js.Literal) and isinstance(expr.object.value, int) and obj.isdigit():
			obj = f"({obj})"
		if expr.computed:
			return obj + ("?.[" if expr.optional else "[") + self.expr(expr.property, SEQUENCE) + "]"
		return obj + ("?." if expr.optional else ".") + expr.property.name

	def binary(self, expr) -> str:
		prec = _BINARY_PRECEDENCE[expr.operator]
		if expr.operator == "**":
			left_min, right_min = prec + 1, prec
		else:
			left_min, right_min = prec, prec + 1
		left = self.expr(expr.left, left_min)
		right = self.expr(expr.right, right_min)
		if _mixes_nullish(expr, expr.left):
			left = f"({self.expr_text(expr.left)})"
		if _mixes_nullish(expr, expr.right):
			right = f"({self.expr_text(expr.right)})"
		return f"{left} {expr.operator} {right}"


def _mixes_nullish(parent, child) -> bool:
	"""`??` cannot be mixed with `||`/`&&` without parentheses."""
	if not isinstance(child, js.LogicalExpression) or not isinstance(parent, js.LogicalExpression):
		return False
	return (parent.operator == "??") != (child.operator == "??")


def _contains_call(expr: js.Expr) -> bool:
	while True:
		if isinstance(expr, js.CallExpression):
			return True
		if isinstance(expr, js.MemberExpression):
			expr = expr.object
		elif isinstance(expr, js.TaggedTemplateExpression):
			expr = expr.tag
		else:
			return False


def _leftmost(expr: js.Node, kinds) -> bool:
	"""True when the leftmost token of `expr` belongs to a node of type `kinds`."""
	while True:
		if isinstance(expr, kinds):
			return True
		if isinstance(expr, js.CallExpression):
			expr = expr.callee
		elif isinstance(expr, js.MemberExpression):
			expr = expr.object
		elif isinstance(expr, js.TaggedTemplateExpression):
			expr = expr.tag
		elif isinstance(expr, (js.BinaryExpression, js.LogicalExpression)):
			expr = expr.left
		elif isinstance(expr, js.AssignmentExpression):
			expr = expr.left
		elif isinstance(expr, js.ConditionalExpression):
			expr = expr.test
		elif isinstance(expr, js.SequenceExpression):
			expr = expr.expressions[0]
		elif isinstance(expr, js.UpdateExpression) and not expr.prefix:
			expr = expr.argument
		else:
			return False


def _needs_statement_parens(expr: js.Expr) -> bool:
	# An expression statement may not start with `{`, `function` or `class`.
	return _leftmost(expr, (js.ObjectExpression, js.ObjectPattern, js.FunctionExpression, js.ClassExpression))


def _ends_with_open_if(stmt: js.Stmt) -> bool:
	while True:
		if isinstance(stmt, js.IfStatement):
			if stmt.alternate is None:
				return True
			stmt = stmt.alternate
		elif isinstance(stmt, (js.ForStatement, js.ForInStatement, js.ForOfStatement, js.WhileStatement)):
			stmt = stmt.body
		else:
			return False


__all__ = ["print_module", "print_expression", "precedence"]
