# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
ESTree-shaped syntax tree for the JavaScript module subset we parse.

Nodes are plain dataclasses. Field names follow ESTree (snake_cased, with
`is_async`/`is_await` standing in for Python keywords). Every node accepts an
optional keyword-only `loc`; it never takes part in equality so trees built by
hand compare equal to parsed ones.

Passes never mutate a tree in place: `NodeTransformer` rebuilds the parents of
any changed node via `dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


@dataclass(kw_only=True)
class Node:
	loc: Optional[Located] = field(default=None, compare=False, repr=False)


class Stmt(Node):
	pass


class Expr(Node):
	pass


class ModuleDecl(Stmt):
	"""import/export declarations; only valid at module top level."""


# --- expressions -----------------------------------------------------------


@dataclass
class Identifier(Expr):
	name: str


@dataclass
class Literal(Expr):
	"""
	String, number, boolean or null literal.

	`raw` is the source text; synthesized literals leave it None and the
	printer renders `value` instead.
	"""

	value: object
	raw: Optional[str] = None


@dataclass
class RegExpLiteral(Expr):
	raw: str


@dataclass
class TemplateLiteral(Expr):
	# Kept opaque: the lowering never looks inside template strings.
	raw: str


@dataclass
class TaggedTemplateExpression(Expr):
	tag: Expr
	quasi: TemplateLiteral


@dataclass
class ThisExpression(Expr):
	pass


@dataclass
class Super(Expr):
	pass


@dataclass
class ArrayExpression(Expr):
	elements: List[Optional[Expr]]  # None marks a hole


@dataclass
class Property(Node):
	key: Expr
	value: Node
	computed: bool = False
	shorthand: bool = False
	method: bool = False
	kind: str = "init"  # init | get | set


@dataclass
class ObjectExpression(Expr):
	properties: List[Node]  # Property | SpreadElement


@dataclass
class SpreadElement(Expr):
	argument: Expr


@dataclass
class FunctionExpression(Expr):
	id: Optional[Identifier]
	params: List[Node]
	body: "BlockStatement"
	is_async: bool = False
	generator: bool = False


@dataclass
class ArrowFunctionExpression(Expr):
	params: List[Node]
	body: Node  # BlockStatement | Expr
	is_async: bool = False


@dataclass
class ClassExpression(Expr):
	id: Optional[Identifier]
	superclass: Optional[Expr]
	body: List[Node]


@dataclass
class UnaryExpression(Expr):
	operator: str
	argument: Expr


@dataclass
class UpdateExpression(Expr):
	operator: str
	argument: Expr
	prefix: bool


@dataclass
class BinaryExpression(Expr):
	operator: str
	left: Expr
	right: Expr


@dataclass
class LogicalExpression(Expr):
	operator: str
	left: Expr
	right: Expr


@dataclass
class AssignmentExpression(Expr):
	operator: str
	left: Node
	right: Expr


@dataclass
class ConditionalExpression(Expr):
	test: Expr
	consequent: Expr
	alternate: Expr


@dataclass
class CallExpression(Expr):
	callee: Expr
	arguments: List[Expr]
	optional: bool = False


@dataclass
class NewExpression(Expr):
	callee: Expr
	arguments: List[Expr]


@dataclass
class MemberExpression(Expr):
	object: Expr
	property: Expr
	computed: bool = False
	optional: bool = False


@dataclass
class ImportExpression(Expr):
	"""Dynamic `import(source)`."""

	source: Expr


@dataclass
class MetaProperty(Expr):
	"""`import.meta` or `new.target`."""

	meta: Identifier
	property: Identifier


@dataclass
class SequenceExpression(Expr):
	expressions: List[Expr]


@dataclass
class AwaitExpression(Expr):
	argument: Expr


@dataclass
class YieldExpression(Expr):
	argument: Optional[Expr]
	delegate: bool = False


@dataclass
class Invalid(Expr):
	"""Placeholder left behind by a rewrite that deleted an expression."""


# --- patterns --------------------------------------------------------------


@dataclass
class ArrayPattern(Node):
	elements: List[Optional[Node]]


@dataclass
class ObjectPattern(Node):
	properties: List[Node]  # Property (value is a pattern) | RestElement


@dataclass
class AssignmentPattern(Node):
	left: Node
	right: Expr


@dataclass
class RestElement(Node):
	argument: Node


# --- statements ------------------------------------------------------------


@dataclass
class ExpressionStatement(Stmt):
	expression: Expr


@dataclass
class BlockStatement(Stmt):
	body: List[Stmt]


@dataclass
class EmptyStatement(Stmt):
	pass


@dataclass
class VariableDeclarator(Node):
	id: Node
	init: Optional[Expr] = None


@dataclass
class VariableDeclaration(Stmt):
	kind: str  # var | let | const
	declarations: List[VariableDeclarator]


@dataclass
class FunctionDeclaration(Stmt):
	# id is None only for `export default function () {}`.
	id: Optional[Identifier]
	params: List[Node]
	body: BlockStatement
	is_async: bool = False
	generator: bool = False


@dataclass
class MethodDefinition(Node):
	key: Expr
	value: FunctionExpression
	kind: str = "method"  # constructor | method | get | set
	static: bool = False
	computed: bool = False


@dataclass
class PropertyDefinition(Node):
	key: Expr
	value: Optional[Expr] = None
	static: bool = False
	computed: bool = False


@dataclass
class ClassDeclaration(Stmt):
	id: Optional[Identifier]
	superclass: Optional[Expr]
	body: List[Node]


@dataclass
class ReturnStatement(Stmt):
	argument: Optional[Expr] = None


@dataclass
class IfStatement(Stmt):
	test: Expr
	consequent: Stmt
	alternate: Optional[Stmt] = None


@dataclass
class ForStatement(Stmt):
	init: Optional[Node]
	test: Optional[Expr]
	update: Optional[Expr]
	body: Stmt


@dataclass
class ForInStatement(Stmt):
	left: VariableDeclaration
	right: Expr
	body: Stmt


@dataclass
class ForOfStatement(Stmt):
	left: VariableDeclaration
	right: Expr
	body: Stmt
	is_await: bool = False


@dataclass
class WhileStatement(Stmt):
	test: Expr
	body: Stmt


@dataclass
class DoWhileStatement(Stmt):
	body: Stmt
	test: Expr


@dataclass
class ThrowStatement(Stmt):
	argument: Expr


@dataclass
class CatchClause(Node):
	param: Optional[Node]
	body: BlockStatement


@dataclass
class TryStatement(Stmt):
	block: BlockStatement
	handler: Optional[CatchClause] = None
	finalizer: Optional[BlockStatement] = None


@dataclass
class SwitchCase(Node):
	test: Optional[Expr]  # None for `default:`
	consequent: List[Stmt]


@dataclass
class SwitchStatement(Stmt):
	discriminant: Expr
	cases: List[SwitchCase]


@dataclass
class BreakStatement(Stmt):
	pass


@dataclass
class ContinueStatement(Stmt):
	pass


# --- module declarations ---------------------------------------------------


ModuleExportName = Union[Identifier, Literal]


@dataclass
class ImportSpecifier(Node):
	local: Identifier
	imported: ModuleExportName


@dataclass
class ImportDefaultSpecifier(Node):
	local: Identifier


@dataclass
class ImportNamespaceSpecifier(Node):
	local: Identifier


@dataclass
class ImportDeclaration(ModuleDecl):
	specifiers: List[Node]
	source: Literal


@dataclass
class ExportSpecifier(Node):
	local: ModuleExportName
	exported: ModuleExportName


@dataclass
class ExportNamedDeclaration(ModuleDecl):
	declaration: Optional[Stmt] = None
	specifiers: List[ExportSpecifier] = field(default_factory=list)
	source: Optional[Literal] = None


@dataclass
class ExportDefaultDeclaration(ModuleDecl):
	declaration: Node  # FunctionDeclaration | ClassDeclaration | Expr


@dataclass
class ExportAllDeclaration(ModuleDecl):
	source: Literal
	exported: Optional[ModuleExportName] = None


@dataclass
class Program(Node):
	body: List[Stmt]


# --- traversal -------------------------------------------------------------


def iter_fields(node: Node) -> Iterator[Tuple[str, object]]:
	"""Yield (name, value) for every field of `node` except `loc`."""
	for f in fields(node):
		if f.name == "loc":
			continue
		yield f.name, getattr(node, f.name)


def iter_child_nodes(node: Node) -> Iterator[Node]:
	for _name, value in iter_fields(node):
		if isinstance(value, Node):
			yield value
		elif isinstance(value, list):
			for item in value:
				if isinstance(item, Node):
					yield item


def walk(node: Node) -> Iterator[Node]:
	"""Pre-order walk over `node` and all of its descendants."""
	todo = [node]
	while todo:
		current = todo.pop()
		yield current
		todo.extend(reversed(list(iter_child_nodes(current))))


class NodeVisitor:
	"""Dispatches `visit_<ClassName>`; falls back to `generic_visit`."""

	def visit(self, node: Node):
		method = getattr(self, "visit_" + type(node).__name__, self.generic_visit)
		return method(node)

	def generic_visit(self, node: Node):
		for child in iter_child_nodes(node):
			self.visit(child)
		return None


class NodeTransformer(NodeVisitor):
	"""
	Rebuilding visitor.

	`visit_*` methods return the replacement node. Returning None removes the
	node from a list field; in a single statement slot it becomes an
	`EmptyStatement`. Parents are only copied when a child actually changed.
	"""

	def generic_visit(self, node: Node):
		changes = {}
		for name, value in iter_fields(node):
			if isinstance(value, list):
				items = []
				changed = False
				for item in value:
					if not isinstance(item, Node):
						items.append(item)
						continue
					new = self.visit(item)
					if new is not item:
						changed = True
					if new is not None:
						items.append(new)
				if changed:
					changes[name] = items
			elif isinstance(value, Node):
				new = self.visit(value)
				if new is None and isinstance(value, Stmt):
					new = EmptyStatement(loc=value.loc)
				if new is not value:
					changes[name] = new
		if not changes:
			return node
		return replace(node, **changes)


