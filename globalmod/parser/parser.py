# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark front-end: JS module source -> `ast.Program`.

The grammar is LALR(1) over the terminals produced by `lexer.JsLexer`; the
builder below walks the resulting parse tree and produces ESTree-shaped
dataclass nodes. Cover grammars (arrow parameters, destructuring assignment
targets) are parsed as expressions and converted to patterns here.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree

from . import ast as js
from .lexer import JsLexer, JsSyntaxError, decode_string

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer=JsLexer,
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)


def parse_module(source: str) -> js.Program:
	"""Parse JS module source; raises lark `UnexpectedInput` or `JsSyntaxError`."""
	tree = _PARSER.parse(source)
	return js.Program(body=[_build_item(child) for child in _trees(tree)], loc=js.Located(1, 1))


# --- tree helpers ------------------------------------------------------------


def _loc(node: Tree | Token) -> Optional[js.Located]:
	if isinstance(node, Token):
		return js.Located(line=node.line, column=node.column)
	meta = node.meta
	if getattr(meta, "empty", True):
		return None
	return js.Located(line=meta.line, column=meta.column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _trees(tree: Tree) -> List[Tree]:
	return [child for child in tree.children if isinstance(child, Tree)]


def _find(tree: Tree, name: str) -> Optional[Tree]:
	return next((child for child in _trees(tree) if _name(child) == name), None)


def _has(tree: Tree, name: str) -> bool:
	return _find(tree, name) is not None


def _token_value(tree: Tree) -> str:
	return next(child for child in tree.children if isinstance(child, Token)).value


# --- module items ------------------------------------------------------------


def _build_item(tree: Tree) -> js.Stmt:
	kind = _name(tree)
	if kind == "import_decl":
		clause, source = _trees(tree)
		return js.ImportDeclaration(specifiers=_build_import_clause(clause), source=_build_string(source), loc=_loc(tree))
	if kind == "import_bare":
		return js.ImportDeclaration(specifiers=[], source=_build_string(_trees(tree)[0]), loc=_loc(tree))
	if kind == "export_default":
		return js.ExportDefaultDeclaration(declaration=_build_default_body(_trees(tree)[0]), loc=_loc(tree))
	if kind == "export_declaration":
		return js.ExportNamedDeclaration(declaration=_build_stmt(_trees(tree)[0]), loc=_loc(tree))
	if kind == "export_named":
		return js.ExportNamedDeclaration(specifiers=_build_export_specs(_trees(tree)[0]), loc=_loc(tree))
	if kind == "export_from":
		specs, source = _trees(tree)
		return js.ExportNamedDeclaration(
			specifiers=_build_export_specs(specs), source=_build_string(source), loc=_loc(tree)
		)
	if kind == "export_all":
		return js.ExportAllDeclaration(source=_build_string(_trees(tree)[0]), loc=_loc(tree))
	if kind == "export_all_as":
		name, source = _trees(tree)
		return js.ExportAllDeclaration(source=_build_string(source), exported=_build_export_name(name), loc=_loc(tree))
	return _build_stmt(tree)


def _build_import_clause(tree: Tree) -> List[js.Node]:
	kind = _name(tree)
	parts = _trees(tree)
	specifiers: List[js.Node] = []
	if kind in ("clause_default", "clause_default_namespace", "clause_default_named"):
		default, parts = parts[0], parts[1:]
		specifiers.append(js.ImportDefaultSpecifier(local=_build_ident(default), loc=_loc(default)))
	for part in parts:
		part_kind = _name(part)
		if part_kind == "namespace_import":
			ident = _trees(part)[0]
			specifiers.append(js.ImportNamespaceSpecifier(local=_build_ident(ident), loc=_loc(part)))
		elif part_kind == "named_imports":
			for spec in _trees(part):
				specifiers.append(_build_import_spec(spec))
		else:
			raise JsSyntaxError(f"unexpected import clause {part_kind}", loc=_loc(part))
	return specifiers


def _build_import_spec(tree: Tree) -> js.ImportSpecifier:
	parts = _trees(tree)
	imported = _build_export_name(parts[0])
	if len(parts) > 1:
		local = _build_ident(parts[1])
	elif isinstance(imported, js.Identifier) and imported.name != "default":
		local = js.Identifier(name=imported.name, loc=imported.loc)
	else:
		raise JsSyntaxError("import specifier needs a local binding", loc=_loc(tree))
	return js.ImportSpecifier(local=local, imported=imported, loc=_loc(tree))


def _build_export_specs(tree: Tree) -> List[js.ExportSpecifier]:
	specs: List[js.ExportSpecifier] = []
	for spec in _trees(tree):
		parts = _trees(spec)
		local = _build_export_name(parts[0])
		exported = _build_export_name(parts[1]) if len(parts) > 1 else local
		specs.append(js.ExportSpecifier(local=local, exported=exported, loc=_loc(spec)))
	return specs


def _build_export_name(tree: Tree) -> js.ModuleExportName:
	if _name(tree) == "default_name":
		return js.Identifier(name="default", loc=_loc(tree))
	inner = _trees(tree)[0]
	if _name(inner) == "string":
		return _build_string(inner)
	return _build_ident(inner)


def _build_default_body(tree: Tree) -> js.Node:
	inner = _trees(tree)[0]
	kind = _name(inner)
	if kind in ("function_decl", "anon_function_decl"):
		return _build_function(inner, js.FunctionDeclaration)
	if kind in ("class_decl", "anon_class_decl"):
		return _build_class(inner, js.ClassDeclaration)
	return _build_expr(inner)


# --- statements ----------------------------------------------------------------


def _build_stmt(tree: Tree) -> js.Stmt:
	kind = _name(tree)
	loc = _loc(tree)
	parts = _trees(tree)
	if kind == "block":
		return _build_block(tree)
	if kind == "var_stmt":
		return _build_var_decl(parts[0])
	if kind == "var_decl":
		return _build_var_decl(tree)
	if kind == "function_decl":
		return _build_function(tree, js.FunctionDeclaration)
	if kind == "class_decl":
		return _build_class(tree, js.ClassDeclaration)
	if kind == "expr_stmt":
		return js.ExpressionStatement(expression=_build_expr(parts[0]), loc=loc)
	if kind == "empty_stmt":
		return js.EmptyStatement(loc=loc)
	if kind == "if_stmt":
		alternate = _build_stmt(parts[2]) if len(parts) > 2 else None
		return js.IfStatement(test=_build_expr(parts[0]), consequent=_build_stmt(parts[1]), alternate=alternate, loc=loc)
	if kind == "for_stmt":
		init = _find(tree, "for_init")
		test = _find(tree, "for_test")
		update = _find(tree, "for_update")
		init_node: Optional[js.Node] = None
		if init is not None:
			inner = _trees(init)[0]
			init_node = _build_var_decl(inner) if _name(inner) == "var_decl" else _build_expr(inner)
		return js.ForStatement(
			init=init_node,
			test=_build_expr(_trees(test)[0]) if test is not None else None,
			update=_build_expr(_trees(update)[0]) if update is not None else None,
			body=_build_stmt(parts[-1]),
			loc=loc,
		)
	if kind in ("for_in_stmt", "for_of_stmt"):
		is_await = _has(tree, "await_mark")
		parts = [part for part in parts if _name(part) != "await_mark"]
		var_kind, binding, right, body = parts
		left = js.VariableDeclaration(
			kind=_token_value(var_kind),
			declarations=[js.VariableDeclarator(id=_build_binding(binding), loc=_loc(binding))],
			loc=_loc(var_kind),
		)
		if kind == "for_in_stmt":
			return js.ForInStatement(left=left, right=_build_expr(right), body=_build_stmt(body), loc=loc)
		return js.ForOfStatement(left=left, right=_build_expr(right), body=_build_stmt(body), is_await=is_await, loc=loc)
	if kind == "while_stmt":
		return js.WhileStatement(test=_build_expr(parts[0]), body=_build_stmt(parts[1]), loc=loc)
	if kind == "do_while_stmt":
		return js.DoWhileStatement(body=_build_stmt(parts[0]), test=_build_expr(parts[1]), loc=loc)
	if kind == "return_stmt":
		return js.ReturnStatement(argument=_build_expr(parts[0]) if parts else None, loc=loc)
	if kind == "throw_stmt":
		return js.ThrowStatement(argument=_build_expr(parts[0]), loc=loc)
	if kind == "break_stmt":
		return js.BreakStatement(loc=loc)
	if kind == "continue_stmt":
		return js.ContinueStatement(loc=loc)
	if kind == "try_stmt":
		handler = _find(tree, "catch_clause")
		finalizer = _find(tree, "finally_clause")
		if handler is None and finalizer is None:
			raise JsSyntaxError("try without catch or finally", loc=loc)
		return js.TryStatement(
			block=_build_block(parts[0]),
			handler=_build_catch(handler) if handler is not None else None,
			finalizer=_build_block(_trees(finalizer)[0]) if finalizer is not None else None,
			loc=loc,
		)
	if kind == "switch_stmt":
		cases = []
		for case in parts[1:]:
			case_parts = _trees(case)
			if _name(case) == "case_clause":
				test: Optional[js.Expr] = _build_expr(case_parts[0])
				case_parts = case_parts[1:]
			else:
				test = None
			cases.append(js.SwitchCase(test=test, consequent=[_build_stmt(s) for s in case_parts], loc=_loc(case)))
		return js.SwitchStatement(discriminant=_build_expr(parts[0]), cases=cases, loc=loc)
	if kind in ("import_decl", "import_bare") or kind.startswith("export_"):
		raise JsSyntaxError("import/export is only allowed at module top level", loc=loc)
	raise JsSyntaxError(f"unsupported statement {kind}", loc=loc)


def _build_block(tree: Tree) -> js.BlockStatement:
	return js.BlockStatement(body=[_build_stmt(child) for child in _trees(tree)], loc=_loc(tree))


def _build_catch(tree: Tree) -> js.CatchClause:
	parts = _trees(tree)
	param = _build_binding(parts[0]) if len(parts) > 1 else None
	return js.CatchClause(param=param, body=_build_block(parts[-1]), loc=_loc(tree))


def _build_var_decl(tree: Tree) -> js.VariableDeclaration:
	var_kind, *declarators = _trees(tree)
	decls = []
	for declarator in declarators:
		parts = _trees(declarator)
		init = _build_expr(parts[1]) if len(parts) > 1 else None
		decls.append(js.VariableDeclarator(id=_build_binding(parts[0]), init=init, loc=_loc(declarator)))
	return js.VariableDeclaration(kind=_token_value(var_kind), declarations=decls, loc=_loc(tree))


def _build_binding(tree: Tree) -> js.Node:
	return _to_pattern(_build_expr(_trees(tree)[0]))


def _build_function(tree: Tree, cls):
	"""Shared by declarations, expressions and methods (`cls` picks the node)."""
	ident = _find(tree, "ident")
	return cls(
		id=_build_ident(ident) if ident is not None else None,
		params=_build_params(_find(tree, "params")),
		body=_build_block(_find(tree, "block")),
		is_async=_has(tree, "async_mark"),
		generator=_has(tree, "star_mark"),
		loc=_loc(tree),
	)


def _build_params(tree: Tree) -> List[js.Node]:
	params: List[js.Node] = []
	for param in _trees(tree):
		parts = _trees(param)
		target = _build_binding(parts[0])
		if _name(param) == "rest_param":
			params.append(js.RestElement(argument=target, loc=_loc(param)))
		elif len(parts) > 1:
			params.append(js.AssignmentPattern(left=target, right=_build_expr(parts[1]), loc=_loc(param)))
		else:
			params.append(target)
	return params


def _build_class(tree: Tree, cls):
	ident = _find(tree, "ident")
	heritage = _find(tree, "class_heritage")
	members: List[js.Node] = []
	for member in _trees(_find(tree, "class_body")):
		kind = _name(member)
		if kind == "empty_member":
			continue
		static = _has(member, "static_mark")
		parts = [part for part in _trees(member) if _name(part) != "static_mark"]
		if kind == "field":
			key, computed = _build_key(parts[0])
			value = _build_expr(parts[1]) if len(parts) > 1 else None
			members.append(js.PropertyDefinition(key=key, value=value, static=static, computed=computed, loc=_loc(member)))
			continue
		method = parts[0]
		key, computed, fn, method_kind = _build_method(method)
		if method_kind == "method" and not static and isinstance(key, js.Identifier) and key.name == "constructor":
			method_kind = "constructor"
		members.append(
			js.MethodDefinition(key=key, value=fn, kind=method_kind, static=static, computed=computed, loc=_loc(member))
		)
	return cls(
		id=_build_ident(ident) if ident is not None else None,
		superclass=_build_expr(_trees(heritage)[0]) if heritage is not None else None,
		body=members,
		loc=_loc(tree),
	)


def _build_method(tree: Tree):
	kind = {"getter": "get", "setter": "set"}.get(_name(tree), "method")
	key_tree = next(part for part in _trees(tree) if _name(part) in ("prop_name", "number", "computed_key"))
	key, computed = _build_key(key_tree)
	fn = js.FunctionExpression(
		id=None,
		params=_build_params(_find(tree, "params")),
		body=_build_block(_find(tree, "block")),
		is_async=_has(tree, "async_mark"),
		generator=_has(tree, "star_mark"),
		loc=_loc(tree),
	)
	return key, computed, fn, kind


def _build_key(tree: Tree):
	kind = _name(tree)
	if kind == "computed_key":
		return _build_expr(_trees(tree)[0]), True
	if kind == "number":
		return _build_expr(tree), False
	inner = _trees(tree)[0]
	if _name(inner) == "string":
		return _build_string(inner), False
	return _build_ident(inner), False


# --- expressions -------------------------------------------------------------

_BINARY_KINDS = {"binary": js.BinaryExpression, "logical": js.LogicalExpression}


def _build_expr(tree: Tree) -> js.Expr:
	kind = _name(tree)
	loc = _loc(tree)
	parts = _trees(tree)
	if kind == "ident":
		return _build_ident(tree)
	if kind == "number":
		raw = _token_value(tree)
		return js.Literal(value=_number_value(raw), raw=raw, loc=loc)
	if kind == "string":
		return _build_string(tree)
	if kind == "template":
		return js.TemplateLiteral(raw=_token_value(tree), loc=loc)
	if kind == "regex":
		return js.RegExpLiteral(raw=_token_value(tree), loc=loc)
	if kind in ("true", "false"):
		return js.Literal(value=kind == "true", raw=kind, loc=loc)
	if kind == "null":
		return js.Literal(value=None, raw="null", loc=loc)
	if kind == "this":
		return js.ThisExpression(loc=loc)
	if kind == "super":
		return js.Super(loc=loc)
	if kind == "parenthesized":
		return _build_expr(parts[0])
	if kind in ("empty_parens", "rest_parens"):
		raise JsSyntaxError("parameter list without arrow", loc=loc)
	if kind == "array_lit":
		return js.ArrayExpression(elements=_array_elements(tree), loc=loc)
	if kind == "spread":
		return js.SpreadElement(argument=_build_expr(parts[0]), loc=loc)
	if kind == "object_lit":
		return js.ObjectExpression(properties=[_build_object_prop(prop) for prop in parts], loc=loc)
	if kind == "function_expr":
		return _build_function(tree, js.FunctionExpression)
	if kind == "class_expr":
		return _build_class(tree, js.ClassExpression)
	if kind in ("arrow", "async_arrow"):
		params_tree, body_tree = [part for part in parts if _name(part) != "async_mark"]
		body = _build_block(body_tree) if _name(body_tree) == "block" else _build_expr(body_tree)
		return js.ArrowFunctionExpression(
			params=_arrow_params(params_tree), body=body, is_async=kind == "async_arrow", loc=loc
		)
	if kind == "yield_expr":
		return js.YieldExpression(argument=_build_expr(parts[0]) if parts else None, loc=loc)
	if kind == "yield_delegate":
		return js.YieldExpression(argument=_build_expr(parts[0]), delegate=True, loc=loc)
	if kind == "assignment":
		left, op, right = parts
		operator = _token_value(op)
		target = _build_expr(left)
		if operator == "=" and isinstance(target, (js.ArrayExpression, js.ObjectExpression)):
			target = _to_pattern(target)
		elif not isinstance(target, (js.Identifier, js.MemberExpression)):
			raise JsSyntaxError("invalid assignment target", loc=loc)
		return js.AssignmentExpression(operator=operator, left=target, right=_build_expr(right), loc=loc)
	if kind == "conditional":
		test, consequent, alternate = (_build_expr(part) for part in parts)
		return js.ConditionalExpression(test=test, consequent=consequent, alternate=alternate, loc=loc)
	if kind in _BINARY_KINDS:
		left, op, right = parts
		return _BINARY_KINDS[kind](operator=_token_value(op), left=_build_expr(left), right=_build_expr(right), loc=loc)
	if kind == "unary":
		op, argument = parts
		return js.UnaryExpression(operator=_token_value(op), argument=_build_expr(argument), loc=loc)
	if kind == "await_expr":
		return js.AwaitExpression(argument=_build_expr(parts[0]), loc=loc)
	if kind in ("postfix", "prefix"):
		argument, op = parts if kind == "postfix" else reversed(parts)
		target = _build_expr(argument)
		if not isinstance(target, (js.Identifier, js.MemberExpression)):
			raise JsSyntaxError("invalid update target", loc=loc)
		return js.UpdateExpression(operator=_token_value(op), argument=target, prefix=kind == "prefix", loc=loc)
	if kind == "new_bare":
		return js.NewExpression(callee=_build_expr(parts[0]), arguments=[], loc=loc)
	if kind == "new_call":
		callee, args = parts
		return js.NewExpression(callee=_build_expr(callee), arguments=_build_args(args), loc=loc)
	if kind in ("member", "opt_member"):
		obj, prop = parts
		return js.MemberExpression(
			object=_build_expr(obj),
			property=js.Identifier(name=_token_value(prop), loc=_loc(prop)),
			optional=kind == "opt_member",
			loc=loc,
		)
	if kind in ("index", "opt_index"):
		obj, prop = parts
		return js.MemberExpression(
			object=_build_expr(obj), property=_build_expr(prop), computed=True, optional=kind == "opt_index", loc=loc
		)
	if kind in ("call", "opt_call"):
		callee, args = parts
		return js.CallExpression(
			callee=_build_expr(callee), arguments=_build_args(args), optional=kind == "opt_call", loc=loc
		)
	if kind == "tagged":
		tag, quasi = parts
		return js.TaggedTemplateExpression(tag=_build_expr(tag), quasi=_build_expr(quasi), loc=loc)
	if kind == "import_call":
		return js.ImportExpression(source=_build_expr(parts[0]), loc=loc)
	if kind in ("import_meta", "new_target"):
		meta, expected = ("import", "meta") if kind == "import_meta" else ("new", "target")
		prop = parts[0]
		if _token_value(prop) != expected:
			raise JsSyntaxError(f"unknown meta property {meta}.{_token_value(prop)}", loc=loc)
		return js.MetaProperty(
			meta=js.Identifier(name=meta, loc=loc),
			property=js.Identifier(name=expected, loc=_loc(prop)),
			loc=loc,
		)
	if kind == "sequence":
		left, right = (_build_expr(part) for part in parts)
		exprs = list(left.expressions) if isinstance(left, js.SequenceExpression) else [left]
		return js.SequenceExpression(expressions=exprs + [right], loc=loc)
	raise JsSyntaxError(f"unsupported expression {kind}", loc=loc)


def _build_ident(tree: Tree) -> js.Identifier:
	return js.Identifier(name=_token_value(tree), loc=_loc(tree))


def _build_string(tree: Tree) -> js.Literal:
	raw = _token_value(tree)
	return js.Literal(value=decode_string(raw), raw=raw, loc=_loc(tree))


def _build_args(tree: Tree) -> List[js.Expr]:
	return [_build_expr(arg) for arg in _trees(tree)]


def _number_value(raw: str):
	text = raw.replace("_", "")
	if text.endswith("n"):
		return int(text[:-1], 0)
	lowered = text.lower()
	if lowered.startswith(("0x", "0o", "0b")):
		return int(text, 0)
	if any(ch in lowered for ch in ".e"):
		return float(text)
	if len(text) > 1 and text.startswith("0") and text.isdigit():
		# legacy octal
		return int(text, 8) if all(ch in "01234567" for ch in text) else int(text)
	return int(text)


def _array_elements(tree: Tree) -> List[Optional[js.Expr]]:
	elements: List[Optional[js.Expr]] = []
	for child in _trees(tree):
		kind = _name(child)
		if kind == "element_list":
			elements.extend(_array_elements(child))
		elif kind == "elision":
			elements.extend([None] * len(child.children))
		else:
			elements.append(_build_expr(child))
	return elements


def _build_object_prop(tree: Tree) -> js.Node:
	kind = _name(tree)
	parts = _trees(tree)
	loc = _loc(tree)
	if kind == "prop_value":
		key, computed = _build_key(parts[0])
		return js.Property(key=key, value=_build_expr(parts[1]), computed=computed, loc=loc)
	if kind == "prop_shorthand":
		ident = _build_ident(parts[0])
		return js.Property(key=ident, value=js.Identifier(name=ident.name, loc=ident.loc), shorthand=True, loc=loc)
	if kind == "prop_default":
		ident = _build_ident(parts[0])
		value = js.AssignmentPattern(left=js.Identifier(name=ident.name, loc=ident.loc), right=_build_expr(parts[1]), loc=loc)
		return js.Property(key=ident, value=value, shorthand=True, loc=loc)
	if kind == "prop_spread":
		return js.SpreadElement(argument=_build_expr(parts[0]), loc=loc)
	key, computed, fn, method_kind = _build_method(parts[0])
	if method_kind == "method":
		return js.Property(key=key, value=fn, computed=computed, method=True, loc=loc)
	return js.Property(key=key, value=fn, computed=computed, kind=method_kind, loc=loc)


# --- cover grammar conversions ----------------------------------------------


def _arrow_params(tree: Tree) -> List[js.Node]:
	inner = _trees(tree)[0]
	kind = _name(inner)
	if kind == "ident":
		return [_build_ident(inner)]
	if kind == "empty_parens":
		return []
	parts = _trees(inner)
	if kind == "rest_parens":
		*head, rest = parts
		params = _flatten_params(_build_expr(head[0])) if head else []
		return params + [js.RestElement(argument=_build_binding(rest), loc=_loc(rest))]
	return _flatten_params(_build_expr(parts[0]))


def _flatten_params(expr: js.Expr) -> List[js.Node]:
	items = expr.expressions if isinstance(expr, js.SequenceExpression) else [expr]
	return [_to_pattern(item) for item in items]


def _to_pattern(node: js.Node) -> js.Node:
	"""Reinterpret an expression parsed through a cover grammar as a binding pattern."""
	if isinstance(node, (js.Identifier, js.MemberExpression, js.AssignmentPattern)):
		return node
	if isinstance(node, js.AssignmentExpression) and node.operator == "=":
		return js.AssignmentPattern(left=_to_pattern(node.left), right=node.right, loc=node.loc)
	if isinstance(node, js.SpreadElement):
		return js.RestElement(argument=_to_pattern(node.argument), loc=node.loc)
	if isinstance(node, js.ArrayExpression):
		return js.ArrayPattern(
			elements=[_to_pattern(item) if item is not None else None for item in node.elements], loc=node.loc
		)
	if isinstance(node, js.ObjectExpression):
		props: List[js.Node] = []
		for prop in node.properties:
			if isinstance(prop, js.SpreadElement):
				props.append(js.RestElement(argument=_to_pattern(prop.argument), loc=prop.loc))
			elif isinstance(prop, js.Property) and prop.kind == "init" and not prop.method:
				props.append(js.Property(
					key=prop.key,
					value=_to_pattern(prop.value),
					computed=prop.computed,
					shorthand=prop.shorthand,
					loc=prop.loc,
				))
			else:
				raise JsSyntaxError("invalid destructuring pattern", loc=prop.loc)
		return js.ObjectPattern(properties=props, loc=node.loc)
	raise JsSyntaxError("invalid binding pattern", loc=node.loc)


__all__ = ["parse_module"]
