# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
JavaScript tokenizer feeding the Lark LALR parser.

Two stages:

* `scan` splits the source into raw tokens. It decides regex-vs-division
  from the previous token, keeps template literals as one opaque token and
  records whether a line break preceded each token.
* `TerminatorInserter` turns raw tokens into grammar terminals. It classifies
  braces (statement block vs object literal), marks `function`/`class` in
  declaration position, demotes keywords used as property names to NAME and
  performs automatic semicolon insertion, emitting `_TERM` tokens.

Both stages see the whole token list, so brace kinds and line-break
decisions can look one token ahead without touching parser state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Mapping, Optional

from lark import Token
from lark.lexer import Lexer, PatternStr

from .ast import Located


class JsSyntaxError(ValueError):
	"""Tokenizer or tree-shape error; `loc` points at the offending source."""

	def __init__(self, message: str, *, loc: Optional[Located] = None) -> None:
		super().__init__(message)
		self.loc = loc
		self.line = loc.line if loc is not None else None
		self.column = loc.column if loc is not None else None


@dataclass
class RawToken:
	kind: str  # IDENT | NUMBER | STRING | TEMPLATE | REGEX | PUNCT
	value: str
	pos: int
	line: int
	column: int
	end_pos: int
	end_line: int
	end_column: int
	newline_before: bool = False


_PUNCTUATORS = sorted(
	[
		">>>=", "...", "===", "!==", "**=", "<<=", ">>=", ">>>", "&&=", "||=", "??=",
		"=>", "==", "!=", "<=", ">=", "&&", "||", "??", "?.", "++", "--",
		"+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "**", "<<", ">>",
		"{", "}", "(", ")", "[", "]", ";", ",", "<", ">", "+", "-", "*", "/",
		"%", "&", "|", "^", "!", "~", "?", ":", "=", ".",
	],
	key=len,
	reverse=True,
)
_PUNCT_RE = re.compile("|".join(re.escape(p) for p in _PUNCTUATORS))
_IDENT_RE = re.compile(r"(?:[^\W\d]|[$#])[\w$]*")
_NUMBER_RE = re.compile(
	r"(?:0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+"
	r"|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d[\d_]*)?)n?"
)
_STRING_RE = re.compile(r"\"(?:[^\"\\\n]|\\(?:.|\n))*\"|'(?:[^'\\\n]|\\(?:.|\n))*'")
_SPACE_RE = re.compile(r"[ \t\f\v\r\n\u00a0\ufeff\u2028\u2029]+")

# After these words a `/` starts a regular expression.
_REGEX_AFTER_WORDS = frozenset(
	{"return", "typeof", "instanceof", "in", "of", "new", "delete", "void", "throw", "case", "do", "else", "yield", "await"}
)


class _Scanner:
	def __init__(self, source: str) -> None:
		self.src = source
		self.pos = 0
		self.line = 1
		self.line_start = 0

	def _loc(self, pos: Optional[int] = None) -> Located:
		pos = self.pos if pos is None else pos
		return Located(line=self.line, column=pos - self.line_start + 1)

	def _advance(self, end: int) -> None:
		newlines = self.src.count("\n", self.pos, end)
		if newlines:
			self.line += newlines
			self.line_start = self.src.rfind("\n", self.pos, end) + 1
		self.pos = end

	def _skip_trivia(self) -> bool:
		"""Skip whitespace and comments; report whether a line break was crossed."""
		src = self.src
		crossed = False
		while self.pos < len(src):
			m = _SPACE_RE.match(src, self.pos)
			if m:
				crossed = crossed or "\n" in m.group() or "\u2028" in m.group() or "\u2029" in m.group()
				self._advance(m.end())
				continue
			if self.pos == 0 and src.startswith("#!"):
				end = src.find("\n")
				self._advance(len(src) if end < 0 else end)
				continue
			if src.startswith("//", self.pos):
				end = src.find("\n", self.pos)
				self._advance(len(src) if end < 0 else end)
				continue
			if src.startswith("/*", self.pos):
				end = src.find("*/", self.pos + 2)
				if end < 0:
					raise JsSyntaxError("unterminated comment", loc=self._loc())
				crossed = crossed or "\n" in src[self.pos:end]
				self._advance(end + 2)
				continue
			break
		return crossed

	def _skip_string(self, i: int) -> int:
		m = _STRING_RE.match(self.src, i)
		if not m:
			raise JsSyntaxError("unterminated string literal", loc=self._loc(i))
		return m.end()

	def _skip_template(self, i: int) -> int:
		src = self.src
		i += 1
		while i < len(src):
			c = src[i]
			if c == "\\":
				i += 2
				continue
			if c == "`":
				return i + 1
			if c == "$" and src.startswith("{", i + 1):
				i = self._skip_substitution(i + 2)
				continue
			i += 1
		raise JsSyntaxError("unterminated template literal", loc=self._loc())

	def _skip_substitution(self, i: int) -> int:
		src = self.src
		depth = 1
		while i < len(src):
			c = src[i]
			if c in "'\"":
				i = self._skip_string(i)
				continue
			if c == "`":
				i = self._skip_template(i)
				continue
			if c == "{":
				depth += 1
			elif c == "}":
				depth -= 1
				if depth == 0:
					return i + 1
			i += 1
		raise JsSyntaxError("unterminated template substitution", loc=self._loc())

	def _skip_regex(self, i: int) -> int:
		src = self.src
		i += 1
		in_class = False
		while i < len(src):
			c = src[i]
			if c == "\n":
				break
			if c == "\\":
				i += 2
				continue
			if c == "[":
				in_class = True
			elif c == "]":
				in_class = False
			elif c == "/" and not in_class:
				i += 1
				while i < len(src) and (src[i].isalnum() or src[i] == "_"):
					i += 1
				return i
			i += 1
		raise JsSyntaxError("unterminated regular expression", loc=self._loc())

	def tokens(self) -> List[RawToken]:
		out: List[RawToken] = []
		src = self.src
		while True:
			crossed = self._skip_trivia()
			if self.pos >= len(src):
				return out
			start = self.pos
			start_loc = self._loc()
			c = src[start]
			prev = out[-1] if out else None
			if c in "'\"":
				kind, end = "STRING", self._skip_string(start)
			elif c == "`":
				kind, end = "TEMPLATE", self._skip_template(start)
			elif c == "/" and _regex_allowed(prev):
				kind, end = "REGEX", self._skip_regex(start)
			elif c.isdigit() or (c == "." and src[start + 1:start + 2].isdigit()):
				kind, end = "NUMBER", _NUMBER_RE.match(src, start).end()
			else:
				m = _IDENT_RE.match(src, start)
				if m:
					kind, end = "IDENT", m.end()
				else:
					m = _PUNCT_RE.match(src, start)
					if not m:
						raise JsSyntaxError(f"unexpected character {c!r}", loc=start_loc)
					end = m.end()
					# `a?.5:b` is a conditional, not optional chaining.
					if m.group() == "?." and src[end:end + 1].isdigit():
						end -= 1
					kind = "PUNCT"
			self._advance(end)
			end_loc = self._loc()
			out.append(
				RawToken(
					kind=kind,
					value=src[start:end],
					pos=start,
					line=start_loc.line,
					column=start_loc.column,
					end_pos=end,
					end_line=end_loc.line,
					end_column=end_loc.column,
					newline_before=crossed,
				)
			)


def _regex_allowed(prev: Optional[RawToken]) -> bool:
	if prev is None:
		return True
	if prev.kind in ("NUMBER", "STRING", "TEMPLATE", "REGEX"):
		return False
	if prev.kind == "IDENT":
		return prev.value in _REGEX_AFTER_WORDS
	return prev.value not in (")", "]", "}", "++", "--")


def scan(source: str) -> List[RawToken]:
	"""Split JS source into raw tokens (no terminators, no keyword decisions)."""
	return _Scanner(source).tokens()


_TERM = "_TERM"
_OBJ_OPEN = "_OBJ_OPEN"
_FUNCTION_DECL = "_FUNCTION_DECL"
_CLASS_DECL = "_CLASS_DECL"

# Scopes whose contents are statements (or class members) separated by _TERM.
_STATEMENT_SCOPES = frozenset({"block", "expr_block", "class", "class_expr"})
# Closing one of these braces may end an expression statement.
_EXPRESSION_BRACES = frozenset({"object", "expr_block", "class_expr"})

_TERMINABLE = frozenset(
	{
		"NAME", "NUMBER", "STRING", "TEMPLATE", "REGEX",
		"this", "super", "null", "true", "false",
		"return", "break", "continue", "++", "--", "]",
		# contextual keywords that double as identifiers
		"as", "from", "of", "get", "set", "static",
	}
)
_RESTRICTED = frozenset({"return", "break", "continue"})
_CONTINUATION_PUNCT = frozenset(
	{
		".", "?.", ",", "(", "[", ")", "]", "?", ":", "=>",
		"=", "+=", "-=", "*=", "/=", "%=", "**=", "<<=", ">>=", ">>>=", "&=", "|=", "^=", "&&=", "||=", "??=",
		"+", "-", "*", "/", "%", "**", "==", "!=", "===", "!==", "<", ">", "<=", ">=",
		"<<", ">>", ">>>", "&", "|", "^", "&&", "||", "??",
	}
)
_HEAD_KEYWORDS = frozenset({"if", "for", "while", "switch", "catch", "with"})
_BLOCK_AFTER = frozenset({_TERM, "else", "try", "catch", "finally", "do"})
_MEMBER_PREFIXES = frozenset({"static", "get", "set", "async", "*"})


class TerminatorInserter:
	"""
	Raw tokens -> lark Tokens, inserting `_TERM` where JS would put a semicolon.

	`types` maps literal grammar strings ("import", "(", "=>") to the terminal
	names Lark assigned to them.
	"""

	def __init__(self, types: Mapping[str, str]) -> None:
		self.types = types

	def _reset(self) -> None:
		self.stack: List[str] = []
		self.pending: List[tuple[int, str]] = []
		self.prev: Optional[str] = None
		self.prev_prev: Optional[str] = None
		self.prev_scope: Optional[str] = None
		self.async_at_start = False
		self.case_label = False
		self.case_colon = False
		# stack depths of `do` statements still waiting for their `while`
		self.dos: List[int] = []
		self.do_tail = False

	def process(self, tokens: List[RawToken]) -> Iterator[Token]:
		self._reset()
		for index, tok in enumerate(tokens):
			nxt = tokens[index + 1] if index + 1 < len(tokens) else None
			if self._needs_terminator(tok):
				yield self._token(_TERM, ";", tok)
				self._remember(_TERM)
			yield from self._emit(tok, nxt)
		if self.stack:
			last = tokens[-1]
			raise JsSyntaxError(f"unclosed {self.stack[-1]} at end of input", loc=Located(last.end_line, last.end_column))
		if self._statement_scope() and self._terminable():
			end = tokens[-1]
			yield Token(_TERM, "", end.end_pos, end.end_line, end.end_column, end.end_line, end.end_column, end.end_pos)

	# --- automatic semicolon insertion ---------------------------------------

	def _statement_scope(self) -> bool:
		return not self.stack or self.stack[-1] in _STATEMENT_SCOPES

	def _terminable(self) -> bool:
		prev = self.prev
		if prev == ")":
			return self.prev_scope != "head"
		if prev == "}":
			return self.prev_scope in _EXPRESSION_BRACES
		return prev in _TERMINABLE

	def _needs_terminator(self, tok: RawToken) -> bool:
		if not self._statement_scope() or self.prev is None:
			return False
		if tok.kind == "PUNCT" and tok.value == "}":
			return self._terminable()
		if self.prev == ")" and self.prev_scope == "do_head":
			return not (tok.kind == "PUNCT" and tok.value == ";")
		if not tok.newline_before:
			return False
		if self.prev in _RESTRICTED:
			return True
		if not self._terminable():
			return False
		if tok.kind == "PUNCT":
			if tok.value == "{" and self.prev == ")":
				return False
			return tok.value not in _CONTINUATION_PUNCT
		if tok.kind == "TEMPLATE":
			return False
		if tok.kind == "IDENT" and tok.value in ("in", "instanceof"):
			return False
		return True

	# --- classification ------------------------------------------------------

	def _at_statement_start(self) -> bool:
		prev = self.prev
		if prev is None or prev in _BLOCK_AFTER or self.case_colon:
			return True
		if prev == "{":
			return True
		if prev == "}":
			return self.prev_scope not in _EXPRESSION_BRACES
		if prev == "export":
			return True
		return prev == "default" and self.prev_prev == "export"

	def _word_symbol(self, tok: RawToken, nxt: Optional[RawToken]) -> str:
		word = tok.value
		if word not in self.types or self.prev in (".", "?."):
			return "NAME"
		top = self.stack[-1] if self.stack else None
		follow = nxt.value if nxt is not None and nxt.kind == "PUNCT" else None
		if top == "object" and self.prev in (_OBJ_OPEN, ",", "get", "set", "async", "*"):
			if follow in (":", "(", ",", "}"):
				return "NAME"
		if top in ("class", "class_expr") and (self.prev in ("{", "}", _TERM) or self.prev in _MEMBER_PREFIXES):
			if nxt is None or nxt.newline_before or follow in ("(", "=", ";", "}"):
				return "NAME"
		return word

	def _brace_kind(self) -> str:
		depth = len(self.stack)
		if self.pending and self.pending[-1][0] == depth:
			return self.pending.pop()[1]
		prev = self.prev
		if prev == "=>":
			return "expr_block"
		if prev is None or prev in _BLOCK_AFTER or prev in ("{", ")") or self.case_colon:
			return "block"
		if prev == "}" and self.prev_scope not in _EXPRESSION_BRACES:
			return "block"
		return "object"

	def _emit(self, tok: RawToken, nxt: Optional[RawToken]) -> Iterator[Token]:
		if tok.kind in ("NUMBER", "STRING", "TEMPLATE", "REGEX"):
			yield self._token(tok.kind, tok.value, tok)
			self._remember(tok.kind)
			return
		if tok.kind == "IDENT":
			sym = self._word_symbol(tok, nxt)
			if sym == "NAME":
				yield self._token("NAME", tok.value, tok)
				self._remember("NAME")
				return
			yield from self._emit_keyword(sym, tok)
			return
		value = tok.value
		scope = None
		type_ = self._type(value, tok)
		if value == "{":
			scope = self._brace_kind()
			if scope == "object":
				type_ = _OBJ_OPEN
			self.stack.append(scope)
		elif value == "(":
			head = self.prev in _HEAD_KEYWORDS or (self.prev == "await" and self.prev_prev == "for")
			if head and self.do_tail:
				self.stack.append("do_head")
			else:
				self.stack.append("head" if head else "paren")
			self.do_tail = False
		elif value == "[":
			self.stack.append("bracket")
		elif value in ("}", ")", "]"):
			if not self.stack:
				raise JsSyntaxError(f"unbalanced {value!r}", loc=Located(tok.line, tok.column))
			scope = self.stack.pop()
			expected = ")" if scope in ("head", "do_head", "paren") else ("]" if scope == "bracket" else "}")
			if value != expected:
				raise JsSyntaxError(f"unbalanced {value!r}", loc=Located(tok.line, tok.column))
		elif value == ";":
			if self._statement_scope():
				yield self._token(_TERM, ";", tok)
				self._remember(_TERM)
				return
		elif value == ":" and self.case_label:
			self.case_label = False
			yield self._token(type_, value, tok)
			self._remember(value, scope)
			self.case_colon = True
			return
		yield self._token(type_, value, tok)
		self._remember(_OBJ_OPEN if type_ == _OBJ_OPEN else value, scope)

	def _emit_keyword(self, word: str, tok: RawToken) -> Iterator[Token]:
		type_ = self._type(word, tok)
		if word == "async":
			self.async_at_start = self._at_statement_start()
		elif word in ("function", "class"):
			decl = self.async_at_start if self.prev == "async" else self._at_statement_start()
			if word == "function":
				self.pending.append((len(self.stack), "block" if decl else "expr_block"))
				type_ = _FUNCTION_DECL if decl else type_
			else:
				self.pending.append((len(self.stack), "class" if decl else "class_expr"))
				type_ = _CLASS_DECL if decl else type_
		elif word in ("case", "default") and self._statement_scope() and self.prev != "export":
			self.case_label = True
		elif word == "do":
			self.dos.append(len(self.stack))
		elif word == "while" and self.dos and self.dos[-1] == len(self.stack) and self.prev in ("}", _TERM):
			self.dos.pop()
			self.do_tail = True
		yield self._token(type_, tok.value, tok)
		self._remember(word)

	# --- helpers ---------------------------------------------------------------

	def _remember(self, sym: str, scope: Optional[str] = None) -> None:
		self.prev_prev = self.prev
		self.prev = sym
		self.prev_scope = scope
		self.case_colon = False

	def _type(self, literal: str, tok: RawToken) -> str:
		try:
			return self.types[literal]
		except KeyError:
			raise JsSyntaxError(f"unsupported syntax {literal!r}", loc=Located(tok.line, tok.column)) from None

	@staticmethod
	def _token(type_: str, value: str, tok: RawToken) -> Token:
		return Token(type_, value, tok.pos, tok.line, tok.column, tok.end_line, tok.end_column, tok.end_pos)


class JsLexer(Lexer):
	"""Custom Lark lexer: `scan` + `TerminatorInserter`."""

	def __init__(self, lexer_conf) -> None:
		self.types = {
			term.pattern.value: term.name for term in lexer_conf.terminals if isinstance(term.pattern, PatternStr)
		}

	def lex(self, data: str) -> Iterator[Token]:
		return TerminatorInserter(self.types).process(scan(data))


_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|.|\n)", re.S)


def decode_string(raw: str) -> str:
	"""Cook a quoted JS string literal into its value."""

	def _cook(m: re.Match) -> str:
		esc = m.group(1)
		if esc in ("\n", "\r\n", "\r", "\u2028", "\u2029"):
			return ""
		if esc.startswith("u{"):
			return chr(int(esc[2:-1], 16))
		if esc[0] in "ux" and len(esc) > 1:
			return chr(int(esc[1:], 16))
		return _ESCAPES.get(esc, esc)

	return _ESCAPE_RE.sub(_cook, raw[1:-1])


__all__ = ["JsLexer", "JsSyntaxError", "RawToken", "TerminatorInserter", "decode_string", "scan"]
