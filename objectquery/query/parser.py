"""
Filter expression parsing for objectquery.

Parses the textual filter expressions produced by ``ObjectQuery`` (or
written by hand) into ``Filter`` trees, binding positional placeholders
to their values.

Grammar:
    expr       := and_expr ("OR" and_expr)*
    and_expr   := not_expr ("AND" not_expr)*
    not_expr   := "NOT" not_expr | atom
    atom       := "(" [expr] ")" | TRUEPREDICATE | FALSEPREDICATE | comparison
    comparison := FIELD OP operand
    operand    := "$" INT | number | quoted string | true | false | null

Operators: ``== = <> != > >= < <= BEGINSWITH ENDSWITH CONTAINS``, the
string operators optionally suffixed with ``[c]``. Keywords are
case-insensitive. An empty clause ``()`` matches nothing.

Example:
    >>> filter = parse_expression("age > $0 AND NOT(name == $1)", 30, "elias")
    >>> filter.evaluate({"age": 34, "name": "necati"})
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, List, Sequence

from ..core.exceptions import ExpressionSyntaxError, PlaceholderError
from .filters import (
    Filter,
    FieldFilter,
    FilterOperator,
    AndFilter,
    OrFilter,
    NotFilter,
    ConstantFilter,
)


class TokenType(Enum):
    """Token types for the expression parser."""

    FIELD = auto()        # age, owner.name
    OPERATOR = auto()     # ==, BEGINSWITH[c]
    PLACEHOLDER = auto()  # $0
    LITERAL = auto()      # 42, "text", true, null
    AND = auto()
    OR = auto()
    NOT = auto()
    CONSTANT = auto()     # TRUEPREDICATE / FALSEPREDICATE
    LPAREN = auto()
    RPAREN = auto()
    EOF = auto()


@dataclass
class Token:
    """A token from the expression string."""

    type: TokenType
    value: Any
    pos: int  # Position in original string for error messages


# Longest first so ">=" wins over ">"
SYMBOL_OPERATORS = {
    "==": FilterOperator.EQ,
    "<>": FilterOperator.NE,
    "!=": FilterOperator.NE,
    ">=": FilterOperator.GTE,
    "<=": FilterOperator.LTE,
    "=": FilterOperator.EQ,
    ">": FilterOperator.GT,
    "<": FilterOperator.LT,
}

WORD_OPERATORS = {
    "BEGINSWITH": FilterOperator.BEGINSWITH,
    "ENDSWITH": FilterOperator.ENDSWITH,
    "CONTAINS": FilterOperator.CONTAINS,
}

KEYWORDS = {
    "AND": TokenType.AND,
    "OR": TokenType.OR,
    "NOT": TokenType.NOT,
}

LITERAL_WORDS = {
    "TRUE": True,
    "FALSE": False,
    "NULL": None,
    "NIL": None,
}

CONSTANTS = {
    "TRUEPREDICATE": True,
    "FALSEPREDICATE": False,
}

CASE_MARKER = "[c]"


class Tokenizer:
    """Tokenizer for filter expressions."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos].isspace():
            self.pos += 1

    def _read_while(self, predicate) -> str:
        start = self.pos
        while self.pos < self.length and predicate(self.text[self.pos]):
            self.pos += 1
        return self.text[start:self.pos]

    def _read_quoted_string(self) -> str:
        """Read a single- or double-quoted string, handling escapes."""
        quote = self.text[self.pos]
        start_pos = self.pos
        self.pos += 1
        result: List[str] = []

        while self.pos < self.length:
            ch = self.text[self.pos]
            if ch == quote:
                self.pos += 1
                return "".join(result)
            if ch == "\\":
                self.pos += 1
                if self.pos >= self.length:
                    break
                escaped = self.text[self.pos]
                result.append({"n": "\n", "t": "\t", "r": "\r"}.get(escaped, escaped))
            else:
                result.append(ch)
            self.pos += 1

        raise ExpressionSyntaxError(
            f"Unterminated string starting at position {start_pos}", start_pos
        )

    def _read_case_marker(self) -> bool:
        if self.text.startswith(CASE_MARKER, self.pos):
            self.pos += len(CASE_MARKER)
            return True
        return False

    def _read_number(self, start_pos: int) -> Any:
        text = self._read_while(lambda c: c.isdigit() or c in "+-.eE")
        try:
            if any(c in text for c in ".eE"):
                return float(text)
            return int(text)
        except ValueError:
            raise ExpressionSyntaxError(
                f"Invalid number '{text}' at position {start_pos}", start_pos
            ) from None

    def tokenize(self) -> List[Token]:
        """Tokenize the entire expression."""
        tokens: List[Token] = []

        while True:
            self._skip_whitespace()

            if self.pos >= self.length:
                tokens.append(Token(TokenType.EOF, "", self.pos))
                break

            ch = self.text[self.pos]
            start_pos = self.pos

            if ch == "(":
                tokens.append(Token(TokenType.LPAREN, "(", start_pos))
                self.pos += 1
                continue

            if ch == ")":
                tokens.append(Token(TokenType.RPAREN, ")", start_pos))
                self.pos += 1
                continue

            if ch in "\"'":
                value = self._read_quoted_string()
                tokens.append(Token(TokenType.LITERAL, value, start_pos))
                continue

            if ch == "$":
                self.pos += 1
                digits = self._read_while(str.isdigit)
                if not digits:
                    raise ExpressionSyntaxError(
                        f"Expected placeholder index after '$' at position {start_pos}",
                        start_pos,
                    )
                tokens.append(Token(TokenType.PLACEHOLDER, int(digits), start_pos))
                continue

            symbol = next(
                (s for s in SYMBOL_OPERATORS if self.text.startswith(s, self.pos)),
                None,
            )
            if symbol is not None:
                self.pos += len(symbol)
                case_insensitive = self._read_case_marker()
                tokens.append(Token(
                    TokenType.OPERATOR,
                    (SYMBOL_OPERATORS[symbol], case_insensitive),
                    start_pos,
                ))
                continue

            if ch.isdigit() or (ch in "+-." and self.pos + 1 < self.length
                                and self.text[self.pos + 1].isdigit()):
                tokens.append(Token(TokenType.LITERAL, self._read_number(start_pos), start_pos))
                continue

            if ch.isalpha() or ch == "_":
                word = self._read_while(lambda c: c.isalnum() or c in "_.")
                tokens.append(self._classify_word(word, start_pos))
                continue

            raise ExpressionSyntaxError(
                f"Unexpected character '{ch}' at position {start_pos}", start_pos
            )

        return tokens

    def _classify_word(self, word: str, start_pos: int) -> Token:
        upper = word.upper()

        if upper in WORD_OPERATORS:
            case_insensitive = self._read_case_marker()
            return Token(
                TokenType.OPERATOR,
                (WORD_OPERATORS[upper], case_insensitive),
                start_pos,
            )
        if upper in KEYWORDS:
            return Token(KEYWORDS[upper], upper, start_pos)
        if upper in CONSTANTS:
            return Token(TokenType.CONSTANT, CONSTANTS[upper], start_pos)
        if upper in LITERAL_WORDS:
            return Token(TokenType.LITERAL, LITERAL_WORDS[upper], start_pos)
        return Token(TokenType.FIELD, word, start_pos)


class ExpressionParser:
    """Recursive descent parser for filter expressions."""

    def __init__(self, tokens: List[Token], values: Sequence[Any] = ()):
        self.tokens = tokens
        self.values = values
        self.pos = 0

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _error(self, message: str, token: Token) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(f"{message} at position {token.pos}", token.pos)

    def parse(self) -> Filter:
        """Parse the token stream into a Filter."""
        if self._current().type == TokenType.EOF:
            raise self._error("Empty filter expression", self._current())

        expr = self._parse_or_expr()

        token = self._current()
        if token.type != TokenType.EOF:
            raise self._error(f"Unexpected token '{token.value}'", token)

        return expr

    def _parse_or_expr(self) -> Filter:
        """Parse OR expressions (lowest precedence)."""
        filters = [self._parse_and_expr()]

        while self._current().type == TokenType.OR:
            self._advance()
            filters.append(self._parse_and_expr())

        return filters[0] if len(filters) == 1 else OrFilter(filters)

    def _parse_and_expr(self) -> Filter:
        """Parse AND expressions (medium precedence)."""
        filters = [self._parse_not_expr()]

        while self._current().type == TokenType.AND:
            self._advance()
            filters.append(self._parse_not_expr())

        return filters[0] if len(filters) == 1 else AndFilter(filters)

    def _parse_not_expr(self) -> Filter:
        """Parse NOT expressions (high precedence)."""
        if self._current().type == TokenType.NOT:
            self._advance()
            return NotFilter(self._parse_not_expr())

        return self._parse_atom()

    def _parse_atom(self) -> Filter:
        """Parse comparisons, constants and parenthesized expressions."""
        token = self._current()

        if token.type == TokenType.LPAREN:
            self._advance()
            if self._current().type == TokenType.RPAREN:
                # Empty clause, e.g. an IN over no values
                self._advance()
                return ConstantFilter(False)
            expr = self._parse_or_expr()
            closing = self._current()
            if closing.type != TokenType.RPAREN:
                raise self._error("Unbalanced parentheses: expected ')'", closing)
            self._advance()
            return expr

        if token.type == TokenType.CONSTANT:
            self._advance()
            return ConstantFilter(token.value)

        if token.type == TokenType.FIELD:
            return self._parse_comparison()

        if token.type == TokenType.EOF:
            raise self._error("Unexpected end of expression", token)

        raise self._error(f"Unexpected token '{token.value}'", token)

    def _parse_comparison(self) -> Filter:
        """Parse ``FIELD OP operand``."""
        field_token = self._advance()

        op_token = self._current()
        if op_token.type != TokenType.OPERATOR:
            raise self._error(
                f"Expected operator after field '{field_token.value}'", op_token
            )
        self._advance()
        operator, case_insensitive = op_token.value

        return FieldFilter(
            field_token.value,
            operator,
            self._parse_operand(),
            case_insensitive=case_insensitive,
        )

    def _parse_operand(self) -> Any:
        token = self._current()

        if token.type == TokenType.PLACEHOLDER:
            self._advance()
            index = token.value
            if index >= len(self.values):
                raise PlaceholderError(
                    f"Placeholder ${index} at position {token.pos} has no bound value "
                    f"({len(self.values)} given)"
                )
            return self.values[index]

        if token.type == TokenType.LITERAL:
            self._advance()
            return token.value

        raise self._error("Expected value after operator", token)


def tokenize(expression: str) -> List[Token]:
    """Split an expression into tokens."""
    return Tokenizer(expression).tokenize()


def parse_expression(expression: str, *values: Any) -> Filter:
    """
    Parse a filter expression.

    Args:
        expression: Filter expression text
        *values: Values bound positionally to ``$0``, ``$1``, ...

    Returns:
        Filter object
    """
    return ExpressionParser(tokenize(expression), values).parse()
