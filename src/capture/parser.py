"""
Capture List Parser (Layer 1: Raw Input → Capture Clause Model).

Converts the argument text of one `capture!(...)` invocation into a
CaptureList.

Syntax:
    capture-list  := ("," | clause)* terminal
    clause        := "move" IDENT
                   | "ref" "mut" IDENT
                   | "ref" IDENT
                   | IDENT IDENT          (method-name, identifier)
    terminal      := "in" EXPR

Syntax Notes:
    - Commas between clauses are optional; a stray comma is skipped
    - Comments between clauses are ignored
    - `ref mut` is matched before plain `ref`
    - Everything after the first `in` is the body, kept verbatim; it is
      not checked for top-level commas, which closure parameter lists
      (`|a, b| a + b`) and generic arguments also contain
    - Keywords are never identifiers (`move in x` is malformed)
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from capture.clauses import (
    Body,
    CaptureList,
    Clause,
    MethodClause,
    MoveClause,
    RefClause,
    RefMutClause,
)

logger = logging.getLogger(__name__)


class CaptureSyntaxError(Exception):
    """Raised when a capture list does not match the grammar."""

    def __init__(self, message: str, offset: Optional[int] = None):
        self.message = message
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)


# Strict and reserved keywords of the host expression language.
KEYWORDS = frozenset({
    "_", "as", "async", "await", "break", "const", "continue", "crate",
    "dyn", "else", "enum", "extern", "false", "fn", "for", "if", "impl",
    "in", "let", "loop", "match", "mod", "move", "mut", "pub", "ref",
    "return", "self", "Self", "static", "struct", "super", "trait", "true",
    "type", "unsafe", "use", "where", "while",
    "abstract", "become", "box", "do", "final", "macro", "override",
    "priv", "try", "typeof", "unsized", "virtual", "yield",
})


class TokenKind(Enum):
    """Token categories in the clause region."""
    COMMA = "comma"
    KEYWORD = "keyword"
    IDENT = "ident"
    BODY = "body"
    OTHER = "other"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    offset: int


_WORD_RE = re.compile(r'(?:r#)?[^\W\d]\w*')
_SPACE_RE = re.compile(r'\s*')


def skip_comment(text: str, pos: int) -> Optional[int]:
    """
    If a `//` or `/* */` comment starts at `pos`, return the offset just past it.

    Block comments nest. Unterminated comments run to the end of the text.
    """
    if text.startswith("//", pos):
        newline = text.find("\n", pos)
        return len(text) if newline == -1 else newline + 1

    if text.startswith("/*", pos):
        depth = 0
        i = pos
        while i < len(text):
            if text.startswith("/*", i):
                depth += 1
                i += 2
            elif text.startswith("*/", i):
                depth -= 1
                i += 2
                if depth == 0:
                    return i
            else:
                i += 1
        return len(text)

    return None


def _skip_space(text: str, pos: int) -> int:
    """Skip whitespace and comments."""
    while True:
        pos = _SPACE_RE.match(text, pos).end()
        skipped = skip_comment(text, pos)
        if skipped is None:
            return pos
        pos = skipped


def tokenize(text: str) -> List[Token]:
    """
    Tokenize the clause region of a capture list.

    Comments between clauses are skipped. Scanning stops at the first `in`
    keyword: the rest of the text (stripped) becomes a single BODY token,
    or nothing if it is empty or holds only comments.

    Args:
        text: Argument text of one invocation

    Returns:
        List of tokens in source order
    """
    tokens: List[Token] = []
    pos = 0
    end = len(text)

    while True:
        pos = _skip_space(text, pos)
        if pos >= end:
            break

        if text[pos] == ',':
            tokens.append(Token(TokenKind.COMMA, ',', pos))
            pos += 1
            continue

        match = _WORD_RE.match(text, pos)
        if match is None:
            # Anything else is a single stray character
            tokens.append(Token(TokenKind.OTHER, text[pos], pos))
            pos += 1
            continue

        word = match.group(0)
        if word in KEYWORDS:
            tokens.append(Token(TokenKind.KEYWORD, word, pos))
        else:
            tokens.append(Token(TokenKind.IDENT, word, pos))
        pos = match.end()

        if word == "in":
            if _skip_space(text, pos) < end:
                rest = text[pos:]
                body_offset = pos + (len(rest) - len(rest.lstrip()))
                tokens.append(Token(TokenKind.BODY, rest.strip(), body_offset))
            break

    return tokens


def _is_keyword(tokens: List[Token], pos: int, word: str) -> bool:
    return (pos < len(tokens)
            and tokens[pos].kind == TokenKind.KEYWORD
            and tokens[pos].text == word)


def _is_ident(tokens: List[Token], pos: int) -> bool:
    return pos < len(tokens) and tokens[pos].kind == TokenKind.IDENT


def _expect_ident(tokens: List[Token], pos: int, after: str, end: int) -> Tuple[Token, int]:
    """Consume one identifier or fail with a message naming what preceded it."""
    if _is_ident(tokens, pos):
        return tokens[pos], pos + 1
    if pos >= len(tokens):
        raise CaptureSyntaxError(f"Expected identifier after '{after}', got end of input", end)
    raise CaptureSyntaxError(
        f"Expected identifier after '{after}', got '{tokens[pos].text}'", tokens[pos].offset
    )


def _parse_terminal(tokens: List[Token], pos: int) -> Tuple[Body, int]:
    """Parse `in EXPR` (production 5)."""
    in_token = tokens[pos]
    pos += 1

    if pos >= len(tokens) or tokens[pos].kind != TokenKind.BODY:
        raise CaptureSyntaxError("Expected expression after 'in'", in_token.offset)

    body_token = tokens[pos]
    if body_token.text.endswith(','):
        raise CaptureSyntaxError(
            "Unexpected tokens after body expression",
            body_token.offset + len(body_token.text) - 1,
        )

    return Body(body_token.text, offset=body_token.offset), pos + 1


def _parse_clause(tokens: List[Token], pos: int, end: int) -> Tuple[Clause, int]:
    """Parse a single clause (productions 2, 3, 4 and 6)."""
    token = tokens[pos]

    # move IDENT
    if _is_keyword(tokens, pos, "move"):
        ident, pos = _expect_ident(tokens, pos + 1, "move", end)
        return MoveClause(ident.text, offset=token.offset), pos

    # ref mut IDENT (longer match first)
    if _is_keyword(tokens, pos, "ref") and _is_keyword(tokens, pos + 1, "mut"):
        ident, pos = _expect_ident(tokens, pos + 2, "ref mut", end)
        return RefMutClause(ident.text, offset=token.offset), pos

    # ref IDENT
    if _is_keyword(tokens, pos, "ref"):
        ident, pos = _expect_ident(tokens, pos + 1, "ref", end)
        return RefClause(ident.text, offset=token.offset), pos

    # method-name IDENT
    if token.kind == TokenKind.IDENT:
        ident, pos = _expect_ident(tokens, pos + 1, token.text, end)
        return MethodClause(token.text, ident.text, offset=token.offset), pos

    raise CaptureSyntaxError(f"Unexpected token: '{token.text}'", token.offset)


def parse_capture_list(text: str) -> CaptureList:
    """
    Parse capture list text into a CaptureList.

    Args:
        text: Argument text, e.g. "move x, ref y, clone z in move || x + *y + z"

    Returns:
        CaptureList with clauses in source order and the verbatim body

    Raises:
        CaptureSyntaxError: If the text does not match the grammar
    """
    tokens = tokenize(text)
    end = len(text)
    clauses: List[Clause] = []
    pos = 0

    while True:
        if pos >= len(tokens):
            raise CaptureSyntaxError("Missing terminal 'in <expression>'", end)

        # A single leading separator is skipped
        if tokens[pos].kind == TokenKind.COMMA:
            pos += 1
            continue

        if _is_keyword(tokens, pos, "in"):
            body, pos = _parse_terminal(tokens, pos)
            break

        clause, pos = _parse_clause(tokens, pos, end)
        logger.debug("Matched %s clause for '%s'", clause.mode.value, clause.identifier)
        clauses.append(clause)

    logger.debug("Parsed capture list with %d clause(s)", len(clauses))
    return CaptureList(clauses=tuple(clauses), body=body)


__all__ = [
    "parse_capture_list",
    "skip_comment",
    "tokenize",
    "CaptureSyntaxError",
    "KEYWORDS",
    "Token",
    "TokenKind",
]
