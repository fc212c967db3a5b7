"""
Invocation site rewriting.

Finds every `capture!( ... )` invocation in a piece of host source text
and replaces it with its expansion. Also accepts `[...]` and `{...}`
delimiters and path-qualified names (`capture::capture!(...)`).

Each site is expanded independently: a malformed site is reported and left
untouched, and every other site is still rewritten.

Lexical notes:
    - String literals (plain, byte and raw), character literals and
      comments are skipped when looking for sites and matching delimiters
    - A quote not forming a character literal is a lifetime (`'a`)
    - Invocations nested inside a body are expanded as well
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from capture.config import CaptureConfig
from capture.expander import expand
from capture.parser import CaptureSyntaxError, skip_comment

logger = logging.getLogger(__name__)


class UnterminatedInvocationError(CaptureSyntaxError):
    """Raised when an invocation's delimiters never close."""
    pass


_CLOSERS = {"(": ")", "[": "]", "{": "}"}

_STRING_RE = re.compile(r'b?"(?:\\.|[^"\\])*"', re.DOTALL)
_RAW_STRING_RE = re.compile(r'b?r(#*)"')
_CHAR_RE = re.compile(r"b?'(?:\\(?:u\{[0-9a-fA-F]+\}|x[0-9a-fA-F]{2}|.)|[^'\\\n])'")


@dataclass
class Invocation:
    """One invocation site in a source text."""
    start: int
    end: int
    line: int
    delimiter: str
    arguments: str

    @property
    def closing(self) -> str:
        return _CLOSERS[self.delimiter]


@dataclass
class SiteError:
    """A site that failed to expand."""
    line: int
    message: str
    text: str = ""


@dataclass
class SourceExpansion:
    """Result of rewriting a source text."""
    source: str
    sites: int = 0
    expanded: int = 0
    errors: List[SiteError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _invocation_re(macro_name: str) -> "re.Pattern":
    return re.compile(
        r'(?<![\w:])((?:[A-Za-z_]\w*\s*::\s*)*)' + re.escape(macro_name) + r'\s*!\s*([(\[{])'
    )


def _skip_literal(source: str, pos: int) -> Optional[int]:
    """
    If a comment or literal starts at `pos`, return the offset just past it.

    Unterminated comments and strings run to the end of the source.
    """
    skipped = skip_comment(source, pos)
    if skipped is not None:
        return skipped

    if pos > 0 and (source[pos - 1].isalnum() or source[pos - 1] == "_"):
        # A literal prefix (b, r) only counts at the start of a token
        return None

    raw = _RAW_STRING_RE.match(source, pos)
    if raw:
        terminator = '"' + raw.group(1)
        close = source.find(terminator, raw.end())
        return len(source) if close == -1 else close + len(terminator)

    for pattern in (_STRING_RE, _CHAR_RE):
        match = pattern.match(source, pos)
        if match:
            return match.end()

    if source[pos] == '"':
        return len(source)
    return None


def _find_closing(source: str, open_pos: int, base_line: int) -> int:
    """Return the offset of the delimiter closing the one at `open_pos`."""
    stack = [_CLOSERS[source[open_pos]]]
    pos = open_pos + 1

    while pos < len(source):
        skipped = _skip_literal(source, pos)
        if skipped is not None:
            pos = skipped
            continue

        char = source[pos]
        if char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in ")]}":
            expected = stack.pop()
            if char != expected:
                raise CaptureSyntaxError(
                    f"Mismatched delimiter: expected '{expected}', got '{char}'", pos
                )
            if not stack:
                return pos
        pos += 1

    raise UnterminatedInvocationError(
        f"Invocation opened on line {base_line} is never closed", open_pos
    )


def _line_of(source: str, offset: int) -> int:
    return source.count("\n", 0, offset) + 1


def find_invocations(source: str, macro_name: str = "capture") -> List[Invocation]:
    """
    Locate the outermost invocation sites in `source`.

    Raises:
        CaptureSyntaxError: If a site's delimiters are mismatched or unclosed
    """
    pattern = _invocation_re(macro_name)
    invocations: List[Invocation] = []
    pos = 0

    while pos < len(source):
        skipped = _skip_literal(source, pos)
        if skipped is not None:
            pos = skipped
            continue

        match = pattern.match(source, pos)
        if match is None:
            pos += 1
            continue

        open_pos = match.end() - 1
        line = _line_of(source, match.start())
        close_pos = _find_closing(source, open_pos, line)
        invocations.append(Invocation(
            start=match.start(),
            end=close_pos + 1,
            line=line,
            delimiter=match.group(2),
            arguments=source[open_pos + 1:close_pos],
        ))
        pos = close_pos + 1

    return invocations


def _rewrite(source: str, config: CaptureConfig, first_line: int, result: SourceExpansion) -> str:
    """Expand every site in `source`, recording counts and errors in `result`."""
    try:
        invocations = find_invocations(source, config.macro_name)
    except CaptureSyntaxError as e:
        line = first_line + (_line_of(source, e.offset) - 1 if e.offset is not None else 0)
        result.errors.append(SiteError(line=line, message=e.message))
        return source

    pieces: List[str] = []
    last = 0
    for site in invocations:
        result.sites += 1
        line = first_line + site.line - 1
        arguments_start = site.end - 1 - len(site.arguments)
        inner_first_line = first_line + _line_of(source, arguments_start) - 1
        original = source[site.start:site.end]

        arguments = _rewrite(site.arguments, config, inner_first_line, result)
        try:
            expansion = expand(arguments, config=config)
        except CaptureSyntaxError as e:
            logger.debug("Site on line %d failed: %s", line, e)
            result.errors.append(SiteError(line=line, message=str(e), text=original))
            expansion = original
        else:
            result.expanded += 1

        pieces.append(source[last:site.start])
        pieces.append(expansion)
        last = site.end

    pieces.append(source[last:])
    return "".join(pieces)


def expand_source(source: str, config: Optional[CaptureConfig] = None) -> SourceExpansion:
    """
    Rewrite every invocation site in a source text.

    Args:
        source: Host source code
        config: Expansion settings (macro name, target, alias policy)

    Returns:
        SourceExpansion with the rewritten text and per-site errors
    """
    config = config or CaptureConfig()
    result = SourceExpansion(source=source)
    result.source = _rewrite(source, config, 1, result)

    logger.info(
        "Expanded %d of %d %s! site(s)", result.expanded, result.sites, config.macro_name
    )
    return result


def expand_file(filepath: str, config: Optional[CaptureConfig] = None) -> SourceExpansion:
    """
    Rewrite every invocation site in a file.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Source file not found: {filepath}")

    return expand_source(content, config=config)


__all__ = [
    "Invocation",
    "SiteError",
    "SourceExpansion",
    "UnterminatedInvocationError",
    "expand_file",
    "expand_source",
    "find_invocations",
]
