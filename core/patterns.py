"""Regular expression handling for translation rules and routes.

Directory patterns and replacement templates use the conventions of the
telephony directory rather than Python's:
- named groups may be written (?<name>...) or (?'name'...)
- replacements reference groups as $1, ${1}, ${name}; $0 and $& are the
  whole match, $+ the last group, $_ the whole input, $` and $' the input
  before and after the match, and $$ is a literal dollar sign
"""

__all__ = [
    "compile_pattern",
    "expand_replacement",
    "pattern_matches",
]

import logging
import re
from functools import lru_cache

from core.errors import InvalidPattern

logger = logging.getLogger(__name__)

# Opening of a named group; lookbehinds (?<= and (?<! never match \w+>
_NAMED_GROUP_OPEN = re.compile(r"\(\?(?:<(?P<angle>\w+)>|'(?P<quote>\w+)')")

_TEMPLATE_TOKEN = re.compile(r"\$(?:(\$)|([&+_`'])|(\d+)|\{(\w+)\})")


def _to_python_syntax(pattern: str) -> str:
    """Rewrite directory named groups as (?P<name>...).

    Escaped characters and character classes are copied untouched, so only
    a "(?<" that really opens a group is rewritten.
    """
    out: list[str] = []
    i = 0
    in_class = False
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            out.append(pattern[i:i + 2])
            i += 2
            continue
        if in_class:
            if ch == "]":
                in_class = False
            out.append(ch)
            i += 1
            continue
        if ch == "[":
            in_class = True
            out.append(ch)
            i += 1
            # "]" right after "[" or "[^" is a literal member
            if pattern.startswith("^", i):
                out.append("^")
                i += 1
            if pattern.startswith("]", i):
                out.append("]")
                i += 1
            continue
        if ch == "(":
            group = _NAMED_GROUP_OPEN.match(pattern, i)
            if group:
                out.append(f"(?P<{group.group('angle') or group.group('quote')}>")
                i = group.end()
                continue
        out.append(ch)
        i += 1
    return "".join(out)


@lru_cache(maxsize=2048)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(_to_python_syntax(pattern))


def compile_pattern(pattern: str, source: str | None = None) -> re.Pattern[str]:
    """Compile a directory pattern, caching the result.

    Args:
        pattern: Regular expression as stored in the directory.
        source: Name of the rule or route the pattern belongs to, for errors.

    Raises:
        InvalidPattern: If the pattern does not compile.
    """
    try:
        return _compile(pattern)
    except re.error as e:
        logger.warning(f"Rejecting pattern {pattern!r} from {source or 'unknown source'}: {e}")
        raise InvalidPattern(pattern, str(e), source) from e


def pattern_matches(pattern: str, number: str, source: str | None = None) -> bool:
    """Match anywhere in the number unless the pattern is anchored."""
    return compile_pattern(pattern, source).search(number) is not None


def expand_replacement(match: re.Match[str], template: str) -> str:
    """Expand a directory replacement template for one match.

    Groups that did not take part in the match expand to an empty string.
    References to groups the pattern does not define are left as written.
    """
    group_count = match.re.groups

    def _substitute(token: re.Match[str]) -> str:
        dollar, symbol, digits, braced = token.groups()
        if dollar:
            return "$"
        if symbol == "&":
            return match.group(0)
        if symbol == "+":
            # Last group of the pattern; the whole match when there are none
            return match.group(group_count) or ""
        if symbol == "_":
            return match.string
        if symbol == "`":
            return match.string[:match.start()]
        if symbol == "'":
            return match.string[match.end():]
        if digits is not None:
            # $12 means group 12 when it exists, otherwise group 1 followed by "2"
            for end in range(len(digits), 0, -1):
                index = int(digits[:end])
                if index <= group_count:
                    return (match.group(index) or "") + digits[end:]
            return token.group(0)
        if braced.isdigit():
            index = int(braced)
            if index <= group_count:
                return match.group(index) or ""
            return token.group(0)
        if braced in match.re.groupindex:
            return match.group(braced) or ""
        return token.group(0)

    return _TEMPLATE_TOKEN.sub(_substitute, template)
