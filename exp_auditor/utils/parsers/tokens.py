"""
Line normalization and keyword-anchored token scanning.

Everything here is total: any input text yields a (possibly empty) result and
no helper raises on malformed content.
"""
import re
import logging
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", "//")

# Command verbs that may precede an anchor keyword ("set ips enable")
COMMAND_PREFIXES = frozenset({"set", "add"})

# Section words some exports put in front of a statement ("config access-rule ...")
CONTAINER_PREFIXES = frozenset({"config", "security-services"})

LEADING_PREFIXES = COMMAND_PREFIXES | CONTAINER_PREFIXES
MAX_PREFIX_TOKENS = 2

ENABLE_WORDS = frozenset({"enable", "enabled", "on", "yes", "true"})
DISABLE_WORDS = frozenset({"disable", "disabled", "off", "no", "false"})

# A double-quoted string (an unclosed quote runs to end of line) or a bare word.
# No nested quantifiers: matching is linear even on very long lines.
TOKEN_PATTERN = re.compile(r'"([^"]*)"?|([^\s"]+)')


class ConfigLine(NamedTuple):
    """A kept source line with its tokens.

    ``tokens`` holds token values (quoted strings without their quotes).
    ``words`` holds the lower-cased keyword form of each bare token and
    ``None`` for quoted tokens, which never match a keyword.
    """
    number: int
    text: str
    tokens: Tuple[str, ...]
    words: Tuple[Optional[str], ...]


def decode_config(content: Union[str, bytes, None]) -> str:
    """Return config content as text, replacing undecodable bytes."""
    if content is None:
        return ""
    if isinstance(content, (bytes, bytearray)):
        return bytes(content).decode("utf-8", errors="replace")
    return content


def tokenize(text: str) -> Tuple[Tuple[str, ...], Tuple[Optional[str], ...]]:
    """Split a line into token values and their keyword forms."""
    tokens = []
    words = []
    for match in TOKEN_PATTERN.finditer(text):
        bare = match.group(2)
        if bare is not None:
            tokens.append(bare)
            words.append(bare.lower())
        else:
            tokens.append(match.group(1))
            words.append(None)
    return tuple(tokens), tuple(words)


def normalize_lines(content: Union[str, bytes, None]) -> List[ConfigLine]:
    """
    Split raw config text into cleaned, tokenized lines.

    Lines are trimmed; blank lines and lines starting with ``#`` or ``//``
    are dropped. Everything else passes through untouched, whatever bytes it
    contains or however long it is.

    Args:
        content: The configuration file content

    Returns:
        Kept lines in source order, numbered from 1
    """
    text = decode_config(content)
    lines = []
    for number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue
        tokens, words = tokenize(line)
        if not tokens:
            continue
        lines.append(ConfigLine(number, line, tokens, words))
    return lines


def match_anchor(words: Sequence[Optional[str]], phrases: Sequence[Tuple[str, ...]]) -> Optional[int]:
    """
    Check whether a line starts with one of the anchor phrases.

    The phrase may be preceded by up to two prefix words, either command
    verbs (``set``/``add``) or section words (``config``, ``security-services``).

    Returns:
        Index of the first token after the matched phrase, or None
    """
    start = 0
    while start < MAX_PREFIX_TOKENS and start < len(words) and words[start] in LEADING_PREFIXES:
        start += 1
    for phrase in phrases:
        end = start + len(phrase)
        if tuple(words[start:end]) == phrase:
            return end
    return None


def scan_fields(
    line: ConfigLine,
    start: int,
    field_keywords: Mapping[str, str],
    flag_keywords: Optional[Mapping[str, bool]] = None,
) -> Tuple[Dict[str, str], Optional[bool]]:
    """
    Read ``keyword value`` pairs from a line.

    A field keyword takes the next token as its value unless that token is
    itself a field keyword, in which case the value is missing. Repeated
    keywords: the last occurrence wins. Flag keywords are bare toggles; the
    last one seen is returned.

    Args:
        line: Tokenized line
        start: Index to start scanning from
        field_keywords: Keyword -> field name
        flag_keywords: Keyword -> flag value

    Returns:
        (field values by field name, last flag value or None)
    """
    fields: Dict[str, str] = {}
    flag = None
    words = line.words
    i = start
    count = len(words)
    while i < count:
        word = words[i]
        if word in field_keywords:
            if i + 1 < count and words[i + 1] not in field_keywords:
                fields[field_keywords[word]] = line.tokens[i + 1]
                i += 2
                continue
        elif flag_keywords and word in flag_keywords:
            flag = flag_keywords[word]
        i += 1
    return fields, flag


def find_state(words: Sequence[Optional[str]], start: int, window: int = 3,
               enable_words=ENABLE_WORDS, disable_words=DISABLE_WORDS) -> Optional[bool]:
    """
    Find the first enable/disable word within ``window`` tokens of ``start``.

    Returns:
        True, False, or None when no state word is present
    """
    for word in words[start:start + window]:
        if word in enable_words:
            return True
        if word in disable_words:
            return False
    return None


def value_after(line: ConfigLine, index: int) -> Optional[str]:
    """Token value at ``index``, or None past the end of the line."""
    if index < len(line.tokens):
        return line.tokens[index]
    return None


def parse_port(value: Optional[str], default: int) -> int:
    """Parse a TCP/UDP port, falling back to ``default`` when invalid or out of range."""
    if value is None:
        return default
    value = value.strip()
    # int() would also take "8_443", "+443" and non-ASCII digits
    if not (value.isascii() and value.isdigit()):
        return default
    port = int(value)
    if 1 <= port <= 65535:
        return port
    return default
