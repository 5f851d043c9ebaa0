# autosort/patterns.py
"""Compile trigger glob patterns into regular expressions."""

import re

from autosort.errors import PatternError


def compile_glob(pattern: str) -> re.Pattern:
    """
    Compile a glob into a regex that must match the whole path.

    Supported syntax:
        *        any run of characters, path separators included
        ?        exactly one character
        [abc]    one of the listed characters, ranges like [a-z]
        [!abc]   any character except the listed ones ([^abc] also accepted)
        {a,b}    one of the comma-separated alternatives, may nest
        \\x      the literal character x

    Raises PatternError on an unclosed class or brace group.
    """
    regex, _ = _parse(pattern, 0, depth=0)
    try:
        return re.compile(regex, re.DOTALL)
    except re.error as e:
        raise PatternError(pattern, str(e)) from e


def match_glob(pattern: str, path: str) -> bool:
    """Compile *pattern* and test it against the full *path*."""
    return compile_glob(pattern).fullmatch(path) is not None


def _parse(pattern: str, i: int, depth: int) -> tuple[str, int]:
    """Translate from position *i* until end of input, or ',' / '}' inside braces."""
    out = []
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if depth > 0 and c in ",}":
            break
        if c == "\\":
            if i + 1 >= n:
                raise PatternError(pattern, "dangling escape")
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif c == "*":
            while i < n and pattern[i] == "*":
                i += 1
            out.append(".*")
        elif c == "?":
            out.append(".")
            i += 1
        elif c == "[":
            cls, i = _parse_class(pattern, i)
            out.append(cls)
        elif c == "{":
            alts = []
            i += 1
            while True:
                part, i = _parse(pattern, i, depth + 1)
                alts.append(part)
                if i >= n:
                    raise PatternError(pattern, "unclosed '{'")
                closer = pattern[i]
                i += 1
                if closer == "}":
                    break
            out.append("(?:" + "|".join(alts) + ")")
        else:
            out.append(re.escape(c))
            i += 1
    return "".join(out), i


def _parse_class(pattern: str, i: int) -> tuple[str, int]:
    """Translate a [...] class starting at pattern[i] == '['."""
    n = len(pattern)
    k = i + 1
    negate = k < n and pattern[k] in "!^"
    if negate:
        k += 1

    items = []
    first = True
    while k < n and (pattern[k] != "]" or first):
        c = pattern[k]
        if c == "\\" and k + 1 < n:
            items.append(re.escape(pattern[k + 1]))
            k += 2
        elif c == "-" and items and k + 1 < n and pattern[k + 1] != "]":
            items.append("-")
            k += 1
        else:
            items.append(re.escape(c))
            k += 1
        first = False

    if k >= n:
        raise PatternError(pattern, "unclosed '['")
    if not items:
        raise PatternError(pattern, "empty character class")

    body = "".join(items)
    return ("[^" if negate else "[") + body + "]", k + 1
