import re
from fnmatch import fnmatchcase

BRACE_SET = re.compile(r'\{([^{}]*,[^{}]*)\}')


def expand_braces(pattern: str) -> list[str]:
    match = BRACE_SET.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    return [
        expanded
        for option in match.group(1).split(',')
        for expanded in expand_braces(head + option + tail)
    ]


def _match_segments(parts: list[str], pattern_parts: list[str]) -> bool:
    if not pattern_parts:
        return not parts
    first, rest = pattern_parts[0], pattern_parts[1:]
    if first == '**':
        return any(_match_segments(parts[i:], rest) for i in range(len(parts) + 1))
    return (
        bool(parts)
        and fnmatchcase(parts[0], first)
        and _match_segments(parts[1:], rest)
    )


def matches(candidate: str, pattern: str) -> bool:
    """Case-sensitive glob match of the whole candidate.

    Wildcards stay within one ``/``-separated segment, ``**`` spans any number
    of segments and ``{a,b}`` expands to alternatives. A pattern without
    wildcards only matches itself, so an empty pattern only matches an empty
    candidate.
    """
    parts = candidate.split('/')
    return any(
        _match_segments(parts, expanded.split('/'))
        for expanded in expand_braces(pattern)
    )


def matches_branch(pattern: bool | str | None, branch: str | None) -> bool:
    if pattern is True:
        return True
    if not pattern or not isinstance(pattern, str) or branch is None:
        return False
    return matches(branch, pattern)
