"""
Multiplicity interpretation.

The two predicates here are the only place multiplicity tokens are
parsed. Everything else reasons about cardinality through them.
"""

import re

_UNBOUNDED = {"*", "n", "many"}
_RANGE = re.compile(r"^\s*([0-9]+|\*|n)\s*\.\.\s*([0-9]+|\*|n|many)\s*$", re.IGNORECASE)


def _is_unbounded_or_plural(bound: str) -> bool:
    bound = bound.strip().lower()
    if bound in _UNBOUNDED:
        return True
    return bound.isdigit() and int(bound) > 1


def is_many(token: str) -> bool:
    """
    Check whether a multiplicity allows more than one instance.

    Args:
        token: Multiplicity token such as "1", "0..1", "*", "1..*", "2..5"

    Returns:
        True for "*", "0..*", "1..*", "n", "many", plain numbers greater
        than one, and ranges whose upper bound is unbounded or greater
        than one
    """
    if not token:
        return False

    match = _RANGE.match(token)
    if match:
        return _is_unbounded_or_plural(match.group(2))
    return _is_unbounded_or_plural(token)


def is_required(token: str) -> bool:
    """
    Check whether a multiplicity demands at least one instance.

    Args:
        token: Multiplicity token

    Returns:
        True iff the token is exactly "1" or starts with "1.."
    """
    if not token:
        return False

    token = re.sub(r"\s+", "", token)
    return token == "1" or token.startswith("1..")
