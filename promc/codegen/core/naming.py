"""
Naming utilities for safe code generation.

Converts user-supplied snake_case tokens into CamelCase identifiers and
tracks the identifiers claimed in a generated scope so that two different
raw tokens never silently map onto the same identifier.
"""

import string
from typing import Dict, Optional


WORD_SEPARATOR = "_"

# Fixed ASCII tables; str.upper()/str.lower() would also touch non-ASCII letters.
_TO_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_TO_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


class NameCollisionError(ValueError):
    """Raised when two different raw tokens normalize to the same identifier."""

    def __init__(self, scope: str, identifier: str, first_owner: str, second_owner: str):
        self.scope = scope
        self.identifier = identifier
        self.first_owner = first_owner
        self.second_owner = second_owner
        super().__init__(
            f"identifier '{identifier}' in {scope} is derived from both "
            f"'{first_owner}' and '{second_owner}'"
        )


def title_segment(segment: str) -> str:
    """Title-case one word: first ASCII letter upper, the rest lower."""
    return segment[:1].translate(_TO_UPPER) + segment[1:].translate(_TO_LOWER)


def snake_to_camel(token: str) -> str:
    """
    Convert a snake_case token to CamelCase.

    Empty segments (leading, trailing or doubled separators) contribute
    nothing, so ``"http__requests"`` and ``"http_requests"`` both map to
    ``"HttpRequests"``. Uniqueness is checked by :class:`IdentifierScope`.

    Args:
        token: Raw metric name or label key

    Returns:
        CamelCase identifier
    """
    return "".join(title_segment(part) for part in token.split(WORD_SEPARATOR) if part)


class IdentifierScope:
    """Tracks identifiers declared in one generated scope."""

    def __init__(self, name: str):
        """
        Initialize an empty scope.

        Args:
            name: Human readable scope name used in error messages
        """
        self.name = name
        self._owners: Dict[str, str] = {}

    def claim(self, identifier: str, owner: str) -> str:
        """
        Record that ``owner`` declares ``identifier``.

        Claiming the same identifier twice for the same owner is allowed.

        Raises:
            NameCollisionError: If another owner already holds the identifier
        """
        existing = self._owners.get(identifier)
        if existing is not None and existing != owner:
            raise NameCollisionError(self.name, identifier, existing, owner)
        self._owners[identifier] = owner
        return identifier

    def owner_of(self, identifier: str) -> Optional[str]:
        """Return the raw token that claimed ``identifier``, if any."""
        return self._owners.get(identifier)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._owners

    def __len__(self) -> int:
        return len(self._owners)
