"""
=============================================================================
HTTP HEADERS
=============================================================================

An ordered, case-insensitive, read-only header mapping.

=============================================================================
WHY NOT A PLAIN DICT?
=============================================================================

HTTP header names are case-insensitive (RFC 7230 section 3.2):

    User-Agent: curl/8.4.0
    user-agent: curl/8.4.0      ← same header

A plain dict forces a choice between lowercasing every key (and losing the
casing the client sent) or exact-match lookups (and missing
"accept-encoding" when the client sent "Accept-Encoding").

Headers keeps both:

    ┌──────────────────────────┬──────────────────────────────────────────┐
    │ _fields (lowercase key)  │ (original name, value)                   │
    ├──────────────────────────┼──────────────────────────────────────────┤
    │ "user-agent"             │ ("User-Agent", "curl/8.4.0")             │
    │ "accept-encoding"        │ ("Accept-Encoding", "gzip, br")          │
    └──────────────────────────┴──────────────────────────────────────────┘

    headers["USER-AGENT"]   → "curl/8.4.0"      (case-insensitive lookup)
    list(headers)           → ["User-Agent", "Accept-Encoding"]

The mapping is built once, at parse time, and never changes afterwards.

=============================================================================
"""

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Optional, Tuple


class Headers(Mapping):
    """
    Read-only header mapping with case-insensitive lookups.

    Iteration yields header names with their original casing, in the
    order they were first seen.

    Repeated names are folded into one entry with comma-separated values,
    keeping the casing of the first occurrence:

        Accept-Encoding: gzip
        accept-encoding: br

        → headers["Accept-Encoding"] == "gzip, br"

    Example:
        headers = Headers([("Content-Type", "text/plain")])
        headers["content-type"]        # "text/plain"
        "CONTENT-TYPE" in headers      # True
        dict(headers)                  # {"Content-Type": "text/plain"}
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Optional[Iterable[Tuple[str, str]]] = None):
        """
        Build the mapping from (name, value) pairs.

        Args:
            fields: Header pairs in wire order. A mapping's items() works too.
        """
        self._fields: Dict[str, Tuple[str, str]] = {}

        for name, value in fields or ():
            key = name.lower()
            if key in self._fields:
                original, existing = self._fields[key]
                self._fields[key] = (original, f"{existing}, {value}")
            else:
                self._fields[key] = (name, value)

    @classmethod
    def from_dict(cls, data: Mapping) -> "Headers":
        """Build Headers from any mapping of name → value."""
        return cls(data.items())

    def __getitem__(self, name: str) -> str:
        return self._fields[name.lower()][1]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._fields

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        """Compare case-insensitively against any mapping."""
        if not isinstance(other, Mapping):
            return NotImplemented
        theirs = {str(name).lower(): value for name, value in other.items()}
        ours = {key: value for key, (_, value) in self._fields.items()}
        return ours == theirs

    __hash__ = None  # Mapping equality, not identity

    def copy(self) -> "Headers":
        """Return an independent copy."""
        return Headers(self.items())

    def __repr__(self) -> str:
        return f"Headers({list(self.items())!r})"
