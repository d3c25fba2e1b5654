"""
=============================================================================
CONTENT NEGOTIATION
=============================================================================

Decides whether a text payload is sent gzip-compressed, based on the
client's Accept-Encoding header.

=============================================================================
HOW IT WORKS
=============================================================================

    Client:  GET /echo/hello HTTP/1.1
             Accept-Encoding: deflate, gzip

    1. Lower-case the header value         → "deflate, gzip"
    2. First supported encoding contained  → "gzip"
    3. Compress the payload                → 1f 8b 08 00 ... (binary)
    4. Attach headers                      → Content-Type: text/plain
                                             Content-Encoding: gzip

Without a supported encoding the payload is returned unchanged with only
Content-Type: text/plain.

The match is a substring test, the same check the route has always used.
"gzip;q=1.0" and "x-gzip" both select gzip.

Compressed bytes are not guaranteed to be identical across zlib versions.
What is guaranteed is the round trip: gzip.decompress(output) == payload.

=============================================================================
"""

import gzip
from typing import Dict, NamedTuple, Optional


# Encodings we can produce, in order of preference
SUPPORTED_ENCODINGS = ("gzip",)

# Balanced speed/ratio, zlib's default
COMPRESSION_LEVEL = 6

TEXT_PLAIN = "text/plain"


class NegotiatedBody(NamedTuple):
    """Result of negotiation. Unpacks as (body, headers)."""

    body: bytes
    headers: Dict[str, str]


def select_encoding(accept_encoding: Optional[str]) -> Optional[str]:
    """
    Pick the content encoding to use, or None for identity.

    Args:
        accept_encoding: Raw Accept-Encoding header value (None if absent).
    """
    accepted = (accept_encoding or "").lower()
    for encoding in SUPPORTED_ENCODINGS:
        if encoding in accepted:
            return encoding
    return None


def negotiate_encoding(accept_encoding: Optional[str], payload: bytes) -> NegotiatedBody:
    """
    Encode a text payload according to the client's Accept-Encoding.

    Args:
        accept_encoding: Raw Accept-Encoding header value (None if absent).
        payload: The bytes to send.

    Returns:
        NegotiatedBody with the (possibly compressed) bytes and the headers
        describing them.
    """
    headers = {"Content-Type": TEXT_PLAIN}

    if select_encoding(accept_encoding) == "gzip":
        headers["Content-Encoding"] = "gzip"
        return NegotiatedBody(gzip.compress(payload, compresslevel=COMPRESSION_LEVEL), headers)

    return NegotiatedBody(payload, headers)
