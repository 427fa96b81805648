"""Percent-encoding helpers for query string keys and values."""

from __future__ import annotations

import re
from urllib.parse import quote, unquote_plus

# Characters left alone by encode(), besides letters, digits and "_.-~".
_SAFE = "!*'()"

_THREE_BYTE = re.compile(r"%([EF][0-9A-F])%([89AB][0-9A-F])%([89AB][0-9A-F])")
_TWO_BYTE = re.compile(r"%([CD][0-9A-F])%([89AB][0-9A-F])")
_ONE_BYTE = re.compile(r"%([0-7][0-9A-F])")


def _decode_three_byte(match: re.Match[str]) -> str:
    n1 = int(match.group(1), 16) - 0xE0
    n2 = int(match.group(2), 16) - 0x80
    if n1 == 0 and n2 < 32:
        # overlong
        return match.group(0)
    n3 = int(match.group(3), 16) - 0x80
    code = (n1 << 12) + (n2 << 6) + n3
    if code > 0xFFFF:
        return match.group(0)
    return chr(code)


def _decode_two_byte(match: re.Match[str]) -> str:
    n1 = int(match.group(1), 16) - 0xC0
    if n1 < 2:
        # overlong
        return match.group(0)
    n2 = int(match.group(2), 16) - 0x80
    return chr((n1 << 6) + n2)


def _decode_one_byte(match: re.Match[str]) -> str:
    return chr(int(match.group(1), 16))


def decode(text: str) -> str:
    """Error tolerant query string decoding.

    Pluses become spaces, then two and three byte UTF-8 escape sequences and
    ASCII escapes are decoded, in that order. Escapes that do not form one of
    those shapes (lone continuation bytes, overlong forms, lower-case hex,
    ``%zz``) are kept as literal text instead of raising.

    >>> decode("with+space%20too")
    'with space too'
    >>> decode("%E2%84%A0")
    '℠'
    >>> decode("%C0%AF%zz")
    '%C0%AF%zz'
    """
    text = text.replace("+", " ")
    text = _THREE_BYTE.sub(_decode_three_byte, text)
    text = _TWO_BYTE.sub(_decode_two_byte, text)
    return _ONE_BYTE.sub(_decode_one_byte, text)


def decode_key(text: str) -> str:
    """Decode a key with the stdlib decoder; bad UTF-8 becomes U+FFFD."""
    return unquote_plus(text, encoding="utf-8", errors="replace")


def encode(text: str) -> str:
    """Approximate inverse of decode(): escape everything but unreserved characters.

    >>> encode("=a= b")
    '%3Da%3D+b'
    """
    return quote(text, safe=_SAFE, encoding="utf-8", errors="surrogatepass").replace("%20", "+")
