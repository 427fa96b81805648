"""Immutable, order-preserving query string value with parse/serialize helpers."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from qstring.codec import decode, decode_key, encode
from qstring.models import MISSING, Pair

LOGGER = logging.getLogger(__name__)

DEFAULT_ENV_VAR = "QUERY_STRING"

# Accepting ";" as a separator as well would mean adding it next to each "&".
_TOKEN = re.compile(r"([^=&]+)(=([^&]*))?")

Index = dict[str, tuple[str | None, ...]]


def _tokenize(raw: str) -> tuple[Pair, ...]:
    if raw.startswith("?"):
        raw = raw[1:]

    pairs: list[Pair] = []
    for match in _TOKEN.finditer(raw):
        key_enc = match.group(1)
        value_enc = match.group(3)
        pairs.append(
            Pair(
                key_enc=key_enc,
                key=decode_key(key_enc),
                value_enc=value_enc,
                value=None if value_enc is None else decode(value_enc),
            )
        )
    return tuple(pairs)


def _build_index(pairs: tuple[Pair, ...]) -> Index:
    grouped: dict[str, list[str | None]] = {}
    for pair in pairs:
        grouped.setdefault(pair.key, []).append(pair.value)
    return {key: tuple(values) for key, values in grouped.items()}


class QueryString:
    """Ordered, duplicate-preserving query string.

    Instances never change after construction: plus() and minus() return new
    objects that share unmodified pairs with the original.

    >>> qs = QueryString("?a=b&foo=bar&blank=&foo=baz&missing&&&")
    >>> qs.values("foo")
    ['bar', 'baz']
    >>> qs.value("blank"), qs.value("missing"), qs.value("nope")
    ('', None, MISSING)
    >>> str(qs.minus("foo").plus("with space", "ü"))
    '?a=b&blank=&missing&with+space=%C3%BC'
    """

    __slots__ = ("_pairs", "_index")

    _pairs: tuple[Pair, ...]
    _index: Index

    def __new__(cls, raw: str | None = None) -> QueryString:
        pairs = _tokenize(raw or "")
        index = _build_index(pairs)
        LOGGER.debug("Parsed query string into %s pairs (%s keys)", len(pairs), len(index))
        return cls._from_parts(pairs, index)

    @classmethod
    def _from_parts(cls, pairs: tuple[Pair, ...], index: Index) -> QueryString:
        instance = object.__new__(cls)
        object.__setattr__(instance, "_pairs", pairs)
        object.__setattr__(instance, "_index", index)
        return instance

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def pairs(self) -> tuple[Pair, ...]:
        return self._pairs

    def value(self, key: str, default: Any = MISSING) -> Any:
        """Last value recorded for key, or default if the key never appeared."""
        values = self._index.get(key)
        if not values:
            return default
        return values[-1]

    def values(self, key: str) -> list[str | None]:
        """All values for key in order of appearance."""
        return list(self._index.get(key, ()))

    def keys(self) -> list[str]:
        """Unique decoded keys; order is not guaranteed to follow the pairs."""
        return list(self._index)

    def items(self) -> list[tuple[str, str | None]]:
        return [(pair.key, pair.value) for pair in self._pairs]

    def plus(self, key: str, value: str | None) -> QueryString:
        """New QueryString with key=value appended after every existing pair.

        A value of None adds the key without "=". An empty key serializes as
        "=value", which parses back as a valueless key named after the value.
        """
        if not isinstance(key, str):
            raise TypeError(f"key must be a string, not {type(key).__name__}")
        if value is not None and not isinstance(value, str):
            raise TypeError(f"value must be a string or None, not {type(value).__name__}")

        pair = Pair(
            key_enc=encode(key),
            key=key,
            value_enc=None if value is None else encode(value),
            value=value,
        )
        index = dict(self._index)
        index[key] = index.get(key, ()) + (value,)
        return self._from_parts(self._pairs + (pair,), index)

    def minus(self, key: str, value: Any = MISSING) -> QueryString:
        """New QueryString without key.

        With a value, only pairs carrying both that key and that value are
        removed; None matches pairs without "=".
        """
        if value is MISSING:
            pairs = tuple(pair for pair in self._pairs if pair.key != key)
            index = {name: values for name, values in self._index.items() if name != key}
            return self._from_parts(pairs, index)

        pairs = tuple(
            pair for pair in self._pairs if not (pair.key == key and pair.value == value)
        )
        index = dict(self._index)
        remaining = tuple(existing for existing in index.get(key, ()) if existing != value)
        if remaining:
            index[key] = remaining
        else:
            index.pop(key, None)
        return self._from_parts(pairs, index)

    def to_string(self) -> str:
        if not self._pairs:
            return ""
        return "?" + "&".join(pair.to_text() for pair in self._pairs)

    __str__ = to_string

    def __repr__(self) -> str:
        return f"QueryString({self.to_string()!r})"

    def __len__(self) -> int:
        return len(self._pairs)

    def __bool__(self) -> bool:
        return bool(self._pairs)

    def __iter__(self) -> Iterator[Pair]:
        return iter(self._pairs)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryString):
            return self._pairs == other._pairs
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._pairs)

    def __reduce__(self) -> tuple[Any, ...]:
        return (_rebuild, (self._pairs,))


def _rebuild(pairs: tuple[Pair, ...]) -> QueryString:
    pairs = tuple(pairs)
    return QueryString._from_parts(pairs, _build_index(pairs))


def environ_source(var_name: str = DEFAULT_ENV_VAR) -> Callable[[], str]:
    """Source callable reading the query string from an environment variable."""

    def _read() -> str:
        raw = os.environ.get(var_name, "")
        LOGGER.debug("Read ambient query string from $%s (%s chars)", var_name, len(raw))
        return raw

    return _read


def parse(raw: str | None = None, *, source: Callable[[], str] | None = None) -> QueryString:
    """Parse raw, or the ambient query string from source when raw is None.

    Without a source the CGI QUERY_STRING environment variable is used.
    """
    if raw is None:
        raw = (source or environ_source())()
    return QueryString(raw)


def from_environ(environ: Mapping[str, Any]) -> QueryString:
    """Parse the query string of a WSGI/CGI environ mapping."""
    return QueryString(environ.get(DEFAULT_ENV_VAR) or "")
