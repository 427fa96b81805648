"""Data models for parsed query strings."""

from __future__ import annotations

from dataclasses import dataclass


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# Returned by QueryString.value() for keys that never appeared. A key that
# appeared without "=" has the value None instead.
MISSING = _Missing()


@dataclass(frozen=True)
class Pair:
    key_enc: str
    key: str
    value_enc: str | None = None
    value: str | None = None

    @property
    def has_value(self) -> bool:
        return self.value_enc is not None

    def to_text(self) -> str:
        if not self.has_value:
            return self.key_enc
        return f"{self.key_enc}={self.value_enc}"
