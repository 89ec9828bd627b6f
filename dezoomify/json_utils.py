"""Helpers for extracting JSON objects embedded in arbitrary data."""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from typing import Any

_OPEN = ord("{")
_CLOSE = ord("}")


def iter_braces(data: bytes | str) -> Iterator[bytes]:
    """Yield every slice of ``data`` delimited by a matching pair of braces.

    Inner pairs are yielded before the pairs that enclose them.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    starts: list[int] = []
    for pos, byte in enumerate(data):
        if byte == _OPEN:
            starts.append(pos)
        elif byte == _CLOSE and starts:
            yield bytes(data[starts.pop():pos + 1])


def all_json(data: bytes | str) -> Iterator[Any]:
    """Yield every brace-delimited JSON5 object found in ``data``."""
    for chunk in iter_braces(data):
        try:
            text = chunk.decode("utf-8")
            yield _parse_json5(text)
        except ValueError:
            continue


_NUMBER_STRING = re.compile(r"\+?[0-9]+")


def number_or_string(value: Any) -> int:
    """Accept an integer or a string holding an integer, and return the integer."""
    if isinstance(value, bool):
        raise TypeError(f"expected a number or a string, got {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"expected a non-negative number, got {value}")
        return value
    if isinstance(value, str):
        if not _NUMBER_STRING.fullmatch(value):
            raise ValueError(f"invalid number: {value!r}")
        return int(value)
    raise TypeError(f"expected a number or a string, got {value!r}")


_SKIP = re.compile(r"(?:\s+|//[^\n]*|/\*.*?\*/)+", re.DOTALL)
_NUMBER = re.compile(
    r"[+-]?(?:Infinity|NaN|0[xX][0-9a-fA-F]+|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)
_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_LITERALS = {"true": True, "false": False, "null": None}
_ESCAPES = {
    "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v", "0": "\0",
}


class _Json5Parser:
    """A small recursive-descent parser for the JSON5 syntax."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def parse(self) -> Any:
        value = self._value()
        self._skip()
        if self.pos != len(self.text):
            raise self._error("unexpected trailing data")
        return value

    def _error(self, message: str) -> ValueError:
        return ValueError(f"{message} at position {self.pos}")

    def _skip(self) -> None:
        match = _SKIP.match(self.text, self.pos)
        if match:
            self.pos = match.end()

    def _peek(self) -> str:
        if self.pos >= len(self.text):
            raise self._error("unexpected end of input")
        return self.text[self.pos]

    def _value(self) -> Any:
        self._skip()
        char = self._peek()
        if char == "{":
            return self._object()
        if char == "[":
            return self._array()
        if char in "\"'":
            return self._string()
        number = _NUMBER.match(self.text, self.pos)
        if number:
            self.pos = number.end()
            return self._convert_number(number.group())
        word = _IDENTIFIER.match(self.text, self.pos)
        if word and word.group() in _LITERALS:
            self.pos = word.end()
            return _LITERALS[word.group()]
        raise self._error(f"unexpected character {char!r}")

    @staticmethod
    def _convert_number(token: str) -> int | float:
        sign = -1 if token.startswith("-") else 1
        body = token.lstrip("+-")
        if body == "Infinity":
            return sign * math.inf
        if body == "NaN":
            return math.nan
        if body[:2] in ("0x", "0X"):
            return sign * int(body, 16)
        if any(c in body for c in ".eE"):
            return sign * float(body)
        return sign * int(body)

    def _object(self) -> dict[str, Any]:
        self.pos += 1
        result: dict[str, Any] = {}
        while True:
            self._skip()
            char = self._peek()
            if char == "}":
                self.pos += 1
                return result
            if char in "\"'":
                key = self._string()
            else:
                word = _IDENTIFIER.match(self.text, self.pos)
                if not word:
                    raise self._error("expected an object key")
                key = word.group()
                self.pos = word.end()
            self._skip()
            if self._peek() != ":":
                raise self._error("expected ':'")
            self.pos += 1
            result[key] = self._value()
            self._skip()
            char = self._peek()
            if char == ",":
                self.pos += 1
            elif char == "}":
                self.pos += 1
                return result
            else:
                raise self._error("expected ',' or '}'")

    def _array(self) -> list[Any]:
        self.pos += 1
        result: list[Any] = []
        while True:
            self._skip()
            if self._peek() == "]":
                self.pos += 1
                return result
            result.append(self._value())
            self._skip()
            char = self._peek()
            if char == ",":
                self.pos += 1
            elif char == "]":
                self.pos += 1
                return result
            else:
                raise self._error("expected ',' or ']'")

    def _string(self) -> str:
        quote = self.text[self.pos]
        self.pos += 1
        parts: list[str] = []
        while True:
            char = self._peek()
            self.pos += 1
            if char == quote:
                return "".join(parts)
            if char == "\n":
                raise self._error("unescaped newline in string")
            if char != "\\":
                parts.append(char)
                continue
            escape = self._peek()
            self.pos += 1
            if escape in _ESCAPES:
                parts.append(_ESCAPES[escape])
            elif escape in "ux":
                width = 4 if escape == "u" else 2
                digits = self.text[self.pos:self.pos + width]
                if len(digits) != width or not all(c in "0123456789abcdefABCDEF" for c in digits):
                    raise self._error("invalid escape sequence")
                parts.append(chr(int(digits, 16)))
                self.pos += width
            elif escape == "\r":
                if self.text.startswith("\n", self.pos):
                    self.pos += 1
            elif escape not in "\n\u2028\u2029":
                parts.append(escape)


def _parse_json5(text: str) -> Any:
    return _Json5Parser(text).parse()