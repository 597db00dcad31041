"""
Tag types for record field declarations.
Used inside Annotated[type, ...] to name the env var, the default text and the bit width.
"""

import codecs
import re
from typing import Annotated, Iterator, Mapping

TAG_NAME = "env"
TAG_NAME_DEFAULT = "default"

_STRUCT_TAG_RE = re.compile(r'\s*([^\s:"]+):"((?:[^"\\]|\\.)*)"')


class Tag:
    """A single metadata entry: tag name -> string value."""

    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.value!r})"


class Env(Tag):
    """Environment variable name, stored under the default key tag."""

    def __init__(self, name: str):
        super().__init__(TAG_NAME, name)

    def __repr__(self) -> str:
        return f"Env({self.value!r})"


class Default(Tag):
    """Fallback text used when the env var is unset or blank."""

    def __init__(self, value: object):
        super().__init__(TAG_NAME_DEFAULT, _format_default(value))

    def __repr__(self) -> str:
        return f"Default({self.value!r})"


class Tags(Mapping[str, str]):
    """Several tags at once, e.g. Tags(env="PORT", default="8080")."""

    def __init__(self, entries: Mapping[str, str] | None = None, **kwargs: str):
        self._entries: dict[str, str] = {}
        for source in (entries or {}, kwargs):
            for name, value in source.items():
                self._entries.setdefault(name, value)

    @classmethod
    def parse(cls, text: str) -> "Tags":
        """
        Parse a Go style struct tag: `env:"LISTEN_HOST" default:"127.0.0.1"`.

        Values are unquoted with the usual backslash escapes (\\n, \\t, \\x41, \\", ...).
        Parsing stops at the first malformed pair or bad escape, like reflect.StructTag.Get.
        """
        entries: dict[str, str] = {}
        pos = 0
        while pos < len(text):
            match = _STRUCT_TAG_RE.match(text, pos)
            if match is None:
                break
            name, value = match.groups()
            try:
                value = codecs.decode(value.encode("ascii", "backslashreplace"), "unicode_escape")
            except UnicodeDecodeError:
                break
            entries.setdefault(name, value)
            pos = match.end()
        return cls(entries)

    def __getitem__(self, name: str) -> str:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Tags({self._entries!r})"


class Bits:
    """Bit width of an int (8/16/32/64) or float (32/64) field."""

    def __init__(self, width: int):
        self.width = width

    def __repr__(self) -> str:
        return f"Bits({self.width})"


Int8 = Annotated[int, Bits(8)]
Int16 = Annotated[int, Bits(16)]
Int32 = Annotated[int, Bits(32)]
Int64 = Annotated[int, Bits(64)]
Float32 = Annotated[float, Bits(32)]
Float64 = Annotated[float, Bits(64)]


def _format_default(value: object) -> str:
    # Render non-text defaults the way the coercion engine reads them back
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_format_default(v) for v in value)
    return str(value)
