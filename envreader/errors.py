"""Errors raised while reading env values into a record."""

INVALID_SYNTAX = "invalid syntax"
OUT_OF_RANGE = "value out of range"


class EnvReaderError(Exception):
    """Base class for envreader errors."""


class ParseError(EnvReaderError, ValueError):
    """Raised when raw text cannot be coerced into a scalar field."""

    def __init__(self, value: str, type_name: str, reason: str, field: str = "", env_name: str = ""):
        self.value = value
        self.type_name = type_name
        self.reason = reason
        self.field = field
        self.env_name = env_name
        super().__init__(self._message())

    def _message(self) -> str:
        msg = f"cannot parse {self.value!r} as {self.type_name}: {self.reason}"
        if self.field:
            return f"{self.field} ({self.env_name}): {msg}"
        return msg

    def for_field(self, field: str, env_name: str) -> "ParseError":
        """Return a copy of this error annotated with the failing field."""
        return type(self)(self.value, self.type_name, self.reason, field=field, env_name=env_name)


class IntegerParseError(ParseError):
    """Malformed or overflowing integer text."""


class FloatParseError(ParseError):
    """Malformed or overflowing float text."""
