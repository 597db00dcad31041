"""envreader: typed dataclass records loaded from environment variables."""

from envreader.errors import EnvReaderError, FloatParseError, IntegerParseError, ParseError
from envreader.reader import EnvReader, environ_with_dotenv
from envreader.schema import FieldKind, FieldSpec, FieldType, RecordSchema
from envreader.tags import (
    TAG_NAME,
    TAG_NAME_DEFAULT,
    Bits,
    Default,
    Env,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Tag,
    Tags,
)

__all__ = [
    "EnvReader",
    "environ_with_dotenv",
    "EnvReaderError",
    "ParseError",
    "IntegerParseError",
    "FloatParseError",
    "FieldKind",
    "FieldType",
    "FieldSpec",
    "RecordSchema",
    "TAG_NAME",
    "TAG_NAME_DEFAULT",
    "Tag",
    "Tags",
    "Env",
    "Default",
    "Bits",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Float32",
    "Float64",
]
