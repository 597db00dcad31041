"""
Environment reader.
Walks a dataclass instance field by field, resolves each field's env var or
default text through the configured tag names, and coerces it in place.
"""

import logging
import os
from dataclasses import is_dataclass
from typing import Any, Mapping

from dotenv import dotenv_values, find_dotenv

from envreader.coerce import coerce
from envreader.errors import ParseError
from envreader.schema import FieldKind, FieldSpec, RecordSchema
from envreader.tags import TAG_NAME, TAG_NAME_DEFAULT

logger = logging.getLogger(__name__)


class EnvReader:
    """
    Reads environment variables into a dataclass instance.

    The tag names used to find each field's env var name and default text
    default to "env" and "default" and can be changed between reads.
    """

    def __init__(self):
        self.init()

    def init(self) -> None:
        """Reset the tag names to their defaults."""
        self._tag = TAG_NAME
        self._tag_default = TAG_NAME_DEFAULT

    def set_key_tag(self, name: str) -> None:
        """Use a custom tag name for the env var name."""
        self._tag = name

    def set_default_tag(self, name: str) -> None:
        """Use a custom tag name for the default text."""
        self._tag_default = name

    def get_key_tag(self) -> str:
        return self._tag

    def get_default_tag(self) -> str:
        return self._tag_default

    def read(self, record: Any, env: Mapping[str, str] | None = None) -> None:
        """
        Populate record from the environment.

        - record: a dataclass instance, mutated in place
        - env: mapping to read from (default: os.environ). Pass a dict for tests.
        - Raises: IntegerParseError / FloatParseError on the first bad scalar.
          Fields before it are already set; later fields are not touched.
        """
        if env is None:
            env = os.environ

        if isinstance(record, type) or not is_dataclass(record):
            raise TypeError("Record must be a dataclass instance")

        schema = RecordSchema.from_record(record)
        for spec in schema:
            self._read_field(record, spec, env)

    def _read_field(self, record: Any, spec: FieldSpec, env: Mapping[str, str]) -> None:
        env_name = spec.tag(self._tag)
        raw, source = _env_fallback(env, env_name, spec.tag(self._tag_default))
        if not raw.strip():
            logger.debug("Field %s (%s): no value, left unchanged", spec.name, env_name)
            return

        if spec.type.kind is FieldKind.UNSUPPORTED:
            logger.warning("Field %s (%s): unsupported type, left unchanged", spec.name, env_name)
            return

        try:
            value = coerce(raw, spec.type)
        except ParseError as e:
            logger.debug("Field %s (%s): parse failed from %s", spec.name, env_name, source)
            raise e.for_field(spec.name, env_name) from e

        setattr(record, spec.name, value)
        logger.debug("Field %s (%s): set as %s from %s", spec.name, env_name, spec.type.name, source)


def _env_fallback(env: Mapping[str, str], env_name: str, fallback: str) -> tuple[str, str]:
    """Env value, or the fallback text when it is unset or blank."""
    value = env.get(env_name) if env_name else None
    if value is None or not value.strip():
        return fallback, "default"
    return value, "env"


def environ_with_dotenv(path: str | os.PathLike | None = None) -> dict[str, str]:
    """
    Snapshot of a .env file overlaid by os.environ (real env vars win).

    Nothing is written back to os.environ. Pass the result as read(..., env=...).
    """
    if path is None:
        path = find_dotenv(usecwd=True)
    values = {k: v for k, v in dotenv_values(path).items() if v is not None}
    values.update(os.environ)
    return values
