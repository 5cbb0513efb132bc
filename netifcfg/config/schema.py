# This file is part of netifcfg. See LICENSE file for license information.
"""schema.py: Validate interface descriptions against their jsonschema."""

import json
import logging
import os
from typing import List, NamedTuple, Optional

from jsonschema import Draft4Validator, FormatChecker

from netifcfg.util import load_text_file

LOG = logging.getLogger(__name__)

INTERFACES_SCHEMA_FILE = "schema-interfaces-v1.json"


class SchemaProblem(NamedTuple):
    path: str
    message: str

    def format(self) -> str:
        return f"{self.path}: {self.message}"


SchemaProblems = List[SchemaProblem]


def _format_schema_problems(
    schema_problems: SchemaProblems,
    *,
    prefix: Optional[str] = None,
    separator: str = ", ",
) -> str:
    formatted = separator.join(map(lambda p: p.format(), schema_problems))
    if prefix:
        formatted = f"{prefix}{formatted}"
    return formatted


class SchemaValidationError(ValueError):
    """Raised when validating an interface description against a schema."""

    def __init__(self, schema_errors: Optional[SchemaProblems] = None):
        """Init the exception an n-tuple of schema errors.

        @param schema_errors: An n-tuple of the format:
            ((flat.config.key, msg),)
        """
        self.schema_errors = sorted(set(schema_errors or []))
        super().__init__(
            _format_schema_problems(
                self.schema_errors,
                prefix="Interface config schema errors: ",
            )
        )

    def has_errors(self) -> bool:
        return bool(self.schema_errors)


def get_schema_dir() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "schemas")


def get_schema() -> dict:
    """Return the jsonschema for interface descriptions."""
    schema_file = os.path.join(get_schema_dir(), INTERFACES_SCHEMA_FILE)
    return json.loads(load_text_file(schema_file))


def validate_interfaces_config(config: dict, schema: Optional[dict] = None):
    """Validate provided config meets the schema definition.

    @param config: Dict of interface settings validated against schema.
    @param schema: jsonschema dict describing the supported schema definition.
        If None, use the packaged interfaces schema.

    @raises: SchemaValidationError when provided config does not validate
        against the provided schema.
    """
    if schema is None:
        schema = get_schema()
    validator = Draft4Validator(schema, format_checker=FormatChecker())
    errors: SchemaProblems = []
    for schema_error in sorted(
        validator.iter_errors(config), key=lambda e: list(map(str, e.path))
    ):
        path = ".".join([str(p) for p in schema_error.path]) or "<root>"
        errors.append(SchemaProblem(path, schema_error.message))
    if errors:
        LOG.debug(
            _format_schema_problems(
                errors,
                prefix="Interface config failed schema validation!\n",
                separator="\n",
            )
        )
        raise SchemaValidationError(errors)
    return True
