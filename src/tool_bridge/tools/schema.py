"""JSON-schema helpers for presenting the tool set to an LLM."""

from typing import Any, Dict, Set, Type

import jsonref  # type: ignore
from pydantic import BaseModel

from ..core.exceptions import InvalidInputError
from ..core.logger import get_logger

logger = get_logger(__name__)


class SchemaValidator:
    """
    Helper class for validating and sanitizing tool argument schemas.
    """

    @staticmethod
    def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
        """
        Checks if the schema contains recursive references by traversing the graph.

        Args:
            schema: The JSON schema to check.

        Raises:
            InvalidInputError: If a recursive reference is found.
        """
        defs = schema.get("$defs", {}) or schema.get("definitions", {})

        def check(node: Any, path: Set[str]) -> None:
            if isinstance(node, dict):
                if "$ref" in node:
                    ref = node["$ref"]
                    if ref in path:
                        msg = f"Recursive structure detected: {ref}. Tool arguments must not be recursive."
                        logger.error(msg)
                        raise InvalidInputError(msg)

                    # local refs look like #/$defs/Model
                    if ref.startswith("#"):
                        def_name = ref.split("/")[-1]
                        if def_name in defs:
                            check(defs[def_name], path | {ref})
                    return

                for v in node.values():
                    check(v, path)
            elif isinstance(node, list):
                for item in node:
                    check(item, path)

        check(schema, set())

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Cleans up the schema for LLM providers.

        Removes ``$defs``, ``$schema``, ``$id`` and ``title``, collapses
        ``anyOf`` with ``null`` (Optional fields) and sets
        ``additionalProperties: false`` on objects with declared properties
        that do not say otherwise.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            The sanitized schema.
        """
        if not isinstance(schema, dict):
            return schema

        new_schema = schema.copy()

        for key in ["$defs", "$schema", "$id", "title", "definitions"]:
            new_schema.pop(key, None)

        if "anyOf" in new_schema:
            non_null = [x for x in new_schema["anyOf"] if x.get("type") != "null"]

            if len(non_null) == 1 and isinstance(non_null[0], dict):
                merged = non_null[0].copy()
                # parent keys (description, default) win over the branch
                for key in ("description", "default"):
                    if key in new_schema:
                        merged[key] = new_schema[key]
                return SchemaValidator.sanitize_schema(merged)

        if new_schema.get("type") == "object" and "properties" in new_schema and "additionalProperties" not in new_schema:
            new_schema["additionalProperties"] = False

        for key, value in new_schema.items():
            if isinstance(value, dict):
                new_schema[key] = SchemaValidator.sanitize_schema(value)
            elif isinstance(value, list):
                new_schema[key] = [
                    SchemaValidator.sanitize_schema(item) if isinstance(item, dict) else item for item in value
                ]

        return new_schema

    @classmethod
    def parameters_for(cls, model: Type[BaseModel]) -> Dict[str, Any]:
        """Build the sanitized, ref-free parameter schema of an arguments model."""
        raw_schema = model.model_json_schema()
        cls.assert_no_recursive_refs(raw_schema)
        # proxies=False gives plain dicts instead of JsonRef objects
        resolved = jsonref.replace_refs(raw_schema, proxies=False)
        return cls.sanitize_schema(resolved)
