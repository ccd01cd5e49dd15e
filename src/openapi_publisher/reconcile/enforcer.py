"""Prunes unreachable schemas and applies the extension policy to the rest.

The steps must run in the order ``prune``, ``detect_illegal_extensions``,
``rename_shortened_properties``, ``strip_extensions``: illegal extensions are
reported against the original property names, and renaming and stripping
both destroy information.
"""

import logging

from openapi_publisher.errors import IllegalExtension, IllegalExtensionDetected
from openapi_publisher.parser.base import Document, Schema
from openapi_publisher.reconcile.policy import RENAME_EXTENSION, Extensions

logger = logging.getLogger(__name__)


class PolicyEnforcer:
    def __init__(self, extensions: Extensions):
        self.extensions = extensions

    def prune(self, document: Document, reachable: set[str]) -> list[str]:
        """Delete every component schema outside ``reachable``; return the deleted names."""
        schemas = document.schemas
        unused = [name for name in schemas if name not in reachable]
        for name in unused:
            del schemas[name]
        return unused

    def detect_illegal_extensions(self, document: Document) -> None:
        violations: list[IllegalExtension] = []
        for name, schema in document.schemas.items():
            self._collect_illegal(name, schema, violations)
        if violations:
            raise IllegalExtensionDetected(violations)

    def _collect_illegal(self, name: str, schema: Schema, violations: list[IllegalExtension]) -> None:
        illegal = self.extensions.illegal_extensions
        for key in schema.extensions:
            if key in illegal:
                violations.append(IllegalExtension(name, key))

        for prop in (schema.properties or {}).values():
            for key in prop.extensions:
                if key in illegal:
                    violations.append(IllegalExtension(name, key))
            nested = prop.nested_additional_properties()
            if nested is not None:
                self._collect_illegal(name, nested, violations)

        for member in schema.compositions():
            self._collect_illegal(name, member, violations)

    def rename_shortened_properties(self, document: Document) -> None:
        """Re-key properties marked with x-basename to their short wire name.

        e.g.::

            required: [organisationId]
            properties:
              organisationId:
                x-basename: oId
                type: string

        becomes::

            required: [oId]
            properties:
              oId:
                type: string
                description: organisationId
        """
        for schema in document.schemas.values():
            self._rename_in(schema)

    def _rename_in(self, schema: Schema) -> None:
        if schema.properties:
            for key in list(schema.properties):
                prop = schema.properties[key]
                if RENAME_EXTENSION not in prop.extensions:
                    continue
                new_name = str(prop.extensions.pop(RENAME_EXTENSION))

                if new_name != key:
                    if new_name in schema.properties:
                        logger.warning("renaming property %s to %s replaces an existing property", key, new_name)
                    del schema.properties[key]
                    schema.properties[new_name] = prop
                    if schema.required and _discard(schema.required, key):
                        _append_unique(schema.required, new_name)

                if prop.description is not None:
                    prop.description = f"({key}) - {prop.description}"
                else:
                    prop.description = key

        nested = schema.nested_additional_properties()
        if nested is not None:
            self._rename_in(nested)
        for member in schema.compositions():
            self._rename_in(member)

    def strip_extensions(self, document: Document) -> None:
        for schema in document.schemas.values():
            self._strip(schema)

    def _strip(self, schema: Schema) -> None:
        for key in self.extensions.object_extensions:
            schema.extensions.pop(key, None)

        # composition members are only visited when property stripping is on
        if not self.extensions.property_extensions:
            return

        for prop in (schema.properties or {}).values():
            for key in self.extensions.property_extensions:
                prop.extensions.pop(key, None)

        nested = schema.nested_additional_properties()
        if nested is not None:
            self._strip(nested)
        for member in schema.compositions():
            self._strip(member)


def _discard(names: list[str], name: str) -> bool:
    if name in names:
        names.remove(name)
        return True
    return False


def _append_unique(names: list[str], name: str) -> None:
    if name not in names:
        names.append(name)
