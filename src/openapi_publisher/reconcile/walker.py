"""Reachability analysis over the operations and component schemas of a document."""

import logging
from collections.abc import Iterator

from openapi_publisher.parser.base import Document, MediaType, Parameter, RequestBody, Response, Schema
from openapi_publisher.reconcile.policy import Extensions

logger = logging.getLogger(__name__)

PARAMETER_METHODS = ("get", "post", "put", "delete")
REQUEST_BODY_METHODS = ("post", "put")
RESPONSE_METHODS = ("get", "post", "put", "delete")


class ReachabilityWalker:
    """Finds every component schema used by the API surface or force-included."""

    def __init__(self, extensions: Extensions):
        self.extensions = extensions

    def compute_reachable(self, document: Document) -> set[str]:
        schemas = document.schemas
        reachable: set[str] = set()

        for name in self._seed(document):
            if name in schemas:
                reachable.add(name)

        for name in [n for n in schemas if n in reachable]:
            self._expand(name, schemas, reachable)

        for name, schema in schemas.items():
            if name not in reachable and self.extensions.forces_inclusion(schema.publish_include):
                logger.debug("schema %s is force-included (%s)", name, schema.publish_include)
                reachable.add(name)
                self._expand(name, schemas, reachable)

        return reachable

    def _seed(self, document: Document) -> Iterator[str]:
        """Schema names referenced directly by parameters, request bodies and responses."""
        for path_item in document.paths.values():
            yield from _parameter_refs(path_item.parameters)
            for method in PARAMETER_METHODS:
                operation = path_item.operation(method)
                if operation is not None:
                    yield from _parameter_refs(operation.parameters)
            for method in REQUEST_BODY_METHODS:
                operation = path_item.operation(method)
                if operation is not None:
                    yield from _content_refs(operation.request_body)
            for method in RESPONSE_METHODS:
                operation = path_item.operation(method)
                if operation is not None and operation.responses:
                    for response in operation.responses.values():
                        yield from _content_refs(response)

    def _expand(self, root: str, schemas: dict[str, Schema], reachable: set[str]) -> None:
        pending = [root]
        while pending:
            schema = schemas.get(pending.pop())
            if schema is None:
                continue
            for name in references(schema):
                if name not in reachable and name in schemas:
                    reachable.add(name)
                    pending.append(name)


def references(schema: Schema) -> Iterator[str]:
    """Yield the names of component schemas one hop away from ``schema``.

    Follows the schema's own ``$ref`` and, for object (or untyped) schemas,
    property refs, property item refs, property additionalProperties (inline
    ones are searched in turn) and allOf / oneOf / anyOf members.
    """
    if schema.ref_name is not None:
        yield schema.ref_name

    if not schema.is_object:
        return

    for prop in (schema.properties or {}).values():
        if prop.ref_name is not None:
            yield prop.ref_name
        if prop.items is not None and prop.items.ref_name is not None:
            yield prop.items.ref_name
        nested = prop.nested_additional_properties()
        if nested is not None:
            yield from references(nested)

    for member in schema.compositions():
        yield from references(member)


def _parameter_refs(parameters: list[Parameter] | None) -> Iterator[str]:
    for parameter in parameters or []:
        if parameter.schema_ is not None and parameter.schema_.ref_name is not None:
            yield parameter.schema_.ref_name


def _content_refs(holder: RequestBody | Response | None) -> Iterator[str]:
    if holder is None or not holder.content:
        return
    for media in holder.content.values():
        yield from _media_refs(media)


def _media_refs(media: MediaType) -> Iterator[str]:
    schema = media.schema_
    if schema is None:
        return
    if schema.ref_name is not None:
        yield schema.ref_name
    if schema.items is not None and schema.items.ref_name is not None:
        yield schema.items.ref_name
