"""Data models for a parsed OpenAPI document.

Only the parts the reconciler walks are modelled as fields; every other key
is kept as a pydantic extra so the document survives a load/render cycle.
Vendor extensions (``x-*`` keys) are collected into ``extensions`` on load
and written back in place on dump.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer, model_validator

SCHEMA_PREFIX = "#/components/schemas/"
PUBLISH_INCLUDE_EXTENSION = "x-publish-include"


class _Node(BaseModel):
    """Base for every document node: keeps unknown keys and splits out extensions."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    extensions: dict[str, Any] = Field(default_factory=dict)

    # map field -> field holding the x-* entries parked out of that map
    map_extension_fields: ClassVar[dict[str, str]] = {}

    @model_validator(mode="before")
    @classmethod
    def _collect_extensions(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        found = {key: data.pop(key) for key in list(data) if isinstance(key, str) and key.startswith("x-")}
        if found:
            data["extensions"] = {**data.get("extensions", {}), **found}
        for key, park in cls.map_extension_fields.items():
            entries = data.get(key)
            if isinstance(entries, dict):
                entries = dict(entries)
                parked = {k: entries.pop(k) for k in list(entries) if isinstance(k, str) and k.startswith("x-")}
                data[key] = entries
                if parked:
                    data[park] = {**data.get(park, {}), **parked}
        return data

    @model_serializer(mode="wrap")
    def _merge_extensions(self, handler):
        data = handler(self)
        if isinstance(data, dict):
            data.update(data.pop("extensions", None) or {})
            for key, park in self.map_extension_fields.items():
                parked = getattr(self, park)
                if parked:
                    data.setdefault(key, {}).update(parked)
        return data


def schema_name(ref: str | None) -> str | None:
    """Return the component schema name for an intra-document ``$ref``."""
    if ref is None or not ref.startswith(SCHEMA_PREFIX):
        return None
    return ref[len(SCHEMA_PREFIX):]


def _marker_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


class Schema(_Node):
    """A schema object, named in components or inline inside another schema."""

    ref: str | None = Field(default=None, alias="$ref")
    type: str | list[str] | None = None
    description: str | None = None
    required: list[str] | None = None
    properties: dict[str, "Schema"] | None = None
    items: "Schema | None" = None
    additional_properties: "Schema | bool | None" = Field(default=None, alias="additionalProperties")
    all_of: list["Schema"] | None = Field(default=None, alias="allOf")
    one_of: list["Schema"] | None = Field(default=None, alias="oneOf")
    any_of: list["Schema"] | None = Field(default=None, alias="anyOf")
    publish_include: str | None = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _parse_publish_include(self) -> "Schema":
        if self.publish_include is None:
            self.publish_include = _marker_text(self.extensions.get(PUBLISH_INCLUDE_EXTENSION))
        return self

    @property
    def ref_name(self) -> str | None:
        return schema_name(self.ref)

    @property
    def is_object(self) -> bool:
        return self.type is None or self.type == "object"

    def compositions(self) -> list["Schema"]:
        """All allOf / oneOf / anyOf members, in that order."""
        members: list[Schema] = []
        for group in (self.all_of, self.one_of, self.any_of):
            if group:
                members.extend(group)
        return members

    def nested_additional_properties(self) -> "Schema | None":
        if isinstance(self.additional_properties, Schema):
            return self.additional_properties
        return None


class MediaType(_Node):
    schema_: Schema | None = Field(default=None, alias="schema")


class Parameter(_Node):
    """An operation or path-level parameter (query, path, header, or cookie)."""

    name: str | None = None
    location: str | None = Field(default=None, alias="in")
    schema_: Schema | None = Field(default=None, alias="schema")


class RequestBody(_Node):
    content: dict[str, MediaType] | None = None


class Response(_Node):
    description: str | None = None
    content: dict[str, MediaType] | None = None


class Operation(_Node):
    """A single HTTP method on a path."""

    summary: str | None = None
    parameters: list[Parameter] | None = None
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] | None = None
    response_extensions: dict[str, Any] = Field(default_factory=dict, exclude=True)

    map_extension_fields: ClassVar[dict[str, str]] = {"responses": "response_extensions"}

    @field_validator("responses", mode="before")
    @classmethod
    def _status_codes_as_text(cls, value: Any) -> Any:
        # YAML reads bare status codes (200:) as integers
        if isinstance(value, dict):
            return {str(code): response for code, response in value.items()}
        return value


HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class PathItem(_Node):
    parameters: list[Parameter] | None = None
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None

    def operation(self, method: str) -> Operation | None:
        return getattr(self, method.lower(), None)


class Components(_Node):
    schemas: dict[str, Schema] | None = None


class Info(_Node):
    title: str = ""
    version: str

    @field_validator("title", "version", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        # version: 1.1 is a float to YAML
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class Document(_Node):
    """A whole OpenAPI document."""

    openapi: str | None = None
    info: Info
    servers: list[Any] | None = None
    tags: list[Any] | None = None
    paths: dict[str, PathItem] = Field(default_factory=dict)
    path_extensions: dict[str, Any] = Field(default_factory=dict, exclude=True)
    components: Components | None = None

    map_extension_fields: ClassVar[dict[str, str]] = {"paths": "path_extensions"}

    @field_validator("openapi", mode="before")
    @classmethod
    def _openapi_as_text(cls, value: Any) -> Any:
        if isinstance(value, float):
            return str(value)
        return value

    @property
    def schemas(self) -> dict[str, Schema]:
        """The component schema dictionary (an empty, detached dict when there is none)."""
        if self.components is None or self.components.schemas is None:
            return {}
        return self.components.schemas

    @property
    def label(self) -> str:
        return f"{self.info.title}:{self.info.version}"

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


Schema.model_rebuild()
