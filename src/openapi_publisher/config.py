"""Run settings for a reconcile/publish invocation."""

from pathlib import Path

from pydantic import BaseModel

from openapi_publisher.errors import SourceDocumentMissing
from openapi_publisher.reconcile.policy import Extensions

DEFAULT_SOURCE = Path("target/final.yaml")

# substituted for empty lists when a release folder is configured
DEFAULT_OBJECT_EXTENSIONS = ["x-package", "x-cloudevent-type", "x-cloudevent-subject"]
DEFAULT_PROPERTY_EXTENSIONS = ["x-basename"]
DEFAULT_ILLEGAL_EXTENSIONS = ["x-property-ref"]


class PublisherSettings(BaseModel):
    source: Path = DEFAULT_SOURCE
    release_folder: Path | None = None
    reconciled_api: Path | None = None
    always_include_tag_values: list[str] = []
    remove_object_extensions: list[str] = []
    remove_property_extensions: list[str] = []
    illegal_extensions: list[str] = []

    def require_source(self) -> Path:
        if not self.source.exists():
            raise SourceDocumentMissing(self.source)
        return self.source

    def extension_policy(self) -> Extensions:
        object_extensions = self.remove_object_extensions
        property_extensions = self.remove_property_extensions
        illegal_extensions = self.illegal_extensions

        if self.release_folder is not None:
            object_extensions = object_extensions or DEFAULT_OBJECT_EXTENSIONS
            property_extensions = property_extensions or DEFAULT_PROPERTY_EXTENSIONS
            illegal_extensions = illegal_extensions or DEFAULT_ILLEGAL_EXTENSIONS

        return Extensions(
            force_include_tag_values=self.always_include_tag_values,
            object_extensions=object_extensions,
            property_extensions=property_extensions,
            illegal_extensions=illegal_extensions,
        )
