"""OpenAPI document loading and canonical rendering.

Reads OpenAPI 3.x documents (YAML or JSON) into a Document and renders a
Document back to YAML. Rendering is deterministic: the release ledger
compares snapshots byte for byte.
"""

from pathlib import Path

import yaml

from openapi_publisher.errors import SourceDocumentInvalid

from .base import Document


class _CanonicalDumper(yaml.SafeDumper):
    """SafeDumper that never emits anchors/aliases for shared sub-trees."""

    def ignore_aliases(self, data):
        return True


def parse_document(text: str) -> Document:
    """Parse OpenAPI text (YAML, or JSON as a YAML subset) into a Document."""
    doc = yaml.safe_load(text)
    if not isinstance(doc, dict):
        raise ValueError("OpenAPI document must be a mapping at the top level")
    return Document.model_validate(doc)


def load_document(file_path: Path) -> Document:
    """Load an OpenAPI file into a Document."""
    try:
        return parse_document(Path(file_path).read_text(encoding="utf-8"))
    except (yaml.YAMLError, ValueError) as e:
        raise SourceDocumentInvalid(file_path, e) from e


def render_yaml(document: Document) -> str:
    """Pretty-print a Document as block-style YAML."""
    return yaml.dump(
        document.to_dict(),
        Dumper=_CanonicalDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
