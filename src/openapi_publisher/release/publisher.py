"""Writes reconciled documents into a versioned release folder.

Each version is pretty-printed to ``<folder>/<version>.yaml`` and tracked in
``<folder>/releases.json``. A version may be rewritten freely until it is
published; after that its snapshot must never change.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from openapi_publisher.errors import AlreadyPublished, ApiNotUpToDate
from openapi_publisher.parser.base import Document
from openapi_publisher.parser.openapi import render_yaml
from openapi_publisher.release.ledger import Releases

logger = logging.getLogger(__name__)


class ReleasePublisher:
    def __init__(self, document: Document, render: Callable[[Document], str] = render_yaml):
        self.document = document
        self.render = render

    @property
    def version(self) -> str:
        return self.document.info.version

    def snapshot_file(self, folder: Path) -> Path:
        return Path(folder) / f"{self.version}.yaml"

    def write_reconciliation(self, reconciled_file: Path) -> "ReleasePublisher":
        """Export the reconciled document to an arbitrary path."""
        reconciled_file = Path(reconciled_file)
        reconciled_file.parent.mkdir(parents=True, exist_ok=True)
        reconciled_file.write_text(self.render(self.document), encoding="utf-8")
        logger.info("API %s written reconciled file %s", self.document.label, reconciled_file)
        return self

    def update_release(self, folder: Path) -> "ReleasePublisher":
        """Record the document as the snapshot of its version."""
        folder = Path(folder)
        folder.mkdir(parents=True, exist_ok=True)
        releases = Releases.read(folder)
        data = self.render(self.document)
        api_file = self.snapshot_file(folder)

        if api_file.exists():
            if api_file.read_text(encoding="utf-8") != data:
                if self.version in releases.published:
                    raise AlreadyPublished(self.version)
                logger.info("API %s has changed, updating", self.document.label)
                api_file.write_text(data, encoding="utf-8")
            else:
                logger.info("API %s has not changed", self.document.label)
        else:
            logger.info("API %s is new, saving", self.document.label)
            api_file.write_text(data, encoding="utf-8")

        if releases.add_version(self.version):
            logger.info("API %s does not exist in releases file, updating", self.document.label)
            releases.write(folder)

        return self

    def publish(self, folder: Path) -> "ReleasePublisher":
        """Promote the recorded version to published and make it the latest."""
        folder = Path(folder)
        data = self.render(self.document)
        api_file = self.snapshot_file(folder)

        if not api_file.exists():
            logger.error("API %s there is no file on disk at all.", self.document.label)
            raise ApiNotUpToDate(self.version)
        if api_file.read_text(encoding="utf-8") != data:
            logger.error("API %s file on disk is different from the currently reconciled file.", self.document.label)
            raise ApiNotUpToDate(self.version)

        releases = Releases.read(folder)
        # a snapshot on disk without a ledger entry becomes known before it is published
        added = releases.add_version(self.version)
        if releases.mark_published(self.version) or added:
            releases.write(folder)
            logger.info("API %s published", self.document.label)

        return self
