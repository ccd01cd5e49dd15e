"""Reconciler — runs reachability and the extension policy over one document."""

import logging
from dataclasses import dataclass, field

from openapi_publisher.parser.base import Document
from openapi_publisher.reconcile.enforcer import PolicyEnforcer
from openapi_publisher.reconcile.policy import Extensions
from openapi_publisher.reconcile.walker import ReachabilityWalker

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    reachable: set[str] = field(default_factory=set)
    unused: list[str] = field(default_factory=list)


class Reconciler:
    """Prunes a document to its reachable schemas and enforces the extension policy in place."""

    def __init__(self, document: Document, extensions: Extensions):
        self.document = document
        self.extensions = extensions
        self.walker = ReachabilityWalker(extensions)
        self.enforcer = PolicyEnforcer(extensions)

    def reconcile(self) -> ReconcileReport:
        reachable = self.walker.compute_reachable(self.document)
        unused = self.enforcer.prune(self.document, reachable)

        self.enforcer.detect_illegal_extensions(self.document)
        self.enforcer.rename_shortened_properties(self.document)
        self.enforcer.strip_extensions(self.document)

        logger.info("API %s has unused schema objects %s", self.document.label, unused)
        return ReconcileReport(reachable=reachable, unused=unused)
