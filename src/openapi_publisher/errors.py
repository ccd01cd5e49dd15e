"""Exceptions raised while reconciling or releasing an API document."""

from dataclasses import dataclass


class PublisherError(Exception):
    """Base class for every failure that aborts a reconcile or publish run."""


class SourceDocumentMissing(PublisherError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"There is no source API file to process: {path}")


@dataclass(frozen=True)
class IllegalExtension:
    schema: str
    extension: str

    def __str__(self) -> str:
        return f"illegal extension: {self.extension} in schema {self.schema}"


class IllegalExtensionDetected(PublisherError):
    def __init__(self, violations: list[IllegalExtension]):
        self.violations = list(violations)
        details = ", ".join(str(v) for v in self.violations)
        super().__init__(f"Illegal extensions detected: [{details}]")


class AlreadyPublished(PublisherError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(f"API {version} has been published you cannot update it, you must change the version")


class ApiNotUpToDate(PublisherError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(
            f"API {version} file has not been updated, it must be updated and committed before publishing"
        )


class ReleaseLedgerError(PublisherError):
    """releases.json could not be read or breaks the ledger rules."""


class SourceDocumentInvalid(PublisherError):
    def __init__(self, path, reason):
        self.path = path
        super().__init__(f"The source API file {path} could not be read: {reason}")
