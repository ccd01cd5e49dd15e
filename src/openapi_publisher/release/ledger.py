"""releases.json — the known, published and latest versions of one release folder."""

from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from openapi_publisher.errors import ReleaseLedgerError

RELEASES_FILE = "releases.json"


def releases_file(folder: Path) -> Path:
    return Path(folder) / RELEASES_FILE


class Releases(BaseModel):
    """Ledger of every version written and every version published.

    ``latest`` is always one of the published versions, every published
    version is also in ``versions``, and neither list holds duplicates.
    """

    latest: str | None = None
    versions: list[str] = Field(default_factory=list)
    published: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_invariants(self) -> "Releases":
        for field_name in ("versions", "published"):
            values = getattr(self, field_name)
            if len(set(values)) != len(values):
                raise ValueError(f"{field_name} contains duplicate versions")
        unknown = [v for v in self.published if v not in self.versions]
        if unknown:
            raise ValueError(f"published versions {unknown} are not in versions")
        if self.latest is not None and self.latest not in self.published:
            raise ValueError(f"latest version {self.latest} has not been published")
        return self

    @classmethod
    def read(cls, folder: Path) -> "Releases":
        path = releases_file(folder)
        if not path.exists():
            return cls()
        try:
            return cls.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise ReleaseLedgerError(f"{path} is not a valid release ledger: {e}") from e

    def write(self, folder: Path) -> None:
        path = releases_file(folder)
        path.write_text(self.model_dump_json(indent=2, exclude_none=True) + "\n", encoding="utf-8")

    def add_version(self, version: str) -> bool:
        if version in self.versions:
            return False
        self.versions.append(version)
        return True

    def mark_published(self, version: str) -> bool:
        if version in self.published:
            return False
        self.published.append(version)
        self.latest = version
        return True
