"""Value objects describing Maven coordinates and repository files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Tuple

from .constants import (
    CHECKSUM_EXTENSIONS,
    IGNORED_FILES,
    MAVEN_METADATA_XML,
    POM_EXTENSION,
    SIGNATURE_EXTENSIONS,
    SNAPSHOT_SUFFIX,
)
from .version import compare_versions


def _require_text(value: str, kind: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{kind} cannot be blank")


@dataclass(frozen=True)
class Group:
    """Dotted group namespace, e.g. ``org.apache.commons``."""

    value: str

    def __post_init__(self) -> None:
        _require_text(self.value, "Group")
        if self.value.startswith("."):
            raise ValueError(f"Group cannot start with a dot: {self.value}")

    @property
    def path_segments(self) -> List[str]:
        return self.value.split(".")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Artifact:
    value: str

    def __post_init__(self) -> None:
        _require_text(self.value, "Artifact")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArtifactVersion:
    """A version string; equality is textual, ordering is Maven-style."""

    value: str

    def __post_init__(self) -> None:
        _require_text(self.value, "ArtifactVersion")

    @property
    def is_snapshot(self) -> bool:
        return self.value.endswith(SNAPSHOT_SUFFIX)

    # equality stays textual; every ordering operator goes through the Maven rule
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ArtifactVersion):
            return NotImplemented
        return compare_versions(self.value, other.value) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, ArtifactVersion):
            return NotImplemented
        return compare_versions(self.value, other.value) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, ArtifactVersion):
            return NotImplemented
        return compare_versions(self.value, other.value) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, ArtifactVersion):
            return NotImplemented
        return compare_versions(self.value, other.value) >= 0

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Coordinates:
    group: Group
    artifact: Artifact
    version: ArtifactVersion

    @property
    def base_name(self) -> str:
        """Filename prefix shared by every asset of this release."""
        return f"{self.artifact.value}-{self.version.value}"

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"


@dataclass(frozen=True)
class ArtifactMetadata:
    """Known versions of one artifact on one repository."""

    group: Group
    artifact: Artifact
    versions: Tuple[ArtifactVersion, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # keep first-seen order, drop duplicates
        object.__setattr__(self, "versions", tuple(dict.fromkeys(self.versions)))

    @classmethod
    def of(cls, group: str, artifact: str, versions: Iterable[str] = ()) -> "ArtifactMetadata":
        return cls(
            group=Group(group),
            artifact=Artifact(artifact),
            versions=tuple(ArtifactVersion(v) for v in versions),
        )

    @property
    def version_set(self) -> FrozenSet[ArtifactVersion]:
        return frozenset(self.versions)

    def missing_from(self, other: "ArtifactMetadata") -> List[ArtifactVersion]:
        """Versions known here but absent from ``other``, in this metadata's order."""
        present = other.version_set
        return [version for version in self.versions if version not in present]

    def coordinates(self, version: ArtifactVersion) -> Coordinates:
        return Coordinates(self.group, self.artifact, version)

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact}"


@dataclass(frozen=True)
class Filename:
    """Leaf name of a repository path."""

    value: str

    def __post_init__(self) -> None:
        _require_text(self.value, "Filename")

    @property
    def extension(self) -> str:
        return self.value.rsplit(".", 1)[-1]

    @property
    def is_pom(self) -> bool:
        return self.extension == POM_EXTENSION

    @property
    def is_checksum(self) -> bool:
        return self.extension in CHECKSUM_EXTENSIONS

    @property
    def is_signature(self) -> bool:
        return self.extension in SIGNATURE_EXTENSIONS

    @property
    def is_metadata(self) -> bool:
        return self.value == MAVEN_METADATA_XML

    @property
    def is_ignored(self) -> bool:
        return self.value in IGNORED_FILES

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArtifactVersionAsset:
    coordinates: Coordinates
    filename: Filename

    def __str__(self) -> str:
        return f"{self.coordinates}/{self.filename}"
