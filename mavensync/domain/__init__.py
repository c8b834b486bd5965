"""Domain objects for repository synchronisation."""

from .artifact import (
    Artifact,
    ArtifactMetadata,
    ArtifactVersion,
    ArtifactVersionAsset,
    Coordinates,
    Filename,
    Group,
)
from .constants import MAVEN_METADATA_XML
from .version import compare_versions, is_version_token, parse_version

__all__ = [
    "Artifact",
    "ArtifactMetadata",
    "ArtifactVersion",
    "ArtifactVersionAsset",
    "Coordinates",
    "Filename",
    "Group",
    "MAVEN_METADATA_XML",
    "compare_versions",
    "is_version_token",
    "parse_version",
]
