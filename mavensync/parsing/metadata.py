"""Read and write ``maven-metadata.xml`` descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from xml.sax.saxutils import escape

from bs4 import BeautifulSoup, Tag

from mavensync.domain import ArtifactMetadata, ArtifactVersion
from mavensync.domain.constants import LAST_UPDATED_FORMAT
from mavensync.exceptions import InvalidDescriptorError


def _element_text(document: BeautifulSoup, name: str) -> Optional[str]:
    # html.parser lowercases tag names, the xml builder keeps them
    element = document.find([name, name.lower()])
    if not isinstance(element, Tag):
        return None
    text = element.get_text(strip=True)
    return text or None


class MetadataReader:
    """Turn a parsed descriptor into ``ArtifactMetadata``.

    Every ``<version>`` element is read, wherever it sits, so older descriptor
    layouts still yield their versions. Snapshots are dropped unless
    ``releases_only`` is false.
    """

    def parse(self, document: BeautifulSoup, releases_only: bool = True) -> ArtifactMetadata:
        group_id = _element_text(document, "groupId")
        if group_id is None:
            raise InvalidDescriptorError("Invalid descriptor: missing groupId")
        artifact_id = _element_text(document, "artifactId")
        if artifact_id is None:
            raise InvalidDescriptorError(f"Invalid descriptor for {group_id}: missing artifactId")

        versions: List[str] = []
        for element in document.find_all("version"):
            value = element.get_text(strip=True)
            if not value:
                continue
            if releases_only and ArtifactVersion(value).is_snapshot:
                continue
            versions.append(value)

        try:
            return ArtifactMetadata.of(group_id, artifact_id, versions)
        except ValueError as exc:
            raise InvalidDescriptorError(f"Invalid descriptor for {group_id}:{artifact_id}: {exc}") from exc


def format_last_updated(moment: datetime) -> str:
    """``yyyyMMddHHmmss`` in UTC, the form Maven writes into ``lastUpdated``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(LAST_UPDATED_FORMAT)


@dataclass
class MavenMetadataXml:
    """Descriptor contents published to the target after each release."""

    group_id: str
    artifact_id: str
    latest: str
    release: str
    last_updated: str
    versions: List[str] = field(default_factory=list)

    def to_xml(self) -> str:
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            "<metadata>",
            f"  <groupId>{escape(self.group_id)}</groupId>",
            f"  <artifactId>{escape(self.artifact_id)}</artifactId>",
            "  <versioning>",
            f"    <latest>{escape(self.latest)}</latest>",
            f"    <release>{escape(self.release)}</release>",
            "    <versions>",
        ]
        lines.extend(f"      <version>{escape(version)}</version>" for version in self.versions)
        lines.extend(
            [
                "    </versions>",
                f"    <lastUpdated>{escape(self.last_updated)}</lastUpdated>",
                "  </versioning>",
                "</metadata>",
            ]
        )
        return "\n".join(lines) + "\n"
