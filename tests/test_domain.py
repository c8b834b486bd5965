import pytest

from mavensync.domain import (
    Artifact,
    ArtifactMetadata,
    ArtifactVersion,
    Coordinates,
    Filename,
    Group,
    compare_versions,
    is_version_token,
)
from mavensync.exceptions import InvalidVersionError


@pytest.mark.parametrize("value", ["", "   ", ".org.example"])
def test_group_rejects_invalid_values(value):
    with pytest.raises(ValueError):
        Group(value)


def test_group_path_segments():
    assert Group("org.apache.commons").path_segments == ["org", "apache", "commons"]


def test_blank_artifact_and_version_rejected():
    with pytest.raises(ValueError):
        Artifact(" ")
    with pytest.raises(ValueError):
        ArtifactVersion("")


def test_versions_sort_maven_style():
    values = ["1.10", "1.0-alpha1", "1.0", "1.0-rc1", "1.0-SNAPSHOT", "1.9", "1.0.1", "1.0-sp1", "1.0-beta2"]
    ordered = [str(v) for v in sorted(ArtifactVersion(v) for v in values)]
    assert ordered == ["1.0-alpha1", "1.0-beta2", "1.0-rc1", "1.0-SNAPSHOT", "1.0", "1.0-sp1", "1.0.1", "1.9", "1.10"]


@pytest.mark.parametrize(
    "left,right",
    [("1", "1.0"), ("1.0", "1.0.0"), ("1.0", "1.0-final"), ("1.0-ga", "1.0"), ("1.0-cr1", "1.0-rc1"), ("1.0-a1", "1.0-alpha1")],
)
def test_equivalent_versions_compare_equal(left, right):
    assert compare_versions(left, right) == 0


def test_version_equality_is_textual():
    assert ArtifactVersion("1.0") != ArtifactVersion("1.0.0")
    assert not ArtifactVersion("1.0") < ArtifactVersion("1.0.0")


def test_unknown_qualifier_sorts_after_release():
    assert compare_versions("2.0-jboss", "2.0") == 1
    assert compare_versions("2.0-jboss", "2.0-sp1") == 1


def test_compare_rejects_non_versions():
    with pytest.raises(InvalidVersionError):
        compare_versions("latest", "1.0")
    with pytest.raises(ValueError):
        compare_versions("1.0", "")


@pytest.mark.parametrize("value,expected", [("1.0", True), ("2.3.4-SNAPSHOT", True), ("20240101", True),
                                            ("commons-lang", False), ("", False), ("v1.0", False)])
def test_is_version_token(value, expected):
    assert is_version_token(value) is expected


def test_snapshot_detection():
    assert ArtifactVersion("1.0-SNAPSHOT").is_snapshot
    assert not ArtifactVersion("1.0").is_snapshot


def test_metadata_dedupes_versions_keeping_order():
    metadata = ArtifactMetadata.of("g", "a", ["1.1", "1.0", "1.1"])
    assert [str(v) for v in metadata.versions] == ["1.1", "1.0"]


def test_missing_from_keeps_source_order():
    source = ArtifactMetadata.of("g", "a", ["1.0", "1.2", "1.1"])
    target = ArtifactMetadata.of("g", "a", ["1.0"])
    assert [str(v) for v in source.missing_from(target)] == ["1.2", "1.1"]
    assert source.missing_from(source) == []


def test_coordinates_render_and_base_name():
    coords = ArtifactMetadata.of("org.example", "lib", ["1.0"]).coordinates(ArtifactVersion("1.0"))
    assert coords == Coordinates(Group("org.example"), Artifact("lib"), ArtifactVersion("1.0"))
    assert str(coords) == "org.example:lib:1.0"
    assert coords.base_name == "lib-1.0"


def test_filename_classification():
    assert Filename("lib-1.0.pom").is_pom
    assert Filename("lib-1.0.jar.sha1").is_checksum
    assert Filename("lib-1.0.jar.sha512").is_checksum
    assert Filename("lib-1.0.jar.asc").is_signature
    assert Filename("maven-metadata.xml").is_metadata
    assert Filename("archetype-catalog.xml").is_ignored
    jar = Filename("lib-1.0.jar")
    assert jar.extension == "jar"
    assert not (jar.is_pom or jar.is_checksum or jar.is_signature or jar.is_metadata or jar.is_ignored)


def test_ordering_operators_agree_for_equivalent_versions():
    short, long = ArtifactVersion("1"), ArtifactVersion("1.0")
    assert not short > long
    assert not long > short
    assert short >= long and long >= short
    assert short <= long and long <= short
    assert short != long


def test_ordering_operators():
    older, newer = ArtifactVersion("1.0-rc1"), ArtifactVersion("1.0")
    assert older < newer and older <= newer
    assert newer > older and newer >= older
    assert max([newer, older]) == newer
