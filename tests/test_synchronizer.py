from datetime import datetime, timezone

import pytest
from bs4 import BeautifulSoup

from mavensync.domain import ArtifactMetadata
from mavensync.parsing import MetadataReader
from mavensync.service import ArtifactSynchronizer
from mavensync.transport import ConflictError, TransportError

FIXED_NOW = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)


def build_synchronizer(source_server, target_server, **kwargs):
    kwargs.setdefault("clock", lambda: FIXED_NOW)
    return ArtifactSynchronizer(source_server.repository(), target_server.repository(), **kwargs)


def target_versions(target_server, path):
    document = BeautifulSoup(target_server.files[path], "xml")
    return [str(version) for version in MetadataReader().parse(document).versions]


@pytest.fixture
def populated(source_server, target_server):
    source_server.add_artifact("com.example", "a", ["1.0", "1.1"])
    target_server.add_artifact("com.example", "a", ["1.0"])
    return source_server, target_server


def test_copies_missing_version_and_publishes_descriptor(populated):
    source_server, target_server = populated
    synchronizer = build_synchronizer(source_server, target_server)

    result = synchronizer.sync(ArtifactMetadata.of("com.example", "a", ["1.0", "1.1"]))

    assert [str(v) for v in result.transferred] == ["1.1"]
    assert result.skipped == []
    assert result.assets_copied == 4
    assert sorted(target_server.puts) == [
        "com/example/a/1.1/a-1.1.jar",
        "com/example/a/1.1/a-1.1.jar.asc",
        "com/example/a/1.1/a-1.1.jar.sha1",
        "com/example/a/1.1/a-1.1.pom",
        "com/example/a/maven-metadata.xml",
    ]
    # assets first, descriptor last
    assert target_server.puts[-1] == "com/example/a/maven-metadata.xml"
    assert target_server.files["com/example/a/1.1/a-1.1.jar"] == b"a-1.1.jar"

    descriptor = target_server.files["com/example/a/maven-metadata.xml"].decode("utf-8")
    assert "<latest>1.1</latest>" in descriptor
    assert "<release>1.1</release>" in descriptor
    assert "<lastUpdated>20240506070809</lastUpdated>" in descriptor
    assert target_versions(target_server, "com/example/a/maven-metadata.xml") == ["1.0", "1.1"]


def test_second_sync_is_a_no_op(populated):
    source_server, target_server = populated
    synchronizer = build_synchronizer(source_server, target_server)
    metadata = ArtifactMetadata.of("com.example", "a", ["1.0", "1.1"])

    synchronizer.sync(metadata)
    puts = list(target_server.puts)
    result = synchronizer.sync(metadata)

    assert result.transferred == []
    assert result.assets_copied == 0
    assert target_server.puts == puts


def test_new_artifact_is_created_on_target(source_server, target_server):
    source_server.add_artifact("org.example", "lib", ["1.0", "2.0"])
    synchronizer = build_synchronizer(source_server, target_server)

    result = synchronizer.sync(ArtifactMetadata.of("org.example", "lib", ["1.0", "2.0"]))

    assert [str(v) for v in result.transferred] == ["1.0", "2.0"]
    assert target_versions(target_server, "org/example/lib/maven-metadata.xml") == ["1.0", "2.0"]
    assert "<latest>2.0</latest>" in target_server.files["org/example/lib/maven-metadata.xml"].decode("utf-8")


def test_checksums_and_signatures_can_be_skipped(populated):
    source_server, target_server = populated
    synchronizer = build_synchronizer(
        source_server, target_server, transfer_checksums=False, transfer_signatures=False
    )

    result = synchronizer.sync(ArtifactMetadata.of("com.example", "a", ["1.0", "1.1"]))

    assert result.assets_copied == 2
    assert "com/example/a/1.1/a-1.1.jar.sha1" not in target_server.files
    assert "com/example/a/1.1/a-1.1.jar.asc" not in target_server.files


def test_files_for_other_artifacts_are_not_copied(populated):
    source_server, target_server = populated
    source_server.add("com/example/a/1.1/README.txt", "readme")

    build_synchronizer(source_server, target_server).sync(ArtifactMetadata.of("com.example", "a", ["1.1"]))

    assert "com/example/a/1.1/README.txt" not in target_server.files


def test_version_without_assets_is_skipped(source_server, target_server):
    source_server.add_artifact("com.example", "a", ["1.0"])
    synchronizer = build_synchronizer(source_server, target_server)

    # 0.9 is listed by the descriptor but its directory is gone
    result = synchronizer.sync(ArtifactMetadata.of("com.example", "a", ["0.9", "1.0"]))

    assert [str(v) for v in result.skipped] == ["0.9"]
    assert [str(v) for v in result.transferred] == ["1.0"]
    assert target_versions(target_server, "com/example/a/maven-metadata.xml") == ["1.0"]


def test_download_delay_between_versions(source_server, target_server):
    source_server.add_artifact("com.example", "a", ["1.0", "1.1", "1.2"])
    sleeps = []
    synchronizer = build_synchronizer(source_server, target_server, download_delay=2.0, sleep=sleeps.append)

    synchronizer.sync(ArtifactMetadata.of("com.example", "a", ["1.0", "1.1", "1.2"]))

    assert sleeps == [2.0, 2.0]


def test_conflict_propagates_without_releasing(populated):
    source_server, target_server = populated
    target_server.respond("PUT", "com/example/a/1.1/a-1.1.jar", 409)
    synchronizer = build_synchronizer(source_server, target_server)

    with pytest.raises(ConflictError):
        synchronizer.sync(ArtifactMetadata.of("com.example", "a", ["1.0", "1.1"]))

    assert target_versions(target_server, "com/example/a/maven-metadata.xml") == ["1.0"]


def test_staging_files_are_removed(populated, tmp_path):
    source_server, target_server = populated
    target_server.respond("PUT", "com/example/a/1.1/a-1.1.pom", 500)
    synchronizer = build_synchronizer(source_server, target_server, staging_dir=tmp_path)

    with pytest.raises(TransportError):
        synchronizer.sync(ArtifactMetadata.of("com.example", "a", ["1.1"]))

    assert list(tmp_path.iterdir()) == []
