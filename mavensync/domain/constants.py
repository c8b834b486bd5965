"""Maven repository layout constants."""

MAVEN_METADATA_XML = "maven-metadata.xml"
SNAPSHOT_SUFFIX = "-SNAPSHOT"

CHECKSUM_EXTENSIONS = frozenset({"md5", "sha1", "sha256", "sha512"})
SIGNATURE_EXTENSIONS = frozenset({"asc"})
POM_EXTENSION = "pom"

IGNORED_FILES = frozenset({"archetype-catalog.xml", "last_updated.txt", "robots.txt"})

LAST_UPDATED_FORMAT = "%Y%m%d%H%M%S"
