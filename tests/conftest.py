import json
import typing

import pytest

from artipoll.models import coordinate as coordinate_models
from artipoll.snapshot import core as snapshot_core

TEST_COORDINATE = coordinate_models.Coordinate(
    repo="libs-release-local", group_id="org.acme", artifact_id="lib"
)

TEST_SERVER = "http://artifactory.test/artifactory/"


class FakeRegistryClient:
    """
    In-memory registry. `versions` maps each version to its files and their (md5, sha1, size).
    """

    def __init__(self, versions: dict[str, dict[str, tuple[str, str, int]]]):
        self.versions = versions
        self.fingerprint_calls: list[tuple[str, str]] = []

    def list_versions(self, coordinate: coordinate_models.Coordinate) -> list[str]:
        return list(self.versions)

    def list_files(self, coordinate: coordinate_models.Coordinate, version: str) -> list[str]:
        return list(self.versions.get(version, {}))

    def get_fingerprint(
        self, coordinate: coordinate_models.Coordinate, version: str, filename: str
    ) -> snapshot_core.FileFingerprint | None:
        self.fingerprint_calls.append((version, filename))
        file_data = self.versions.get(version, {}).get(filename)
        if file_data is None:
            return None
        md5, sha1, size = file_data
        return snapshot_core.FileFingerprint(md5=md5, sha1=sha1, size=size)


class MockHttpResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content: bytes = content
        self.status_code: int = status_code
        self.ok: bool = 200 <= status_code < 300
        self.reason: str = "OK" if self.ok else "Not Found"

    @property
    def text(self):
        return self.content.decode("utf-8")


class Helpers:
    @staticmethod
    def fingerprint(md5: str, sha1: str = "sha1", size: int = 1) -> snapshot_core.FileFingerprint:
        return snapshot_core.FileFingerprint(md5=md5, sha1=sha1, size=size)

    @staticmethod
    def version(version: str, **files: str) -> snapshot_core.VersionSnapshot:
        """
        Build a version from filename=md5 pairs. Dots are not valid in keyword names, so
        underscores in file names become dots: app_jar=... gives app.jar.
        """
        return snapshot_core.VersionSnapshot(
            version,
            [(name.replace("_", "."), Helpers.fingerprint(md5)) for name, md5 in files.items()],
        )

    @staticmethod
    def snapshot(
        *versions: snapshot_core.VersionSnapshot,
        coordinate: coordinate_models.Coordinate = TEST_COORDINATE,
    ) -> snapshot_core.RepositorySnapshot:
        return snapshot_core.RepositorySnapshot(coordinate, versions)


@pytest.fixture(name="helpers")
def helpers_fixture() -> Helpers:
    return Helpers()


@pytest.fixture(name="artifactory_side_effect")
def artifactory_side_effect_fixture() -> typing.Callable[..., MockHttpResponse]:
    """
    Serve a small Artifactory storage API for TEST_COORDINATE.

    Versions 1.2.3 and 1.2.4 hold app.jar; 2.0.0 holds app.jar and app.pom.
    """
    base = f"{TEST_SERVER}api/storage/libs-release-local/org/acme/lib/"
    responses: dict[str, typing.Any] = {
        base: {
            "repo": "libs-release-local",
            "path": "/org/acme/lib",
            "children": [
                {"uri": "/1.2.3", "folder": True},
                {"uri": "/1.2.4", "folder": True},
                {"uri": "/2.0.0", "folder": True},
                {"uri": "/maven-metadata.xml", "folder": False},
            ],
        },
        f"{base}1.2.3/": {"children": [{"uri": "/app.jar", "folder": False}]},
        f"{base}1.2.4/": {"children": [{"uri": "/app.jar", "folder": False}]},
        f"{base}2.0.0/": {
            "children": [
                {"uri": "/app.jar", "folder": False},
                {"uri": "/app.pom", "folder": False},
                {"uri": "/extra", "folder": True},
            ]
        },
        f"{base}1.2.3/app.jar": {
            "repo": "libs-release-local",
            "path": "/org/acme/lib/1.2.3/app.jar",
            "size": "1024",
            "mimeType": "application/java-archive",
            "checksums": {"md5": "aaa", "sha1": "sha-aaa"},
            "originalChecksums": {"md5": "aaa", "sha1": "sha-aaa"},
        },
        f"{base}1.2.4/app.jar": {"size": "2048", "checksums": {"md5": "bbb", "sha1": "sha-bbb"}},
        f"{base}2.0.0/app.jar": {"size": "4096", "checksums": {"md5": "ccc", "sha1": "sha-ccc"}},
        f"{base}2.0.0/app.pom": {"size": "512", "checksums": {"md5": "ddd", "sha1": "sha-ddd"}},
        f"{TEST_SERVER}api/repositories": [
            {"key": "libs-release-local", "type": "LOCAL", "url": "http://x/libs-release-local"},
            {"key": "jcenter-cache", "type": "REMOTE"},
            {"key": "libs-snapshot-local", "type": "LOCAL"},
        ],
    }

    def mock_artifactory(url: str, **kwargs: typing.Any) -> MockHttpResponse:
        assert url.startswith(TEST_SERVER), f"Unexpected access to non-Artifactory URL {url}"
        if url in responses:
            return MockHttpResponse(json.dumps(responses[url]).encode("utf-8"))
        return MockHttpResponse(b'{"errors": [{"status": 404}]}', status_code=404)

    return mock_artifactory


@pytest.fixture(name="coordinate")
def coordinate_fixture() -> coordinate_models.Coordinate:
    return TEST_COORDINATE


@pytest.fixture(name="server_url")
def server_url_fixture() -> str:
    return TEST_SERVER


@pytest.fixture(name="fake_registry")
def fake_registry_fixture() -> type[FakeRegistryClient]:
    return FakeRegistryClient
