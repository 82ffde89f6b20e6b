from __future__ import annotations

import collections.abc
import dataclasses
import types
import typing

from artipoll.common import logging
from artipoll.models import coordinate as coordinate_models
from artipoll.models import snapshot as snapshot_models


class SnapshotError(RuntimeError):
    """
    A snapshot would violate its invariants, e.g. a version listed twice.
    """


@dataclasses.dataclass(frozen=True)
class FileFingerprint:
    """
    Size and content hashes of one published file.

    Two fingerprints are equal when their MD5 sums are equal. SHA-1 and size are carried along
    but play no part in comparisons.
    """

    md5: str
    sha1: str = dataclasses.field(compare=False)
    size: int = dataclasses.field(compare=False)

    @classmethod
    def from_model(cls, metadata: snapshot_models.FileMetadata) -> FileFingerprint:
        return cls(md5=metadata.checksums.md5, sha1=metadata.checksums.sha1, size=metadata.size)

    def to_model(self) -> snapshot_models.FileMetadata:
        return snapshot_models.FileMetadata(
            size=self.size,
            checksums=snapshot_models.FileChecksums(sha1=self.sha1, md5=self.md5),
        )


class VersionSnapshot:
    """
    One published version of an artifact and the fingerprints of its files.
    """

    def __init__(
        self,
        version: str,
        files: collections.abc.Iterable[tuple[str, FileFingerprint]] = (),
    ):
        file_map: dict[str, FileFingerprint] = {}
        for filename, fingerprint in files:
            if filename in file_map:
                raise SnapshotError(f"File {filename} is listed twice in version {version}.")
            file_map[filename] = fingerprint

        self._version = version
        self._files = types.MappingProxyType(file_map)

    @property
    def version(self) -> str:
        return self._version

    @property
    def files(self) -> collections.abc.Mapping[str, FileFingerprint]:
        return self._files

    @classmethod
    def from_model(cls, artifact: snapshot_models.Artifact) -> VersionSnapshot:
        return cls(
            artifact.version,
            ((f.filename, FileFingerprint.from_model(f.metadata)) for f in artifact.files),
        )

    def to_model(self) -> snapshot_models.Artifact:
        return snapshot_models.Artifact(
            version=self._version,
            files=[
                snapshot_models.ArtifactFile(filename=filename, metadata=fingerprint.to_model())
                for filename, fingerprint in self._files.items()
            ],
        )

    def __eq__(self, rhs: typing.Any) -> bool:
        if not isinstance(rhs, VersionSnapshot):
            return False
        return self._version == rhs._version and dict(self._files) == dict(rhs._files)

    def __repr__(self) -> str:
        return f"VersionSnapshot({self._version!r}, files={sorted(self._files)!r})"


class RepositorySnapshot:
    """
    Point-in-time view of the published versions of one artifact.

    Versions keep the order they were added in, which is the order the registry lists them.
    Snapshots are never modified; add_or_replace returns a new snapshot.
    """

    def __init__(
        self,
        coordinate: coordinate_models.Coordinate,
        versions: collections.abc.Iterable[VersionSnapshot] = (),
    ):
        version_map: dict[str, VersionSnapshot] = {}
        for version_snapshot in versions:
            if version_snapshot.version in version_map:
                raise SnapshotError(
                    f"Corrupted snapshot! Version {version_snapshot.version} of {coordinate} "
                    "is listed twice."
                )
            version_map[version_snapshot.version] = version_snapshot

        self.coordinate = coordinate
        self._version_map = version_map

    @property
    def repo(self) -> str:
        return self.coordinate.repo

    @property
    def group_id(self) -> str:
        return self.coordinate.group_id

    @property
    def artifact_id(self) -> str:
        return self.coordinate.artifact_id

    @property
    def versions(self) -> tuple[VersionSnapshot, ...]:
        return tuple(self._version_map.values())

    @property
    def is_empty(self) -> bool:
        return self.coordinate == coordinate_models.Coordinate.empty() and not self._version_map

    def get_version(self, version: str) -> VersionSnapshot | None:
        return self._version_map.get(version)

    def matches(self, coordinate: coordinate_models.Coordinate) -> bool:
        return self.coordinate == coordinate

    def add_or_replace(self, version_snapshot: VersionSnapshot) -> RepositorySnapshot:
        """
        Return a copy of this snapshot holding the given version.

        An existing entry for the same version string is dropped and the new one goes last.
        """
        kept = (v for v in self._version_map.values() if v.version != version_snapshot.version)
        return RepositorySnapshot(self.coordinate, [*kept, version_snapshot])

    def with_coordinate(self, coordinate: coordinate_models.Coordinate) -> RepositorySnapshot:
        return RepositorySnapshot(coordinate, self._version_map.values())

    def first_divergence_from(self, rhs: RepositorySnapshot) -> VersionSnapshot | None:
        return first_divergence(self, rhs)

    @classmethod
    def from_model(cls, state: snapshot_models.RevisionState) -> RepositorySnapshot:
        return cls(
            coordinate_models.Coordinate(
                repo=state.repo, group_id=state.group_id, artifact_id=state.artifact_id
            ),
            (VersionSnapshot.from_model(artifact) for artifact in state.artifacts),
        )

    def to_model(self) -> snapshot_models.RevisionState:
        return snapshot_models.RevisionState(
            artifact_id=self.artifact_id,
            group_id=self.group_id,
            repo=self.repo,
            artifacts=[v.to_model() for v in self._version_map.values()],
        )

    def __eq__(self, rhs: typing.Any) -> bool:
        if not isinstance(rhs, RepositorySnapshot):
            return False
        return self.coordinate == rhs.coordinate and self.versions == rhs.versions

    def __repr__(self) -> str:
        return f"RepositorySnapshot({self.coordinate!r}, versions={list(self._version_map)!r})"


EMPTY_SNAPSHOT = RepositorySnapshot(coordinate_models.Coordinate.empty())


def first_divergence(
    reference: RepositorySnapshot, other: RepositorySnapshot
) -> VersionSnapshot | None:
    """
    Find the first version of `reference` carrying something `other` does not know about.

    That is a version missing from `other`, a file missing from `other`'s copy of the version,
    or a file whose MD5 sum differs. Only `reference` is walked, so a version or file present
    in `other` alone is not reported; swap the arguments to catch those.
    """
    for version_snapshot in reference.versions:
        other_version = other.get_version(version_snapshot.version)
        if other_version is None:
            logging.debug(
                "Found new version of artifact: %s:%s",
                reference.artifact_id,
                version_snapshot.version,
            )
            return version_snapshot

        for filename, fingerprint in version_snapshot.files.items():
            other_fingerprint = other_version.files.get(filename)
            if other_fingerprint is None:
                logging.debug(
                    "Found new file %s in artifact: %s:%s",
                    filename,
                    reference.artifact_id,
                    version_snapshot.version,
                )
                return version_snapshot
            if other_fingerprint != fingerprint:
                logging.debug(
                    "Found changed file %s in artifact: %s:%s",
                    filename,
                    reference.artifact_id,
                    version_snapshot.version,
                )
                return version_snapshot

    return None
