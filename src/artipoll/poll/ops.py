from __future__ import annotations

import dataclasses
import pathlib
import typing

from artipoll.common import logging
from artipoll.common import version as version_filter_ops
from artipoll.snapshot import core as snapshot_core

if typing.TYPE_CHECKING:
    from artipoll.models import coordinate as coordinate_models
    from artipoll.registry import client as registry_client
    from artipoll.snapshot import store as snapshot_store


@dataclasses.dataclass(frozen=True)
class NoChange:
    pass


@dataclasses.dataclass(frozen=True)
class BuildNow:
    version: snapshot_core.VersionSnapshot


PollingDecision = NoChange | BuildNow


class DownloadItem(typing.NamedTuple):
    url: str
    target: pathlib.Path


def build_remote_snapshot(
    coordinate: coordinate_models.Coordinate,
    version_filter: str,
    client: registry_client.RegistryClient,
) -> snapshot_core.RepositorySnapshot:
    """
    Query the registry for every version accepted by the filter and the fingerprints of its
    files. Versions keep the order the registry lists them in.
    """
    all_versions = client.list_versions(coordinate)
    matched_versions = version_filter_ops.filter_versions(version_filter, all_versions)
    logging.debug(
        "%d of %d versions of %s matched filter %s",
        len(matched_versions),
        len(all_versions),
        coordinate,
        version_filter,
    )

    version_snapshots: list[snapshot_core.VersionSnapshot] = []
    for version in matched_versions:
        files: list[tuple[str, snapshot_core.FileFingerprint]] = []
        for filename in client.list_files(coordinate, version):
            fingerprint = client.get_fingerprint(coordinate, version, filename)
            if fingerprint is None:
                logging.warning(
                    "No metadata for %s in %s:%s, skipping", filename, coordinate, version
                )
                continue
            files.append((filename, fingerprint))
        version_snapshots.append(snapshot_core.VersionSnapshot(version, files))

    return snapshot_core.RepositorySnapshot(coordinate, version_snapshots)


def compare(
    remote_snapshot: snapshot_core.RepositorySnapshot,
    local_snapshot: snapshot_core.RepositorySnapshot,
) -> PollingDecision:
    """
    Decide on two snapshots already at hand.

    The remote side is walked first, catching new versions and files. The local side is walked
    next, catching versions and files that disappeared from the server.
    """
    next_version = snapshot_core.first_divergence(remote_snapshot, local_snapshot)
    if next_version is None:
        next_version = snapshot_core.first_divergence(local_snapshot, remote_snapshot)

    if next_version is None:
        return NoChange()

    logging.info("Found new data for version %s", next_version.version)
    return BuildNow(next_version)


def decide(
    coordinate: coordinate_models.Coordinate,
    version_filter: str,
    local_snapshot: snapshot_core.RepositorySnapshot,
    client: registry_client.RegistryClient,
) -> PollingDecision:
    """
    Compare the server's state with the last recorded local state of an artifact.
    """
    logging.debug("Comparing remote revisions of %s with baseline", coordinate)
    remote_snapshot = build_remote_snapshot(coordinate, version_filter, client)
    return compare(remote_snapshot, local_snapshot)


def resolve_checkout_version(
    pending: snapshot_core.VersionSnapshot | None,
    remote_snapshot: snapshot_core.RepositorySnapshot,
) -> snapshot_core.VersionSnapshot | None:
    """
    Pick the version a checkout should fetch.

    A version handed over from polling wins. Without one, e.g. on a first build started by hand,
    the first version the server lists is taken.
    """
    if pending is not None:
        return pending

    if len(remote_snapshot.versions) == 0:
        logging.info("No versions found for %s", remote_snapshot.coordinate)
        return None

    return remote_snapshot.versions[0]


def record_version(
    store: snapshot_store.SnapshotStore,
    coordinate: coordinate_models.Coordinate,
    version: snapshot_core.VersionSnapshot,
) -> snapshot_core.RepositorySnapshot:
    """
    Merge a processed version into the local snapshot and persist the result.
    """
    previous = store.load(coordinate)
    updated = previous.add_or_replace(version).with_coordinate(coordinate)
    store.save(updated)
    logging.info("Recorded version %s of %s", version.version, coordinate)
    return updated


def checkout_plan(
    client: registry_client.ArtifactoryClient,
    coordinate: coordinate_models.Coordinate,
    version: snapshot_core.VersionSnapshot,
    local_path: pathlib.Path,
) -> list[DownloadItem]:
    """
    Work out where each file of a version is downloaded from and where it should land.
    """
    return [
        DownloadItem(
            url=client.download_url(coordinate, version.version, filename),
            target=local_path / filename,
        )
        for filename in version.files
    ]
