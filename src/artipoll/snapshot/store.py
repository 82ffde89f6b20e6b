from __future__ import annotations

import typing

import pydantic

from artipoll.common import constants, logging, util
from artipoll.models import snapshot as snapshot_models
from artipoll.snapshot import core as snapshot_core

if typing.TYPE_CHECKING:
    import pathlib

    from artipoll.models import coordinate as coordinate_models


class SnapshotStore(typing.Protocol):
    def load(
        self, coordinate: coordinate_models.Coordinate
    ) -> snapshot_core.RepositorySnapshot: ...

    def save(self, snapshot: snapshot_core.RepositorySnapshot) -> None: ...


class FileSnapshotStore:
    """
    Keeps the local snapshot of each artifact in a JSON file under a state directory.

    Files are named after the coordinate and the version filter, so changing the filter starts
    from a clean state.
    """

    def __init__(self, state_dir: pathlib.Path, version_filter: str):
        self.state_dir = state_dir
        self.version_filter = version_filter

    def path_for(self, coordinate: coordinate_models.Coordinate) -> pathlib.Path:
        return self.state_dir / (
            f"{constants.versions_file_prefix}-{coordinate.repo}-{coordinate.group_id}-"
            f"{coordinate.artifact_id}-{self.version_filter}.json"
        )

    def load(self, coordinate: coordinate_models.Coordinate) -> snapshot_core.RepositorySnapshot:
        """
        Load the last recorded snapshot of an artifact.

        Falls back to the empty snapshot when nothing was recorded yet, when the file cannot be
        read or parsed, or when it belongs to a different artifact.
        """
        state_path = self.path_for(coordinate)
        if not state_path.exists():
            logging.info("No previous state recorded for %s", coordinate)
            return snapshot_core.EMPTY_SNAPSHOT

        try:
            state = snapshot_models.RevisionState.model_validate_json(state_path.read_bytes())
            snapshot = snapshot_core.RepositorySnapshot.from_model(state)
        except OSError as e:
            logging.warning("Caught exception reading %s: %s", state_path, e)
            return snapshot_core.EMPTY_SNAPSHOT
        except (pydantic.ValidationError, snapshot_core.SnapshotError) as e:
            logging.warning("Ignoring malformed state file %s: %s", state_path, e)
            return snapshot_core.EMPTY_SNAPSHOT

        if not snapshot.matches(coordinate):
            logging.warning(
                "State file %s belongs to %s in %s, not %s in %s. Ignoring it.",
                state_path,
                snapshot.coordinate,
                snapshot.repo,
                coordinate,
                coordinate.repo,
            )
            return snapshot_core.EMPTY_SNAPSHOT

        return snapshot

    def save(self, snapshot: snapshot_core.RepositorySnapshot) -> None:
        util.ensure_path(self.state_dir)
        state_path = self.path_for(snapshot.coordinate)
        logging.debug("Writing state for %s to %s", snapshot.coordinate, state_path)
        with state_path.open("w") as f:
            f.write(snapshot.to_model().model_dump_json(by_alias=True, indent=2))
