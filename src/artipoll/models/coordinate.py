from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class Coordinate:
    """
    Identifies the artifact being tracked: repository, group and artifact name.
    """

    repo: str
    group_id: str
    artifact_id: str

    @property
    def group_path(self) -> str:
        return self.group_id.replace(".", "/")

    @classmethod
    def empty(cls) -> Coordinate:
        return cls(repo="", group_id="", artifact_id="")

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"
