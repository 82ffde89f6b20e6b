from __future__ import annotations

import typing

import pydantic
import requests

from artipoll.common import constants, logging, util
from artipoll.models import artifactory as artifactory_models
from artipoll.snapshot import core as snapshot_core

if typing.TYPE_CHECKING:
    from artipoll.models import coordinate as coordinate_models

ModelT = typing.TypeVar("ModelT", bound=pydantic.BaseModel)


class RegistryClient(typing.Protocol):
    """
    Read access to the versions and files published for an artifact.

    Implementations report failures as empty results, never by raising.
    """

    def list_versions(self, coordinate: coordinate_models.Coordinate) -> list[str]: ...

    def list_files(self, coordinate: coordinate_models.Coordinate, version: str) -> list[str]: ...

    def get_fingerprint(
        self, coordinate: coordinate_models.Coordinate, version: str, filename: str
    ) -> snapshot_core.FileFingerprint | None: ...


class ArtifactoryClient:
    """
    Talks to the storage API of an Artifactory server.
    """

    def __init__(self, server_url: str, timeout: float = constants.default_http_timeout):
        self.server_url = util.ensure_trailing_slash(server_url)
        self.timeout = timeout

    def storage_url(
        self,
        coordinate: coordinate_models.Coordinate,
        version: str | None = None,
        filename: str | None = None,
    ) -> str:
        url = (
            f"{self.server_url}api/storage/{coordinate.repo}/"
            f"{coordinate.group_path}/{coordinate.artifact_id}/"
        )
        if version is not None:
            url += f"{version}/"
            if filename is not None:
                url += filename
        return url

    def download_url(
        self, coordinate: coordinate_models.Coordinate, version: str, filename: str
    ) -> str:
        return (
            f"{self.server_url}{coordinate.repo}/{coordinate.group_path}/"
            f"{coordinate.artifact_id}/{version}/{filename}"
        )

    def _get(self, url: str) -> requests.Response | None:
        logging.debug("GET %s", url)
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logging.warning("Caught exception during GET %s: %s", url, e)
            return None

        logging.debug("Status: %s %s", response.status_code, response.reason)
        if not response.ok:
            return None
        return response

    def _get_model(self, url: str, model: type[ModelT]) -> ModelT | None:
        response = self._get(url)
        if response is None:
            return None

        try:
            return model.model_validate_json(response.content)
        except pydantic.ValidationError as e:
            logging.warning("Unexpected response from %s: %s", url, e)
            return None

    def list_versions(self, coordinate: coordinate_models.Coordinate) -> list[str]:
        """
        List the version folders of an artifact, in the order the server returns them.
        """
        folder = self._get_model(self.storage_url(coordinate), artifactory_models.FolderInfo)
        if folder is None:
            return []
        return [child.name for child in folder.children if child.folder]

    def list_files(self, coordinate: coordinate_models.Coordinate, version: str) -> list[str]:
        """
        List the files published under one version of an artifact.
        """
        folder = self._get_model(
            self.storage_url(coordinate, version), artifactory_models.FolderInfo
        )
        if folder is None:
            return []
        return [child.name for child in folder.children if not child.folder]

    def get_fingerprint(
        self, coordinate: coordinate_models.Coordinate, version: str, filename: str
    ) -> snapshot_core.FileFingerprint | None:
        file_info = self._get_model(
            self.storage_url(coordinate, version, filename), artifactory_models.FileInfo
        )
        if file_info is None:
            return None
        return snapshot_core.FileFingerprint(
            md5=file_info.checksums.md5, sha1=file_info.checksums.sha1, size=file_info.size
        )

    def list_repositories(self, local_only: bool = True) -> list[artifactory_models.RepositoryInfo]:
        """
        List the repositories of the server. Mirrors of remote repositories are skipped unless
        `local_only` is false.
        """
        response = self._get(f"{self.server_url}api/repositories")
        if response is None:
            return []

        try:
            repositories = pydantic.TypeAdapter(
                list[artifactory_models.RepositoryInfo]
            ).validate_json(response.content)
        except pydantic.ValidationError as e:
            logging.warning("Unexpected repository list from %s: %s", self.server_url, e)
            return []

        if not local_only:
            return repositories
        return [repository for repository in repositories if repository.type == "LOCAL"]

    def artifact_exists(self, coordinate: coordinate_models.Coordinate) -> bool:
        if "" in (coordinate.repo, coordinate.group_id, coordinate.artifact_id):
            return False
        return self._get(self.storage_url(coordinate)) is not None
