import pydantic

from artipoll.models import snapshot as snapshot_models


class StorageChild(pydantic.BaseModel):
    uri: str
    folder: bool

    @property
    def name(self) -> str:
        return self.uri.removeprefix("/")


class FolderInfo(pydantic.BaseModel):
    """
    Response of the storage API for a folder. Only the children are of interest.
    """

    children: list[StorageChild] = []


class FileInfo(pydantic.BaseModel):
    """
    Response of the storage API for a file.

    The API reports size as a string of bytes; it is coerced to an integer.
    """

    size: pydantic.NonNegativeInt
    checksums: snapshot_models.FileChecksums


class RepositoryInfo(pydantic.BaseModel):
    key: str
    type: str
    url: str | None = None
    description: str | None = None
