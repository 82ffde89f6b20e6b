import pydantic


class FileChecksums(pydantic.BaseModel):
    sha1: str
    md5: str


class FileMetadata(pydantic.BaseModel):
    size: pydantic.NonNegativeInt
    checksums: FileChecksums


class ArtifactFile(pydantic.BaseModel):
    filename: str
    metadata: FileMetadata


class Artifact(pydantic.BaseModel):
    """
    One published version and the files it contains.
    """

    version: str
    files: list[ArtifactFile]


class RevisionState(pydantic.BaseModel):
    """
    Persisted local state of an artifact, as written after each recorded build.
    """

    model_config = pydantic.ConfigDict(populate_by_name=True)

    artifact_id: str = pydantic.Field(alias="artifactID")
    group_id: str = pydantic.Field(alias="groupID")
    repo: str
    artifacts: list[Artifact]
