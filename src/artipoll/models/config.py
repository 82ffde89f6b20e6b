import pathlib
import typing

import pydantic

from artipoll.common import constants, util


def _non_empty(value: str) -> str:
    if value.strip() == "":
        raise ValueError("must not be empty")
    return value


NonEmptyStr = typing.Annotated[str, pydantic.AfterValidator(_non_empty)]


class ServerSection(pydantic.BaseModel):
    """
    server section of an artipoll config
    """

    url: typing.Annotated[NonEmptyStr, pydantic.AfterValidator(util.ensure_trailing_slash)]
    timeout: pydantic.PositiveFloat = constants.default_http_timeout


class ArtifactSection(pydantic.BaseModel):
    """
    artifact section of an artipoll config
    """

    repo: NonEmptyStr
    group_id: NonEmptyStr
    artifact_id: NonEmptyStr
    version_filter: NonEmptyStr = "+"


class CheckoutSection(pydantic.BaseModel):
    # Relative to the consuming build's workspace
    local_path: str = "."
    download: bool = True


class StateSection(pydantic.BaseModel):
    dir: pathlib.Path = constants.artipoll_state_dir


class PollConfig(pydantic.BaseModel):
    """
    Config for polling one artifact
    """

    schema_version: typing.Literal[0]
    server: ServerSection
    artifact: ArtifactSection
    checkout: CheckoutSection = CheckoutSection()
    state: StateSection = StateSection()
