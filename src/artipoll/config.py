import pathlib
import tomllib

import pydantic

from artipoll.models import config as config_models
from artipoll.models import coordinate as coordinate_models


def load_config(config_path: pathlib.Path) -> config_models.PollConfig:
    """
    Load a poll configuration from a TOML file.
    """
    if not config_path.is_file():
        raise RuntimeError(f"Config file {config_path} does not exist.")

    with config_path.open("rb") as f:
        try:
            config_dict = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise RuntimeError(f"{config_path} is not valid TOML: {e}") from e

    try:
        return config_models.PollConfig.model_validate(config_dict)
    except pydantic.ValidationError as e:
        raise RuntimeError(f"Invalid config {config_path}:\n{e}") from e


def coordinate_of(config: config_models.PollConfig) -> coordinate_models.Coordinate:
    return coordinate_models.Coordinate(
        repo=config.artifact.repo,
        group_id=config.artifact.group_id,
        artifact_id=config.artifact.artifact_id,
    )
