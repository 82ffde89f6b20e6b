import pathlib
import typing

import typer

from artipoll import config as artipoll_config
from artipoll.common import constants, logging
from artipoll.poll import ops as poll_ops
from artipoll.registry import client as registry_client
from artipoll.snapshot import store as snapshot_store

poll_app = typer.Typer()

ConfigOption = typing.Annotated[
    pathlib.Path, typer.Option("--config", help="Path to the artipoll config")
]


def _make_client(server_url: str, timeout: float) -> registry_client.ArtifactoryClient:
    return registry_client.ArtifactoryClient(server_url, timeout=timeout)


def _make_store(state_dir: pathlib.Path, version_filter: str) -> snapshot_store.FileSnapshotStore:
    return snapshot_store.FileSnapshotStore(state_dir, version_filter)


@poll_app.command()
def poll(
    config_path: ConfigOption = pathlib.Path(constants.default_config_name),
    record: typing.Annotated[
        bool, typer.Option(help="Record the version to build as processed")
    ] = False,
):
    """
    Check the server for changes since the last recorded state.
    """
    config = artipoll_config.load_config(config_path)
    coordinate = artipoll_config.coordinate_of(config)
    client = _make_client(config.server.url, config.server.timeout)
    store = _make_store(config.state.dir, config.artifact.version_filter)

    local_snapshot = store.load(coordinate)
    decision = poll_ops.decide(coordinate, config.artifact.version_filter, local_snapshot, client)

    match decision:
        case poll_ops.NoChange():
            print("NO_CHANGES")
        case poll_ops.BuildNow(version=version):
            print(f"BUILD_NOW {version.version}")
            if record:
                poll_ops.record_version(store, coordinate, version)


@poll_app.command()
def checkout(
    config_path: ConfigOption = pathlib.Path(constants.default_config_name),
    version: typing.Annotated[
        str | None, typer.Option(help="Version to check out. Defaults to the first listed")
    ] = None,
):
    """
    Record a version as processed and print where its files should be downloaded from.
    """
    config = artipoll_config.load_config(config_path)
    coordinate = artipoll_config.coordinate_of(config)
    client = _make_client(config.server.url, config.server.timeout)
    store = _make_store(config.state.dir, config.artifact.version_filter)

    remote_snapshot = poll_ops.build_remote_snapshot(
        coordinate, config.artifact.version_filter, client
    )

    pending = None
    if version is not None:
        pending = remote_snapshot.get_version(version)
        if pending is None:
            raise RuntimeError(
                f"Version {version} of {coordinate} not found on the server or not matched by "
                f"filter {config.artifact.version_filter}."
            )

    next_version = poll_ops.resolve_checkout_version(pending, remote_snapshot)
    if next_version is None:
        logging.error("No artifacts found for %s", coordinate)
        raise typer.Exit(code=1)

    poll_ops.record_version(store, coordinate, next_version)

    if not config.checkout.download:
        return

    for item in poll_ops.checkout_plan(
        client, coordinate, next_version, pathlib.Path(config.checkout.local_path)
    ):
        print(f"{item.url} {item.target.as_posix()}")


@poll_app.command()
def state(config_path: ConfigOption = pathlib.Path(constants.default_config_name)):
    """
    Print the recorded local state.
    """
    config = artipoll_config.load_config(config_path)
    coordinate = artipoll_config.coordinate_of(config)
    store = _make_store(config.state.dir, config.artifact.version_filter)

    local_snapshot = store.load(coordinate)
    print(local_snapshot.to_model().model_dump_json(by_alias=True, indent=2))


@poll_app.command()
def repos(
    server: typing.Annotated[str, typer.Option(help="URL of the Artifactory server")],
    include_remote: typing.Annotated[bool, typer.Option()] = False,
):
    """
    List the repositories of a server.
    """
    client = _make_client(server, constants.default_http_timeout)
    for repository in client.list_repositories(local_only=not include_remote):
        print(repository.key)


@poll_app.command()
def check(config_path: ConfigOption = pathlib.Path(constants.default_config_name)):
    """
    Validate a config and confirm the artifact exists on the server.
    """
    config = artipoll_config.load_config(config_path)
    coordinate = artipoll_config.coordinate_of(config)
    client = _make_client(config.server.url, config.server.timeout)

    if not client.artifact_exists(coordinate):
        logging.error("Could not find artifact %s in repo %s", coordinate, coordinate.repo)
        raise typer.Exit(code=1)

    logging.info("Found artifact %s in repo %s", coordinate, coordinate.repo)
