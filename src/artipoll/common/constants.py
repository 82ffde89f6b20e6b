import pathlib

artipoll_data_dir = pathlib.Path.home() / ".artipoll"

artipoll_state_dir = artipoll_data_dir / "state"

default_config_name = "artipoll.toml"

# Persisted state file name, kept compatible with existing build records
versions_file_prefix = "artifactoryVersions"

default_http_timeout = 30.0
