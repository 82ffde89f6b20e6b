import collections.abc


def is_version_dynamic(segment: str) -> bool:
    """
    Whether a version filter segment matches any remaining version suffix.
    """
    return segment.strip().endswith("+")


def version_matches_filter(version_filter: str, version: str) -> bool:
    """
    Check a version against a dotted wildcard filter.

    Segments are compared from the left. A dynamic segment (`+`, or anything ending in `+`)
    accepts the version regardless of what follows. A literal segment must equal the version's
    segment at the same position. Running out of filter segments accepts the version, so
    `3.20` accepts `3.20.1`. Running out of version segments before the filter reaches a dynamic
    segment rejects it, so `3.20.2.+` rejects `3.20`.
    """
    if version_filter.strip() == "":
        return True

    filter_segments = version_filter.split(".")
    version_segments = version.split(".")

    for i, filter_segment in enumerate(filter_segments):
        if is_version_dynamic(filter_segment):
            return True
        if i >= len(version_segments):
            return False
        if filter_segment != version_segments[i]:
            return False

    return True


def filter_versions(version_filter: str, versions: collections.abc.Iterable[str]) -> list[str]:
    """
    Keep versions accepted by the filter, preserving their order.
    """
    return [version for version in versions if version_matches_filter(version_filter, version)]
