"""Turn the `<src>` argument into a locator."""

import re

from ardunno_cli_gen.errors import InvalidLocatorError
from ardunno_cli_gen.logging import get_logger
from ardunno_cli_gen.models import LocalPath, Locator, ReleaseVersion, SourceRef
from ardunno_cli_gen.versions import classify, parse_version

logger = get_logger(__name__)

# A subset of the GitHub naming rules:
# owner names contain alphanumerics and hyphens,
# repo names may also contain dots and underscores,
# commit is anything `git checkout` accepts (branch, tag, hash).
GITHUB_PATTERN = re.compile(
    r"^(?P<owner>[0-9a-zA-Z-]+)/(?P<repo>[0-9a-zA-Z\-_.]+)(#(?P<commit>\S+))?$"
)


def parse_github(src: str) -> SourceRef | None:
    match = GITHUB_PATTERN.fullmatch(src)
    if match is None:
        logger.debug("no match GitHub", src=src)
        return None
    ref = SourceRef(
        owner=match.group("owner"),
        repo=match.group("repo"),
        commit=match.group("commit"),
    )
    logger.debug("match GitHub", src=src, owner=ref.owner, repo=ref.repo, commit=ref.commit)
    return ref


def parse_semver(src: str) -> ReleaseVersion | SourceRef | None:
    """Parse `src` as a release version.

    Versions below 0.29.0 come back as a `SourceRef` to the Arduino CLI repository at the
    matching tag. Returns None when `src` is not a valid semver.
    """
    logger.debug("parse semver", src=src)
    version = parse_version(src)
    if version is None:
        logger.debug("invalid semver", src=src)
        return None
    return classify(version, raw_input=src)


def _is_path_like(src: str) -> bool:
    return bool(src.strip()) and "\x00" not in src


def parse_locator(src: str) -> Locator:
    """Classify `src`: semver first, then a GitHub reference, then a local path candidate.

    The filesystem is never touched. A `LocalPath` result is only a candidate: the caller
    decides whether it names a usable folder.
    """
    locator = parse_semver(src) or parse_github(src)
    if locator is not None:
        return locator
    if _is_path_like(src):
        return LocalPath(path=src)
    raise InvalidLocatorError(src)
