"""Release policy of the Arduino CLI.

The upstream release process changed twice in ways that matter here:

- `PROTOS_PUBLISHED_SINCE`: the `.proto` files are attached to the GitHub release as
  `arduino-cli_<version>_proto.zip` only since 0.29.0 (arduino/arduino-cli#1931). Older
  versions can only be checked out from git by tag.
- `RELEASE_TAG_PREFIXED_SINCE`: since 0.35.0-rc.1 the release tags are `v`-prefixed, so the
  tag segment of the download URL keeps the `v` when the user typed one. The asset file
  name always carries the bare version.
"""

from pydantic import BaseModel, ConfigDict
from semver import Version

from ardunno_cli_gen.errors import UnsupportedVersionError
from ardunno_cli_gen.logging import get_logger
from ardunno_cli_gen.models import ARDUINO_OWNER, ARDUINO_REPO, ReleaseVersion, SourceRef

logger = get_logger(__name__)

PROTOS_PUBLISHED_SINCE = Version.parse("0.29.0")
RELEASE_TAG_PREFIXED_SINCE = Version.parse("0.35.0-rc.1")


class ArtifactLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    download_url: str
    filename: str


def parse_version(text: str) -> Version | None:
    """Parse a semantic version, tolerating surrounding whitespace and a `v` or `=` prefix.

    Returns None when `text` is not a complete `MAJOR.MINOR.PATCH[-pre][+build]` version.
    """
    candidate = text.strip().removeprefix("=")
    if candidate[:1] in ("v", "V"):
        candidate = candidate[1:]
    try:
        return Version.parse(candidate)
    except (TypeError, ValueError):
        return None


def _normalize(version: Version) -> str:
    # build metadata is not part of release tags or asset names
    return str(version.replace(build=None))


def _has_v_prefix(text: str) -> bool:
    return text.strip().removeprefix("=")[:1] in ("v", "V")


def can_download_protos(version: Version) -> bool:
    return version >= PROTOS_PUBLISHED_SINCE


def classify(version: Version | str, raw_input: str | None = None) -> ReleaseVersion | SourceRef:
    """Map a version to the way its proto files can be obtained.

    Releases `>=0.29.0` are downloaded as a release asset, older ones fall back to a git
    checkout of the matching tag in the Arduino CLI repository.
    """
    if isinstance(version, str):
        raw_input = version if raw_input is None else raw_input
        parsed = parse_version(version)
        if parsed is None:
            raise UnsupportedVersionError(version, f"invalid semver {version}")
        version = parsed
    normalized = _normalize(version)
    if can_download_protos(version):
        logger.debug("parsed semver is >=0.29.0", version=normalized)
        return ReleaseVersion(
            semantic_version=normalized,
            raw_input=(raw_input or normalized).strip(),
        )
    ref = SourceRef(owner=ARDUINO_OWNER, repo=ARDUINO_REPO, commit=normalized)
    logger.debug("parsed semver is <0.29.0, falling back to GitHub ref", version=normalized)
    return ref


def resolve_artifact_location(raw_version: str) -> ArtifactLocation:
    """Compute the download URL and file name of the proto archive of a release."""
    version = parse_version(raw_version)
    if version is None:
        logger.debug("attempted to download with invalid semver", version=raw_version)
        raise UnsupportedVersionError(raw_version, f"invalid semver {raw_version}")
    normalized = _normalize(version)
    if not can_download_protos(version):
        logger.debug("attempted to download the asset file", version=normalized)
        raise UnsupportedVersionError(
            normalized, f"semver must be '>={PROTOS_PUBLISHED_SINCE}' it was {normalized}"
        )

    filename = f"{ARDUINO_REPO}_{normalized}_proto.zip"
    tag = normalized
    if version >= RELEASE_TAG_PREFIXED_SINCE and _has_v_prefix(raw_version):
        tag = f"v{normalized}"
    download_url = (
        f"https://github.com/{ARDUINO_OWNER}/{ARDUINO_REPO}/releases/download/{tag}/{filename}"
    )
    return ArtifactLocation(download_url=download_url, filename=filename)
