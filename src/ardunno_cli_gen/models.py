from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Discriminator

ARDUINO_OWNER = "arduino"
ARDUINO_REPO = "arduino-cli"


class LocalPath(BaseModel):
    """A folder on the local filesystem."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["local"] = "local"
    path: str


class SourceRef(BaseModel):
    """A GitHub repository, optionally pinned to a commit, branch or tag."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["source"] = "source"
    owner: str = ARDUINO_OWNER
    repo: str = ARDUINO_REPO
    commit: str | None = None

    @property
    def ref(self) -> str:
        """What gets checked out. `HEAD` when no commit was given."""
        return self.commit or "HEAD"

    @property
    def url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}.git"


class ReleaseVersion(BaseModel):
    """An Arduino CLI release that publishes its proto files as an asset."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["release"] = "release"
    semantic_version: str
    raw_input: str


Locator = Annotated[
    LocalPath | SourceRef | ReleaseVersion,
    Discriminator("kind"),
]


class GenerateOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    src: str
    out: str
    force: bool = False
