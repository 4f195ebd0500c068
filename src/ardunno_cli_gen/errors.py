"""Fatal errors of a generation run.

Every error aborts the run. The CLI prints the message and exits non-zero.
"""

from collections.abc import Mapping

RELEASES_URL = "https://github.com/arduino/arduino-cli/releases"


def _with_reason(message: str, reason: str | None) -> str:
    if reason:
        return f"{message}\n\n{reason}"
    return message


class GenerateError(Exception):
    """Base class for all errors surfaced to the user."""


class InvalidLocatorError(GenerateError):
    def __init__(self, src: str):
        self.src = src
        super().__init__(f"Invalid <src>: {src}")


class OutputExistsError(GenerateError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} already exists. Use '--force' to override output")


class OutputCreationError(GenerateError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to create '--out' {path}: {reason}")


class DiscoveryError(GenerateError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Failed to find proto files in {path}")


class UnsupportedVersionError(GenerateError):
    def __init__(self, version: str, reason: str):
        self.version = version
        super().__init__(reason)


class ReleaseNotFoundError(GenerateError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(
            f"Could not find release for version '{version}'. "
            f"Check the release page of the Arduino CLI for available versions: {RELEASES_URL}"
        )


class MissingRedirectLocationError(GenerateError):
    def __init__(self, headers: Mapping[str, str]):
        self.headers = dict(headers)
        super().__init__(f"no location header was found: {self.headers}")


class UnexpectedStatusCodeError(GenerateError):
    def __init__(self, actual: int, expected: int):
        self.actual = actual
        self.expected = expected
        super().__init__(f"unexpected status code. was {actual}, expected {expected}")


class DownloadError(GenerateError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(_with_reason(f"Could not download from {url}", reason))


class CloneError(GenerateError):
    def __init__(self, url: str, reason: str | None = None):
        self.url = url
        self.reason = reason
        super().__init__(_with_reason(f"Could not clone GitHub repository from {url}", reason))


class FetchError(GenerateError):
    def __init__(self, url: str, reason: str | None = None):
        self.url = url
        self.reason = reason
        super().__init__(_with_reason(f"Could not fetch from {url}", reason))


class CheckoutError(GenerateError):
    def __init__(self, commit: str, owner: str, repo: str, reason: str | None = None):
        self.commit = commit
        self.owner = owner
        self.repo = repo
        self.reason = reason
        super().__init__(
            _with_reason(f"Could not checkout commit '{commit}' in {owner}/{repo}", reason)
        )


class GeneratorError(GenerateError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to generate: {reason}")
