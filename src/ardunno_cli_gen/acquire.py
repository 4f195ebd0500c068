"""Materialize a local folder of proto files from a release asset or a git checkout."""

import asyncio
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Any

import httpx

from ardunno_cli_gen.config import ProxyConfig
from ardunno_cli_gen.errors import (
    CheckoutError,
    CloneError,
    DownloadError,
    FetchError,
    MissingRedirectLocationError,
    ReleaseNotFoundError,
    UnexpectedStatusCodeError,
)
from ardunno_cli_gen.git import GitClient
from ardunno_cli_gen.logging import get_logger
from ardunno_cli_gen.models import ARDUINO_REPO, ReleaseVersion, SourceRef
from ardunno_cli_gen.versions import resolve_artifact_location

logger = get_logger(__name__)

# Relative to the checkout root, or to the extracted archive.
PROTO_SUBDIRECTORY = "rpc"

# Later releases dropped `google/rpc/status.proto` from the proto archive. The `google/`
# folder of 1.0.4 is copied over every other release.
GOOGLE_PROTOS_RELEASE = ReleaseVersion(semantic_version="1.0.4", raw_input="v1.0.4")

_CHUNK_SIZE = 64 * 1024


def _ignore_missing(_function: Any, _path: str, exc: BaseException) -> None:
    if isinstance(exc, FileNotFoundError):
        return
    raise exc


class ResourceHandle:
    """A temporary folder holding proto files, owned by whoever acquired it.

    `dispose()` removes the folder. It can be called any number of times and never raises.
    """

    def __init__(self, root: Path, proto_directory: Path):
        self.root = root
        self.proto_directory = proto_directory

    def dispose(self) -> None:
        logger.debug("dispose", path=str(self.root))
        try:
            shutil.rmtree(self.root, onexc=_ignore_missing)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to remove temporary folder", path=str(self.root), error=str(e))

    def __repr__(self) -> str:
        return f"ResourceHandle(proto_directory={str(self.proto_directory)!r})"


def _new_handle(prefix: str) -> ResourceHandle:
    root = Path(tempfile.mkdtemp(prefix=prefix))
    return ResourceHandle(root, root / PROTO_SUBDIRECTORY)


def _extract(archive: Path, destination: Path) -> None:
    with zipfile.ZipFile(archive) as zip_file:
        zip_file.extractall(destination)


class ResourceAcquirer:
    """Obtains proto files for non-local locators.

    Args:
        git: Client used for clone, fetch and checkout. Defaults to the `git` executable.
        transport: httpx transport for release downloads. When set, the `https_proxy`
            variable is not consulted.
    """

    def __init__(
        self,
        git: GitClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.git = git or GitClient()
        self.transport = transport

    async def acquire(self, locator: ReleaseVersion | SourceRef) -> ResourceHandle:
        if isinstance(locator, ReleaseVersion):
            return await self.acquire_from_release(locator)
        return await self.acquire_from_source(locator)

    async def acquire_from_source(self, ref: SourceRef) -> ResourceHandle:
        """Clone the repository, fetch every ref and tag, and check out `ref.commit`."""
        handle = _new_handle(ref.repo)
        url = ref.url
        logger.debug("clone", url=url, commit=ref.ref, path=str(handle.root))
        try:
            result = await self.git.clone(url, handle.root)
            if not result.ok:
                raise CloneError(url, result.diagnostic)
            logger.debug("cloned", url=url, path=str(handle.root))

            result = await self.git.fetch_all(handle.root)
            if not result.ok:
                raise FetchError(url, result.diagnostic)
            logger.debug("fetched all", url=url)

            result = await self.git.checkout(handle.root, ref.ref)
            if not result.ok:
                raise CheckoutError(ref.ref, ref.owner, ref.repo, result.diagnostic)
            logger.debug("checked out", commit=ref.ref, url=url)
        except BaseException:
            handle.dispose()
            raise
        return handle

    async def acquire_from_release(self, release: ReleaseVersion) -> ResourceHandle:
        """Download and extract the proto archive of an Arduino CLI release."""
        location = resolve_artifact_location(release.raw_input)
        handle = _new_handle(ARDUINO_REPO)
        try:
            archive = handle.root / location.filename
            await self._download(location.download_url, archive, release.semantic_version)
            try:
                await asyncio.to_thread(_extract, archive, handle.proto_directory)
            except zipfile.BadZipFile as e:
                raise DownloadError(location.download_url, f"Invalid archive: {e}") from e
            logger.debug("extracted", archive=str(archive), path=str(handle.proto_directory))
            if release.semantic_version != GOOGLE_PROTOS_RELEASE.semantic_version:
                await self._merge_google_protos(handle)
        except BaseException:
            handle.dispose()
            raise
        return handle

    async def _merge_google_protos(self, handle: ResourceHandle) -> None:
        patch = await self.acquire_from_release(GOOGLE_PROTOS_RELEASE)
        try:
            source = patch.proto_directory / "google"
            if not source.is_dir():
                logger.warning("No google protos to merge", path=str(source))
                return
            logger.debug("merge google protos", source=str(source))
            await asyncio.to_thread(
                shutil.copytree, source, handle.proto_directory / "google", dirs_exist_ok=True
            )
        finally:
            patch.dispose()

    def _client_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"follow_redirects": False, "trust_env": False}
        if self.transport is not None:
            options["transport"] = self.transport
            return options
        proxy = ProxyConfig().https_proxy
        if proxy:
            logger.debug("using proxy", proxy=proxy)
            options["proxy"] = proxy
        return options

    def _create_client(self, url: str) -> httpx.AsyncClient:
        options = self._client_options()
        try:
            return httpx.AsyncClient(**options)
        except (ValueError, httpx.InvalidURL) as e:
            raise DownloadError(url, f"Could not resolve proxy: {options.get('proxy')}") from e

    async def _download(self, url: str, archive: Path, version: str) -> None:
        logger.debug("accessing protos from public endpoint", url=url)
        async with self._create_client(url) as client:
            try:
                # the asset URL redirects to the storage that serves the file
                response = await client.get(url)
                logger.debug("response", url=url, status_code=response.status_code)
                if response.status_code == 404:
                    raise ReleaseNotFoundError(version)
                if response.status_code != 302:
                    raise UnexpectedStatusCodeError(response.status_code, 302)
                location = response.headers.get("location")
                if not location:
                    raise MissingRedirectLocationError(response.headers)

                asset_url = response.url.join(location)
                logger.debug("GET", url=str(asset_url))
                async with client.stream("GET", asset_url) as asset:
                    if asset.status_code != 200:
                        raise UnexpectedStatusCodeError(asset.status_code, 200)
                    with archive.open("wb") as file:
                        async for chunk in asset.aiter_bytes(_CHUNK_SIZE):
                            file.write(chunk)
            except httpx.HTTPError as e:
                logger.debug("download failed", url=url, error=str(e))
                raise DownloadError(url, str(e) or type(e).__name__) from e
        logger.debug("downloaded", url=url, path=str(archive))
