"""Generation driver: resolve `<src>` to proto files and run protoc against them."""

import asyncio
from pathlib import Path

from ardunno_cli_gen.acquire import ResourceAcquirer
from ardunno_cli_gen.config import GeneratorConfig
from ardunno_cli_gen.discovery import find_proto_files, is_accessible_directory
from ardunno_cli_gen.errors import (
    DiscoveryError,
    InvalidLocatorError,
    OutputCreationError,
    OutputExistsError,
)
from ardunno_cli_gen.locator import parse_locator
from ardunno_cli_gen.logging import get_logger
from ardunno_cli_gen.models import GenerateOptions, LocalPath
from ardunno_cli_gen.protoc import run_protoc

logger = get_logger(__name__)


async def generate(
    options: GenerateOptions,
    *,
    acquirer: ResourceAcquirer | None = None,
    config: GeneratorConfig | None = None,
) -> None:
    """Generate the API from `options.src` into `options.out`.

    A folder with proto files is used as is. Anything else is parsed as a release version or
    a GitHub reference and acquired into a temporary folder, which is removed before this
    returns or raises.

    Raises:
        GenerateError: On any failure. See `ardunno_cli_gen.errors`.
    """
    src, out = options.src, options.out
    logger.debug("generating with options", src=src, out=out, force=options.force)

    out_exists, protos = await asyncio.gather(
        asyncio.to_thread(is_accessible_directory, out),
        asyncio.to_thread(find_proto_files, src),
    )
    if out_exists and not options.force:
        raise OutputExistsError(out)
    if not out_exists:
        try:
            await asyncio.to_thread(Path(out).mkdir, parents=True, exist_ok=True)
        except OSError as e:
            logger.debug("failed to create --out", out=out, error=str(e))
            raise OutputCreationError(out, str(e)) from e

    # a local folder wins even if `src` also reads as a version or a GitHub reference
    if protos:
        logger.debug("found protos", src=src, protos=protos)
        await run_protoc(src, protos, out, config)
        return

    locator = parse_locator(src)
    if isinstance(locator, LocalPath):
        raise InvalidLocatorError(src)

    acquirer = acquirer or ResourceAcquirer()
    handle = await acquirer.acquire(locator)
    try:
        proto_path = handle.proto_directory
        acquired = await asyncio.to_thread(find_proto_files, proto_path)
        if not acquired:
            raise DiscoveryError(str(proto_path))
        logger.debug("found protos", src=str(proto_path), protos=acquired)
        await run_protoc(proto_path, acquired, out, config)
    finally:
        handle.dispose()
