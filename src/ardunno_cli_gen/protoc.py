"""Invoke `protoc` with the ts-proto plugin."""

import shlex
import shutil
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ardunno_cli_gen.config import GeneratorConfig
from ardunno_cli_gen.errors import GeneratorError
from ardunno_cli_gen.logging import get_logger
from ardunno_cli_gen.process import run_command

logger = get_logger(__name__)

type OptionValue = str | bool | Sequence[str | bool]


@dataclass(frozen=True)
class Plugin:
    name: str
    executable: str
    options: Mapping[str, OptionValue] = field(default_factory=dict)


TS_PROTO_NAME = "ts_proto"
TS_PROTO_EXECUTABLE = "protoc-gen-ts_proto"
TS_PROTO_OPTIONS: Mapping[str, OptionValue] = {
    "outputServices": ["nice-grpc", "generic-definitions"],
    "oneof": "unions",
    "useExactTypes": False,
    "paths": "source_relative",
    "esModuleInterop": True,
}


def _format_value(value: str | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def format_options(options: Mapping[str, OptionValue]) -> str:
    """Serialize plugin options as `key=value` pairs joined by commas.

    List values repeat the key once per element.
    """
    pairs: list[str] = []
    for key, value in options.items():
        values = value if isinstance(value, (list, tuple)) else [value]
        pairs.extend(f"{key}={_format_value(v)}" for v in values)
    return ",".join(pairs)


def create_args(plugin: Plugin, src: str | Path, out: str | Path) -> list[str]:
    return [
        f"--plugin={plugin.executable}",
        f"--proto_path={src}",
        f"--{plugin.name}_opt={format_options(plugin.options)}",
        f"--{plugin.name}_out={out}",
    ]


def resolve_ts_proto_plugin(config: GeneratorConfig) -> Plugin:
    """Locate `protoc-gen-ts_proto`: configured path, then `PATH`, then `node_modules/.bin`."""
    executable = config.ts_proto_plugin or shutil.which(TS_PROTO_EXECUTABLE)
    if executable is None:
        local = Path.cwd() / "node_modules" / ".bin" / TS_PROTO_EXECUTABLE
        if local.is_file():
            executable = str(local)
    if executable is None:
        raise GeneratorError(
            f"Could not find {TS_PROTO_EXECUTABLE}. Install ts-proto or set ARDUNNO_TS_PROTO_PLUGIN"
        )
    return Plugin(name=TS_PROTO_NAME, executable=executable, options=TS_PROTO_OPTIONS)


def protoc_command(config: GeneratorConfig) -> list[str]:
    """The `protoc` command line, split like a shell would. Defaults to the `grpcio-tools` one."""
    if config.protoc:
        return shlex.split(config.protoc)
    return [sys.executable, "-m", "grpc_tools.protoc"]


async def run_protoc(
    src: str | Path,
    protos: Sequence[str],
    out: str | Path,
    config: GeneratorConfig | None = None,
) -> None:
    """Generate the ts-proto API of `protos` (relative to `src`) into `out`."""
    config = config or GeneratorConfig()
    plugin = resolve_ts_proto_plugin(config)
    command = protoc_command(config)
    args = [*create_args(plugin, src, out), *protos]
    logger.debug("executing protoc", command=command, args=args)
    result = await run_command(*command, *args)
    if not result.ok:
        raise GeneratorError(result.diagnostic or f"protoc exited with code {result.returncode}")
    logger.info("Generated", out=str(out), protos=len(protos))
