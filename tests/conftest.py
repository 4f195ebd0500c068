import shlex
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from ardunno_cli_gen.config import AppConfig, AppEnv, GeneratorConfig, LogLevel
from ardunno_cli_gen.logging import configure_logging

# Stands in for protoc + protoc-gen-ts_proto: writes one `.ts` file per input proto and
# records its arguments next to itself.
FAKE_PROTOC = """\
import json
import sys
from pathlib import Path

args = sys.argv[1:]
Path(__file__).with_suffix(".json").write_text(json.dumps(args))
flags = dict(arg.split("=", 1) for arg in args if arg.startswith("--"))
protos = [arg for arg in args if not arg.startswith("--")]
if not protos:
    print("Missing input file.", file=sys.stderr)
    sys.exit(1)
src = Path(flags["--proto_path"])
out = Path(flags["--ts_proto_out"])
for proto in protos:
    if not (src / proto).is_file():
        print(f"{proto}: File not found.", file=sys.stderr)
        sys.exit(1)
    target = out / (proto[: -len(".proto")] + ".ts")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(f"// generated from {proto}\\n")
"""

EMPTY_PROTO = 'syntax = "proto3";\n\npackage google.protobuf;\n\nmessage Empty {}\n'


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    configure_logging(AppConfig(app_env=AppEnv.TEST, log_level=LogLevel.WARN))


@pytest.fixture(autouse=True)
def _no_proxy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("https_proxy", raising=False)


@pytest.fixture
def fake_protoc(tmp_path_factory: pytest.TempPathFactory) -> Path:
    script = tmp_path_factory.mktemp("bin") / "fake_protoc.py"
    script.write_text(FAKE_PROTOC)
    return script


@pytest.fixture
def generator_config(fake_protoc: Path) -> GeneratorConfig:
    plugin = fake_protoc.parent / "protoc-gen-ts_proto"
    plugin.write_text("")
    return GeneratorConfig(
        protoc=shlex.join([sys.executable, str(fake_protoc)]),
        ts_proto_plugin=str(plugin),
    )


@pytest.fixture
def proto_dir(tmp_path: Path) -> Path:
    """A folder with a couple of proto files, like a protoc include folder."""
    root = tmp_path / "include"
    (root / "google" / "protobuf").mkdir(parents=True)
    (root / "google" / "protobuf" / "empty.proto").write_text(EMPTY_PROTO)
    (root / "google" / "protobuf" / "any.proto").write_text(EMPTY_PROTO)
    return root


@pytest.fixture
def created_temp_dirs(monkeypatch: pytest.MonkeyPatch) -> Iterator[list[Path]]:
    """Record every temporary folder the acquirer creates."""
    import tempfile

    created: list[Path] = []
    original = tempfile.mkdtemp

    def _mkdtemp(*args: object, **kwargs: object) -> str:
        path = original(*args, **kwargs)  # pyright: ignore[reportArgumentType]
        created.append(Path(path))
        return path

    monkeypatch.setattr("ardunno_cli_gen.acquire.tempfile.mkdtemp", _mkdtemp)
    yield created
