import asyncio

import typer
from dotenv import load_dotenv

from ardunno_cli_gen.config import PKG_VERSION, AppConfig
from ardunno_cli_gen.errors import GenerateError
from ardunno_cli_gen.generate import generate as run_generate
from ardunno_cli_gen.logging import configure_logging, get_logger
from ardunno_cli_gen.models import GenerateOptions

DESCRIPTION = "Generates TS/JS API for the Arduino CLI"

SRC_HELP = (
    "The source of the proto files to generate from. The input source can be a path to the "
    "folder which contains the proto files. The source can be a valid semver. Then, the proto "
    "files will be downloaded from the Arduino CLI's GitHub release. It can be a GitHub commit "
    "in the following format `(?<owner>)/(?<repo>)(#(?<commit>))?`. Then, the proto files will "
    "be cloned and checked out from GitHub."
)

app = typer.Typer(name="ardunno-cli", help=DESCRIPTION, add_completion=False, no_args_is_help=True)

logger = get_logger("cli")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(PKG_VERSION)
        raise typer.Exit()


@app.callback()
def root(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Generates TS/JS API for the Arduino CLI."""


@app.command(help=DESCRIPTION)
def generate(
    src: str = typer.Argument(..., help=SRC_HELP, show_default=False),
    out: str = typer.Option(
        ...,
        "--out",
        "-o",
        help="Specify an output folder for all emitted files.",
        show_default=False,
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Override previously emitted files in the output location.",
    ),
) -> None:
    options = GenerateOptions(src=src, out=out, force=force)
    try:
        asyncio.run(run_generate(options))
    except GenerateError as e:
        logger.debug("generate failed", error=str(e))
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e


def main() -> None:
    """Entry point of the `ardunno-cli` command."""
    load_dotenv()
    configure_logging(AppConfig())
    app()


if __name__ == "__main__":
    main()
