from pathlib import Path

from ardunno_cli_gen.logging import get_logger

logger = get_logger(__name__)


def is_accessible_directory(maybe_path: str | Path) -> bool:
    """Whether `maybe_path` (relative to the working directory or absolute) is a folder."""
    logger.debug("accessible", path=str(maybe_path))
    try:
        path = Path(maybe_path)
        if not path.is_absolute():
            path = Path.cwd() / path
        is_dir = path.is_dir()
    except (OSError, ValueError):
        logger.debug("stat failed", path=str(maybe_path))
        return False
    logger.debug("is dir", path=str(path), is_dir=is_dir)
    return is_dir


def find_proto_files(directory: str | Path) -> list[str] | None:
    """Recursively collect the `.proto` files under `directory`.

    Paths are POSIX-style and relative to `directory`. Returns None when `directory` is not an
    accessible folder, and an empty list when it is one without any proto file.
    """
    logger.debug("glob", path=str(directory))
    if not is_accessible_directory(directory):
        logger.debug("glob invalid path", path=str(directory))
        return None
    root = Path(directory)
    return sorted(
        path.relative_to(root).as_posix() for path in root.rglob("*.proto") if path.is_file()
    )
