"""Project version, read from pyproject.toml in a source checkout."""

from importlib.metadata import PackageNotFoundError, version as installed_version

import tomli
from pydantic import validate_call

from statcards import BASE_PATH
from statcards.configs.logging_init import logger

PYPROJECT_PATH = BASE_PATH.parent / "pyproject.toml"


@validate_call(validate_return=True)
def get_version() -> str:
    """
    Version declared in ``[project].version`` of pyproject.toml.

    Outside a source checkout the installed distribution's metadata is used;
    ``"0.0.0"`` when neither is available.
    """
    if PYPROJECT_PATH.is_file():
        with PYPROJECT_PATH.open("rb") as f:
            project_version = tomli.load(f)["project"]["version"]
        logger.debug(f"statcards version {project_version} (pyproject.toml)")
        return project_version

    try:
        return installed_version("statcards")
    except PackageNotFoundError:
        logger.warning("statcards is neither checked out nor installed; version unknown")
        return "0.0.0"
