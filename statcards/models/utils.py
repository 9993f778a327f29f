from pathlib import Path

import yaml
from pydantic import BaseModel, validate_call

YAML_SUFFIXES = (".yaml", ".yml")


@validate_call
def convert_model_to_dict(model: BaseModel, exclude_none: bool = False) -> dict:
    """
    JSON-ready dict of a model, keyed by field aliases (camelCase for stored models).

    Args:
        model: The Pydantic model to convert
        exclude_none: If True, fields with None values are left out
    """
    return model.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)


@validate_call
def get_config(filename: str) -> dict:
    """
    Load a YAML config file as a dict.

    Raises:
        ValueError: If the path is not an existing ``.yaml``/``.yml`` file or
            does not hold a mapping
    """
    path = Path(filename)
    if path.suffix not in YAML_SUFFIXES:
        raise ValueError("Invalid config file. Must be a YAML file.")
    if not path.exists():
        raise ValueError(f"The file '{filename}' does not exist.")
    if not path.is_file():
        raise ValueError(f"'{filename}' is not a file.")

    with path.open() as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError("Invalid config file: expected a dictionary.")
    return data
