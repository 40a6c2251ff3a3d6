"""
Template document loading.

Template storage is a flat directory of YAML or JSON documents, one
template per file. A document without an ``id`` takes its file stem.
"""

import json
from pathlib import Path
from typing import List, Union

import yaml

from fieldline_engine.template.schema import TemplateDefinition

TEMPLATE_SUFFIXES = (".yaml", ".yml", ".json")

BUILTIN_TEMPLATE_DIR = Path(__file__).parent / "templates"


def load_template(path: Union[str, Path]) -> TemplateDefinition:
    """
    Load one template document.

    Args:
        path: .yaml, .yml or .json file

    Returns:
        Parsed TemplateDefinition (not validated, see validate_template)

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the suffix is unsupported or the document is malformed
    """
    path = Path(path)
    if path.suffix.lower() not in TEMPLATE_SUFFIXES:
        raise ValueError(
            f"Unsupported template file {path.name}. "
            f"Expected one of: {', '.join(TEMPLATE_SUFFIXES)}"
        )
    if not path.is_file():
        raise FileNotFoundError(f"Template file not found: {path}")

    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {path}: {e}") from e
        else:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

    try:
        return TemplateDefinition.from_dict(data, template_id=path.stem)
    except ValueError as e:
        raise ValueError(f"{path.name}: {e}") from e


def template_paths(directory: Union[str, Path]) -> List[Path]:
    """Template documents in a directory, sorted by name (not recursive)."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Template directory not found: {directory}")
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in TEMPLATE_SUFFIXES
    )


def builtin_template_paths() -> List[Path]:
    """Templates shipped with the package."""
    return template_paths(BUILTIN_TEMPLATE_DIR)
