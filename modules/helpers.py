"""Helper functions module for armforge.

This module provides utility functions for loading parameter documents
(YAML or JSON files), printing records and exporting them to disk.
"""

import json
from pathlib import Path
from typing import Any, Dict

import click
import yaml

from modules.exceptions import DocumentLoadError


def load_document(path: str, parameter: str = "") -> Any:
    """Load a YAML or JSON parameter document.

    JSON is a subset of YAML, so both go through yaml.safe_load.

    Args:
        path: Path to the document
        parameter: Parameter the document was given for (for error messages)

    Returns:
        Parsed document (usually a dict or a list of dicts)

    Raises:
        DocumentLoadError: If the file cannot be read, decoded or parsed, or is empty
    """
    context = {"path": path}
    if parameter:
        context["parameter"] = parameter
    try:
        with open(path, "r", encoding="utf-8") as file:
            document = yaml.safe_load(file)
    except OSError as e:
        raise DocumentLoadError(f"Cannot read document {path}: {e}", context=context) from e
    except UnicodeDecodeError as e:
        raise DocumentLoadError(f"Document {path} is not valid UTF-8: {e}", context=context) from e
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"Cannot parse document {path}: {e}", context=context) from e
    if document is None:
        raise DocumentLoadError(f"Document {path} is empty", context=context)
    return document


def load_document_list(path: str, parameter: str = "") -> list:
    """Load a document that holds a list; a single mapping becomes a one-item list."""
    document = load_document(path, parameter)
    return document if isinstance(document, list) else [document]


def record_to_json(record: Dict[str, Any]) -> str:
    return json.dumps(record, indent=4, sort_keys=True)


def print_record(record: Dict[str, Any], title: str) -> None:
    """Echo a record as indented JSON. The heading goes to stderr so stdout stays JSON."""
    click.echo(click.style(f"\n{title}:\n", fg="white", bold=True), err=True)
    click.echo(record_to_json(record))


def export_record(record: Dict[str, Any], outfile: str) -> str:
    """Write a record to ``outfile`` (".json" appended if missing).

    Returns:
        The path written
    """
    if not outfile.endswith(".json"):
        outfile += ".json"
    Path(outfile).write_text(record_to_json(record) + "\n", encoding="utf-8")
    click.echo(f"\nExporting record into file {outfile}", err=True)
    return outfile
