"""YAML document reading and profile filtering.

A configuration file may hold several YAML documents separated by ``---``.
Each document can restrict itself to some profiles through a reserved
``profiles`` key, similar to Spring profiles:

    testUrl: http://www.default.com
    ---
    profiles: dev1,dev2
    testUrl: http://www.dev.com
    ---
    profiles: "!prod"
    debug: true
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from .errors import ConfigFileNotFoundError, ConfigReadError
from .utils import deep_merge, parse_properties_to_objects

logger = logging.getLogger(__name__)

PROFILES_KEY = "profiles"


def should_use_document(document: Any, active_profiles: Optional[Sequence[str]] = None) -> bool:
    """Decide whether a YAML document applies to the active profiles.

    Rules:
        - missing document: not used
        - no ``profiles`` key: used for every profile
        - ``!name`` tokens exclude the document as soon as ``name`` is active,
          even when an earlier token already matched
        - plain tokens include the document when active
        - a YAML list of profiles is read like the comma-separated form
        - a profile-restricted document is never used without active profiles

    Args:
        document: Parsed YAML document.
        active_profiles: Currently active profile names.

    Returns:
        True if the document should be merged into the configuration.
    """
    if document is None or not isinstance(document, dict):
        return False

    document_profiles = document.get(PROFILES_KEY)
    if not document_profiles:
        return True
    if active_profiles is None:
        return False

    if isinstance(document_profiles, (list, tuple)):
        document_profiles = ",".join(str(p) for p in document_profiles)

    use_document = False
    for token in str(document_profiles).split(","):
        token = token.strip()
        if not token:
            continue
        if token.startswith("!"):
            if token[1:] in active_profiles:
                return False
        elif token in active_profiles:
            use_document = True

    return use_document


def _load_all(path: Path) -> list[Any]:
    if not path.is_file():
        raise ConfigFileNotFoundError(path)

    try:
        # PyYAML detects the encoding of a binary stream
        with open(path, "rb") as f:
            return list(yaml.safe_load_all(f))
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigReadError(path, str(e)) from e
    except OSError as e:
        raise ConfigReadError(path, e.strerror or str(e)) from e


def read_yaml(path: str | Path, active_profiles: Optional[Sequence[str]] = None) -> dict[str, Any]:
    """Read a (multi-document) YAML file, merging the documents that apply.

    Documents are merged in file order, so later matching documents override
    earlier ones.

    Raises:
        ConfigFileNotFoundError: If the file does not exist.
        ConfigReadError: If the file is not valid YAML.
    """
    path = Path(path)
    logger.debug(f"Loading config file from: {path}")

    merged: dict[str, Any] = {}
    for document in _load_all(path):
        if should_use_document(document, active_profiles):
            merged = deep_merge(merged, document)
    return merged


def read_yaml_unfiltered(path: str | Path) -> dict[str, Any]:
    """Read every mapping document in a YAML file, ignoring ``profiles`` keys."""
    path = Path(path)
    logger.debug(f"Loading profile-specific config file from: {path}")

    merged: dict[str, Any] = {}
    for document in _load_all(path):
        if isinstance(document, dict):
            merged = deep_merge(merged, document)
    return merged


def read_yaml_as_document(
    path: str | Path,
    active_profiles: Optional[Sequence[str]] = None,
) -> dict[str, Any]:
    """Read a YAML file and expand its dot-separated keys into nested dicts."""
    return parse_properties_to_objects(read_yaml(path, active_profiles))


async def aread_yaml_as_document(
    path: str | Path,
    active_profiles: Optional[Sequence[str]] = None,
) -> dict[str, Any]:
    """Async variant of :func:`read_yaml_as_document`; file I/O runs in a thread."""
    return await asyncio.to_thread(read_yaml_as_document, path, active_profiles)


async def aread_profile_document(path: str | Path) -> dict[str, Any]:
    """Read and expand a profile-specific file without profile filtering."""
    document = await asyncio.to_thread(read_yaml_unfiltered, path)
    return parse_properties_to_objects(document)
