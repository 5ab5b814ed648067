"""Metadata block parsing for template files.

A template may start with a YAML block delimited by ``---`` lines. Anything
that does not parse into a flat mapping is ignored and the whole text is
treated as body.
"""

from __future__ import annotations

import logging

import yaml

logger = logging.getLogger(__name__)

DELIMITER = "---"


def parse(content: str) -> tuple[dict, str]:
    """Split ``content`` into ``(metadata, body)``.

    Returns an empty mapping and the unchanged text when there is no
    metadata block or it cannot be used.
    """
    if not content.startswith(DELIMITER):
        return {}, content

    block, sep, body = content[len(DELIMITER):].partition(DELIMITER)
    if not sep:
        return {}, content

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.debug("Ignoring unparseable metadata block: %s", e)
        return {}, content

    if not _is_flat_mapping(data):
        logger.debug("Ignoring metadata block that is not a flat mapping")
        return {}, content

    return data, body.strip()


def get_list(metadata: dict, key: str) -> tuple[str, ...]:
    """Read a list field given either as a YAML list or a comma-separated string."""
    value = metadata.get(key)
    if value is None:
        return ()
    if isinstance(value, list):
        items = [str(v).strip() for v in value]
    else:
        items = [part.strip() for part in str(value).split(",")]
    return tuple(i for i in items if i)


def get_description(metadata: dict, body: str) -> str:
    """Description from metadata, else the first non-empty, non-heading body line."""
    desc = metadata.get("description")
    if isinstance(desc, str) and desc.strip():
        return desc.strip()

    for line in body.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            return line
    return ""


def _is_flat_mapping(data: object) -> bool:
    if not isinstance(data, dict):
        return False
    for value in data.values():
        if isinstance(value, dict):
            return False
        if isinstance(value, list) and any(isinstance(v, (dict, list)) for v in value):
            return False
    return True
