"""Read-modify-write of a single top-level field in a JSON object file."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from .errors import InvalidTargetJSONError, IOFailureError

log = logger


def ensure_target(path: Path) -> bool:
    """Create ``path`` holding ``{}`` if it does not exist yet."""
    path = Path(path)
    if path.exists():
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text('{}', encoding='utf-8')
    except OSError as ex:
        raise IOFailureError(f'Failed to create target JSON {path}: {ex}') from ex
    log.info('Created empty target JSON {}', path)
    return True


def update_json_field(path: Path, key: str, value: object) -> dict:
    """Set ``key`` to ``value`` in the JSON object stored at ``path``.

    The whole file is parsed before anything is written, so a document that
    is not valid JSON or whose root is not an object is left untouched.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as ex:
        raise IOFailureError(f'Failed to read target JSON file {path}: {ex}') from ex
    try:
        # Undecodable bytes surface here as UnicodeDecodeError.
        data = json.loads(raw)
    except ValueError as ex:
        raise InvalidTargetJSONError(f'Target JSON is invalid: {path}: {ex}') from ex
    if not isinstance(data, dict):
        raise InvalidTargetJSONError(
            f'Target JSON must be an object at the root: {path} '
            f'(found {type(data).__name__})'
        )
    data[key] = value
    try:
        path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False), encoding='utf-8'
        )
    except OSError as ex:
        raise IOFailureError(f'Failed to write updated JSON {path}: {ex}') from ex
    log.debug('Set {}={!r} in {}', key, value, path)
    return data
