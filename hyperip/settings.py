"""Per-user store for the default out/field/vm triple."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path

import ubelt as ub
from loguru import logger

from .errors import InvalidSettingsError, IOFailureError

log = logger

SETTINGS_DIRNAME = '.hyperip'
SETTINGS_FNAME = 'settings.json'


@dataclass
class Settings:
    out: str
    field: str
    vm: str


def settings_path(home: str | Path | None = None) -> Path:
    """Location of the settings file, ``~/.hyperip/settings.json`` by default."""
    base = ub.Path(home) if home is not None else ub.Path.home()
    return Path(base / SETTINGS_DIRNAME / SETTINGS_FNAME)


def _settings_from_dict(raw: object, fpath: Path) -> Settings:
    if not isinstance(raw, dict):
        raise InvalidSettingsError(
            f'Default config is invalid: {fpath} must contain a JSON object.'
        )
    values: dict[str, str] = {}
    for key in ('out', 'field', 'vm'):
        val = raw.get(key, None)
        if not isinstance(val, str):
            raise InvalidSettingsError(
                f'Default config is invalid: {fpath} needs a string "{key}".'
            )
        values[key] = val
    return Settings(**values)


def load_settings(path: Path) -> Settings | None:
    """Return stored defaults, or None when no settings file exists."""
    fpath = Path(path)
    if not fpath.exists():
        log.debug('No stored defaults at {}', fpath)
        return None
    try:
        raw_bytes = fpath.read_bytes()
    except OSError as ex:
        raise IOFailureError(f'Failed to read default config {fpath}: {ex}') from ex
    try:
        raw = json.loads(raw_bytes)
    except ValueError as ex:
        raise InvalidSettingsError(
            f'Default config is invalid JSON: {fpath}: {ex}'
        ) from ex
    settings = _settings_from_dict(raw, fpath)
    log.debug('Loaded defaults from {}: {}', fpath, settings)
    return settings


def save_settings(settings: Settings, path: Path) -> Path:
    fpath = Path(path)
    try:
        ub.Path(fpath.parent).ensuredir()
        text = json.dumps(asdict(settings), indent=2, ensure_ascii=False)
        fpath.write_text(text, encoding='utf-8')
    except OSError as ex:
        raise IOFailureError(
            f'Failed to write default config file {fpath}: {ex}'
        ) from ex
    log.info('Saved defaults to {}', fpath)
    return fpath
