"""Resolve the effective out/field/vm values from CLI flags and defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .errors import MissingParameterError
from .settings import Settings

log = logger


@dataclass(frozen=True)
class Params:
    out: str
    field: str
    vm: str

    @property
    def out_path(self) -> Path:
        return expand_path(self.out)


def _given(value: str | None) -> str | None:
    # An explicit empty string is a value, only None means "not passed".
    if value is None:
        return None
    return str(value)


def expand_path(path: str) -> Path:
    """Expand ``~`` and environment variables, then make the path absolute."""
    return Path(os.path.expandvars(os.path.expanduser(path))).absolute()


def require_defaults(
    out: str | None, field: str | None, vm: str | None
) -> Settings:
    """Validate the values passed alongside ``--set-default``.

    Existing settings are never consulted here: every value must come from
    the command line.
    """
    values = {'out': _given(out), 'field': _given(field), 'vm': _given(vm)}
    for key, val in values.items():
        if val is None:
            raise MissingParameterError(
                f'--{key} is required when using --set-default'
            )
    return Settings(**values)


_MISSING_MESSAGES = {
    'out': 'Output file must be specified or default set',
    'field': 'Field must be specified or default set',
    'vm': 'VM name must be specified or default set',
}


def resolve_params(
    out: str | None,
    field: str | None,
    vm: str | None,
    settings: Settings | None,
) -> Params:
    """Pick each value from the CLI first, falling back to stored defaults."""
    given = {'out': _given(out), 'field': _given(field), 'vm': _given(vm)}
    resolved: dict[str, str] = {}
    for key, val in given.items():
        if val is None and settings is not None:
            val = getattr(settings, key)
            log.debug('Using stored default {}={}', key, val)
        if val is None:
            raise MissingParameterError(_MISSING_MESSAGES[key])
        resolved[key] = val
    return Params(**resolved)
