"""Command line entry point, argv normalization, and logging setup."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Optional

import scriptconfig as scfg
from loguru import logger

from . import __version__
from .errors import HyperIPError
from .hyperv import query_vm_ip
from .params import Params, require_defaults, resolve_params
from .settings import load_settings, save_settings, settings_path
from .target import ensure_target, update_json_field

log = logger

QueryFunc = Callable[[str], str]


class HyperIPCLI(scfg.DataConfig):
    """Write the IP address of a Hyper-V VM into a field of a JSON file."""

    out = scfg.Value(
        None, type=str, short_alias=['o'], help='JSON file to update with the VM IP.'
    )
    field = scfg.Value(
        None, type=str, short_alias=['f'], help='JSON field name for the IP address.'
    )
    vm = scfg.Value(
        None, type=str, short_alias=['v'], help='Name of the Hyper-V VM to query.'
    )
    set_default = scfg.Value(
        False,
        isflag=True,
        short_alias=['s'],
        help='Store --out, --field and --vm as defaults in ~/.hyperip/settings.json.',
    )
    powershell = scfg.Value(
        None,
        type=str,
        help='PowerShell executable to use (default: powershell, then pwsh).',
    )
    verbose = scfg.Value(
        0, isflag='counter', help='Increase verbosity (--verbose, --verbose --verbose).'
    )

    @classmethod
    def main(
        cls,
        argv=True,
        *,
        settings_fpath: Optional[Path] = None,
        query: Optional[QueryFunc] = None,
        **kwargs,
    ):
        args = cls.cli(argv=argv, data=kwargs)
        fpath = settings_fpath if settings_fpath is not None else settings_path()
        if args.set_default:
            saved = set_defaults(args.out, args.field, args.vm, fpath)
            print(f'Defaults saved to {saved}')
            return 0
        if query is None:
            exe = args.powershell or None

            def query(vm_name: str) -> str:
                return query_vm_ip(vm_name, executable=exe)

        params, ip = run(args.out, args.field, args.vm, fpath, query=query)
        print(f'{params.field} = {ip} ({params.out_path})')
        return 0


def set_defaults(
    out: str | None, field: str | None, vm: str | None, fpath: Path
) -> Path:
    settings = require_defaults(out, field, vm)
    return save_settings(settings, fpath)


def run(
    out: str | None,
    field: str | None,
    vm: str | None,
    fpath: Path,
    *,
    query: QueryFunc,
) -> tuple[Params, str]:
    """Resolve parameters, query the VM, and write its IP into the target."""
    params = resolve_params(out, field, vm, load_settings(fpath))
    target = params.out_path
    log.debug('Resolved out={} field={} vm={}', target, params.field, params.vm)
    # The target must exist before the VM is queried.
    ensure_target(target)
    ip = query(params.vm)
    update_json_field(target, params.field, ip)
    return params, ip


def main(argv: list[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    argv = _normalize_argv(argv)
    if '--version' in argv or '-V' in argv:
        print(f'hyperip {__version__}')
        sys.exit(0)
    _setup_logging(_count_verbose(argv))

    try:
        # An empty list must not fall back to sys.argv.
        rc = HyperIPCLI.main(argv=argv or False)
    except HyperIPError as ex:
        print(f'ERROR: {ex}', file=sys.stderr)
        log.error('hyperip failed: {}', ex)
        sys.exit(ex.exit_code)
    except Exception as ex:
        print(f'ERROR: {ex}', file=sys.stderr)
        log.error('Unhandled hyperip error: {}', ex)
        sys.exit(1)

    if any(flag in argv for flag in ('-h', '--help')):
        sys.exit(0)
    if isinstance(rc, int):
        sys.exit(rc)
    sys.exit(0)


def _setup_logging(verbosity: int) -> None:
    logger.remove()
    level = 'WARNING'
    if verbosity == 1:
        level = 'INFO'
    elif verbosity >= 2:
        level = 'DEBUG'
    colorize = sys.stderr.isatty() and os.getenv('NO_COLOR') is None
    logger.add(
        sys.stderr,
        level=level,
        colorize=colorize,
        format='<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>',
    )
    log.debug('Logging configured at {} (verbosity={})', level, verbosity)


def _normalize_argv(argv: list[str]) -> list[str]:
    """Accept hyphenated flag spellings for underscore option names."""
    out = []
    for item in argv:
        if item == '--set-default':
            item = '--set_default'
        out.append(item)
    return out


def _count_verbose(argv: list[str]) -> int:
    return sum(1 for item in argv if item == '--verbose')
