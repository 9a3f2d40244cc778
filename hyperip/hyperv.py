"""Query a Hyper-V VM's IP address through PowerShell."""

from __future__ import annotations

import shutil
from typing import Callable, Optional, Sequence

from loguru import logger

from .errors import ExternalCommandError
from .shell import CmdError, CmdResult, run_cmd

log = logger

POWERSHELL_CANDIDATES = ('powershell', 'pwsh')

Runner = Callable[..., CmdResult]


def ip_query_script(vm_name: str) -> str:
    # Names containing a single quote break the query; no escaping is done.
    return f"(Get-VM -Name '{vm_name}').NetworkAdapters.IPAddresses[0]"


def find_powershell() -> str:
    for cand in POWERSHELL_CANDIDATES:
        found = shutil.which(cand)
        if found:
            return found
    raise ExternalCommandError(
        'PowerShell not found on PATH (tried: {}).'.format(
            ', '.join(POWERSHELL_CANDIDATES)
        )
    )


def powershell_cmd(script: str, *, executable: Optional[str] = None) -> list[str]:
    exe = executable or find_powershell()
    return [
        exe,
        '-NoProfile',
        '-NonInteractive',
        '-WindowStyle',
        'Hidden',
        '-Command',
        script,
    ]


def query_vm_ip(
    vm_name: str,
    *,
    runner: Runner = run_cmd,
    executable: Optional[str] = None,
) -> str:
    """Return the first network adapter IP of ``vm_name``.

    The trimmed stdout is returned as-is, so a VM without an address yields
    an empty string.
    """
    cmd: Sequence[str] = powershell_cmd(
        ip_query_script(vm_name), executable=executable
    )
    log.debug('Querying IP of VM {}', vm_name)
    try:
        res = runner(cmd, check=True)
    except CmdError as ex:
        detail = ex.result.message
        raise ExternalCommandError(
            f'PowerShell query failed for VM {vm_name!r} '
            f'(code={ex.result.code}): {detail}'
        ) from ex
    except OSError as ex:
        raise ExternalCommandError(
            f'PowerShell query could not be run: {ex}'
        ) from ex
    ip = res.stdout.strip()
    if not ip:
        log.warning('VM {} reported no IP address', vm_name)
    else:
        log.info('VM {} IP: {}', vm_name, ip)
    return ip
