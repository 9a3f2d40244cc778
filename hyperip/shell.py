"""Run PowerShell-style commands and decode what they print."""

from __future__ import annotations

import codecs
import shlex
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from loguru import logger

log = logger


def decode_output(raw: bytes | None) -> str:
    """Decode console bytes, dropping a UTF-8 BOM and CRLF line endings."""
    if not raw:
        return ''
    if raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8):]
    text = raw.decode('utf-8', errors='replace')
    return text.replace('\r\n', '\n').replace('\r', '\n')


@dataclass(frozen=True)
class CmdResult:
    code: int
    stdout: str
    stderr: str

    @property
    def message(self) -> str:
        """First meaningful line of the error stream, else of stdout.

        PowerShell error records span several lines (category, position,
        FullyQualifiedErrorId); only the leading line is the human message.
        """
        for stream in (self.stderr, self.stdout):
            for line in stream.splitlines():
                if line.strip():
                    return line.strip()
        return ''


class CmdError(RuntimeError):
    def __init__(self, cmd: Sequence[str], result: CmdResult):
        self.cmd = list(cmd)
        self.result = result
        msg = f'{self.cmd[0]} exited with code {result.code}'
        if result.message:
            msg += f': {result.message}'
        super().__init__(msg)


def run_cmd(
    cmd: Sequence[str],
    *,
    check: bool = True,
    env: Optional[dict[str, str]] = None,
) -> CmdResult:
    """Run ``cmd`` to completion and capture both streams as text.

    No timeout is applied; a hung command hangs the caller.
    """
    pretty = ' '.join(shlex.quote(c) for c in cmd)
    log.opt(depth=1).debug('RUN: {}', pretty)
    p = subprocess.run(list(cmd), capture_output=True, env=env)
    res = CmdResult(p.returncode, decode_output(p.stdout), decode_output(p.stderr))
    if check and res.code != 0:
        log.opt(depth=1).error(
            'Command failed code={} cmd={} message={}', res.code, pretty, res.message
        )
        raise CmdError(cmd, res)
    log.opt(depth=1).debug('Command done code={}', res.code)
    return res
