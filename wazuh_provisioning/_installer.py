# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import stat
from pathlib import Path
from typing import Sequence

from wazuh_provisioning._core import Command
from wazuh_provisioning._exceptions import InvalidInstaller

_SHEBANG = b'#!'


class DownloadInstaller(Command):
    """Always fetch a fresh copy. The installer decides what to do on re-run."""

    def __init__(self, url: str, path: Path):
        self._url = url
        self._path = path

    def __repr__(self):
        return f'{DownloadInstaller.__name__}({self._url!r}, {str(self._path)!r})'

    def run(self, host):
        self._path.unlink(missing_ok=True)
        host.download(self._url, self._path)


class ValidateInstaller(Command):
    """Reject anything that is not a script, e.g. an HTML error page.

    It is not an integrity check: neither signature nor checksum is verified.
    """

    def __init__(self, path: Path):
        self._path = path

    def __repr__(self):
        return f'{ValidateInstaller.__name__}({str(self._path)!r})'

    def run(self, host):
        head = _read_head(self._path, 3)
        for line in head:
            _logger.info("%s: %s", self._path.name, line.decode(errors='backslashreplace'))
        first_line = head[0] if head else b''
        if not first_line.startswith(_SHEBANG):
            raise InvalidInstaller(
                f"Installer does not look like a shell script "
                f"(first line: {first_line.decode(errors='backslashreplace')!r}). Aborting.")


class ExecuteInstaller(Command):
    """Run the installer. Only its exit status is interpreted."""

    def __init__(self, path: Path, flags: Sequence[str]):
        self._path = path
        self._flags = list(flags)

    def __repr__(self):
        return f'{ExecuteInstaller.__name__}({str(self._path)!r}, {self._flags!r})'

    def run(self, host):
        _logger.info("Making installer executable: %s", self._path)
        mode = self._path.stat().st_mode
        self._path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        _logger.info("Launching installer with %s", ' '.join(self._flags))
        host.shell.run(
            ['bash', f'./{self._path.name}', *self._flags],
            cwd=self._path.absolute().parent,
            capture=False,
            )


def _read_head(path: Path, line_count: int):
    lines = []
    try:
        with path.open('rb') as f:
            for line in f:
                lines.append(line.rstrip(b'\r\n'))
                if len(lines) == line_count:
                    break
    except FileNotFoundError:
        _logger.error("Installer not found: %s", path)
    return lines


_logger = logging.getLogger(__name__)
