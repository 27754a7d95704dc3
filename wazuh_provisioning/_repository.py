# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
"""APT trust key and source registration.

Both commands are idempotent: once the key and the source are in place,
re-running them writes nothing.
"""
import logging
from pathlib import Path

from wazuh_provisioning._apt import RefreshIndex
from wazuh_provisioning._core import Command


class RegisterTrustKey(Command):

    def __init__(self, key_url: str, key_path: Path):
        self._key_url = key_url
        self._key_path = key_path

    def __repr__(self):
        return f'{RegisterTrustKey.__name__}({self._key_url!r}, {str(self._key_path)!r})'

    def run(self, host):
        if self._key_path.exists():
            _logger.info("GPG key already present: %s", self._key_path)
            return
        _logger.info("Adding repository GPG key: %s", self._key_url)
        armored = host.fetch(self._key_url)
        # APT reads keys from trusted.gpg.d in the binary keyring format.
        r = host.shell.run(['gpg', '--dearmor'], input=armored)
        self._key_path.parent.mkdir(parents=True, exist_ok=True)
        self._key_path.write_bytes(r.stdout)
        _logger.info("GPG key written: %s", self._key_path)


class RegisterRepository(Command):
    """Make the source file point to the repository.

    A file that mentions the repository host is left alone.
    Anything else, stale or corrupted, is overwritten with the expected line.
    """

    def __init__(self, repository_path: Path, repository_host: str, definition: str):
        self._repository_path = repository_path
        self._repository_host = repository_host
        self._definition = definition

    def __repr__(self):
        return f'{RegisterRepository.__name__}({str(self._repository_path)!r}, {self._definition!r})'

    def run(self, host):
        current = self._read_current()
        if current is not None and self._repository_host in current:
            _logger.info("APT repository already configured: %s", self._repository_path)
            return
        if current is None:
            _logger.info("Adding APT repository: %s", self._repository_path)
        else:
            _logger.warning(
                "%s does not reference %s; overwriting it",
                self._repository_path, self._repository_host)
        self._repository_path.parent.mkdir(parents=True, exist_ok=True)
        self._repository_path.write_text(self._definition + '\n')
        _logger.info("Updating package lists after adding repo")
        RefreshIndex().run(host)

    def _read_current(self):
        try:
            return self._repository_path.read_text(errors='replace')
        except FileNotFoundError:
            return None


_logger = logging.getLogger(__name__)
