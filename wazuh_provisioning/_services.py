# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
from subprocess import CalledProcessError
from typing import Collection
from typing import Sequence

from wazuh_provisioning._core import Command
from wazuh_provisioning._shell import Shell


class ActivateServices(Command):
    """Enable and start each service that systemd knows about.

    Missing units are reported, not treated as failures:
    the installer may rename or consolidate services between releases.
    """

    def __init__(self, services: Sequence[str]):
        self._services = list(services)

    def __repr__(self):
        return f'{ActivateServices.__name__}({self._services!r})'

    def run(self, host):
        try:
            host.shell.run(['systemctl', 'daemon-reload'])
        except CalledProcessError as e:
            _logger.warning("systemctl daemon-reload failed: %s", _stderr(e))
        unit_files = _unit_files(host.shell)
        for service in self._services:
            if f'{service}.service' not in unit_files:
                _logger.warning("Service %s not found (may be renamed or not installed yet).", service)
                continue
            try:
                host.shell.run(['systemctl', 'enable', '--now', service])
            except CalledProcessError as e:
                _logger.warning("Service %s: enable failed: %s", service, _stderr(e))
            else:
                _logger.info("Service %s: enabled and started", service)


class ReportServiceStatus(Command):

    def __init__(self, services: Sequence[str]):
        self._services = list(services)

    def __repr__(self):
        return f'{ReportServiceStatus.__name__}({self._services!r})'

    def run(self, host):
        r = host.shell.run(['systemctl', 'status', *self._services, '--no-pager'], check=False)
        for line in r.stdout.decode(errors='backslashreplace').splitlines():
            _logger.info("status: %s", line)
        if r.returncode != 0:
            _logger.warning(
                "systemctl status exited with %d: not all services are running",
                r.returncode)


class SelfTestLogShipper(Command):
    """Run the built-in output self-test of the log shipper, if installed."""

    def __init__(self, binary: str):
        self._binary = binary

    def __repr__(self):
        return f'{SelfTestLogShipper.__name__}({self._binary!r})'

    def run(self, host):
        path = host.which(self._binary)
        if path is None:
            _logger.warning("%s not found; skipping '%s test output'.", self._binary, self._binary)
            return
        _logger.info("Testing %s output", self._binary)
        r = host.shell.run([path, 'test', 'output'], check=False)
        for line in r.stdout.decode(errors='backslashreplace').splitlines():
            _logger.info("%s: %s", self._binary, line)
        if r.returncode != 0:
            _logger.warning(
                "'%s test output' exited with %d: %s",
                self._binary, r.returncode, r.stderr.decode(errors='backslashreplace').strip())


def _unit_files(shell: Shell) -> Collection[str]:
    try:
        r = shell.run(['systemctl', 'list-unit-files', '--no-legend', '--no-pager'])
    except CalledProcessError as e:
        _logger.warning("systemctl list-unit-files failed: %s", _stderr(e))
        return set()
    units = set()
    for line in r.stdout.decode(errors='backslashreplace').splitlines():
        [unit, *_] = line.split() or ['']
        if unit:
            units.add(unit)
    return units


def _stderr(e: CalledProcessError) -> str:
    if e.stderr is None:
        return str(e)
    return e.stderr.decode(errors='backslashreplace').strip() or str(e)


_logger = logging.getLogger(__name__)
