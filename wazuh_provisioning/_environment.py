# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
from pathlib import Path

from wazuh_provisioning._core import Command
from wazuh_provisioning._exceptions import NotPrivileged


class RequirePrivileges(Command):

    def __repr__(self):
        return f'{RequirePrivileges.__name__}()'

    def run(self, host):
        uid = host.effective_uid()
        if uid != 0:
            raise NotPrivileged(
                f"Effective UID is {uid}. Please run this script with sudo or as root.")
        _logger.debug("Running as root")


class CheckDistribution(Command):
    """Warn if the host does not look like the expected distribution."""

    def __init__(self, os_release_path: Path, distribution: str):
        self._os_release_path = os_release_path
        self._distribution = distribution

    def __repr__(self):
        return f'{CheckDistribution.__name__}({str(self._os_release_path)!r}, {self._distribution!r})'

    def run(self, host):
        try:
            os_release = self._os_release_path.read_text(errors='replace')
        except OSError as e:
            _logger.warning("Cannot read %s: %s", self._os_release_path, e)
            os_release = ''
        if self._distribution.casefold() in os_release.casefold():
            _logger.info("Distribution: %s", self._distribution)
        else:
            _logger.warning(
                "This does not look like %s. Continuing anyway...",
                self._distribution.capitalize())


_logger = logging.getLogger(__name__)
