# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
from typing import Sequence

from wazuh_provisioning._core import Command

_NONINTERACTIVE = {'DEBIAN_FRONTEND': 'noninteractive'}


class RefreshIndex(Command):

    def __repr__(self):
        return f'{RefreshIndex.__name__}()'

    def run(self, host):
        host.shell.run(['apt-get', 'update'], env=_NONINTERACTIVE, capture=False)


class InstallPackages(Command):
    """Install packages. Already installed ones are left as they are."""

    def __init__(self, packages: Sequence[str]):
        if not packages:
            raise ValueError("No packages to install")
        self._packages = list(packages)

    def __repr__(self):
        return f'{InstallPackages.__name__}({self._packages!r})'

    def run(self, host):
        host.shell.run(
            ['apt-get', 'install', '-y', *self._packages],
            env=_NONINTERACTIVE,
            capture=False,
            )
