# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
from abc import ABCMeta
from abc import abstractmethod
from enum import Enum
from subprocess import CalledProcessError
from typing import Sequence

from wazuh_provisioning._exceptions import ProvisioningError
from wazuh_provisioning._host import Host


class Command(metaclass=ABCMeta):

    @abstractmethod
    def run(self, host: Host):
        pass


class Policy(Enum):
    FATAL = 'fatal'
    ADVISORY = 'advisory'


class Stage:

    def __init__(self, name: str, command: Command, policy: Policy = Policy.FATAL):
        self.name = name
        self.command = command
        self.policy = policy

    def __repr__(self):
        return f'{Stage.__name__}({self.name!r}, {self.command!r}, {self.policy.name})'

    def run(self, host: Host):
        _logger.info("%s...", self.name)
        if self.policy is Policy.FATAL:
            self.command.run(host)
            return
        try:
            self.command.run(host)
        except (ProvisioningError, CalledProcessError) as e:
            _logger.warning("%s: failed, continuing: %s", self.name, e)


class ProvisioningSequence:
    """Run stages one by one. A fatal stage failure stops the sequence."""

    def __init__(self, stages: Sequence[Stage]):
        self._stages = stages

    def __repr__(self):
        return f'<{self.__class__.__name__} with {len(self._stages)} stages>'

    def stages(self) -> Sequence[Stage]:
        return self._stages

    def run(self, host: Host):
        for stage in self._stages:
            stage.run(host)


_logger = logging.getLogger(__name__)
