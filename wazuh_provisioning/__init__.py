# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
"""Single-host installation of the Wazuh manager, indexer and dashboard.

Provisioning here is a fixed sequence of commands run on the local host:
refresh APT, install the tools the installer needs, register the Wazuh
repository, download the official installer, run it unattended and make
sure the resulting systemd services are enabled and running.

Commands must be idempotent where they can be.
Registering the key and the repository a second time writes nothing.
The installer is downloaded and run on every invocation:
it is the only authority on what an installation needs.

Every stage is either fatal or advisory.
A fatal stage stops the sequence on the first error.
An advisory stage reports its error as a warning and the sequence goes on.

Run it as root: python3 -m wazuh_provisioning
"""
from wazuh_provisioning._config import ProvisioningConfig
from wazuh_provisioning._config import default_config
from wazuh_provisioning._config import load_config
from wazuh_provisioning._core import Command
from wazuh_provisioning._core import Policy
from wazuh_provisioning._core import ProvisioningSequence
from wazuh_provisioning._core import Stage
from wazuh_provisioning._exceptions import DownloadFailed
from wazuh_provisioning._exceptions import InvalidInstaller
from wazuh_provisioning._exceptions import NotPrivileged
from wazuh_provisioning._exceptions import ProvisioningError
from wazuh_provisioning._host import Host
from wazuh_provisioning._host import LocalHost
from wazuh_provisioning._sequence import make_sequence
from wazuh_provisioning._sequence import provision

__all__ = [
    'Command',
    'DownloadFailed',
    'Host',
    'InvalidInstaller',
    'LocalHost',
    'NotPrivileged',
    'Policy',
    'ProvisioningConfig',
    'ProvisioningError',
    'ProvisioningSequence',
    'Stage',
    'default_config',
    'load_config',
    'make_sequence',
    'provision',
    ]
