# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import shlex
from subprocess import CalledProcessError

from wazuh_provisioning._apt import InstallPackages
from wazuh_provisioning._apt import RefreshIndex
from wazuh_provisioning._config import ProvisioningConfig
from wazuh_provisioning._core import Policy
from wazuh_provisioning._core import ProvisioningSequence
from wazuh_provisioning._core import Stage
from wazuh_provisioning._environment import CheckDistribution
from wazuh_provisioning._environment import RequirePrivileges
from wazuh_provisioning._exceptions import ProvisioningError
from wazuh_provisioning._host import Host
from wazuh_provisioning._installer import DownloadInstaller
from wazuh_provisioning._installer import ExecuteInstaller
from wazuh_provisioning._installer import ValidateInstaller
from wazuh_provisioning._repository import RegisterRepository
from wazuh_provisioning._repository import RegisterTrustKey
from wazuh_provisioning._services import ActivateServices
from wazuh_provisioning._services import ReportServiceStatus
from wazuh_provisioning._services import SelfTestLogShipper


def make_sequence(config: ProvisioningConfig) -> ProvisioningSequence:
    return ProvisioningSequence([
        Stage("Checking privileges", RequirePrivileges()),
        Stage(
            "Checking distribution",
            CheckDistribution(config.os_release_path, config.distribution),
            Policy.ADVISORY),
        Stage("Updating packages", RefreshIndex()),
        Stage("Installing required libraries and tools", InstallPackages(config.packages)),
        Stage("Adding repository GPG key", RegisterTrustKey(config.key_url, config.key_path)),
        Stage("Adding APT repository", RegisterRepository(
            config.repository_path,
            config.repository_host(),
            config.repository_definition(),
            )),
        # The new source changes what the package manager can see.
        Stage("Updating packages", RefreshIndex()),
        Stage("Installing required libraries and tools", InstallPackages(config.packages)),
        Stage(
            f"Downloading installer {config.release}",
            DownloadInstaller(config.installer_url, config.installer_path)),
        Stage("Verifying installer header", ValidateInstaller(config.installer_path)),
        Stage(
            "Running installer",
            ExecuteInstaller(config.installer_path, config.installer_flags)),
        Stage(
            "Enabling and starting services",
            ActivateServices(config.services),
            Policy.ADVISORY),
        Stage(
            "Checking services status",
            ReportServiceStatus(config.services),
            Policy.ADVISORY),
        Stage(
            f"Testing {config.log_shipper}",
            SelfTestLogShipper(config.log_shipper),
            Policy.ADVISORY),
        ])


def provision(config: ProvisioningConfig, host: Host) -> int:
    """Run the whole sequence and return the process exit status."""
    try:
        make_sequence(config).run(host)
    except ProvisioningError as e:
        _logger.error("%s", e)
        return e.exit_status
    except CalledProcessError as e:
        _logger.error("Command %s failed with exit status %d", shlex.join(e.cmd), e.returncode)
        return _exit_status(e.returncode)
    _logger.info(
        "All done. If the dashboard isn't reachable yet, check indexer logs: %s",
        _INDEXER_LOG)
    return 0


def _exit_status(returncode: int) -> int:
    """Report a command killed by a signal the way a shell does.

    >>> _exit_status(100)
    100
    >>> _exit_status(-9)
    137
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


_INDEXER_LOG = '/var/log/wazuh-indexer/wazuh-indexer.log'
_logger = logging.getLogger(__name__)
