# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import fnmatch
import logging
import socket
from configparser import ConfigParser
from pathlib import Path
from typing import Mapping
from typing import NamedTuple
from typing import Tuple
from urllib.parse import urlparse

_logger = logging.getLogger(__name__)


class ProvisioningConfig(NamedTuple):

    release: str
    key_url: str
    installer_url: str
    key_path: Path
    repository_path: Path
    repository_url: str
    repository_suite: str
    repository_component: str
    installer_path: Path
    installer_flags: Tuple[str, ...]
    packages: Tuple[str, ...]
    services: Tuple[str, ...]
    distribution: str
    os_release_path: Path
    log_shipper: str
    log_dir: Path

    def repository_host(self) -> str:
        return urlparse(self.repository_url).hostname

    def repository_definition(self) -> str:
        """Single APT source line, pinned to the trust key.

        >>> config = load_config(Path(__file__).with_name('defaults.ini'))
        >>> config.repository_definition()
        'deb [signed-by=/etc/apt/trusted.gpg.d/wazuh.gpg] https://packages.wazuh.com/4.x/apt/ stable main'
        >>> config.repository_host()
        'packages.wazuh.com'
        >>> config.installer_url
        'https://packages.wazuh.com/4.14/wazuh-install.sh'
        """
        return (
            f'deb [signed-by={self.key_path}] '
            f'{self.repository_url} {self.repository_suite} {self.repository_component}')

    def with_overrides(self, **values) -> 'ProvisioningConfig':
        return self._replace(**values)


def load_config(*paths: Path) -> ProvisioningConfig:
    raw = _read_config(*paths)
    unknown = raw.keys() - ProvisioningConfig._fields
    if unknown:
        raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
    missing = set(ProvisioningConfig._fields) - raw.keys()
    if missing:
        raise ValueError(f"Missing configuration keys: {sorted(missing)}")
    release = raw['release']
    return ProvisioningConfig(
        release=release,
        key_url=raw['key_url'].format(release=release),
        installer_url=raw['installer_url'].format(release=release),
        key_path=Path(raw['key_path']),
        repository_path=Path(raw['repository_path']),
        repository_url=raw['repository_url'].format(release=release),
        repository_suite=raw['repository_suite'],
        repository_component=raw['repository_component'],
        installer_path=Path(raw['installer_path']),
        installer_flags=_split(raw['installer_flags']),
        packages=_split(raw['packages']),
        services=_split(raw['services']),
        distribution=raw['distribution'],
        os_release_path=Path(raw['os_release_path']),
        log_shipper=raw['log_shipper'],
        log_dir=Path(raw['log_dir']),
        )


def default_config() -> ProvisioningConfig:
    return load_config(
        Path(__file__).with_name('defaults.ini'),
        Path('/etc/wazuh-provisioning.ini'),
        )


def _split(value: str) -> Tuple[str, ...]:
    return tuple(value.split())


def _read_config(*paths: Path) -> Mapping[str, str]:
    """Read and resolve overrides according to versions.

    Sections are "[defaults]" or a host name mask like "[wazuh-*]".
    Optionally add ";v123" to sections like "[wazuh-*;v2]".
    If not specified, "v0" is assumed.
    Higher versions override lower versions, later files override earlier.
    Missing files are skipped.
    """
    config_parts = []
    host = socket.gethostname()
    for path_i, path in enumerate(paths):
        config_parser = ConfigParser(interpolation=None)
        if not config_parser.read(path):
            _logger.debug("Config %s: not found", path)
            continue
        for section_i, section in enumerate(config_parser.sections()):
            mask, version = _parse_section_header(section)
            if fnmatch.fnmatch(host, mask):
                _logger.debug("Config %s: section %s: read", path, section)
                items = config_parser.items(section)
                config_parts.append((version, path_i, section_i, items))
            else:
                _logger.debug("Config %s: section %s: skip", path, section)
    config_parts.sort(key=lambda part: part[:3])
    config = {}
    for _version, _path_i, _section_i, items in config_parts:
        config.update(items)
    return config


def _parse_section_header(section: str) -> Tuple[str, int]:
    """Split a section header into host mask and version.

    >>> _parse_section_header('defaults')
    ('*', 0)
    >>> _parse_section_header('wazuh-*;v3')
    ('wazuh-*', 3)
    """
    if section == 'defaults':
        return '*', 0
    else:
        mask, semicolon, extra = section.partition(';')
        if not extra:
            return mask, 0
        elif extra.startswith('v'):
            try:
                return mask, int(extra[1:])
            except ValueError:
                raise ValueError(f"Cannot parse {extra} in {section}")
        else:
            raise ValueError(f"Unknown {extra} in {section}")
