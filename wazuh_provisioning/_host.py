# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import os
import shutil
from abc import ABCMeta
from abc import abstractmethod
from pathlib import Path
from typing import Optional

import requests

from wazuh_provisioning._exceptions import DownloadFailed
from wazuh_provisioning._shell import LocalShell
from wazuh_provisioning._shell import Shell

_HTTP_TIMEOUT = (10, 60)


class Host(metaclass=ABCMeta):
    """Everything a command may touch: shell, network and process identity."""

    def __init__(self, shell: Shell):
        self.shell = shell

    @abstractmethod
    def effective_uid(self) -> int:
        pass

    @abstractmethod
    def which(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def fetch(self, url: str) -> bytes:
        pass

    @abstractmethod
    def download(self, url: str, path: Path):
        pass


class LocalHost(Host):

    def __init__(self):
        super().__init__(LocalShell())
        self._session = requests.Session()

    def __repr__(self):
        return '<LocalHost>'

    def effective_uid(self):
        return os.geteuid()

    def which(self, name):
        return shutil.which(name)

    def fetch(self, url):
        _logger.info("Fetch %s", url)
        try:
            response = self._session.get(url, timeout=_HTTP_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DownloadFailed(f"Failed to get {url}: {e}", _curl_status(e))
        return response.content

    def download(self, url, path):
        _logger.info("Download %s to %s", url, path)
        try:
            with self._session.get(url, stream=True, timeout=_HTTP_TIMEOUT) as response:
                response.raise_for_status()
                with path.open('wb') as f:
                    for chunk in response.iter_content(chunk_size=64 * 1024):
                        f.write(chunk)
        except requests.RequestException as e:
            path.unlink(missing_ok=True)
            raise DownloadFailed(f"Failed to download {url}: {e}", _curl_status(e))
        _logger.info("Downloaded %d bytes: %s", path.stat().st_size, path)



def _curl_status(error: requests.RequestException) -> int:
    # ConnectTimeout is both a Timeout and a ConnectionError.
    if isinstance(error, requests.Timeout):
        return 28
    if isinstance(error, requests.ConnectionError):
        return 7
    return 22


_logger = logging.getLogger(__name__)
