# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/


class ProvisioningError(Exception):
    exit_status = 1


class NotPrivileged(ProvisioningError):
    exit_status = 1


class InvalidInstaller(ProvisioningError):
    exit_status = 2


class DownloadFailed(ProvisioningError):
    """Exit statuses follow curl: 22 HTTP error, 7 cannot connect, 28 timeout."""

    def __init__(self, message: str, exit_status: int = 22):
        super().__init__(message)
        self.exit_status = exit_status
