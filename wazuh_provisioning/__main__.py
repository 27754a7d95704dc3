# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import sys

from wazuh_provisioning._config import default_config
from wazuh_provisioning._host import LocalHost
from wazuh_provisioning._logging import init_logging
from wazuh_provisioning._sequence import provision


def main() -> int:
    config = default_config()
    init_logging(config.log_dir)
    return provision(config, LocalHost())


if __name__ == '__main__':
    sys.exit(main())
