# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import doctest
import shutil
import socket
import tempfile
import unittest
from pathlib import Path

from wazuh_provisioning import _config
from wazuh_provisioning import _logging
from wazuh_provisioning import _sequence
from wazuh_provisioning._config import load_config

_DEFAULTS = Path(__file__).parent.parent / 'defaults.ini'


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self._root = Path(tempfile.mkdtemp())
        self._override = self._root / 'override.ini'

    def tearDown(self):
        shutil.rmtree(self._root)

    def test_defaults(self):
        config = load_config(_DEFAULTS)
        self.assertEqual(config.release, '4.14')
        self.assertEqual(config.services, ('wazuh-manager', 'wazuh-indexer', 'wazuh-dashboard'))
        self.assertIn('gnupg2', config.packages)
        self.assertEqual(config.installer_flags, ('-a',))
        self.assertEqual(config.key_path, Path('/etc/apt/trusted.gpg.d/wazuh.gpg'))
        self.assertEqual(config.repository_path, Path('/etc/apt/sources.list.d/wazuh.list'))

    def test_missing_override_ignored(self):
        self.assertEqual(
            load_config(_DEFAULTS, self._root / 'absent.ini'),
            load_config(_DEFAULTS))

    def test_release_override(self):
        self._override.write_text('[defaults]\nrelease = 4.15\n')
        config = load_config(_DEFAULTS, self._override)
        self.assertEqual(config.installer_url, 'https://packages.wazuh.com/4.15/wazuh-install.sh')

    def test_host_section(self):
        host = socket.gethostname()
        self._override.write_text(
            f'[{host};v2]\nrelease = 4.16\n'
            f'[{host}]\nrelease = 4.15\n'
            '[no-such-host-*;v9]\nrelease = 1.0\n')
        config = load_config(_DEFAULTS, self._override)
        self.assertEqual(config.release, '4.16')

    def test_unknown_key(self):
        self._override.write_text('[defaults]\nrelase = 4.15\n')
        with self.assertRaisesRegex(ValueError, "relase"):
            load_config(_DEFAULTS, self._override)

    def test_missing_key(self):
        self._override.write_text('[defaults]\nrelease = 4.15\n')
        with self.assertRaisesRegex(ValueError, "installer_url"):
            load_config(self._override)

    def test_bad_section_version(self):
        self._override.write_text('[*;vX]\nrelease = 4.15\n')
        with self.assertRaisesRegex(ValueError, "Cannot parse vX"):
            load_config(_DEFAULTS, self._override)


def load_tests(loader, tests, ignore):
    tests.addTests(doctest.DocTestSuite(_config))
    tests.addTests(doctest.DocTestSuite(_logging))
    tests.addTests(doctest.DocTestSuite(_sequence))
    return tests


if __name__ == '__main__':
    unittest.main()
