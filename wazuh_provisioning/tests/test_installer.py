# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from subprocess import CalledProcessError

from wazuh_provisioning._exceptions import DownloadFailed
from wazuh_provisioning._exceptions import InvalidInstaller
from wazuh_provisioning._installer import DownloadInstaller
from wazuh_provisioning._installer import ExecuteInstaller
from wazuh_provisioning._installer import ValidateInstaller
from wazuh_provisioning.tests._doubles import FakeHost
from wazuh_provisioning.tests._doubles import FakePackagesServer
from wazuh_provisioning.tests._doubles import HTML_ERROR_PAGE
from wazuh_provisioning.tests._doubles import VALID_INSTALLER
from wazuh_provisioning.tests._doubles import make_test_config


class _InstallerTestCase(unittest.TestCase):

    def setUp(self):
        self._root = Path(tempfile.mkdtemp())
        self._server = FakePackagesServer()
        self._config = make_test_config(self._root, self._server)
        self._installer_route = f'/{self._config.release}/wazuh-install.sh'
        self._path = self._config.installer_path
        self._host = FakeHost()

    def tearDown(self):
        self._server.close()
        shutil.rmtree(self._root)


class TestDownloadInstaller(_InstallerTestCase):

    def test_previous_copy_replaced(self):
        self._path.write_bytes(b'#!/bin/sh\necho stale copy\n')
        self._server.files[self._installer_route] = VALID_INSTALLER
        DownloadInstaller(self._config.installer_url, self._path).run(self._host)
        self.assertEqual(self._path.read_bytes(), VALID_INSTALLER)
        self.assertEqual(self._server.requested, [self._installer_route])

    def test_downloaded_on_every_run(self):
        self._server.files[self._installer_route] = VALID_INSTALLER
        command = DownloadInstaller(self._config.installer_url, self._path)
        command.run(self._host)
        command.run(self._host)
        self.assertEqual(self._server.requested, [self._installer_route] * 2)

    def test_http_error(self):
        self._path.write_bytes(b'#!/bin/sh\necho stale copy\n')
        with self.assertRaisesRegex(DownloadFailed, "404") as ctx:
            DownloadInstaller(self._config.installer_url, self._path).run(self._host)
        self.assertEqual(ctx.exception.exit_status, 22)
        self.assertFalse(self._path.exists())

    def test_connection_error(self):
        url = self._config.installer_url
        self._server.close()
        with self.assertRaises(DownloadFailed) as ctx:
            DownloadInstaller(url, self._path).run(self._host)
        self.assertEqual(ctx.exception.exit_status, 7)
        self.assertFalse(self._path.exists())


class TestValidateInstaller(_InstallerTestCase):

    def test_script(self):
        self._path.write_bytes(VALID_INSTALLER)
        with self.assertLogs('wazuh_provisioning._installer', 'INFO') as logs:
            ValidateInstaller(self._path).run(self._host)
        self.assertEqual(len(logs.records), 3)
        self.assertIn('#!/bin/bash', logs.output[0])

    def test_html_page(self):
        self._path.write_bytes(HTML_ERROR_PAGE)
        with self.assertRaisesRegex(InvalidInstaller, "<!DOCTYPE html>") as ctx:
            ValidateInstaller(self._path).run(self._host)
        self.assertEqual(ctx.exception.exit_status, 2)

    def test_shebang_not_on_first_line(self):
        self._path.write_bytes(b'\n#!/bin/bash\n')
        with self.assertRaises(InvalidInstaller):
            ValidateInstaller(self._path).run(self._host)

    def test_empty_file(self):
        self._path.write_bytes(b'')
        with self.assertRaises(InvalidInstaller):
            ValidateInstaller(self._path).run(self._host)

    def test_missing_file(self):
        with self.assertRaises(InvalidInstaller):
            ValidateInstaller(self._path).run(self._host)


class TestExecuteInstaller(_InstallerTestCase):

    def test_unattended_run(self):
        self._path.write_bytes(VALID_INSTALLER)
        self._path.chmod(0o644)
        ExecuteInstaller(self._path, ['-a']).run(self._host)
        self.assertTrue(os.access(self._path, os.X_OK))
        [call] = self._host.shell.calls
        self.assertEqual(call['args'], ['bash', './wazuh-install.sh', '-a'])
        self.assertEqual(Path(call['cwd']), self._root)
        self.assertFalse(call['capture'])

    def test_installer_failure(self):
        self._path.write_bytes(VALID_INSTALLER)
        self._host.shell.reply(['bash', './wazuh-install.sh'], returncode=17)
        with self.assertRaises(CalledProcessError) as ctx:
            ExecuteInstaller(self._path, ['-a']).run(self._host)
        self.assertEqual(ctx.exception.returncode, 17)


if __name__ == '__main__':
    unittest.main()
