# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import os
import shlex
import subprocess
from abc import ABCMeta
from abc import abstractmethod
from subprocess import CompletedProcess
from typing import Mapping
from typing import Optional
from typing import Sequence


class Shell(metaclass=ABCMeta):

    @abstractmethod
    def run(
            self,
            args: Sequence[str],
            *,
            input: Optional[bytes] = None,  # noqa PyShadowingBuiltins
            cwd: Optional[os.PathLike] = None,
            env: Optional[Mapping[str, str]] = None,
            capture: bool = True,
            check: bool = True,
            ) -> CompletedProcess:
        """Run a command; raise CalledProcessError if check and it fails.

        Without capture, output goes straight to the terminal,
        which suits long-running commands like apt-get or the installer.
        """
        pass


class LocalShell(Shell):

    def __repr__(self):
        return '<LocalShell>'

    def run(self, args, *, input=None, cwd=None, env=None, capture=True, check=True):
        _log(args)
        if env is not None:
            env = {**os.environ, **env}
        args = [str(arg) for arg in args]
        try:
            r = subprocess.run(
                args,
                input=input,
                cwd=cwd,
                env=env,
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.PIPE if capture else None,
                # Commands must never wait for an answer from the operator.
                stdin=subprocess.DEVNULL if input is None else None,
                )
        except (FileNotFoundError, PermissionError) as e:
            r = _not_executed(args, e, capture)
        if r.returncode != 0:
            _logger.debug("Exit status %d: %s", r.returncode, shlex.join(r.args))
        if check:
            r.check_returncode()
        return r


def _not_executed(args, error: OSError, capture: bool) -> CompletedProcess:
    # Same statuses as a POSIX shell: 127 not found, 126 cannot execute.
    returncode = 127 if isinstance(error, FileNotFoundError) else 126
    _logger.warning("Cannot run %s: %s", args[0], error)
    stderr = str(error).encode() if capture else None
    return CompletedProcess(args, returncode, b'' if capture else None, stderr)


def _log(command):
    # shlex.join() only works with Iterable[str] and fails with PathLike
    command = [str(arg) if isinstance(arg, os.PathLike) else arg for arg in command]
    _logger.info("Run: %s", shlex.join(command))


_logger = logging.getLogger(__name__)
