# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import logging.handlers
import sys
from pathlib import Path

_TAGS = {
    logging.DEBUG: 'DEBG',
    logging.INFO: 'INFO',
    logging.WARNING: 'WARN',
    logging.ERROR: 'ERR ',
    logging.CRITICAL: 'CRIT',
    }


def init_logging(log_dir: Path):
    logging.getLogger().setLevel(logging.DEBUG)
    _init_stream_logging()
    _init_file_logging(log_dir)


def _init_file_logging(log_dir: Path):
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logging.getLogger(__name__).warning("File logging disabled: %s", e)
        return
    file_handler = logging.handlers.RotatingFileHandler(
        log_dir / 'provisioning.log', maxBytes=200 * 1024**2, backupCount=6)
    file_handler.setFormatter(logging.Formatter('%(asctime)s %(name)s %(levelname)s %(message)s'))
    file_handler.setLevel(logging.DEBUG)
    logging.getLogger().addHandler(file_handler)


def _init_stream_logging():
    formatter = _TaggedFormatter()
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.INFO)
    stdout_handler.addFilter(lambda record: record.levelno < logging.ERROR)
    stdout_handler.setFormatter(formatter)
    logging.getLogger().addHandler(stdout_handler)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR)
    stderr_handler.setFormatter(formatter)
    logging.getLogger().addHandler(stderr_handler)


class _TaggedFormatter(logging.Formatter):
    """Format as "[WARN] message".

    >>> record = logging.makeLogRecord({'levelno': logging.ERROR, 'msg': "Aborting"})
    >>> _TaggedFormatter().format(record)
    '[ERR ] Aborting'
    """

    def format(self, record):
        tag = _TAGS.get(record.levelno, record.levelname)
        return f'[{tag}] {super().format(record)}'
