"""
utils.py

Small shared helpers. Library modules only create loggers with
``logging.getLogger(__name__)``; handlers are installed by entry points
through `configure_logging`.

The public helpers:
- `configure_logging(level, log_file=None)` : console (+ optional file) handlers
- `parse_assignments(pairs)` : ``['NAME=VALUE', ...]`` -> dict
"""
import logging
import sys
from typing import Dict, Iterable, Optional, Union

CONSOLE_FORMAT = '[%(levelname)s] %(message)s'
FILE_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def configure_logging(level: Union[int, str] = logging.INFO,
                      log_file: Optional[str] = None) -> logging.Logger:
    """Attach handlers to the ``meadow`` logger and return it.

    Calling it again replaces the handlers instead of duplicating them.
    The file handler is delayed so the file is only created on first emit.
    """
    log = logging.getLogger('meadow')
    for h in list(log.handlers):
        log.removeHandler(h)
        h.close()

    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    log.addHandler(sh)
    if log_file:
        fh = logging.FileHandler(log_file, delay=True)
        fh.setFormatter(logging.Formatter(FILE_FORMAT))
        log.addHandler(fh)
    log.setLevel(level)
    log.propagate = False
    return log


def parse_assignments(pairs: Iterable[str]) -> Dict[str, str]:
    """Split ``NAME=VALUE`` strings; values are validated by the config layer."""
    out = {}
    for pair in pairs:
        name, sep, value = pair.partition('=')
        if not sep or not name.strip():
            raise ValueError(f'expected NAME=VALUE, got {pair!r}')
        out[name.strip().upper()] = value.strip()
    return out
