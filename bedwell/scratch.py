"""
Scratch Space
-------------

This module contains :func:`~bedwell.scratch.scratch_directory`, a context manager for a temporary
directory that is removed on every exit path: normal return, an exception, or an interrupt
(SIGINT or SIGTERM).

.. code-block:: python

    >>> from bedwell.scratch import scratch_directory
    >>> with scratch_directory() as tmpdir:
    ...     sorted_copy = tmpdir / "sorted.bed"
    >>> sorted_copy.parent.exists()
    False

While the context is active, SIGTERM is raised as :class:`SystemExit` so that the ``finally``
clause runs, and SIGINT keeps raising :class:`KeyboardInterrupt`.  The previous handlers are
restored on exit.  Handlers are only installed from the main thread.
"""

import logging
import shutil
import signal
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from types import FrameType
from typing import Any
from typing import Dict
from typing import Iterator
from typing import Optional

logger = logging.getLogger(__name__)


def _raise_on_signal(signum: int, frame: Optional[FrameType]) -> None:
    if signum == signal.SIGINT:
        raise KeyboardInterrupt
    raise SystemExit(128 + signum)


def _install_handlers() -> Dict[int, Any]:
    """Installs the handlers, returning the previous ones."""
    if threading.current_thread() is not threading.main_thread():
        return {}
    previous = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        previous[signum] = signal.getsignal(signum)
        signal.signal(signum, _raise_on_signal)
    return previous


def _restore_handlers(previous: Dict[int, Any]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


@contextmanager
def scratch_directory(prefix: str = "bedwell.", dir: Optional[Path] = None) -> Iterator[Path]:
    """Creates a temporary directory and removes it on every exit path.

    Args:
        prefix: the prefix of the directory name
        dir: the parent directory; the system default if not given

    Yields:
        the path to the temporary directory
    """
    path = Path(tempfile.mkdtemp(prefix=prefix, dir=dir))
    previous = _install_handlers()
    try:
        yield path
    except KeyboardInterrupt:
        logger.warning("Caught interrupt, cleaning temporary files!")
        raise
    finally:
        _restore_handlers(previous)
        shutil.rmtree(path, ignore_errors=True)
