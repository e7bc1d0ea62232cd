"""Configure application logging to a file and stderr."""

import logging
import os
import sys
import tempfile


def setup_logging(verbose: bool = False) -> None:
    """Configure the package logger: file in temp dir at DEBUG + stderr at INFO (DEBUG when verbose)."""
    root = logging.getLogger("midi_perform")
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    log_path = None
    try:
        log_dir = os.path.join(tempfile.gettempdir(), "midi-perform")
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, "midi-perform.log")
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)
    except OSError:
        pass

    eh = logging.StreamHandler(sys.stderr)
    eh.setLevel(logging.DEBUG if verbose else logging.INFO)
    eh.setFormatter(fmt)
    root.addHandler(eh)

    root.info("Logging started; file: %s", log_path or "(none)")
