import logging
import sys
from pathlib import Path


class _ThirdPartyNoiseFilter(logging.Filter):
    """Keep taskcal logs at the configured level; other libraries only WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("taskcal"):
            return True
        if record.name.startswith("uvicorn"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """
    Configure the root logger with a console handler and, optionally,
    a file handler that also receives the 500 tracebacks.

    Call once at startup, before the first log call.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Remove any pre-existing handlers to avoid duplicates on reload.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    ch.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(ch)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setFormatter(fmt)
        fh.addFilter(_ThirdPartyNoiseFilter())
        root.addHandler(fh)

    logging.captureWarnings(True)
