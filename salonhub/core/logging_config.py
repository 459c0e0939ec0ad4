"""
Root logger configuration.

``setup_logging`` attaches a single console handler to the root logger the
first time it is called; later calls (tests, reloads) leave it untouched.
"""
import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once with a console handler"""
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
