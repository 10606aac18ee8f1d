"""Logging configuration for the copysync CLI."""
import logging


def configure_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity setting.

    Args:
        verbose: If True, log everything from DEBUG up, including each
            clipboard change sent or received; otherwise WARNING and above.

    Dropped messages, lost connections and clipboard write failures are
    always printed to stderr regardless of verbosity.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
