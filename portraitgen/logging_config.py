import logging
import sys


def setup_logging(level: str = "INFO"):
    """
    Configures the root logger for the application.
    This function should be called ONLY ONCE at startup by an entrypoint.
    """
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        stream=sys.stdout,
    )
    # Silence noisy libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
