import logging

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    Library modules only create loggers; scripts and notebooks call this
    once to see the messages.

    Parameters
    ----------
    level : int
        Logging level for the ``spinlattice`` logger
    fmt : str
        Format string for the handler

    Returns
    -------
    logger : logging.Logger
        The configured package logger
    """
    logger = logging.getLogger("spinlattice")
    logger.setLevel(level)

    if not any(getattr(h, "_spinlattice_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        handler._spinlattice_handler = True
        logger.addHandler(handler)

    return logger
