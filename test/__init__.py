import logging


class NoLogging:
    """
        Silence expected warnings and errors inside a `with` block
    """
    def __enter__(self):
        logging.disable(logging.CRITICAL)

    def __exit__(self, exc_type, exc_value, traceback):
        logging.disable(logging.NOTSET)


no_logging = NoLogging()
