from .logging import log, set_verbosity

__all__ = ["log", "set_verbosity"]
