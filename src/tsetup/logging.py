import logging

log = logging.getLogger("tsetup")

if not log.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    log.addHandler(_handler)
    log.setLevel(logging.INFO)


def set_verbosity(verbose: bool) -> None:

    log.setLevel(logging.DEBUG if verbose else logging.INFO)

    return None
