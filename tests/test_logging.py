import logging
from tsetup import log, set_verbosity


def test_set_verbosity():

    set_verbosity(True)
    assert log.level == logging.DEBUG

    set_verbosity(False)
    assert log.level == logging.INFO
