import logging

from aardvark_pay import log
from aardvark_pay.transaction import build_sol_transfer_transaction


def test_configure_sets_package_level():
    logger = log.configure("debug")
    assert logger.name == "aardvark_pay"
    assert logger.level == logging.DEBUG
    log.configure(logging.WARNING)
    assert logger.level == logging.WARNING


def test_builders_log_under_package_namespace(caplog, sender, recipient, blockhash):
    with caplog.at_level(logging.DEBUG, logger="aardvark_pay"):
        build_sol_transfer_transaction(sender, recipient, 5, blockhash)
    names = {record.name for record in caplog.records}
    assert "aardvark_pay.transaction" in names
    assert any("sol_transfer_built" in record.getMessage() for record in caplog.records)


def test_configure_from_settings_level():
    from aardvark_pay.settings import Settings

    logger = log.configure(Settings(_env_file=None, log_level="error").log_level)
    assert logger.level == logging.ERROR
    log.configure("INFO")
