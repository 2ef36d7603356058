import logging

from ndgrad import Tensor, config, setup_logger


def test_setup_logger_level():
    logger = setup_logger("debug")
    assert logger.name == "ndgrad"
    assert logger.level == logging.DEBUG
    setup_logger(config["log_level"])


def test_setup_logger_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "ndgrad.log"
    logger = setup_logger("INFO", log_file=str(log_file))
    logger.info("hello")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "ndgrad - INFO - hello" in log_file.read_text()
    setup_logger(config["log_level"])


def test_backward_logs_at_debug(caplog):
    x = Tensor(2.0)
    y = x * x
    with caplog.at_level(logging.DEBUG, logger="ndgrad"):
        y.backward()
    messages = [r.getMessage() for r in caplog.records]
    assert any("Backward pass over 2 tensors" in m for m in messages)
    assert any("Merging aliased gradient contributions" in m for m in messages)
