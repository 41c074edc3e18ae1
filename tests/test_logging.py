from __future__ import annotations

import logging

from jsondoc.logging import configure_logging, get_logger


def test_get_logger_nests_under_jsondoc() -> None:
    assert get_logger("rendering").name == "jsondoc.rendering"
    assert get_logger().name == "jsondoc"


def test_repeated_configuration_keeps_one_stream_handler(tmp_path) -> None:
    configure_logging()
    logger = configure_logging(verbose=True, log_file=tmp_path / "run.log")

    stream_handlers = [
        handler for handler in logger.handlers if type(handler) is logging.StreamHandler
    ]
    assert len(stream_handlers) == 1
    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
