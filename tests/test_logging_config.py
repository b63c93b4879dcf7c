import logging

from logging_config import ContextualFormatter, build_logging_config


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("services.pipeline", logging.ERROR, __file__, 1, "Unable to parse", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_extras() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    message = formatter.format(_record(source_key="tempf", raw_value="abc", unrelated="x"))

    assert message == "Unable to parse | source_key=tempf raw_value=abc"


def test_formatter_quotes_values_with_spaces() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    message = formatter.format(_record(reason="missing field", raw_value=""))

    assert message == "Unable to parse | raw_value='' reason='missing field'"


def test_formatter_without_extras_is_unchanged() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s")

    assert formatter.format(_record()) == "ERROR Unable to parse"


def test_third_party_loggers_are_quieted() -> None:
    config = build_logging_config("INFO")

    assert config["loggers"]["paho"] == {"level": "WARNING"}
    assert config["root"]["level"] == "INFO"
    assert build_logging_config("DEBUG")["loggers"]["paho"] == {"level": "INFO"}
