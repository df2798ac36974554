import logging

from seoulfit.core.logger import (
    ContextFilter,
    SafeFormatter,
    get_dataset_context,
    reset_dataset_context,
    set_dataset_context,
)


def make_record(message="Cached 5 rows."):
    return logging.LogRecord("seoulfit.data.scheduler", logging.INFO, __file__, 1, message, None, None)


def test_context_filter_tags_dataset():
    token = set_dataset_context("bike_stations")
    try:
        record = make_record()
        assert ContextFilter().filter(record) is True
        assert record.dataset == "[DATASET:bike_stations]"
    finally:
        reset_dataset_context(token)

    assert get_dataset_context() == "-"


def test_context_filter_without_dataset():
    record = make_record()
    ContextFilter().filter(record)
    assert record.dataset == ""


def test_safe_formatter_without_filter():
    formatter = SafeFormatter(fmt="[%(name)s]%(dataset)s %(message)s")
    assert formatter.format(make_record()) == "[seoulfit.data.scheduler] Cached 5 rows."
