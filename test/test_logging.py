from structlog.testing import capture_logs

from gasfee.core.logger import get_logger, GAS_ESTIMATES


def test_structured_events_and_prometheus():
    with capture_logs() as logs:
        log = get_logger("test")
        log.info("UNIT_TEST_EVENT", data=1)
    assert logs == [{"event": "UNIT_TEST_EVENT", "data": 1, "log_level": "info"}]

    c = GAS_ESTIMATES.labels("unit")
    initial = c._value.get()
    c.inc()
    assert c._value.get() == initial + 1
