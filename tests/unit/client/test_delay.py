from unittest.mock import patch

from llm_ratelimit.client import RecordingDelay, SystemDelay
from llm_ratelimit.protocols import DelayProtocol


class TestSystemDelay:
    def test_sleeps(self):
        with patch("llm_ratelimit.client.delay.time.sleep") as sleep:
            SystemDelay().delay(1.5)
        sleep.assert_called_once_with(1.5)

    def test_non_positive_returns_immediately(self):
        with patch("llm_ratelimit.client.delay.time.sleep") as sleep:
            SystemDelay().delay(0)
            SystemDelay().delay(-2)
        sleep.assert_not_called()

    def test_satisfies_protocol(self):
        assert isinstance(SystemDelay(), DelayProtocol)


class TestRecordingDelay:
    def test_records(self):
        delay = RecordingDelay()
        delay.delay(1)
        delay.delay(2.5)
        assert delay.delays == [1.0, 2.5]
        assert delay.count == 2
        assert delay.total == 3.5

    def test_clear(self):
        delay = RecordingDelay()
        delay.delay(1)
        delay.clear()
        assert delay.count == 0
        assert isinstance(delay, DelayProtocol)
