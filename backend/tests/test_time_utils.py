import unittest

from crisis_updates.core.time_utils import MonotonicClock, format_utc, from_timestamp_ns


class TestMonotonicClock(unittest.TestCase):

    def test_follows_source_while_it_moves_forward(self):
        values = iter([10, 20, 30])
        clock = MonotonicClock(source=lambda: next(values))
        self.assertEqual([clock(), clock(), clock()], [10, 20, 30])

    def test_holds_last_value_when_source_steps_back(self):
        values = iter([100, 50, 120])
        clock = MonotonicClock(source=lambda: next(values))
        self.assertEqual([clock(), clock(), clock()], [100, 100, 120])

    def test_advance_to_sets_floor(self):
        clock = MonotonicClock(source=lambda: 5)
        clock.advance_to(40)
        self.assertEqual(clock(), 40)
        clock.advance_to(10)
        self.assertEqual(clock.last, 40)


class TestTimestampFormatting(unittest.TestCase):

    def test_from_timestamp_ns(self):
        dt = from_timestamp_ns(1_700_000_000_123_456_789)
        self.assertEqual(dt.year, 2023)
        self.assertEqual(dt.microsecond, 123456)
        self.assertEqual(dt.utcoffset().total_seconds(), 0)

    def test_format_utc(self):
        self.assertEqual(format_utc(0), "1970-01-01T00:00:00+00:00")
        self.assertIsNone(format_utc(None))


if __name__ == "__main__":
    unittest.main()
