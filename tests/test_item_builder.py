"""Unit tests for CalendarItemBuilder."""
import pytest

from processor.item_builder import CalendarItemBuilder
from processor.models import Options, RawEntry


DEC_5 = 1323043200  # 2011-12-05T00:00:00Z
DAY = 86400


@pytest.fixture
def builder():
    return CalendarItemBuilder(Options(timezone='UTC', date_format='%Y-%m-%d %H:%M'))


def make_entry(start, end, **kwargs):
    return RawEntry(start=start, end=end, **kwargs)


class TestMultiDay:
    """Test cases for the multi-day flag and the midnight correction."""

    def test_end_at_next_midnight_is_single_day(self, builder):
        """Test that an event ending at 00:00 of the next day stays on its own day."""
        event = builder.build(make_entry('2011-12-05T00:00:00.000Z', '2011-12-06T00:00:00.000Z'))

        assert event.from_timestamp == DEC_5
        assert event.to_timestamp == DEC_5 + DAY - 1
        assert event.multi_day is False
        assert event.formatted_from == '2011-12-05 00:00'
        assert event.formatted_to == '2011-12-05 23:59'

    def test_all_day_event(self, builder):
        """Test a single all-day event given as bare dates."""
        event = builder.build(make_entry('2011-12-05', '2011-12-06'))

        assert event.from_timestamp == DEC_5
        assert event.to_timestamp == DEC_5 + DAY - 1
        assert event.multi_day is False

    def test_three_day_event(self, builder):
        """Test that the correction keeps real multi-day events multi-day."""
        event = builder.build(make_entry('2011-12-05', '2011-12-08'))

        assert event.to_timestamp == DEC_5 + 3 * DAY - 1
        assert event.multi_day is True
        assert event.formatted_to == '2011-12-07 23:59'

    def test_overnight_event(self, builder):
        """Test an event crossing midnight without ending on it."""
        event = builder.build(make_entry('2011-12-05T20:00:00Z', '2011-12-06T02:00:00Z'))

        assert event.to_timestamp == DEC_5 + DAY + 2 * 3600
        assert event.multi_day is True

    def test_end_one_minute_past_midnight(self, builder):
        """Test that only a 00:00 end time is corrected."""
        event = builder.build(make_entry('2011-12-05T20:00:00Z', '2011-12-06T00:01:00Z'))

        assert event.to_timestamp == DEC_5 + DAY + 60
        assert event.multi_day is True

    def test_same_day_event(self, builder):
        """Test a regular event within one day."""
        event = builder.build(make_entry('2011-12-05T10:00:00Z', '2011-12-05T12:00:00Z'))

        assert event.multi_day is False
        assert event.formatted_from == '2011-12-05 10:00'
        assert event.formatted_to == '2011-12-05 12:00'

    def test_timezone_changes_day_boundary(self):
        """Test that day comparison happens in the configured timezone."""
        builder = CalendarItemBuilder(Options(timezone='Europe/Berlin', date_format='%d.%m.%Y %H:%M'))

        # 23:00 UTC is midnight in Berlin
        event = builder.build(make_entry('2011-12-05T10:00:00Z', '2011-12-05T23:00:00Z'))

        assert event.to_timestamp == DEC_5 + 23 * 3600 - 1
        assert event.multi_day is False
        assert event.formatted_from == '05.12.2011 11:00'
        assert event.formatted_to == '05.12.2011 23:59'


class TestBuild:
    """Test cases for field mapping."""

    def test_fields(self, builder):
        """Test mapping and sanitizing of all fields."""
        entry = RawEntry(
            title='  <b>Winter</b> Festival &amp; Market ',
            content='Lights, music and food stalls.',
            where='Market Square',
            start='2011-12-10T10:00:00.000+01:00',
            end='2011-12-10T18:00:00.000+01:00',
            published='2011-11-22T08:00:00.000Z',
            updated='2011-11-25T09:15:00.000Z',
            author='Parks Department',
            id=' http://www.google.com/calendar/feeds/abc/public/full/festival2 '
        )

        event = builder.build(entry)

        assert event.title == 'Winter Festival &amp; Market'
        assert event.description == '<p>Lights, music and food stalls.</p>'
        assert event.location == 'Market Square'
        assert event.author == 'Parks Department'
        assert event.formatted_from == '2011-12-10 09:00'
        assert event.formatted_to == '2011-12-10 17:00'
        assert event.created_timestamp == 1321948800
        assert event.modified_timestamp == 1322212500
        assert event.external_id == 'http://www.google.com/calendar/feeds/abc/public/full/festival2'

    def test_plain_description(self, builder):
        """Test description without HTML formatting."""
        event = builder.build(make_entry('2011-12-05', '2011-12-06', content='a & b'), as_html=False)

        assert event.description == 'a &amp; b'

    def test_missing_end_uses_start(self, builder):
        """Test entries without an end time."""
        event = builder.build(make_entry('2011-12-05T10:00:00Z', ''))

        assert event.to_timestamp == event.from_timestamp
        assert event.multi_day is False

    def test_missing_start_raises(self, builder):
        """Test that entries without a start time are rejected."""
        with pytest.raises(ValueError):
            builder.build(make_entry('', '2011-12-06'))

    def test_invalid_start_raises(self, builder):
        """Test that unparseable start times are rejected."""
        with pytest.raises(ValueError):
            builder.build(make_entry('next tuesday', ''))

    def test_missing_timestamps_default_to_zero(self, builder):
        """Test published/updated fallbacks."""
        event = builder.build(make_entry('2011-12-05', '2011-12-06'))

        assert event.created_timestamp == 0
        assert event.modified_timestamp == 0
        assert event.external_id == ''
