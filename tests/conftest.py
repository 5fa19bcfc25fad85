"""Shared fixtures for calendar feed tests."""
import pytest


FEED_HEADER = b"""<?xml version='1.0' encoding='UTF-8'?>
<feed xmlns='http://www.w3.org/2005/Atom'
      xmlns:openSearch='http://a9.com/-/spec/opensearchrss/1.0/'
      xmlns:gCal='http://schemas.google.com/gCal/2005'
      xmlns:gd='http://schemas.google.com/g/2005'>
  <id>http://www.google.com/calendar/feeds/abc/public/full</id>
  <updated>2011-11-30T12:00:00.000Z</updated>
  <title type='text'>Community Calendar</title>
  <author><name>Community Office</name></author>
"""

FEED_FOOTER = b"</feed>\n"

BOARD_MEETING_ENTRY = b"""
  <entry>
    <id>http://www.google.com/calendar/feeds/abc/public/full/board1</id>
    <published>2011-11-20T10:00:00.000Z</published>
    <updated>2011-11-21T11:30:00.000Z</updated>
    <title type='text'>Board Meeting</title>
    <content type='text'>Monthly board meeting.</content>
    <author><name>Jane Doe</name><email>jane@example.com</email></author>
    <gCal:uid value='board1@google.com'/>
    <gd:where valueString='Town Hall, Room 2'/>
    <gd:when startTime='2011-12-05T18:00:00.000Z' endTime='2011-12-05T20:00:00.000Z'/>
  </entry>
"""

WINTER_FESTIVAL_ENTRY = b"""
  <entry>
    <id>http://www.google.com/calendar/feeds/abc/public/full/festival2</id>
    <published>2011-11-22T08:00:00.000Z</published>
    <updated>2011-11-25T09:15:00.000Z</updated>
    <title type='text'>Winter Festival &amp; Market</title>
    <content type='text'>Lights, music and food stalls.</content>
    <author><name>Parks Department</name></author>
    <gd:where valueString='Market Square'/>
    <gd:when startTime='2011-12-10' endTime='2011-12-12'/>
  </entry>
"""

ADVENT_MARKET_ENTRY = b"""
  <entry>
    <id>http://www.google.com/calendar/feeds/abc/public/full/advent0</id>
    <published>2011-11-01T08:00:00.000Z</published>
    <updated>2011-11-02T08:00:00.000Z</updated>
    <title type='text'>Advent Market</title>
    <content type='text'>Runs into December.</content>
    <author><name>Parks Department</name></author>
    <gd:where valueString='Church Square'/>
    <gd:when startTime='2011-11-28' endTime='2011-12-03'/>
  </entry>
"""


@pytest.fixture
def feed_xml():
    """Feed with two December events."""
    return FEED_HEADER + BOARD_MEETING_ENTRY + WINTER_FESTIVAL_ENTRY + FEED_FOOTER


@pytest.fixture
def overlap_feed_xml():
    """Feed led by a multi-day event that started before December."""
    return (
        FEED_HEADER + ADVENT_MARKET_ENTRY + BOARD_MEETING_ENTRY
        + WINTER_FESTIVAL_ENTRY + FEED_FOOTER
    )


@pytest.fixture
def empty_feed_xml():
    """Well-formed feed without entries."""
    return FEED_HEADER + FEED_FOOTER
