"""Unit tests for the action item extractor."""
import sys
sys.path.insert(0, 'backend')

import logging
from services.action_items import extract_action_items, strip_action_items, PROGRESS_MARKER


class TestExtractActionItems:
    """Test suite for extract_action_items."""

    def test_single_item(self):
        """Test one well-formed item is parsed with a synthesized id."""
        items = extract_action_items('PROGRESS_ITEMS:[{"title":"A","description":"B","category":"C"}]')

        assert len(items) == 1
        assert items[0].title == "A"
        assert items[0].description == "B"
        assert items[0].category == "C"
        assert items[0].completed is False
        assert items[0].id

    def test_marker_after_reply_text(self):
        """Test the marker may follow arbitrary reply text."""
        reply = (
            "You should register first.\n\n"
            'PROGRESS_ITEMS: [\n  {"title": "Register", "description": "Use geauxBIZ", "category": "Legal"},\n'
            '  {"title": "Get an EIN", "description": "IRS website", "category": "Legal"}\n]'
        )
        items = extract_action_items(reply)

        assert [item.title for item in items] == ["Register", "Get an EIN"]

    def test_ids_are_unique_and_use_timestamp(self):
        """Test ids combine the timestamp with the item index."""
        reply = 'PROGRESS_ITEMS:[{"title":"A"},{"title":"B"},{"title":"C"}]'

        items = extract_action_items(reply, timestamp_ms=1700000000000)

        assert [item.id for item in items] == ["1700000000000-0", "1700000000000-1", "1700000000000-2"]

    def test_no_marker_returns_empty(self):
        """Test a reply without the marker is not an error."""
        assert extract_action_items("Just a normal answer [with brackets].") == []

    def test_empty_reply(self):
        assert extract_action_items("") == []

    def test_malformed_json_returns_empty(self, caplog):
        """Test malformed JSON is swallowed and logged."""
        with caplog.at_level(logging.ERROR, logger="services.action_items"):
            items = extract_action_items("PROGRESS_ITEMS:[not valid json]")

        assert items == []
        assert any(record.levelno == logging.ERROR for record in caplog.records)

    def test_marker_without_array(self):
        """Test a marker with nothing parseable after it."""
        assert extract_action_items("PROGRESS_ITEMS: none today") == []

    def test_array_of_non_objects(self):
        """Test array entries that are not objects are skipped."""
        assert extract_action_items('PROGRESS_ITEMS: ["only", "strings"]') == []

    def test_brackets_before_marker_are_ignored(self):
        """Test only text after the marker is considered."""
        reply = 'See [1] below.\nPROGRESS_ITEMS:[{"title":"A","description":"B"}]'

        items = extract_action_items(reply)

        assert len(items) == 1
        assert items[0].category is None

    def test_items_without_title_are_skipped(self):
        reply = 'PROGRESS_ITEMS:[{"description":"no title"},{"title":"Kept"}]'

        items = extract_action_items(reply)

        assert [item.title for item in items] == ["Kept"]
        assert items[0].id.endswith("-0")
        assert items[0].description == ""

    def test_nested_brackets_in_descriptions(self):
        """Test the last closing bracket bounds the array."""
        reply = 'PROGRESS_ITEMS:[{"title":"Compare [SBA] loans","description":"7(a) vs [504]"}]'

        items = extract_action_items(reply)

        assert items[0].title == "Compare [SBA] loans"


class TestStripActionItems:
    """Test suite for strip_action_items."""

    def test_strips_trailing_section(self):
        reply = f'Here is advice.\n\n{PROGRESS_MARKER}[{{"title":"A"}}]'
        assert strip_action_items(reply) == "Here is advice."

    def test_without_marker(self):
        assert strip_action_items("  Plain reply.  ") == "Plain reply."
