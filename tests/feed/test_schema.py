"""Tests for feed schemas and revisions."""

import pytest

from tradelog.core.errors import ConfigurationError, ErrorCodes
from tradelog.feed.decoder import FeedTable
from tradelog.feed.schema import (
    ABSOLUTE,
    CLASSIC,
    FeedSchema,
    TimeEncoding,
    available_schemas,
    get_schema,
    register_schema,
)


class TestRevisions:
    def test_builtin_revisions(self):
        assert get_schema("classic") is CLASSIC
        assert get_schema("absolute") is ABSOLUTE
        assert CLASSIC.time_encoding is TimeEncoding.TIME_OF_DAY
        assert ABSOLUTE.time_encoding is TimeEncoding.ABSOLUTE

    def test_unknown_revision(self):
        with pytest.raises(ConfigurationError) as exc_info:
            get_schema("v99")
        assert exc_info.value.error_code is ErrorCodes.CONFIG_UNKNOWN_REVISION

    def test_register(self):
        schema = FeedSchema(name="test-register", columns={"date": "Day"})
        register_schema(schema)
        assert get_schema("test-register") is schema
        assert "test-register" in available_schemas()


class TestFeedSchema:
    def test_label_of_unmapped_field(self):
        schema = FeedSchema(name="partial", columns={"date": "Date"})
        assert schema.label("date") == "Date"
        assert schema.label("on_work") is None

    def test_validate_columns(self):
        table = FeedTable(labels=["Date", "Symbol", "Net Total"])
        report = CLASSIC.validate_columns(table)

        assert "date" in report.present
        assert "net_total" in report.present
        assert set(report.missing_required) == {"time_of_entry", "time_of_exit"}
        assert "on_work" in report.missing_optional
        assert not report.is_complete
