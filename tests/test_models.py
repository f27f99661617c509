"""
Tests for the message models decoded from backend JSON

Tests cover:
- Wire field aliases (ID/id, from, to, html)
- Timestamp decoding (epoch milliseconds and RFC 3339)
- Subject placeholder
- Missing and null optional fields
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from catchview.core.models import (
    NO_SUBJECT,
    MessageDetail,
    MessageSummary,
    display_subject,
    format_timestamp,
)

from .test_helpers import SAMPLE_TIMESTAMP, MailFixtureHelper


class TestMessageSummary:
    """Tests for MessageSummary decoding"""

    def test_wire_names_map_to_attributes(self):
        summary = MessageSummary.model_validate(MailFixtureHelper.summary())

        assert summary.id == "a"
        assert summary.subject == "Hi"
        assert summary.sender == "x@y.com"

    def test_lowercase_id_accepted(self):
        payload = MailFixtureHelper.summary()
        payload["id"] = payload.pop("ID")

        assert MessageSummary.model_validate(payload).id == "a"

    def test_numeric_id_coerced_to_string(self):
        summary = MessageSummary.model_validate(MailFixtureHelper.summary(ID=7))
        assert summary.id == "7"

    def test_epoch_milliseconds_timestamp(self):
        summary = MessageSummary.model_validate(MailFixtureHelper.summary())
        assert summary.received_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_rfc3339_timestamp(self):
        summary = MessageSummary.model_validate(
            MailFixtureHelper.summary(timestamp="2023-11-14T22:13:20.5+01:00")
        )
        assert summary.received_at.utcoffset().total_seconds() == 3600
        assert summary.received_at.microsecond == 500000

    def test_missing_id_rejected(self):
        payload = MailFixtureHelper.summary()
        del payload["ID"]

        with pytest.raises(ValidationError):
            MessageSummary.model_validate(payload)

    def test_summary_is_immutable(self):
        summary = MessageSummary.model_validate(MailFixtureHelper.summary())
        with pytest.raises(ValidationError):
            summary.subject = "changed"

    @pytest.mark.parametrize("subject", [None, ""])
    def test_absent_subject_uses_placeholder(self, subject):
        summary = MessageSummary.model_validate(MailFixtureHelper.summary(subject=subject))
        assert summary.display_subject == "(No subject)"

    def test_subject_key_missing_uses_placeholder(self):
        payload = MailFixtureHelper.summary()
        del payload["subject"]

        assert MessageSummary.model_validate(payload).display_subject == NO_SUBJECT

    def test_subject_rendered_verbatim(self):
        summary = MessageSummary.model_validate(MailFixtureHelper.summary(subject="[b]Re: <hi>[/b]"))
        assert summary.display_subject == "[b]Re: <hi>[/b]"


class TestMessageDetail:
    """Tests for MessageDetail decoding"""

    def test_wire_names_map_to_attributes(self):
        detail = MessageDetail.model_validate(MailFixtureHelper.detail(html=True, body="<p>x</p>"))

        assert detail.sender == "x@y.com"
        assert detail.recipients == ["z@w.com"]
        assert detail.is_html is True
        assert detail.body == "<p>x</p>"

    def test_recipient_order_preserved(self):
        detail = MessageDetail.model_validate(MailFixtureHelper.detail(to=["b@x.com", "a@x.com"]))
        assert detail.recipients == ["b@x.com", "a@x.com"]

    def test_null_fields_default(self):
        detail = MessageDetail.model_validate(MailFixtureHelper.detail(to=None, body=None))

        assert detail.recipients == []
        assert detail.body == ""

    def test_html_flag_defaults_to_plain(self):
        payload = MailFixtureHelper.detail()
        del payload["html"]

        assert MessageDetail.model_validate(payload).is_html is False

    def test_id_optional(self):
        assert MessageDetail.model_validate(MailFixtureHelper.detail()).id is None


class TestFormatting:
    """Tests for display helpers"""

    def test_display_subject(self):
        assert display_subject("Hello") == "Hello"
        assert display_subject("") == NO_SUBJECT
        assert display_subject(None) == NO_SUBJECT

    def test_format_timestamp_uses_local_time(self):
        moment = datetime.fromtimestamp(SAMPLE_TIMESTAMP / 1000, tz=timezone.utc)
        expected = moment.astimezone().strftime("%x %X")

        assert format_timestamp(moment) == expected
