"""Tests for progress formatting."""

from datetime import UTC, datetime, timedelta, timezone

from cfn_stack.models import StackEvent
from cfn_stack.progress import (
    SEPARATOR,
    Banner,
    ConsoleSink,
    EventLine,
    Separator,
    format_banner,
    format_event,
    format_reason,
    format_record,
    format_time,
)

TS = datetime(2024, 5, 1, 9, 5, 7, 123000, tzinfo=UTC)


def _event(reason: str | None = None) -> StackEvent:
    return StackEvent(
        timestamp=TS,
        event_id="e1",
        resource_type="AWS::IAM::Role",
        logical_resource_id="SomeRole",
        resource_status="CREATE_FAILED",
        status_reason=reason,
    )


class TestFormatTime:
    def test_utc(self) -> None:
        assert format_time(TS) == "09:05:07"

    def test_converts_to_utc(self) -> None:
        cet = timezone(timedelta(hours=2))
        assert format_time(datetime(2024, 5, 1, 11, 5, 7, tzinfo=cet)) == "09:05:07"


class TestFormatRecords:
    def test_banner(self) -> None:
        text = format_banner(Banner(TS, "Updating stack", "test-stack"))
        assert text == '\n09:05:07 Updating stack "test-stack"\n========'

    def test_separator(self) -> None:
        assert SEPARATOR == "========"
        assert format_record(Separator()) == "========"

    def test_event_without_reason(self) -> None:
        assert format_event(_event()) == '09:05:07 CREATE_FAILED AWS::IAM::Role "SomeRole"'

    def test_event_with_reason(self) -> None:
        lines = format_event(_event("Role already exists")).split("\n")
        assert lines[0] == '09:05:07 CREATE_FAILED AWS::IAM::Role "SomeRole"'
        assert lines[1] == "         Role already exists"

    def test_record_dispatch(self) -> None:
        event = _event()
        assert format_record(EventLine(event)) == format_event(event)
        banner = Banner(TS, "Deleting stack", "s")
        assert format_record(banner) == format_banner(banner)


class TestFormatReason:
    def test_empty(self) -> None:
        assert format_reason(None) == ""
        assert format_reason("") == ""

    def test_long_reason_is_wrapped_and_indented(self) -> None:
        reason = " ".join(["word"] * 60)
        lines = format_reason(reason).split("\n")
        assert len(lines) > 1
        for line in lines:
            assert line.startswith(" " * 9)
            assert len(line) <= 99
        assert " ".join(line.strip() for line in lines) == reason


class TestConsoleSink:
    def test_writes_lines(self, capsys) -> None:
        sink = ConsoleSink()
        sink.emit(Banner(TS, "Creating new stack", "test-stack"))
        sink.emit(EventLine(_event()))
        sink.emit(Separator())

        out = capsys.readouterr().out
        assert out == (
            "\n"
            '09:05:07 Creating new stack "test-stack"\n'
            "========\n"
            '09:05:07 CREATE_FAILED AWS::IAM::Role "SomeRole"\n'
            "========\n"
        )
