"""Unit tests for the forwarding module."""

import asyncio
import base64
import email
from email import policy
from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from src.errors import (
    InvalidRecipientError,
    NoSelectionError,
    RecordNotFoundError,
    TransportFailureError,
)
from src.forwarding import (
    ForwardingOrchestrator,
    ForwardItemResult,
    ForwardTransport,
    GmailForwardTransport,
    Outcome,
    forward_subject,
    is_valid_recipient,
    normalize_selection,
    validate_recipient,
)
from src.records import InMemoryRecordSource
from tests.record_test_helpers import make_attachment, make_record


class FakeTransport(ForwardTransport):
    """Transport that fails for configured ids and records every call."""

    def __init__(self, failures=None):
        self.failures = failures or {}
        self.calls: list[tuple[str, str]] = []

    def send_forward(self, record_id, recipient):
        self.calls.append((record_id, recipient))
        if record_id in self.failures:
            raise self.failures[record_id]
        return f"sent-{record_id}"


class TestValidation:
    @pytest.mark.parametrize(
        "recipient", ["a@b.com", "first.last@sub.example.org", "  x@y  "]
    )
    def test_valid_recipients(self, recipient):
        assert is_valid_recipient(recipient)

    @pytest.mark.parametrize(
        "recipient",
        [None, "", "   ", "not-an-email", "@example.com", "user@", "a@b@c", "a b@c.com"],
    )
    def test_invalid_recipients(self, recipient):
        assert not is_valid_recipient(recipient)

    def test_validate_recipient_strips(self):
        assert validate_recipient("  a@b.com ") == "a@b.com"

    def test_validate_recipient_raises(self):
        with pytest.raises(InvalidRecipientError):
            validate_recipient("nope")

    def test_normalize_selection_dedupes_in_order(self):
        assert normalize_selection(["b", "a", "b", "", "c"]) == ["b", "a", "c"]

    def test_normalize_selection_empty(self):
        with pytest.raises(NoSelectionError) as exc_info:
            normalize_selection([], action="download")
        assert "download" in exc_info.value.message


class TestOutcome:
    def test_all_succeeded(self):
        outcome = Outcome(
            recipient="x@y.com",
            results=[ForwardItemResult("a", "m1"), ForwardItemResult("b", "m2")],
        )
        assert outcome.succeeded == 2
        assert outcome.failed == 0
        assert outcome.summary == "2 email(s) forwarded to x@y.com"

    def test_shared_reason_collapsed(self):
        outcome = Outcome(
            recipient="x@y.com",
            results=[
                ForwardItemResult("a", "m1"),
                ForwardItemResult("b", error=RecordNotFoundError("b")),
                ForwardItemResult("c", error=RecordNotFoundError("c")),
            ],
        )
        assert outcome.summary == "1 email(s) forwarded to x@y.com; 2 failed: RecordNotFound"

    def test_distinct_reasons_listed(self):
        outcome = Outcome(
            recipient="x@y.com",
            results=[
                ForwardItemResult("b", error=RecordNotFoundError("b")),
                ForwardItemResult("c", error=TransportFailureError("c", "quota exceeded")),
            ],
        )
        assert outcome.summary == (
            "0 email(s) forwarded to x@y.com; 2 failed: "
            "RecordNotFound; TransportFailure (quota exceeded)"
        )

    def test_to_dict(self):
        outcome = Outcome(
            recipient="x@y.com",
            results=[ForwardItemResult("b", error=RecordNotFoundError("b"))],
        )
        data = outcome.to_dict()
        assert data["failed"] == 1
        assert data["results"][0]["error"] == "Email 'b' not found"


class TestForwardingOrchestrator:
    def test_empty_selection_fails_before_send(self):
        transport = FakeTransport()
        with pytest.raises(NoSelectionError):
            asyncio.run(ForwardingOrchestrator(transport).forward([], "a@b.com"))
        assert transport.calls == []

    def test_invalid_recipient_fails_before_send(self):
        transport = FakeTransport()
        with pytest.raises(InvalidRecipientError):
            asyncio.run(ForwardingOrchestrator(transport).forward(["id1"], "not-an-email"))
        assert transport.calls == []

    def test_partial_failure(self):
        transport = FakeTransport(
            failures={"id2": TransportFailureError("id2", "mailbox unavailable")}
        )
        outcome = asyncio.run(
            ForwardingOrchestrator(transport).forward(["id1", "id2"], "a@b.com")
        )

        assert outcome.succeeded == 1
        assert outcome.failed == 1
        assert "1 email(s) forwarded to a@b.com" in outcome.summary
        assert "TransportFailure (mailbox unavailable)" in outcome.summary
        assert outcome.results[0].message_id == "sent-id1"
        assert transport.calls == [("id1", "a@b.com"), ("id2", "a@b.com")]

    def test_failure_does_not_stop_remaining_ids(self):
        transport = FakeTransport(failures={"id1": RecordNotFoundError("id1")})
        outcome = asyncio.run(
            ForwardingOrchestrator(transport).forward(["id1", "id2", "id3"], "a@b.com")
        )
        assert [c[0] for c in transport.calls] == ["id1", "id2", "id3"]
        assert outcome.succeeded == 2

    def test_unexpected_exception_recorded_as_transport_failure(self):
        transport = FakeTransport(failures={"id1": TimeoutError("timed out")})
        outcome = asyncio.run(ForwardingOrchestrator(transport).forward(["id1"], "a@b.com"))

        error = outcome.results[0].error
        assert isinstance(error, TransportFailureError)
        assert error.detail == "timed out"

    def test_duplicates_sent_once_per_call(self):
        transport = FakeTransport()
        asyncio.run(ForwardingOrchestrator(transport).forward(["id1", "id1"], "a@b.com"))
        assert transport.calls == [("id1", "a@b.com")]

    def test_not_idempotent_across_calls(self):
        transport = FakeTransport()
        orchestrator = ForwardingOrchestrator(transport)
        asyncio.run(orchestrator.forward(["id1"], "a@b.com"))
        asyncio.run(orchestrator.forward(["id1"], "a@b.com"))
        assert len(transport.calls) == 2

    def test_recipient_stripped(self):
        transport = FakeTransport()
        outcome = asyncio.run(
            ForwardingOrchestrator(transport).forward(["id1"], " a@b.com ")
        )
        assert outcome.recipient == "a@b.com"
        assert transport.calls == [("id1", "a@b.com")]


class TestGmailForwardTransport:
    @pytest.fixture
    def service(self):
        service = MagicMock()
        service.users().messages().send().execute.return_value = {"id": "fwd1"}
        return service

    @pytest.fixture
    def source(self):
        record = make_record(id="rec1", attachments=[make_attachment()])
        return InMemoryRecordSource([record])

    def _sent_message(self, service):
        raw = service.users().messages().send.call_args.kwargs["body"]["raw"]
        return email.message_from_bytes(base64.urlsafe_b64decode(raw), policy=policy.default)

    def test_forward_subject(self):
        assert forward_subject("Hello") == "Fwd: Hello"
        assert forward_subject("FWD: Hello") == "FWD: Hello"
        assert forward_subject(None) == "Fwd: "

    def test_sends_eml_as_attachment(self, service, source):
        transport = GmailForwardTransport(source=source, service=service)

        assert transport.send_forward("rec1", "x@y.com") == "fwd1"

        sent = self._sent_message(service)
        assert sent["To"] == "x@y.com"
        assert sent["Subject"] == "Fwd: Quarterly report"

        attachments = list(sent.iter_attachments())
        assert len(attachments) == 1
        attached = attachments[0]
        assert attached.get_content_type() == "message/rfc822"
        assert attached.get_filename() == "Quarterly report_rec1.eml"

        original = attached.get_content()
        assert original["Subject"] == "Quarterly report"
        inner = list(original.iter_attachments())
        assert inner[0].get_filename() == "report.pdf"
        assert inner[0].get_payload(decode=True) == b"%PDF-1.4 fake pdf bytes"

    def test_unknown_record(self, service, source):
        transport = GmailForwardTransport(source=source, service=service)
        with pytest.raises(RecordNotFoundError):
            transport.send_forward("missing", "x@y.com")
        service.users().messages().send().execute.assert_not_called()

    def test_send_error_wrapped(self, service, source):
        resp = MagicMock()
        resp.status = 403
        resp.reason = "Forbidden"
        service.users().messages().send().execute.side_effect = HttpError(
            resp=resp, content=b"Forbidden"
        )
        transport = GmailForwardTransport(source=source, service=service)

        with pytest.raises(TransportFailureError) as exc_info:
            transport.send_forward("rec1", "x@y.com")

        assert exc_info.value.status_code == 403
        assert exc_info.value.record_id == "rec1"
