"""Unit tests for EmailActions and ActionSession."""

import asyncio
import threading

import pytest

from src.actions import (
    ActionSession,
    DirectorySaver,
    EmailActions,
    Notification,
    NotificationVariant,
    SelectionState,
    notification_for_error,
)
from src.eml import EmlDocument
from src.errors import (
    InvalidRecipientError,
    NoSelectionError,
    PermissionDeniedError,
    RecordNotFoundError,
    TransportFailureError,
)
from src.forwarding import ForwardTransport
from src.permissions import CapabilityEvaluator, PermissionGate, StaticCapabilityEvaluator
from src.records import InMemoryRecordSource
from tests.record_test_helpers import make_attachment, make_record

ALL_CAPABILITIES = {"Allow_Email_Download", "Allow_Email_Forward"}


class RecordingTransport(ForwardTransport):
    def __init__(self, failures=None, gate: threading.Event | None = None):
        self.failures = failures or {}
        self.calls: list[str] = []
        self.gate = gate

    def send_forward(self, record_id, recipient):
        if self.gate is not None:
            self.gate.wait(timeout=5)
        self.calls.append(record_id)
        if record_id in self.failures:
            raise self.failures[record_id]
        return f"sent-{record_id}"


class FailingEvaluator(CapabilityEvaluator):
    def evaluate(self, name):
        raise RuntimeError("permission backend unavailable")


def _actions(granted=ALL_CAPABILITIES, transport=None, evaluator=None):
    source = InMemoryRecordSource(
        [
            make_record(id="id1", attachments=[make_attachment()]),
            make_record(id="id2", subject="Second"),
        ]
    )
    return EmailActions(
        source=source,
        transport=transport or RecordingTransport(),
        gate=PermissionGate(evaluator or StaticCapabilityEvaluator(granted)),
    )


class TestSelectionState:
    def test_unique_ordered_membership(self):
        selection = SelectionState(["b", "a", "b"])
        selection.add("c")
        selection.add("a")
        assert selection.ids == ["b", "a", "c"]
        assert len(selection) == 3
        assert "a" in selection

    def test_toggle_and_remove(self):
        selection = SelectionState()
        assert selection.toggle("x") is True
        assert selection.toggle("x") is False
        selection.add("y")
        selection.remove("y")
        selection.remove("missing")
        assert list(selection) == []

    def test_replace_and_clear(self):
        selection = SelectionState(["a"])
        selection.replace(["c", "d", "c"])
        assert selection.ids == ["c", "d"]
        selection.clear()
        assert len(selection) == 0


class TestNotificationForError:
    def test_permission_denied(self):
        notification = notification_for_error(
            PermissionDeniedError("Allow_Email_Download", action="download")
        )
        assert notification.title == "Access Denied"
        assert notification.variant == NotificationVariant.ERROR

    def test_permission_unverified_is_plain_error(self):
        notification = notification_for_error(
            PermissionDeniedError("Allow_Email_Download", detail="timeout")
        )
        assert notification.title == "Error"
        assert notification.message == "Unable to verify permissions: timeout"

    def test_validation_errors_are_warnings(self):
        assert notification_for_error(NoSelectionError()).variant == NotificationVariant.WARNING
        assert (
            notification_for_error(InvalidRecipientError("x")).variant
            == NotificationVariant.WARNING
        )

    def test_raw_exception_reduced(self):
        notification = notification_for_error(ValueError("boom"))
        assert notification == Notification.error("boom")


class TestEmailActions:
    def test_download_one(self):
        document = asyncio.run(_actions().download_one("id1"))
        assert document.record_id == "id1"

    def test_download_one_not_found(self):
        with pytest.raises(RecordNotFoundError):
            asyncio.run(_actions().download_one("nope"))

    def test_download_requires_permission(self):
        with pytest.raises(PermissionDeniedError):
            asyncio.run(_actions(granted={"Allow_Email_Forward"}).download_one("id1"))

    def test_download_many(self):
        results = asyncio.run(_actions().download_many(["id2", "nope", "id1"]))
        assert [r.record_id for r in results] == ["id2", "nope", "id1"]
        assert [r.ok for r in results] == [True, False, True]

    def test_forward_requires_permission(self):
        transport = RecordingTransport()
        actions = _actions(granted={"Allow_Email_Download"}, transport=transport)
        with pytest.raises(PermissionDeniedError):
            asyncio.run(actions.forward_selected(["id1"], "a@b.com"))
        assert transport.calls == []

    def test_forward_selected(self):
        outcome = asyncio.run(_actions().forward_selected(["id1", "id2"], "a@b.com"))
        assert outcome.succeeded == 2


class TestActionSession:
    def test_download_single_saves_file(self):
        saved: list[EmlDocument] = []
        session = ActionSession(_actions(), save_file=saved.append)

        notification = asyncio.run(session.download(["id1"]))

        assert notification == Notification.success("Email downloaded successfully")
        assert [d.record_id for d in saved] == ["id1"]

    def test_download_single_error_reported(self):
        session = ActionSession(_actions(), save_file=lambda d: None)
        notification = asyncio.run(session.download(["nope"]))
        assert notification.variant == NotificationVariant.ERROR
        assert notification.message == "Email 'nope' not found"

    def test_download_many_all_succeed(self):
        saved: list[EmlDocument] = []
        session = ActionSession(_actions(), save_file=saved.append)
        notification = asyncio.run(session.download(["id1", "id2"]))
        assert notification.message == "2 emails downloaded successfully"
        assert len(saved) == 2

    def test_download_many_partial(self):
        session = ActionSession(_actions(), save_file=lambda d: None)
        notification = asyncio.run(session.download(["id1", "nope"]))
        assert notification.variant == NotificationVariant.WARNING
        assert notification.message == (
            "1 email(s) downloaded; 1 failed: Email 'nope' not found"
        )

    def test_download_many_all_fail(self):
        session = ActionSession(_actions(), save_file=lambda d: None)
        notification = asyncio.run(session.download(["x", "y"]))
        assert notification.variant == NotificationVariant.ERROR
        assert notification.message == "Email 'x' not found, Email 'y' not found"

    def test_download_without_selection(self):
        session = ActionSession(_actions(), save_file=lambda d: None)
        notification = asyncio.run(session.download([]))
        assert notification == Notification.warning(
            "Please select at least one email to download."
        )

    def test_download_denied(self):
        saved = []
        session = ActionSession(_actions(granted=set()), save_file=saved.append)
        notification = asyncio.run(session.download(["id1"]))
        assert notification.title == "Access Denied"
        assert saved == []

    def test_permission_checked_before_selection(self):
        session = ActionSession(_actions(granted=set()), save_file=lambda d: None)
        notification = asyncio.run(session.download([]))
        assert notification.title == "Access Denied"

        session = ActionSession(_actions(granted=set()), save_file=lambda d: None)
        notification = asyncio.run(session.forward([], "someone@example.com"))
        assert notification.title == "Access Denied"

    def test_permission_check_failure_reported(self):
        session = ActionSession(
            _actions(evaluator=FailingEvaluator()), save_file=lambda d: None
        )
        notification = asyncio.run(session.download(["id1"]))
        assert notification.message == (
            "Unable to verify permissions: permission backend unavailable"
        )

    def test_save_failure_reported(self):
        def broken_save(document):
            raise OSError("disk full")

        session = ActionSession(_actions(), save_file=broken_save)
        notification = asyncio.run(session.download(["id1"]))
        assert notification == Notification.error("disk full")

    def test_forward_success(self):
        session = ActionSession(_actions(), save_file=lambda d: None)
        notification = asyncio.run(session.forward(["id1", "id2"], "a@b.com"))
        assert notification == Notification.success("2 email(s) forwarded to a@b.com")

    def test_forward_partial_failure(self):
        transport = RecordingTransport(
            failures={"id2": TransportFailureError("id2", "rejected")}
        )
        session = ActionSession(_actions(transport=transport), save_file=lambda d: None)
        notification = asyncio.run(session.forward(["id1", "id2"], "a@b.com"))
        assert notification.variant == NotificationVariant.WARNING
        assert notification.message == (
            "1 email(s) forwarded to a@b.com; 1 failed: TransportFailure (rejected)"
        )

    def test_forward_all_failed(self):
        transport = RecordingTransport(failures={"id1": RecordNotFoundError("id1")})
        session = ActionSession(_actions(transport=transport), save_file=lambda d: None)
        notification = asyncio.run(session.forward(["id1"], "a@b.com"))
        assert notification.variant == NotificationVariant.ERROR

    def test_forward_invalid_recipient(self):
        session = ActionSession(_actions(), save_file=lambda d: None)
        notification = asyncio.run(session.forward(["id1"], ""))
        assert notification == Notification.warning(
            "Please enter a recipient email address."
        )

    def test_second_forward_while_in_progress_is_noop(self):
        release = threading.Event()
        transport = RecordingTransport(gate=release)
        session = ActionSession(_actions(transport=transport), save_file=lambda d: None)

        async def run():
            first = asyncio.ensure_future(session.forward(["id1"], "a@b.com"))
            await asyncio.sleep(0.05)
            assert session.is_busy("forward")
            second = await session.forward(["id1"], "a@b.com")
            release.set()
            return await first, second

        first, second = asyncio.run(run())

        assert first.variant == NotificationVariant.SUCCESS
        assert second is None
        assert transport.calls == ["id1"]
        assert not session.is_busy("forward")

    def test_result_after_close_is_discarded(self):
        release = threading.Event()
        transport = RecordingTransport(gate=release)
        session = ActionSession(_actions(transport=transport), save_file=lambda d: None)

        async def run():
            pending = asyncio.ensure_future(session.forward(["id1"], "a@b.com"))
            await asyncio.sleep(0.05)
            session.close()
            release.set()
            return await pending

        assert asyncio.run(run()) is None
        assert transport.calls == ["id1"]
        assert session.closed

    def test_closed_session_ignores_requests(self):
        saved = []
        session = ActionSession(_actions(), save_file=saved.append)
        session.close()
        assert asyncio.run(session.download(["id1"])) is None
        assert saved == []


class TestDirectorySaver:
    def test_writes_file(self, tmp_path):
        saver = DirectorySaver(tmp_path / "out")
        document = EmlDocument(record_id="a", content="Subject: x\r\n", file_name="x_a.eml", boundary="b")

        saver(document)

        path = tmp_path / "out" / "x_a.eml"
        assert path.read_bytes() == b"Subject: x\r\n"
        assert saver.saved == [path]

    def test_does_not_overwrite(self, tmp_path):
        saver = DirectorySaver(tmp_path)
        document = EmlDocument(record_id="a", content="1", file_name="x_a.eml", boundary="b")
        saver(document)
        saver(document)
        assert (tmp_path / "x_a (1).eml").exists()
        assert len(saver.saved) == 2

    def test_separate_savers_do_not_clobber(self, tmp_path):
        first = DirectorySaver(tmp_path)
        second = DirectorySaver(tmp_path)
        first(EmlDocument(record_id="a", content="first", file_name="x_a.eml", boundary="b"))
        second(EmlDocument(record_id="a", content="second", file_name="x_a.eml", boundary="b"))

        assert (tmp_path / "x_a.eml").read_bytes() == b"first"
        assert (tmp_path / "x_a (1).eml").read_bytes() == b"second"
        assert second.saved == [tmp_path / "x_a (1).eml"]

    def test_existing_file_left_untouched(self, tmp_path):
        (tmp_path / "x_a.eml").write_bytes(b"keep me")
        saver = DirectorySaver(tmp_path)
        saver(EmlDocument(record_id="a", content="new", file_name="x_a.eml", boundary="b"))

        assert (tmp_path / "x_a.eml").read_bytes() == b"keep me"
        assert saver.saved == [tmp_path / "x_a (1).eml"]
