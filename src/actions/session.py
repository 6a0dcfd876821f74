"""ActionSession - one UI session driving downloads and forwards."""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional

from src.eml import EmlDocument
from src.errors import (
    EmailActionError,
    InvalidRecipientError,
    NoSelectionError,
    PermissionDeniedError,
    reduce_errors,
)
from src.forwarding import normalize_selection
from src.permissions import Capability

from .models import Notification
from .service import EmailActions

logger = logging.getLogger(__name__)

SaveFile = Callable[[EmlDocument], None]

DOWNLOAD = "download"
FORWARD = "forward"


def notification_for_error(error: Exception) -> Notification:
    """Turn an action failure into the single message shown to the user."""
    message = reduce_errors(error)
    if isinstance(error, PermissionDeniedError) and not error.detail:
        return Notification.error(message, title="Access Denied")
    if isinstance(error, (NoSelectionError, InvalidRecipientError)):
        return Notification.warning(message)
    return Notification.error(message)


class ActionSession:
    """Runs user-triggered actions for one screen.

    While an action of one kind is running, a second request of the same
    kind is ignored and returns None. After ``close()`` the session is
    finished: new requests are ignored and results that arrive later are
    discarded instead of being saved or reported. Backend work already in
    flight is not cancelled.

    Example:
        session = ActionSession(actions, save_file=write_to_disk)
        notification = await session.download(["id1"])
        if notification:
            print(notification.title, notification.message)
    """

    def __init__(self, actions: EmailActions, save_file: SaveFile):
        self._actions = actions
        self._save_file = save_file
        self._in_progress: set[str] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def is_busy(self, kind: str) -> bool:
        return kind in self._in_progress

    def close(self) -> None:
        """End the session. Pending results will be discarded."""
        self._closed = True

    async def _run(
        self, kind: str, action: Callable[[], Awaitable[Notification]]
    ) -> Optional[Notification]:
        if self._closed:
            logger.debug("Ignoring %s request: session closed", kind)
            return None
        if kind in self._in_progress:
            logger.debug("Ignoring %s request: already in progress", kind)
            return None

        self._in_progress.add(kind)
        try:
            notification = await action()
        except EmailActionError as e:
            logger.warning("%s failed: %s", kind.capitalize(), e.message)
            notification = notification_for_error(e)
        except Exception as e:
            logger.exception("%s failed unexpectedly", kind.capitalize())
            notification = notification_for_error(e)
        finally:
            self._in_progress.discard(kind)

        if self._closed:
            logger.info("Discarding %s result: session closed", kind)
            return None
        return notification

    async def _save(self, document: EmlDocument) -> bool:
        if self._closed:
            return False
        await asyncio.to_thread(self._save_file, document)
        return True

    async def _download(self, ids: list[str]) -> Notification:
        await self._actions.gate.require(Capability.DOWNLOAD)
        selection = normalize_selection(ids, action=DOWNLOAD)

        if len(selection) == 1:
            document = await self._actions.download_one(selection[0])
            await self._save(document)
            return Notification.success("Email downloaded successfully")

        results = await self._actions.download_many(selection)
        saved = 0
        errors = []
        for result in results:
            if result.ok:
                if await self._save(result.document):
                    saved += 1
            else:
                errors.append(result.error)

        if not errors:
            return Notification.success(f"{saved} emails downloaded successfully")
        if not saved:
            return Notification.error(reduce_errors(errors))
        return Notification.warning(
            f"{saved} email(s) downloaded; {len(errors)} failed: {reduce_errors(errors)}"
        )

    async def _forward(self, ids: Iterable[str], recipient: str) -> Notification:
        outcome = await self._actions.forward_selected(ids, recipient)
        if outcome.failed == 0:
            return Notification.success(outcome.summary)
        if outcome.succeeded == 0:
            return Notification.error(outcome.summary)
        return Notification.warning(outcome.summary)

    async def download(self, ids: Iterable[str]) -> Optional[Notification]:
        """Download the selected emails through the save-file callback."""
        ids = list(ids)
        return await self._run(DOWNLOAD, lambda: self._download(ids))

    async def forward(self, ids: Iterable[str], recipient: str) -> Optional[Notification]:
        """Forward the selected emails to a recipient."""
        ids = list(ids)
        return await self._run(FORWARD, lambda: self._forward(ids, recipient))
