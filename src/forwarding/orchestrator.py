"""ForwardingOrchestrator - forwards a selection of emails to one recipient."""

import asyncio
import logging
from typing import Iterable

from src.errors import EmailActionError, TransportFailureError

from .models import ForwardItemResult, Outcome
from .transport import ForwardTransport
from .validation import normalize_selection, validate_recipient

logger = logging.getLogger(__name__)


class ForwardingOrchestrator:
    """Forwards each selected email as an independent unit of work.

    Selection and recipient are validated before anything is sent. After
    that, a failure on one email is recorded on its result and the rest
    are still attempted. Forwarding is not idempotent: calling it twice
    sends twice.

    Example:
        orchestrator = ForwardingOrchestrator(GmailForwardTransport())
        outcome = await orchestrator.forward(["id1", "id2"], "x@y.com")
        print(outcome.summary)
    """

    def __init__(self, transport: ForwardTransport, max_concurrency: int = 1):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._transport = transport
        self._max_concurrency = max_concurrency

    async def _forward_item(
        self, record_id: str, recipient: str, semaphore: asyncio.Semaphore
    ) -> ForwardItemResult:
        async with semaphore:
            try:
                message_id = await asyncio.to_thread(
                    self._transport.send_forward, record_id, recipient
                )
            except EmailActionError as e:
                logger.warning("Could not forward email %s: %s", record_id, e.message)
                return ForwardItemResult(record_id=record_id, error=e)
            except Exception as e:
                logger.exception("Unexpected failure forwarding email %s", record_id)
                return ForwardItemResult(
                    record_id=record_id,
                    error=TransportFailureError(record_id, str(e) or type(e).__name__),
                )
        return ForwardItemResult(record_id=record_id, message_id=message_id)

    async def forward(self, ids: Iterable[str], recipient: str) -> Outcome:
        """Forward the selected emails.

        Args:
            ids: Selected record identifiers (duplicates are ignored).
            recipient: Destination email address.

        Returns:
            Outcome with per-email results and a one-line summary.

        Raises:
            NoSelectionError: If no ids are given.
            InvalidRecipientError: If the recipient is not an email address.
        """
        selection = normalize_selection(ids)
        recipient = validate_recipient(recipient)

        semaphore = asyncio.Semaphore(self._max_concurrency)
        results = await asyncio.gather(
            *(self._forward_item(record_id, recipient, semaphore) for record_id in selection)
        )
        outcome = Outcome(recipient=recipient, results=list(results))
        logger.info("%s", outcome.summary)
        return outcome
