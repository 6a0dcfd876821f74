"""EmailActions - permission-gated download and forwarding entry points."""

import logging
from typing import Iterable, Sequence

from src.eml import EmlDocument
from src.forwarding import ForwardingOrchestrator, ForwardTransport, Outcome
from src.permissions import Capability, PermissionGate
from src.records import RecordSource
from src.retrieval import BatchRetriever, RetrievalResult

logger = logging.getLogger(__name__)


class EmailActions:
    """Core operations exposed to the UI layer.

    Every operation checks its capability through the session's
    permission gate before doing any work.
    """

    def __init__(
        self,
        source: RecordSource,
        transport: ForwardTransport,
        gate: PermissionGate,
        max_concurrency: int = 1,
    ):
        self._gate = gate
        self._retriever = BatchRetriever(source, max_concurrency=max_concurrency)
        self._orchestrator = ForwardingOrchestrator(transport, max_concurrency=max_concurrency)

    @property
    def gate(self) -> PermissionGate:
        return self._gate

    async def download_one(self, record_id: str) -> EmlDocument:
        """Encode a single email for download.

        Raises:
            PermissionDeniedError: If downloading is not allowed.
            EmailActionError: If the email cannot be retrieved or encoded.
        """
        await self._gate.require(Capability.DOWNLOAD)
        return await self._retriever.retrieve_one(record_id)

    async def download_many(self, ids: Sequence[str]) -> list[RetrievalResult]:
        """Encode several emails for download, one result per id in order.

        Raises:
            PermissionDeniedError: If downloading is not allowed.
        """
        await self._gate.require(Capability.DOWNLOAD)
        return await self._retriever.retrieve(list(ids))

    async def forward_selected(self, ids: Iterable[str], recipient: str) -> Outcome:
        """Forward the selected emails to a recipient.

        Raises:
            PermissionDeniedError: If forwarding is not allowed.
            NoSelectionError: If nothing is selected.
            InvalidRecipientError: If the recipient is not an email address.
        """
        await self._gate.require(Capability.FORWARD)
        return await self._orchestrator.forward(ids, recipient)
