"""Batch retrieval of email records as EML documents."""

import asyncio
import logging
from typing import Sequence

from src.eml import EmlDocument, encode
from src.errors import EmailActionError, TransportFailureError
from src.records import RecordSource

from .models import RetrievalResult

logger = logging.getLogger(__name__)


class BatchRetriever:
    """Fetches records by id and encodes each as an EML document.

    One result is returned per requested id, in request order. A failure
    on one id is recorded on that item and does not abort the batch.

    Example:
        retriever = BatchRetriever(GmailRecordSource())
        results = await retriever.retrieve(["id1", "id2"])
        for result in results:
            print(result.record_id, result.ok)
    """

    def __init__(self, source: RecordSource, max_concurrency: int = 1):
        """Initialize the retriever.

        Args:
            source: Record storage to fetch from.
            max_concurrency: Maximum fetches in flight at once. Keep at 1 for
                sources whose client is not thread-safe.
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._source = source
        self._max_concurrency = max_concurrency

    def _fetch_and_encode(self, record_id: str) -> EmlDocument:
        record = self._source.fetch_email_record(record_id)
        return encode(record)

    async def _retrieve_item(
        self, record_id: str, semaphore: asyncio.Semaphore
    ) -> RetrievalResult:
        async with semaphore:
            try:
                document = await asyncio.to_thread(self._fetch_and_encode, record_id)
            except EmailActionError as e:
                logger.warning("Could not retrieve email %s: %s", record_id, e.message)
                return RetrievalResult(record_id=record_id, error=e)
            except Exception as e:
                logger.exception("Unexpected failure retrieving email %s", record_id)
                return RetrievalResult(
                    record_id=record_id,
                    error=TransportFailureError(record_id, str(e) or type(e).__name__),
                )
        logger.debug("Encoded email %s as %s", record_id, document.file_name)
        return RetrievalResult(record_id=record_id, document=document)

    async def retrieve(self, ids: Sequence[str]) -> list[RetrievalResult]:
        """Retrieve and encode records, preserving request order.

        Args:
            ids: Record identifiers in the order results should be returned.

        Returns:
            One RetrievalResult per id. Empty input yields an empty list.
        """
        if not ids:
            return []
        semaphore = asyncio.Semaphore(self._max_concurrency)
        results = await asyncio.gather(
            *(self._retrieve_item(record_id, semaphore) for record_id in ids)
        )
        failed = sum(1 for r in results if not r.ok)
        logger.info("Retrieved %d emails (%d failed)", len(results) - failed, failed)
        return list(results)

    async def retrieve_one(self, record_id: str) -> EmlDocument:
        """Retrieve a single record, raising its error directly.

        Raises:
            EmailActionError: The item's error if retrieval failed.
        """
        results = await self.retrieve([record_id])
        return results[0].unwrap()
