import asyncio
import logging
from itertools import islice
from typing import Sequence

from ..core.config import settings
from ..core.errors import InputError
from ..data.base import ValuationClient
from ..data.valuation_client import valuation_client
from ..schemas import InputRow, ResultRow
from .encoder import encode_rows
from .headers import decode_upload, parse_table
from .resolution import resolve
from .results import assemble_row
from .selector import resolve_selector

logger = logging.getLogger(__name__)

class BatchService:
    """
    Orchestrates one bulk upload:
      decode → parse → guard (empty / over limit) → per row: select → resolve → assemble → encode

    Rows are independent; a row's failure only ever shows up in its own
    ``match_status``. Output order always equals input order.
    """
    def __init__(
        self,
        client: ValuationClient | None = None,
        max_rows: int | None = None,
        deadline: float | None = None,
        concurrency: int | None = None,
    ):
        self.client = client if client is not None else valuation_client()
        self.max_rows = max_rows if max_rows is not None else settings.BATCH_MAX_ROWS
        self.deadline = deadline if deadline is not None else settings.BATCH_TIMEOUT_SECONDS
        self.concurrency = concurrency if concurrency is not None else settings.BATCH_CONCURRENCY

    def load(self, raw: bytes | str) -> list[InputRow]:
        """Parse the upload and enforce the row-count guards."""
        text = decode_upload(raw) if isinstance(raw, bytes) else raw
        # Never materialize more than one row past the limit
        rows = list(islice(parse_table(text), self.max_rows + 1))
        if not rows:
            raise InputError("empty_csv", "The uploaded file has no data rows.")
        if len(rows) > self.max_rows:
            raise InputError(
                "over_limit",
                f"Batch limit is {self.max_rows:,} rows. Please upload a smaller file.",
            )
        return rows

    async def _process_one(self, row: InputRow, index: int) -> ResultRow:
        selector = resolve_selector(row)
        outcome = await resolve(self.client, selector, self.deadline, index)
        return assemble_row(row, outcome)

    async def process(self, rows: Sequence[InputRow]) -> list[ResultRow]:
        if self.concurrency <= 1:
            results = []
            for i, row in enumerate(rows, start=1):
                results.append(await self._process_one(row, i))
            return results

        sem = asyncio.Semaphore(self.concurrency)

        async def bounded(row: InputRow, index: int) -> ResultRow:
            async with sem:
                return await self._process_one(row, index)

        # gather returns in submission order regardless of completion order
        return list(await asyncio.gather(
            *(bounded(row, i) for i, row in enumerate(rows, start=1))
        ))

    async def run(self, raw: bytes | str) -> str:
        rows = self.load(raw)
        logger.info("bulk batch started: %d rows", len(rows))
        results = await self.process(rows)
        matched = sum(1 for r in results if r.match_status == "matched")
        logger.info("bulk batch finished: %d rows, %d matched", len(results), matched)
        return encode_rows(results)
