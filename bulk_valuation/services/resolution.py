import logging
import time

from ..core.metrics import record_row
from ..data.base import ValuationClient, Selector, Unresolvable, ResolutionOutcome, InvalidSelector, TransportError

logger = logging.getLogger(__name__)

async def resolve(client: ValuationClient, selector: Selector, deadline: float, index: int) -> ResolutionOutcome:
    """
    Resolve one bulk row with a single bounded attempt. Unresolvable rows
    never reach the network. Logs one line per row (1-based ``index``).
    """
    start = time.perf_counter()
    if isinstance(selector, Unresolvable):
        outcome: ResolutionOutcome = InvalidSelector()
    else:
        try:
            outcome = await client.lookup(selector, deadline)
        except Exception as exc:
            # Any client, not just HttpValuation; the row still gets an output
            logger.exception("bulk row %d lookup raised", index, extra={"row_index": index})
            outcome = TransportError(reason=f"{type(exc).__name__}: {exc}")
    elapsed = time.perf_counter() - start

    extra = {
        "row_index": index,
        "match_status": outcome.match_status,
        "elapsed_ms": int(elapsed * 1000),
    }
    if isinstance(outcome, TransportError):
        logger.warning("bulk row %d %s (%s)", index, outcome.match_status, outcome.reason, extra=extra)
    else:
        logger.info("bulk row %d %s", index, outcome.match_status, extra=extra)
    record_row(outcome.match_status, elapsed)
    return outcome
