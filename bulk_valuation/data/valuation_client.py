import asyncio
import logging
from datetime import date, timedelta
from typing import Union

import httpx
from pydantic import ValidationError

from .base import (
    ValuationClient, AddressSelector, ParcelSelector, ResolutionOutcome,
    Matched, NoMatch, UpstreamError, Timeout, TransportError,
)
from ..core.config import settings
from ..core.errors import ConfigurationError
from ..core.utils import fnv1a_32, seeded_rand, price_range
from ..schemas import SimpleValueResponse, ValuationFields

logger = logging.getLogger(__name__)

SIMPLE_VALUE_PATH = "/v1/report/simple-value"

class MockValuation(ValuationClient):
    """
    Offline stand-in for the simple-value API. Output is seeded from the
    selector, so the same row always gets the same valuation; roughly one
    selector in thirteen comes back as a no-match.
    """
    async def lookup(self, selector: Union[AddressSelector, ParcelSelector], deadline: float) -> ResolutionOutcome:
        key = "|".join(str(v).strip().lower() for v in selector.payload().values())
        seed = fnv1a_32(key)
        if seed % 13 == 0:
            return NoMatch()

        r = seeded_rand(seed, 3)
        value = int(round(150_000 + r[0] * 1_350_000, -3))
        fsd = round(0.04 + r[1] * 0.16, 2)
        low, high = price_range(value, fsd)
        code = "A" if fsd < 0.08 else "B" if fsd < 0.13 else "C"
        last_sale = date(2005, 1, 1) + timedelta(days=int(r[2] * 7000))

        data = {
            "estimated_value": value,
            "price_range_min": low,
            "price_range_max": high,
            "confidence_score": int(round((1 - fsd) * 100)),
            "fsd_score": fsd,
            "qvm_value_range_code": code,
            "qvm_asof_date": date.today().isoformat(),
            "last_sale_date": last_sale.isoformat(),
            "request_id": f"mock-{seed:08x}",
        }
        if isinstance(selector, AddressSelector):
            tail = f" {selector.zip}" if selector.zip else ""
            data.update(
                full_address=f"{selector.address}, {selector.city}, {selector.state}{tail}",
                city=selector.city, state=selector.state, zip=selector.zip,
            )
        else:
            data.update(apn=selector.apn, fips=selector.fips)
        return Matched(data=ValuationFields(**data))

class HttpValuation(ValuationClient):
    """
    Client for the hosted simple-value endpoint. One POST per call, bounded
    by a hard wall-clock deadline; every failure mode maps to an outcome.
    """
    def __init__(self, base_url: str, api_key: str | None, transport: httpx.AsyncBaseTransport | None = None):
        if not api_key:
            raise ConfigurationError("missing_api_key", "DATANEST_API_KEY is not configured.")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.transport = transport

    async def _post(self, payload: dict, deadline: float) -> httpx.Response:
        async with httpx.AsyncClient(timeout=deadline, transport=self.transport) as client:
            return await client.post(
                f"{self.base_url}{SIMPLE_VALUE_PATH}",
                json=payload,
                headers={"x-api-key": self.api_key},
            )

    async def lookup(self, selector: Union[AddressSelector, ParcelSelector], deadline: float) -> ResolutionOutcome:
        try:
            r = await asyncio.wait_for(self._post(selector.payload(), deadline), timeout=deadline)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return Timeout()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return TransportError(reason=f"{type(exc).__name__}: {exc}")
        except Exception as exc:
            logger.exception("simple-value call failed unexpectedly")
            return TransportError(reason=f"{type(exc).__name__}: {exc}")

        if r.status_code == 404:
            return NoMatch()
        if not r.is_success:
            return UpstreamError(status_code=r.status_code)

        try:
            body = SimpleValueResponse.model_validate_json(r.content)
        except ValidationError:
            return TransportError(reason="malformed_body")
        pdf_url = body.artifacts.pdf_url if body.artifacts else None
        return Matched(data=body.data, pdf_url=pdf_url)

def valuation_client() -> ValuationClient:
    """
    Factory picks mock or http based on env flags.
    """
    if settings.VALUATION_PROVIDER == "mock":
        return MockValuation()
    return HttpValuation(settings.DATANEST_BASE_URL, settings.DATANEST_API_KEY)
