from typing import Protocol, Optional, Union
from dataclasses import dataclass

from ..schemas import ValuationFields

# ----- Selectors: how a row identifies a property upstream -----

@dataclass(frozen=True)
class AddressSelector:
    address: str
    city: str
    state: str
    zip: Optional[str] = None

    def payload(self) -> dict:
        body = {"address": self.address, "city": self.city, "state": self.state}
        if self.zip is not None:
            body["zip"] = self.zip
        return body

@dataclass(frozen=True)
class ParcelSelector:
    apn: str
    fips: str

    def payload(self) -> dict:
        return {"apn": self.apn, "fips": self.fips}

@dataclass(frozen=True)
class Unresolvable:
    """Neither an address triple nor a parcel pair was present."""

Selector = Union[AddressSelector, ParcelSelector, Unresolvable]

# ----- Outcomes of one resolution attempt -----

@dataclass(frozen=True)
class Matched:
    data: Optional[ValuationFields] = None
    pdf_url: Optional[str] = None
    match_status = "matched"

@dataclass(frozen=True)
class NoMatch:
    match_status = "no_match"

@dataclass(frozen=True)
class UpstreamError:
    status_code: int

    @property
    def match_status(self) -> str:
        return f"error:{self.status_code}"

@dataclass(frozen=True)
class Timeout:
    match_status = "error:timeout"

@dataclass(frozen=True)
class TransportError:
    reason: str = ""
    match_status = "error:unknown"

@dataclass(frozen=True)
class InvalidSelector:
    match_status = "error:invalid_selector"

ResolutionOutcome = Union[Matched, NoMatch, UpstreamError, Timeout, TransportError, InvalidSelector]

# ----- Protocols (interfaces) -----

class ValuationClient(Protocol):
    async def lookup(
        self, selector: Union[AddressSelector, ParcelSelector], deadline: float
    ) -> ResolutionOutcome: ...
