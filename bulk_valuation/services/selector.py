from ..core.utils import is_blank
from ..data.base import AddressSelector, ParcelSelector, Unresolvable, Selector
from ..schemas import InputRow

def resolve_selector(row: InputRow) -> Selector:
    """
    Address first: a full address/city/state triple always wins over an
    apn/fips pair, even when both are present. Zip rides along if given.
    """
    if not (is_blank(row.address) or is_blank(row.city) or is_blank(row.state)):
        zip_code = row.zip.strip() if row.zip is not None else None
        return AddressSelector(
            address=row.address.strip(),
            city=row.city.strip(),
            state=row.state.strip(),
            zip=zip_code,
        )
    if not (is_blank(row.apn) or is_blank(row.fips)):
        return ParcelSelector(apn=row.apn.strip(), fips=row.fips.strip())
    return Unresolvable()
