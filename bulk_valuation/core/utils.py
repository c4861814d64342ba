def clean_cell(value) -> str | None:
    """Trim a raw CSV cell; ``None`` stays ``None``."""
    if value is None:
        return None
    return str(value).strip()

def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()

def fnv1a_32(s: str) -> int:
    """Deterministic, fast hash for seed generation."""
    h = 0x811c9dc5
    for c in s.encode("utf-8"):
        h ^= c
        h = (h * 0x01000193) & 0xFFFFFFFF
    return h

def seeded_rand(seed: int, n: int = 1) -> list[float]:
    """
    Stateless pseudo-random generator (Mulberry32-like) so
    same seed → same outputs without storing PRNG state.
    """
    out = []
    t = (seed + 0x6D2B79F5) & 0xFFFFFFFF
    for _ in range(n):
        t = (t ^ (t >> 15)) * (t | 1) & 0xFFFFFFFF
        t ^= t + ((t ^ (t >> 7)) * (t | 61) & 0xFFFFFFFF)
        r = ((t ^ (t >> 14)) & 0xFFFFFFFF) / 4294967296.0
        out.append(r)
    return out

def price_range(value: int, fsd: float) -> tuple[int, int]:
    """Low/high band around an estimate given its forecast standard deviation."""
    low = int(round(value * (1 - fsd), -2))
    high = int(round(value * (1 + fsd), -2))
    return low, high
