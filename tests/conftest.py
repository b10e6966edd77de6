import random
from typing import Any, Dict, List, Optional, Sequence

import httpx
import pytest

from geo_quiz.models import Country


def make_country(
    name: str,
    population: int = 1_000_000,
    currencies: Sequence[str] = (),
    languages: Sequence[str] = (),
) -> Country:
    return Country(
        name=name,
        population=population,
        currencies=tuple(currencies),
        languages=tuple(languages),
    )


def raw_country(
    name: Optional[str],
    population: Any = 1_000_000,
    currencies: Optional[Dict[str, Any]] = None,
    languages: Optional[Dict[str, str]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """REST Countries v3.1 形式のレコード"""
    record: Dict[str, Any] = {
        "name": {"common": name, "official": name} if name is not None else {},
        "population": population,
        "currencies": currencies or {},
        "languages": languages or {},
    }
    record.update(extra)
    return record


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20240101)


@pytest.fixture
def world() -> List[Country]:
    return [
        make_country("France", 68_000_000, ["Euro"], ["French"]),
        make_country("Japan", 125_000_000, ["Japanese yen"], ["Japanese"]),
        make_country("Kenya", 54_000_000, ["Kenyan shilling"], ["English", "Swahili"]),
        make_country("Brazil", 214_000_000, ["Brazilian real"], ["Portuguese"]),
        make_country("Switzerland", 8_700_000, ["Swiss franc"], ["French", "German", "Italian", "Romansh"]),
        make_country("India", 1_400_000_000, ["Indian rupee"], ["English", "Hindi", "Tamil"]),
        make_country("Egypt", 104_000_000, ["Egyptian pound"], ["Arabic"]),
        make_country("Argentina", 45_000_000, ["Argentine peso"], ["Guaraní", "Spanish"]),
        make_country("Iceland", 370_000, ["Icelandic króna"], ["Icelandic"]),
        make_country("Germany", 83_000_000, ["Euro"], ["German"]),
        make_country("Mongolia", 3_300_000, ["Mongolian tögrög"], ["Mongolian"]),
        make_country("Peru", 33_000_000, ["Peruvian sol"], ["Aymara", "Quechua", "Spanish"]),
    ]
