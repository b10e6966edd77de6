"""
repository.py
===========================

REST Countries API から国データを取得し、
Country に正規化して保持するモジュール。

目的:
- 取得元の揺れ（dict / list / 文字列が混在する構造）をここで吸収する
- 取り込み時に parse-or-reject を 1 回だけ行い、
  以降のコードは必須フィールドが揃っている前提で書けるようにする
- name による重複排除（先に出現したものを採用）
- 人口 0 以下・名前なしのレコードは「使えない国」として除外
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Optional

import httpx

from .config import AppConfig
from .errors import DataSourceError
from .models import Country, validate_category
from .questions import has_data_for_category

LOGGER = logging.getLogger(__name__)


# ----------------------------------------------------------------------
#  フィールド単位の正規化
# ----------------------------------------------------------------------
def _clean_str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _extract_name(raw: Dict[str, Any]) -> str:
    name = raw.get("name")
    if isinstance(name, dict):
        return _clean_str(name.get("common"))
    return _clean_str(name)


def _extract_population(value: Any) -> int:
    # bool は int のサブクラスなので先に弾く
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return max(int(value), 0)


def _flatten_names(value: Any) -> List[str]:
    """
    通貨・言語のような「名前の集まり」を表示名のリストにする。

    対応する形:
    - {"EUR": {"name": "Euro", "symbol": "€"}}   (v3.1 currencies)
    - {"fra": "French"}                          (v3.1 languages)
    - [{"code": "EUR", "name": "Euro"}]          (v2 形式)
    - ["Euro", "French"]
    """
    if isinstance(value, dict):
        items: Iterable[Any] = value.values()
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return []

    names: List[str] = []
    for item in items:
        if isinstance(item, dict):
            text = _clean_str(item.get("name"))
        else:
            text = _clean_str(item)
        if text:
            names.append(text)
    return names


def _extract_capital(value: Any) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    text = _clean_str(value)
    return text or None


def _extract_flag(raw: Dict[str, Any]) -> str:
    flags = raw.get("flags")
    if isinstance(flags, dict):
        return _clean_str(flags.get("png")) or _clean_str(flags.get("svg"))
    return _clean_str(raw.get("flag"))


def _extract_flag_alt(raw: Dict[str, Any], name: str) -> str:
    flags = raw.get("flags")
    if isinstance(flags, dict):
        alt = _clean_str(flags.get("alt"))
        if alt:
            return alt
    return f"Flag of {name}"


def _extract_area(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value) if math.isfinite(value) else 0.0


def normalize_country(raw: Dict[str, Any]) -> Optional[Country]:
    """
    生レコード 1 件を Country に変換する。

    使えないレコード（名前が空 / 人口が 0 以下・不明）は None。
    """
    name = _extract_name(raw)
    if not name:
        return None

    population = _extract_population(raw.get("population"))
    if population <= 0:
        return None

    code = _clean_str(raw.get("cca2")) or _clean_str(raw.get("cca3")) or None
    region = _clean_str(raw.get("region")) or "Unknown"
    timezones = tuple(
        tz for tz in (_clean_str(t) for t in raw.get("timezones") or []) if tz
    )

    return Country(
        name=name,
        population=population,
        code=code,
        currencies=tuple(_flatten_names(raw.get("currencies"))),
        languages=tuple(_flatten_names(raw.get("languages"))),
        capital=_extract_capital(raw.get("capital")),
        area=_extract_area(raw.get("area")),
        region=region,
        timezones=timezones,
        flag=_extract_flag(raw),
        flag_alt=_extract_flag_alt(raw, name),
    )


# ----------------------------------------------------------------------
#  ペイロード全体
# ----------------------------------------------------------------------
def parse_countries(payload: Any) -> List[Country]:
    """
    API レスポンス（JSON 配列）を Country のリストにする。

    - 配列でない / 要素がオブジェクトでない / name フィールド自体が無い
      → 不正なペイロードとして DataSourceError
    - 使えないレコードは除外、同名の国は最初の 1 件だけ残す
    """
    if not isinstance(payload, list):
        raise DataSourceError(
            f"国データの形式が不正です（配列ではありません: {type(payload).__name__}）"
        )

    countries: List[Country] = []
    seen = set()
    skipped = 0

    for i, raw in enumerate(payload):
        if not isinstance(raw, dict):
            raise DataSourceError(f"国データの形式が不正です（{i} 件目がオブジェクトではありません）")
        if "name" not in raw:
            raise DataSourceError(f"国データの形式が不正です（{i} 件目に name がありません）")

        country = normalize_country(raw)
        if country is None:
            skipped += 1
            LOGGER.debug("Skipping unusable country record #%d: %r", i, raw.get("name"))
            continue
        if country.name in seen:
            skipped += 1
            LOGGER.debug("Skipping duplicate country %s", country.name)
            continue

        seen.add(country.name)
        countries.append(country)

    LOGGER.info("Parsed %d countries (%d skipped)", len(countries), skipped)
    return countries


# ----------------------------------------------------------------------
#  CountryRepository
# ----------------------------------------------------------------------
class CountryRepository:
    """
    国データの取得と保持を担当するクラス。

    主な機能:
    - load():          API から取得して正規化（非同期）
    - countries:       読み込み済みの国リスト
    - get_by_name():   name で 1 件取得
    - eligible_for():  指定カテゴリで出題可能な国だけに絞る
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config if config is not None else AppConfig()
        self._client = client
        self._countries: List[Country] = []
        self._by_name: Dict[str, Country] = {}
        self._is_loaded = False
        self.last_error: Optional[DataSourceError] = None

    # ------------------------------------------------------------
    # 読み込み
    # ------------------------------------------------------------
    async def load(self) -> List[Country]:
        """
        API から国データを取得し、正規化した結果で置き換える。

        失敗時は DataSourceError。リトライはしない（呼び出し側の判断）。
        直前の読み込み結果は、成功した時点で一度に差し替わる。
        失敗の内容は last_error に残る（次の成功で None に戻る）。
        """
        try:
            payload = await self._fetch()
            countries = parse_countries(payload)
        except DataSourceError as e:
            self.last_error = e
            raise

        self.last_error = None

        self._countries = countries
        self._by_name = {c.name: c for c in countries}
        self._is_loaded = True
        return list(countries)

    async def _fetch(self) -> Any:
        params = {"fields": self.config.countries_fields} if self.config.countries_fields else None
        url = self.config.countries_url

        try:
            if self._client is not None:
                response = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.config.request_timeout) as client:
                    response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            LOGGER.warning("Country fetch failed: %s", e)
            raise DataSourceError(f"国データの取得に失敗しました: {e}") from e

        if not response.is_success:
            LOGGER.warning(
                "Country fetch returned HTTP %s %s", response.status_code, response.reason_phrase
            )
            raise DataSourceError(
                f"国データの取得に失敗しました: HTTP {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                reason=response.reason_phrase,
            )

        try:
            return response.json()
        except ValueError as e:
            LOGGER.warning("Country payload is not valid JSON: %s", e)
            raise DataSourceError("国データが JSON として解釈できません。") from e

    # ------------------------------------------------------------
    # 参照
    # ------------------------------------------------------------
    @property
    def is_loaded(self) -> bool:
        return self._is_loaded

    @property
    def countries(self) -> List[Country]:
        return list(self._countries)

    def get_by_name(self, name: str) -> Optional[Country]:
        return self._by_name.get(name)

    def eligible_for(self, category: str) -> List[Country]:
        """カテゴリで出題可能な国（has_data_for_category を満たす国）"""
        validate_category(category)
        return [c for c in self._countries if has_data_for_category(c, category)]
