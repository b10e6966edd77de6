"""
engine.py
======================

UI から呼ばれるサービスオブジェクト QuizEngine。

app.py はブラウザのセッションごとに 1 つ作り、UI へ引数で渡す。
国プールはセッション単位、CountryRepository は全セッションで共有してよい。
グローバル変数経由では参照しない。

公開 API:
- on_ready(callback):         読み込み完了通知（読み込めた国の数を渡す。0 は失敗）
- load_repository():          国データを取得・更新する（非同期）
- build_session_pool(size):   セッション用の国プールを作り直す
- generate_question_set(...): 問題セットを作る

画面表示には一切触れない。
"""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from .config import AppConfig
from .errors import DataSourceError, RepositoryNotLoadedError
from .generator import generate_question_set
from .models import Country, Question, validate_category
from .repository import CountryRepository
from .sampler import sample

LOGGER = logging.getLogger(__name__)

ReadyCallback = Callable[[int], None]


class QuizEngine:
    """
    国データ・セッションプール・問題生成をまとめたクラス。

    rng を渡すと抽出・シャッフルがすべてその乱数源で行われる（テスト用）。
    """

    def __init__(
        self,
        repository: Optional[CountryRepository] = None,
        config: Optional[AppConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config if config is not None else AppConfig()
        self.repository = (
            repository if repository is not None else CountryRepository(self.config)
        )
        self.rng = rng
        self._pool: List[Country] = []
        self._ready_callbacks: List[ReadyCallback] = []

    # ------------------------------------------------------------------
    # 読み込み完了通知
    # ------------------------------------------------------------------
    def on_ready(self, callback: ReadyCallback) -> None:
        self._ready_callbacks.append(callback)

    def _notify_ready(self, loaded: int) -> None:
        for callback in list(self._ready_callbacks):
            callback(loaded)

    # ------------------------------------------------------------------
    # 国データ
    # ------------------------------------------------------------------
    async def load_repository(self) -> int:
        """
        国データを読み込み、使える国の数を返す。

        失敗時は通知に 0 を渡したうえで DataSourceError をそのまま送出する。
        """
        try:
            countries = await self.repository.load()
        except DataSourceError:
            LOGGER.exception("Country repository load failed")
            self._notify_ready(0)
            raise

        LOGGER.info("Country repository ready: %d countries", len(countries))
        self._notify_ready(len(countries))
        return len(countries)

    def _require_loaded(self) -> None:
        if not self.repository.is_loaded:
            raise RepositoryNotLoadedError(
                "国データがまだ読み込まれていません。load_repository() の完了を待ってください。"
            )

    # ------------------------------------------------------------------
    # セッションプール
    # ------------------------------------------------------------------
    @property
    def country_pool(self) -> List[Country]:
        return list(self._pool)

    def _difficulty_universe(self, difficulty: str) -> List[Country]:
        settings = self.config.difficulty_settings.get(difficulty)
        if settings is None:
            raise ValueError(f"未定義の難易度です: {difficulty}")

        limit = int(settings.get("countries", len(self.repository.countries)))
        countries = self.repository.countries
        if settings.get("popular_only"):
            # 人口の多い国ほど「よく知られた国」とみなす
            ranked = sorted(countries, key=lambda c: c.population, reverse=True)
            return ranked[:limit]
        return sample(countries, limit, self.rng)

    def build_session_pool(
        self,
        size: Optional[int] = None,
        difficulty: Optional[str] = None,
    ) -> List[Country]:
        """
        セッション用の国プールを作り直して返す。

        difficulty を指定すると、対象の国を難易度設定の範囲に絞ってから抽出する。
        """
        self._require_loaded()

        size = self.config.sample_size if size is None else size
        difficulty = difficulty if difficulty is not None else self.config.default_difficulty

        if difficulty is not None:
            universe = self._difficulty_universe(difficulty)
        else:
            universe = self.repository.countries

        self._pool = sample(universe, size, self.rng)
        LOGGER.debug(
            "Built session pool of %d countries (difficulty=%s)", len(self._pool), difficulty
        )
        return list(self._pool)

    # ------------------------------------------------------------------
    # 問題生成
    # ------------------------------------------------------------------
    def generate_question_set(
        self,
        category: str,
        count: Optional[int] = None,
    ) -> List[Question]:
        """
        現在のプールから category の問題セットを作る。

        count を省略すると設定の question_count（既定 10）。
        """
        self._require_loaded()
        validate_category(category)

        count = self.config.question_count if count is None else count
        return generate_question_set(
            category,
            count,
            pool=self._pool,
            repository_countries=self.repository.countries,
            rng=self.rng,
        )
