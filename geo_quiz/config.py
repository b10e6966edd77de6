"""
config.py
=========

アプリ全体で利用する設定値を一元管理する。
REST Countries API の URL、取得フィールド、サンプル数、出題数、
難易度ごとの国数などはすべてこのクラスを通じて取得する。

読み込み順:
1. dataclass のデフォルト値
2. ルートの config.toml（存在すれば）
3. 環境変数 GEO_QUIZ_*（存在すれば）
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import toml


# ------------------------------------------------------------
# 基本パス定義
# ------------------------------------------------------------

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT_DIR / "config.toml"

DEFAULT_COUNTRIES_URL = "https://restcountries.com/v3.1/all"

# REST Countries v3.1 の /all は fields 指定が必須（最大 10 個）
DEFAULT_COUNTRIES_FIELDS = (
    "name,cca2,capital,population,area,region,"
    "languages,currencies,timezones,flags"
)


def _default_difficulty_settings() -> Dict[str, Dict[str, Any]]:
    return {
        "easy": {"countries": 30, "popular_only": True},
        "medium": {"countries": 100, "popular_only": False},
        "hard": {"countries": 200, "popular_only": False},
    }


# ------------------------------------------------------------
# AppConfig
# ------------------------------------------------------------

@dataclass
class AppConfig:
    """
    アプリ設定クラス。

    - データ取得元（REST Countries）の URL / フィールド / タイムアウト
    - セッションプールのサンプル数・1 クイズあたりの出題数
    - 難易度ごとの対象国数
    """

    # ---------- データ取得元 ----------
    countries_url: str = DEFAULT_COUNTRIES_URL
    countries_fields: str = DEFAULT_COUNTRIES_FIELDS
    request_timeout: float = 20.0

    # ---------- クイズ ----------
    sample_size: int = 10
    question_count: int = 10
    default_difficulty: Optional[str] = None

    # ---------- 難易度 ----------
    difficulty_settings: Dict[str, Dict[str, Any]] = field(
        default_factory=_default_difficulty_settings
    )

    # ============================================================
    # 読み込み
    # ============================================================

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "AppConfig":
        """
        config.toml と環境変数から設定を組み立てる。

        ファイルが無い場合はデフォルト値のまま。
        数値として解釈できない値が入っていれば ValueError。
        """
        cfg = cls()
        path = Path(path) if path is not None else CONFIG_PATH

        data = cls.read_toml(path)
        if data:
            cfg._apply_file(data)

        cfg._apply_env()
        cfg.validate()
        return cfg

    @staticmethod
    def read_toml(path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        return toml.load(str(path))

    # ============================================================
    # 内部関数
    # ============================================================

    def _apply_file(self, data: Dict[str, Any]) -> None:
        source = data.get("source")
        if isinstance(source, dict):
            self.countries_url = str(source.get("countries_url", self.countries_url))
            self.countries_fields = str(source.get("fields", self.countries_fields))
            if "timeout" in source:
                self.request_timeout = _as_float("source.timeout", source["timeout"])

        quiz = data.get("quiz")
        if isinstance(quiz, dict):
            if "sample_size" in quiz:
                self.sample_size = _as_int("quiz.sample_size", quiz["sample_size"])
            if "question_count" in quiz:
                self.question_count = _as_int("quiz.question_count", quiz["question_count"])
            if quiz.get("default_difficulty"):
                self.default_difficulty = str(quiz["default_difficulty"])

        difficulty = data.get("difficulty")
        if isinstance(difficulty, dict):
            for key, val in difficulty.items():
                if not isinstance(val, dict):
                    continue
                current = dict(self.difficulty_settings.get(key, {}))
                if "countries" in val:
                    current["countries"] = _as_int(f"difficulty.{key}.countries", val["countries"])
                if "popular_only" in val:
                    current["popular_only"] = bool(val["popular_only"])
                current.setdefault("countries", self.sample_size)
                current.setdefault("popular_only", False)
                self.difficulty_settings[key] = current

    def _apply_env(self) -> None:
        # CI やデプロイ先では環境変数で上書きできるようにする
        url = os.environ.get("GEO_QUIZ_COUNTRIES_URL")
        if url:
            self.countries_url = url

        size = os.environ.get("GEO_QUIZ_SAMPLE_SIZE")
        if size:
            self.sample_size = _as_int("GEO_QUIZ_SAMPLE_SIZE", size)

        count = os.environ.get("GEO_QUIZ_QUESTION_COUNT")
        if count:
            self.question_count = _as_int("GEO_QUIZ_QUESTION_COUNT", count)

    def validate(self) -> None:
        if self.sample_size < 1:
            raise ValueError(f"sample_size は 1 以上が必要です: {self.sample_size}")
        if self.question_count < 1:
            raise ValueError(f"question_count は 1 以上が必要です: {self.question_count}")
        if (
            self.default_difficulty is not None
            and self.default_difficulty not in self.difficulty_settings
        ):
            raise ValueError(f"未定義の難易度です: {self.default_difficulty}")


def _as_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} は整数で指定してください: {value!r}") from None


def _as_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} は数値で指定してください: {value!r}") from None
