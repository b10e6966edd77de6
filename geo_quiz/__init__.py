"""
geo_quiz パッケージ
======================

このパッケージは、国クイズアプリの内部ロジックを提供する。

主な役割:
- 設定管理（config）
- 国データの取得・正規化（repository）
- ランダム抽出（sampler）
- カテゴリ別の四択問題の組み立て（questions）
- 問題セットの生成（generator）
- UI から呼ぶサービスオブジェクト（engine）
- クイズ 1 回分の進行・スコア管理（session）
- UI コンポーネント（ui）

app.py は Streamlit UI のみを担当し、内部ロジックはすべて本パッケージから呼ぶ。
ui は streamlit に依存するため、ここでは import しない。
"""

from .config import AppConfig
from .errors import DataSourceError, RepositoryNotLoadedError
from .models import (
    CATEGORIES,
    CURRENCY,
    LANGUAGES,
    POPULATION,
    AnswerOption,
    AnswerRecord,
    Country,
    Question,
)
from .repository import CountryRepository, normalize_country, parse_countries
from .sampler import sample, shuffle
from .questions import (
    build_currency_question,
    build_languages_question,
    build_population_question,
    build_question,
    format_population,
    has_data_for_category,
)
from .generator import generate_question_set
from .engine import QuizEngine
from .session import AnswerResult, QuizSession

__all__ = [
    "AppConfig",
    "DataSourceError",
    "RepositoryNotLoadedError",
    "CATEGORIES",
    "POPULATION",
    "CURRENCY",
    "LANGUAGES",
    "AnswerOption",
    "AnswerRecord",
    "Country",
    "Question",
    "CountryRepository",
    "normalize_country",
    "parse_countries",
    "sample",
    "shuffle",
    "build_population_question",
    "build_currency_question",
    "build_languages_question",
    "build_question",
    "format_population",
    "has_data_for_category",
    "generate_question_set",
    "QuizEngine",
    "QuizSession",
    "AnswerResult",
]
