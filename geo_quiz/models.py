"""
models.py
======================

クイズで扱うデータ構造の定義。

- Country:      正規化済みの国レコード（name が一意キー）
- AnswerOption: 選択肢 1 つ分（表示ラベルと比較用の値）
- Question:     生成済みの四択問題（生成後は不変）
- AnswerRecord: セッション中に解答した 1 問分の記録
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

# ----------------------------------------------------------------------
#  カテゴリ
# ----------------------------------------------------------------------
POPULATION = "population"
CURRENCY = "currency"
LANGUAGES = "languages"

CATEGORIES: Tuple[str, ...] = (POPULATION, CURRENCY, LANGUAGES)

OptionValue = Union[int, str]


def validate_category(category: str) -> str:
    """未知のカテゴリなら ValueError。"""
    if category not in CATEGORIES:
        raise ValueError(f"Unknown game type: {category}")
    return category


# ----------------------------------------------------------------------
#  Country
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Country:
    """
    正規化済みの国レコード。

    currencies / languages は取得元の順序をそのまま保持し、
    先頭要素をそのカテゴリの「代表値」とする。
    """

    name: str
    population: int = 0
    code: Optional[str] = None
    currencies: Tuple[str, ...] = ()
    languages: Tuple[str, ...] = ()
    capital: Optional[str] = None
    area: float = 0.0
    region: str = "Unknown"
    timezones: Tuple[str, ...] = ()
    flag: str = ""
    flag_alt: str = ""

    @property
    def primary_currency(self) -> Optional[str]:
        return self.currencies[0] if self.currencies else None

    @property
    def primary_language(self) -> Optional[str]:
        return self.languages[0] if self.languages else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "code": self.code,
            "population": self.population,
            "currencies": list(self.currencies),
            "languages": list(self.languages),
            "capital": self.capital,
            "area": self.area,
            "region": self.region,
            "timezones": list(self.timezones),
            "flag": self.flag,
            "flag_alt": self.flag_alt,
        }


# ----------------------------------------------------------------------
#  Question
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class AnswerOption:
    label: str
    value: OptionValue


@dataclass(frozen=True)
class Question:
    """
    四択問題 1 問分。

    options は必ず 4 件で value は互いに異なり、
    options[correct_index] だけが正解。
    """

    category: str
    subject_country_name: str
    prompt_text: str
    options: Tuple[AnswerOption, ...]
    correct_index: int
    correct_answer_label: str
    explanation_text: str

    @property
    def correct_value(self) -> OptionValue:
        return self.options[self.correct_index].value

    def is_correct(self, index: int) -> bool:
        return index == self.correct_index

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "subject_country_name": self.subject_country_name,
            "question": self.prompt_text,
            "options": [{"label": o.label, "value": o.value} for o in self.options],
            "correct_index": self.correct_index,
            "correct_answer_label": self.correct_answer_label,
            "explanation": self.explanation_text,
        }


# ----------------------------------------------------------------------
#  AnswerRecord
# ----------------------------------------------------------------------
@dataclass
class AnswerRecord:
    """セッション内の解答履歴 1 件（永続化はしない）。"""

    question_index: int
    subject_country_name: str
    selected_index: int
    correct_index: int
    correct: bool
    answered_at: str = field(default="")
