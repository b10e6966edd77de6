"""
questions.py
======================

1 つの国（出題対象）と候補プールから、四択問題を 1 問組み立てるモジュール。

カテゴリ:
- population: 人口
- currency:   通貨
- languages:  話されている言語

どのカテゴリも手順は同じで、値の種類だけが違う:

1. プール内の「他の国」でデータを持つものから候補値を集める
   （通貨・言語は先頭だけでなくリストの全要素）
2. 重複と正解と同じ値を除く
3. 候補から最大 3 つを非復元で一様に抽出
4. 足りなければ固定のフォールバックで補充
   - 人口: 正解値 × 倍率（下限 100,000）
   - 通貨・言語: よく知られた実在の名称リスト
5. [正解, 誤答 x3] が 4 つの異なる値にならなければ None
6. 表示用ラベルを付けてシャッフルし、正解位置を correct_index にする

組み立てられない場合は例外ではなく None を返す。
呼び出し側（generator）が次の国で再試行する。
"""

from __future__ import annotations

import math
import random
from typing import Callable, Dict, List, Optional, Sequence

from .models import (
    CURRENCY,
    LANGUAGES,
    POPULATION,
    AnswerOption,
    Country,
    OptionValue,
    Question,
    validate_category,
)
from .sampler import sample, shuffle

OPTION_COUNT = 4
DISTRACTOR_COUNT = OPTION_COUNT - 1

# ----------------------------------------------------------------------
#  フォールバック用の定数
# ----------------------------------------------------------------------
POPULATION_RATIOS = (0.55, 0.75, 1.2, 1.4, 1.8)
POPULATION_FLOOR = 100_000
# 倍率リストを何周まで回すか（k 周目は ratio ** k、各周の順序はシャッフル）
POPULATION_FALLBACK_PASSES = 3

POPULATION_UNIT = "people"
UNKNOWN_LABEL = "Unknown"

FALLBACK_CURRENCIES = (
    "United States dollar",
    "Euro",
    "Japanese yen",
    "British pound",
    "Swiss franc",
    "Chinese yuan",
    "Indian rupee",
    "Canadian dollar",
    "Australian dollar",
    "Mexican peso",
)

FALLBACK_LANGUAGES = (
    "English",
    "Spanish",
    "French",
    "Arabic",
    "Mandarin",
    "Portuguese",
    "Russian",
    "German",
    "Hindi",
    "Swahili",
)


# ----------------------------------------------------------------------
#  出題可否
# ----------------------------------------------------------------------
def has_data_for_category(country: Country, category: str) -> bool:
    """国がそのカテゴリの問題を作れるだけのデータを持っているか。"""
    validate_category(category)

    if category == POPULATION:
        return isinstance(country.population, int) and country.population > 0
    if category == CURRENCY:
        return bool(country.currencies) and bool(country.currencies[0])
    return bool(country.languages) and bool(country.languages[0])


def format_population(value: Optional[float]) -> str:
    """
    人口を "1,234,567 people" の形にする。
    None / NaN / 無限大は "Unknown"（通常は出題可否チェックで弾かれる）。
    """
    if value is None or isinstance(value, bool):
        return UNKNOWN_LABEL
    try:
        number = float(value)
    except (TypeError, ValueError):
        return UNKNOWN_LABEL
    if not math.isfinite(number):
        return UNKNOWN_LABEL
    return f"{int(round(number)):,} {POPULATION_UNIT}"


# ----------------------------------------------------------------------
#  値の取り出し
# ----------------------------------------------------------------------
def _correct_value(country: Country, category: str) -> OptionValue:
    if category == POPULATION:
        return country.population
    if category == CURRENCY:
        return country.currencies[0]
    return country.languages[0]


def _values_of(country: Country, category: str) -> Sequence[OptionValue]:
    if category == POPULATION:
        return (country.population,)
    if category == CURRENCY:
        return country.currencies
    return country.languages


def _candidate_values(
    subject: Country,
    pool: Sequence[Country],
    category: str,
    correct: OptionValue,
) -> List[OptionValue]:
    """他の国から集めた誤答候補（重複なし・正解を含まない・プール順）。"""
    seen = set()
    candidates: List[OptionValue] = []

    for other in pool:
        if other.name == subject.name:
            continue
        if not has_data_for_category(other, category):
            continue
        for value in _values_of(other, category):
            if value == "" or value == correct or value in seen:
                continue
            seen.add(value)
            candidates.append(value)

    return candidates


# ----------------------------------------------------------------------
#  フォールバック
# ----------------------------------------------------------------------
def _population_fallback(
    correct: OptionValue,
    chosen: List[OptionValue],
    needed: int,
    rng: Optional[random.Random],
) -> List[OptionValue]:
    extra: List[OptionValue] = []
    taken = set(chosen)
    taken.add(correct)

    for pass_no in range(1, POPULATION_FALLBACK_PASSES + 1):
        for ratio in shuffle(POPULATION_RATIOS, rng):
            if len(extra) >= needed:
                return extra
            value = max(POPULATION_FLOOR, int(round(float(correct) * ratio ** pass_no)))
            if value in taken:
                continue
            taken.add(value)
            extra.append(value)

    return extra


def _names_fallback(names: Sequence[str]) -> Callable[..., List[OptionValue]]:
    def fallback(
        correct: OptionValue,
        chosen: List[OptionValue],
        needed: int,
        rng: Optional[random.Random],
    ) -> List[OptionValue]:
        extra: List[OptionValue] = []
        taken = set(chosen)
        taken.add(correct)

        for name in shuffle(names, rng):
            if len(extra) >= needed:
                break
            if name in taken:
                continue
            taken.add(name)
            extra.append(name)

        return extra

    return fallback


FALLBACKS: Dict[str, Callable[..., List[OptionValue]]] = {
    POPULATION: _population_fallback,
    CURRENCY: _names_fallback(FALLBACK_CURRENCIES),
    LANGUAGES: _names_fallback(FALLBACK_LANGUAGES),
}


# ----------------------------------------------------------------------
#  表示テキスト
# ----------------------------------------------------------------------
def _label_for(category: str, value: OptionValue) -> str:
    if category == POPULATION:
        return format_population(value)  # type: ignore[arg-type]
    return str(value)


def _prompt_for(category: str, name: str) -> str:
    if category == POPULATION:
        return f"What is the population of {name}?"
    if category == CURRENCY:
        return f"What is the currency of {name}?"
    return f"Which language is spoken in {name}?"


def _explanation_for(category: str, name: str, label: str) -> str:
    if category == POPULATION:
        return f"{name} has a population of {label}."
    if category == CURRENCY:
        return f"The currency of {name} is the {label}."
    return f"{label} is spoken in {name}."


# ----------------------------------------------------------------------
#  組み立て本体
# ----------------------------------------------------------------------
def _build(
    category: str,
    subject: Country,
    pool: Sequence[Country],
    rng: Optional[random.Random] = None,
) -> Optional[Question]:
    if not has_data_for_category(subject, category):
        return None

    correct = _correct_value(subject, category)

    candidates = _candidate_values(subject, pool, category, correct)
    distractors = sample(candidates, DISTRACTOR_COUNT, rng)

    if len(distractors) < DISTRACTOR_COUNT:
        needed = DISTRACTOR_COUNT - len(distractors)
        distractors += FALLBACKS[category](correct, distractors, needed, rng)

    values = list(dict.fromkeys([correct] + distractors))
    if len(values) != OPTION_COUNT or correct not in values:
        return None

    options = shuffle(
        [AnswerOption(label=_label_for(category, v), value=v) for v in values],
        rng,
    )
    correct_index = next(i for i, o in enumerate(options) if o.value == correct)
    correct_label = options[correct_index].label

    return Question(
        category=category,
        subject_country_name=subject.name,
        prompt_text=_prompt_for(category, subject.name),
        options=tuple(options),
        correct_index=correct_index,
        correct_answer_label=correct_label,
        explanation_text=_explanation_for(category, subject.name, correct_label),
    )


def build_population_question(
    subject: Country, pool: Sequence[Country], rng: Optional[random.Random] = None
) -> Optional[Question]:
    return _build(POPULATION, subject, pool, rng)


def build_currency_question(
    subject: Country, pool: Sequence[Country], rng: Optional[random.Random] = None
) -> Optional[Question]:
    return _build(CURRENCY, subject, pool, rng)


def build_languages_question(
    subject: Country, pool: Sequence[Country], rng: Optional[random.Random] = None
) -> Optional[Question]:
    return _build(LANGUAGES, subject, pool, rng)


BUILDERS: Dict[str, Callable[..., Optional[Question]]] = {
    POPULATION: build_population_question,
    CURRENCY: build_currency_question,
    LANGUAGES: build_languages_question,
}


def build_question(
    category: str,
    subject: Country,
    pool: Sequence[Country],
    rng: Optional[random.Random] = None,
) -> Optional[Question]:
    """カテゴリに応じた builder を呼ぶ。未知のカテゴリは ValueError。"""
    validate_category(category)
    return BUILDERS[category](subject, pool, rng)
