"""
generator.py
======================

1 回のクイズ分の問題セットを作るモジュール。

手順:
1. セッションプールから出題可能な国を選ぶ。
   1 件も無ければ、読み込み済みの全ての国から同じ条件で選び直す。
2. 候補をシャッフルし、先頭から 1 問ずつ組み立てる。
   組み立てに失敗した国は黙ってスキップする。
3. 誤答の材料には「出題候補 ∪ 全ての国」を渡す
   （小さなプールだけだと誤答のバリエーションが足りないため）。

要求数に届かない場合は短いリストを返す（空もありうる）。
例外にはしない。
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional, Sequence

from .models import Country, Question, validate_category
from .questions import build_question, has_data_for_category
from .sampler import shuffle

LOGGER = logging.getLogger(__name__)


def dedupe_by_name(*groups: Iterable[Country]) -> List[Country]:
    """name が重複しないように連結する（先に出たものを採用）。"""
    seen = set()
    merged: List[Country] = []
    for group in groups:
        for country in group:
            if country.name in seen:
                continue
            seen.add(country.name)
            merged.append(country)
    return merged


def eligible_candidates(
    category: str,
    pool: Sequence[Country],
    repository_countries: Sequence[Country],
) -> List[Country]:
    """
    出題対象の候補。プール優先、プールに 1 件も無ければ全ての国。
    """
    candidates = [c for c in dedupe_by_name(pool) if has_data_for_category(c, category)]
    if candidates:
        return candidates

    LOGGER.info("No pool country has %s data; widening to the whole repository", category)
    return [
        c for c in dedupe_by_name(repository_countries) if has_data_for_category(c, category)
    ]


def generate_question_set(
    category: str,
    desired_count: int,
    pool: Sequence[Country],
    repository_countries: Sequence[Country],
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """
    category の問題を最大 desired_count 問作る。

    戻り値が desired_count より短い（または空）場合は
    「データ不足」として呼び出し側で扱う。
    """
    validate_category(category)
    if desired_count <= 0:
        return []

    candidates = eligible_candidates(category, pool, repository_countries)
    if not candidates:
        LOGGER.info("No country is eligible for %s questions", category)
        return []

    distractor_pool = dedupe_by_name(candidates, repository_countries)

    questions: List[Question] = []
    for subject in shuffle(candidates, rng):
        if len(questions) >= desired_count:
            break
        question = build_question(category, subject, distractor_pool, rng)
        if question is None:
            LOGGER.debug("Could not build a %s question for %s", category, subject.name)
            continue
        questions.append(question)

    if len(questions) < desired_count:
        LOGGER.info(
            "Generated %d of %d requested %s questions", len(questions), desired_count, category
        )
    return questions
