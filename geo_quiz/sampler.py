"""
sampler.py
======================

ランダム抽出のユーティリティ。

- shuffle(): 入力を変更せず、新しいリストを一様ランダムな順序で返す
  （後ろから Fisher-Yates）
- sample():  shuffle() の先頭 n 件（n が長さを超える場合は全件）

rng には random.Random 互換のオブジェクトを渡せる（テストでシード固定用）。
省略時は random モジュールそのものを使う。
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    _rng = rng if rng is not None else random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = _rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def sample(items: Sequence[T], n: int, rng: Optional[random.Random] = None) -> List[T]:
    if n <= 0:
        return []
    return shuffle(items, rng)[: min(n, len(items))]
