"""
session.py
=====================================

1 回のクイズ（カテゴリ選択 → 国選択 → 出題 → 結果）の状態を管理するモジュール。

保持するもの:
- 選択中のカテゴリ・国
- 問題セットと現在の問題番号
- 正解数 / 不正解数 / 連続正解数（streak）
- 解答履歴（メモリ内のみ、永続化はしない）

UI はこのクラスの状態を読んで描画し、
操作（解答・次へ・やり直し）はメソッド経由で行う。
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .models import AnswerRecord, Question, validate_category


@dataclass(frozen=True)
class AnswerResult:
    correct: bool
    feedback: str
    correct_index: int


class QuizSession:
    """
    クイズ 1 回分の進行状態。
    """

    def __init__(self) -> None:
        self.category: Optional[str] = None
        self.selected_country_name: Optional[str] = None
        self.questions: List[Question] = []
        self.current_index = 0
        self.has_answered = False
        self.is_complete = False
        self.selected_index: Optional[int] = None

        self.score = 0
        self.wrong = 0
        self.streak = 0
        self.best_streak = 0

        self.history: List[AnswerRecord] = []

    # ---------------------------------------------------------
    # 選択
    # ---------------------------------------------------------
    def select_category(self, category: str) -> None:
        """カテゴリを選ぶ。国の選択と進行状態はリセットされる。"""
        self.category = validate_category(category)
        self.selected_country_name = None
        self._reset_progress()
        self.questions = []

    def select_country(self, name: str) -> None:
        if self.category is None:
            raise ValueError("Select a quiz type first to unlock the countries.")
        name = name.strip()
        if not name:
            raise ValueError("国名が空です。")
        self.selected_country_name = name
        self._reset_progress()
        self.questions = []

    # ---------------------------------------------------------
    # 開始
    # ---------------------------------------------------------
    def start(self, questions: List[Question]) -> None:
        """
        問題セットを受け取ってクイズを開始する。

        空のセットは「データ不足」なので ValueError。
        """
        if not questions:
            raise ValueError("Not enough data to start this quiz. Try another category.")
        self.questions = list(questions)
        self._reset_progress()
        self._reset_scores()

    def restart(self, questions: List[Question]) -> None:
        """
        同じカテゴリ・国のまま、新しい問題セットでやり直す。

        前回の問題セットとスコアは破棄する。
        """
        if self.category is None:
            raise ValueError("Select a quiz type first to unlock the countries.")
        self.start(questions)

    def _reset_progress(self) -> None:
        self.current_index = 0
        self.has_answered = False
        self.is_complete = False
        self.selected_index = None

    def _reset_scores(self) -> None:
        self.score = 0
        self.wrong = 0
        self.streak = 0
        self.best_streak = 0
        self.history = []

    # ---------------------------------------------------------
    # 状態参照
    # ---------------------------------------------------------
    @property
    def current_question(self) -> Optional[Question]:
        if self.is_complete or not (0 <= self.current_index < len(self.questions)):
            return None
        return self.questions[self.current_index]

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def question_number(self) -> int:
        """1 始まりの問題番号"""
        return self.current_index + 1

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.questions) - 1

    # ---------------------------------------------------------
    # 解答
    # ---------------------------------------------------------
    def answer(self, index: int) -> Optional[AnswerResult]:
        """
        選択肢 index で解答する。

        すでに解答済み・終了済み・範囲外の index の場合は None（何もしない）。
        """
        question = self.current_question
        if question is None or self.has_answered:
            return None
        if not (0 <= index < len(question.options)):
            return None

        correct = question.is_correct(index)
        self.has_answered = True
        self.selected_index = index

        if correct:
            self.score += 1
            self.streak += 1
            self.best_streak = max(self.best_streak, self.streak)
            feedback = question.explanation_text or "Great job!"
        else:
            self.wrong += 1
            self.streak = 0
            feedback = f"Not quite. The correct answer is {question.correct_answer_label}."

        self.history.append(
            AnswerRecord(
                question_index=self.current_index,
                subject_country_name=question.subject_country_name,
                selected_index=index,
                correct_index=question.correct_index,
                correct=correct,
                answered_at=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            )
        )

        return AnswerResult(correct=correct, feedback=feedback, correct_index=question.correct_index)

    def advance(self) -> Optional[Question]:
        """
        次の問題へ進む。最後の問題の後なら finalize() して None。
        未解答のまま進もうとした場合は ValueError。
        """
        if self.is_complete:
            return None
        if not self.has_answered:
            raise ValueError("Pick an answer before moving on.")

        self.current_index += 1
        self.has_answered = False
        self.selected_index = None

        if self.current_index >= len(self.questions):
            self.finalize()
            return None
        return self.current_question

    def finalize(self) -> str:
        self.is_complete = True
        return self.summary()

    def summary(self) -> str:
        return (
            f"Quiz complete! You answered {self.score} out of "
            f"{self.total_questions} correctly."
        )

    # ---------------------------------------------------------
    # UI 用
    # ---------------------------------------------------------
    def get_score_status(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "wrong": self.wrong,
            "streak": self.streak,
            "best_streak": self.best_streak,
            "answered": len(self.history),
            "total": self.total_questions,
        }
