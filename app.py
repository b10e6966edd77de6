"""
app.py
======================

国クイズアプリ（Streamlit）エントリーポイント。

特徴:
- 起動時に REST Countries から国データを 1 回だけ読み込む（全セッションで共有）
- 国プールと進行状態はブラウザのセッションごとに持つ
- カテゴリ（人口 / 通貨 / 言語）→ 国 → スタート の順に選ぶ
- 1 クイズ 10 問、スコア・連続正解を表示
- 結果画面で解答履歴を表形式で表示、同じ条件で新しい問題セットに挑戦できる

内部ロジックはすべて geo_quiz パッケージから呼び、
ここでは画面遷移とセッション保持だけを扱う。
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import pandas as pd
import streamlit as st

from geo_quiz import (
    CATEGORIES,
    AppConfig,
    CountryRepository,
    DataSourceError,
    QuizEngine,
    QuizSession,
)
from geo_quiz.ui import CATEGORY_LABELS, render_header, render_quiz_page

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
LOGGER = logging.getLogger(__name__)


# ----------------------------------------------------------------------
#  国データ（プロセス共通）と QuizEngine / QuizSession（セッション単位）
# ----------------------------------------------------------------------
@st.cache_resource
def load_country_repository() -> CountryRepository:
    """
    国データを読み込んだ CountryRepository を返す。
    プロセス中 1 回だけ実行され、全セッションで同じ国リストを共有する。

    失敗した場合も CountryRepository を返し、理由は last_error に残る。
    """
    config = AppConfig.load()
    repository = CountryRepository(config)
    loader = QuizEngine(repository=repository, config=config)
    try:
        asyncio.run(loader.load_repository())
    except DataSourceError:
        LOGGER.warning("Starting without country data: %s", repository.last_error)
    return repository


def get_engine() -> QuizEngine:
    """
    セッションごとの QuizEngine。国プールはセッション単位で持つ。
    共有の国データが読み直された場合は作り直す。
    """
    repository = load_country_repository()
    engine = st.session_state.get("engine")
    if engine is None or engine.repository is not repository:
        engine = QuizEngine(repository=repository, config=repository.config)
        st.session_state["engine"] = engine
    return engine  # type: ignore[return-value]


def get_session() -> QuizSession:
    if "quiz_session" not in st.session_state:
        st.session_state["quiz_session"] = QuizSession()
    return st.session_state["quiz_session"]  # type: ignore[return-value]


def build_pool(engine: QuizEngine, difficulty: Optional[str]) -> None:
    """国プールを作り直し、使った難易度を覚えておく。"""
    engine.build_session_pool(difficulty=difficulty)
    st.session_state["pool_difficulty"] = difficulty


def set_page(page: str) -> None:
    st.session_state["page"] = page


def get_page() -> str:
    return st.session_state.get("page", "home")


# ----------------------------------------------------------------------
#  ページ: ホーム（カテゴリ・国の選択）
# ----------------------------------------------------------------------
def render_home_page(engine: QuizEngine) -> None:
    session = get_session()
    render_header(session.category, subtitle="Select a quiz type, then choose a country to get started.")

    if not engine.repository.is_loaded:
        error = engine.repository.last_error
        st.error(
            "Unable to load country data. "
            + (str(error) if error is not None else "Refresh and try again.")
        )
        if st.button("🔄 Retry", key="retry_load", use_container_width=True):
            load_country_repository.clear()
            st.rerun()
        return

    st.caption(f"{len(engine.repository.countries)} countries loaded")

    # カテゴリ
    cols = st.columns(len(CATEGORIES))
    for col, category in zip(cols, CATEGORIES):
        with col:
            if st.button(CATEGORY_LABELS[category], key=f"cat_{category}", use_container_width=True):
                session.select_category(category)
                st.session_state.pop("feedback", None)

    # 難易度とプール（難易度が変わったらプールを作り直す）
    difficulties: List[str] = list(engine.config.difficulty_settings.keys())
    if st.session_state.get("difficulty_choice") not in difficulties:
        remembered = st.session_state.get("pool_difficulty", engine.config.default_difficulty)
        st.session_state["difficulty_choice"] = (
            remembered if remembered in difficulties else difficulties[0]
        )
    difficulty = st.selectbox("Difficulty", difficulties, key="difficulty_choice")

    new_pool = st.button("🎲 New countries", key="new_pool", use_container_width=True)
    if new_pool or not engine.country_pool or difficulty != st.session_state.get("pool_difficulty"):
        build_pool(engine, difficulty)

    if session.category is None:
        st.info("Select a quiz type first to unlock the countries.")
        return

    names = [c.name for c in engine.country_pool]
    choice = st.radio("Countries", names, index=None, key="country_choice")
    if choice:
        if choice != session.selected_country_name:
            session.select_country(choice)
        st.write(f'You selected {choice}. Click "Start Quiz" to begin the {session.category} challenge.')

        if st.button("🚀 Start Quiz", key="start_quiz", use_container_width=True):
            questions = engine.generate_question_set(session.category)
            if not questions:
                st.warning("Not enough data to start this quiz. Try another category.")
                return
            session.start(questions)
            st.session_state.pop("feedback", None)
            set_page("quiz")
            st.rerun()


# ----------------------------------------------------------------------
#  ページ: クイズ
# ----------------------------------------------------------------------
def render_quiz_main_page(engine: QuizEngine) -> None:
    session = get_session()

    result = render_quiz_page(session, feedback=st.session_state.get("feedback"))

    if result["selected_choice"] is not None:
        answer = session.answer(result["selected_choice"])
        if answer is not None:
            st.session_state["feedback"] = {"correct": answer.correct, "message": answer.feedback}
        st.rerun()

    if result["clicked_next"]:
        session.advance()
        st.session_state.pop("feedback", None)
        if session.is_complete:
            set_page("results")
        st.rerun()

    if st.button("🏠 Home", key="quiz_home", use_container_width=True):
        set_page("home")
        st.rerun()


# ----------------------------------------------------------------------
#  ページ: 結果
# ----------------------------------------------------------------------
def render_results_page(engine: QuizEngine) -> None:
    session = get_session()
    render_header(session.category)

    st.success(session.summary())
    st.write(f"Best streak: **{session.best_streak}**")

    if session.history:
        rows = []
        for record in session.history:
            q = session.questions[record.question_index]
            rows.append(
                {
                    "#": record.question_index + 1,
                    "Country": record.subject_country_name,
                    "Your answer": q.options[record.selected_index].label,
                    "Correct answer": q.correct_answer_label,
                    "Result": "✅" if record.correct else "❌",
                }
            )
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    col1, col2, col3 = st.columns(3)
    with col1:
        if st.button(
            "🔄 Restart Quiz",
            key="restart_quiz",
            use_container_width=True,
            disabled=session.category is None,
        ):
            # 同じカテゴリ・プールで問題セットを作り直す
            questions = engine.generate_question_set(session.category)
            if questions:
                session.restart(questions)
                st.session_state.pop("feedback", None)
                set_page("quiz")
                st.rerun()
            st.warning("Not enough data to start this quiz. Try another category.")
    with col2:
        if st.button("🔁 Play Again", key="play_again", use_container_width=True):
            # 新しいプールで、選んでいた難易度のままもう一度
            build_pool(engine, st.session_state.get("pool_difficulty"))
            set_page("home")
            st.rerun()
    with col3:
        if st.button("🏠 Home", key="results_home", use_container_width=True):
            set_page("home")
            st.rerun()


# ----------------------------------------------------------------------
#  メイン
# ----------------------------------------------------------------------
def main() -> None:
    st.set_page_config(
        page_title="Country Quiz",
        page_icon="🌍",
        layout="centered",
    )

    engine = get_engine()
    page = get_page()

    if page == "quiz":
        render_quiz_main_page(engine)
    elif page == "results":
        render_results_page(engine)
    else:
        set_page("home")
        render_home_page(engine)


if __name__ == "__main__":
    main()
