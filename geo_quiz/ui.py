"""
ui.py
======================

Streamlit ベースの UI コンポーネントをまとめたモジュール。

責務:
- カテゴリごとのテーマカラーとスタイル
- 問題画面の描画（問題文・選択肢・フィードバック）
- スコアメーター（正解 / 不正解 / 連続正解）
- ナビゲーションボタン（次の問題 / 終了）

ここでは「見た目」と「ユーザー操作の入力」だけを扱い、
問題生成やスコア計算は QuizEngine / QuizSession 側に任せる。

戻り値として「何が押されたか」「どの選択肢が新たに選ばれたか」を返す。
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import streamlit as st

from .models import CURRENCY, LANGUAGES, POPULATION, Question
from .session import QuizSession

# ----------------------------------------------------------------------
#  カテゴリ別テーマ
# ----------------------------------------------------------------------
CATEGORY_COLORS: Dict[str, str] = {
    POPULATION: "#1f77b4",
    CURRENCY: "#2ca02c",
    LANGUAGES: "#9467bd",
}

CATEGORY_LABELS: Dict[str, str] = {
    POPULATION: "👥 Population",
    CURRENCY: "💰 Currency",
    LANGUAGES: "🗣️ Languages",
}

THEME = {
    "bg": "#ffffff",
    "text": "#1c1c1e",
    "surface": "#f2f2f7",
    "border": "#d1d1d6",
    "correct": "#34c759",
    "incorrect": "#ff3b30",
}


def category_color(category: Optional[str]) -> str:
    if not category:
        return "#000000"
    return CATEGORY_COLORS.get(category, "#000000")


# ----------------------------------------------------------------------
#  CSS 生成
# ----------------------------------------------------------------------
def _generate_css(accent: str) -> str:
    """カテゴリ色に応じたグローバル CSS を生成する。"""

    return f"""
    <style>
    .gq-container {{
        max-width: 700px;
        margin: 0 auto;
        padding: 1rem;
    }}

    .gq-mode-badge {{
        padding: 0.1rem 0.5rem;
        border-radius: 999px;
        border: 1px solid {accent};
        color: {accent};
        font-size: 0.75rem;
        white-space: nowrap;
    }}

    .gq-score {{
        display: flex;
        gap: 0.75rem;
        font-size: 0.85rem;
        margin-top: 0.25rem;
    }}

    .gq-score-bar {{
        flex: 1;
        height: 8px;
        background: {THEME['border']}55;
        border-radius: 4px;
        overflow: hidden;
        margin-top: 0.4rem;
    }}

    .gq-score-fill {{
        height: 8px;
        background: {accent};
        border-radius: 4px;
    }}

    .gq-question-box {{
        background: {THEME['surface']};
        padding: 1rem;
        border-radius: 12px;
        border: 1px solid {accent};
        font-size: 1.1rem;
        line-height: 1.6;
        margin: 0.5rem 0 0.75rem 0;
    }}

    .gq-feedback-correct {{
        color: {THEME['correct']};
        font-weight: 600;
    }}

    .gq-feedback-incorrect {{
        color: {THEME['incorrect']};
        font-weight: 600;
    }}
    </style>
    """


# ----------------------------------------------------------------------
#  ヘッダー / スコア
# ----------------------------------------------------------------------
def render_header(category: Optional[str], subtitle: str = "") -> None:
    accent = category_color(category)
    st.markdown(_generate_css(accent), unsafe_allow_html=True)

    col_left, col_right = st.columns([3, 1])
    with col_left:
        st.markdown("### 🌍 Country Quiz")
        if subtitle:
            st.caption(subtitle)
    with col_right:
        if category:
            st.markdown(
                f"<div style='text-align:right;'>"
                f"<span class='gq-mode-badge'>{CATEGORY_LABELS.get(category, category)}</span>"
                f"</div>",
                unsafe_allow_html=True,
            )


def render_score_meter(session: QuizSession) -> None:
    """正解数・不正解数・連続正解数と進捗バーを描画する。"""
    status = session.get_score_status()
    total = status["total"]
    percent = int(status["answered"] / total * 100) if total else 0
    accent = category_color(session.category)

    html = (
        "<div class='gq-score'>"
        f"<div>✅ {status['score']}</div>"
        f"<div>❌ {status['wrong']}</div>"
        f"<div>🔥 {status['streak']}</div>"
        "</div>"
        "<div class='gq-score-bar'>"
        f"<div class='gq-score-fill' style='width:{percent}%; background:{accent}'></div>"
        "</div>"
    )
    st.markdown(html, unsafe_allow_html=True)


# ----------------------------------------------------------------------
#  公開 API: クイズページの描画
# ----------------------------------------------------------------------
def render_quiz_page(session: QuizSession, feedback: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    問題画面を描画し、ユーザー操作の結果を返す。

    引数:
        session:
            QuizSession。start() 済みである前提。
        feedback:
            直前の解答結果 {"correct": bool, "message": str}。なければ None。

    戻り値:
        {
          "selected_choice": Optional[int],   # 新たに押された選択肢 index
          "clicked_next": bool,
        }
    """
    selected_choice: Optional[int] = None
    clicked_next = False

    render_header(session.category, subtitle=f"Country: {session.selected_country_name or '-'}")
    render_score_meter(session)

    q: Optional[Question] = session.current_question

    if q is None:
        # 終了後は結果ページ側で扱う
        return {"selected_choice": None, "clicked_next": False}

    st.markdown(
        f"<div class='gq-question-box'>"
        f"Question {session.question_number} of {session.total_questions}: {q.prompt_text}"
        f"</div>",
        unsafe_allow_html=True,
    )

    # ----------------------------------------
    # 選択肢
    # ----------------------------------------
    for idx, option in enumerate(q.options):
        label = option.label
        if session.has_answered:
            if idx == q.correct_index:
                label = f"✅ {label}"
            elif idx == session.selected_index:
                label = f"❌ {label}"

        if st.button(
            label,
            key=f"gq_choice_{session.current_index}_{idx}",
            use_container_width=True,
            disabled=session.has_answered,
        ):
            selected_choice = idx

    # ----------------------------------------
    # フィードバック（解答済みの場合のみ）
    # ----------------------------------------
    if session.has_answered and feedback:
        css = "gq-feedback-correct" if feedback.get("correct") else "gq-feedback-incorrect"
        st.markdown(
            f"<div class='{css}'>{feedback.get('message', '')}</div>",
            unsafe_allow_html=True,
        )

    # ----------------------------------------
    # ナビゲーション
    # ----------------------------------------
    next_label = "Finish Quiz" if session.is_last_question else "Next Question ▶"
    if st.button(
        next_label,
        key="gq_next",
        use_container_width=True,
        disabled=not session.has_answered,
    ):
        clicked_next = True

    return {
        "selected_choice": selected_choice,
        "clicked_next": clicked_next,
    }
