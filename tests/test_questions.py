import random

import pytest

from conftest import make_country
from geo_quiz.questions import (
    FALLBACK_CURRENCIES,
    FALLBACK_LANGUAGES,
    build_currency_question,
    build_languages_question,
    build_population_question,
    build_question,
    format_population,
    has_data_for_category,
)


def assert_well_formed(question, true_value) -> None:
    values = [o.value for o in question.options]
    assert len(values) == 4
    assert len(set(values)) == 4
    assert question.options[question.correct_index].value == true_value
    assert values.count(true_value) == 1
    assert question.correct_answer_label == question.options[question.correct_index].label


# ----------------------------------------------------------------------
#  出題可否 / 表示
# ----------------------------------------------------------------------
def test_has_data_for_category() -> None:
    full = make_country("Kenya", 54_000_000, ["Kenyan shilling"], ["English"])
    empty = make_country("Nowhere", 0, [], [])
    blank_first = make_country("Blank", 10, [""], [""])

    assert has_data_for_category(full, "population")
    assert has_data_for_category(full, "currency")
    assert has_data_for_category(full, "languages")

    assert not has_data_for_category(empty, "population")
    assert not has_data_for_category(empty, "currency")
    assert not has_data_for_category(empty, "languages")

    assert not has_data_for_category(blank_first, "currency")
    assert not has_data_for_category(blank_first, "languages")


def test_has_data_for_category_rejects_unknown_category() -> None:
    with pytest.raises(ValueError):
        has_data_for_category(make_country("Kenya"), "capital")


def test_format_population() -> None:
    assert format_population(1_234_567) == "1,234,567 people"
    assert format_population(100_000.4) == "100,000 people"
    assert format_population(None) == "Unknown"
    assert format_population(float("nan")) == "Unknown"
    assert format_population(float("inf")) == "Unknown"


# ----------------------------------------------------------------------
#  人口
# ----------------------------------------------------------------------
def test_population_question_uses_other_countries_populations(rng) -> None:
    pool = [
        make_country("A", 100),
        make_country("B", 200),
        make_country("C", 300),
        make_country("D", 400),
    ]

    question = build_population_question(pool[0], pool, rng)

    assert question is not None
    assert_well_formed(question, 100)
    assert sorted(o.value for o in question.options) == [100, 200, 300, 400]
    assert question.category == "population"
    assert question.subject_country_name == "A"
    assert question.prompt_text == "What is the population of A?"
    assert question.correct_answer_label == "100 people"
    assert question.explanation_text == "A has a population of 100 people."


def test_population_question_falls_back_to_ratios(rng) -> None:
    subject = make_country("Solo", 50_000_000)

    question = build_population_question(subject, [subject], rng)

    assert question is not None
    assert_well_formed(question, 50_000_000)
    distractors = {o.value for o in question.options} - {50_000_000}
    assert len(distractors) == 3
    assert distractors <= {27_500_000, 37_500_000, 60_000_000, 70_000_000, 90_000_000}


def test_population_fallback_tops_up_partial_candidates(rng) -> None:
    subject = make_country("Big", 10_000_000)
    pool = [subject, make_country("Other", 20_000_000)]

    question = build_population_question(subject, pool, rng)

    assert question is not None
    assert_well_formed(question, 10_000_000)
    values = {o.value for o in question.options}
    assert 20_000_000 in values
    extras = values - {10_000_000, 20_000_000}
    assert len(extras) == 2
    assert extras <= {5_500_000, 7_500_000, 12_000_000, 14_000_000, 18_000_000}


def test_population_fallback_ratio_order_varies() -> None:
    subject = make_country("Solo", 10_000_000)
    smallest = 0

    for seed in range(200):
        question = build_population_question(subject, [subject], random.Random(seed))
        assert question is not None
        assert_well_formed(question, 10_000_000)
        if min(o.value for o in question.options) == 10_000_000:
            smallest += 1

    # 倍率の順序が固定だと 0.55 / 0.75 が必ず選ばれ、正解が最小になることはない
    assert smallest > 0


def test_population_fallback_never_goes_below_floor(rng) -> None:
    subject = make_country("Small", 150_000)

    question = build_population_question(subject, [subject], rng)

    assert question is not None
    assert_well_formed(question, 150_000)
    assert all(o.value >= 100_000 for o in question.options)


def test_population_question_gives_up_when_values_collapse(rng) -> None:
    # 倍率をかけてもすべて下限 100,000 に張り付くので 4 つの値にならない
    subject = make_country("Tiny", 100)
    assert build_population_question(subject, [subject], rng) is None


def test_population_question_skips_duplicate_populations(rng) -> None:
    subject = make_country("A", 1_000_000)
    pool = [
        subject,
        make_country("Twin", 1_000_000),
        make_country("B", 2_000_000),
        make_country("C", 2_000_000),
        make_country("D", 3_000_000),
        make_country("E", 4_000_000),
    ]

    for _ in range(30):
        question = build_population_question(subject, pool, rng)
        assert question is not None
        assert_well_formed(question, 1_000_000)


# ----------------------------------------------------------------------
#  通貨
# ----------------------------------------------------------------------
def test_currency_question_draws_from_every_listed_currency(rng) -> None:
    subject = make_country("Zimbabwe", 15_000_000, ["Zimbabwean dollar"])
    pool = [
        subject,
        make_country("Panama", 4_000_000, ["Panamanian balboa", "Zimbabwean dollar"]),
        make_country("Bhutan", 800_000, ["Bhutanese ngultrum", "Tongan paʻanga"]),
    ]

    question = build_currency_question(subject, pool, rng)

    assert question is not None
    assert_well_formed(question, "Zimbabwean dollar")
    assert {o.value for o in question.options} == {
        "Zimbabwean dollar",
        "Panamanian balboa",
        "Bhutanese ngultrum",
        "Tongan paʻanga",
    }
    assert question.prompt_text == "What is the currency of Zimbabwe?"
    assert question.explanation_text == "The currency of Zimbabwe is the Zimbabwean dollar."


def test_currency_question_uses_fallback_names(rng) -> None:
    subject = make_country("Poland", 38_000_000, ["Polish złoty"])

    question = build_currency_question(subject, [subject], rng)

    assert question is not None
    assert_well_formed(question, "Polish złoty")
    distractors = [o.value for o in question.options if o.value != "Polish złoty"]
    assert all(d in FALLBACK_CURRENCIES for d in distractors)


def test_currency_fallback_skips_the_correct_answer(rng) -> None:
    subject = make_country("Germany", 83_000_000, ["Euro"])
    pool = [subject, make_country("France", 68_000_000, ["Euro"])]

    for _ in range(30):
        question = build_currency_question(subject, pool, rng)
        assert question is not None
        assert_well_formed(question, "Euro")


def test_currency_question_requires_subject_data(rng) -> None:
    subject = make_country("Antarctica", 1_000, [])
    pool = [subject, make_country("A", 1, ["Euro"]), make_country("B", 1, ["Yen"])]

    assert build_currency_question(subject, pool, rng) is None


def test_currency_question_never_fails_with_distinct_primaries(world) -> None:
    rng = random.Random(5)
    eligible = [c for c in world if c.name not in ("Germany",)]
    for seed in range(20):
        rng.seed(seed)
        for subject in eligible:
            question = build_currency_question(subject, eligible, rng)
            assert question is not None
            assert_well_formed(question, subject.currencies[0])


# ----------------------------------------------------------------------
#  言語
# ----------------------------------------------------------------------
def test_languages_question_uses_primary_language_as_answer(world, rng) -> None:
    subject = next(c for c in world if c.name == "Switzerland")

    question = build_languages_question(subject, world, rng)

    assert question is not None
    assert_well_formed(question, "French")
    assert question.prompt_text == "Which language is spoken in Switzerland?"
    assert question.explanation_text == "French is spoken in Switzerland."


def test_languages_question_uses_fallback_names(rng) -> None:
    subject = make_country("Tuvalu", 11_000, ["Australian dollar"], ["Tuvaluan"])

    question = build_languages_question(subject, [subject], rng)

    assert question is not None
    assert_well_formed(question, "Tuvaluan")
    distractors = [o.value for o in question.options if o.value != "Tuvaluan"]
    assert all(d in FALLBACK_LANGUAGES for d in distractors)


def test_option_order_is_randomized(world) -> None:
    rng = random.Random(11)
    subject = world[0]
    positions = {
        build_languages_question(subject, world, rng).correct_index for _ in range(60)
    }
    assert positions == {0, 1, 2, 3}


# ----------------------------------------------------------------------
#  ディスパッチ
# ----------------------------------------------------------------------
def test_build_question_dispatches_by_category(world, rng) -> None:
    subject = world[1]
    assert build_question("population", subject, world, rng).category == "population"
    assert build_question("currency", subject, world, rng).category == "currency"
    assert build_question("languages", subject, world, rng).category == "languages"


def test_build_question_rejects_unknown_category(world, rng) -> None:
    with pytest.raises(ValueError):
        build_question("capital", world[0], world, rng)


def test_question_to_dict(world, rng) -> None:
    question = build_question("currency", world[1], world, rng)
    data = question.to_dict()

    assert data["question"] == question.prompt_text
    assert len(data["options"]) == 4
    assert data["options"][data["correct_index"]]["value"] == "Japanese yen"
    assert data["explanation"] == question.explanation_text
