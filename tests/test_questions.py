import pytest

from leverage_audit.assessment.questions import (
    Component,
    Question,
    QuestionType,
    get_question,
    get_questions,
    has_question_answers,
    max_points,
)


def test_catalog_has_four_sections_of_six():
    questions = get_questions()
    assert len(questions) == 24
    assert [q.id for q in questions] == [f"q{i}" for i in range(1, 25)]
    for component in Component:
        assert len(get_questions(component)) == 6


def test_max_points_per_component():
    assert max_points(Component.TIME_ALLOCATION) == 20
    assert max_points(Component.DELEGATION_QUALITY) == 19
    assert max_points(Component.STRATEGIC_FOCUS) == 13
    assert max_points(Component.OPERATING_RHYTHM) == 12


def test_enumerated_questions_have_options():
    for question in get_questions():
        if question.type is QuestionType.ENUMERATED:
            assert question.options
        else:
            assert question.options == ()


def test_question_rejects_missing_options():
    with pytest.raises(ValueError):
        Question('qx', 'Broken', QuestionType.ENUMERATED, Component.TIME_ALLOCATION, 3)


def test_question_rejects_non_positive_points():
    with pytest.raises(ValueError):
        Question('qx', 'Broken', QuestionType.BOOLEAN, Component.STRATEGIC_FOCUS, 0)


def test_accepts_only_well_formed_answers():
    q1 = get_question('q1')
    assert q1.accepts('Daily')
    assert not q1.accepts('Sometimes')
    assert not q1.accepts(True)

    q13 = get_question('q13')
    assert q13.accepts(False)
    assert not q13.accepts('yes')


def test_reverse_scored_items():
    reversed_ids = {q.id for q in get_questions() if q.reverse_scored}
    assert reversed_ids == {'q5', 'q6', 'q11', 'q12', 'q17', 'q18', 'q23', 'q24'}


def test_has_question_answers_ignores_lead_details():
    assert not has_question_answers({})
    assert not has_question_answers({'name': 'Dana', 'email': 'dana@acme.io'})
    assert has_question_answers({'q3': 'Weekly'})
