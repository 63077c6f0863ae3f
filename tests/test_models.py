"""Tests for the submission data model and answer flattening."""

from surveyrelay.components.models import (
    HandlerResult,
    MultiSelectAnswer,
    ScalarAnswer,
    SubmissionRequest,
    build_delivery_record,
    flatten_answer,
    parse_answer,
)


def test_parse_answer_tags_lists_as_multi_select():
    answer = parse_answer(["A", "B"])

    assert isinstance(answer, MultiSelectAnswer)
    assert answer.kind == "multi"
    assert answer.values == ["A", "B"]


def test_parse_answer_tags_strings_as_scalar():
    answer = parse_answer("Daily")

    assert isinstance(answer, ScalarAnswer)
    assert answer.kind == "scalar"
    assert answer.value == "Daily"


def test_parse_answer_renders_non_string_values_like_form_data():
    assert parse_answer(5).value == "5"
    assert parse_answer(1.0).value == "1"
    assert parse_answer(2.5).value == "2.5"
    assert parse_answer(True).value == "true"
    assert parse_answer(None).value == "null"
    assert parse_answer(["x", None, 3, False]).values == ["x", "", "3", "false"]
    assert parse_answer([["a", "b"], ["c", None]]).values == ["a,b", "c,"]
    assert parse_answer({"a": 1}).value == '{"a": 1}'


def test_flatten_answer_joins_multi_select_with_comma():
    assert flatten_answer(MultiSelectAnswer(values=["A", "B"])) == "A, B"
    assert flatten_answer(MultiSelectAnswer(values=["A"])) == "A"
    assert flatten_answer(MultiSelectAnswer(values=[])) == ""


def test_flatten_answer_is_deterministic():
    first = flatten_answer(parse_answer(["A", "B"]))
    second = flatten_answer(parse_answer(["A", "B"]))

    assert first == second == "A, B"


def test_build_delivery_record_puts_timestamp_first():
    record = build_delivery_record(
        {"q1": "Daily", "q2": ["Price", "Taste"], "q21": ["No, just completing the survey"]},
        "2025-01-31T12:00:00.000Z",
    )

    assert list(record) == ["timestamp", "q1", "q2", "q21"]
    assert record == {
        "timestamp": "2025-01-31T12:00:00.000Z",
        "q1": "Daily",
        "q2": "Price, Taste",
        "q21": "No, just completing the survey",
    }
    assert all(isinstance(value, str) for value in record.values())


def test_build_delivery_record_lets_a_timestamp_question_replace_the_generated_one():
    record = build_delivery_record({"timestamp": "from client"}, "2025-01-31T12:00:00.000Z")

    assert record == {"timestamp": "from client"}


def test_handler_result_success_body():
    result = HandlerResult.success("abc")

    assert result.status_code == 200
    assert result.is_json
    assert result.body == {"message": "Survey submitted successfully!", "submissionId": "abc"}


def test_submission_request_generates_request_id():
    first = SubmissionRequest(method="POST")
    second = SubmissionRequest(method="POST")

    assert first.request_id
    assert first.request_id != second.request_id
    assert first.body is None
    assert first.is_base64_encoded is False
