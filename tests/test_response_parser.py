# tests/test_response_parser.py
from __future__ import annotations

import json

import pytest

from domain.exceptions import MalformedResponseError, ProxyError
from domain.services.response_parser import (
    clean_json,
    extract_text,
    parse_challenge,
    parse_document,
    parse_envelope,
)
from fakes import envelope, fenced, sql_document, sql_question


def test_fenced_and_unfenced_documents_parse_the_same() -> None:
    doc = sql_document()

    assert parse_document(fenced(doc)) == parse_document(json.dumps(doc))
    assert parse_challenge(fenced(doc), "sql") == parse_challenge(json.dumps(doc), "sql")


def test_clean_json_normalizes_escaped_single_quotes() -> None:
    raw = "```json\n{\"data_sql\": \"INSERT INTO t VALUES (\\'x\\')\"}\n```"
    assert clean_json(raw) == "{\"data_sql\": \"INSERT INTO t VALUES ('x')\"}"


def test_flat_document_is_wrapped_into_one_question() -> None:
    flat = {
        "schema_sql": "CREATE TABLE t(id INT);",
        "data_sql": "INSERT INTO t VALUES (1);",
        "title": "Count rows",
        "difficulty": "Hard",
        "tags": ["CTE", "Window"],
        "question": "How many rows?",
        "solution_sql": "SELECT COUNT(*) FROM t",
        "explanation": "Just count.",
    }

    challenge = parse_challenge(json.dumps(flat), "sql")

    assert len(challenge.questions) == 1
    q = challenge.questions[0]
    assert q.title == "Count rows"
    assert q.difficulty == "Hard"
    assert q.tags == ["CTE", "Window"]
    assert q.question == "How many rows?"
    assert q.solution == "SELECT COUNT(*) FROM t"
    assert q.explanation == "Just count."


def test_nested_document_keeps_question_order() -> None:
    doc = sql_document(questions=[
        sql_question("First", "SELECT 1", "Easy"),
        sql_question("Second", "SELECT 2", "Medium"),
        sql_question("Third", "SELECT 3", "Hard"),
    ])

    challenge = parse_challenge(json.dumps(doc), "sql")

    assert [q.title for q in challenge.questions] == ["First", "Second", "Third"]
    assert challenge.schema_sql == doc["schema_sql"]
    assert challenge.data_sql == doc["data_sql"]


def test_null_tags_default_to_empty_list() -> None:
    q = sql_question("T", "SELECT 1")
    q["tags"] = None
    challenge = parse_challenge(json.dumps(sql_document(questions=[q])), "sql")
    assert challenge.questions[0].tags == []


def test_invalid_json_is_malformed() -> None:
    with pytest.raises(MalformedResponseError):
        parse_challenge("```json\n{not json\n```", "sql")


def test_non_object_document_is_malformed() -> None:
    with pytest.raises(MalformedResponseError):
        parse_challenge("[1, 2, 3]", "sql")


@pytest.mark.parametrize("missing", ["schema_sql", "data_sql", "questions"])
def test_missing_sql_fields_are_malformed(missing: str) -> None:
    doc = sql_document()
    del doc[missing]
    with pytest.raises(MalformedResponseError):
        parse_challenge(json.dumps(doc), "sql")


def test_empty_questions_list_is_malformed() -> None:
    doc = sql_document()
    doc["questions"] = []
    with pytest.raises(MalformedResponseError):
        parse_challenge(json.dumps(doc), "sql")


def test_python_document_normalizes_to_single_question() -> None:
    doc = {
        "title": "Missing ages",
        "dataset_description": "Passengers of the Titanic.",
        "task_details": "- Count missing values in `Age`",
        "question": "How many ages are missing?",
        "starter_code": "import pandas as pd\ndf = pd.read_csv('titanic.csv')",
        "solution_code": "print(df['Age'].isna().sum())",
        "explanation": "isna().sum() counts NaNs.",
    }

    challenge = parse_challenge(fenced(doc), "python", dataset_id="titanic")

    assert challenge.kind == "python"
    assert challenge.dataset_id == "titanic"
    assert challenge.dataset_description == "Passengers of the Titanic."
    q = challenge.questions[0]
    assert q.starter_code == doc["starter_code"]
    assert q.solution == doc["solution_code"]
    assert q.task_details == doc["task_details"]


def test_python_document_without_starter_code_is_malformed() -> None:
    doc = {"title": "x", "solution_code": "print(1)"}
    with pytest.raises(MalformedResponseError):
        parse_challenge(json.dumps(doc), "python")


def test_extract_text_reads_first_candidate() -> None:
    assert extract_text(envelope("hello")) == "hello"


def test_error_envelope_raises_proxy_error() -> None:
    with pytest.raises(ProxyError) as exc:
        extract_text({"error": {"message": "quota exceeded"}})
    assert str(exc.value) == "quota exceeded"


def test_envelope_without_candidates_raises_proxy_error() -> None:
    with pytest.raises(ProxyError):
        parse_envelope({"candidates": []}, "sql")


def test_fingerprint_tracks_challenge_content() -> None:
    doc = sql_document()
    other = sql_document(questions=[sql_question("Other", "SELECT 2")])

    first = parse_challenge(json.dumps(doc), "sql")
    assert first.fingerprint == parse_challenge(fenced(doc), "sql").fingerprint
    assert first.fingerprint != parse_challenge(json.dumps(other), "sql").fingerprint
    assert first.to_dict()["fingerprint"] == first.fingerprint
