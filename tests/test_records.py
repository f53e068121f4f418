# tests/test_records.py
import logging
import pytest
from bulletin.records import (
    to_number, round2, extract_items, normalize_module, normalize_assessment,
    normalize_student, normalize_records,
)

@pytest.mark.parametrize("value, expected", [
    (12, 12.0), (12.5, 12.5), ("14", 14.0), (" 9,5 ", 9.5),
    (None, None), ("", None), ("abc", None), (float("nan"), None), (True, None), ([1], None),
    (10 ** 400, None), ("1e400", None),
])
def test_to_number(value, expected):
    assert to_number(value) == expected

def test_round2_rounds_half_up():
    assert round2(12.125) == 12.13
    assert round2(37 / 3) == 12.33
    assert round2(8) == 8.0

def test_extract_items_accepts_every_payload_shape():
    assert extract_items([{"id": 1}], "notes") == [{"id": 1}]
    assert extract_items({"message": "ok", "data": [{"id": 2}]}, "notes") == [{"id": 2}]
    assert extract_items({"notes": [{"id": 3}]}, "notes") == [{"id": 3}]
    assert extract_items({"message": "vide"}, "notes") == []
    assert extract_items(None, "notes") == []

def test_normalize_module_defaults():
    m = normalize_module({"id": "M1", "name": "Balistique", "credits": "3", "semester": "2"})
    assert m.title == "Balistique"
    assert m.credits == 3.0
    assert m.coefficient == 1.0
    assert m.semester == 2

    bare = normalize_module({"id": "M2"})
    assert bare.title == "Module"
    assert bare.credits == 0.0
    assert bare.semester is None

def test_normalize_module_keeps_explicit_zero_coefficient():
    assert normalize_module({"id": "M1", "coefficient": 0}).coefficient == 0.0

def test_score_derived_from_ec_and_ef():
    a = normalize_assessment({"studentId": "s1", "moduleId": "M1",
                              "continuousAssessment": 10, "finalExam": 14})
    assert a.score == 12.4
    assert a.continuous_assessment == 10
    assert a.final_exam == 14

def test_short_aliases_and_partial_components():
    a = normalize_assessment({"studentId": "s1", "ce": "15"})
    assert a.score == 6.0
    assert a.final_exam is None

def test_explicit_score_wins_and_missing_everything_is_zero():
    assert normalize_assessment({"score": "11.5", "ce": 20, "fe": 20}).score == 11.5
    assert normalize_assessment({"studentId": "s1"}).score == 0.0

def test_session_and_appreciation_fallbacks():
    a = normalize_assessment({"sessionType": "Rattrapage", "noteAppreciation": "Peut mieux faire"})
    assert a.session == "Rattrapage"
    assert a.appreciation == "Peut mieux faire"

    default = normalize_assessment({})
    assert default.session == "Normale"
    assert default.appreciation == ""

def test_nested_module_takes_precedence():
    table = {"M1": normalize_module({"id": "M1", "credits": 6, "semester": 1})}
    a = normalize_assessment({"moduleId": "M1", "module": {"credits": 2, "semester": 2}, "score": 12}, table)
    assert a.module.credits == 2
    assert a.module.id == "M1"
    assert a.semester == 2

def test_unknown_module_is_logged(caplog):
    with caplog.at_level(logging.WARNING):
        a = normalize_assessment({"id": "n1", "moduleId": "MX", "score": 12}, {})
    assert a.module is None
    assert a.module_id == "MX"
    assert "MX" in caplog.text

def test_normalize_records_resolves_module_ids():
    notes = normalize_records(
        [{"studentId": "s1", "moduleId": "M1", "score": 12},
         {"studentId": "s1", "moduleId": "M2", "ce": 10, "fe": 10}],
        [{"id": "M1", "credits": 4, "semester": 1}, {"id": "M2", "credits": 2, "semester": 2}],
    )
    assert [n.module.credits for n in notes] == [4.0, 2.0]
    assert notes[1].score == 10.0

def test_normalize_student_reads_nested_promotion():
    s = normalize_student({"id": "s9", "nom": "Ilunga", "prenom": "Paul",
                           "matricule": "MAT-009", "promotion": {"id": 3, "nom": "P3"}})
    assert s.promotion_id == 3
    assert s.full_name == "Ilunga Paul"

def test_out_of_range_score_falls_back_to_components():
    assert normalize_assessment({"score": 10 ** 400, "ce": 10, "fe": 14}).score == 12.4
