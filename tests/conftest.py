# tests/conftest.py
import pytest
from typing import List
from bulletin.models import Module, ScoredAssessment, Student

@pytest.fixture
def modules() -> dict:
    """Modules de test : deux au semestre 1, un au semestre 2."""
    return {
        "M1": Module("M1", "Tactique", "TAC", credits=4, coefficient=1, semester=1),
        "M2": Module("M2", "Topographie", "TOP", credits=2, coefficient=1, semester=1),
        "M3": Module("M3", "Droit des conflits", "DRC", credits=2, coefficient=1, semester=2),
    }

@pytest.fixture
def sample_students() -> List[Student]:
    return [
        Student("s1", "Kabila", "Jean", "MAT-001", promotion_id=1),
        Student("s2", "Mbala", "Aline", "MAT-002", promotion_id=1),
        Student("s3", "Tshala", "Marc", "MAT-003", promotion_id=2),
    ]

@pytest.fixture
def sample_notes(modules) -> List[ScoredAssessment]:
    """s1 : S1 = 13.33, S2 = 15, annuelle 13.75 ; s2 : annuelle 9.5, S2 = 13 ; s3 : aucune note."""
    return [
        ScoredAssessment("s1", "M1", 12, module=modules["M1"], appreciation="Sérieux"),
        ScoredAssessment("s1", "M2", 16, module=modules["M2"]),
        ScoredAssessment("s1", "M3", 15, module=modules["M3"], appreciation="Très impliqué"),
        ScoredAssessment("s2", "M1", 8, module=modules["M1"]),
        ScoredAssessment("s2", "M2", 9, module=modules["M2"]),
        ScoredAssessment("s2", "M3", 13, module=modules["M3"]),
    ]
