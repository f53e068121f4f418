# bulletin/models.py
"""Modèles de données : modules, notes, étudiants et résultat pondéré."""
from typing import Any, Dict, List, Optional

class Module:
    """Unité d'enseignement avec ses crédits, son coefficient et son semestre."""
    def __init__(self, module_id: Any, title: str = "", code: Optional[str] = None,
                 credits: float = 0.0, coefficient: float = 1.0, semester: Optional[int] = None):
        self.id = module_id
        self.title = title
        self.code = code
        self.credits = credits
        self.coefficient = coefficient
        self.semester = semester

    def __repr__(self) -> str:
        return (f"Module(id={self.id!r}, title='{self.title}', credits={self.credits}, "
                f"coefficient={self.coefficient}, semester={self.semester})")


class Student:
    """Élève officier tel que fourni par le registre des étudiants."""
    def __init__(self, student_id: Any, nom: str = "", prenom: str = "",
                 matricule: str = "", promotion_id: Any = None):
        self.id = student_id
        self.nom = nom
        self.prenom = prenom
        self.matricule = matricule
        self.promotion_id = promotion_id

    @property
    def full_name(self) -> str:
        return f"{self.nom} {self.prenom}".strip()

    def __repr__(self) -> str:
        return f"Student(id={self.id!r}, name='{self.full_name}', matricule='{self.matricule}')"


class ScoredAssessment:
    """Note d'un étudiant pour un module dans une session.

    Le score est déjà normalisé (voir ``bulletin.records``) : EC et EF sont
    conservés à titre d'information, seul ``score`` entre dans les moyennes.
    """
    def __init__(self, student_id: Any, module_id: Any, score: float = 0.0,
                 module: Optional[Module] = None,
                 continuous_assessment: Optional[float] = None,
                 final_exam: Optional[float] = None,
                 session: str = "Normale", appreciation: str = "",
                 assessment_id: Any = None):
        self.id = assessment_id
        self.student_id = student_id
        self.module_id = module_id
        self.module = module
        self.continuous_assessment = continuous_assessment
        self.final_exam = final_exam
        self.score = score
        self.session = session
        self.appreciation = appreciation

    @property
    def semester(self) -> Optional[int]:
        """Semestre du module rattaché, ``None`` si le module est inconnu."""
        return self.module.semester if self.module is not None else None

    def __repr__(self) -> str:
        return (f"ScoredAssessment(student_id={self.student_id!r}, module_id={self.module_id!r}, "
                f"score={self.score})")


class WeightedResult:
    """Résultat d'un calcul de moyenne pondérée. Jamais persisté."""
    def __init__(self, avg: float = 0.0, total_weight: float = 0.0,
                 total_credits: float = 0.0, weighted_sum: float = 0.0):
        self.avg = avg
        self.total_weight = total_weight
        self.total_credits = total_credits
        self.weighted_sum = weighted_sum

    def to_dict(self) -> Dict[str, float]:
        """Forme attendue par les tableaux et exports (clés camelCase)."""
        return {
            "avg": self.avg,
            "totalWeight": self.total_weight,
            "totalCredits": self.total_credits,
            "weightedSum": self.weighted_sum,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightedResult):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (f"WeightedResult(avg={self.avg}, total_weight={self.total_weight}, "
                f"total_credits={self.total_credits}, weighted_sum={self.weighted_sum})")

    def __str__(self) -> str:
        return f"Moyenne : {self.avg:.2f} / 20 | Poids évalués : {self.total_weight:g} | Crédits : {self.total_credits:g}"


class StudentBulletin:
    """Bulletin d'un étudiant : moyennes semestrielles, annuelle, mention et décision."""
    def __init__(self, student: Student, assessments: List[ScoredAssessment],
                 semesters: Dict[int, WeightedResult], annual: WeightedResult,
                 mention: str, decision: str, appreciations: str = ""):
        self.student = student
        self.assessments = assessments
        self.semesters = semesters
        self.annual = annual
        self.mention = mention
        self.decision = decision
        self.appreciations = appreciations

    @property
    def average(self) -> float:
        return self.annual.avg

    def __repr__(self) -> str:
        return (f"StudentBulletin(student_id={self.student.id!r}, average={self.average:.2f}, "
                f"decision='{self.decision}')")

    def __str__(self) -> str:
        return (f"Matricule : {self.student.matricule or '—':<10} | {self.student.full_name:<25} | "
                f"Moyenne : {self.average:<6.2f} | {self.mention:<10} | {self.decision}")
