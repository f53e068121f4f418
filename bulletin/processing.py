# bulletin/processing.py
"""Calcul des moyennes pondérées, mentions et décisions ; assemblage des bulletins.

Les fonctions de calcul sont pures et ne lèvent jamais d'exception : une
valeur manquante ou non numérique compte pour 0 au lieu de faire échouer
tout le bulletin.
"""
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from . import config
from .errors import StudentNotFoundError
from .models import ScoredAssessment, Student, StudentBulletin, WeightedResult
from .records import round2, to_number

SemesterFilter = Union[int, str]

MENTION_FAIL = "Ajourné"
DECISION_PASSED = "Validé"
DECISION_COMPENSATED = "Validé (compensation)"
DECISION_FAILED = "Ajourné"

# Seuils inférieurs inclusifs, du plus haut au plus bas
MENTION_BANDS = (
    (18.0, "Excellent"),
    (16.0, "Très bien"),
    (14.0, "Bien"),
    (12.0, "Assez bien"),
    (10.0, "Passable"),
)


def assessment_weight(assessment: ScoredAssessment) -> Tuple[float, float]:
    """Renvoie (poids, crédits) d'une note.

    Poids = crédits × coefficient si le module a des crédits (un coefficient
    absent ou nul y vaut 1), sinon le coefficient seul ; sans crédits, un
    coefficient nul ou négatif donne un poids nul.
    """
    module = assessment.module
    credits = to_number(getattr(module, "credits", None)) or 0.0
    coefficient = to_number(getattr(module, "coefficient", None))
    if coefficient is None:
        coefficient = 1.0

    if credits > 0:
        weight = credits * (coefficient if coefficient > 0 else 1.0)
    else:
        weight = coefficient if coefficient > 0 else 0.0
    return weight, credits


def compute_weighted_average(assessments: Iterable[ScoredAssessment]) -> WeightedResult:
    """Moyenne pondérée d'une liste de notes, arrondie à 2 décimales."""
    weighted_sum = 0.0
    total_weight = 0.0
    total_credits = 0.0

    for assessment in assessments:
        weight, credits = assessment_weight(assessment)
        score = to_number(getattr(assessment, "score", None)) or 0.0

        if weight > 0:
            weighted_sum += score * weight
            total_weight += weight

        # Les crédits comptent même quand le poids est nul
        total_credits += credits

    avg = 0.0
    if total_weight > 0:
        quotient = weighted_sum / total_weight
        # Débordement flottant (inf, nan) : la moyenne retombe à 0
        avg = round2(quotient) if math.isfinite(quotient) else 0.0
    return WeightedResult(avg=avg, total_weight=total_weight,
                          total_credits=total_credits, weighted_sum=weighted_sum)


def compute_mention(score: float) -> str:
    """Mention correspondant à une note sur 20 (les bornes vont à la mention supérieure)."""
    value = to_number(score) or 0.0
    for floor, mention in MENTION_BANDS:
        if value >= floor:
            return mention
    return MENTION_FAIL


def decision_from_average(avg: float, semester_averages: Optional[Sequence[float]] = None,
                          compensation: bool = False) -> str:
    """Décision de validation à partir de la moyenne annuelle.

    Avec ``compensation=True``, une moyenne dans [9.5, 10) est validée par
    compensation si au moins un semestre atteint 12.
    """
    value = to_number(avg) or 0.0
    if value >= config.PASS_THRESHOLD:
        return DECISION_PASSED
    if compensation and value >= config.COMPENSATION_FLOOR:
        semesters = [to_number(s) or 0.0 for s in (semester_averages or [])]
        if any(s >= config.COMPENSATION_SEMESTER_MIN for s in semesters):
            return DECISION_COMPENSATED
    return DECISION_FAILED


def compute_semester_average(assessments: Iterable[ScoredAssessment], semester: int) -> WeightedResult:
    """Moyenne pondérée restreinte aux modules du semestre donné (``1`` ou ``"1"``)."""
    wanted = to_number(semester)
    if wanted is None:
        return compute_weighted_average([])
    return compute_weighted_average(a for a in assessments if to_number(a.semester) == wanted)


def compute_annual_average(assessments: Iterable[ScoredAssessment],
                           semester_filter: SemesterFilter = "all") -> WeightedResult:
    """Moyenne annuelle : toutes les notes, ou un seul semestre si un filtre est donné."""
    if semester_filter != "all":
        return compute_semester_average(assessments, semester_filter)
    return compute_weighted_average(assessments)


def notes_for_student(assessments: Iterable[ScoredAssessment], student_id: Any) -> List[ScoredAssessment]:
    return [a for a in assessments if str(a.student_id) == str(student_id)]


def build_student_bulletin(student: Student, assessments: Iterable[ScoredAssessment],
                           compensation: bool = False) -> StudentBulletin:
    """Assemble le bulletin d'un étudiant à partir de l'ensemble des notes."""
    notes = notes_for_student(assessments, student.id)
    semesters = {sem: compute_semester_average(notes, sem) for sem in config.SEMESTERS}
    annual = compute_annual_average(notes)
    decision = decision_from_average(
        annual.avg, [result.avg for result in semesters.values()], compensation=compensation
    )
    appreciations = " ; ".join(a.appreciation for a in notes if a.appreciation)
    return StudentBulletin(
        student=student,
        assessments=notes,
        semesters=semesters,
        annual=annual,
        mention=compute_mention(annual.avg),
        decision=decision,
        appreciations=appreciations,
    )


def build_class_bulletins(students: Iterable[Student], assessments: Iterable[ScoredAssessment],
                          compensation: bool = False) -> List[StudentBulletin]:
    notes = list(assessments)
    return [build_student_bulletin(s, notes, compensation=compensation) for s in students]


def find_student(students: Iterable[Student], key: Any) -> Student:
    """Cherche un étudiant par identifiant ou par matricule."""
    wanted = str(key).strip()
    student = next(
        (s for s in students if str(s.id) == wanted or (s.matricule and s.matricule == wanted)),
        None,
    )
    if not student:
        raise StudentNotFoundError(f"Étudiant '{wanted}' introuvable.")
    return student


def filter_students(students: Iterable[Student], promotion_id: Any = "all", search: str = "") -> List[Student]:
    """Filtre par promotion et par recherche (nom complet ou matricule, sans casse)."""
    query = (search or "").strip().lower()
    result = []
    for s in students:
        if promotion_id != "all" and str(s.promotion_id) != str(promotion_id):
            continue
        if query and query not in s.full_name.lower() and query not in (s.matricule or "").lower():
            continue
        result.append(s)
    return result


def sort_bulletins(bulletins: List[StudentBulletin], by: str) -> List[StudentBulletin]:
    """Trie les bulletins selon le critère donné."""
    if by == 'name':
        return sorted(bulletins, key=lambda b: b.student.full_name)
    elif by == 'matricule':
        return sorted(bulletins, key=lambda b: b.student.matricule or "")
    elif by == 'avg':
        # Moyenne décroissante, puis nom pour un ordre stable
        return sorted(bulletins, key=lambda b: (-b.average, b.student.full_name))
    else:
        raise ValueError("Clé de tri invalide. Valeurs possibles : 'name', 'matricule', 'avg'.")


def rank_bulletins(bulletins: List[StudentBulletin]) -> List[Tuple[int, StudentBulletin]]:
    return list(enumerate(sort_bulletins(bulletins, 'avg'), start=1))


def get_class_statistics(bulletins: List[StudentBulletin]) -> Optional[Dict[str, Any]]:
    """Statistiques d'une promotion à partir des moyennes annuelles."""
    if not bulletins:
        return None

    total_students = len(bulletins)
    mean = sum(b.average for b in bulletins) / total_students
    class_average = round2(mean) if math.isfinite(mean) else 0.0
    validated = sum(1 for b in bulletins if b.decision != DECISION_FAILED)

    return {
        "total_students": total_students,
        "class_average": class_average,
        "best_student": max(bulletins, key=lambda b: b.average),
        "worst_student": min(bulletins, key=lambda b: b.average),
        "validated": validated,
        "success_rate": round2(validated * 100 / total_students),
    }
