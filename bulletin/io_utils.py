# bulletin/io_utils.py
"""Entrées/sorties tabulaires : chargement des notes depuis un CSV, export des bulletins."""
import logging
from typing import Any, Dict, List, Tuple

import pandas as pd

from .errors import DataValidationError, FileProcessingError
from .models import ScoredAssessment, Student, StudentBulletin
from .processing import compute_mention
from .records import normalize_assessment, normalize_student

logger = logging.getLogger(__name__)

MODULE_COLUMNS = ("title", "code", "credits", "coefficient", "semester")
STUDENT_COLUMNS = ("nom", "prenom", "matricule", "promotionId")

EXPORT_COLUMNS = [
    "Matricule", "Etudiant", "Promotion", "Module", "Code", "Credits", "Semestre",
    "Session", "EC", "EF", "Score", "Mention", "Appreciation",
    "Moy. annuelle pondérée", "Poids totaux", "Décision",
]


def read_records_from_csv(filepath: str) -> Tuple[List[Student], List[ScoredAssessment]]:
    """Lit un export CSV (une note par ligne) et renvoie (étudiants, notes).

    Colonnes attendues : ``studentId`` obligatoire ; ``moduleId``, ``title``,
    ``code``, ``credits``, ``coefficient``, ``semester`` pour le module ;
    ``ce``, ``fe``, ``score``, ``session``, ``appreciation`` pour la note ;
    ``nom``, ``prenom``, ``matricule``, ``promotionId`` pour l'étudiant.
    """
    try:
        df = pd.read_csv(filepath, dtype=str, encoding="utf-8")
    except FileNotFoundError:
        raise FileProcessingError(f"Fichier introuvable : {filepath}")
    except pd.errors.EmptyDataError:
        return [], []
    except Exception as e:
        raise FileProcessingError(f"Impossible de lire le fichier {filepath} : {e}")

    df.columns = [str(c).strip() for c in df.columns]
    if "studentId" not in df.columns:
        raise DataValidationError(f"Colonne 'studentId' absente du fichier {filepath}.")

    # NaN -> None pour que la normalisation traite les cellules vides comme absentes
    df = df.astype(object).where(pd.notna(df), None)

    students: Dict[Any, Student] = {}
    assessments = []
    for row in df.to_dict(orient="records"):
        student_id = row.get("studentId")
        if student_id is None:
            continue
        if student_id not in students:
            students[student_id] = normalize_student(
                {"id": student_id, **{k: row.get(k) for k in STUDENT_COLUMNS}}
            )
        assessments.append(normalize_assessment(_note_from_row(row)))

    logger.info("%d notes chargées pour %d étudiants depuis %s", len(assessments), len(students), filepath)
    return list(students.values()), assessments


def _note_from_row(row: Dict[str, Any]) -> Dict[str, Any]:
    note = dict(row)
    note["id"] = row.get("noteId")
    if row.get("moduleId") is not None:
        note["module"] = {"id": row.get("moduleId"), **{k: row.get(k) for k in MODULE_COLUMNS}}
    return note


def bulletin_rows(bulletins: List[StudentBulletin]) -> List[Dict[str, Any]]:
    """Une ligne par note, ou une ligne vide par étudiant sans note."""
    rows = []
    for b in bulletins:
        base = {
            "Matricule": b.student.matricule,
            "Etudiant": b.student.full_name,
            "Promotion": b.student.promotion_id if b.student.promotion_id is not None else "",
            "Moy. annuelle pondérée": b.annual.avg,
            "Poids totaux": b.annual.total_weight,
            "Décision": b.decision,
        }
        if not b.assessments:
            rows.append({**{c: "" for c in EXPORT_COLUMNS}, **base})
            continue
        for n in b.assessments:
            module = n.module
            rows.append({
                **base,
                "Module": module.title if module else n.module_id,
                "Code": (module.code or "") if module else "",
                "Credits": module.credits if module else 0,
                "Semestre": (module.semester or "") if module else "",
                "Session": n.session,
                "EC": n.continuous_assessment if n.continuous_assessment is not None else "",
                "EF": n.final_exam if n.final_exam is not None else "",
                "Score": n.score,
                "Mention": compute_mention(n.score),
                "Appreciation": n.appreciation,
            })
    return rows


def export_bulletins_to_csv(filepath: str, bulletins: List[StudentBulletin]):
    """Exporte les bulletins à plat dans un fichier CSV."""
    df = pd.DataFrame(bulletin_rows(bulletins), columns=EXPORT_COLUMNS)
    try:
        df.to_csv(filepath, index=False, encoding="utf-8")
    except OSError as e:
        raise FileProcessingError(f"Erreur d'écriture dans le fichier {filepath} : {e}")
