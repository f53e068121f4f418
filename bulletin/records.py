# bulletin/records.py
"""Normalisation des enregistrements bruts (JSON de l'API, lignes CSV).

Les données arrivent faiblement typées : champs optionnels, noms alternatifs
(``ce``/``continuousAssessment``, ``fe``/``finalExam``), nombres sous forme de
chaînes, module imbriqué ou simple ``moduleId``. Tout est ramené ici à des
objets de ``bulletin.models`` complètement typés ; le calcul des moyennes n'a
plus à se soucier des valeurs manquantes.
"""
import logging
import math
import numbers
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Dict, Iterable, List, Optional

from . import config
from .models import Module, ScoredAssessment, Student

logger = logging.getLogger(__name__)


def to_number(value: Any) -> Optional[float]:
    """Convertit une valeur en float, ou renvoie None si ce n'est pas un nombre."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round2(value: float) -> float:
    """Arrondi à 2 décimales, demi vers le haut sur la valeur binaire exacte.

    ``value`` doit être fini ; la précision couvre tout float (jusqu'à 309 chiffres entiers).
    """
    with localcontext() as ctx:
        ctx.prec = 400
        return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _first_number(raw: Dict[str, Any], *keys: str) -> Optional[float]:
    for key in keys:
        number = to_number(raw.get(key))
        if number is not None:
            return number
    return None


def _first_text(raw: Dict[str, Any], *keys: str, default: str = "") -> str:
    for key in keys:
        value = raw.get(key)
        if value is not None and str(value).strip():
            return str(value)
    return default


def extract_items(payload: Any, key: str) -> List[Dict[str, Any]]:
    """Extrait la liste utile d'une réponse : ``[...]``, ``{"data": [...]}`` ou ``{key: [...]}``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for candidate in (payload.get("data"), payload.get(key)):
            if isinstance(candidate, list):
                return candidate
    return []


def derive_score(continuous_assessment: Optional[float], final_exam: Optional[float]) -> float:
    """Score final = 0.4*EC + 0.6*EF ; une composante absente compte pour 0."""
    if continuous_assessment is None and final_exam is None:
        return 0.0
    score = config.EC_WEIGHT * (continuous_assessment or 0.0) + config.EF_WEIGHT * (final_exam or 0.0)
    return round2(score) if math.isfinite(score) else 0.0


def normalize_module(raw: Dict[str, Any]) -> Module:
    """Construit un Module ; coefficient absent = 1, coefficient 0 explicite conservé."""
    credits = to_number(raw.get("credits"))
    coefficient = to_number(raw.get("coefficient"))
    semester = to_number(raw.get("semester"))
    return Module(
        module_id=raw.get("id"),
        title=_first_text(raw, "title", "name", "code", default="Module"),
        code=raw.get("code"),
        credits=credits if credits is not None else 0.0,
        coefficient=coefficient if coefficient is not None else 1.0,
        semester=int(semester) if semester else None,
    )


def normalize_assessment(raw: Dict[str, Any],
                         modules_by_id: Optional[Dict[Any, Module]] = None) -> ScoredAssessment:
    """Construit une note à partir d'un enregistrement brut.

    Le module vient de l'objet imbriqué ``module`` s'il existe, sinon de la
    table ``modules_by_id`` via ``moduleId``.
    """
    ce = _first_number(raw, "ce", "continuousAssessment")
    fe = _first_number(raw, "fe", "finalExam")
    score = to_number(raw.get("score"))
    if score is None:
        score = derive_score(ce, fe)

    module_id = raw.get("moduleId")
    nested = raw.get("module")
    if isinstance(nested, dict):
        module = normalize_module(nested)
        if module.id is None:
            module.id = module_id
    else:
        module = (modules_by_id or {}).get(module_id)
        if module is None:
            logger.warning("Module introuvable pour la note %s (moduleId=%s)", raw.get("id"), module_id)

    return ScoredAssessment(
        student_id=raw.get("studentId"),
        module_id=module_id if module_id is not None else (module.id if module else None),
        score=score,
        module=module,
        continuous_assessment=ce,
        final_exam=fe,
        session=_first_text(raw, "session", "sessionType", default=config.DEFAULT_SESSION),
        appreciation=_first_text(raw, "appreciation", "noteAppreciation"),
        assessment_id=raw.get("id"),
    )


def normalize_student(raw: Dict[str, Any]) -> Student:
    promotion = raw.get("promotion")
    promotion_id = raw.get("promotionId")
    if promotion_id is None and isinstance(promotion, dict):
        promotion_id = promotion.get("id")
    return Student(
        student_id=raw.get("id"),
        nom=_first_text(raw, "nom"),
        prenom=_first_text(raw, "prenom"),
        matricule=_first_text(raw, "matricule"),
        promotion_id=promotion_id,
    )


def normalize_records(notes: Iterable[Dict[str, Any]],
                      modules: Optional[Iterable[Dict[str, Any]]] = None) -> List[ScoredAssessment]:
    """Normalise les modules en table de correspondance, puis chaque note."""
    modules_by_id: Dict[Any, Module] = {}
    for raw_module in modules or []:
        module = normalize_module(raw_module)
        modules_by_id[module.id] = module
    return [normalize_assessment(raw, modules_by_id) for raw in notes]
