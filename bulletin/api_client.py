# bulletin/api_client.py
"""Récupération des étudiants, modules et notes depuis l'API REST de l'académie."""
import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from . import config
from .errors import RecordsFetchError
from .models import ScoredAssessment, Student
from .records import extract_items, normalize_records, normalize_student

logger = logging.getLogger(__name__)


class RecordsClient:
    """Client de lecture de l'API.

    Le jeton est fourni explicitement à la construction ; aucune session
    globale n'est lue ni modifiée.
    """
    def __init__(self, base_url: str = config.API_BASE_URL, token: str = "",
                 timeout: float = config.API_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = requests.get(url, params=params, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Fetch error %s: %s", url, e)
            raise RecordsFetchError(f"Serveur injoignable ({url}) : {e}")

        if not resp.ok:
            message = _server_message(resp) or f"HTTP {resp.status_code}"
            logger.error("Fetch error %s: %s", url, message)
            raise RecordsFetchError(f"Erreur lors du chargement de {path} : {message}")

        try:
            return resp.json()
        except ValueError:
            raise RecordsFetchError(f"Réponse non JSON pour {path}.")

    def fetch_students(self) -> List[Student]:
        return [normalize_student(raw) for raw in extract_items(self._get("/students"), "students")]

    def fetch_modules(self) -> List[Dict[str, Any]]:
        """Modules bruts : ils servent de table de correspondance pour les notes."""
        return extract_items(self._get("/modules"), "modules")

    def fetch_notes(self, search: str = "", modules: Optional[List[Dict[str, Any]]] = None) -> List[ScoredAssessment]:
        raw_notes = extract_items(self._get("/notes", params={"search": search}), "notes")
        if modules is None:
            modules = self.fetch_modules()
        return normalize_records(raw_notes, modules)

    def fetch_student_notes(self) -> List[ScoredAssessment]:
        """Notes de l'étudiant authentifié (bulletin personnel)."""
        raw_notes = extract_items(self._get("/notes/student/my"), "notes")
        return normalize_records(raw_notes)

    def fetch_all(self) -> Tuple[List[Student], List[ScoredAssessment]]:
        students = self.fetch_students()
        modules = self.fetch_modules()
        notes = self.fetch_notes(modules=modules)
        logger.info("%d étudiants, %d modules, %d notes récupérés", len(students), len(modules), len(notes))
        return students, notes


def _server_message(resp: requests.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None
