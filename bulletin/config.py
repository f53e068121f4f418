# bulletin/config.py
"""Configuration de l'application, surchargeable par variables d'environnement."""
import os

# --- API DES DOSSIERS ACADÉMIQUES ---
API_BASE_URL = os.environ.get("BULLETIN_API_URL", "http://localhost:5000/api")
API_TOKEN = os.environ.get("BULLETIN_API_TOKEN", "")
API_TIMEOUT = float(os.environ.get("BULLETIN_API_TIMEOUT", "12"))

# --- JOURNALISATION ---
LOG_LEVEL = os.environ.get("BULLETIN_LOG_LEVEL", "INFO").upper()

# --- RÈGLES ACADÉMIQUES ---
PASS_THRESHOLD = 10.0
# Compensation : moyenne annuelle dans [9.5, 10) et au moins un semestre >= 12
COMPENSATION_FLOOR = 9.5
COMPENSATION_SEMESTER_MIN = 12.0

# Pondération du score final : 40 % contrôle continu, 60 % examen final
EC_WEIGHT = 0.4
EF_WEIGHT = 0.6

DEFAULT_SESSION = "Normale"
SEMESTERS = (1, 2)
