"""DSN ESG Assistant - point d'entree web.

Depot d'une DSN mensuelle (.txt), calcul des indicateurs ESRS S1-6 et
export HTML du questionnaire.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, UploadFile, HTTPException
from fastapi.responses import HTMLResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from dsn_esg_assistant.config.settings import AppConfig
from dsn_esg_assistant.core.orchestrator import Orchestrator
from dsn_esg_assistant.core.exceptions import AnswerEditError, InternalError, StructuralInputError
from dsn_esg_assistant.models.questionnaire import ResultatQuestionnaire, ValeurReponse

logger = logging.getLogger("dsn_esg_assistant.api")

app = FastAPI(
    title="DSN ESG Assistant",
    description="Indicateurs ESRS S1-6 calcules a partir de la DSN",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

MESSAGE_ERREUR_INTERNE = "Internal server error while processing the DSN file."


class EditionReponse(BaseModel):
    """Saisie manuelle : reponses courantes et nouvelle valeur."""
    answers: dict[str, dict]
    value: ValeurReponse = None
    explanation: str = ""
    session_id: str = ""

ACCUEIL_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>DSN ESG Assistant</title>
<style>
body { font-family: 'Segoe UI', system-ui, sans-serif; background: #f5f5f5; color: #333; }
.container { max-width: 700px; margin: 60px auto; background: white; padding: 30px; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
h1 { color: #003d7a; }
button { background: #003d7a; color: white; border: none; padding: 10px 20px; border-radius: 4px; cursor: pointer; }
</style>
</head>
<body>
<div class="container">
  <h1>DSN ESG Assistant</h1>
  <p>Upload a monthly DSN file (.txt, 10MB max) to compute the ESRS S1-6 workforce indicators.</p>
  <form action="/api/dsn/export" method="post" enctype="multipart/form-data">
    <input type="file" name="dsn" accept=".txt">
    <button type="submit">Analyse</button>
  </form>
</div>
</body>
</html>
"""


def _orchestrator() -> Orchestrator:
    return Orchestrator(AppConfig(base_dir=Path(tempfile.gettempdir()) / "dsn_esg_assistant"))


async def _traiter_depot(dsn: Optional[UploadFile]) -> tuple[Orchestrator, ResultatQuestionnaire]:
    orchestrator = _orchestrator()
    nom = dsn.filename if dsn is not None else None
    donnees = await dsn.read() if dsn is not None else None

    try:
        resultat = orchestrator.traiter_contenu(nom, donnees)
    except StructuralInputError as e:
        raise HTTPException(400, str(e))
    except InternalError:
        raise HTTPException(500, MESSAGE_ERREUR_INTERNE)
    except Exception:
        logger.exception("Erreur inattendue sur le depot %s", nom)
        raise HTTPException(500, MESSAGE_ERREUR_INTERNE)
    return orchestrator, resultat


@app.get("/", response_class=HTMLResponse)
async def accueil():
    return ACCUEIL_HTML


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": app.version}


@app.post("/api/dsn/analyse")
async def analyser_dsn(dsn: Optional[UploadFile] = File(None)):
    _, resultat = await _traiter_depot(dsn)
    return resultat.to_dict()


@app.post("/api/dsn/export", response_class=HTMLResponse)
async def exporter_dsn(dsn: Optional[UploadFile] = File(None)):
    orchestrator, resultat = await _traiter_depot(dsn)
    return HTMLResponse(orchestrator.report_generator.construire_html(resultat))


@app.post("/api/dsn/answers/{cle}")
async def modifier_reponse(cle: str, edition: EditionReponse):
    try:
        suivies = _orchestrator().modifier_reponse(
            edition.answers, cle, edition.value, edition.explanation, edition.session_id,
        )
    except AnswerEditError as e:
        raise HTTPException(404, str(e))
    except ValidationError as e:
        raise HTTPException(400, f"Reponses invalides : {e.error_count()} erreur(s)")
    return {k: r.model_dump(mode="json") for k, r in suivies.items()}
