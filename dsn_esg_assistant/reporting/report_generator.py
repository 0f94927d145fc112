"""Generateur de rapports du questionnaire ESRS S1-6.

Produit un rapport HTML (gabarit jinja2) et un export JSON contenant :
- Metadonnees de la session (fichier, empreinte, periode)
- Questions dans l'ordre de l'arbre, tableaux eclates par dimension
- Reponses avec leur provenance et leur explication
- Anomalies relevees lors du parsing
"""

import json
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from dsn_esg_assistant.config.settings import ReportConfig
from dsn_esg_assistant.models.questionnaire import QuestionNode, Reponse, ResultatQuestionnaire
from dsn_esg_assistant.utils.number_utils import formater_nombre

TEMPLATES_DIR = Path(__file__).parent / "templates"


class ReportGenerator:
    """Genere les exports HTML et JSON d'un resultat de questionnaire."""

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def generer_html(self, resultat: ResultatQuestionnaire, chemin_sortie: Path) -> Path:
        html = self.construire_html(resultat)
        chemin_sortie.parent.mkdir(parents=True, exist_ok=True)
        with open(chemin_sortie, "w", encoding="utf-8") as f:
            f.write(html)
        return chemin_sortie

    def generer_json(self, resultat: ResultatQuestionnaire, chemin_sortie: Path) -> Path:
        data = self.construire_json(resultat)
        chemin_sortie.parent.mkdir(parents=True, exist_ok=True)
        with open(chemin_sortie, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2, default=str)
        return chemin_sortie

    def construire_json(self, resultat: ResultatQuestionnaire) -> dict:
        data = resultat.to_dict()
        data["metadata"] = {
            "session_id": resultat.session_id,
            "date_traitement": resultat.date_traitement.isoformat(),
            "fichier": resultat.nom_fichier,
            "hash_sha256": resultat.hash_sha256,
            "periode": (
                {"debut": resultat.periode.debut.isoformat(), "fin": resultat.periode.fin.isoformat()}
                if resultat.periode else None
            ),
            "nb_employes": resultat.nb_employes,
            "nb_reponses_calculees": resultat.nb_reponses_calculees,
            "nb_reponses_manuelles": resultat.nb_reponses_manuelles,
            "anomalies": list(resultat.anomalies),
        }
        return data

    def construire_html(self, resultat: ResultatQuestionnaire) -> str:
        template = self.env.get_template("rapport.html")
        return template.render(
            resultat=resultat,
            blocs=self._construire_blocs(resultat.question_tree, resultat.answers),
            absent=self.config.libelle_absent,
        )

    # --- Mise a plat de l'arbre pour le gabarit ---

    def _libelle(self, noeud: QuestionNode) -> str:
        if self.config.langue == "fr" and noeud.label_fr:
            return noeud.label_fr
        return noeud.label_en

    def _valeur(self, reponse: Optional[Reponse]) -> str:
        if reponse is None or reponse.value is None or reponse.value == "":
            return self.config.libelle_absent
        if isinstance(reponse.value, (int, float)):
            return formater_nombre(reponse.value)
        return str(reponse.value)

    def _construire_blocs(
        self, noeuds: list[QuestionNode], reponses: dict[str, Reponse], niveau: int = 0
    ) -> list[dict]:
        blocs = []
        for noeud in noeuds:
            if noeud.est_section:
                blocs.append({"type": "section", "niveau": niveau, "id": noeud.id, "libelle": self._libelle(noeud)})
                blocs.extend(self._construire_blocs(noeud.children, reponses, niveau + 1))
            elif noeud.est_table:
                blocs.extend(self._blocs_tableau(noeud, reponses, niveau))
            else:
                blocs.append(self._bloc_question(noeud, reponses.get(noeud.id), niveau))
        return blocs

    def _bloc_question(self, noeud: QuestionNode, reponse: Optional[Reponse], niveau: int) -> dict:
        return {
            "type": "question",
            "niveau": niveau,
            "id": noeud.id,
            "libelle": self._libelle(noeud),
            "unite": noeud.unit or "",
            "valeur": self._valeur(reponse),
            "source": reponse.source if reponse else "",
            "explication": reponse.explanation if reponse else "",
        }

    def _blocs_tableau(self, noeud: QuestionNode, reponses: dict[str, Reponse], niveau: int) -> list[dict]:
        # Les cles de groupe sont retrouvees a partir des reponses "{idEnfant}_{cle}"
        groupes: list[str] = []
        for enfant in noeud.children:
            prefixe = f"{enfant.id}_"
            for cle in reponses:
                if cle.startswith(prefixe) and cle[len(prefixe):] not in groupes:
                    groupes.append(cle[len(prefixe):])

        blocs = [{
            "type": "table",
            "niveau": niveau,
            "id": noeud.id,
            "libelle": self._libelle(noeud),
            "colonnes": [self._libelle(e) for e in noeud.children] if groupes else [],
            "lignes": [
                {
                    "groupe": groupe,
                    "valeurs": [self._valeur(reponses.get(f"{e.id}_{groupe}")) for e in noeud.children],
                }
                for groupe in groupes
            ],
        }]
        if not groupes:
            blocs.extend(self._construire_blocs(noeud.children, reponses, niveau + 1))
        return blocs
