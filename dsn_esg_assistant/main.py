"""Point d'entree CLI de l'assistant ESG DSN.

Usage :
    python -m dsn_esg_assistant.main declaration.txt [--questions CATALOGUE] [--format html|json] [--output DIR]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from dsn_esg_assistant.config.settings import AppConfig
from dsn_esg_assistant.core.exceptions import DSNAssistantError, StructuralInputError
from dsn_esg_assistant.core.orchestrator import Orchestrator


BANNER = r"""
  ____  ____  _   _     _____ ____   ____
 |  _ \/ ___|| \ | |   | ____/ ___| / ___|
 | | | \___ \|  \| |   |  _| \___ \| |  _
 | |_| |___) | |\  |   | |___ ___) | |_| |
 |____/|____/|_| \_|   |_____|____/ \____|
  v1.0.0 - Indicateurs ESRS S1-6 a partir de la DSN
"""


def configurer_logging(verbose: bool = False) -> None:
    """Configure le logging de l'application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)-7s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def creer_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dsn-esg-assistant",
        description="Calcule les indicateurs ESRS S1-6 d'une declaration DSN mensuelle.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Format supporte : fichier texte DSN (.txt)",
    )
    parser.add_argument(
        "fichier",
        type=Path,
        help="Chemin vers le fichier DSN a traiter",
    )
    parser.add_argument(
        "--questions", "-q",
        type=Path,
        default=None,
        help="Catalogue de questions (.csv ou .xlsx), defaut : catalogue integre",
    )
    parser.add_argument(
        "--format", "-f",
        choices=["html", "json"],
        default="html",
        help="Format du rapport de sortie (defaut: html)",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Repertoire de sortie pour le rapport",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Mode verbeux (debug)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Point d'entree principal : 0 succes, 1 fichier invalide, 2 erreur interne."""
    print(BANNER)
    args = creer_argument_parser().parse_args(argv)

    configurer_logging(args.verbose)
    logger = logging.getLogger("dsn_esg_assistant")

    if not args.fichier.exists():
        logger.error("Fichier introuvable : %s", args.fichier)
        return 1

    config = AppConfig()
    if args.output:
        config.reports_dir = args.output
        config.reports_dir.mkdir(parents=True, exist_ok=True)

    orchestrator = Orchestrator(config)

    try:
        resultat = orchestrator.analyser_fichier(args.fichier, args.questions)
        chemin_rapport = orchestrator.exporter(resultat, args.format)
    except StructuralInputError as e:
        logger.error("Fichier invalide : %s", e)
        return 1
    except DSNAssistantError as e:
        logger.error("Erreur de traitement : %s", e)
        return 2
    except Exception as e:
        logger.exception("Erreur inattendue : %s", e)
        return 2

    print(f"\n{'='*60}")
    print(f"  TRAITEMENT TERMINE")
    print(f"  Declaration : {resultat.declaration_date}")
    print(f"  Salaries : {resultat.nb_employes}")
    print(f"  Reponses calculees : {resultat.nb_reponses_calculees}")
    print(f"  Reponses a saisir : {resultat.nb_reponses_manuelles}")
    if resultat.anomalies:
        print(f"  Anomalies : {len(resultat.anomalies)}")
    print(f"  Rapport : {chemin_rapport}")
    print(f"{'='*60}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
