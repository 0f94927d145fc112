"""Tests des controles de depot, de l'empreinte et du journal d'audit."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from dsn_esg_assistant.core.exceptions import IntakeError, StructuralInputError
from dsn_esg_assistant.security.audit_logger import AuditLogger
from dsn_esg_assistant.security.intake import verifier_depot
from dsn_esg_assistant.security.integrity import calculer_hash_sha256

FIXTURES = Path(__file__).parent.parent / "fixtures"

HASH_ABC = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


class TestDepot:

    def test_depot_valide(self):
        donnees = (FIXTURES / "dsn-global-minimal.txt").read_bytes()
        texte = verifier_depot("dsn-global-minimal.txt", donnees)
        assert texte.startswith("S10.G00.00.001")

    @pytest.mark.parametrize("nom,donnees", [(None, b"S10"), ("dsn.txt", None), ("dsn.txt", b""), ("", b"S10")])
    def test_fichier_absent_ou_vide(self, nom, donnees):
        with pytest.raises(IntakeError, match=r"Please upload a DSN file \(\.txt\)\."):
            verifier_depot(nom, donnees)

    def test_taille_maximale(self):
        verifier_depot("dsn.txt", b"x" * 10, max_octets=10)
        with pytest.raises(IntakeError, match="File too large"):
            verifier_depot("dsn.txt", b"x" * 11, max_octets=10)

    def test_taille_par_defaut(self):
        with pytest.raises(IntakeError, match=r"File too large \(Maximum size 10MB\)"):
            verifier_depot("dsn.txt", b"x" * 10_000_001)

    def test_extension(self):
        with pytest.raises(IntakeError, match=r"\.pdf"):
            verifier_depot("dsn.pdf", b"S10")
        assert verifier_depot("DSN.TXT", b"S10") == "S10"

    def test_contenu_binaire(self):
        with pytest.raises(IntakeError, match="binaire"):
            verifier_depot("dsn.txt", b"S10\x00\x01\x02")

    def test_decodage_cp1252(self):
        assert verifier_depot("dsn.txt", "S21.G00.30.002,'MARTÈNE'".encode("cp1252")).endswith("MARTÈNE'")

    def test_bom_utf8(self):
        assert verifier_depot("dsn.txt", "\ufeffS10".encode("utf-8")) == "S10"

    def test_erreur_structurelle(self):
        assert issubclass(IntakeError, StructuralInputError)


class TestIntegrite:

    def test_hash_contenu(self):
        assert calculer_hash_sha256(b"abc") == HASH_ABC


class TestAuditLogger:

    def setup_method(self):
        self.session = "session-test"

    def test_journal_append_only(self, tmp_path):
        audit = AuditLogger(tmp_path / "audit" / "audit.log")
        audit.log_reception(self.session, "dsn.txt", HASH_ABC, 3)
        audit.log_parsing(self.session, nb_individus=5, nb_anomalies=0)
        audit.log_calcul(self.session, nb_reponses=24, nb_manuelles=4)
        audit.log_export(self.session, "html", "/tmp/rapport.html")

        entrees = audit.lire_journal()
        assert [e["operation"] for e in entrees] == [
            "reception_dsn", "parsing_dsn", "calcul_reponses", "export",
        ]
        assert entrees[0]["hash_fichier"] == HASH_ABC
        assert entrees[0]["details"] == {"taille_octets": 3}
        assert entrees[2]["details"]["nb_manuelles"] == 4
        assert all(e["resultat"] == "succes" for e in entrees)

    def test_erreur(self, tmp_path):
        audit = AuditLogger(tmp_path / "audit.log")
        audit.log_erreur(self.session, "traitement", "bloc S21 absent")
        entree = audit.lire_journal()[0]
        assert entree["resultat"] == "echec"
        assert entree["details"]["erreur"] == "bloc S21 absent"

    def test_parsing_avec_blocs(self, tmp_path):
        audit = AuditLogger(tmp_path / "audit.log")
        audit.log_parsing(self.session, 5, 0, {"S21.G00.30": 12, "S21.G00.40": 9})
        audit.log_parsing(self.session, 0, 0)
        avec, sans = audit.lire_journal()
        assert avec["details"]["blocs"] == {"S21.G00.30": 12, "S21.G00.40": 9}
        assert "blocs" not in sans["details"]

    def test_modification(self, tmp_path):
        audit = AuditLogger(tmp_path / "audit.log")
        audit.log_modification(self.session, "S1-6_02", 5, "Corrige apres revue RH")
        entree = audit.lire_journal()[0]
        assert entree["operation"] == "modification_reponse"
        assert entree["details"] == {
            "cle": "S1-6_02", "valeur": 5, "explication": "Corrige apres revue RH",
        }

    def test_journal_absent(self, tmp_path):
        assert AuditLogger(tmp_path / "audit.log").lire_journal() == []
