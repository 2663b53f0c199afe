"""Tests CLI pour ComptaFR (commandes cfr)."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from comptafr.cli.app import app

runner = CliRunner()

OPERATIONS_YAML = """\
operations:
  - id: v-1
    label: Client SARL
    operation_type: sale
    is_service: true
    vat_on_payments: true
    amount_ht_cents: 100000
    vat_rate: "20"
    invoice_date: 2025-02-20
    payment_date: 2025-03-05
  - id: v-2
    label: Boutique
    operation_type: sale
    is_service: false
    amount_ht_cents: 50000
    vat_rate: "20"
    invoice_date: 2025-01-28
    delivery_date: 2025-02-03
  - id: a-1
    label: Fournisseur
    operation_type: purchase
    amount_ht_cents: 10000
    invoice_date: 2025-03-02
"""

PARAMETRES_YAML = """\
taux_urssaf:
  valeur: "21.20"
  unite: pourcent
reserve_tresorerie_cents: 0
"""


@pytest.fixture
def fichiers(tmp_path):
    """Cree un fichier d'operations et de parametres isoles dans tmp_path."""
    operations = tmp_path / "operations.yaml"
    operations.write_text(OPERATIONS_YAML, encoding="utf-8")
    parametres = tmp_path / "parametres.yaml"
    parametres.write_text(PARAMETRES_YAML, encoding="utf-8")
    return ["--operations", str(operations), "--parametres", str(parametres)]


class TestGeneral:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "ComptaFR version" in result.output

    def test_sans_argument_affiche_aide(self) -> None:
        result = runner.invoke(app, [])
        assert "tva" in result.output
        assert "projection" in result.output

    def test_operations_introuvables(self, tmp_path) -> None:
        result = runner.invoke(app, ["-o", str(tmp_path / "absent.yaml"), "tva", "2025-03"])
        assert result.exit_code == 1
        assert "introuvable" in result.output

    def test_parametres_ambigus(self, fichiers, tmp_path) -> None:
        mauvais = tmp_path / "mauvais.yaml"
        mauvais.write_text("taux_urssaf: 2120\n", encoding="utf-8")
        result = runner.invoke(app, [fichiers[0], fichiers[1], "-p", str(mauvais), "urssaf", "2025-03"])
        assert result.exit_code == 1
        assert "Configuration invalide" in result.output

    def test_operation_invalide(self, tmp_path) -> None:
        chemin = tmp_path / "operations.yaml"
        chemin.write_text(
            "- id: x\n  operation_type: sale\n  amount_ht_cents: 10.5\n  invoice_date: 2025-01-01\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["-o", str(chemin), "tva", "2025-01"])
        assert result.exit_code == 1
        assert "invalide" in result.output

    def test_periode_invalide(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "tva", "2025-13"])
        assert result.exit_code == 1


class TestDeclarations:
    def test_tva(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "tva", "2025-03"])
        assert result.exit_code == 0, result.output
        assert "TVA due : 180,00 €" in result.output
        assert "2025-04-12" in result.output

    def test_tva_export(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "tva", "2025-02", "--export"])
        assert result.exit_code == 0, result.output
        assert "DECLARATION TVA 2025-02" in result.output
        assert "TVA A PAYER: 100,00 €" in result.output

    def test_urssaf(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "urssaf", "2025-03"])
        assert result.exit_code == 0, result.output
        assert "212,00 €" in result.output

    def test_urssaf_export(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "urssaf", "2025-02", "-e"])
        assert result.exit_code == 0, result.output
        assert "COTISATIONS A PAYER: 106,00 €" in result.output

    def test_periode_par_defaut(self) -> None:
        result = runner.invoke(app, ["periode", "-c", "2025-01", "-c", "2025-02"])
        assert result.exit_code == 0, result.output
        assert "2025-03" in result.output

    def test_periode_date_invalide(self) -> None:
        result = runner.invoke(app, ["periode", "--date", "10/04/2025"])
        assert result.exit_code == 1


class TestRapports:
    def test_tableau(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "tableau", "2025-02", "--mois", "2", "-c", "2025-02", "-c", "2025-03"])
        assert result.exit_code == 0, result.output
        assert "Revenu total : 1 500,00 €" in result.output
        assert "Croissance : 100.00 %" in result.output

    def test_tableau_sans_cloture(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "tableau", "2025-02", "--mois", "2"])
        assert result.exit_code == 0, result.output
        assert "Aucune periode cloturee" in result.output

    def test_alertes(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "alertes", "-P", "2025-03", "--date", "2025-04-10"])
        assert result.exit_code == 0, result.output
        assert "Declaration TVA a venir" in result.output

    def test_alertes_tresorerie_negative(self, fichiers) -> None:
        result = runner.invoke(
            app, [*fichiers, "alertes", "-P", "2025-03", "--date", "2025-05-01", "--disponible=-100"]
        )
        assert result.exit_code == 0, result.output
        assert "Tresorerie negative" in result.output

    def test_aucune_alerte(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "alertes", "-P", "2025-03", "--date", "2025-06-01"])
        assert result.exit_code == 0, result.output
        assert "Aucune alerte" in result.output

    def test_provisions(self, fichiers) -> None:
        result = runner.invoke(
            app,
            [*fichiers, "provisions", "-P", "2025-03", "--date", "2025-04-10", "--disponible", "100000"],
        )
        assert result.exit_code == 0, result.output
        assert "Provisions requises : 392,00 €" in result.output
        assert "Distribuable : 608,00 €" in result.output
        assert "Possibilite de distribuer 608,00 €" in result.output
        assert "Prochaines echeances" in result.output
        assert "2025-04-12 Declaration TVA Mars 2025" in result.output

    def test_provisions_insuffisantes(self, fichiers) -> None:
        result = runner.invoke(
            app,
            [*fichiers, "provisions", "-P", "2025-03", "-d", "2025-04-10", "--disponible", "10000"],
        )
        assert result.exit_code == 0, result.output
        assert "Besoin de 292,00 €" in result.output

    def test_provisions_paiement_regle(self, fichiers) -> None:
        result = runner.invoke(
            app,
            [
                *fichiers,
                "provisions",
                "-P",
                "2025-03",
                "-d",
                "2025-04-10",
                "--disponible",
                "100000",
                "-r",
                "vat-payment-2025-03",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Provisions requises : 212,00 €" in result.output

    def test_provisions_disponible_requis(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "provisions", "-P", "2025-03"])
        assert result.exit_code != 0

    def test_projection(self, fichiers) -> None:
        result = runner.invoke(app, [*fichiers, "projection", "2025-02", "--mois", "2", "--horizon", "3"])
        assert result.exit_code == 0, result.output
        assert "confiance: low" in result.output
        assert "(estimation)" in result.output
