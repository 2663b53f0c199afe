"""Tests pour les calculs TVA, URSSAF et la validation des operations."""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal

import pytest

from comptafr.erreurs import CodeValidation, NiveauValidation
from comptafr.fiscal import calculer_tva, calculer_urssaf, valider_operations
from comptafr.models import Operation, OperationType
from comptafr.parametres import Parametres
from comptafr.periode import Periode
from comptafr.taux import TauxBp

D = datetime.date


def _vente(id_: str = "v-1", **kwargs) -> Operation:
    valeurs = {
        "id": id_,
        "operation_type": OperationType.SALE,
        "amount_ht_cents": 100000,
        "invoice_date": D(2025, 2, 20),
        "payment_date": D(2025, 3, 5),
    }
    valeurs.update(kwargs)
    return Operation(**valeurs)


def _achat(id_: str = "a-1", **kwargs) -> Operation:
    valeurs = {
        "id": id_,
        "operation_type": OperationType.PURCHASE,
        "amount_ht_cents": 10000,
        "invoice_date": D(2025, 3, 2),
    }
    valeurs.update(kwargs)
    return Operation(**valeurs)


# ---------------------------------------------------------------------------
# TVA
# ---------------------------------------------------------------------------


class TestCalculerTva:
    def test_prestation_encaissee(self) -> None:
        calcul = calculer_tva([_vente()], "2025-03")
        assert calcul.collectee_cents == 20000
        assert calcul.collectee_services_cents == 20000
        assert calcul.collectee_biens_cents == 0
        assert calcul.detail[0].vat_cents == 20000
        assert calcul.detail[0].incluse is True

        absente = calculer_tva([_vente()], "2025-02")
        assert absente.collectee_cents == 0
        assert absente.detail[0].incluse is False

    def test_collectee_moins_deductible(self) -> None:
        operations = [_vente(), _achat(amount_ht_cents=25000)]
        calcul = calculer_tva(operations, "2025-03")
        assert calcul.deductible_cents == 5000
        assert calcul.due_cents == 15000

    def test_due_jamais_negative(self) -> None:
        operations = [_vente(amount_ht_cents=1000), _achat(amount_ht_cents=50000)]
        calcul = calculer_tva(operations, "2025-03")
        assert calcul.due_cents == 0
        assert calcul.credit_cents == 10000 - 200

    def test_achat_non_deductible_ignore(self) -> None:
        operations = [_achat(is_deductible=False, amount_ht_cents=99999)]
        for periode in Periode.plage(Periode(2025, 1), 6):
            assert calculer_tva(operations, periode).deductible_cents == 0

    def test_arrondi_par_ligne(self) -> None:
        # 3 x round(333 * 5.5 %) = 3 x 18, et non round(999 * 5.5 %) = 55
        operations = [
            _vente(f"v-{i}", amount_ht_cents=333, vat_rate=Decimal("5.5")) for i in range(3)
        ]
        assert calculer_tva(operations, "2025-03").collectee_cents == 54

    def test_biens_separes(self) -> None:
        operations = [_vente(is_service=False, delivery_date=D(2025, 3, 10))]
        calcul = calculer_tva(operations, "2025-03")
        assert calcul.collectee_biens_cents == 20000
        assert calcul.collectee_services_cents == 0

    def test_dates_decembre(self) -> None:
        calcul = calculer_tva([], "2025-12")
        assert calcul.date_declaration == D(2026, 1, 12)
        assert calcul.date_paiement == D(2026, 1, 20)

    def test_pas_de_report_week_end(self) -> None:
        # Le 12 avril 2025 est un samedi
        calcul = calculer_tva([], "2025-03")
        assert calcul.date_declaration == D(2025, 4, 12)

    def test_jours_parametres(self) -> None:
        p = Parametres(jour_declaration_tva=15, jour_paiement_tva=24)
        calcul = calculer_tva([], Periode(2025, 6), p)
        assert calcul.date_declaration == D(2025, 7, 15)
        assert calcul.date_paiement == D(2025, 7, 24)

    def test_detail_ordre_source_et_contrepartie(self) -> None:
        operations = [_achat("a-1", label="Fournisseur"), _vente("v-1")]
        calcul = calculer_tva(operations, "2025-03")
        assert [l.operation_id for l in calcul.detail] == ["a-1", "v-1"]
        assert calcul.detail[0].libelle_contrepartie == "Fournisseur"
        assert calcul.detail[1].libelle_contrepartie == "Non renseigne"

    def test_anomalies_retournees(self) -> None:
        calcul = calculer_tva([_vente(payment_date=None)], "2025-03")
        assert [e.code for e in calcul.erreurs] == [CodeValidation.MISSING_PAYMENT_DATE]
        assert calcul.collectee_cents == 0

    def test_anomalies_precalculees_reprises(self, caplog) -> None:
        operations = [_vente(payment_date=None)]
        erreurs = valider_operations(operations)
        caplog.clear()
        with caplog.at_level(logging.WARNING, logger="comptafr.fiscal.validation"):
            tva = calculer_tva(operations, "2025-03", erreurs=erreurs)
            urssaf = calculer_urssaf(operations, "2025-03", TauxBp(2120), erreurs=erreurs)
        assert tva.erreurs == erreurs
        assert urssaf.erreurs == erreurs
        assert caplog.records == []


# ---------------------------------------------------------------------------
# URSSAF
# ---------------------------------------------------------------------------


class TestCalculerUrssaf:
    def test_chiffre_affaires_et_cotisations(self) -> None:
        operations = [_vente(amount_ht_cents=500000), _achat()]
        calcul = calculer_urssaf(operations, "2025-03", TauxBp(2120))
        assert calcul.chiffre_affaires_ht_cents == 500000
        assert calcul.due_cents == 106000
        assert calcul.operations_incluses == ["v-1"]

    def test_date_paiement_decembre(self) -> None:
        calcul = calculer_urssaf([], "2025-12", TauxBp(2120))
        assert calcul.date_paiement == D(2026, 1, 5)

    def test_arrondi_demi_superieur(self) -> None:
        calcul = calculer_urssaf([_vente(amount_ht_cents=50)], "2025-03", TauxBp(100))
        # 50 * 1 % = 0.5 -> 1
        assert calcul.due_cents == 1

    def test_taux_non_normalise_refuse(self) -> None:
        with pytest.raises(TypeError, match="TauxBp"):
            calculer_urssaf([], "2025-03", Decimal("21.2"))

    def test_vente_sans_encaissement_exclue(self) -> None:
        calcul = calculer_urssaf([_vente(payment_date=None)], "2025-03", TauxBp(2120))
        assert calcul.chiffre_affaires_ht_cents == 0
        assert calcul.due_cents == 0


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_operation_saine(self) -> None:
        assert valider_operations([_vente(), _achat()]) == []

    def test_codes(self) -> None:
        erreurs = valider_operations(
            [
                _vente("sans-date", payment_date=None),
                _vente("taux", vat_rate=Decimal("120")),
                _vente("negatif", amount_ht_cents=-100),
                _achat("zero", vat_rate=Decimal("0")),
            ]
        )
        assert [(e.operation_id, e.code) for e in erreurs] == [
            ("sans-date", CodeValidation.MISSING_PAYMENT_DATE),
            ("taux", CodeValidation.UNUSUAL_VAT_RATE),
            ("negatif", CodeValidation.NEGATIVE_AMOUNT),
            ("zero", CodeValidation.NO_VAT_ON_DEDUCTIBLE),
        ]

    def test_date_manquante_avertissement_seulement(self) -> None:
        (erreur,) = valider_operations([_vente(payment_date=None)])
        assert erreur.niveau == NiveauValidation.AVERTISSEMENT
        assert erreur.champ == "payment_date"

    def test_achat_non_deductible_sans_tva_ignore(self) -> None:
        assert valider_operations([_achat(vat_rate=Decimal("0"), is_deductible=False)]) == []

    def test_avertissements_journalises(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="comptafr.fiscal.validation"):
            valider_operations([_vente(payment_date=None), _achat(vat_rate=Decimal("0"))])
        messages = [r.getMessage() for r in caplog.records]
        assert len(messages) == 1
        assert "MISSING_PAYMENT_DATE" in messages[0]
