"""Tests pour la projection de tresorerie et l'optimisation des provisions."""

from __future__ import annotations

import datetime
from decimal import Decimal

import pytest
from freezegun import freeze_time

from comptafr.echeances import Echeance, TypeEcheance
from comptafr.periode import Periode
from comptafr.tresorerie import (
    AgregatPeriode,
    Confiance,
    TypeProvision,
    niveau_confiance,
    optimiser_provisions,
    projeter,
)
from comptafr.tresorerie.projection import MethodeAnnuelle, ProjectionPeriode, _annuel


def _historique(nombre: int, revenu: int = 100000) -> list[AgregatPeriode]:
    return [
        AgregatPeriode(
            periode=p,
            revenu_cents=revenu,
            depenses_cents=10000,
            tva_due_cents=18000,
            urssaf_due_cents=21200,
        )
        for p in Periode.plage(Periode(2025, 1), nombre)
    ]


class TestConfiance:
    @pytest.mark.parametrize(
        ("nombre", "attendu"),
        [(0, "low"), (2, "low"), (3, "medium"), (4, "medium"), (5, "medium"), (6, "high"), (8, "high")],
    )
    def test_niveau(self, nombre: int, attendu: str) -> None:
        assert niveau_confiance(nombre).value == attendu

    def test_projection_porte_la_confiance(self) -> None:
        assert projeter(_historique(2), 3).confiance == Confiance.FAIBLE
        assert projeter(_historique(4), 3).confiance == Confiance.MOYENNE
        assert projeter(_historique(8), 3).confiance == Confiance.ELEVEE


class TestProjeter:
    def test_moyennes_et_cumul(self) -> None:
        historique = _historique(2)
        historique[1] = AgregatPeriode(Periode(2025, 2), 200000, 10000, 18000, 21200)
        projection = projeter(historique, 3, tresorerie_initiale_cents=1000)

        premiere = projection.periodes[0]
        assert premiere.periode == Periode(2025, 3)
        assert premiere.revenu_cents == 150000
        assert premiere.disponible_cents == 150000 - 10000 - 18000 - 21200
        cumuls = [p.tresorerie_cumulee_cents for p in projection.periodes]
        assert cumuls == [1000 + 100800, 1000 + 2 * 100800, 1000 + 3 * 100800]

    def test_moyenne_arrondie(self) -> None:
        historique = _historique(2)
        historique[1] = AgregatPeriode(Periode(2025, 2), 100001, 10000, 18000, 21200)
        # (100000 + 100001) / 2 = 100000.5 -> 100001
        assert projeter(historique, 1).periodes[0].revenu_cents == 100001

    def test_passage_d_annee(self) -> None:
        historique = [AgregatPeriode(Periode(2025, 11), 1, 0, 0, 0)]
        cles = [p.periode.cle for p in projeter(historique, 3).periodes]
        assert cles == ["2025-12", "2026-01", "2026-02"]

    def test_facteur_saisonnier(self) -> None:
        projection = projeter(_historique(3), 1, facteur_saisonnier=Decimal("1.5"))
        assert projection.periodes[0].revenu_cents == 150000

    def test_historique_vide_avec_depart(self) -> None:
        projection = projeter([], 2, 5000, depart=Periode(2025, 6))
        assert [p.disponible_cents for p in projection.periodes] == [0, 0]
        assert projection.periodes[-1].tresorerie_cumulee_cents == 5000
        assert projection.confiance == Confiance.FAIBLE

    def test_historique_vide_sans_depart(self) -> None:
        with pytest.raises(ValueError, match="depart"):
            projeter([], 3)

    def test_horizon_invalide(self) -> None:
        with pytest.raises(ValueError, match="Horizon"):
            projeter(_historique(3), 0)


class TestAnnuel:
    def test_extrapolation_lineaire(self) -> None:
        annuel = projeter(_historique(3), 3).annuel
        assert annuel.estimation is True
        assert annuel.methode == MethodeAnnuelle.EXTRAPOLATION_LINEAIRE
        assert annuel.total_revenu_cents == 12 * 100000
        assert annuel.total_disponible_cents == 12 * 50800

    def test_douze_mois_exacts(self) -> None:
        projection = projeter(_historique(3), 18)
        annuel = projection.annuel
        assert annuel.estimation is False
        assert annuel.methode == MethodeAnnuelle.PROJECTION_12_MOIS
        assert annuel.mois_projetes == 12
        assert annuel.total_revenu_cents == 12 * 100000
        assert len(projection.periodes) == 18

    def test_taux_effectif(self) -> None:
        annuel = projeter(_historique(3), 12).annuel
        # (18 000 + 21 200) / 100 000
        assert annuel.taux_effectif == Decimal("39.20")

    def test_hypotheses_mentionnent_l_estimation(self) -> None:
        projection = projeter(_historique(3), 5)
        assert any("extrapole" in h for h in projection.hypotheses)
        projection = projeter(_historique(3), 12)
        assert not any("extrapole" in h for h in projection.hypotheses)

    def test_disponible_egal_aux_totaux_arrondis(self) -> None:
        """Sur 5 mois (echelle 2,4): 2 -> 5 et 1 -> 2, donc disponible 3 et non round(2,4)."""
        periodes = [
            ProjectionPeriode(
                periode=p,
                revenu_cents=2 if i == 0 else 0,
                depenses_cents=1 if i == 0 else 0,
                tva_cents=0,
                urssaf_cents=0,
                disponible_cents=1 if i == 0 else 0,
                tresorerie_cumulee_cents=1,
            )
            for i, p in enumerate(Periode.plage(Periode(2025, 1), 5))
        ]
        annuel = _annuel(periodes)
        assert (annuel.total_revenu_cents, annuel.total_depenses_cents) == (5, 2)
        assert annuel.total_disponible_cents == 3
        assert annuel.total_disponible_cents == (
            annuel.total_revenu_cents
            - annuel.total_depenses_cents
            - annuel.total_tva_cents
            - annuel.total_urssaf_cents
        )


# ---------------------------------------------------------------------------
# Provisions
# ---------------------------------------------------------------------------


def _echeance(
    type_: TypeEcheance, jour: datetime.date, montant: int, periode: str = "2025-03"
) -> Echeance:
    return Echeance(
        type=type_,
        periode=periode,
        date_limite=jour,
        montant_cents=montant,
        description=f"{type_.value} {periode}",
    )


ECHEANCES_MARS = [
    _echeance(TypeEcheance.TVA_DECLARATION, datetime.date(2025, 4, 12), 18000),
    _echeance(TypeEcheance.TVA_PAIEMENT, datetime.date(2025, 4, 20), 18000),
    _echeance(TypeEcheance.URSSAF_PAIEMENT, datetime.date(2025, 5, 5), 21200),
]


class TestProvisions:
    def test_paiements_dans_l_horizon(self) -> None:
        """La declaration ne mobilise pas de tresorerie: seuls les paiements comptent."""
        resultat = optimiser_provisions(
            100000, ECHEANCES_MARS, 0, 30, aujourd_hui=datetime.date(2025, 4, 10)
        )
        assert [p.type for p in resultat.provisions] == [TypeProvision.TVA, TypeProvision.URSSAF]
        assert [p.echeance_id for p in resultat.provisions] == [
            "vat-payment-2025-03",
            "urssaf-payment-2025-03",
        ]
        assert resultat.provisions_requises_cents == 39200
        assert resultat.distribuable_cents == 60800

    def test_horizon_exclut_les_paiements_lointains(self) -> None:
        resultat = optimiser_provisions(
            100000, ECHEANCES_MARS, 0, 10, aujourd_hui=datetime.date(2025, 4, 10)
        )
        assert [p.echeance_id for p in resultat.provisions] == ["vat-payment-2025-03"]

    def test_paiement_en_retard_reste_provisionne(self) -> None:
        resultat = optimiser_provisions(
            100000, ECHEANCES_MARS, 0, 0, aujourd_hui=datetime.date(2025, 4, 25)
        )
        assert [p.echeance_id for p in resultat.provisions] == ["vat-payment-2025-03"]

    def test_echeance_payee_ignoree(self) -> None:
        resultat = optimiser_provisions(
            100000,
            ECHEANCES_MARS,
            0,
            30,
            aujourd_hui=datetime.date(2025, 4, 10),
            echeances_payees=["vat-payment-2025-03"],
        )
        assert resultat.provisions_requises_cents == 21200

    def test_montant_nul_ignore(self) -> None:
        echeances = [_echeance(TypeEcheance.TVA_PAIEMENT, datetime.date(2025, 4, 20), 0)]
        resultat = optimiser_provisions(1000, echeances, 0, 30, aujourd_hui=datetime.date(2025, 4, 10))
        assert resultat.provisions == []

    def test_manque_a_couvrir(self) -> None:
        resultat = optimiser_provisions(
            10000, ECHEANCES_MARS, 5000, 30, aujourd_hui=datetime.date(2025, 4, 10)
        )
        assert resultat.provisions_requises_cents == 44200
        assert resultat.distribuable_cents == 0
        assert resultat.manque_cents == 34200
        assert resultat.recommandations == [
            "Besoin de 342,00 € supplementaires pour couvrir les obligations fiscales"
        ]

    def test_distribution_possible_au_dela_du_double_de_la_reserve(self) -> None:
        resultat = optimiser_provisions(100000, [], 10000, 30, aujourd_hui=datetime.date(2025, 4, 10))
        assert resultat.distribuable_cents == 90000
        assert resultat.recommandations == ["Possibilite de distribuer 900,00 € apres provisions"]

    def test_provisions_optimales(self) -> None:
        # Solde 20 000 == 2 x reserve: pas de distribution conseillee
        resultat = optimiser_provisions(30000, [], 10000, 30, aujourd_hui=datetime.date(2025, 4, 10))
        assert resultat.distribuable_cents == 20000
        assert resultat.recommandations == ["Provisions optimales maintenues"]

    def test_horizon_negatif(self) -> None:
        with pytest.raises(ValueError, match="Horizon"):
            optimiser_provisions(0, [], 0, -1, aujourd_hui=datetime.date(2025, 4, 10))

    @freeze_time("2025-04-10")
    def test_date_du_jour(self) -> None:
        resultat = optimiser_provisions(100000, ECHEANCES_MARS, 0, 30)
        assert resultat.date_optimisation == datetime.date(2025, 4, 10)
        assert len(resultat.provisions) == 2
