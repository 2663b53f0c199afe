"""Tableau de bord multi-periodes et sommaire annuel.

Compose les resultats TVA/URSSAF par periode en donnees de tableau de bord,
puis en sommaire annuel calcule uniquement sur les periodes cloturees.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

from comptafr.erreurs import ErreurValidation
from comptafr.fiscal.reconnaissance import est_reconnue_dans
from comptafr.fiscal.tva import calculer_tva
from comptafr.fiscal.urssaf import calculer_urssaf
from comptafr.fiscal.validation import valider_operations
from comptafr.models.operation import Operation
from comptafr.parametres import Parametres
from comptafr.periode import Periode, en_periode
from comptafr.tresorerie.projection import AgregatPeriode

logger = logging.getLogger(__name__)

DEUX_DECIMALES = Decimal("0.01")


class DonneesPeriode(BaseModel):
    """Chiffres d'une periode pour le tableau de bord."""

    model_config = ConfigDict(frozen=True)

    periode: str
    revenu_cents: int  # Ventes reconnues HT
    depenses_cents: int  # Achats TTC factures dans la periode
    tva_due_cents: int
    urssaf_due_cents: int
    disponible_cents: int
    nb_ventes: int
    nb_achats: int

    @property
    def nb_operations(self) -> int:
        return self.nb_ventes + self.nb_achats

    def en_agregat(self) -> AgregatPeriode:
        """Agregat historique consomme par la projection de tresorerie."""
        return AgregatPeriode(
            periode=Periode.depuis_cle(self.periode),
            revenu_cents=self.revenu_cents,
            depenses_cents=self.depenses_cents,
            tva_due_cents=self.tva_due_cents,
            urssaf_due_cents=self.urssaf_due_cents,
        )


class SommaireAnnuel(BaseModel):
    """Totaux sur les periodes cloturees."""

    model_config = ConfigDict(frozen=True)

    annee: int | None
    periodes_cloturees: list[str]
    total_revenu_cents: int
    total_depenses_cents: int
    total_tva_cents: int
    total_urssaf_cents: int
    revenu_moyen_mensuel_cents: int
    croissance: Decimal  # en %


class TableauDeBord(BaseModel):
    """Donnees brutes par periode et sommaire annuel."""

    model_config = ConfigDict(frozen=True)

    periodes: list[DonneesPeriode]
    sommaire_annuel: SommaireAnnuel


# ---------------------------------------------------------------------------
# Par periode
# ---------------------------------------------------------------------------


def calculer_donnees_periode(
    operations: Sequence[Operation],
    periode: Periode | str,
    parametres: Parametres | None = None,
    *,
    erreurs: Sequence[ErreurValidation] | None = None,
) -> DonneesPeriode:
    """Calcule les chiffres d'une periode.

    disponible = revenu - TVA due - URSSAF due - depenses - reserve de
    tresorerie. La reserve est retranchee volontairement (prudence).
    """
    periode = en_periode(periode)
    parametres = parametres or Parametres()
    if erreurs is None:
        erreurs = valider_operations(operations)

    tva = calculer_tva(operations, periode, parametres, erreurs=erreurs)
    urssaf = calculer_urssaf(
        operations,
        periode,
        parametres.taux_urssaf,
        parametres.jour_paiement_urssaf,
        erreurs=erreurs,
    )

    depenses = 0
    nb_ventes = 0
    nb_achats = 0
    for op in operations:
        if not est_reconnue_dans(op, periode).incluse:
            continue
        if op.est_vente:
            nb_ventes += 1
        else:
            nb_achats += 1
            depenses += op.amount_ttc_cents

    revenu = urssaf.chiffre_affaires_ht_cents
    disponible = (
        revenu
        - tva.due_cents
        - urssaf.due_cents
        - depenses
        - parametres.reserve_tresorerie_cents
    )

    return DonneesPeriode(
        periode=periode.cle,
        revenu_cents=revenu,
        depenses_cents=depenses,
        tva_due_cents=tva.due_cents,
        urssaf_due_cents=urssaf.due_cents,
        disponible_cents=disponible,
        nb_ventes=nb_ventes,
        nb_achats=nb_achats,
    )


# ---------------------------------------------------------------------------
# Multi-periodes
# ---------------------------------------------------------------------------


def taux_de_croissance(revenus: Sequence[int]) -> Decimal:
    """(dernier - premier) / premier * 100, ou 0 si non calculable."""
    if len(revenus) < 2 or revenus[0] == 0:
        return Decimal("0")
    croissance = Decimal(revenus[-1] - revenus[0]) / Decimal(revenus[0]) * 100
    return croissance.quantize(DEUX_DECIMALES, rounding=ROUND_HALF_UP)


def agreger(
    periodes: Sequence[Periode | str],
    resultats: Mapping[str, DonneesPeriode],
    periodes_cloturees: Iterable[Periode | str] = (),
) -> TableauDeBord:
    """Compose le tableau de bord multi-periodes.

    Args:
        periodes: Periodes a afficher, dans l'ordre souhaite.
        resultats: DonneesPeriode indexees par cle "YYYY-MM".
        periodes_cloturees: Periodes cloturees par le processus de
            declaration; seules celles-ci entrent dans les totaux.

    Raises:
        ValueError: Si une periode demandee n'a pas de resultat.
    """
    cles = [en_periode(p).cle for p in periodes]
    manquantes = [c for c in cles if c not in resultats]
    if manquantes:
        raise ValueError(f"Resultats manquants pour les periodes: {manquantes}")

    donnees = [resultats[c] for c in cles]
    cloturees = {en_periode(p).cle for p in periodes_cloturees}
    incluses = sorted((d for d in donnees if d.periode in cloturees), key=lambda d: d.periode)

    total_revenu = sum(d.revenu_cents for d in incluses)
    moyenne = 0
    if incluses:
        moyenne = int(
            (Decimal(total_revenu) / len(incluses)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        )

    sommaire = SommaireAnnuel(
        annee=Periode.depuis_cle(incluses[-1].periode).annee if incluses else None,
        periodes_cloturees=[d.periode for d in incluses],
        total_revenu_cents=total_revenu,
        total_depenses_cents=sum(d.depenses_cents for d in incluses),
        total_tva_cents=sum(d.tva_due_cents for d in incluses),
        total_urssaf_cents=sum(d.urssaf_due_cents for d in incluses),
        revenu_moyen_mensuel_cents=moyenne,
        croissance=taux_de_croissance([d.revenu_cents for d in incluses]),
    )
    logger.debug(
        "Tableau de bord: %d periodes, %d cloturees, revenu %d",
        len(donnees),
        len(incluses),
        total_revenu,
    )
    return TableauDeBord(periodes=donnees, sommaire_annuel=sommaire)


def agregats_historiques(
    resultats: Iterable[DonneesPeriode],
) -> list[AgregatPeriode]:
    """Convertit des DonneesPeriode en agregats chronologiques pour la projection."""
    return sorted((d.en_agregat() for d in resultats), key=lambda a: a.periode)
