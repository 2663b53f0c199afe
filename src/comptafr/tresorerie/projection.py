"""Projection de tresorerie a partir des moyennes historiques.

Chaque mois projete vaut la moyenne arithmetique simple des periodes
historiques (sans ponderation ni rejet des valeurs extremes), multipliee par
un facteur saisonnier (1 par defaut; la saisonnalite n'est pas modelisee).

Le total annuel d'un horizon de moins de 12 mois est une extrapolation
lineaire, signalee comme estimation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from comptafr.montants import arrondir_cents
from comptafr.periode import Periode

logger = logging.getLogger(__name__)

MOIS_PAR_AN = 12


class Confiance(str, Enum):
    """Niveau de confiance, fonction du seul nombre de periodes historiques."""

    FAIBLE = "low"
    MOYENNE = "medium"
    ELEVEE = "high"


class MethodeAnnuelle(str, Enum):
    EXTRAPOLATION_LINEAIRE = "extrapolation_lineaire"
    PROJECTION_12_MOIS = "projection_12_mois"


@dataclass(frozen=True)
class AgregatPeriode:
    """Chiffres historiques d'une periode, en centimes."""

    periode: Periode
    revenu_cents: int
    depenses_cents: int
    tva_due_cents: int
    urssaf_due_cents: int


@dataclass(frozen=True)
class ProjectionPeriode:
    """Un mois projete."""

    periode: Periode
    revenu_cents: int
    depenses_cents: int
    tva_cents: int
    urssaf_cents: int
    disponible_cents: int  # revenu - depenses - TVA - URSSAF
    tresorerie_cumulee_cents: int


@dataclass(frozen=True)
class AnnuelProjete:
    """Totaux sur 12 mois, exacts ou extrapoles."""

    total_revenu_cents: int
    total_depenses_cents: int
    total_tva_cents: int
    total_urssaf_cents: int
    total_disponible_cents: int
    taux_effectif: Decimal  # (TVA + URSSAF) / revenu, en %
    estimation: bool
    methode: MethodeAnnuelle
    mois_projetes: int


@dataclass(frozen=True)
class ProjectionTresorerie:
    """Projection complete."""

    tresorerie_initiale_cents: int
    periodes: list[ProjectionPeriode]
    annuel: AnnuelProjete
    confiance: Confiance
    nb_periodes_historiques: int
    hypotheses: list[str]


# ---------------------------------------------------------------------------
# Calculs
# ---------------------------------------------------------------------------


def niveau_confiance(nb_periodes: int) -> Confiance:
    """< 3 periodes: faible; < 6: moyenne; sinon elevee."""
    if nb_periodes < 3:
        return Confiance.FAIBLE
    if nb_periodes < 6:
        return Confiance.MOYENNE
    return Confiance.ELEVEE


def _moyenne(valeurs: Sequence[int], facteur: Decimal) -> int:
    if not valeurs:
        return 0
    return arrondir_cents(Decimal(sum(valeurs)) / len(valeurs) * facteur)


def _annuel(periodes: Sequence[ProjectionPeriode]) -> AnnuelProjete:
    horizon = len(periodes)
    if horizon >= MOIS_PAR_AN:
        base = periodes[:MOIS_PAR_AN]
        echelle = Decimal(1)
        methode = MethodeAnnuelle.PROJECTION_12_MOIS
    else:
        base = periodes
        echelle = Decimal(MOIS_PAR_AN) / horizon
        methode = MethodeAnnuelle.EXTRAPOLATION_LINEAIRE

    def total(attr: str) -> int:
        return arrondir_cents(Decimal(sum(getattr(p, attr) for p in base)) * echelle)

    revenu = total("revenu_cents")
    depenses = total("depenses_cents")
    tva = total("tva_cents")
    urssaf = total("urssaf_cents")
    taux_effectif = Decimal("0")
    if revenu > 0:
        taux_effectif = (Decimal(tva + urssaf) / revenu * 100).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )

    return AnnuelProjete(
        total_revenu_cents=revenu,
        total_depenses_cents=depenses,
        total_tva_cents=tva,
        total_urssaf_cents=urssaf,
        # Egal au centime a revenu - depenses - TVA - URSSAF arrondis
        total_disponible_cents=revenu - depenses - tva - urssaf,
        taux_effectif=taux_effectif,
        estimation=methode == MethodeAnnuelle.EXTRAPOLATION_LINEAIRE,
        methode=methode,
        mois_projetes=len(base),
    )


def projeter(
    historique: Sequence[AgregatPeriode],
    horizon_mois: int,
    tresorerie_initiale_cents: int = 0,
    depart: Periode | None = None,
    facteur_saisonnier: Decimal = Decimal("1"),
) -> ProjectionTresorerie:
    """Projette la tresorerie sur `horizon_mois` mois.

    Args:
        historique: Agregats des periodes passees (toutes prises en compte).
        horizon_mois: Nombre de mois a projeter (>= 1).
        tresorerie_initiale_cents: Tresorerie de depart.
        depart: Premier mois projete (defaut: mois suivant la derniere
            periode historique).
        facteur_saisonnier: Multiplicateur applique aux moyennes.

    Raises:
        ValueError: Si l'horizon est < 1, ou si `depart` est absent alors
            que l'historique est vide.
    """
    if horizon_mois < 1:
        raise ValueError(f"Horizon de projection invalide: {horizon_mois} (minimum 1)")
    if depart is None:
        if not historique:
            raise ValueError("Historique vide: la periode de depart est requise")
        depart = max(a.periode for a in historique).suivante()

    facteur = Decimal(facteur_saisonnier)
    revenu = _moyenne([a.revenu_cents for a in historique], facteur)
    depenses = _moyenne([a.depenses_cents for a in historique], facteur)
    tva = _moyenne([a.tva_due_cents for a in historique], facteur)
    urssaf = _moyenne([a.urssaf_due_cents for a in historique], facteur)
    disponible = revenu - depenses - tva - urssaf

    periodes: list[ProjectionPeriode] = []
    cumul = tresorerie_initiale_cents
    for periode in Periode.plage(depart, horizon_mois):
        cumul += disponible
        periodes.append(
            ProjectionPeriode(
                periode=periode,
                revenu_cents=revenu,
                depenses_cents=depenses,
                tva_cents=tva,
                urssaf_cents=urssaf,
                disponible_cents=disponible,
                tresorerie_cumulee_cents=cumul,
            )
        )

    annuel = _annuel(periodes)
    hypotheses = [
        f"Moyenne simple de {len(historique)} periode(s) historique(s)",
        f"Facteur saisonnier: {facteur}",
    ]
    if annuel.estimation:
        hypotheses.append(
            f"Total annuel extrapole lineairement depuis {horizon_mois} mois"
        )

    logger.debug(
        "Projection %s +%d mois: disponible/mois=%d, cumul final=%d",
        depart,
        horizon_mois,
        disponible,
        cumul,
    )
    return ProjectionTresorerie(
        tresorerie_initiale_cents=tresorerie_initiale_cents,
        periodes=periodes,
        annuel=annuel,
        confiance=niveau_confiance(len(historique)),
        nb_periodes_historiques=len(historique),
        hypotheses=hypotheses,
    )
