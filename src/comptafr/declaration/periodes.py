"""Choix de la periode a declarer et statut d'affichage des periodes."""

from __future__ import annotations

import datetime
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from dateutil.relativedelta import relativedelta

from comptafr.periode import Periode, en_periode


class EtapeDeclaration(str, Enum):
    """Avancement du processus de declaration d'une periode."""

    EN_COURS = "in_progress"
    DECLAREE = "declared"
    CLOTUREE = "closed"


class StatutAffichage(str, Enum):
    FUTURE = "future"
    COURANTE = "current"
    DECLAREE = "declared"
    CLOTUREE = "closed"
    DISPONIBLE = "available"


class RaisonChoix(str, Enum):
    AUCUNE_DECLARATION = "no_declarations"
    SUIVANTE_APRES_CLOTURE = "next_after_closed"
    SELECTION_MANUELLE = "manual_selection"


@dataclass(frozen=True)
class PeriodeDeclaration:
    """Periode proposee dans le selecteur de declaration."""

    periode: Periode
    par_defaut: bool
    raison: RaisonChoix

    @property
    def libelle(self) -> str:
        return self.periode.libelle


def determiner_periode_par_defaut(
    periodes_cloturees: Iterable[Periode | str],
    aujourd_hui: datetime.date | None = None,
) -> PeriodeDeclaration:
    """Periode a declarer par defaut.

    Le mois suivant la derniere periode cloturee, ou a defaut le mois
    precedant `aujourd_hui`.
    """
    cloturees = [en_periode(p) for p in periodes_cloturees]
    if cloturees:
        return PeriodeDeclaration(
            periode=max(cloturees).suivante(),
            par_defaut=True,
            raison=RaisonChoix.SUIVANTE_APRES_CLOTURE,
        )

    if aujourd_hui is None:
        aujourd_hui = datetime.date.today()
    mois_precedent = aujourd_hui - relativedelta(months=1)
    return PeriodeDeclaration(
        periode=Periode.depuis_date(mois_precedent),
        par_defaut=True,
        raison=RaisonChoix.AUCUNE_DECLARATION,
    )


def statut_affichage_periode(
    periode: Periode | str,
    etapes: Mapping[str, EtapeDeclaration | str],
    aujourd_hui: datetime.date | None = None,
) -> StatutAffichage:
    """Statut d'une periode pour le selecteur.

    Priorite: future, puis etape de declaration (cloturee, declaree), puis
    courante, sinon disponible.
    """
    periode = en_periode(periode)
    if aujourd_hui is None:
        aujourd_hui = datetime.date.today()
    courante = Periode.depuis_date(aujourd_hui)

    if periode > courante:
        return StatutAffichage.FUTURE

    etape = etapes.get(periode.cle)
    if etape is not None:
        etape = EtapeDeclaration(etape)
        if etape == EtapeDeclaration.CLOTUREE:
            return StatutAffichage.CLOTUREE
        if etape == EtapeDeclaration.DECLAREE:
            return StatutAffichage.DECLAREE

    if periode == courante:
        return StatutAffichage.COURANTE
    return StatutAffichage.DISPONIBLE


def periodes_disponibles(
    aujourd_hui: datetime.date | None = None,
) -> list[PeriodeDeclaration]:
    """Toutes les periodes de janvier (annee - 2) a decembre (annee + 1), recentes d'abord."""
    if aujourd_hui is None:
        aujourd_hui = datetime.date.today()
    debut = Periode(aujourd_hui.year - 2, 1)
    periodes = Periode.plage(debut, 4 * 12)
    return [
        PeriodeDeclaration(periode=p, par_defaut=False, raison=RaisonChoix.SELECTION_MANUELLE)
        for p in reversed(periodes)
    ]
