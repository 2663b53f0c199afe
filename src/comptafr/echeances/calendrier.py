"""Calendrier des echeances TVA et URSSAF.

Derive les echeances d'une periode a partir des calculs TVA et URSSAF:
declaration TVA (12), paiement TVA (20), paiement URSSAF (5) du mois suivant.

Les jours sont fixes: une echeance tombant un samedi, un dimanche ou un
jour ferie n'est PAS reportee.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict

from comptafr.fiscal.tva import CalculTva
from comptafr.fiscal.urssaf import CalculUrssaf


# ---------------------------------------------------------------------------
# Types & modeles
# ---------------------------------------------------------------------------


class TypeEcheance(str, Enum):
    """Types d'echeances suivies."""

    TVA_DECLARATION = "TVA_DECLARATION"
    TVA_PAIEMENT = "TVA_PAIEMENT"
    URSSAF_PAIEMENT = "URSSAF_PAIEMENT"


class StatutEcheance(str, Enum):
    """Etat d'une echeance a une date donnee."""

    A_VENIR = "a_venir"
    DUE = "due"
    EN_RETARD = "en_retard"
    PAYEE = "payee"


_PREFIXES_ID = {
    TypeEcheance.TVA_DECLARATION: "vat-declaration",
    TypeEcheance.TVA_PAIEMENT: "vat-payment",
    TypeEcheance.URSSAF_PAIEMENT: "urssaf-payment",
}


class Echeance(BaseModel):
    """Une echeance fiscale d'une periode."""

    model_config = ConfigDict(frozen=True)

    type: TypeEcheance
    periode: str
    date_limite: datetime.date
    montant_cents: int
    description: str

    @property
    def id(self) -> str:
        """Identifiant deterministe, ex: 'vat-payment-2025-03'."""
        return f"{_PREFIXES_ID[self.type]}-{self.periode}"


# ---------------------------------------------------------------------------
# Calcul des echeances
# ---------------------------------------------------------------------------


def echeances_tva(calcul: CalculTva) -> list[Echeance]:
    """Declaration et paiement TVA d'une periode."""
    cle = calcul.periode.cle
    return [
        Echeance(
            type=TypeEcheance.TVA_DECLARATION,
            periode=cle,
            date_limite=calcul.date_declaration,
            montant_cents=calcul.due_cents,
            description=f"Declaration TVA {calcul.periode.libelle}",
        ),
        Echeance(
            type=TypeEcheance.TVA_PAIEMENT,
            periode=cle,
            date_limite=calcul.date_paiement,
            montant_cents=calcul.due_cents,
            description=f"Paiement TVA {calcul.periode.libelle}",
        ),
    ]


def echeance_urssaf(calcul: CalculUrssaf) -> Echeance:
    """Paiement URSSAF d'une periode."""
    return Echeance(
        type=TypeEcheance.URSSAF_PAIEMENT,
        periode=calcul.periode.cle,
        date_limite=calcul.date_paiement,
        montant_cents=calcul.due_cents,
        description=f"Cotisations URSSAF {calcul.periode.libelle}",
    )


def calculer_echeances(
    calculs_tva: Iterable[CalculTva],
    calculs_urssaf: Iterable[CalculUrssaf],
) -> list[Echeance]:
    """Toutes les echeances des calculs fournis, triees par date_limite.

    Le tri est stable: a date egale, l'ordre d'entree est conserve.
    """
    echeances: list[Echeance] = []
    for calcul in calculs_tva:
        echeances.extend(echeances_tva(calcul))
    for calcul in calculs_urssaf:
        echeances.append(echeance_urssaf(calcul))
    return sorted(echeances, key=lambda e: e.date_limite)


def statut_echeance(
    echeance: Echeance,
    aujourd_hui: datetime.date | None = None,
    payee: bool = False,
) -> StatutEcheance:
    """Statut d'une echeance: payee, en retard, due aujourd'hui ou a venir."""
    if payee:
        return StatutEcheance.PAYEE
    if aujourd_hui is None:
        aujourd_hui = datetime.date.today()

    if echeance.date_limite < aujourd_hui:
        return StatutEcheance.EN_RETARD
    if echeance.date_limite == aujourd_hui:
        return StatutEcheance.DUE
    return StatutEcheance.A_VENIR


def prochaines_echeances(
    echeances: Iterable[Echeance],
    aujourd_hui: datetime.date | None = None,
    limite: int = 3,
) -> list[Echeance]:
    """Les `limite` prochaines echeances non passees."""
    if aujourd_hui is None:
        aujourd_hui = datetime.date.today()
    futures = [e for e in echeances if e.date_limite >= aujourd_hui]
    return sorted(futures, key=lambda e: e.date_limite)[:limite]
