"""Optimisation des provisions TVA et URSSAF.

A partir de la tresorerie disponible et des paiements a venir, determine
le montant a mettre de cote et ce qui reste distribuable:

    provisions requises = paiements en attente dans l'horizon + reserve
    distribuable = max(0, disponible - provisions requises)

Seuls les paiements comptent: la declaration TVA porte le meme montant que
son paiement et ne mobilise pas de tresorerie. Un paiement en retard reste
en attente tant qu'il n'est pas marque paye.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from dateutil.relativedelta import relativedelta

from comptafr.echeances.calendrier import (
    Echeance,
    StatutEcheance,
    TypeEcheance,
    statut_echeance,
)
from comptafr.montants import formater_euros

logger = logging.getLogger(__name__)


class TypeProvision(str, Enum):
    TVA = "vat"
    URSSAF = "urssaf"
    AUTRE = "other"


_TYPES_PROVISION = {
    TypeEcheance.TVA_PAIEMENT: TypeProvision.TVA,
    TypeEcheance.URSSAF_PAIEMENT: TypeProvision.URSSAF,
}


@dataclass(frozen=True)
class Provision:
    """Montant a mettre de cote pour un paiement."""

    type: TypeProvision
    echeance_id: str
    libelle: str
    date_limite: datetime.date
    montant_cents: int


@dataclass(frozen=True)
class OptimisationProvisions:
    disponible_cents: int
    provisions: list[Provision]
    reserve_cents: int
    provisions_requises_cents: int
    distribuable_cents: int
    recommandations: list[str]
    date_optimisation: datetime.date

    @property
    def manque_cents(self) -> int:
        """Montant manquant pour couvrir les provisions (0 si couvert)."""
        return max(0, self.provisions_requises_cents - self.disponible_cents)


def optimiser_provisions(
    disponible_cents: int,
    echeances: Iterable[Echeance],
    reserve_cents: int,
    horizon_jours: int,
    *,
    aujourd_hui: datetime.date | None = None,
    echeances_payees: Iterable[str] = (),
) -> OptimisationProvisions:
    """Calcule les provisions requises et le montant distribuable.

    Args:
        disponible_cents: Tresorerie disponible.
        echeances: Echeances calculees (voir calculer_echeances).
        reserve_cents: Reserve de tresorerie toujours conservee.
        horizon_jours: Les paiements dont la date limite depasse
            aujourd_hui + horizon_jours sont ignores.
        aujourd_hui: Date de reference (defaut: date du jour).
        echeances_payees: Identifiants d'echeances deja reglees.

    Returns:
        OptimisationProvisions, provisions triees par date limite.

    Raises:
        ValueError: Si l'horizon ou la reserve est negatif.
    """
    if horizon_jours < 0:
        raise ValueError(f"Horizon invalide: {horizon_jours} jours (minimum 0)")
    if reserve_cents < 0:
        raise ValueError(f"Reserve negative: {reserve_cents} centimes")
    if aujourd_hui is None:
        aujourd_hui = datetime.date.today()

    limite = aujourd_hui + relativedelta(days=horizon_jours)
    payees = set(echeances_payees)

    provisions: list[Provision] = []
    for echeance in sorted(echeances, key=lambda e: e.date_limite):
        type_provision = _TYPES_PROVISION.get(echeance.type)
        if type_provision is None or echeance.montant_cents <= 0:
            continue
        if echeance.date_limite > limite:
            continue
        statut = statut_echeance(echeance, aujourd_hui, payee=echeance.id in payees)
        if statut == StatutEcheance.PAYEE:
            continue
        provisions.append(
            Provision(
                type=type_provision,
                echeance_id=echeance.id,
                libelle=echeance.description,
                date_limite=echeance.date_limite,
                montant_cents=echeance.montant_cents,
            )
        )

    requises = sum(p.montant_cents for p in provisions) + reserve_cents
    solde = disponible_cents - requises

    if solde < 0:
        recommandations = [
            f"Besoin de {formater_euros(-solde)} supplementaires pour couvrir "
            "les obligations fiscales"
        ]
    elif solde > 2 * reserve_cents:
        recommandations = [f"Possibilite de distribuer {formater_euros(solde)} apres provisions"]
    else:
        recommandations = ["Provisions optimales maintenues"]

    logger.debug(
        "Provisions au %s (+%d jours): %d paiement(s), requises=%d, solde=%d",
        aujourd_hui,
        horizon_jours,
        len(provisions),
        requises,
        solde,
    )
    return OptimisationProvisions(
        disponible_cents=disponible_cents,
        provisions=provisions,
        reserve_cents=reserve_cents,
        provisions_requises_cents=requises,
        distribuable_cents=max(0, solde),
        recommandations=recommandations,
        date_optimisation=aujourd_hui,
    )
