"""Calcul des cotisations URSSAF d'une periode (declaration mensuelle).

Chiffre d'affaires HT des ventes reconnues par la meme regle que la TVA,
multiplie par un taux deja normalise en points de base. Aucune deduction
d'unite ici: la conversion se fait au chargement des parametres.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from comptafr.erreurs import ErreurValidation
from comptafr.fiscal.reconnaissance import est_reconnue_dans
from comptafr.fiscal.validation import valider_operations
from comptafr.models.operation import Operation
from comptafr.montants import appliquer_points_de_base
from comptafr.periode import Periode, en_periode
from comptafr.taux import TauxBp

logger = logging.getLogger(__name__)

JOUR_PAIEMENT_URSSAF = 5


class CalculUrssaf(BaseModel):
    """Resultat URSSAF d'une periode."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    periode: Periode
    chiffre_affaires_ht_cents: int
    taux: TauxBp
    due_cents: int
    date_paiement: datetime.date
    operations_incluses: list[str] = []
    erreurs: list[ErreurValidation] = []

    @property
    def cle(self) -> str:
        return self.periode.cle


def calculer_urssaf(
    operations: Sequence[Operation],
    periode: Periode | str,
    taux: TauxBp,
    jour_paiement: int = JOUR_PAIEMENT_URSSAF,
    *,
    erreurs: Sequence[ErreurValidation] | None = None,
) -> CalculUrssaf:
    """Calcule les cotisations dues pour une periode.

    Args:
        operations: Operations candidates; seules les ventes comptent.
        periode: Periode ou cle "YYYY-MM".
        taux: Taux normalise (TauxBp).
        jour_paiement: Jour du mois suivant pour le paiement (defaut 5).
        erreurs: Anomalies deja calculees (voir calculer_tva).

    Raises:
        TypeError: Si `taux` n'est pas un TauxBp.
    """
    if not isinstance(taux, TauxBp):
        raise TypeError(
            f"Le taux URSSAF doit etre un TauxBp normalise, recu {type(taux).__name__}"
        )
    periode = en_periode(periode)

    chiffre_affaires = 0
    incluses: list[str] = []
    for op in operations:
        if not op.est_vente:
            continue
        if est_reconnue_dans(op, periode).incluse:
            chiffre_affaires += op.amount_ht_cents
            incluses.append(op.id)

    due = appliquer_points_de_base(chiffre_affaires, taux.points_de_base)
    logger.debug(
        "URSSAF %s: CA=%d taux=%d bp due=%d",
        periode.cle,
        chiffre_affaires,
        taux.points_de_base,
        due,
    )

    return CalculUrssaf(
        periode=periode,
        chiffre_affaires_ht_cents=chiffre_affaires,
        taux=taux,
        due_cents=due,
        date_paiement=periode.suivante().jour(jour_paiement),
        operations_incluses=incluses,
        erreurs=list(valider_operations(operations) if erreurs is None else erreurs),
    )
