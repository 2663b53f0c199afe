"""Calcul de la TVA d'une periode (declaration mensuelle CA3).

TVA collectee sur les ventes reconnues, TVA deductible sur les achats
deductibles reconnus, chaque ligne arrondie au centime avant sommation.
Net a payer = max(0, collectee - deductible).

Dates: declaration le 12 et paiement le 20 du mois suivant, jours fixes,
sans report de jour ouvrable.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Sequence
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from comptafr.erreurs import ErreurValidation
from comptafr.fiscal.reconnaissance import est_reconnue_dans
from comptafr.fiscal.validation import valider_operations
from comptafr.models.operation import Operation, OperationType
from comptafr.parametres import Parametres
from comptafr.periode import Periode, en_periode

logger = logging.getLogger(__name__)


class LigneDetailTva(BaseModel):
    """Ligne d'audit: une operation et son traitement dans la periode."""

    model_config = ConfigDict(frozen=True)

    operation_id: str
    libelle_contrepartie: str
    operation_type: OperationType
    is_service: bool
    is_deductible: bool
    amount_ht_cents: int
    vat_rate: Decimal
    vat_cents: int
    date_reference: datetime.date | None
    incluse: bool


class CalculTva(BaseModel):
    """Resultat TVA d'une periode."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    periode: Periode
    collectee_cents: int
    collectee_services_cents: int
    collectee_biens_cents: int
    deductible_cents: int
    due_cents: int
    date_declaration: datetime.date
    date_paiement: datetime.date
    detail: list[LigneDetailTva]
    erreurs: list[ErreurValidation] = []

    @property
    def cle(self) -> str:
        return self.periode.cle

    @property
    def credit_cents(self) -> int:
        """Credit de TVA reportable quand la deductible depasse la collectee."""
        return max(0, self.deductible_cents - self.collectee_cents)


def dates_tva(periode: Periode, parametres: Parametres) -> tuple[datetime.date, datetime.date]:
    """(date de declaration, date de paiement) pour une periode."""
    suivante = periode.suivante()
    return (
        suivante.jour(parametres.jour_declaration_tva),
        suivante.jour(parametres.jour_paiement_tva),
    )


def calculer_tva(
    operations: Sequence[Operation],
    periode: Periode | str,
    parametres: Parametres | None = None,
    *,
    erreurs: Sequence[ErreurValidation] | None = None,
) -> CalculTva:
    """Calcule la TVA collectee, deductible et due pour une periode.

    Args:
        operations: Operations candidates (ordre source conserve dans le detail).
        periode: Periode ou cle "YYYY-MM".
        parametres: Jours de declaration/paiement (defaut: 12 et 20).
        erreurs: Anomalies deja calculees par l'appelant; a defaut les
            operations sont validees ici.

    Returns:
        CalculTva avec le detail de chaque operation et les anomalies de
        donnees detectees (non bloquantes).
    """
    periode = en_periode(periode)
    parametres = parametres or Parametres()

    services = 0
    biens = 0
    deductible = 0
    detail: list[LigneDetailTva] = []

    for op in operations:
        incluse, date_ref = est_reconnue_dans(op, periode)
        vat_cents = op.amount_vat_cents

        if op.est_vente and incluse:
            if op.is_service:
                services += vat_cents
            else:
                biens += vat_cents
        elif op.est_achat and incluse and op.is_deductible:
            deductible += vat_cents

        detail.append(
            LigneDetailTva(
                operation_id=op.id,
                libelle_contrepartie=op.label or "Non renseigne",
                operation_type=op.operation_type,
                is_service=op.is_service,
                is_deductible=op.is_deductible,
                amount_ht_cents=op.amount_ht_cents,
                vat_rate=op.vat_rate,
                vat_cents=vat_cents,
                date_reference=date_ref,
                incluse=incluse,
            )
        )

    collectee = services + biens
    due = max(0, collectee - deductible)
    date_declaration, date_paiement = dates_tva(periode, parametres)

    logger.debug(
        "TVA %s: collectee=%d deductible=%d due=%d",
        periode.cle,
        collectee,
        deductible,
        due,
    )

    return CalculTva(
        periode=periode,
        collectee_cents=collectee,
        collectee_services_cents=services,
        collectee_biens_cents=biens,
        deductible_cents=deductible,
        due_cents=due,
        date_declaration=date_declaration,
        date_paiement=date_paiement,
        detail=detail,
        erreurs=list(valider_operations(operations) if erreurs is None else erreurs),
    )
