"""Controles de coherence des operations.

Les anomalies sont retournees sous forme de liste d'ErreurValidation; elles
ne bloquent jamais un calcul. Le calcul se poursuit avec les regles de
reconnaissance (une operation non reconnaissable est simplement exclue).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from comptafr.erreurs import CodeValidation, ErreurValidation, NiveauValidation
from comptafr.fiscal.reconnaissance import en_attente_encaissement
from comptafr.models.operation import Operation

logger = logging.getLogger(__name__)

TAUX_MIN = Decimal("0")
TAUX_MAX = Decimal("100")


def valider_operation(operation: Operation) -> list[ErreurValidation]:
    """Retourne les anomalies d'une operation, dans un ordre stable."""
    erreurs: list[ErreurValidation] = []

    if en_attente_encaissement(operation):
        erreurs.append(
            ErreurValidation(
                code=CodeValidation.MISSING_PAYMENT_DATE,
                niveau=NiveauValidation.AVERTISSEMENT,
                message=(
                    "Date d'encaissement manquante pour une prestation en TVA "
                    "sur les encaissements: operation reconnue dans aucune periode"
                ),
                operation_id=operation.id,
                champ="payment_date",
            )
        )

    if not TAUX_MIN <= operation.vat_rate <= TAUX_MAX:
        erreurs.append(
            ErreurValidation(
                code=CodeValidation.UNUSUAL_VAT_RATE,
                niveau=NiveauValidation.AVERTISSEMENT,
                message=f"Taux de TVA inhabituel: {operation.vat_rate}%",
                operation_id=operation.id,
                champ="vat_rate",
            )
        )

    if operation.amount_ht_cents < 0:
        erreurs.append(
            ErreurValidation(
                code=CodeValidation.NEGATIVE_AMOUNT,
                niveau=NiveauValidation.AVERTISSEMENT,
                message=f"Montant HT negatif: {operation.amount_ht_cents} centimes",
                operation_id=operation.id,
                champ="amount_ht_cents",
            )
        )

    if operation.est_achat and operation.is_deductible and operation.vat_rate == 0:
        erreurs.append(
            ErreurValidation(
                code=CodeValidation.NO_VAT_ON_DEDUCTIBLE,
                niveau=NiveauValidation.INFO,
                message="Depense deductible sans TVA",
                operation_id=operation.id,
                champ="vat_rate",
            )
        )

    return erreurs


def valider_operations(operations: Iterable[Operation]) -> list[ErreurValidation]:
    """Valide une liste d'operations, anomalies dans l'ordre source."""
    erreurs: list[ErreurValidation] = []
    for operation in operations:
        erreurs.extend(valider_operation(operation))

    for erreur in erreurs:
        if erreur.niveau != NiveauValidation.INFO:
            logger.warning("%s sur %s: %s", erreur.code.value, erreur.operation_id, erreur.message)
    return erreurs
