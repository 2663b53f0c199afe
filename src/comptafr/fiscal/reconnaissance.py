"""Regle unique de reconnaissance fiscale d'une operation dans une periode.

Utilisee telle quelle par les calculs TVA, URSSAF et le tableau de bord:
une operation a un seul resultat de reconnaissance par periode.

Regles, dans l'ordre:
- Achat: date de facture.
- Vente de prestation avec TVA sur les encaissements: date d'encaissement,
  et aucune periode tant qu'elle est absente (jamais de repli sur la
  date de facture).
- Vente de biens, ou TVA sur les debits: date de livraison, a defaut
  date de facture.
"""

from __future__ import annotations

import datetime
from typing import NamedTuple

from comptafr.models.operation import Operation
from comptafr.periode import Periode, en_periode


class Reconnaissance(NamedTuple):
    """Resultat de la regle: inclusion et date retenue."""

    incluse: bool
    date_reference: datetime.date | None


def date_de_reconnaissance(operation: Operation) -> datetime.date | None:
    """Date du fait generateur fiscal, ou None si pas encore reconnue."""
    if operation.est_achat:
        return operation.invoice_date
    if operation.is_service and operation.vat_on_payments:
        return operation.payment_date
    return operation.delivery_date or operation.invoice_date


def est_reconnue_dans(operation: Operation, periode: Periode | str) -> Reconnaissance:
    """Indique si le fait generateur de l'operation tombe dans la periode."""
    periode = en_periode(periode)
    date_ref = date_de_reconnaissance(operation)
    return Reconnaissance(periode.contient(date_ref), date_ref)


def en_attente_encaissement(operation: Operation) -> bool:
    """Vente reconnue a l'encaissement mais sans date d'encaissement."""
    return operation.est_vente and date_de_reconnaissance(operation) is None
