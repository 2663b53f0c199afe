"""Modele d'operation (vente ou achat) fourni par le stockage externe.

Les montants sont en centimes entiers; les taux en Decimal. Les float sont
explicitement refuses pour eviter les erreurs d'arrondi.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictInt, computed_field

from comptafr.montants import tva_ligne_cents


def _rejeter_float(v: Any) -> Any:
    """Refuse les float pour forcer l'utilisation de Decimal, int ou str."""
    if isinstance(v, float):
        raise ValueError(
            "Les taux doivent etre Decimal, int ou str, jamais float. "
            "Utilisez Decimal('20') ou '20'."
        )
    return v


TauxDecimal = Annotated[Decimal, BeforeValidator(_rejeter_float)]


class OperationType(str, Enum):
    """Sens de l'operation."""

    SALE = "sale"
    PURCHASE = "purchase"


class StatutOperation(str, Enum):
    """Statut de suivi de l'operation (facturation / paiement)."""

    DRAFT = "draft"
    CONFIRMED = "confirmed"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Operation(BaseModel):
    """Une vente ou un achat.

    `is_service` ne compte que pour les ventes; `is_deductible` que pour
    les achats. La TVA est arrondie sur la ligne:
    amount_ttc_cents == amount_ht_cents + round(amount_ht_cents * vat_rate / 100).
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "op-2025-001",
                    "label": "Client SARL",
                    "operation_type": "sale",
                    "is_service": True,
                    "vat_on_payments": True,
                    "amount_ht_cents": 100000,
                    "vat_rate": "20",
                    "invoice_date": "2025-02-20",
                    "payment_date": "2025-03-05",
                }
            ]
        },
    )

    id: str
    label: str = Field(default="", description="Client ou fournisseur")
    operation_type: OperationType
    is_service: bool = True
    vat_on_payments: bool = True
    amount_ht_cents: StrictInt = Field(description="Montant HT en centimes, jamais float")
    vat_rate: TauxDecimal = Field(default=Decimal("20"), description="Taux de TVA en %")
    invoice_date: datetime.date
    payment_date: datetime.date | None = None
    delivery_date: datetime.date | None = None
    is_deductible: bool = True
    status: StatutOperation = StatutOperation.CONFIRMED

    @property
    def est_vente(self) -> bool:
        return self.operation_type == OperationType.SALE

    @property
    def est_achat(self) -> bool:
        return self.operation_type == OperationType.PURCHASE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount_vat_cents(self) -> int:
        """TVA de la ligne, arrondie au centime."""
        return tva_ligne_cents(self.amount_ht_cents, self.vat_rate)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount_ttc_cents(self) -> int:
        """Montant TTC = HT + TVA de la ligne."""
        return self.amount_ht_cents + self.amount_vat_cents
