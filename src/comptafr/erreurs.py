"""Hierarchie d'erreurs de ComptaFR.

Deux familles distinctes:
- ErreurConfiguration: fatale, levee au chargement des parametres, avant
  tout calcul de periode.
- ErreurValidation: non fatale, collectee dans une liste retournee a cote
  d'un calcul par ailleurs valide.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ErreurComptaFR(Exception):
    """Erreur de base pour toutes les exceptions de ComptaFR."""


class ErreurConfiguration(ErreurComptaFR):
    """Parametres incoherents (unite de taux ambigue, valeur hors bornes).

    Bloque tout calcul tant qu'elle n'est pas corrigee.
    """

    def __init__(self, message: str, champ: str | None = None) -> None:
        super().__init__(message)
        self.champ = champ


class NiveauValidation(str, Enum):
    """Gravite d'une erreur de validation."""

    ERREUR = "erreur"
    AVERTISSEMENT = "avertissement"
    INFO = "info"


class CodeValidation(str, Enum):
    """Codes des controles de coherence des operations."""

    MISSING_PAYMENT_DATE = "MISSING_PAYMENT_DATE"
    UNUSUAL_VAT_RATE = "UNUSUAL_VAT_RATE"
    NEGATIVE_AMOUNT = "NEGATIVE_AMOUNT"
    NO_VAT_ON_DEDUCTIBLE = "NO_VAT_ON_DEDUCTIBLE"


class ErreurValidation(BaseModel):
    """Anomalie de donnees detectee sur une operation (non bloquante)."""

    model_config = ConfigDict(frozen=True)

    code: CodeValidation
    niveau: NiveauValidation
    message: str
    operation_id: str | None = None
    champ: str | None = None
