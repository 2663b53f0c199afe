"""Periode fiscale: un mois civil identifie par la cle "YYYY-MM".

Toute l'arithmetique (mois suivant, precedent, decalage) se fait en entiers
modulo 12 -- jamais par decoupage de chaines.
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass

_CLE_RE = re.compile(r"^(\d{4})-(\d{2})$")

MOIS_FR = (
    "Janvier",
    "Fevrier",
    "Mars",
    "Avril",
    "Mai",
    "Juin",
    "Juillet",
    "Aout",
    "Septembre",
    "Octobre",
    "Novembre",
    "Decembre",
)


@dataclass(frozen=True, order=True)
class Periode:
    """Mois civil (annee, mois) avec mois dans [1, 12]."""

    annee: int
    mois: int

    def __post_init__(self) -> None:
        if isinstance(self.annee, bool) or not isinstance(self.annee, int):
            raise ValueError(f"Annee invalide: {self.annee!r}")
        if isinstance(self.mois, bool) or not isinstance(self.mois, int):
            raise ValueError(f"Mois invalide: {self.mois!r}")
        if not 1 <= self.mois <= 12:
            raise ValueError(f"Mois hors bornes [1, 12]: {self.mois}")
        if not 1 <= self.annee <= 9999:
            raise ValueError(f"Annee hors bornes [1, 9999]: {self.annee}")

    # -----------------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------------

    @classmethod
    def depuis_cle(cls, cle: str) -> Periode:
        """Analyse une cle canonique "YYYY-MM".

        Raises:
            ValueError: Si la cle ne respecte pas le format ou si le mois
                est hors bornes.
        """
        m = _CLE_RE.match(cle.strip()) if isinstance(cle, str) else None
        if m is None:
            raise ValueError(f"Cle de periode invalide: {cle!r} (attendu YYYY-MM)")
        return cls(int(m.group(1)), int(m.group(2)))

    @classmethod
    def depuis_date(cls, d: datetime.date) -> Periode:
        return cls(d.year, d.month)

    @classmethod
    def plage(cls, debut: Periode, nombre: int) -> list[Periode]:
        """Retourne `nombre` periodes consecutives a partir de `debut`."""
        return [debut.decaler(i) for i in range(nombre)]

    # -----------------------------------------------------------------------
    # Arithmetique
    # -----------------------------------------------------------------------

    def decaler(self, n: int) -> Periode:
        """Decale de `n` mois (negatif pour reculer), annee incluse."""
        index = self.annee * 12 + (self.mois - 1) + n
        annee, mois0 = divmod(index, 12)
        return Periode(annee, mois0 + 1)

    def suivante(self) -> Periode:
        return self.decaler(1)

    def precedente(self) -> Periode:
        return self.decaler(-1)

    # -----------------------------------------------------------------------
    # Dates
    # -----------------------------------------------------------------------

    @property
    def cle(self) -> str:
        return f"{self.annee:04d}-{self.mois:02d}"

    @property
    def libelle(self) -> str:
        """Libelle francais, ex: "Mars 2025"."""
        return f"{MOIS_FR[self.mois - 1]} {self.annee}"

    def jour(self, numero: int) -> datetime.date:
        """Date au jour `numero` de ce mois (regle de jour fixe, sans report)."""
        return datetime.date(self.annee, self.mois, numero)

    def contient(self, d: datetime.date | None) -> bool:
        if d is None:
            return False
        return d.year == self.annee and d.month == self.mois

    def __str__(self) -> str:
        return self.cle


def en_periode(valeur: Periode | str) -> Periode:
    """Normalise une Periode ou une cle "YYYY-MM" en Periode."""
    if isinstance(valeur, Periode):
        return valeur
    return Periode.depuis_cle(valeur)
