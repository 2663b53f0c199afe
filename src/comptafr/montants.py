"""Arithmetique des montants: centimes entiers, taux en Decimal.

Toute l'arithmetique utilise Decimal avec ROUND_HALF_UP et produit des
centimes entiers. L'arrondi se fait sur la ligne, jamais sur un agregat.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("100")
DIX_MILLE = Decimal("10000")


def arrondir_cents(valeur: Decimal) -> int:
    """Arrondit une valeur exprimee en centimes au centime le plus proche."""
    return int(valeur.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def tva_ligne_cents(montant_ht_cents: int, taux_pourcent: Decimal) -> int:
    """TVA d'une ligne: round(HT * taux / 100), au centime pres."""
    return arrondir_cents(Decimal(montant_ht_cents) * Decimal(taux_pourcent) / CENT)


def appliquer_points_de_base(montant_cents: int, points_de_base: int) -> int:
    """round(montant * bp / 10000), au centime pres."""
    return arrondir_cents(Decimal(montant_cents) * Decimal(points_de_base) / DIX_MILLE)


def formater_euros(montant_cents: int) -> str:
    """Formate des centimes a la francaise: 1 234,56 €."""
    signe = "-" if montant_cents < 0 else ""
    euros, cents = divmod(abs(montant_cents), 100)
    entier = f"{euros:,}".replace(",", " ")
    return f"{signe}{entier},{cents:02d} €"
