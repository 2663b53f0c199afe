"""Taux en points de base et bareme URSSAF micro-entrepreneur.

Un seul format interne: points de base entiers (1 % = 100 bp). La
conversion depuis un pourcentage ou des parties par million se fait une
seule fois, a la frontiere des parametres, avec une unite explicite --
jamais deduite de l'ordre de grandeur.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from comptafr.erreurs import ErreurConfiguration

BP_MAX = 10000  # 100 %


class UniteTaux(str, Enum):
    """Unites acceptees pour un taux configure."""

    POURCENT = "pourcent"
    POINTS_DE_BASE = "points_de_base"
    PPM = "ppm"


@dataclass(frozen=True, order=True)
class TauxBp:
    """Taux normalise en points de base, dans [0, 10000]."""

    points_de_base: int

    def __post_init__(self) -> None:
        if isinstance(self.points_de_base, bool) or not isinstance(self.points_de_base, int):
            raise ErreurConfiguration(
                f"Taux en points de base non entier: {self.points_de_base!r}"
            )
        if not 0 <= self.points_de_base <= BP_MAX:
            raise ErreurConfiguration(
                f"Taux hors bornes [0, {BP_MAX}] bp: {self.points_de_base}"
            )

    @classmethod
    def depuis_pourcent(cls, valeur: Decimal | int | str) -> TauxBp:
        """20 -> 2000 bp. Plus de deux decimales -> ErreurConfiguration."""
        return cls(_entier_exact(_en_decimal(valeur) * 100, valeur, UniteTaux.POURCENT))

    @classmethod
    def depuis_ppm(cls, valeur: Decimal | int | str) -> TauxBp:
        """200000 ppm -> 2000 bp. Un reste non nul -> ErreurConfiguration."""
        return cls(_entier_exact(_en_decimal(valeur) / 100, valeur, UniteTaux.PPM))

    @classmethod
    def depuis_config(cls, valeur: Decimal | int | str, unite: UniteTaux | str) -> TauxBp:
        """Convertit une valeur configuree dont l'unite est explicite."""
        try:
            unite = UniteTaux(unite)
        except ValueError:
            raise ErreurConfiguration(
                f"Unite de taux inconnue: {unite!r}. "
                f"Unites acceptees: {[u.value for u in UniteTaux]}"
            ) from None
        if unite == UniteTaux.POURCENT:
            return cls.depuis_pourcent(valeur)
        if unite == UniteTaux.PPM:
            return cls.depuis_ppm(valeur)
        return cls(_entier_exact(_en_decimal(valeur), valeur, unite))

    @property
    def pourcent(self) -> Decimal:
        return Decimal(self.points_de_base) / 100

    def __add__(self, autre: TauxBp) -> TauxBp:
        return TauxBp(self.points_de_base + autre.points_de_base)

    def __str__(self) -> str:
        return f"{self.pourcent:.2f} %"


def _en_decimal(valeur: object) -> Decimal:
    if isinstance(valeur, float):
        raise ErreurConfiguration(
            f"Taux en float refuse: {valeur!r}. Utilisez une chaine, ex: '21.20'."
        )
    if isinstance(valeur, bool):
        raise ErreurConfiguration(f"Taux invalide: {valeur!r}")
    try:
        return Decimal(str(valeur))
    except InvalidOperation:
        raise ErreurConfiguration(f"Taux non numerique: {valeur!r}") from None


def _entier_exact(bp: Decimal, origine: object, unite: UniteTaux) -> int:
    if bp != bp.to_integral_value():
        raise ErreurConfiguration(
            f"Taux {origine!r} ({unite.value}) non representable exactement "
            "en points de base"
        )
    return int(bp)


# ---------------------------------------------------------------------------
# Bareme URSSAF
# ---------------------------------------------------------------------------


class ActiviteUrssaf(str, Enum):
    """Categories d'activite du regime micro-social."""

    PRESTATIONS_BIC = "prestations_bic"
    VENTE_MARCHANDISES_BIC = "vente_marchandises_bic"
    PRESTATIONS_BNC = "prestations_bnc"


@dataclass(frozen=True)
class BaremeUrssaf:
    """Taux de cotisations sociales d'une annee, en points de base."""

    annee: int
    prestations_bic: TauxBp  # 21.20 % en 2025
    vente_marchandises_bic: TauxBp  # 12.30 %
    prestations_bnc: TauxBp  # 24.60 %
    formation_professionnelle: TauxBp  # 0.30 %
    taxe_cma_vente: TauxBp  # 0.22 %
    taxe_cma_prestation: TauxBp  # 0.48 %


BAREME_2025 = BaremeUrssaf(
    annee=2025,
    prestations_bic=TauxBp(2120),
    vente_marchandises_bic=TauxBp(1230),
    prestations_bnc=TauxBp(2460),
    formation_professionnelle=TauxBp(30),
    taxe_cma_vente=TauxBp(22),
    taxe_cma_prestation=TauxBp(48),
)

# Registre multi-annee
BAREMES: dict[int, BaremeUrssaf] = {2025: BAREME_2025}


def obtenir_bareme(annee: int) -> BaremeUrssaf:
    """Retourne le bareme URSSAF d'une annee.

    Raises:
        ValueError: Si le bareme n'est pas disponible pour l'annee demandee.
    """
    if annee not in BAREMES:
        raise ValueError(
            f"Bareme URSSAF non disponible pour l'annee {annee}. "
            f"Annees disponibles: {sorted(BAREMES.keys())}"
        )
    return BAREMES[annee]


def taux_urssaf_pour_activite(
    activite: ActiviteUrssaf | str,
    bareme: BaremeUrssaf = BAREME_2025,
    *,
    inclure_contributions_annexes: bool = False,
) -> TauxBp:
    """Taux global pour une activite.

    Avec `inclure_contributions_annexes`, ajoute la formation
    professionnelle et la taxe CMA de l'activite (aucune pour le BNC).
    """
    activite = ActiviteUrssaf(activite)
    taux = getattr(bareme, activite.value)
    if not inclure_contributions_annexes:
        return taux

    taux = taux + bareme.formation_professionnelle
    if activite == ActiviteUrssaf.VENTE_MARCHANDISES_BIC:
        taux = taux + bareme.taxe_cma_vente
    elif activite == ActiviteUrssaf.PRESTATIONS_BIC:
        taux = taux + bareme.taxe_cma_prestation
    return taux
