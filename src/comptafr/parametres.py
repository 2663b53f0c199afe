"""Parametres de l'application et chargement depuis YAML.

C'est la frontiere de normalisation des taux: le taux URSSAF est converti
en points de base ici, avec une unite explicite. Toute configuration
ambigue leve ErreurConfiguration avant qu'un calcul de periode ne demarre.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from comptafr.erreurs import ErreurConfiguration
from comptafr.models.operation import TauxDecimal
from comptafr.taux import (
    BAREME_2025,
    TauxBp,
    obtenir_bareme,
    taux_urssaf_pour_activite,
)

logger = logging.getLogger(__name__)


class Parametres(BaseModel):
    """Parametres valides consommes par les moteurs de calcul."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    taux_tva_defaut: TauxDecimal = Decimal("20")
    taux_urssaf: TauxBp = BAREME_2025.prestations_bic
    jour_declaration_tva: int = Field(default=12, ge=1, le=28)
    jour_paiement_tva: int = Field(default=20, ge=1, le=28)
    jour_paiement_urssaf: int = Field(default=5, ge=1, le=28)
    reserve_tresorerie_cents: int = Field(default=500000, ge=0)
    jours_alerte_avant_echeance: int = Field(default=7, ge=0)

    @field_validator("taux_urssaf", mode="before")
    @classmethod
    def _normaliser_taux_urssaf(cls, v: Any) -> TauxBp:
        return normaliser_taux(v, champ="taux_urssaf")


def normaliser_taux(v: Any, champ: str = "taux") -> TauxBp:
    """Convertit une entree de configuration en TauxBp.

    Formes acceptees:
        - TauxBp deja normalise;
        - {valeur: "21.20", unite: pourcent | points_de_base | ppm};
        - {activite: prestations_bic, annee: 2025, contributions_annexes: false}.

    Un nombre nu est refuse: son unite ne peut pas etre determinee sans
    heuristique.

    Raises:
        ErreurConfiguration: Si l'unite est absente, inconnue, ou si la valeur
            n'est pas representable.
    """
    if isinstance(v, TauxBp):
        return v
    if isinstance(v, dict):
        if "activite" in v:
            if "valeur" in v or "unite" in v:
                raise ErreurConfiguration(
                    f"{champ}: 'activite' et 'valeur'/'unite' sont mutuellement exclusifs",
                    champ=champ,
                )
            annee = v.get("annee", BAREME_2025.annee)
            if isinstance(annee, bool) or not isinstance(annee, int):
                raise ErreurConfiguration(
                    f"{champ}: 'annee' doit etre un entier, recu {annee!r}", champ=champ
                )
            annexes = v.get("contributions_annexes", False)
            if not isinstance(annexes, bool):
                raise ErreurConfiguration(
                    f"{champ}: 'contributions_annexes' doit etre true ou false, recu {annexes!r}",
                    champ=champ,
                )
            try:
                return taux_urssaf_pour_activite(
                    v["activite"],
                    obtenir_bareme(annee),
                    inclure_contributions_annexes=annexes,
                )
            except ValueError as e:
                raise ErreurConfiguration(f"{champ}: {e}", champ=champ) from e
        if "valeur" not in v or "unite" not in v:
            raise ErreurConfiguration(
                f"{champ}: 'valeur' et 'unite' sont requis (unite: pourcent, "
                "points_de_base ou ppm)",
                champ=champ,
            )
        try:
            return TauxBp.depuis_config(v["valeur"], v["unite"])
        except ErreurConfiguration as e:
            raise ErreurConfiguration(f"{champ}: {e}", champ=champ) from e
    raise ErreurConfiguration(
        f"{champ}: unite ambigue pour {v!r}. Precisez "
        "{valeur: ..., unite: pourcent | points_de_base | ppm}",
        champ=champ,
    )


# ---------------------------------------------------------------------------
# YAML par defaut integre (pour les tests et initialisation)
# ---------------------------------------------------------------------------

_PARAMETRES_DEFAUT_YAML = """
taux_tva_defaut: "20"

taux_urssaf:
  activite: prestations_bic
  annee: 2025
  contributions_annexes: false

jour_declaration_tva: 12
jour_paiement_tva: 20
jour_paiement_urssaf: 5

reserve_tresorerie_cents: 500000
jours_alerte_avant_echeance: 7
"""


# ---------------------------------------------------------------------------
# Chargement
# ---------------------------------------------------------------------------


def parametres_depuis_dict(raw: dict | None) -> Parametres:
    """Valide un dictionnaire brut de parametres.

    Raises:
        ErreurConfiguration: Si un champ est invalide ou un taux ambigu.
    """
    try:
        return Parametres.model_validate(raw or {})
    except ValidationError as e:
        champs = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ErreurConfiguration(f"Parametres invalides ({champs}): {e}") from e


def charger_parametres(
    chemin: str = "config/parametres.yaml",
    *,
    _default_yaml: bool = False,
) -> Parametres:
    """Charge et valide les parametres depuis un fichier YAML.

    Args:
        chemin: Chemin vers le fichier YAML de parametres.
        _default_yaml: Si True, utilise les parametres par defaut integres
                       (utile pour les tests sans fichier sur disque).

    Returns:
        Parametres valides, taux URSSAF normalise en points de base.

    Raises:
        FileNotFoundError: Si le fichier n'existe pas et _default_yaml est False.
        ErreurConfiguration: Si la configuration est incoherente.
    """
    if _default_yaml:
        raw = yaml.safe_load(_PARAMETRES_DEFAUT_YAML)
    else:
        path = Path(chemin)
        if not path.exists():
            raise FileNotFoundError(f"Fichier de parametres introuvable: {chemin}")
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))

    if raw is not None and not isinstance(raw, dict):
        raise ErreurConfiguration(f"Parametres: mapping YAML attendu, recu {type(raw).__name__}")

    parametres = parametres_depuis_dict(raw)
    logger.info(
        "Parametres charges: URSSAF %s bp, reserve %d cents, alerte %d jours",
        parametres.taux_urssaf.points_de_base,
        parametres.reserve_tresorerie_cents,
        parametres.jours_alerte_avant_echeance,
    )
    return parametres
