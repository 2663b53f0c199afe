"""Tableau de bord: donnees par periode, sommaire annuel et recapitulatif."""

from comptafr.tableau_de_bord.agregateur import (
    DonneesPeriode,
    SommaireAnnuel,
    TableauDeBord,
    agreger,
    agregats_historiques,
    calculer_donnees_periode,
    taux_de_croissance,
)
from comptafr.tableau_de_bord.recapitulatif import (
    RecapitulatifMois,
    calculer_recapitulatif_mois,
)

__all__ = [
    "DonneesPeriode",
    "RecapitulatifMois",
    "SommaireAnnuel",
    "TableauDeBord",
    "agreger",
    "agregats_historiques",
    "calculer_donnees_periode",
    "calculer_recapitulatif_mois",
    "taux_de_croissance",
]
