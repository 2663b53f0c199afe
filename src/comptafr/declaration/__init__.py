"""Aides au processus de declaration mensuelle."""

from comptafr.declaration.exports import exporter_tva, exporter_urssaf
from comptafr.declaration.periodes import (
    EtapeDeclaration,
    PeriodeDeclaration,
    RaisonChoix,
    StatutAffichage,
    determiner_periode_par_defaut,
    periodes_disponibles,
    statut_affichage_periode,
)

__all__ = [
    "EtapeDeclaration",
    "PeriodeDeclaration",
    "RaisonChoix",
    "StatutAffichage",
    "determiner_periode_par_defaut",
    "exporter_tva",
    "exporter_urssaf",
    "periodes_disponibles",
    "statut_affichage_periode",
]
