"""Module echeances: calendrier TVA/URSSAF et alertes.

Fournit le calcul des echeances a jours fixes, leur statut, et la
generation des alertes triees (echeances, factures impayees, tresorerie).
"""

from comptafr.echeances.alertes import (
    Alerte,
    Severite,
    TypeAlerte,
    formater_alertes_cli,
    generer_alertes,
    severite_pour_jours,
)
from comptafr.echeances.calendrier import (
    Echeance,
    StatutEcheance,
    TypeEcheance,
    calculer_echeances,
    prochaines_echeances,
    statut_echeance,
)

__all__ = [
    "Alerte",
    "Echeance",
    "Severite",
    "StatutEcheance",
    "TypeAlerte",
    "TypeEcheance",
    "calculer_echeances",
    "formater_alertes_cli",
    "generer_alertes",
    "prochaines_echeances",
    "severite_pour_jours",
    "statut_echeance",
]
