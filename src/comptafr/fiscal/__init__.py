"""Moteur fiscal: reconnaissance des operations, TVA et URSSAF."""

from comptafr.fiscal.reconnaissance import Reconnaissance, est_reconnue_dans
from comptafr.fiscal.tva import CalculTva, LigneDetailTva, calculer_tva
from comptafr.fiscal.urssaf import CalculUrssaf, calculer_urssaf
from comptafr.fiscal.validation import valider_operations

__all__ = [
    "CalculTva",
    "CalculUrssaf",
    "LigneDetailTva",
    "Reconnaissance",
    "calculer_tva",
    "calculer_urssaf",
    "est_reconnue_dans",
    "valider_operations",
]
