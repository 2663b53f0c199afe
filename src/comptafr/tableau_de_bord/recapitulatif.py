"""Recapitulatif de fin de mois (encaissements, depenses, reste apres provisions)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from comptafr.erreurs import ErreurValidation
from comptafr.fiscal.reconnaissance import est_reconnue_dans
from comptafr.fiscal.tva import calculer_tva
from comptafr.fiscal.urssaf import calculer_urssaf
from comptafr.fiscal.validation import valider_operations
from comptafr.models.operation import Operation
from comptafr.parametres import Parametres
from comptafr.periode import Periode, en_periode


@dataclass(frozen=True)
class RecapitulatifMois:
    """Recapitulatif d'un mois, tous montants en centimes."""

    periode: str
    encaissements_ht_cents: int
    encaissements_tva_cents: int
    encaissements_ttc_cents: int
    depenses_ttc_cents: int
    tva_due_cents: int
    urssaf_due_cents: int
    net_mois_cents: int  # encaissements TTC - depenses TTC
    apres_provisions_cents: int  # net - TVA - URSSAF - reserve


def calculer_recapitulatif_mois(
    operations: Sequence[Operation],
    periode: Periode | str,
    parametres: Parametres | None = None,
    *,
    erreurs: Sequence[ErreurValidation] | None = None,
) -> RecapitulatifMois:
    """Recapitule un mois a partir des memes regles de reconnaissance."""
    periode = en_periode(periode)
    parametres = parametres or Parametres()
    if erreurs is None:
        erreurs = valider_operations(operations)

    tva = calculer_tva(operations, periode, parametres, erreurs=erreurs)
    urssaf = calculer_urssaf(
        operations,
        periode,
        parametres.taux_urssaf,
        parametres.jour_paiement_urssaf,
        erreurs=erreurs,
    )

    ht = 0
    tva_encaissee = 0
    depenses_ttc = 0
    for op in operations:
        if not est_reconnue_dans(op, periode).incluse:
            continue
        if op.est_vente:
            ht += op.amount_ht_cents
            tva_encaissee += op.amount_vat_cents
        else:
            depenses_ttc += op.amount_ttc_cents

    ttc = ht + tva_encaissee
    net = ttc - depenses_ttc
    return RecapitulatifMois(
        periode=periode.cle,
        encaissements_ht_cents=ht,
        encaissements_tva_cents=tva_encaissee,
        encaissements_ttc_cents=ttc,
        depenses_ttc_cents=depenses_ttc,
        tva_due_cents=tva.due_cents,
        urssaf_due_cents=urssaf.due_cents,
        net_mois_cents=net,
        apres_provisions_cents=(
            net - tva.due_cents - urssaf.due_cents - parametres.reserve_tresorerie_cents
        ),
    )
