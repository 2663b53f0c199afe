"""Textes de declaration TVA et URSSAF prets a copier-coller."""

from __future__ import annotations

import datetime

from comptafr.fiscal.tva import CalculTva
from comptafr.fiscal.urssaf import CalculUrssaf
from comptafr.models.operation import OperationType
from comptafr.montants import formater_euros


def _date_fr(d: datetime.date) -> str:
    return d.strftime("%d/%m/%Y")


def exporter_tva(calcul: CalculTva) -> str:
    """Texte de declaration TVA avec le detail des operations retenues."""
    lignes = [
        f"=== DECLARATION TVA {calcul.periode.cle} ===",
        "",
        "TVA COLLECTEE:",
        f"- Prestations de services: {formater_euros(calcul.collectee_services_cents)}",
        f"- Livraisons de biens: {formater_euros(calcul.collectee_biens_cents)}",
        f"- TOTAL TVA COLLECTEE: {formater_euros(calcul.collectee_cents)}",
        "",
        "TVA DEDUCTIBLE:",
        f"- TOTAL TVA DEDUCTIBLE: {formater_euros(calcul.deductible_cents)}",
        "",
        f"TVA A PAYER: {formater_euros(calcul.due_cents)}",
    ]
    if calcul.credit_cents:
        lignes.append(f"CREDIT DE TVA REPORTABLE: {formater_euros(calcul.credit_cents)}")
    lignes += [
        "",
        "Dates importantes:",
        f"- Declaration avant le: {_date_fr(calcul.date_declaration)}",
        f"- Paiement avant le: {_date_fr(calcul.date_paiement)}",
    ]

    for titre, type_op in (
        ("DETAIL DES FACTURES", OperationType.SALE),
        ("DETAIL DES DEPENSES", OperationType.PURCHASE),
    ):
        lignes += ["", f"=== {titre} ==="]
        for ligne in calcul.detail:
            if not ligne.incluse or ligne.operation_type != type_op:
                continue
            if type_op == OperationType.PURCHASE and not ligne.is_deductible:
                continue
            nature = "Service" if ligne.is_service else "Bien"
            date_ref = ligne.date_reference.isoformat() if ligne.date_reference else ""
            lignes.append(
                f"{ligne.libelle_contrepartie:<30} | "
                f"{formater_euros(ligne.amount_ht_cents)} HT | {ligne.vat_rate}% | "
                f"{formater_euros(ligne.vat_cents)} | {nature} | {date_ref}"
            )

    return "\n".join(lignes)


def exporter_urssaf(calcul: CalculUrssaf) -> str:
    """Texte de declaration URSSAF mensuelle."""
    return "\n".join(
        [
            f"=== DECLARATION URSSAF {calcul.periode.cle} ===",
            "",
            "CHIFFRE D'AFFAIRES:",
            f"- CA encaisse HT: {formater_euros(calcul.chiffre_affaires_ht_cents)}",
            "",
            "COTISATIONS:",
            f"- Taux applicable: {calcul.taux}",
            f"- COTISATIONS A PAYER: {formater_euros(calcul.due_cents)}",
            "",
            f"Paiement avant le: {_date_fr(calcul.date_paiement)}",
        ]
    )
