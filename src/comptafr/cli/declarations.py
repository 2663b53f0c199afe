"""Sous-commandes de declaration (tva, urssaf, periode)."""

from __future__ import annotations

import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from comptafr.declaration import (
    determiner_periode_par_defaut,
    exporter_tva,
    exporter_urssaf,
)
from comptafr.erreurs import ErreurValidation, NiveauValidation
from comptafr.fiscal import calculer_tva, calculer_urssaf
from comptafr.montants import formater_euros

console = Console()


def lire_date(valeur: Optional[str]) -> Optional[datetime.date]:
    """Analyse une date ISO (YYYY-MM-DD), ou None."""
    if valeur is None:
        return None
    try:
        return datetime.date.fromisoformat(valeur)
    except ValueError:
        console.print(f"[red]Erreur:[/red] Date invalide : {valeur} (attendu YYYY-MM-DD)")
        raise typer.Exit(1)


def _afficher_anomalies(erreurs: list[ErreurValidation]) -> None:
    for erreur in erreurs:
        if erreur.niveau == NiveauValidation.INFO:
            continue
        couleur = "red" if erreur.niveau == NiveauValidation.ERREUR else "yellow"
        console.print(f"[{couleur}]{erreur.code.value}[/{couleur}] {erreur.message}")


def tva(
    periode: str = typer.Argument(..., help="Periode a calculer (YYYY-MM)"),
    export: bool = typer.Option(
        False, "--export", "-e", help="Afficher le texte de declaration a copier"
    ),
) -> None:
    """Calculer la TVA collectee, deductible et due d'une periode."""
    from comptafr.cli.app import charger_operations_cli, charger_parametres_cli, lire_periode

    p = lire_periode(periode)
    parametres = charger_parametres_cli()
    calcul = calculer_tva(charger_operations_cli(parametres), p, parametres)

    if export:
        console.print(exporter_tva(calcul), markup=False, highlight=False)
        return

    tableau = Table(title=f"TVA {p.libelle}", show_header=True)
    tableau.add_column("Operation", style="cyan")
    tableau.add_column("Contrepartie")
    tableau.add_column("HT", justify="right")
    tableau.add_column("Taux", justify="right")
    tableau.add_column("TVA", justify="right")
    tableau.add_column("Reference", style="dim")
    tableau.add_column("Incluse")

    for ligne in calcul.detail:
        tableau.add_row(
            ligne.operation_id,
            ligne.libelle_contrepartie,
            formater_euros(ligne.amount_ht_cents),
            f"{ligne.vat_rate} %",
            formater_euros(ligne.vat_cents),
            ligne.date_reference.isoformat() if ligne.date_reference else "-",
            "[green]oui[/green]" if ligne.incluse else "[dim]non[/dim]",
        )
    console.print(tableau)

    console.print(f"TVA collectee : {formater_euros(calcul.collectee_cents)}")
    console.print(f"TVA deductible : {formater_euros(calcul.deductible_cents)}")
    console.print(f"[bold]TVA due : {formater_euros(calcul.due_cents)}[/bold]")
    if calcul.credit_cents:
        console.print(f"[green]Credit de TVA : {formater_euros(calcul.credit_cents)}[/green]")
    console.print(
        f"Declaration avant le {calcul.date_declaration.isoformat()}, "
        f"paiement avant le {calcul.date_paiement.isoformat()}"
    )
    _afficher_anomalies(calcul.erreurs)


def urssaf(
    periode: str = typer.Argument(..., help="Periode a calculer (YYYY-MM)"),
    export: bool = typer.Option(
        False, "--export", "-e", help="Afficher le texte de declaration a copier"
    ),
) -> None:
    """Calculer les cotisations URSSAF d'une periode."""
    from comptafr.cli.app import charger_operations_cli, charger_parametres_cli, lire_periode

    p = lire_periode(periode)
    parametres = charger_parametres_cli()
    calcul = calculer_urssaf(
        charger_operations_cli(parametres),
        p,
        parametres.taux_urssaf,
        parametres.jour_paiement_urssaf,
    )

    if export:
        console.print(exporter_urssaf(calcul), markup=False, highlight=False)
        return

    tableau = Table(title=f"URSSAF {p.libelle}", show_header=True)
    tableau.add_column("Poste", style="cyan")
    tableau.add_column("Valeur", justify="right")
    tableau.add_row("Chiffre d'affaires HT", formater_euros(calcul.chiffre_affaires_ht_cents))
    tableau.add_row("Taux", str(calcul.taux))
    tableau.add_row("Cotisations dues", formater_euros(calcul.due_cents))
    tableau.add_row("Paiement avant le", calcul.date_paiement.isoformat())
    tableau.add_row("Ventes retenues", str(len(calcul.operations_incluses)))
    console.print(tableau)
    _afficher_anomalies(calcul.erreurs)


def periode(
    cloturees: Optional[list[str]] = typer.Option(
        None,
        "--cloturee",
        "-c",
        help="Periode deja cloturee (YYYY-MM), repetable",
    ),
    date: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date de reference (YYYY-MM-DD, defaut: aujourd'hui)"
    ),
) -> None:
    """Afficher la periode a declarer par defaut."""
    from comptafr.cli.app import lire_periode

    closes = [lire_periode(c) for c in cloturees or []]
    choix = determiner_periode_par_defaut(closes, lire_date(date))
    console.print(f"Periode a declarer : [bold]{choix.periode.cle}[/bold] ({choix.libelle})")
