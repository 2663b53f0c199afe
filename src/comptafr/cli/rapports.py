"""Sous-commandes de pilotage (tableau, alertes, provisions, projection)."""

from __future__ import annotations

import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from comptafr.declaration import determiner_periode_par_defaut
from comptafr.echeances import (
    calculer_echeances,
    formater_alertes_cli,
    generer_alertes,
    prochaines_echeances,
)
from comptafr.fiscal import (
    CalculTva,
    CalculUrssaf,
    calculer_tva,
    calculer_urssaf,
    valider_operations,
)
from comptafr.models.operation import Operation
from comptafr.montants import formater_euros
from comptafr.parametres import Parametres
from comptafr.periode import Periode
from comptafr.tableau_de_bord import agreger, agregats_historiques, calculer_donnees_periode
from comptafr.tresorerie import optimiser_provisions, projeter

console = Console()


def _style_montant(cents: int) -> str:
    style = "green" if cents >= 0 else "red"
    return f"[{style}]{formater_euros(cents)}[/{style}]"


def _periodes_suivies(
    periodes: Optional[list[str]], aujourd_hui: Optional[datetime.date]
) -> list[Periode]:
    from comptafr.cli.app import lire_periode

    if periodes:
        return [lire_periode(p) for p in periodes]
    return [determiner_periode_par_defaut([], aujourd_hui).periode]


def _calculs_fiscaux(
    operations: list[Operation], periodes: list[Periode], parametres: Parametres
) -> tuple[list[CalculTva], list[CalculUrssaf]]:
    """TVA et URSSAF de chaque periode, operations validees une seule fois."""
    erreurs = valider_operations(operations)
    calculs_tva = [calculer_tva(operations, p, parametres, erreurs=erreurs) for p in periodes]
    calculs_urssaf = [
        calculer_urssaf(
            operations,
            p,
            parametres.taux_urssaf,
            parametres.jour_paiement_urssaf,
            erreurs=erreurs,
        )
        for p in periodes
    ]
    return calculs_tva, calculs_urssaf


def tableau(
    debut: str = typer.Argument(..., help="Premiere periode (YYYY-MM)"),
    mois: int = typer.Option(12, "--mois", "-m", min=1, help="Nombre de periodes"),
    cloturees: Optional[list[str]] = typer.Option(
        None,
        "--cloturee",
        "-c",
        help="Periode cloturee a inclure dans les totaux (YYYY-MM), repetable",
    ),
) -> None:
    """Afficher le tableau de bord sur plusieurs periodes."""
    from comptafr.cli.app import charger_operations_cli, charger_parametres_cli, lire_periode

    periodes = Periode.plage(lire_periode(debut), mois)
    closes = [lire_periode(c) for c in cloturees or []]
    parametres = charger_parametres_cli()
    operations = charger_operations_cli(parametres)

    erreurs = valider_operations(operations)
    resultats = {
        p.cle: calculer_donnees_periode(operations, p, parametres, erreurs=erreurs)
        for p in periodes
    }
    bord = agreger(periodes, resultats, closes)

    table = Table(title="Tableau de bord", show_header=True)
    table.add_column("Periode", style="cyan")
    table.add_column("Revenu HT", justify="right")
    table.add_column("Depenses", justify="right")
    table.add_column("TVA due", justify="right")
    table.add_column("URSSAF due", justify="right")
    table.add_column("Disponible", justify="right")
    for donnees in bord.periodes:
        table.add_row(
            donnees.periode,
            formater_euros(donnees.revenu_cents),
            formater_euros(donnees.depenses_cents),
            formater_euros(donnees.tva_due_cents),
            formater_euros(donnees.urssaf_due_cents),
            _style_montant(donnees.disponible_cents),
        )
    console.print(table)

    sommaire = bord.sommaire_annuel
    if not sommaire.periodes_cloturees:
        console.print("[yellow]Aucune periode cloturee: pas de totaux annuels.[/yellow]")
        return
    console.print(f"Periodes cloturees : {len(sommaire.periodes_cloturees)}")
    console.print(f"Revenu total : {formater_euros(sommaire.total_revenu_cents)}")
    console.print(f"Moyenne mensuelle : {formater_euros(sommaire.revenu_moyen_mensuel_cents)}")
    console.print(f"Croissance : {sommaire.croissance} %")


def alertes(
    periodes: Optional[list[str]] = typer.Option(
        None,
        "--periode",
        "-P",
        help="Periode suivie (YYYY-MM), repetable (defaut: mois precedent)",
    ),
    date: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date de reference (YYYY-MM-DD, defaut: aujourd'hui)"
    ),
    disponible: Optional[int] = typer.Option(
        None, "--disponible", help="Tresorerie disponible en centimes"
    ),
    resolues: Optional[list[str]] = typer.Option(
        None, "--resolue", "-r", help="Identifiant d'echeance deja traitee, repetable"
    ),
) -> None:
    """Afficher les alertes d'echeances, de factures impayees et de tresorerie."""
    from comptafr.cli.app import charger_operations_cli, charger_parametres_cli
    from comptafr.cli.declarations import lire_date

    aujourd_hui = lire_date(date)
    suivies = _periodes_suivies(periodes, aujourd_hui)
    parametres = charger_parametres_cli()
    operations = charger_operations_cli(parametres)
    calculs_tva, calculs_urssaf = _calculs_fiscaux(operations, suivies, parametres)

    liste = generer_alertes(
        calculs_tva,
        calculs_urssaf,
        operations,
        parametres,
        aujourd_hui=aujourd_hui,
        disponible_cents=disponible,
        echeances_resolues=resolues or (),
    )
    texte = formater_alertes_cli(liste)
    if texte is None:
        console.print("[green]Aucune alerte.[/green]")
        return
    console.print(texte)


def provisions(
    disponible: int = typer.Option(
        ..., "--disponible", help="Tresorerie disponible en centimes"
    ),
    periodes: Optional[list[str]] = typer.Option(
        None,
        "--periode",
        "-P",
        help="Periode suivie (YYYY-MM), repetable (defaut: mois precedent)",
    ),
    date: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date de reference (YYYY-MM-DD, defaut: aujourd'hui)"
    ),
    horizon: int = typer.Option(
        30, "--horizon", "-H", min=0, help="Jours de paiements a provisionner"
    ),
    payees: Optional[list[str]] = typer.Option(
        None, "--payee", "-r", help="Identifiant d'echeance deja reglee, repetable"
    ),
) -> None:
    """Calculer les provisions TVA/URSSAF et le montant distribuable."""
    from comptafr.cli.app import charger_operations_cli, charger_parametres_cli
    from comptafr.cli.declarations import lire_date

    aujourd_hui = lire_date(date) or datetime.date.today()
    suivies = _periodes_suivies(periodes, aujourd_hui)
    parametres = charger_parametres_cli()
    operations = charger_operations_cli(parametres)
    echeances = calculer_echeances(*_calculs_fiscaux(operations, suivies, parametres))

    resultat = optimiser_provisions(
        disponible,
        echeances,
        parametres.reserve_tresorerie_cents,
        horizon,
        aujourd_hui=aujourd_hui,
        echeances_payees=payees or (),
    )

    if resultat.provisions:
        table = Table(title=f"Provisions au {aujourd_hui.isoformat()}", show_header=True)
        table.add_column("Echeance", style="cyan")
        table.add_column("Date limite")
        table.add_column("Montant", justify="right")
        for provision in resultat.provisions:
            table.add_row(
                provision.libelle,
                provision.date_limite.isoformat(),
                formater_euros(provision.montant_cents),
            )
        console.print(table)
    else:
        console.print(f"Aucun paiement a provisionner sous {horizon} jours.")

    console.print(f"Reserve : {formater_euros(resultat.reserve_cents)}")
    console.print(f"Provisions requises : {formater_euros(resultat.provisions_requises_cents)}")
    console.print(f"Distribuable : {_style_montant(resultat.distribuable_cents)}")
    for recommandation in resultat.recommandations:
        console.print(f"[bold]{recommandation}[/bold]")

    prochaines = prochaines_echeances(echeances, aujourd_hui)
    if prochaines:
        console.print("Prochaines echeances :")
        for echeance in prochaines:
            console.print(f"  {echeance.date_limite.isoformat()} {echeance.description}")


def projection(
    debut: str = typer.Argument(..., help="Premiere periode historique (YYYY-MM)"),
    mois: int = typer.Option(6, "--mois", "-m", min=1, help="Nombre de periodes historiques"),
    horizon: int = typer.Option(12, "--horizon", "-H", min=1, help="Mois a projeter"),
    tresorerie: int = typer.Option(
        0, "--tresorerie", "-t", help="Tresorerie initiale en centimes"
    ),
) -> None:
    """Projeter la tresorerie a partir des moyennes historiques."""
    from comptafr.cli.app import charger_operations_cli, charger_parametres_cli, lire_periode

    historiques = Periode.plage(lire_periode(debut), mois)
    parametres = charger_parametres_cli()
    operations = charger_operations_cli(parametres)
    erreurs = valider_operations(operations)
    donnees = [
        calculer_donnees_periode(operations, p, parametres, erreurs=erreurs) for p in historiques
    ]
    resultat = projeter(agregats_historiques(donnees), horizon, tresorerie)

    table = Table(title=f"Projection de tresorerie (confiance: {resultat.confiance.value})")
    table.add_column("Periode", style="cyan")
    table.add_column("Revenu HT", justify="right")
    table.add_column("Disponible", justify="right")
    table.add_column("Tresorerie cumulee", justify="right")
    for ligne in resultat.periodes:
        table.add_row(
            ligne.periode.cle,
            formater_euros(ligne.revenu_cents),
            _style_montant(ligne.disponible_cents),
            _style_montant(ligne.tresorerie_cumulee_cents),
        )
    console.print(table)

    annuel = resultat.annuel
    suffixe = " (estimation)" if annuel.estimation else ""
    console.print(f"Revenu annuel projete : {formater_euros(annuel.total_revenu_cents)}{suffixe}")
    console.print(f"Taux de charges effectif : {annuel.taux_effectif} %")
    for hypothese in resultat.hypotheses:
        console.print(f"[dim]- {hypothese}[/dim]")
