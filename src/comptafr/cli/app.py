"""Application CLI principale ComptaFR."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

import comptafr
from comptafr.erreurs import ErreurConfiguration
from comptafr.models.operation import Operation
from comptafr.parametres import Parametres, charger_parametres
from comptafr.periode import Periode

app = typer.Typer(
    name="cfr",
    help="ComptaFR - TVA, URSSAF et tresorerie pour auto-entrepreneur",
    no_args_is_help=True,
)

console = Console()

PARAMETRES_DEFAUT = "config/parametres.yaml"
OPERATIONS_DEFAUT = "data/operations.yaml"

# Options globales stockees via le callback
_parametres_path: Path = Path(PARAMETRES_DEFAUT)
_operations_path: Path = Path(OPERATIONS_DEFAUT)


def get_parametres_path() -> Path:
    """Retourne le chemin du fichier de parametres."""
    return _parametres_path


def get_operations_path() -> Path:
    """Retourne le chemin du fichier d'operations."""
    return _operations_path


def charger_parametres_cli() -> Parametres:
    """Charge les parametres; le fichier par defaut absent donne les valeurs integrees."""
    chemin = get_parametres_path()
    try:
        if not chemin.exists() and chemin == Path(PARAMETRES_DEFAUT):
            return charger_parametres(_default_yaml=True)
        return charger_parametres(str(chemin))
    except FileNotFoundError:
        console.print(f"[red]Erreur:[/red] Parametres introuvables : {chemin}")
        raise typer.Exit(1)
    except ErreurConfiguration as exc:
        console.print(f"[red]Configuration invalide:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


def charger_operations_cli(parametres: Parametres | None = None) -> list[Operation]:
    """Charge les operations depuis le fichier YAML.

    Le fichier contient une liste d'operations, ou un mapping avec une
    cle `operations`. Une operation sans `vat_rate` recoit le taux par
    defaut des parametres.
    """
    taux_defaut = (parametres or Parametres()).taux_tva_defaut
    chemin = get_operations_path()
    if not chemin.exists():
        console.print(f"[red]Erreur:[/red] Fichier d'operations introuvable : {chemin}")
        raise typer.Exit(1)

    raw = yaml.safe_load(chemin.read_text(encoding="utf-8")) or []
    if isinstance(raw, dict):
        raw = raw.get("operations") or []
    if not isinstance(raw, list):
        console.print("[red]Erreur:[/red] Liste d'operations attendue")
        raise typer.Exit(1)

    operations: list[Operation] = []
    for i, item in enumerate(raw):
        if isinstance(item, dict):
            item = {"vat_rate": taux_defaut, **item}
        try:
            operations.append(Operation.model_validate(item))
        except ValidationError as exc:
            console.print(f"[red]Operation #{i + 1} invalide:[/red] {escape(str(exc))}")
            raise typer.Exit(1)
    return operations


def lire_periode(cle: str) -> Periode:
    """Analyse une cle YYYY-MM saisie en ligne de commande."""
    try:
        return Periode.depuis_cle(cle)
    except ValueError as exc:
        console.print(f"[red]Erreur:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ComptaFR version {comptafr.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    operations: Optional[str] = typer.Option(
        OPERATIONS_DEFAUT,
        "--operations",
        "-o",
        help="Chemin vers le fichier YAML des operations",
    ),
    parametres: Optional[str] = typer.Option(
        PARAMETRES_DEFAUT,
        "--parametres",
        "-p",
        help="Chemin vers le fichier YAML de parametres",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Afficher la version de ComptaFR",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """ComptaFR - Declarations TVA/URSSAF mensuelles et suivi de tresorerie."""
    global _operations_path, _parametres_path
    if operations:
        _operations_path = Path(operations)
    if parametres:
        _parametres_path = Path(parametres)


# Import et enregistrement des sous-commandes
from comptafr.cli.declarations import periode, tva, urssaf  # noqa: E402
from comptafr.cli.rapports import alertes, projection, provisions, tableau  # noqa: E402

app.command(name="tva", help="Calculer la TVA d'une periode")(tva)
app.command(name="urssaf", help="Calculer les cotisations URSSAF d'une periode")(urssaf)
app.command(name="periode", help="Periode a declarer par defaut")(periode)
app.command(name="tableau", help="Tableau de bord multi-periodes")(tableau)
app.command(name="alertes", help="Alertes d'echeances et de tresorerie")(alertes)
app.command(name="provisions", help="Provisions TVA/URSSAF et montant distribuable")(provisions)
app.command(name="projection", help="Projection de tresorerie")(projection)
