"""Generation des alertes: echeances proches, factures impayees, tresorerie.

Fonction pure: memes entrees (dont `aujourd_hui`) -> memes alertes, dans le
meme ordre. L'identifiant de chaque alerte est derive de la condition qu'elle
represente, ce qui rend l'evaluation repetee idempotente.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable, Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict

from comptafr.echeances.calendrier import (
    Echeance,
    TypeEcheance,
    echeance_urssaf,
    echeances_tva,
)
from comptafr.fiscal.tva import CalculTva
from comptafr.fiscal.urssaf import CalculUrssaf
from comptafr.models.operation import Operation, StatutOperation
from comptafr.montants import formater_euros
from comptafr.parametres import Parametres


# ---------------------------------------------------------------------------
# Types & modeles
# ---------------------------------------------------------------------------


class TypeAlerte(str, Enum):
    """Nature de l'alerte."""

    ECHEANCE = "deadline"
    TRESORERIE = "cash_flow"


class Severite(str, Enum):
    """Niveau de severite, du plus grave au plus faible.

    Correspondance avec le vocabulaire d'affichage:
    critical = error, high = warning, medium = info, low = success.
    """

    CRITIQUE = "critical"
    HAUTE = "high"
    MOYENNE = "medium"
    BASSE = "low"

    @property
    def rang(self) -> int:
        return _RANGS[self]


_RANGS = {
    Severite.CRITIQUE: 4,
    Severite.HAUTE: 3,
    Severite.MOYENNE: 2,
    Severite.BASSE: 1,
}

# Echelle de severite selon les jours restants avant l'echeance
SEUIL_CRITIQUE_JOURS = 3
SEUIL_HAUTE_JOURS = 5


class Alerte(BaseModel):
    """Alerte affichable."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: TypeAlerte
    severite: Severite
    titre: str
    message: str
    date_echeance: datetime.date | None = None
    montant_cents: int | None = None
    action_requise: bool = False
    periode: str | None = None


# ---------------------------------------------------------------------------
# Utilitaires
# ---------------------------------------------------------------------------


def severite_pour_jours(jours_restants: int) -> Severite:
    """Echelle fixe: <= 3 jours critique, <= 5 haute, sinon moyenne."""
    if jours_restants <= SEUIL_CRITIQUE_JOURS:
        return Severite.CRITIQUE
    if jours_restants <= SEUIL_HAUTE_JOURS:
        return Severite.HAUTE
    return Severite.MOYENNE


_TITRES = {
    TypeEcheance.TVA_DECLARATION: "Declaration TVA a venir",
    TypeEcheance.TVA_PAIEMENT: "Paiement TVA a venir",
    TypeEcheance.URSSAF_PAIEMENT: "Paiement URSSAF a venir",
}


def _alerte_echeance(
    echeance: Echeance,
    aujourd_hui: datetime.date,
    fenetre_jours: int,
    resolues: frozenset[str],
) -> Alerte | None:
    if echeance.id in resolues:
        return None
    jours = (echeance.date_limite - aujourd_hui).days
    if jours < 0 or jours > fenetre_jours:
        return None
    # Une declaration est due meme a zero; un paiement seulement s'il y a un montant
    if echeance.type != TypeEcheance.TVA_DECLARATION and echeance.montant_cents <= 0:
        return None

    severite = severite_pour_jours(jours)
    if echeance.type == TypeEcheance.TVA_DECLARATION:
        message = (
            f"Declaration TVA pour {echeance.periode} a effectuer avant le "
            f"{echeance.date_limite.isoformat()} (dans {jours} jours)"
        )
    else:
        message = (
            f"{echeance.description}: {formater_euros(echeance.montant_cents)} "
            f"a payer avant le {echeance.date_limite.isoformat()} (dans {jours} jours)"
        )
    return Alerte(
        id=echeance.id,
        type=TypeAlerte.ECHEANCE,
        severite=severite,
        titre=_TITRES[echeance.type],
        message=message,
        date_echeance=echeance.date_limite,
        montant_cents=echeance.montant_cents,
        action_requise=severite == Severite.CRITIQUE,
        periode=echeance.periode,
    )


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def generer_alertes(
    calculs_tva: Sequence[CalculTva],
    calculs_urssaf: Sequence[CalculUrssaf],
    operations: Iterable[Operation],
    parametres: Parametres | None = None,
    *,
    aujourd_hui: datetime.date | None = None,
    disponible_cents: int | None = None,
    echeances_resolues: Iterable[str] = (),
) -> list[Alerte]:
    """Genere les alertes triees et dedoublonnees.

    Args:
        calculs_tva: Calculs TVA des periodes suivies.
        calculs_urssaf: Calculs URSSAF des periodes suivies.
        operations: Operations (pour les factures en retard).
        parametres: Fenetre d'alerte (`jours_alerte_avant_echeance`).
        aujourd_hui: Date de reference (defaut: aujourd'hui).
        disponible_cents: Tresorerie disponible; None desactive les alertes
            de tresorerie.
        echeances_resolues: Identifiants d'echeances deja traitees
            (ex: 'vat-declaration-2025-03').

    Returns:
        Alertes: action requise d'abord, puis severite decroissante, puis
        ordre d'entree.
    """
    parametres = parametres or Parametres()
    if aujourd_hui is None:
        aujourd_hui = datetime.date.today()
    resolues = frozenset(echeances_resolues)
    fenetre = parametres.jours_alerte_avant_echeance

    alertes: list[Alerte] = []

    # 1. Echeances TVA et URSSAF
    echeances: list[Echeance] = []
    for calcul in calculs_tva:
        echeances.extend(echeances_tva(calcul))
    for calcul in calculs_urssaf:
        echeances.append(echeance_urssaf(calcul))
    for echeance in echeances:
        alerte = _alerte_echeance(echeance, aujourd_hui, fenetre, resolues)
        if alerte is not None:
            alertes.append(alerte)

    # 2. Factures de vente en retard de paiement
    for op in operations:
        if op.est_vente and op.status == StatutOperation.OVERDUE:
            contrepartie = op.label or op.id
            alertes.append(
                Alerte(
                    id=f"overdue-invoice-{op.id}",
                    type=TypeAlerte.TRESORERIE,
                    severite=Severite.HAUTE,
                    titre="Facture impayee",
                    message=(
                        f"Facture {contrepartie} de {formater_euros(op.amount_ttc_cents)} "
                        "en retard: relancer le client"
                    ),
                    montant_cents=op.amount_ttc_cents,
                    periode=f"{op.invoice_date:%Y-%m}",
                )
            )

    # 3. Tresorerie: negative, ou insuffisante pour les provisions
    if disponible_cents is not None:
        provisions = sum(c.due_cents for c in calculs_tva) + sum(
            c.due_cents for c in calculs_urssaf
        )
        if disponible_cents < 0:
            alertes.append(
                Alerte(
                    id="negative-cash",
                    type=TypeAlerte.TRESORERIE,
                    severite=Severite.CRITIQUE,
                    titre="Tresorerie negative",
                    message=(
                        f"Disponible de {formater_euros(disponible_cents)} apres "
                        "provisions: revoir les depenses ou relancer les encaissements"
                    ),
                    montant_cents=disponible_cents,
                    action_requise=True,
                )
            )
        elif disponible_cents < provisions:
            alertes.append(
                Alerte(
                    id="insufficient-provisions",
                    type=TypeAlerte.TRESORERIE,
                    severite=Severite.HAUTE,
                    titre="Provisions insuffisantes",
                    message=(
                        f"Disponible de {formater_euros(disponible_cents)} inferieur aux "
                        f"provisions TVA + URSSAF de {formater_euros(provisions)}"
                    ),
                    montant_cents=provisions - disponible_cents,
                )
            )

    return trier_alertes(alertes)


def trier_alertes(alertes: Iterable[Alerte]) -> list[Alerte]:
    """Dedoublonne par id (premiere occurrence) puis trie de facon stable."""
    vues: set[str] = set()
    uniques: list[Alerte] = []
    for alerte in alertes:
        if alerte.id in vues:
            continue
        vues.add(alerte.id)
        uniques.append(alerte)
    return sorted(uniques, key=lambda a: (not a.action_requise, -a.severite.rang))


# ---------------------------------------------------------------------------
# Formatage CLI
# ---------------------------------------------------------------------------


def formater_alertes_cli(alertes: Sequence[Alerte]) -> str | None:
    """Formate les alertes avec le markup Rich, ou None s'il n'y en a aucune."""
    if not alertes:
        return None

    couleur_map = {
        Severite.CRITIQUE: "red",
        Severite.HAUTE: "yellow",
        Severite.MOYENNE: "blue",
    }

    lignes: list[str] = []
    for alerte in alertes:
        couleur = couleur_map.get(alerte.severite, "green")
        icone = "!!" if alerte.severite in (Severite.CRITIQUE, Severite.HAUTE) else "--"
        lignes.append(f"[{couleur}]{icone} {alerte.titre}: {alerte.message}[/{couleur}]")
    return "\n".join(lignes)
