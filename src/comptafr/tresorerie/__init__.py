"""Projection de tresorerie et optimisation des provisions."""

from comptafr.tresorerie.projection import (
    AgregatPeriode,
    AnnuelProjete,
    Confiance,
    ProjectionPeriode,
    ProjectionTresorerie,
    niveau_confiance,
    projeter,
)
from comptafr.tresorerie.provisions import (
    OptimisationProvisions,
    Provision,
    TypeProvision,
    optimiser_provisions,
)

__all__ = [
    "AgregatPeriode",
    "AnnuelProjete",
    "Confiance",
    "OptimisationProvisions",
    "ProjectionPeriode",
    "ProjectionTresorerie",
    "Provision",
    "TypeProvision",
    "niveau_confiance",
    "optimiser_provisions",
    "projeter",
]
