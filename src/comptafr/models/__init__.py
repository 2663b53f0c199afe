"""Modeles de donnees partages avec le stockage externe."""

from comptafr.models.operation import Operation, OperationType, StatutOperation

__all__ = ["Operation", "OperationType", "StatutOperation"]
