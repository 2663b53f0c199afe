"""ComptaFR - TVA, URSSAF et tresorerie pour auto-entrepreneur."""

__version__ = "0.1.0"
