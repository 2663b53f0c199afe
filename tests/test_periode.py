"""Tests pour la periode fiscale (cle YYYY-MM et arithmetique de mois)."""

from __future__ import annotations

import datetime

import pytest

from comptafr.periode import Periode, en_periode


class TestConstruction:
    def test_depuis_cle(self) -> None:
        p = Periode.depuis_cle("2025-03")
        assert p == Periode(2025, 3)
        assert p.cle == "2025-03"
        assert str(p) == "2025-03"

    @pytest.mark.parametrize("cle", ["2025-3", "2025/03", "25-03", "2025-13", "2025-00", "", "abcd-ef"])
    def test_cle_invalide(self, cle: str) -> None:
        with pytest.raises(ValueError):
            Periode.depuis_cle(cle)

    def test_mois_hors_bornes(self) -> None:
        with pytest.raises(ValueError, match="Mois hors bornes"):
            Periode(2025, 13)

    def test_depuis_date(self) -> None:
        assert Periode.depuis_date(datetime.date(2025, 12, 31)) == Periode(2025, 12)

    def test_en_periode_accepte_cle_et_periode(self) -> None:
        p = Periode(2025, 1)
        assert en_periode(p) is p
        assert en_periode("2025-01") == p


class TestArithmetique:
    """Passages d'annee par arithmetique entiere."""

    def test_suivante_decembre(self) -> None:
        assert Periode(2025, 12).suivante() == Periode(2026, 1)

    def test_precedente_janvier(self) -> None:
        assert Periode(2025, 1).precedente() == Periode(2024, 12)

    def test_decaler(self) -> None:
        assert Periode(2025, 3).decaler(22) == Periode(2027, 1)
        assert Periode(2025, 3).decaler(-15) == Periode(2023, 12)

    def test_plage(self) -> None:
        cles = [p.cle for p in Periode.plage(Periode(2025, 11), 4)]
        assert cles == ["2025-11", "2025-12", "2026-01", "2026-02"]

    def test_ordre(self) -> None:
        assert Periode(2024, 12) < Periode(2025, 1) < Periode(2025, 2)


class TestDates:
    def test_contient(self) -> None:
        p = Periode(2025, 3)
        assert p.contient(datetime.date(2025, 3, 31))
        assert not p.contient(datetime.date(2025, 4, 1))
        assert not p.contient(None)

    def test_libelle(self) -> None:
        assert Periode(2025, 3).libelle == "Mars 2025"
        assert Periode(2025, 8).libelle == "Aout 2025"
