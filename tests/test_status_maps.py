"""Tests for status maps."""

import pytest

from funnel_landing.status_maps import DEFAULT_STATUS_MAPS, QUOTATION_STATUSES, StatusMaps


class TestStatusMaps:
    """Tests for label lookups."""

    def test_known_labels(self) -> None:
        assert DEFAULT_STATUS_MAPS.quotation_status_label("12") == "Envoyé au client"
        assert DEFAULT_STATUS_MAPS.order_status_label("7") == "Payé"
        assert DEFAULT_STATUS_MAPS.opportunity_stage_label("5") == "Gagné"
        assert DEFAULT_STATUS_MAPS.opportunity_type_label("2") == "Nouveau Business"

    def test_fallback_labels(self) -> None:
        assert DEFAULT_STATUS_MAPS.quotation_status_label("77") == "Statut 77"
        assert DEFAULT_STATUS_MAPS.order_status_label("77") == "Statut 77"
        assert DEFAULT_STATUS_MAPS.opportunity_stage_label("77") == "Étape 77"
        assert DEFAULT_STATUS_MAPS.opportunity_type_label("77") == "Type 77"

    def test_tables_read_only(self) -> None:
        with pytest.raises(TypeError):
            QUOTATION_STATUSES["1"] = "Autre"

    def test_custom_maps(self) -> None:
        maps = StatusMaps(opportunity_stages={"1": "Lead"})
        assert maps.opportunity_stage_label("1") == "Lead"
        assert maps.quotation_status_label("16") == "Accepté"

    def test_as_dict(self) -> None:
        data = DEFAULT_STATUS_MAPS.as_dict()
        assert set(data) == {"quotation_statuses", "order_statuses", "opportunity_stages", "opportunity_types"}
        assert data["opportunity_stages"]["99"] == "Perdu"

    def test_explicit_tables(self) -> None:
        maps = StatusMaps(
            quotation_statuses={"1": "Brouillon"},
            order_statuses={"1": "Validé"},
            opportunity_stages={"1": "Lead"},
            opportunity_types={"1": "Renouvellement"},
        )
        assert maps.quotation_status_label("1") == "Brouillon"
        assert maps.order_status_label("1") == "Validé"
        assert maps.opportunity_type_label("1") == "Renouvellement"
        assert maps.quotation_status_label("16") == "Statut 16"

    def test_defaults_share_module_tables(self) -> None:
        assert StatusMaps().quotation_statuses is QUOTATION_STATUSES
