"""Code-to-label tables for Nicoka statuses, stages and opportunity types.

Labels are display-only; weighting works on codes. The tables are read-only
and bundled into a ``StatusMaps`` that is handed to the components needing
labels at construction time.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


def _frozen(table: dict[int, str]) -> Mapping[str, str]:
    return MappingProxyType({str(code): label for code, label in table.items()})


QUOTATION_STATUSES = _frozen(
    {
        1: "Nouveau",
        2: "Ouvert",
        3: "Brouillon",
        4: "Publié",
        5: "Auto validé",
        6: "Facturé",
        9: "Refusé",
        12: "Envoyé au client",
        13: "En attente validation interne",
        14: "A transmettre au client",
        15: "En cours",
        16: "Accepté",
        17: "Expiré",
        18: "Lu",
        90: "Envoyé en signature",
        91: "Signé",
        92: "Signature refusée",
        100: "Terminé",
        101: "Perdu",
        102: "Annulé",
    }
)

ORDER_STATUSES = _frozen(
    {
        1: "Brouillon",
        2: "Envoyé pour validation",
        3: "Annulé",
        4: "Validé",
        5: "Auto validé",
        6: "Facturé",
        7: "Payé",
        8: "Paiement Partiel",
        9: "Refusé",
        10: "Révision",
        11: "Remboursement effectué",
        12: "Envoyé au client",
        13: "En attente validation interne",
        14: "A transmettre au client",
        15: "En cours",
        16: "Accepté",
        17: "Expiré",
        18: "Lu",
        20: "En Att. de paiement",
        21: "Partiellement Facturé",
        89: "Envoyé au PDP",
        90: "Envoyé en signature",
        91: "Signé",
        92: "Signature refusée",
        99: "Relance pour impayé",
        100: "Terminé",
        101: "Perdu",
        102: "Annulé",
    }
)

OPPORTUNITY_STAGES = _frozen(
    {
        1: "Qualification",
        2: "Besoin d'info.",
        3: "Proposition",
        4: "Négociation",
        5: "Gagné",
        99: "Perdu",
        100: "Annulé",
    }
)

OPPORTUNITY_TYPES = _frozen(
    {
        1: "Business Existant",
        2: "Nouveau Business",
        3: "Consulting",
    }
)


@dataclass(frozen=True)
class StatusMaps:
    """Label lookups for every coded field the connector enriches."""

    quotation_statuses: Mapping[str, str] = field(default_factory=lambda: QUOTATION_STATUSES)
    order_statuses: Mapping[str, str] = field(default_factory=lambda: ORDER_STATUSES)
    opportunity_stages: Mapping[str, str] = field(default_factory=lambda: OPPORTUNITY_STAGES)
    opportunity_types: Mapping[str, str] = field(default_factory=lambda: OPPORTUNITY_TYPES)

    def quotation_status_label(self, code: str) -> str:
        return self.quotation_statuses.get(code, f"Statut {code}")

    def order_status_label(self, code: str) -> str:
        return self.order_statuses.get(code, f"Statut {code}")

    def opportunity_stage_label(self, code: str) -> str:
        return self.opportunity_stages.get(code, f"Étape {code}")

    def opportunity_type_label(self, code: str) -> str:
        return self.opportunity_types.get(code, f"Type {code}")

    def as_dict(self) -> dict[str, dict[str, str]]:
        """Plain-dict copy for JSON output."""
        return {
            "quotation_statuses": dict(self.quotation_statuses),
            "order_statuses": dict(self.order_statuses),
            "opportunity_stages": dict(self.opportunity_stages),
            "opportunity_types": dict(self.opportunity_types),
        }


DEFAULT_STATUS_MAPS = StatusMaps()
