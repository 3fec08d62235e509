"""Parsers mapping Nicoka JSON items to normalized records.

Nicoka returns numbers as numbers, numeric strings, empty strings or null
depending on the field and the account. Amounts are coerced to float with
anything unreadable counting as 0; codes are read like an integer prefix and
kept as strings so weight tables keyed by code match them.
"""

import math
import re
from typing import Any, Optional

from funnel_landing.models.records import Customer, Opportunity, Order, Project, Quotation
from funnel_landing.status_maps import StatusMaps

_INT_PREFIX = re.compile(r"^\s*([-+]?\d+)")


def parse_number(value: Any) -> float:
    """Float value of an amount field; missing, blank or non-numeric gives 0.0."""
    if value is None or value == "" or isinstance(value, bool):
        return 0.0
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def parse_optional_number(value: Any) -> Optional[float]:
    """Like parse_number, but an explicit null stays None."""
    if value is None:
        return None
    return parse_number(value)


def parse_int(value: Any) -> Optional[int]:
    """Leading integer of a value, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    m = _INT_PREFIX.match(str(value))
    return int(m.group(1)) if m else None


def parse_code(value: Any) -> str:
    """Status / stage / type code as a string; missing or unreadable is "0"."""
    parsed = parse_int(value)
    return str(parsed) if parsed is not None else "0"


def parse_link(value: Any) -> Optional[int]:
    """Foreign key to another record; 0, blank and null mean no link."""
    parsed = parse_int(value)
    return parsed or None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _text_or_none(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


def customer_from_item(item: dict) -> Customer:
    return Customer(
        customer_id=parse_int(item.get("customerid")) or 0,
        label=_text(item.get("label") or item.get("name1")),
        name1=_text(item.get("name1")),
        name2=_text(item.get("name2")),
        account_number=_text(item.get("account_number")),
    )


def project_from_item(item: dict) -> Project:
    return Project(
        project_id=parse_int(item.get("projectid")) or 0,
        label=_text(item.get("label")),
        customer_id=parse_link(item.get("customerid")),
    )


def quotation_from_item(
    item: dict,
    customers: dict[int, Customer],
    status_maps: StatusMaps,
) -> Quotation:
    """Map a quotation item, resolving customer name and status label."""
    customer_id = parse_link(item.get("customerid"))
    customer = customers.get(customer_id) if customer_id else None
    status = parse_code(item.get("status"))
    return Quotation(
        quotation_id=parse_int(item.get("quotationid")) or 0,
        uid=_text(item.get("uid")),
        label=_text(item.get("label") or item.get("reference")),
        reference=_text(item.get("reference")),
        customer_id=customer_id,
        customer_name=customer.label if customer else "",
        account_number=customer.account_number if customer else "",
        project_id=parse_link(item.get("projectid")),
        opportunity_id=parse_link(item.get("opid")),
        status=status,
        status_label=status_maps.quotation_status_label(status),
        gross_total=parse_number(item.get("gross_total")),
        grand_total=parse_number(item.get("grand_total")),
        date=_text(item.get("date")),
        signature_date=_text_or_none(item.get("signature_date")),
        period_start=_text_or_none(item.get("period_start")),
        period_end=_text_or_none(item.get("period_end")),
        employee_id=parse_link(item.get("employeeid")),
        assign_to_name=_text_or_none(item.get("assign_to_name")),
    )


def order_from_item(
    item: dict,
    customers: dict[int, Customer],
    projects: dict[int, Project],
    status_maps: StatusMaps,
) -> Order:
    """Map an order item, resolving customer, project and status labels."""
    customer_id = parse_link(item.get("customerid"))
    customer = customers.get(customer_id) if customer_id else None
    project_id = parse_link(item.get("projectid"))
    project = projects.get(project_id) if project_id else None
    status = parse_code(item.get("status"))
    return Order(
        order_id=parse_int(item.get("orderid")) or 0,
        uid=_text(item.get("uid")),
        label=_text(item.get("label") or item.get("reference")),
        reference=_text(item.get("reference")),
        customer_id=customer_id,
        customer_name=customer.label if customer else "",
        account_number=customer.account_number if customer else "",
        project_id=project_id,
        project_label=project.label if project else "",
        quotation_id=parse_link(item.get("quotationid")),
        opportunity_id=parse_link(item.get("opid")),
        status=status,
        status_label=status_maps.order_status_label(status),
        gross_total=parse_number(item.get("gross_total")),
        grand_total=parse_number(item.get("grand_total")),
        total_invoiced=parse_number(item.get("total_invoiced")),
        still_to_invoice=parse_number(item.get("still_to_invoice")),
        date=_text(item.get("date")),
        signature_date=_text_or_none(item.get("signature_date")),
        period_start=_text_or_none(item.get("period_start")),
        period_end=_text_or_none(item.get("period_end")),
        assign_to_name=_text_or_none(item.get("assign_to_name")),
    )


def opportunity_from_item(
    item: dict,
    customers: dict[int, Customer],
    status_maps: StatusMaps,
) -> Opportunity:
    """Map an opportunity item, resolving customer name, stage and type labels."""
    customer_id = parse_link(item.get("customerid"))
    customer = customers.get(customer_id) if customer_id else None
    stage = parse_code(item.get("stage"))
    opp_type = parse_code(item.get("type"))
    return Opportunity(
        opportunity_id=parse_int(item.get("opid")) or 0,
        label=_text(item.get("label")),
        type=opp_type,
        type_label=status_maps.opportunity_type_label(opp_type),
        stage=stage,
        stage_label=status_maps.opportunity_stage_label(stage),
        customer_id=customer_id,
        customer_name=customer.label if customer else "",
        amount=parse_number(item.get("amount")),
        probability=parse_optional_number(item.get("probability")),
        quantity=parse_optional_number(item.get("quantity")),
        price=parse_optional_number(item.get("price")),
        cost=parse_optional_number(item.get("cost")),
        margin=parse_optional_number(item.get("margin")),
        close_date=_text_or_none(item.get("close_date")),
        period_start=_text_or_none(item.get("period_start")),
        period_end=_text_or_none(item.get("period_end")),
        assign_to_name=_text_or_none(item.get("assign_to_name")),
    )
