"""Normalized CRM records: customers, projects, orders, quotations, opportunities."""

from typing import Optional

from pydantic import BaseModel, Field


class Customer(BaseModel):
    """Customer reference data used to label business records."""

    customer_id: int
    label: str = ""
    name1: str = ""
    name2: str = ""
    account_number: str = ""


class Project(BaseModel):
    """Project reference data used to label orders."""

    project_id: int
    label: str = ""
    customer_id: Optional[int] = None


class Order(BaseModel):
    """Signed order: revenue counted at 100%."""

    order_id: int
    uid: str = ""
    label: str = ""
    reference: str = ""

    customer_id: Optional[int] = None
    customer_name: str = ""
    account_number: str = ""
    project_id: Optional[int] = None
    project_label: str = ""

    quotation_id: Optional[int] = Field(default=None, description="Quotation this order converted")
    opportunity_id: Optional[int] = Field(default=None, description="Opportunity this order closed")

    status: str = "0"
    status_label: str = ""

    gross_total: float = 0.0
    grand_total: float = 0.0
    total_invoiced: float = 0.0
    still_to_invoice: float = 0.0

    date: str = ""
    signature_date: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    assign_to_name: Optional[str] = None


class Quotation(BaseModel):
    """Quotation: revenue weighted by its status."""

    quotation_id: int
    uid: str = ""
    label: str = ""
    reference: str = ""

    customer_id: Optional[int] = None
    customer_name: str = ""
    account_number: str = ""
    project_id: Optional[int] = None

    opportunity_id: Optional[int] = Field(default=None, description="Opportunity this quotation answers")

    status: str = "0"
    status_label: str = ""

    gross_total: float = 0.0
    grand_total: float = 0.0

    date: str = ""
    signature_date: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    employee_id: Optional[int] = None
    assign_to_name: Optional[str] = None


class Opportunity(BaseModel):
    """Sales opportunity: revenue weighted by its stage."""

    opportunity_id: int
    label: str = ""

    type: str = "0"
    type_label: str = ""
    stage: str = "0"
    stage_label: str = ""

    customer_id: Optional[int] = None
    customer_name: str = ""

    amount: float = 0.0
    probability: Optional[float] = None
    quantity: Optional[float] = None
    price: Optional[float] = None
    cost: Optional[float] = None
    margin: Optional[float] = None

    close_date: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    assign_to_name: Optional[str] = None
