"""Plan-related Pydantic schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Frequency = Literal["daily", "weekly", "biweekly", "monthly"]


class ScheduleStepSchema(BaseModel):
    """One installment step, as a share of the price."""

    step_number: int = Field(..., description="1-based position in the schedule", examples=[1])
    percent_of_total: float = Field(
        ...,
        description="Share of the price due at this step",
        examples=[23.33],
    )
    due_offset_days: int = Field(
        ...,
        description="Days after purchase the step falls due",
        examples=[30],
    )


class PlanPreviewRequestSchema(BaseModel):
    """Schema for POST /v1/plans/preview request body."""

    initial_deposit_percent: float = Field(..., examples=[30])
    frequency: Frequency = Field(..., examples=["monthly"])
    duration_periods: int = Field(..., examples=[3])
    total_cents: Optional[int] = Field(
        None,
        description="Optional price, to preview cent amounts and due dates",
        examples=[100000],
    )


class ScheduledAmountSchema(BaseModel):
    step_number: int
    due_date: str = Field(..., description="Due date (YYYY-MM-DD)")
    amount_cents: int


class PlanPreviewResponseSchema(BaseModel):
    """Schema for POST /v1/plans/preview response."""

    initial_deposit_percent: float
    frequency: str
    duration_periods: int
    schedule: list[ScheduleStepSchema]
    total_percent: float
    deposit_cents: Optional[int] = None
    installments: list[ScheduledAmountSchema] = Field(default_factory=list)


class PlanConfigRequestSchema(BaseModel):
    """Schema for PUT /v1/products/{product_id}/plan request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "seller_id": "seller_1",
                    "initial_deposit_percent": 30,
                    "frequency": "monthly",
                    "duration_periods": 3,
                    "min_payment_cents": 0,
                    "grace_period_days": 3,
                    "allow_partial_payments": True,
                    "allow_early_completion": True,
                }
            ]
        }
    )

    seller_id: str = Field(..., min_length=1, max_length=255)
    initial_deposit_percent: float = Field(30.0, description="Deposit share, 10-90")
    frequency: Frequency = "monthly"
    duration_periods: int = Field(3, description="Number of installments after the deposit")
    min_payment_cents: int = Field(0, description="Smallest custom payment accepted")
    grace_period_days: int = Field(3, description="Days past due before penalties, 0-30")
    allow_partial_payments: bool = True
    allow_early_completion: bool = True
    schedule: Optional[list[ScheduleStepSchema]] = Field(
        None,
        description="Edited schedule; generated from the other fields when omitted",
    )

    @field_validator("seller_id")
    @classmethod
    def validate_seller_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("seller_id cannot be empty or whitespace")
        return v.strip()


class PlanResponseSchema(BaseModel):
    """Schema for a stored plan version."""

    plan_id: str
    product_id: str
    seller_id: str
    version: int
    initial_deposit_percent: float
    frequency: str
    duration_periods: int
    min_payment_cents: int
    grace_period_days: int
    allow_partial_payments: bool
    allow_early_completion: bool
    schedule: list[ScheduleStepSchema]
    created_at: str
