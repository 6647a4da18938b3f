"""HTTP implementation of InstallmentGatewayClient."""

import asyncio
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx
import structlog

from src.core.config import settings
from src.core.metrics import record_gateway_failure, track_gateway_latency
from src.domain.entities import (
    FinancialHealth,
    HealthSource,
    HealthStatus,
    InstallmentOrder,
    InstallmentPayment,
    InstallmentPlan,
    OrderStatus,
    PaymentFrequency,
    PaymentMethod,
    PaymentRequestRecord,
    PaymentStatus,
    ScheduleStep,
    Wallet,
)
from src.domain.exceptions import (
    ConcurrentModificationException,
    DepositTooLowError,
    DomainException,
    IdempotencyKeyReusedException,
    InsufficientFundsException,
    InvalidAmountException,
    InvalidPlanParameterError,
    NegativeMinPaymentError,
    NetworkError,
    NetworkTimeoutError,
    NoPendingPaymentsException,
    OrderAlreadyCompletedException,
    OrderNotFoundException,
    PaymentInProgressException,
    PaymentMethodNotAllowedException,
    PlanNotFoundException,
    PlanValidationError,
    RescheduleLimitExceededException,
    RescheduleNotAllowedException,
    SchedulePercentMismatchError,
)
from src.domain.interfaces import InstallmentGatewayClient

logger = structlog.get_logger(__name__)


_ERROR_TYPES = {
    "ORDER_NOT_FOUND": OrderNotFoundException,
    "PLAN_NOT_FOUND": PlanNotFoundException,
    "INSUFFICIENT_FUNDS": InsufficientFundsException,
    "ORDER_COMPLETED": OrderAlreadyCompletedException,
    "NO_PENDING_PAYMENTS": NoPendingPaymentsException,
    "INVALID_AMOUNT": InvalidAmountException,
    "PAYMENT_METHOD_NOT_ALLOWED": PaymentMethodNotAllowedException,
    "PAYMENT_IN_PROGRESS": PaymentInProgressException,
    "IDEMPOTENCY_KEY_REUSED": IdempotencyKeyReusedException,
    "CONCURRENT_MODIFICATION": ConcurrentModificationException,
    "RESCHEDULE_LIMIT_EXCEEDED": RescheduleLimitExceededException,
    "RESCHEDULE_NOT_ALLOWED": RescheduleNotAllowedException,
    "VALIDATION_ERROR": PlanValidationError,
    "DEPOSIT_TOO_LOW": DepositTooLowError,
    "SCHEDULE_PERCENT_MISMATCH": SchedulePercentMismatchError,
    "NEGATIVE_MIN_PAYMENT": NegativeMinPaymentError,
    "INVALID_PLAN_PARAMETER": InvalidPlanParameterError,
}


def domain_error(code: str, message: str) -> DomainException:
    """Rebuild the domain exception named by an API error code."""
    exc_type = _ERROR_TYPES.get(code)
    if exc_type is None:
        return DomainException(message=message, code=code)
    return exc_type(message=message)


def _parse_date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return parsed.replace(tzinfo=None)


class HttpInstallmentGatewayClient(InstallmentGatewayClient):
    """
    HTTP client for the Lipa Gateway API.

    Reads retry with exponential backoff on transport failures. Writes are
    sent exactly once: a failed write surfaces as NetworkError and the
    caller decides what to do after re-reading state.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or settings.gateway_api_url).rstrip("/")
        self._timeout = timeout or settings.gateway_api_timeout
        self._max_retries = max_retries or settings.gateway_read_retries
        self._transport = transport

    async def apply_installment_payment(
        self,
        buyer_id: str,
        order_id: UUID,
        method: PaymentMethod,
        amount_cents: Optional[int],
        idempotency_key: str,
    ) -> PaymentRequestRecord:
        payload: Dict[str, Any] = {
            "buyer_id": buyer_id,
            "method": PaymentMethod(method).value,
        }
        if amount_cents is not None:
            payload["amount_cents"] = amount_cents

        data = await self._write(
            "POST",
            f"/v1/orders/{order_id}/payments",
            "apply_payment",
            json=payload,
            headers={"Idempotency-Key": idempotency_key},
        )

        return PaymentRequestRecord(
            idempotency_key=data["idempotency_key"],
            order_id=UUID(data["order_id"]),
            buyer_id=buyer_id,
            method=PaymentMethod(data["method"]),
            requested_amount_cents=amount_cents,
            applied_amount_cents=data["applied_amount_cents"],
            amount_paid_after_cents=data["amount_paid_cents"],
            status_after=OrderStatus(data["status"]),
        )

    async def reschedule_installment(
        self,
        buyer_id: str,
        order_id: UUID,
        new_due_date: date,
    ) -> InstallmentOrder:
        data = await self._write(
            "POST",
            f"/v1/orders/{order_id}/reschedule",
            "reschedule",
            json={"buyer_id": buyer_id, "new_due_date": new_due_date.isoformat()},
        )
        return self._parse_order(data)

    async def configure_plan(self, plan: InstallmentPlan) -> InstallmentPlan:
        payload = {
            "seller_id": plan.seller_id,
            "initial_deposit_percent": plan.initial_deposit_percent,
            "frequency": plan.frequency.value,
            "duration_periods": plan.duration_periods,
            "min_payment_cents": plan.min_payment_cents,
            "grace_period_days": plan.grace_period_days,
            "allow_partial_payments": plan.allow_partial_payments,
            "allow_early_completion": plan.allow_early_completion,
            "schedule": [step.to_dict() for step in plan.schedule],
        }
        data = await self._write(
            "PUT",
            f"/v1/products/{plan.product_id}/plan",
            "configure_plan",
            json=payload,
        )
        return self._parse_plan(data)

    async def get_financial_health(self, buyer_id: str) -> FinancialHealth:
        data = await self._read(
            f"/v1/buyers/{buyer_id}/financial-health",
            "financial_health",
        )
        return FinancialHealth(
            buyer_id=data["buyer_id"],
            score=data["score"],
            status=HealthStatus(data["status"]),
            late_orders=data.get("late_orders", 0),
            source=HealthSource.REMOTE,
        )

    async def get_wallet_balance(self, buyer_id: str) -> Wallet:
        data = await self._read(f"/v1/wallets/{buyer_id}", "wallet")
        return Wallet(buyer_id=data["buyer_id"], balance_cents=data["balance_cents"])

    async def list_orders(self, buyer_id: str) -> List[InstallmentOrder]:
        data = await self._read(
            "/v1/orders",
            "list_orders",
            params={"buyer_id": buyer_id},
        )
        return [self._parse_order(item) for item in data.get("orders", [])]

    async def list_payments(
        self,
        buyer_id: str,
        order_id: UUID,
    ) -> List[InstallmentPayment]:
        data = await self._read(
            f"/v1/orders/{order_id}/payments",
            "list_payments",
            params={"buyer_id": buyer_id},
        )
        return [self._parse_payment(item, order_id) for item in data.get("payments", [])]

    async def _read(self, path: str, operation: str, **kwargs) -> Dict[str, Any]:
        """
        GET with retry and exponential backoff.

        Only transport failures are retried; an error response is final.
        """
        last_exception: NetworkError | None = None

        for attempt in range(self._max_retries):
            try:
                return await self._send("GET", path, operation, **kwargs)
            except NetworkError as e:
                last_exception = e
                logger.warning(
                    "gateway_read_failed",
                    operation=operation,
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                    error=e.message,
                )

            if attempt < self._max_retries - 1:
                await asyncio.sleep(2**attempt * 0.1)

        raise last_exception or NetworkError(f"Gateway read failed: {operation}")

    async def _write(self, http_method: str, path: str, operation: str, **kwargs) -> Dict[str, Any]:
        """Send a mutating request once."""
        return await self._send(http_method, path, operation, **kwargs)

    async def _send(
        self,
        http_method: str,
        path: str,
        operation: str,
        **kwargs,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"

        try:
            with track_gateway_latency(operation):
                async with httpx.AsyncClient(
                    timeout=self._timeout,
                    transport=self._transport,
                ) as client:
                    response = await client.request(http_method, url, **kwargs)
        except httpx.TimeoutException as e:
            record_gateway_failure(operation, "timeout")
            raise NetworkTimeoutError() from e
        except httpx.HTTPError as e:
            record_gateway_failure(operation, "network")
            raise NetworkError(f"Gateway unreachable: {e}") from e

        if response.status_code >= 400:
            raise self._error_from_response(response, operation)

        return response.json()

    def _error_from_response(self, response: httpx.Response, operation: str) -> Exception:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and isinstance(body.get("error"), str):
            logger.info(
                "gateway_error_response",
                operation=operation,
                status_code=response.status_code,
                code=body["error"],
            )
            return domain_error(body["error"], body.get("message", body["error"]))

        record_gateway_failure(operation, "network")
        return NetworkError(
            message=f"Gateway error: {response.text[:200]}",
            status_code=response.status_code,
        )

    def _parse_order(self, item: Dict[str, Any]) -> InstallmentOrder:
        return InstallmentOrder(
            id=UUID(item["order_id"]),
            buyer_id=item["buyer_id"],
            seller_id=item["seller_id"],
            product_id=item["product_id"],
            plan_id=UUID(item["plan_id"]),
            total_cents=item["total_cents"],
            amount_paid_cents=item["amount_paid_cents"],
            installment_amount_cents=item["installment_amount_cents"],
            next_due_date=_parse_date(item.get("next_due_date")),
            status=OrderStatus(item["status"]),
            reschedule_count=item.get("reschedule_count", 0),
            created_at=_parse_datetime(item.get("created_at")) or datetime.utcnow(),
        )

    def _parse_payment(self, item: Dict[str, Any], order_id: UUID) -> InstallmentPayment:
        return InstallmentPayment(
            id=UUID(item["payment_id"]),
            order_id=order_id,
            step_number=item["step_number"],
            due_date=date.fromisoformat(item["due_date"]),
            amount_cents=item["amount_cents"],
            paid_cents=item.get("paid_cents", 0),
            status=PaymentStatus(item["status"]),
            paid_at=_parse_datetime(item.get("paid_at")),
        )

    def _parse_plan(self, item: Dict[str, Any]) -> InstallmentPlan:
        return InstallmentPlan(
            id=UUID(item["plan_id"]),
            product_id=item["product_id"],
            seller_id=item["seller_id"],
            version=item["version"],
            initial_deposit_percent=item["initial_deposit_percent"],
            frequency=PaymentFrequency(item["frequency"]),
            duration_periods=item["duration_periods"],
            min_payment_cents=item["min_payment_cents"],
            grace_period_days=item["grace_period_days"],
            allow_partial_payments=item["allow_partial_payments"],
            allow_early_completion=item["allow_early_completion"],
            schedule=[
                ScheduleStep(
                    step_number=step["step_number"],
                    percent_of_total=step["percent_of_total"],
                    due_offset_days=step["due_offset_days"],
                )
                for step in item["schedule"]
            ],
            created_at=_parse_datetime(item.get("created_at")) or datetime.utcnow(),
        )
