"""Application service: Show Order use case (query)."""

from __future__ import annotations

from shopdesk.application.dto import AdjustmentDTO, OrderDTO, OrderItemDTO
from shopdesk.domain.model.adjustment import Adjustment, AdjustmentType
from shopdesk.domain.model.order import Order
from shopdesk.domain.model.value_objects import Money
from shopdesk.domain.repository.option_repository import OptionRepository
from shopdesk.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        option_repo: OptionRepository,
    ) -> None:
        self._order_repo = order_repo
        self._option_repo = option_repo

    def handle(self, order_id: int) -> OrderDTO:
        order = Order.load(order_id, self._order_repo, self._option_repo)
        return self._to_dto(order)

    @staticmethod
    def _to_dto(order: Order) -> OrderDTO:
        header = order.header
        address = order.address()
        return OrderDTO(
            id=order.id,
            number=order.display_number(),
            status=order.status,
            is_complete=order.is_complete,
            email=header.email,
            billing_name=address.full_name,
            billing_country=address.country,
            items=[
                OrderItemDTO(
                    product_name=item.product_name,
                    quantity=item.quantity.value,
                    subtotal=str(item.subtotal),
                    tax=str(item.tax),
                    total=str(item.total),
                    fees=[fee.description for fee in item.fees],
                )
                for item in order.items
            ],
            discounts=[_adjustment_dto(a, order.currency) for a in order.discounts],
            taxes=[_adjustment_dto(a, order.currency) for a in order.taxes],
            fees=[_adjustment_dto(a, order.currency) for a in order.fees.values()],
            credits=[_adjustment_dto(a, order.currency) for a in order.credits],
            tax_rate=f"{order.tax_rate}%",
            subtotal=str(Money(header.subtotal, order.currency)),
            tax=str(Money(header.tax, order.currency)),
            discount=str(Money(header.discount, order.currency)),
            total=str(Money(header.total, order.currency)),
            created_at=(
                header.date_created.strftime("%Y-%m-%d %H:%M UTC")
                if header.date_created
                else ""
            ),
        )


def _adjustment_dto(adjustment: Adjustment, currency: str) -> AdjustmentDTO:
    if adjustment.type is AdjustmentType.TAX_RATE:
        amount = f"{adjustment.amount}%"
    else:
        amount = f"{adjustment.amount:.2f} {currency}"
    return AdjustmentDTO(
        type=adjustment.type.value,
        description=adjustment.description,
        amount=amount,
    )
