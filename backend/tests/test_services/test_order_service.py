"""
Unit tests for OrderService

Author: TM3
Date: 2025-10-24
"""
from decimal import Decimal

import pytest

from fakes import build_product
from storefront.domain.exceptions import ErrorKind
from storefront.services.errors import ApplicationError, NotFoundError
from storefront.services.schemas import OrderLineInput, PlaceOrderCommand


@pytest.fixture
def catalog(product_repository):
    """Products A (weight 60), B (weight 50) and C (weight 10), all USD"""
    product_repository.create(build_product(product_id="A", amount="6.00", weight="60"))
    product_repository.create(build_product(product_id="B", amount="5.00", weight="50"))
    product_repository.create(build_product(product_id="C", amount="1.00", weight="10"))
    return product_repository


def place(order_service, *lines, order_id="O-1"):
    return order_service.place_order(PlaceOrderCommand(
        order_id=order_id,
        customer_id="C-1",
        lines=[OrderLineInput(product_id=product_id, quantity=quantity) for product_id, quantity in lines]
    ))


class TestPlaceOrder:
    """Test order placement"""

    def test_place_order(self, order_service, order_repository, catalog):
        view = place(order_service, ("A", 1), ("C", 2))

        assert view.id == "O-1"
        assert view.status == "draft"
        assert view.item_count == 2
        assert view.total_weight == Decimal("80")
        assert view.total_price.amount == Decimal("8.00")
        assert order_repository.find_by_id("O-1") is not None

    def test_weight_limit(self, order_service, order_repository, catalog):
        with pytest.raises(ApplicationError) as exc_info:
            place(order_service, ("A", 1), ("B", 1))

        assert exc_info.value.kind == ErrorKind.INVARIANT
        assert exc_info.value.code == "weight_limit_exceeded"
        assert exc_info.value.operation == "place_order"
        assert len(order_repository) == 0

    def test_unknown_product(self, order_service, catalog):
        with pytest.raises(ApplicationError) as exc_info:
            place(order_service, ("missing", 1))

        assert exc_info.value.kind == ErrorKind.NOT_FOUND
        assert exc_info.value.code == "unknown_product"

    def test_empty_draft_is_allowed(self, order_service):
        view = place(order_service)

        assert view.item_count == 0
        assert view.total_price is None

    def test_generated_id(self, order_service, catalog):
        view = order_service.place_order(PlaceOrderCommand(lines=[OrderLineInput(product_id="C", quantity=1)]))

        assert view.id


class TestOrderLineUseCases:
    """Test line item use cases on a stored order"""

    def test_add_line_item_over_limit_keeps_stored_order(self, order_service, order_repository, catalog):
        place(order_service, ("A", 1))

        with pytest.raises(ApplicationError) as exc_info:
            order_service.add_line_item("O-1", "B", 1)

        assert exc_info.value.code == "weight_limit_exceeded"
        assert exc_info.value.context == {"order_id": "O-1", "product_id": "B"}
        stored = order_repository.find_by_id("O-1")
        assert len(stored.line_items) == 1
        assert stored.version == 0

    def test_add_line_item(self, order_service, catalog):
        place(order_service, ("A", 1))

        view = order_service.add_line_item("O-1", "C", 4)

        assert view.total_weight == Decimal("100")
        assert view.version == 1

    def test_add_duplicate_product(self, order_service, catalog):
        place(order_service, ("C", 1))

        with pytest.raises(ApplicationError) as exc_info:
            order_service.add_line_item("O-1", "C", 1)

        assert exc_info.value.kind == ErrorKind.DUPLICATE

    def test_change_quantity(self, order_service, catalog):
        place(order_service, ("C", 1))

        view = order_service.change_line_item_quantity("O-1", "C", 3)

        assert view.line_items[0].quantity == 3
        assert view.total_weight == Decimal("30")

    def test_remove_line_item(self, order_service, catalog):
        place(order_service, ("A", 1), ("C", 1))

        view = order_service.remove_line_item("O-1", "A")

        assert [line.product_id for line in view.line_items] == ["C"]

    def test_missing_order(self, order_service):
        with pytest.raises(NotFoundError) as exc_info:
            order_service.add_line_item("missing", "C", 1)

        assert exc_info.value.code == "order_not_found"
        assert exc_info.value.operation == "add_line_item"


class TestOrderLifecycleUseCases:

    def test_confirm_and_cancel(self, order_service, catalog):
        place(order_service, ("C", 1))

        assert order_service.confirm_order("O-1").status == "confirmed"
        assert order_service.cancel_order("O-1").status == "cancelled"

    def test_confirm_empty_order(self, order_service):
        place(order_service)

        with pytest.raises(ApplicationError) as exc_info:
            order_service.confirm_order("O-1")

        assert exc_info.value.code == "empty_order"

    def test_confirmed_order_cannot_change(self, order_service, catalog):
        place(order_service, ("C", 1))
        order_service.confirm_order("O-1")

        with pytest.raises(ApplicationError) as exc_info:
            order_service.remove_line_item("O-1", "C")

        assert exc_info.value.code == "order_not_editable"

    def test_delete_order(self, order_service, order_repository, catalog):
        place(order_service, ("C", 1))

        order_service.delete_order("O-1")

        assert order_repository.find_by_id("O-1") is None
        with pytest.raises(NotFoundError):
            order_service.get_order("O-1")

    def test_list_orders(self, order_service, catalog):
        place(order_service, ("C", 1), order_id="O-1")
        place(order_service, ("C", 1), order_id="O-2")

        assert [view.id for view in order_service.list_orders()] == ["O-1", "O-2"]
