"""
Orders API Endpoints
Handles order placement, line item changes and order lifecycle

Author: TM3
Date: 2025-10-24
"""
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from storefront.api.dependencies import get_order_service
from storefront.services import OrderService
from storefront.services.schemas import OrderLineInput, PlaceOrderCommand

router = APIRouter()


# Request models
class QuantityUpdate(BaseModel):
    quantity: int


@router.get("/")
def list_orders(service: OrderService = Depends(get_order_service)):
    """Get all orders with their line items"""
    orders = service.list_orders()
    return {
        "status": "success",
        "count": len(orders),
        "data": orders
    }


@router.post("/", status_code=status.HTTP_201_CREATED)
def place_order(
    command: PlaceOrderCommand,
    service: OrderService = Depends(get_order_service)
):
    """
    Place a draft order

    Each line references a product by ID; price and weight are taken from
    the current product data.
    """
    return {"status": "success", "data": service.place_order(command)}


@router.get("/{order_id}")
def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return {"status": "success", "data": service.get_order(order_id)}


@router.delete("/{order_id}")
def delete_order(order_id: str, service: OrderService = Depends(get_order_service)):
    service.delete_order(order_id)
    return {"status": "success", "message": f"Order {order_id} deleted"}


@router.post("/{order_id}/lines", status_code=status.HTTP_201_CREATED)
def add_line_item(
    order_id: str,
    line: OrderLineInput,
    service: OrderService = Depends(get_order_service)
):
    return {"status": "success", "data": service.add_line_item(order_id, line.product_id, line.quantity)}


@router.patch("/{order_id}/lines/{product_id}")
def change_line_item_quantity(
    order_id: str,
    product_id: str,
    update: QuantityUpdate,
    service: OrderService = Depends(get_order_service)
):
    order = service.change_line_item_quantity(order_id, product_id, update.quantity)
    return {"status": "success", "data": order}


@router.delete("/{order_id}/lines/{product_id}")
def remove_line_item(
    order_id: str,
    product_id: str,
    service: OrderService = Depends(get_order_service)
):
    return {"status": "success", "data": service.remove_line_item(order_id, product_id)}


@router.post("/{order_id}/confirm")
def confirm_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return {"status": "success", "data": service.confirm_order(order_id)}


@router.post("/{order_id}/cancel")
def cancel_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return {"status": "success", "data": service.cancel_order(order_id)}
