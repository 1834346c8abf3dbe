"""
Products API Endpoints
Handles product catalog management and stock levels

Author: TM3
Date: 2025-10-24
"""
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from storefront.api.dependencies import get_product_service
from storefront.services import ProductService
from storefront.services.schemas import CreateProductCommand, StockInput

router = APIRouter()


# Request models
class StockAdjustment(BaseModel):
    longitude: float
    latitude: float
    quantity: int


class PriceUpdate(BaseModel):
    amount: Decimal
    currency: str = "USD"


@router.get("/")
def list_products(service: ProductService = Depends(get_product_service)):
    """Get all products with their stock entries"""
    products = service.list_products()
    return {
        "status": "success",
        "count": len(products),
        "data": products
    }


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_product(
    command: CreateProductCommand,
    service: ProductService = Depends(get_product_service)
):
    """Create a product with its initial stock entries"""
    return {"status": "success", "data": service.create_product(command)}


@router.get("/{product_id}")
def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    return {"status": "success", "data": service.get_product(product_id)}


@router.delete("/{product_id}")
def delete_product(product_id: str, service: ProductService = Depends(get_product_service)):
    service.delete_product(product_id)
    return {"status": "success", "message": f"Product {product_id} deleted"}


@router.post("/{product_id}/stocks", status_code=status.HTTP_201_CREATED)
def add_stock(
    product_id: str,
    stock: StockInput,
    service: ProductService = Depends(get_product_service)
):
    """Register stock at a new location"""
    product = service.add_stock(product_id, stock.longitude, stock.latitude, stock.quantity)
    return {"status": "success", "data": product}


@router.delete("/{product_id}/stocks")
def remove_stock(
    product_id: str,
    longitude: float = Query(..., description="Stock location longitude"),
    latitude: float = Query(..., description="Stock location latitude"),
    service: ProductService = Depends(get_product_service)
):
    """Remove the stock entry at a location"""
    return {"status": "success", "data": service.remove_stock(product_id, longitude, latitude)}


@router.post("/{product_id}/stocks/increase")
def increase_stock(
    product_id: str,
    adjustment: StockAdjustment,
    service: ProductService = Depends(get_product_service)
):
    product = service.increase_stock(
        product_id, adjustment.longitude, adjustment.latitude, adjustment.quantity
    )
    return {"status": "success", "data": product}


@router.post("/{product_id}/stocks/decrease")
def decrease_stock(
    product_id: str,
    adjustment: StockAdjustment,
    service: ProductService = Depends(get_product_service)
):
    product = service.decrease_stock(
        product_id, adjustment.longitude, adjustment.latitude, adjustment.quantity
    )
    return {"status": "success", "data": product}


@router.put("/{product_id}/price")
def change_price(
    product_id: str,
    price: PriceUpdate,
    service: ProductService = Depends(get_product_service)
):
    return {"status": "success", "data": service.change_price(product_id, price.amount, price.currency)}
