"""
Product Service
Use cases for the product catalog and its stock levels

Author: TM3
Date: 2025-10-22
"""
import logging
from decimal import Decimal
from typing import List

from storefront.domain.product import Product, Stock
from storefront.domain.repositories import ProductRepository
from storefront.domain.value_objects import Location, Price
from storefront.services.errors import NotFoundError, use_case
from storefront.services.schemas import CreateProductCommand, ProductView


logger = logging.getLogger(__name__)


class ProductService:
    """
    Service for product catalog operations

    Handles:
    - Product creation with initial stock
    - Stock registration, removal and adjustments per location
    - Price changes
    """

    def __init__(self, products: ProductRepository):
        self.products = products

    def create_product(self, command: CreateProductCommand) -> ProductView:
        with use_case("create_product", product_id=command.product_id):
            product = Product.create(
                product_id=command.product_id,
                price=Price(amount=command.price_amount, currency=command.currency),
                weight=command.weight,
                stocks=[
                    Stock(
                        location=Location(longitude=stock.longitude, latitude=stock.latitude),
                        quantity=stock.quantity
                    )
                    for stock in command.stocks
                ]
            )
            self.products.create(product)

        logger.info(f"Product created: {product.id} ({len(command.stocks)} locations)")
        return ProductView.from_domain(product)

    def get_product(self, product_id: str) -> ProductView:
        return ProductView.from_domain(self._load(product_id, "get_product"))

    def list_products(self) -> List[ProductView]:
        return [ProductView.from_domain(product) for product in self.products.find_all()]

    def add_stock(
        self,
        product_id: str,
        longitude: float,
        latitude: float,
        quantity: int = 0
    ) -> ProductView:
        operation = "add_stock"
        with use_case(operation, product_id=product_id):
            product = self._load(product_id, operation)
            location = Location(longitude=longitude, latitude=latitude)
            product.add_stock(Stock(location=location, quantity=quantity))
            self.products.update(product)
        return ProductView.from_domain(product)

    def remove_stock(self, product_id: str, longitude: float, latitude: float) -> ProductView:
        operation = "remove_stock"
        with use_case(operation, product_id=product_id):
            product = self._load(product_id, operation)
            product.remove_stock(Location(longitude=longitude, latitude=latitude))
            self.products.update(product)
        return ProductView.from_domain(product)

    def increase_stock(
        self,
        product_id: str,
        longitude: float,
        latitude: float,
        quantity: int
    ) -> ProductView:
        operation = "increase_stock"
        with use_case(operation, product_id=product_id, quantity=quantity):
            product = self._load(product_id, operation)
            product.increase_stock(Location(longitude=longitude, latitude=latitude), quantity)
            self.products.update(product)
        return ProductView.from_domain(product)

    def decrease_stock(
        self,
        product_id: str,
        longitude: float,
        latitude: float,
        quantity: int
    ) -> ProductView:
        operation = "decrease_stock"
        with use_case(operation, product_id=product_id, quantity=quantity):
            product = self._load(product_id, operation)
            product.decrease_stock(Location(longitude=longitude, latitude=latitude), quantity)
            self.products.update(product)
        return ProductView.from_domain(product)

    def change_price(self, product_id: str, amount: Decimal, currency: str) -> ProductView:
        operation = "change_price"
        with use_case(operation, product_id=product_id):
            product = self._load(product_id, operation)
            product.change_price(Price(amount=amount, currency=currency))
            self.products.update(product)

        logger.info(f"Product {product_id} price changed to {product.price}")
        return ProductView.from_domain(product)

    def delete_product(self, product_id: str) -> None:
        if not self.products.delete(product_id):
            raise NotFoundError("Product", product_id, "delete_product")
        logger.info(f"Product deleted: {product_id}")

    def _load(self, product_id: str, operation: str) -> Product:
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id, operation)
        return product
