"""
Catalog service

CRUD over the products collection. Every write reads the whole
collection, changes one record and saves the whole collection back.
"""

import logging
from typing import Any, Dict, List

import pydantic

from database import PRODUCTS, RecordStore
from errors import ConflictError, NotFoundError, ValidationError
from schemas import Product

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Product name, category and price are required."


def normalize_product(payload: Any) -> Dict[str, Any]:
    """Validate a product payload and fill optional fields with defaults."""
    if not isinstance(payload, dict):
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    try:
        product = Product.model_validate(payload)
    except pydantic.ValidationError:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    return product.model_dump()


def _index_of(products: List[Dict[str, Any]], product_id: str) -> int:
    for index, item in enumerate(products):
        if item.get("id") == product_id:
            return index
    return -1


class CatalogService:
    def __init__(self, store: RecordStore):
        self.store = store

    async def list(self) -> List[Dict[str, Any]]:
        return await self.store.load(PRODUCTS)

    async def get(self, product_id: str) -> Dict[str, Any]:
        products = await self.store.load(PRODUCTS)
        index = _index_of(products, product_id)
        if index == -1:
            raise NotFoundError("Product not found.")
        return products[index]

    async def create(self, payload: Any) -> Dict[str, Any]:
        product = normalize_product(payload)
        async with self.store.lock(PRODUCTS):
            products = await self.store.load(PRODUCTS)
            if _index_of(products, product["id"]) != -1:
                raise ConflictError("Product id already exists.")
            products.append(product)
            await self.store.save(PRODUCTS, products)
        logger.info("Created product %s", product["id"])
        return product

    async def update(self, product_id: str, payload: Any) -> Dict[str, Any]:
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError("Product update must be a JSON object.")
        async with self.store.lock(PRODUCTS):
            products = await self.store.load(PRODUCTS)
            index = _index_of(products, product_id)
            if index == -1:
                raise NotFoundError("Product not found.")
            current = products[index]
            product = normalize_product({**current, **payload, "id": current["id"]})
            products[index] = product
            await self.store.save(PRODUCTS, products)
        logger.info("Updated product %s", product_id)
        return product

    async def delete(self, product_id: str) -> Dict[str, Any]:
        async with self.store.lock(PRODUCTS):
            products = await self.store.load(PRODUCTS)
            index = _index_of(products, product_id)
            if index == -1:
                raise NotFoundError("Product not found.")
            removed = products.pop(index)
            await self.store.save(PRODUCTS, products)
        logger.info("Deleted product %s", product_id)
        return removed
