# HONEYBEE/backend/honeybee/routes/products.py

from fastapi import APIRouter, Depends, HTTPException
from typing import List

from honeybee.errors import HoneyBeeError
from honeybee.routes.invoices import get_billing_service
from honeybee.schemas import schemas
from honeybee.services.billing_service import BillingService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=List[schemas.ProductRecord])
def list_products(service: BillingService = Depends(get_billing_service)):
    try:
        return service.list_products()
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/", response_model=schemas.ProductRecord)
def create_product(
    product: schemas.ProductCreate,
    service: BillingService = Depends(get_billing_service)
):
    """Adds a product; stock at or below 10 marks it low-stock"""
    try:
        return service.create_product(product)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{product_id}", response_model=schemas.ProductRecord)
def update_product(
    product_id: str,
    patch: schemas.ProductUpdate,
    service: BillingService = Depends(get_billing_service)
):
    try:
        return service.update_product(product_id, patch)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{product_id}")
def delete_product(product_id: str, service: BillingService = Depends(get_billing_service)):
    try:
        service.delete_product(product_id)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"message": "Product deleted successfully"}
