from fastapi import APIRouter, status, Query
from uuid import UUID
from typing import List

from app.core.config import settings
from app.dependencies.dbDependecies import db_dependency
from app.dependencies.tenantDependencies import TenantId
from app.modules.products import service
from app.modules.products.schemas import ProductCreate, ProductUpdate, ProductOut

product_router = APIRouter(prefix="/products", tags=["Products"])


@product_router.get("", response_model=List[ProductOut])
def list_products(
    db: db_dependency,
    tenant_id: TenantId,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0)
):
    return service.get_all_products(db, tenant_id, limit, offset)


@product_router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(data: ProductCreate, db: db_dependency, tenant_id: TenantId):
    """Create a new product."""
    return service.create_product(db, data, tenant_id)


@product_router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: UUID, db: db_dependency, tenant_id: TenantId):
    return service.get_product_by_id(db, tenant_id, product_id)


@product_router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: UUID, data: ProductUpdate, db: db_dependency, tenant_id: TenantId):
    """Update product fields; only the fields sent are changed."""
    return service.update_product(db, tenant_id, product_id, data)


@product_router.delete("/{product_id}")
def delete_product(product_id: UUID, db: db_dependency, tenant_id: TenantId):
    service.delete_product(db, tenant_id, product_id)
    return {"success": True}
