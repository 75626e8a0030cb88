# products_api/router.py

"""
Product endpoints mounted under /api/products.
Every handler runs its validation gate first, then a single repository call,
and answers in the `{data: ...}` envelope.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .db import get_db
from .repository import ProductRepository
from .schemas import (
    ErrorEnvelope,
    MessageEnvelope,
    ProductCreate,
    ProductEnvelope,
    ProductListEnvelope,
    ProductResponse,
    ProductUpdate,
    ValidationErrorEnvelope,
)
from .validation import (
    CREATE_PRODUCT_RULES,
    PRODUCT_ID_RULES,
    UPDATE_PRODUCT_RULES,
    check_input,
    coerce_body,
)

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Producto no encontrado"
PRODUCT_DELETED = "Producto Eliminado"

router = APIRouter(prefix="/api/products", tags=["Products"])

BAD_REQUEST = {
    status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorEnvelope, "description": "Bad request, invalid input data"}
}
NOT_FOUND = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorEnvelope, "description": "Product not found"}
}

CREATE_EXAMPLE = {"name": "Monitor Curvo 49 pulgadas", "price": 300}
UPDATE_EXAMPLE = {"name": "Monitor Curvo 49 pulgadas", "price": 300, "availability": True}


def get_repository(db: Session = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)


def _not_found(product_id: int, action: str) -> HTTPException:
    logger.warning(f"Product with ID: {product_id} not found{action}.")
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)


def _server_error(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


@router.get(
    "",
    response_model=ProductListEnvelope,
    summary="Get a list of products",
    description="Return a list of products",
)
def get_products(repo: ProductRepository = Depends(get_repository)):
    """
    Retrieves every product in the database.

    - Products are ordered by ID, newest first; there is no pagination.
    - Returns the list wrapped in the `data` envelope.
    """
    products = repo.list()
    logger.info(f"Retrieved {len(products)} products.")
    return {"data": [ProductResponse.model_validate(p) for p in products]}


@router.get(
    "/{id}",
    response_model=ProductEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Get a product by ID",
    description="Return a product based on its unique ID",
)
def get_product_by_id(id: str, repo: ProductRepository = Depends(get_repository)):
    """
    Retrieves a single product by its unique ID.

    - Returns 400 if the ID is not an integer.
    - Returns 404 if the product does not exist.
    """
    check_input(PRODUCT_ID_RULES, params={"id": id})
    product_id = int(id)
    logger.info(f"Fetching product with ID: {product_id}")
    product = repo.get(product_id)
    if not product:
        raise _not_found(product_id, "")
    return {"data": ProductResponse.model_validate(product)}


@router.post(
    "",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
    summary="Creates a new product",
    description="Return a new record in the database",
)
def create_product(
    payload: Optional[Dict[str, Any]] = Body(None, examples=[CREATE_EXAMPLE]),
    repo: ProductRepository = Depends(get_repository),
):
    """
    Creates a new product entry in the database.

    - Requires a non-empty `name` and a numeric `price` greater than 0.
    - `availability` is optional and defaults to true.
    - Returns the created product with its auto-generated `id` and timestamps.
    """
    payload = payload or {}
    check_input(CREATE_PRODUCT_RULES, body=payload)
    product = coerce_body(ProductCreate, payload)
    logger.info(f"Creating product: {product.name}")
    try:
        db_product = repo.create(product.model_dump())
    except SQLAlchemyError as e:
        logger.error(f"Error creating product: {e}", exc_info=True)
        raise _server_error("No se pudo crear el producto")
    logger.info(f"Product '{db_product.name}' (ID: {db_product.id}) created successfully.")
    return {"data": ProductResponse.model_validate(db_product)}


@router.put(
    "/{id}",
    response_model=ProductEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Updates a product with user input",
    description="Returns the updated product",
)
def update_product(
    id: str,
    payload: Optional[Dict[str, Any]] = Body(None, examples=[UPDATE_EXAMPLE]),
    repo: ProductRepository = Depends(get_repository),
):
    """
    Replaces every editable field of an existing product.

    - Requires `name`, `price` and `availability`, validated as on creation.
    - Returns the updated product.
    - Returns 404 if the product does not exist.
    """
    payload = payload or {}
    check_input(UPDATE_PRODUCT_RULES, params={"id": id}, body=payload)
    product_id = int(id)
    updated = coerce_body(ProductUpdate, payload)
    logger.info(f"Updating product with ID: {product_id} with data: {updated.model_dump()}")
    try:
        product = repo.update(product_id, updated.model_dump())
    except SQLAlchemyError as e:
        logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
        raise _server_error("No se pudo actualizar el producto")
    if not product:
        raise _not_found(product_id, " for update")
    logger.info(f"Product '{product.name}' (ID: {product_id}) updated successfully.")
    return {"data": ProductResponse.model_validate(product)}


@router.patch(
    "/{id}",
    response_model=ProductEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Update product availability",
    description="Returns the updated availability",
)
def update_availability(id: str, repo: ProductRepository = Depends(get_repository)):
    """
    Flips the availability of a product.

    - Takes no request body.
    - The change is committed before the updated product is returned.
    - Returns 404 if the product does not exist.
    """
    check_input(PRODUCT_ID_RULES, params={"id": id})
    product_id = int(id)
    logger.info(f"Toggling availability of product with ID: {product_id}")
    try:
        product = repo.toggle_availability(product_id)
    except SQLAlchemyError as e:
        logger.error(f"Error toggling availability of product {product_id}: {e}", exc_info=True)
        raise _server_error("No se pudo actualizar el producto")
    if not product:
        raise _not_found(product_id, " for availability update")
    logger.info(f"Product (ID: {product_id}) availability is now {product.availability}.")
    return {"data": ProductResponse.model_validate(product)}


@router.delete(
    "/{id}",
    response_model=MessageEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Delete a product by ID",
    description="Returns the confirmation message",
)
def delete_product(id: str, repo: ProductRepository = Depends(get_repository)):
    """
    Deletes a product from the database by its unique ID.

    - Returns a confirmation message upon successful deletion.
    - Returns 404 if the product does not exist.
    """
    check_input(PRODUCT_ID_RULES, params={"id": id})
    product_id = int(id)
    logger.info(f"Attempting to delete product with ID: {product_id}")
    try:
        deleted = repo.delete(product_id)
    except SQLAlchemyError as e:
        logger.error(f"Error deleting product {product_id}: {e}", exc_info=True)
        raise _server_error("Ocurrio un error al eliminar el producto")
    if not deleted:
        raise _not_found(product_id, " for deletion")
    logger.info(f"Product (ID: {product_id}) deleted successfully.")
    return {"data": PRODUCT_DELETED}
