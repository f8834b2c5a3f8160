"""
Storefront HTTP API.

Thin layer over CatalogService and CartService: query/body parsing, the cart
session cookie and mapping of domain exceptions to status codes. Responses use
camelCase keys.
"""

import logging
import uuid
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

import config
from db import get_db_session
from exceptions.cart import CartNotFoundException, InvalidCartQuantityException
from exceptions.catalog import ProductNotFoundException
from exceptions.store import StoreUnavailableException
from services.cart import CartService
from services.catalog import CatalogService
from utils.filter_codec import SQL_INTEGER_MAX, decode

logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api", tags=["api"])

CART_COOKIE_MAX_AGE = config.CART_COOKIE_MAX_AGE_DAYS * 24 * 60 * 60


def generate_correlation_id() -> str:
    """Generate unique correlation ID for request tracing."""
    return f"{datetime.now().strftime('%Y%m%d-%H%M%S')}-{uuid.uuid4().hex[:8]}"


async def get_session():
    async with get_db_session() as session:
        yield session


def get_session_factory():
    return get_db_session


def camelize(data: Any) -> Any:
    if isinstance(data, dict):
        return {to_camel(key): camelize(value) for key, value in data.items()}
    if isinstance(data, list):
        return [camelize(value) for value in data]
    return data


def set_cart_cookie(response: Response, cart_id: str) -> None:
    response.set_cookie(
        key=config.CART_COOKIE_NAME,
        value=cart_id,
        max_age=CART_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        secure=config.CART_COOKIE_SECURE,
        samesite="lax",
    )


def cart_response(cart) -> dict:
    # The token only travels in the httpOnly cookie
    return camelize(cart.model_dump(mode="json", exclude={"id": True, "items": {"__all__": {"cart_id"}}}))


def store_unavailable(correlation_id: str, e: StoreUnavailableException) -> HTTPException:
    logger.error(f"[{correlation_id}] Store unavailable: {e!r}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Store temporarily unavailable (ref {correlation_id})"
    )


class AddCartItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId", ge=1, le=SQL_INTEGER_MAX, description="Product to add")
    quantity: int = Field(default=1, le=config.CART_QUANTITY_MAX, description="Units to add; must be positive")


class UpdateCartItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cart_item_id: int = Field(..., alias="cartItemId", ge=1, le=SQL_INTEGER_MAX, description="Cart line to change")
    quantity: int = Field(..., le=config.CART_QUANTITY_MAX, description="New quantity; zero or less removes the line")


@api_router.get("/catalog")
async def get_catalog(request: Request, session_factory=Depends(get_session_factory)):
    """
    Catalog view for the filter state in the query string.

    Query parameters (all optional, category/brand/color/size repeatable):
        category, brand, color, size, min, max, page, perPage

    Invalid paging values are clamped and malformed prices ignored; this
    endpoint does not reject input. Facet reads that fail degrade to fallback
    data, so it does not return 503 either.
    """
    state = decode(request.query_params)
    catalog = await CatalogService.get_catalog(state, session_factory)
    return camelize(catalog.model_dump(mode="json"))


@api_router.get("/products/{slug}")
async def get_product(slug: str, session=Depends(get_session)):
    product = await CatalogService.get_product(slug, session)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return camelize(product.model_dump(mode="json"))


@api_router.get("/cart")
async def get_cart(response: Response,
                   cart_id: str | None = Cookie(default=None, alias=config.CART_COOKIE_NAME),
                   session=Depends(get_session)):
    """Current visitor's cart; a new empty cart (and cookie) when the cookie is missing or unknown."""
    correlation_id = generate_correlation_id()
    try:
        cart = await CartService.get_or_create(cart_id, session)
    except StoreUnavailableException as e:
        raise store_unavailable(correlation_id, e)
    if cart.id != cart_id:
        set_cart_cookie(response, cart.id)
    return cart_response(cart)


@api_router.post("/cart")
async def add_to_cart(payload: AddCartItemRequest,
                      response: Response,
                      cart_id: str | None = Cookie(default=None, alias=config.CART_COOKIE_NAME),
                      session=Depends(get_session)):
    """
    Add a product to the cart.

    Request Body:
        {"productId": 42, "quantity": 2}

    Returns:
        200: Updated cart
        404: Product not found
        422: Quantity is not positive or above CART_QUANTITY_MAX
        503: Store unavailable
    """
    correlation_id = generate_correlation_id()
    logger.info(f"[{correlation_id}] Adding product {payload.product_id} x{payload.quantity} to cart")
    try:
        # Rejected requests must not leave a fresh cart behind
        await CartService.validate_item(payload.product_id, payload.quantity, session)
        cart = await CartService.get_or_create(cart_id, session)
        if cart.id != cart_id:
            set_cart_cookie(response, cart.id)
        cart = await CartService.add_item(cart.id, payload.product_id, payload.quantity, session)
    except InvalidCartQuantityException as e:
        logger.warning(f"[{correlation_id}] {e.message}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    except ProductNotFoundException as e:
        logger.warning(f"[{correlation_id}] {e.message}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except CartNotFoundException as e:
        logger.warning(f"[{correlation_id}] {e.message}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cart not found")
    except StoreUnavailableException as e:
        raise store_unavailable(correlation_id, e)
    return cart_response(cart)


@api_router.put("/cart")
async def update_cart_item(payload: UpdateCartItemRequest,
                           cart_id: str | None = Cookie(default=None, alias=config.CART_COOKIE_NAME),
                           session=Depends(get_session)):
    """
    Change the quantity of a cart line.

    Returns the updated line, or null when it was removed (quantity <= 0) or
    does not belong to the visitor's cart.
    """
    correlation_id = generate_correlation_id()
    if not cart_id:
        return None
    try:
        cart_item = await CartService.update_item(payload.cart_item_id, payload.quantity, session, cart_id=cart_id)
    except InvalidCartQuantityException as e:
        logger.warning(f"[{correlation_id}] {e.message}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    except StoreUnavailableException as e:
        raise store_unavailable(correlation_id, e)
    if cart_item is None:
        return None
    return camelize(cart_item.model_dump(mode="json", exclude={"cart_id"}))


@api_router.delete("/cart", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(cart_id: str | None = Cookie(default=None, alias=config.CART_COOKIE_NAME),
                     session=Depends(get_session)):
    correlation_id = generate_correlation_id()
    if cart_id:
        try:
            await CartService.clear(cart_id, session)
        except StoreUnavailableException as e:
            raise store_unavailable(correlation_id, e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
