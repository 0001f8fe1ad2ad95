"""
Products API - FastAPI router for the product page and price tools.
"""
import logging
from dataclasses import asdict
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from ..engine.models import Product
from ..engine.price_converter import to_exclusive, to_inclusive, discount_percentage
from ..services.catalog_service import ProductNotFoundError
from ..services.product_view import ProductView
from .state import catalog, palette, settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["products"])


# Pydantic models for API
class SelectRequest(BaseModel):
    """Request model for an attribute click."""
    selection: dict[str, str] = Field(default_factory=dict)
    key: str
    value: str


class SelectResponse(BaseModel):
    """Response model for an attribute click."""
    matched_by: str
    variant_id: Optional[str]
    variant_param: Optional[str]
    selection: dict[str, str]
    warnings: list[str]
    trace: list[dict]
    price: dict


class ConvertRequest(BaseModel):
    """Request model for tax conversion."""
    amount: Optional[float] = None
    tax_rate: Optional[float] = None
    direction: Literal["to_exclusive", "to_inclusive"] = "to_exclusive"


class ConvertResponse(BaseModel):
    amount: Optional[float]
    tax_rate: Optional[float]
    direction: str
    result: float


class DiscountRequest(BaseModel):
    price: float
    mrp: Optional[float] = None


class DiscountResponse(BaseModel):
    price: float
    mrp: Optional[float]
    discount_percentage: int
    show_mrp: bool


def _get_product(identifier: str) -> Product:
    try:
        return catalog.lookup(identifier)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _open_view(identifier: str, variant: Optional[str] = None) -> ProductView:
    return ProductView(_get_product(identifier), variant_param=variant, settings=settings, palette=palette)


# Endpoints

@router.get("/products")
async def list_products(search: Optional[str] = None, limit: int = 100):
    """Catalog summary, filtered by slug, name or brand."""
    df = catalog.to_frame(search=search, limit=limit)
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


@router.get("/products/slug/{slug}")
async def get_product_by_slug(slug: str):
    try:
        product = catalog.get_by_slug(slug)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return jsonable_encoder(asdict(product))


@router.get("/products/{identifier}/view")
async def get_product_view(identifier: str, variant: Optional[str] = None):
    """Initial page state, seeded from the ?variant= parameter."""
    return jsonable_encoder(_open_view(identifier, variant).to_dict())


@router.post("/products/{identifier}/select", response_model=SelectResponse)
async def select_attribute(identifier: str, request: SelectRequest):
    """Apply one attribute click against the caller's current selection."""
    view = _open_view(identifier)
    view.selection = dict(request.selection)
    resolution = view.select(request.key, request.value)

    return SelectResponse(
        matched_by=resolution.matched_by,
        variant_id=resolution.variant.id if resolution.variant else None,
        variant_param=view.variant_param(),
        selection=resolution.selection,
        warnings=resolution.warnings,
        trace=[asdict(t) for t in resolution.trace],
        price=asdict(view.price_info()),
    )


@router.get("/products/{identifier}/options/{key}")
async def get_options(identifier: str, key: str, variant: Optional[str] = None):
    """Availability of every value of one attribute key."""
    view = _open_view(identifier, variant)
    options = view.resolver.available_options(view.selection, key)
    if not options:
        raise HTTPException(status_code=404, detail=f"No active variant carries '{key}'")
    return [asdict(o) for o in options]


@router.get("/products/{product_id}")
async def get_product(product_id: str):
    """Product by slug, falling back to id."""
    return jsonable_encoder(asdict(_get_product(product_id)))


@router.post("/pricing/convert", response_model=ConvertResponse)
async def convert_price(request: ConvertRequest):
    if request.direction == "to_exclusive":
        result = to_exclusive(request.amount, request.tax_rate)
    else:
        result = to_inclusive(request.amount, request.tax_rate)
    return ConvertResponse(
        amount=request.amount,
        tax_rate=request.tax_rate,
        direction=request.direction,
        result=result,
    )


@router.post("/pricing/discount", response_model=DiscountResponse)
async def compute_discount(request: DiscountRequest):
    return DiscountResponse(
        price=request.price,
        mrp=request.mrp,
        discount_percentage=discount_percentage(request.price, request.mrp),
        show_mrp=bool(request.mrp) and request.mrp > request.price,
    )
