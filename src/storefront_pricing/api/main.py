from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config.settings import configure_logging
from .products_api import router as products_router
from .state import catalog, palette, settings

configure_logging(settings.log_level)

app = FastAPI(
    title="Storefront Pricing API",
    description="Variant resolution and price display for the storefront product page",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(products_router)


@app.get("/")
async def root():
    return {"status": "online", "message": "Storefront Pricing API Active"}


@app.get("/system/status")
async def get_status():
    return {
        "engine_active": True,
        "products_loaded": len(catalog),
        "palette_colors": len(palette),
        "catalog_path": str(settings.catalog_path),
        "prices_include_tax": settings.prices_include_tax,
    }


@app.post("/system/reload")
async def reload_catalog():
    """Re-read the product catalog from disk."""
    try:
        catalog.reload()
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"success": True, "products_loaded": len(catalog)}
