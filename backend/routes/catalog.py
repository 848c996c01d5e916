"""Product list route — static catalog behind a 60 second output cache."""

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from config import settings
from services.cache import cache
from services.catalog import Product, ProductProvider, StaticCatalog, render_catalog
from services.output_cache import OutputCache

logger = logging.getLogger(__name__)

router = APIRouter()

_provider = StaticCatalog()
_output_cache = OutputCache(expire_seconds=settings.output_cache_ttl_seconds, store=cache)


def get_product_provider() -> ProductProvider:
    return _provider


def get_output_cache() -> OutputCache:
    return _output_cache


@router.api_route("/api/productlist", methods=["GET", "HEAD"], response_model=list[Product])
async def product_list(
    request: Request,
    provider: ProductProvider = Depends(get_product_provider),
    output_cache: OutputCache = Depends(get_output_cache),
) -> Response:
    """Fixed product catalog with nested categories, cached per request key."""

    def render() -> Response:
        products = provider.list_products()
        logger.info("Rendering product list (%d products)", len(products))
        return JSONResponse(render_catalog(products))

    return output_cache.serve(request, render)
