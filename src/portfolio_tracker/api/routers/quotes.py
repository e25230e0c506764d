"""Quote, search and provider status endpoints."""

from fastapi import APIRouter, Depends, Query

from portfolio_tracker.api.deps import get_resolver
from portfolio_tracker.api.schemas import (
    ProviderStatusResponse,
    QuoteResponse,
    SearchResultResponse,
    SymbolValidationResponse,
)
from portfolio_tracker.core.exceptions import NotFoundError
from portfolio_tracker.services import QuoteResolver

router = APIRouter(tags=["quotes"])


@router.get("/quote/{symbol}", response_model=QuoteResponse)
async def get_quote(symbol: str, resolver: QuoteResolver = Depends(get_resolver)):
    """
    Resolve a quote through cache, providers and offline data.

    Always 200 for a well-formed symbol; degraded data carries errorNote.
    """
    quote = await resolver.resolve(symbol)
    return QuoteResponse.model_validate(quote)


@router.get("/validate/{symbol}", response_model=SymbolValidationResponse)
async def validate_symbol(symbol: str, resolver: QuoteResolver = Depends(get_resolver)):
    """Report whether a symbol can be priced; invalid symbols still answer 200."""
    result = await resolver.validate_symbol(symbol)
    return SymbolValidationResponse.model_validate(result)


@router.get("/search", response_model=list[SearchResultResponse])
async def search(
    q: str = Query(..., description="Free-text symbol or name"),
    resolver: QuoteResolver = Depends(get_resolver),
):
    """Search securities across providers, merged with offline matches."""
    results = await resolver.search(q)
    return [SearchResultResponse.model_validate(r) for r in results]


@router.get("/isin/{code}", response_model=SearchResultResponse)
async def lookup_isin(code: str, resolver: QuoteResolver = Depends(get_resolver)):
    """Find the security for an ISIN."""
    result = await resolver.lookup_isin(code)
    if result is None:
        raise NotFoundError("Security", code)
    return SearchResultResponse.model_validate(result)


@router.get("/status", response_model=ProviderStatusResponse)
async def provider_status(resolver: QuoteResolver = Depends(get_resolver)):
    """Configured providers and network reachability."""
    status = await resolver.status()
    return ProviderStatusResponse.model_validate(status)
