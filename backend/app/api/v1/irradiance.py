from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.deps import CountryLookup, get_country_lookup, get_irradiance_source
from app.core.rate_limit import optimize_limiter
from app.schemas.irradiance import OptimizeResponse, SiteRequest
from app.services.irradiance_service import optimization_to_response, run_optimization
from engine.weather import IrradianceSource

router = APIRouter()


@router.post(
    "/optimize",
    response_model=OptimizeResponse,
    summary="Optimise panel tilt",
    description=(
        "Fetch daily global horizontal irradiation for one representative day per "
        "month, decompose it, and pick the tilt (0-90 deg, 5 deg steps) with the "
        "greatest annual irradiation. When fewer than the required number of months "
        "have data the response is still 200 with optimal_tilt_deg null."
    ),
)
async def optimize(
    body: SiteRequest,
    request: Request,
    source: IrradianceSource = Depends(get_irradiance_source),
    country_lookup: CountryLookup = Depends(get_country_lookup),
):
    optimize_limiter.check(request)
    try:
        result, country = await run_optimization(body, source, country_lookup)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return optimization_to_response(result, site_name=body.site_name, country=country)
