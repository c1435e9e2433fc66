"""PDF report download endpoint."""
import re

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from app.core.deps import CountryLookup, get_country_lookup, get_irradiance_source
from app.core.rate_limit import report_limiter
from app.schemas.report import ReportRequest
from app.services.irradiance_service import build_report
from engine.weather import IrradianceSource

router = APIRouter()


def _filename(body: ReportRequest) -> str:
    stem = body.site.site_name or f"{body.site.latitude:.4f}_{body.site.longitude:.4f}"
    stem = re.sub(r"[^A-Za-z0-9_.-]+", "_", stem).strip("_") or "site"
    return f"solarcalc_{stem}.pdf"


@router.post(
    "/irradiance",
    summary="Download irradiance report",
    description="Run the tilt optimisation (and optional sizing) and return a PDF report.",
)
async def irradiance_report(
    body: ReportRequest,
    request: Request,
    source: IrradianceSource = Depends(get_irradiance_source),
    country_lookup: CountryLookup = Depends(get_country_lookup),
):
    report_limiter.check(request)
    try:
        pdf_buffer = await build_report(body, source, country_lookup)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{_filename(body)}"'},
    )
