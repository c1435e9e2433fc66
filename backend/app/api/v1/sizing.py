from fastapi import APIRouter, HTTPException, status

from app.schemas.sizing import GridTiedRequest, GridTiedResponse, OffGridRequest, OffGridResponse
from app.services.irradiance_service import grid_tied_response, off_grid_response

router = APIRouter()


@router.post(
    "/off-grid",
    response_model=OffGridResponse,
    summary="Size an off-grid system",
    description="Array, battery bank, charge regulator, inverter and DC cabling from a consumption table.",
)
async def size_off_grid(body: OffGridRequest):
    try:
        return off_grid_response(body)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post(
    "/grid-tied",
    response_model=GridTiedResponse,
    summary="Size a grid-tied system",
    description="Array peak power, module count and inverter rating from annual consumption and yield.",
)
async def size_grid_tied(body: GridTiedRequest):
    try:
        return grid_tied_response(body)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
