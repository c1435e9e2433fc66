from pydantic import BaseModel

from app.schemas.irradiance import SiteRequest
from app.schemas.sizing import GridTiedSystemIn, OffGridSystemIn


class ReportRequest(BaseModel):
    """Site to optimise plus optional sizing sections.

    Sizing sections take their solar resource from the optimisation:
    worst-month Gi for off-grid, annual yield for grid-tied.
    """

    site: SiteRequest
    off_grid: OffGridSystemIn | None = None
    grid_tied: GridTiedSystemIn | None = None
