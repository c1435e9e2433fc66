from pydantic import BaseModel, Field


class SiteRequest(BaseModel):
    latitude: float = Field(ge=-90, le=90, description="Site latitude in degrees, north positive")
    longitude: float = Field(ge=-180, le=180, description="Site longitude in degrees, east positive")
    representative_day: int = Field(
        default=15, ge=1, le=31,
        description="Day of month evaluated for every month; shorter months are skipped",
    )
    site_name: str | None = Field(default=None, max_length=255)

    model_config = {"allow_inf_nan": False}


class MonthlyIrradianceResponse(BaseModel):
    month: str
    days_in_month: int
    day_of_year: int
    declination_deg: float
    extraterrestrial_kwh: float
    global_horizontal_kwh: float
    clearness_index: float
    diffuse_kwh: float
    direct_kwh: float
    beam_transfer_factor: float
    direct_tilted_kwh: float
    diffuse_tilted_kwh: float
    reflected_kwh: float
    global_tilted_kwh: float


class TiltSweepPointResponse(BaseModel):
    tilt_deg: int
    annual_yield_mwh: float
    min_monthly_irradiance: float


class SkippedMonthResponse(BaseModel):
    month: str
    day_of_year: int
    reason: str


class OptimizeResponse(BaseModel):
    latitude: float
    longitude: float
    representative_day: int
    site_name: str | None = None
    country: str | None = None
    available: bool
    optimal_tilt_deg: int | None = Field(
        description="Null when fewer than the required number of months had data"
    )
    min_monthly_irradiance: float = Field(description="Worst-month Gi, kWh/m2/day (HSP)")
    annual_yield_mwh: float = Field(description="Annual tilted irradiation, MWh/m2/yr")
    annual_yield_kwh: float
    valid_months: int
    monthly: list[MonthlyIrradianceResponse] = []
    tilt_sweep: list[TiltSweepPointResponse] = []
    skipped_months: list[SkippedMonthResponse] = []
