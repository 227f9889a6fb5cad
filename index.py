import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import get_settings
from errors import InvalidDate, PrayerTimesError
from methods import AsrJuristic, available_methods, describe_isha, resolve_asr, resolve_method
from models import CalculationDate, GeoCoordinate, Prayer
from observability import setup_logging
from prayer_times import calculate_prayer_times
from schedule import apply_iqama, format_clock, labels, next_prayer, parse_clock, parse_iqama

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("Prayer Times API started")
    yield
    logger.info("Prayer Times API shutting down")


app = FastAPI(
    title="Prayer Times API",
    description="API service for calculating Islamic prayer times",
    version="2.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# ─── ERROR HANDLERS ─────────────────────────────────────────────

@app.exception_handler(PrayerTimesError)
async def prayer_times_error_handler(request: Request, exc: PrayerTimesError):
    logger.warning(
        f"{exc.code}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": "validation",
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in e["loc"]),
                        "message": e["msg"],
                        "type": e["type"],
                    }
                    for e in exc.errors()
                ],
            },
        },
    )


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    """Catch-all — never leaks internal details."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
            },
        },
    )


# ─── ROUTES ─────────────────────────────────────────────────────

@app.get("/")
def root():
    return {
        "service": "Prayer Times API",
        "status": "online",
        "endpoints": {
            "/api/timesForGPS": "Get prayer times for GPS coordinates",
            "/api/nextPrayer": "Get the next prayer after a local time",
            "/api/methods": "List calculation methods",
            "/api/health": "Liveness probe",
        },
    }


@app.get("/api/health")
def health():
    return {"status": "healthy"}


@app.get("/api/methods")
def methods():
    return {
        "methods": [
            {
                "id": entry.method.value,
                "name": entry.name,
                "fajrAngle": entry.fajr_angle,
                "isha": describe_isha(entry.isha),
            }
            for entry in available_methods()
        ],
        "asr": [juristic.value for juristic in AsrJuristic],
    }


def _calculation_date(date: str, timezone_offset: int) -> CalculationDate:
    try:
        day = datetime.strptime(date, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidDate(f"date must be YYYY-MM-DD, got {date!r}") from None
    return CalculationDate.from_date(day, timezone_offset)


@app.get("/api/timesForGPS")
def get_times_for_gps(
    lat: float,
    lng: float,
    date: str,
    days: int = 1,
    timezoneOffset: int = 0,  # Minutes east of UTC, e.g. 180 for UTC+3
    calculationMethod: str | None = None,
    asr: str | None = None,
    iqama: str | None = None,  # e.g. "fajr:20,isha:10"
    lang: str = "en",
):
    settings = get_settings()
    if not 1 <= days <= settings.max_days:
        raise PrayerTimesError(
            f"days must be between 1 and {settings.max_days}", "INVALID_RANGE", field="days",
        )
    coordinate = GeoCoordinate(lat, lng)
    method = resolve_method(calculationMethod or settings.default_method)
    juristic = resolve_asr(asr or settings.default_asr)
    offsets = parse_iqama(iqama) if iqama else None
    current = _calculation_date(date, timezoneOffset)

    logger.info(
        "Calculating prayer times",
        extra={
            "method": method.value, "latitude": lat, "longitude": lng,
            "date": date, "days": days,
        },
    )

    response_times = {}
    response_iqama = {}
    for i in range(days):
        if i:
            current = current.next_day()
        date_key = current.to_date().isoformat()
        times = calculate_prayer_times(coordinate, current, method, juristic)
        # [0]: Fajr, [1]: Sunrise, [2]: Dhuhr, [3]: Asr, [4]: Maghrib, [5]: Isha
        response_times[date_key] = [format_clock(m) for _, m in times.items()]
        if offsets is not None:
            shifted = apply_iqama(times, offsets)
            response_iqama[date_key] = [format_clock(m) for _, m in shifted.items()]

    body = {
        "method": method.value,
        "asr": juristic.value,
        "labels": list(labels(lang)),
        "times": response_times,
    }
    if offsets is not None:
        body["iqama"] = response_iqama
    return body


@app.get("/api/nextPrayer")
def get_next_prayer(
    lat: float,
    lng: float,
    date: str,
    time: str,
    timezoneOffset: int = 0,
    calculationMethod: str | None = None,
    asr: str | None = None,
    lang: str = "en",
):
    settings = get_settings()
    coordinate = GeoCoordinate(lat, lng)
    method = resolve_method(calculationMethod or settings.default_method)
    juristic = resolve_asr(asr or settings.default_asr)
    today = _calculation_date(date, timezoneOffset)
    try:
        now = parse_clock(time)
    except ValueError as e:
        raise InvalidDate(str(e), field="time") from None

    def times_on(days: int):
        try:
            day = today.shifted(days)
        except InvalidDate:
            return None  # edge of the calendar
        return calculate_prayer_times(coordinate, day, method, juristic)

    upcoming = next_prayer(
        times_on(0), now, tomorrow=times_on(1), yesterday=times_on(-1),
    )
    if upcoming is None:
        return {"prayer": None}

    names = labels(lang)
    try:
        on = today.shifted(upcoming.day_offset).to_date().isoformat()
    except InvalidDate:
        on = None
    return {
        "prayer": upcoming.prayer.value,
        "label": names[list(Prayer).index(upcoming.prayer)],
        "time": format_clock(upcoming.minutes),
        "date": on,
        "dayOffset": upcoming.day_offset,
    }
