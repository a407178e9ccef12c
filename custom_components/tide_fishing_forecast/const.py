DOMAIN = "tide_fishing_forecast"
DEFAULT_NAME = "Tide Fishing Forecast"

# ============================================================================
# CONFIGURATION KEYS
# ============================================================================

CONF_NAME = "name"
CONF_LATITUDE = "latitude"
CONF_LONGITUDE = "longitude"
CONF_TIMEZONE = "timezone"
CONF_TIDE_STATION = "tide_station"
CONF_BUOY = "buoy"
CONF_CRUISE_SPEED = "cruise_speed"
CONF_MODES = "modes"
CONF_FORECAST_DAYS = "forecast_days"

# Mode options
MODE_OFFSHORE = "offshore"
MODE_INSHORE = "inshore"

# ============================================================================
# REFERENCE LOCATION (Chatham, MA)
# ============================================================================

DEFAULT_LATITUDE = 41.6823
DEFAULT_LONGITUDE = -69.9597
DEFAULT_TIMEZONE = "America/New_York"

# NOAA station ids
DEFAULT_TIDE_STATION = "8447435"  # Chatham (Lydia Cove)
DEFAULT_BUOY = "44020"  # Nantucket Sound, closest buoy reporting water temp

# Boat cruising speed in knots
DEFAULT_CRUISE_SPEED_KTS = 25.0

DEFAULT_FORECAST_DAYS = 7

# ============================================================================
# SCORING CONSTANTS
# ============================================================================

# Ideal offshore (bluefin) water temperature range, deg F
IDEAL_TEMP_MIN_F = 55.0
IDEAL_TEMP_MAX_F = 63.0
TEMP_FALLOFF_F = 10.0
UNKNOWN_TEMP_SCORE = 0.5

# Tidal range anchors, feet (regional mean ~4, spring ~6, neap ~2.5)
TIDE_RANGE_MIN_FT = 2.0
TIDE_RANGE_MAX_FT = 6.0

# Slack score falls to zero this far from an extremum
SLACK_HORIZON_HOURS = 3.0

# Time-of-day curve
DAWN_LEAD_MINUTES = 30
DAWN_PEAK_HOURS_AFTER_SUNRISE = 2.0
DUSK_PEAK_HOURS_BEFORE_SUNSET = 2.0
DAWN_START_SCORE = 0.8
DAWN_PEAK_SCORE = 1.0
DAWN_END_SCORE = 0.7
DUSK_START_SCORE = 0.5
DUSK_END_SCORE = 0.8
MIDDAY_SCORE = 0.2
NIGHT_SCORE = 0.1

# Factor names as stored on HourlyScore
FACTOR_SLACK_TIDE = "slack_tide"
FACTOR_TIME_OF_DAY = "time_of_day"
FACTOR_SEASONAL = "seasonal"
FACTOR_MOON_PHASE = "moon_phase"
FACTOR_WATER_TEMP = "water_temp"
FACTOR_CURRENT_FLOW = "current_flow"
FACTOR_TIDE_RANGE = "tide_range"

# Human readable labels, in tie-break order
FACTOR_LABELS = {
    FACTOR_SLACK_TIDE: "slack tide",
    FACTOR_TIME_OF_DAY: "time of day",
    FACTOR_SEASONAL: "season",
    FACTOR_MOON_PHASE: "moon phase",
    FACTOR_WATER_TEMP: "water temp",
    FACTOR_CURRENT_FLOW: "current flow",
    FACTOR_TIDE_RANGE: "tidal range",
}

# Fixed per-mode weights; each set sums to 1.0
MODE_WEIGHTS = {
    MODE_OFFSHORE: {
        FACTOR_SLACK_TIDE: 0.3,
        FACTOR_TIME_OF_DAY: 0.3,
        FACTOR_SEASONAL: 0.2,
        FACTOR_MOON_PHASE: 0.1,
        FACTOR_WATER_TEMP: 0.1,
    },
    MODE_INSHORE: {
        FACTOR_CURRENT_FLOW: 0.35,
        FACTOR_TIDE_RANGE: 0.2,
        FACTOR_TIME_OF_DAY: 0.25,
        FACTOR_MOON_PHASE: 0.1,
        FACTOR_SEASONAL: 0.1,
    },
}

# Window detection
WINDOW_THRESHOLD = 0.5
HIGHLIGHT_THRESHOLD = 0.6
MAX_WINDOWS = 3

# Overall rating: weight of the peak hourly score vs the seasonal score
RATING_PEAK_WEIGHT = 0.7
RATING_SEASONAL_WEIGHT = 0.3
# (minimum combined score, rating), checked top-down
RATING_BANDS = (
    (0.8, 5),
    (0.65, 4),
    (0.5, 3),
    (0.3, 2),
)

# Arrive on the grounds this long before sunrise
DOCK_LEAD_MINUTES = 15

# ============================================================================
# NOAA ENDPOINTS
# ============================================================================

NOAA_TIDES_URL = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
NDBC_REALTIME_URL = "https://www.ndbc.noaa.gov/data/realtime2/{buoy}.txt"
REQUEST_TIMEOUT_SECONDS = 15

# Sensor names
SENSOR_FORECAST = "fishing_forecast"
