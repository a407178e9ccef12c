"""Config flow for Tide Fishing Forecast integration."""
from __future__ import annotations
import logging
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import voluptuous as vol
from homeassistant import config_entries
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector
from .const import (
    DOMAIN,
    CONF_NAME,
    CONF_LATITUDE,
    CONF_LONGITUDE,
    CONF_TIMEZONE,
    CONF_TIDE_STATION,
    CONF_BUOY,
    CONF_CRUISE_SPEED,
    CONF_MODES,
    CONF_FORECAST_DAYS,
    DEFAULT_NAME,
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    DEFAULT_TIMEZONE,
    DEFAULT_TIDE_STATION,
    DEFAULT_BUOY,
    DEFAULT_CRUISE_SPEED_KTS,
    DEFAULT_FORECAST_DAYS,
    MODE_OFFSHORE,
    MODE_INSHORE,
)

_LOGGER = logging.getLogger(__name__)


def validate_user_input(user_input: dict[str, Any]) -> dict[str, str]:
    """Return a field -> error key mapping; empty when the input is usable."""
    errors: dict[str, str] = {}
    try:
        lat = float(user_input[CONF_LATITUDE])
        lon = float(user_input[CONF_LONGITUDE])
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            errors["base"] = "invalid_coordinates"
    except (ValueError, KeyError, TypeError):
        errors["base"] = "invalid_coordinates"

    try:
        ZoneInfo(str(user_input.get(CONF_TIMEZONE, "")))
    except (ZoneInfoNotFoundError, ValueError):
        errors[CONF_TIMEZONE] = "invalid_timezone"

    station = str(user_input.get(CONF_TIDE_STATION, "")).strip()
    if not station.isdigit():
        errors[CONF_TIDE_STATION] = "invalid_station"

    try:
        if float(user_input.get(CONF_CRUISE_SPEED, 0)) <= 0:
            errors[CONF_CRUISE_SPEED] = "invalid_cruise_speed"
    except (TypeError, ValueError):
        errors[CONF_CRUISE_SPEED] = "invalid_cruise_speed"

    if not user_input.get(CONF_MODES):
        errors[CONF_MODES] = "no_modes"

    return errors


class TideFishingForecastConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Tide Fishing Forecast."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        """Collect location, NOAA stations, boat speed and modes."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = validate_user_input(user_input)
            if not errors:
                station = str(user_input[CONF_TIDE_STATION]).strip()
                await self.async_set_unique_id(f"{DOMAIN}_{station}")
                self._abort_if_unique_id_configured()

                data = dict(user_input)
                data[CONF_TIDE_STATION] = station
                data[CONF_LATITUDE] = float(user_input[CONF_LATITUDE])
                data[CONF_LONGITUDE] = float(user_input[CONF_LONGITUDE])
                data[CONF_CRUISE_SPEED] = float(user_input[CONF_CRUISE_SPEED])
                data[CONF_FORECAST_DAYS] = int(user_input.get(CONF_FORECAST_DAYS, DEFAULT_FORECAST_DAYS))
                _LOGGER.debug("Creating entry for station %s with modes %s", station, data[CONF_MODES])
                return self.async_create_entry(title=data[CONF_NAME], data=data)

        return self.async_show_form(
            step_id="user",
            data_schema=self._get_user_schema(user_input),
            errors=errors,
        )

    @staticmethod
    def _get_user_schema(defaults: dict[str, Any] | None = None) -> vol.Schema:
        defaults = defaults or {}
        return vol.Schema({
            vol.Required(CONF_NAME, default=defaults.get(CONF_NAME, DEFAULT_NAME)): str,
            vol.Required(CONF_LATITUDE, default=defaults.get(CONF_LATITUDE, DEFAULT_LATITUDE)): vol.Coerce(float),
            vol.Required(CONF_LONGITUDE, default=defaults.get(CONF_LONGITUDE, DEFAULT_LONGITUDE)): vol.Coerce(float),
            vol.Required(CONF_TIMEZONE, default=defaults.get(CONF_TIMEZONE, DEFAULT_TIMEZONE)): str,
            vol.Required(CONF_TIDE_STATION, default=defaults.get(CONF_TIDE_STATION, DEFAULT_TIDE_STATION)): str,
            vol.Optional(CONF_BUOY, default=defaults.get(CONF_BUOY, DEFAULT_BUOY)): str,
            vol.Optional(
                CONF_CRUISE_SPEED, default=defaults.get(CONF_CRUISE_SPEED, DEFAULT_CRUISE_SPEED_KTS)
            ): vol.Coerce(float),
            vol.Optional(
                CONF_FORECAST_DAYS, default=defaults.get(CONF_FORECAST_DAYS, DEFAULT_FORECAST_DAYS)
            ): vol.All(vol.Coerce(int), vol.Range(min=1, max=14)),
            vol.Required(
                CONF_MODES, default=defaults.get(CONF_MODES, [MODE_OFFSHORE, MODE_INSHORE])
            ): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=[
                        {"value": MODE_OFFSHORE, "label": "🐟 Offshore (tuna / pelagic)"},
                        {"value": MODE_INSHORE, "label": "🎣 Inshore (rips / structure)"},
                    ],
                    multiple=True,
                    mode="list",
                )
            ),
        })
