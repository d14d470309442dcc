"""CLI entry point for the weather display."""

import argparse
import asyncio
import logging

import httpx

from meteo.app.view_model import WeatherViewModel, build_view_model
from meteo.config.loader import (
    ConfigError,
    get_config_value,
    load_config,
    resolve_api_key,
    save_config,
    set_config_value,
)
from meteo.config.schema import MeteoConfig
from meteo.display.formatters import (
    format_current_text,
    format_forecast_text,
    format_snapshot_json,
)
from meteo.ingest.errors import MeteoError

DEFAULT_CONFIG = "ops/configs/default.yaml"
MAX_FORECAST_WINDOW = 40


def _window_size(value: str) -> int:
    """argparse type for --hours: an integer in [1, MAX_FORECAST_WINDOW]."""
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if not 1 <= size <= MAX_FORECAST_WINDOW:
        raise argparse.ArgumentTypeError(
            f"must be between 1 and {MAX_FORECAST_WINDOW}, got {size}"
        )
    return size


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="meteo",
        description="Current weather and hourly forecast for a city",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )

    sub = parser.add_subparsers(dest="command")

    # current / forecast / show
    current_p = sub.add_parser("current", help="Show current conditions")
    current_p.add_argument("--city", help="City name (default: config)")

    forecast_p = sub.add_parser("forecast", help="Show the hourly forecast")
    forecast_p.add_argument("--city", help="City name (default: config)")
    forecast_p.add_argument(
        "--hours", type=_window_size, help="Number of forecast entries to show"
    )

    show_p = sub.add_parser("show", help="Fetch both and show the full screen")
    show_p.add_argument("--city", help="City name (default: config)")
    show_p.add_argument("--json", action="store_true", help="JSON output")

    # cities
    sub.add_parser("cities", help="List selectable cities")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command in ("current", "forecast", "show"):
        try:
            api_key = resolve_api_key(config)
        except ConfigError as e:
            print(f"Error: {e}")
            return 1
        return asyncio.run(_run_fetch(config, api_key, args))
    elif args.command == "cities":
        return _cmd_cities(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


async def _run_fetch(config: MeteoConfig, api_key: str, args) -> int:
    async with httpx.AsyncClient(timeout=config.api.timeout_seconds) as http:
        vm = build_view_model(config, http, api_key)
        city = args.city or config.default_city
        if args.command == "current":
            return await _cmd_current(vm, city)
        elif args.command == "forecast":
            hours = (
                args.hours if args.hours is not None
                else config.display.forecast_window
            )
            return await _cmd_forecast(vm, city, hours)
        return await _cmd_show(vm, city, config.display.forecast_window, args.json)


async def _cmd_current(vm: WeatherViewModel, city: str) -> int:
    try:
        weather = await vm.weather_client.fetch_current_weather(city)
    except MeteoError as e:
        print(f"Error: {e}")
        return 1
    print(format_current_text(weather))
    return 0


async def _cmd_forecast(vm: WeatherViewModel, city: str, hours: int) -> int:
    try:
        forecast = await vm.forecast_client.fetch_forecast(city)
    except MeteoError as e:
        print(f"Error: {e}")
        return 1
    print(format_forecast_text(forecast, hours))
    return 0


async def _cmd_show(
    vm: WeatherViewModel, city: str, hours: int, as_json: bool
) -> int:
    await vm.on_city_selected(city)
    if as_json:
        print(format_snapshot_json(vm.current_weather, vm.forecast, hours))
    else:
        if vm.current_weather is not None:
            print(format_current_text(vm.current_weather))
        else:
            print("Loading weather...")
        if vm.forecast is not None:
            print()
            print(format_forecast_text(vm.forecast, hours))
    if vm.last_error is not None:
        print(f"Error ({vm.last_error.slot}): {vm.last_error.error}")
        return 1
    return 0


def _cmd_cities(config: MeteoConfig) -> int:
    for city in config.cities:
        marker = "*" if city == config.default_city else " "
        print(f"{marker} {city}")
    return 0


def _cmd_config(config: MeteoConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
        except Exception as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key} = {get_config_value(new_config, key.strip())}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1
