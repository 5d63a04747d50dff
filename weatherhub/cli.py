"""CLI entry point for the weather consensus service."""

import argparse
import asyncio
import logging

from weatherhub.aggregation.aggregator import WeatherAggregator
from weatherhub.config.env import WeatherEnv
from weatherhub.config.loader import ConfigError, load_config, redacted_json
from weatherhub.config.schema import AppConfig
from weatherhub.models.weather import WeatherAPIResponse
from weatherhub.providers.registry import ADAPTERS
from weatherhub.reporting.formatters import (
    format_consensus_text,
    format_failure_text,
    format_report_json,
    format_weather_text,
)
from weatherhub.server import build_aggregator, create_app

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherhub",
        description="Multi-provider weather consensus service",
    )
    parser.add_argument(
        "--config", default=None, help="Config YAML path (defaults built in)"
    )

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_p = sub.add_parser("serve", help="Run the HTTP API")
    serve_p.add_argument("--host", default=None)
    serve_p.add_argument("--port", type=int, default=None)

    # fetch
    fetch_p = sub.add_parser("fetch", help="Fetch weather once and print it")
    fetch_p.add_argument("--lat", type=float)
    fetch_p.add_argument("--lon", type=float)
    fetch_p.add_argument("--zip", dest="zip_code")
    fetch_p.add_argument("--name")
    fetch_p.add_argument("--country", default="US")
    fetch_p.add_argument(
        "--source", help="Show one provider (e.g. OpenWeather) instead of consensus"
    )
    fetch_p.add_argument("--fahrenheit", action="store_true", help="Imperial units")
    fetch_p.add_argument("--json", action="store_true", help="Print raw JSON")

    # config show
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display effective config (keys masked)")

    # providers
    sub.add_parser("providers", help="List providers and their status")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    env = WeatherEnv()
    logging.basicConfig(
        level=env.weatherhub_log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config, env)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    if args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "fetch":
        return _cmd_fetch(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    elif args.command == "providers":
        return _cmd_providers(config)
    else:
        parser.print_help()
        return 1


def _cmd_serve(config: AppConfig, args) -> int:
    import uvicorn

    host = args.host or config.server.host
    port = args.port or config.server.port
    logger.info("Weather API server starting on %s:%d", host, port)
    uvicorn.run(create_app(config), host=host, port=port)
    return 0


def _cmd_fetch(config: AppConfig, args) -> int:
    has_coords = args.lat is not None and args.lon is not None
    if not (has_coords or args.zip_code or args.name):
        print("Error: give --lat and --lon, --zip, or --name")
        return 1

    aggregator = build_aggregator(config)
    try:
        responses = asyncio.run(_collect(aggregator, args))
    except Exception as e:
        logger.exception("Weather fetch failed")
        print(f"Error: {e}")
        return 1
    consensus = aggregator.calculate_consensus(responses)

    if args.json:
        print(format_report_json(responses, consensus))
        return 0 if consensus else 1

    if args.source:
        return _print_source(responses, args.source, args.fahrenheit)

    if consensus is None:
        for r in responses:
            print(format_failure_text(r))
        return 1
    print(format_consensus_text(consensus, fahrenheit=args.fahrenheit))
    for r in responses:
        if not r.success:
            print(format_failure_text(r))
    return 0


async def _collect(aggregator: WeatherAggregator, args) -> list[WeatherAPIResponse]:
    if args.lat is not None and args.lon is not None:
        return await aggregator.get_weather_by_coordinates(args.lat, args.lon)
    if args.zip_code:
        return await aggregator.get_weather_by_zip_code(args.zip_code, args.country)
    return await aggregator.get_weather_by_name(args.name, args.country)


def _print_source(responses: list[WeatherAPIResponse], source: str, fahrenheit: bool) -> int:
    for r in responses:
        if r.source.lower() == source.lower():
            if r.success and r.data is not None:
                print(format_weather_text(r.data, fahrenheit=fahrenheit))
                return 0
            print(format_failure_text(r))
            return 1
    active = ", ".join(r.source for r in responses)
    print(f"Error: {source} is not active (active: {active})")
    return 1


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(redacted_json(config))
        return 0
    print("Use: config show")
    return 1


def _cmd_providers(config: AppConfig) -> int:
    for name, adapter_cls in ADAPTERS.items():
        provider = config.provider(name)
        enabled = provider is not None and provider.enabled
        keyed = provider is not None and bool(provider.api_key)
        print(
            f"{adapter_cls.source:<12} enabled={'yes' if enabled else 'no':<3} "
            f"api_key={'set' if keyed else 'missing'}"
        )
    return 0
