"""CLI entry point for local service provider discovery."""

import argparse
import json
import logging
import sys
from datetime import datetime

from src.core.config import Settings
from src.core.contact import whatsapp_url
from src.core.db import get_cities, get_provider, init_db, load_providers
from src.core.schemas import DiscoveryFilters, DiscoveryResult
from src.core.seed import apply_seed, load_seed_file
from src.discovery.location import parse_location_cookie, resolve_location
from src.discovery.query import discover_providers, page_window
from src.hours.business_hours import is_provider_open_now, weekly_schedule


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Find and contact local service providers",
    )
    parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- search subcommand (default) ---
    search_parser = subparsers.add_parser("search", help="Search active providers")
    search_parser.add_argument("--query", "-q", help="Text to match in name, description or category")
    search_parser.add_argument("--category", help="Category or category group slug")
    search_parser.add_argument("--city", help="Exact city (ignored when --lat/--lng are given)")
    search_parser.add_argument("--lat", type=float, help="Latitude of the search origin")
    search_parser.add_argument("--lng", type=float, help="Longitude of the search origin")
    search_parser.add_argument("--radius", type=float, help="Search radius in km")
    search_parser.add_argument(
        "--location",
        help="Saved location cookie value, used when no explicit location is given",
    )
    search_parser.add_argument(
        "--order",
        choices=["recent", "rating", "distance"],
        default="recent",
        help="Result ordering (default: recent)",
    )
    search_parser.add_argument("--page", type=int, default=1, help="1-indexed page (default: 1)")
    search_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )

    # --- cities subcommand ---
    subparsers.add_parser("cities", help="List cities with active providers")

    # --- seed subcommand ---
    seed_parser = subparsers.add_parser("seed", help="Load providers from a seed YAML file")
    seed_parser.add_argument("--file", required=True, help="Path to seed YAML file")

    # --- hours subcommand ---
    hours_parser = subparsers.add_parser("hours", help="Show a provider's weekly hours")
    hours_parser.add_argument("--provider", required=True, help="Provider id")

    args = parser.parse_args(argv)

    if args.command is None:
        args = parser.parse_args([*(argv if argv is not None else sys.argv[1:]), "search"])

    return args


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(path: str) -> Settings:
    """Load settings, falling back to defaults when the default file is absent."""
    try:
        return Settings.from_yaml(path)
    except FileNotFoundError:
        if path != "config/settings.yaml":
            raise
        logging.getLogger(__name__).info("No config at %s, using defaults", path)
        return Settings()


def build_filters(args: argparse.Namespace, settings: Settings) -> DiscoveryFilters:
    """Turn CLI arguments into validated discovery filters."""
    if args.radius is not None and not 0 < args.radius <= settings.discovery.max_radius_km:
        msg = f"--radius must be in (0, {settings.discovery.max_radius_km}]"
        raise ValueError(msg)
    location = resolve_location(
        latitude=args.lat,
        longitude=args.lng,
        radius_km=args.radius,
        city=args.city,
        saved=parse_location_cookie(args.location),
        default_radius_km=settings.discovery.default_radius_km,
    )
    return DiscoveryFilters(
        search=args.query,
        category_slug=args.category,
        city=location.city,
        latitude=location.latitude,
        longitude=location.longitude,
        radius_km=location.radius_km or settings.discovery.default_radius_km,
        order_by=args.order,
        page=max(1, args.page),
        page_size=settings.discovery.page_size,
    )


def export_results_json(result: DiscoveryResult, settings: Settings, now: datetime | None = None) -> str:
    """Export a discovery page as a JSON string."""
    data = []
    for r in result.results:
        p = r.provider
        status = is_provider_open_now(p.business_hours, now, settings.business_hours.timezone)
        data.append({
            "id": p.id,
            "name": p.name,
            "city": p.city,
            "categories": [c.slug for c in p.categories],
            "is_verified": p.is_verified,
            "average_rating": p.average_rating,
            "review_count": p.review_count,
            "distance_km": r.distance_km,
            "is_open": status.is_open,
            "open_label": status.label,
            "whatsapp_url": (
                whatsapp_url(p.whatsapp, p.name, country_code=settings.contact.country_code)
                if p.whatsapp
                else None
            ),
        })
    return json.dumps({"total": result.total, "results": data}, indent=2, ensure_ascii=False)


def cmd_search(args: argparse.Namespace, settings: Settings) -> None:
    """Handle search subcommand."""
    filters = build_filters(args, settings)
    conn = init_db(settings.database.path)
    try:
        providers = load_providers(conn)
    finally:
        conn.close()

    result = discover_providers(providers, filters)

    if args.export == "json":
        print(export_results_json(result, settings))
        return

    page_size = settings.discovery.page_size
    total_pages = result.total_pages(page_size)
    print(f"{result.total} providers found")
    for r in result.results:
        p = r.provider
        rating = f"{p.average_rating:.1f} ({p.review_count})" if p.average_rating is not None else "new"
        distance = f" {r.distance_km:.1f} km" if r.distance_km is not None else ""
        verified = " [verified]" if p.is_verified else ""
        status = is_provider_open_now(p.business_hours, tz=settings.business_hours.timezone)
        label = f" - {status.label}" if status.label else ""
        print(f"  {p.name}{verified} | {p.city}{distance} | {rating}{label}")

    if total_pages > 1:
        pages = " ".join(
            "..." if n is None else (f"[{n}]" if n == filters.page else str(n))
            for n in page_window(filters.page or 1, total_pages)
        )
        print(f"Pages: {pages}")


def cmd_cities(settings: Settings) -> None:
    """Handle cities subcommand."""
    conn = init_db(settings.database.path)
    try:
        for city in get_cities(conn):
            print(city)
    finally:
        conn.close()


def cmd_seed(args: argparse.Namespace, settings: Settings) -> None:
    """Handle seed subcommand."""
    seed = load_seed_file(args.file)
    conn = init_db(settings.database.path)
    try:
        count = apply_seed(conn, seed)
    finally:
        conn.close()
    print(f"Seeded {count} providers into {settings.database.path}")


def cmd_hours(args: argparse.Namespace, settings: Settings) -> None:
    """Handle hours subcommand."""
    conn = init_db(settings.database.path)
    try:
        provider = get_provider(conn, args.provider)
    finally:
        conn.close()
    if provider is None:
        msg = f"Provider not found: {args.provider}"
        raise ValueError(msg)

    tz = settings.business_hours.timezone
    status = is_provider_open_now(provider.business_hours, tz=tz)
    print(f"{provider.name}: {status.label or 'No business hours'}")
    for row in weekly_schedule(provider.business_hours, tz=tz):
        marker = "*" if row.is_today else " "
        print(f" {marker} {row.day.label:<10} {row.hours}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "cities":
            cmd_cities(settings)
        elif args.command == "seed":
            cmd_seed(args, settings)
        elif args.command == "hours":
            cmd_hours(args, settings)
        else:
            cmd_search(args, settings)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
