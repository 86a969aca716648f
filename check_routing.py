#!/usr/bin/env python3
"""Manual script to verify routing engine connectivity."""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from evacnav.config import settings
from evacnav.models.domain import Position
from evacnav.services.routing.valhalla_client import RoutingClient, check_health


def main():
    print("=" * 60)
    print("Routing Engine Connection Test")
    print("=" * 60)
    print()

    print("1. Checking routing configuration...")
    base_url = settings.resolved_routing_base_url
    if not base_url:
        print("   [ERROR] Routing base URL is not configured")
        print("   Please set EVAC_ROUTING_BASE_URL or EVAC_BACKEND_BASE_URL in your .env file")
        return 1
    print(f"   [OK] Routing Base URL: {base_url}")
    print(f"   [OK] Costing: {settings.routing_costing}")
    print()

    print("2. Testing routing health check...")
    if not check_health():
        print("   [ERROR] Routing engine is not responding")
        return 1
    print("   [OK] Routing engine is reachable")
    print()

    print("3. Testing route-with-obstacles request...")
    try:
        client = RoutingClient()
        # Two points in Kobe
        trip = client.route_with_obstacles(
            Position(lat=34.6901, lon=135.1955),
            Position(lat=34.6851, lon=135.1870),
        )
        print(f"   [OK] Route length: {trip.summary.length_km:.3f} km, time: {trip.summary.time_s:.0f} s")
        print(f"   [OK] Obstacles along route: {len(trip.obstacles)}")
    except Exception as e:
        print(f"   [ERROR] Error during route request: {e}")
        return 1
    print()

    print("=" * 60)
    print("[SUCCESS] Routing engine is connected and working!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
