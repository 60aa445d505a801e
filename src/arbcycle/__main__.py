"""
Entry point for the cycle scanner.

Usage:
    python -m arbcycle
    arbcycle  # if installed via pip
"""

import asyncio
import sys


# Try to use uvloop for better performance
try:
    import uvloop

    uvloop.install()
    UVLOOP_ENABLED = True
except ImportError:
    UVLOOP_ENABLED = False


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success).
    """
    from arbcycle import __version__
    from arbcycle.config.settings import get_settings
    from arbcycle.core.engine import ScanEngine

    # Print banner
    print(
        f"""
╔═══════════════════════════════════════════════════════════════╗
║     ARBITRAGE CYCLE SCANNER v{__version__:<27}      ║
║                                                               ║
║     Fixed-Point Rate Graph Search                             ║
╚═══════════════════════════════════════════════════════════════╝
    """
    )

    # Load settings
    try:
        settings = get_settings()
    except Exception as e:
        print(f"Configuration error: {e}")
        print("\nSet DEMO_MODE=true to run without live services, or provide a .env with:")
        print("  TOKENS_FILE=tokens.csv")
        print("  QUOTE_API_URL=http://localhost:8080")
        print("  CMC_API_KEY=your_api_key")
        return 1

    # Print configuration summary
    print("Configuration:")
    print(f"  Mode:           {'DEMO' if settings.demo_mode else 'LIVE QUOTES'}")
    if not settings.demo_mode:
        print(f"  Tokens file:    {settings.tokens_file}")
        print(f"  Quote API:      {settings.quote_api_url}")
        print(f"  USD prices:     {'CoinMarketCap' if settings.uses_live_prices else 'Tokens file'}")
    print(f"  Hop budget:     {settings.hop_budget} (max {settings.max_route_length} trades)")
    print(f"  Notional:       ${settings.notional_usd:,.2f}")
    print(f"  Scans:          {settings.scan_count or 'until interrupted'}")
    print(f"  Scan interval:  {settings.scan_interval_s:.1f}s")
    print(f"  uvloop:         {'Enabled' if UVLOOP_ENABLED else 'Disabled'}")
    print()

    # Run the engine
    async def run_engine() -> int:
        engine = ScanEngine(settings)

        try:
            await engine.setup()
            await engine.run()
            return 0

        except KeyboardInterrupt:
            print("\nInterrupted by user")
            return 0

        except Exception as e:
            print(f"\nFatal error: {e}")
            import traceback

            traceback.print_exc()
            return 1

        finally:
            await engine.shutdown()

    return asyncio.run(run_engine())


if __name__ == "__main__":
    sys.exit(main())
