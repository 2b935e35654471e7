"""Command line entry point: `github-clickup-gateway` / `python cli.py`"""

import argparse
import logging
import traceback

from rich.console import Console

import settings
from cli.status_display import show_startup_status

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-clickup-gateway",
        description="Multi-tenant MCP gateway for GitHub and ClickUp",
    )
    parser.add_argument("--debug", "-d", action="store_true", help="Log at DEBUG level to the console and gateway_debug.log")
    parser.add_argument("--bind", "-b", default=None, help=f"Address to listen on (config: {settings.BIND_ADDRESS})")
    parser.add_argument("--port", "-p", type=int, default=None, help=f"Port to listen on (config: {settings.PORT})")
    return parser


def main():
    args = build_parser().parse_args()

    if not args.debug:
        logging.basicConfig(
            level=settings.LOG_LEVEL.upper(),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        logging.getLogger("httpx").setLevel(logging.WARNING)

    # Imported after logging is configured so app construction is logged
    from gateway import GatewayServer

    try:
        server = GatewayServer(debug=args.debug, bind_address=args.bind, port=args.port)
        show_startup_status(console, server.bind_address, server.port)
        server.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Gateway stopped[/yellow]")
    except Exception as e:
        console.print(f"\n[red]Gateway failed to start:[/red] {e}")
        if args.debug:
            traceback.print_exc()
        raise SystemExit(1)


if __name__ == "__main__":
    main()
