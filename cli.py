"""CLI entry point for proxx."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, Config, load_config
from ui.dashboard import Dashboard, HeadlessLogger
from ui.log_utils import write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()
    args = sys.argv[1:]
    headless = False

    # Handle CLI arguments
    while args:
        arg = args.pop(0)

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--no-dashboard":
            headless = True
            continue

        if arg in ("--mode", "--port") and not args:
            console.print(f"[red][ERROR][/red] {arg} needs a value")
            sys.exit(2)

        if arg == "--mode":
            mode = args.pop(0)
            if mode not in ("prefix", "bare"):
                console.print(f"[red][ERROR][/red] Unknown mode: {mode} (use prefix or bare)")
                sys.exit(2)
            config.routing.mode = mode
            continue

        if arg == "--port":
            value = args.pop(0)
            if not value.isdigit():
                console.print(f"[red][ERROR][/red] Invalid port: {value}")
                sys.exit(2)
            config.proxy.port = int(value)
            continue

        console.print(f"[red][ERROR][/red] Unknown argument: {arg}")
        _print_help()
        sys.exit(2)

    _serve(config, headless)


def _serve(config: Config, headless: bool) -> None:
    import uvicorn

    dashboard = None if headless else Dashboard(config)
    logger = dashboard or HeadlessLogger()
    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="info" if headless else "warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log(
        "STARTUP", "Proxy started", port=config.proxy.port, mode=config.routing.mode
    )
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]PROXX[/bold cyan]

Forward proxy: the request path carries a percent-encoded target URL.
Responses come back without CSP / X-Frame-Options and with
Access-Control-Allow-Origin: *.

[bold]Usage:[/bold]
    proxx                      Start with live dashboard
    proxx --no-dashboard       Start without the dashboard
    proxx --mode prefix|bare   Override the path mode for this run
    proxx --port N             Override the listen port for this run
    proxx --config             Show config location
    proxx --help               Show this help

[bold]Path modes:[/bold]
    prefix   /proxx/https%3A%2F%2Fexample.com
    bare     /https%3A%2F%2Fexample.com
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
