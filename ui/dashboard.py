"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()


class RequestInfo:
    """Info about a single proxied request."""

    def __init__(self, method: str, target: str, status: int, timestamp: datetime):
        self.method = method
        self.target = target[:80] + "..." if len(target) > 80 else target
        self.status = status
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent proxied requests and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 10
        self._request_count = {"proxied": 0, "fallback": 0, "errors": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_proxied(self, method: str, target: str, status: int) -> None:
        """Log a request relayed from its target."""
        with self._lock:
            self._request_count["proxied"] += 1
            info = RequestInfo(method, target, status, datetime.now())
            self._recent.insert(0, info)
            self._recent = self._recent[: self._max_recent]
            self._refresh()
            write_cli_log("PROXY", target, method=method, status=status)

    def log_fallback(self, path: str) -> None:
        """Log a request that carried no target."""
        with self._lock:
            self._request_count["fallback"] += 1
            self._refresh()
            write_cli_log("FALLBACK", path)

    def log_error(self, target: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._request_count["errors"] += 1
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{status} {target[:40]}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], target=target, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("PROXX", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Proxied: {self._request_count['proxied']}", style="green")
        stats.append("  |  ")
        stats.append(f"Fallback: {self._request_count['fallback']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Errors: {self._request_count['errors']}", style="red")
        stats.append("  |  ")
        stats.append(f"Mode: {self.config.routing.mode}", style="dim")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Status", width=6)
            table.add_column("Target", ratio=1)

            for info in self._recent:
                style = "green" if info.status < 400 else "yellow"
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    Text(str(info.status), style=style),
                    info.target,
                )
            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[green]Recent Requests[/green]", border_style="green")

    def _build_footer(self) -> Panel:
        """Build footer with errors and usage hint."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(self._usage_hint(), style="dim")

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")

    def _usage_hint(self) -> str:
        base = f"http://{self.config.proxy.host}:{self.config.proxy.port}"
        if self.config.routing.mode == "prefix":
            return f"Open {base}{self.config.routing.marker}<encoded-url>"
        return f"Open {base}/<encoded-url>"


class HeadlessLogger:
    """RequestLogger writing only to the CLI log file (no live display)."""

    def log_proxied(self, method: str, target: str, status: int) -> None:
        write_cli_log("PROXY", target, method=method, status=status)

    def log_fallback(self, path: str) -> None:
        write_cli_log("FALLBACK", path)

    def log_error(self, target: str, status: int, message: str) -> None:
        write_cli_log("ERROR", message[:200], target=target, status=status)
