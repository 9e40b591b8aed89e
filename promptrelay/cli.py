from __future__ import annotations
import logging
import typer
import httpx
from rich.console import Console
from rich.table import Table
from typing import Optional

from promptrelay.client import Client
from promptrelay.config import ClientSettings, Platform, load_client_settings
from promptrelay.llm.providers.base import LLMProviderError
from promptrelay.log import setup_logging

app = typer.Typer(add_completion=False)
console = Console()
err_console = Console(stderr=True)


def _mask(secret: str) -> str:
    if len(secret) <= 8:
        return "*" * len(secret)
    return secret[:4] + "*" * (len(secret) - 8) + secret[-4:]


@app.command()
def send(
    prompt: str = typer.Argument(..., help="Prompt text to send"),
    platform: Optional[Platform] = typer.Option(None, help="Provider: openai or gemini"),
    api_key: Optional[str] = typer.Option(None, help="API key. Falls back to OPENAI_API_KEY / GEMINI_API_KEY."),
    base_url: Optional[str] = typer.Option(None, help="Override the provider endpoint."),
    proxy: Optional[str] = typer.Option(None, help="Route requests through this proxy URL."),
    model: Optional[str] = typer.Option(None, help="Model name. Empty uses the provider default."),
    config: Optional[str] = typer.Option(None, help="YAML client config. Flags override its values."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    setup_logging("promptrelay", logging.DEBUG if verbose else logging.WARNING)

    try:
        data = load_client_settings(config).model_dump() if config else {}
        overrides = {"platform": platform, "api_key": api_key, "base_url": base_url, "proxy": proxy, "model": model}
        data.update({k: v for k, v in overrides.items() if v is not None})
        if "platform" not in data:
            raise typer.BadParameter("--platform is required when no --config is given")
        cfg = ClientSettings.model_validate(data).to_config()
        text = Client.from_config(cfg).send_message(prompt)
    except (LLMProviderError, httpx.HTTPError, ValueError, OSError) as e:
        err_console.print(f"[red]FAIL[/red] {e}")
        raise typer.Exit(code=1)

    console.print(text, markup=False, highlight=False)


@app.command("check-config")
def check_config(path: str = typer.Argument(..., help="Path to a YAML client config")):
    try:
        cfg = load_client_settings(path).to_config()
    except (LLMProviderError, ValueError, OSError) as e:
        console.print(f"[red]FAIL[/red] {path}: {e}")
        raise typer.Exit(code=1)

    table = Table(title=f"promptrelay client ({path})")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("platform", Platform(cfg.platform).value)
    table.add_row("api_key", _mask(cfg.api_key))
    table.add_row("base_url", cfg.base_url or "(provider default)")
    table.add_row("proxy", cfg.proxy or "(direct)")
    table.add_row("model", cfg.resolved_model())
    console.print(table)


if __name__ == "__main__":
    app()
