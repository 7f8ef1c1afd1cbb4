import logging
import typer
from typing import Optional
from pathlib import Path
from .config import WizardSettings
from .log import setup_logger
from .storage.config_store import YamlConfigurationStore
from .wizard import SetupWizard
from .wizard.links import api_settings_url, sql_editor_url
from .exceptions import StorageError

app = typer.Typer(help="Connect the application to your own hosted database")

URL_OPTION = typer.Option("", "--url", "-u", envvar="DBSETUP_URL", help="Project URL (https://<ref>.supabase.co) or database URL")
KEY_OPTION = typer.Option("", "--key", "-k", envvar="DBSETUP_KEY", help="Public (anon) access key")
CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Path to settings file")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable verbose output")

class TyperNotifier:
    def success(self, message: str) -> None:
        typer.secho(f"✅ {message}", fg=typer.colors.GREEN)

    def info(self, message: str) -> None:
        typer.secho(f"ℹ️  {message}", fg=typer.colors.BLUE)

    def error(self, message: str) -> None:
        typer.secho(f"❌ {message}", fg=typer.colors.RED, err=True)

def _load_settings(config: Optional[Path], verbose: bool) -> WizardSettings:
    try:
        settings = WizardSettings.from_yaml(config) if config else WizardSettings()
        setup_logger(logging.DEBUG if verbose else settings.log_level)
    except Exception as e:
        typer.echo(f"Error loading config: {e}", err=True)
        raise typer.Exit(code=1)
    return settings

def _build_wizard(url: str, key: str, settings: WizardSettings) -> SetupWizard:
    wizard = SetupWizard(
        config_store=YamlConfigurationStore(settings.config_path),
        settings=settings,
        notifier=TyperNotifier(),
    )
    wizard.set_credentials(url, key)
    return wizard

def _echo_progress(wizard: SetupWizard) -> None:
    for line in wizard.progress:
        typer.echo(f"   {line}")

@app.command()
def test_conn(
    url: str = URL_OPTION,
    key: str = KEY_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Check that the store is reachable with the given credentials.
    """
    settings = _load_settings(config, verbose)
    wizard = _build_wizard(url, key, settings)

    outcome = wizard.test_connectivity()
    _echo_progress(wizard)
    if outcome.ok and verbose and outcome.connectivity:
        typer.echo(f"   Latency: {outcome.connectivity.latency_ms}ms")
    if not outcome.ok:
        raise typer.Exit(code=1)

@app.command()
def detect_schema(
    url: str = URL_OPTION,
    key: str = KEY_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    require_complete: bool = typer.Option(False, "--require-complete", help="Exit non-zero when tables are missing"),
    verbose: bool = VERBOSE_OPTION,
):
    """
    Detect which of the application's tables already exist.
    """
    settings = _load_settings(config, verbose)
    wizard = _build_wizard(url, key, settings)

    outcome = wizard.detect_schema()
    _echo_progress(wizard)
    if not outcome.ok:
        raise typer.Exit(code=1)

    status = outcome.schema_report.status
    typer.echo("\nSchema Detection Results:")
    for line in status.summary_lines():
        typer.echo(f"  {line}")
    if not status.is_complete:
        typer.echo(f"  SQL editor: {sql_editor_url(url)}")
        if require_complete:
            raise typer.Exit(code=2)

@app.command()
def connect(
    url: str = URL_OPTION,
    key: str = KEY_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    verify: bool = typer.Option(False, "--verify", help="Test connectivity before saving"),
    verbose: bool = VERBOSE_OPTION,
):
    """
    Save the connection settings for later application runs.
    """
    settings = _load_settings(config, verbose)
    wizard = _build_wizard(url, key, settings)

    if verify:
        outcome = wizard.test_connectivity()
        _echo_progress(wizard)
        if not outcome.ok:
            raise typer.Exit(code=1)

    outcome = wizard.save_and_proceed()
    if not outcome.ok:
        raise typer.Exit(code=1)
    typer.echo(f"Saved to {settings.config_path}. Continue at: {outcome.redirect.target}")

@app.command()
def editor_url(url: str = URL_OPTION):
    """
    Print the dashboard links for running the schema SQL and finding the API keys.
    """
    typer.echo(f"SQL editor:   {sql_editor_url(url)}")
    typer.echo(f"API settings: {api_settings_url(url)}")

@app.command()
def show_config(config: Optional[Path] = CONFIG_OPTION):
    """
    Show the saved connection settings (key masked).
    """
    settings = _load_settings(config, verbose=False)
    store = YamlConfigurationStore(settings.config_path)
    try:
        saved = store.load()
    except StorageError as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if saved is None:
        typer.echo(f"No saved configuration at {settings.config_path}")
        raise typer.Exit(code=1)
    typer.echo(f"URL: {saved.endpoint}")
    typer.echo(f"Key: {saved.masked_key()}")

if __name__ == "__main__":
    app()
