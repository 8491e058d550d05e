"""Main entry point for the trackercli application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
from typing import Annotated, Any, Coroutine, Dict, List, Optional

import typer

# --- Core Layer ---
from trackercli.core.command_handler import CommandHandler
from trackercli.core.services.fetch_service import FetchService
from trackercli.core.services.request_service import TrackerRequestService

# --- Infrastructure Layer ---
# Config
from trackercli.infrastructure.config.settings import (
    get_cache_dir,
    get_cache_ttl,
    get_log_file,
    get_log_format,
    get_log_level,
    get_rate_limits,
    load_configuration,
)
# API
from trackercli.infrastructure.api.endpoints import known_indexers
from trackercli.infrastructure.api.request_executor import RequestExecutor
# Cache
from trackercli.infrastructure.cache.caching_service import CachingService, CACHE_LEVELS
# Credentials
from trackercli.infrastructure.credentials.settings_provider import SettingsCredentialProvider
# Resilience
from trackercli.infrastructure.resilience.rate_limiter import InMemoryRateLimiterRegistry
# UI
from trackercli.infrastructure.cli.display import ConsoleDisplay
# Monitoring
from trackercli.infrastructure.monitoring.logger_setup import setup_logging

logger = logging.getLogger(__name__)

# --- Dependency Injection Container (Manual) ---

def create_dependencies(log_level: Optional[int] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.
    """
    dependencies: Dict[str, Any] = {}

    # 1. Load Configuration First, then logging from it
    load_configuration()
    setup_logging(
        log_level=log_level if log_level is not None else get_log_level(),
        log_format=get_log_format(),
        log_file=get_log_file(),
    )
    logger.debug("Configuration and logging initialized.")

    # 2. Instantiate Infrastructure Adapters & Services
    dependencies['ui'] = ConsoleDisplay()
    dependencies['cache_service'] = CachingService(cache_dir=get_cache_dir(), l2_ttl=get_cache_ttl())
    dependencies['limiter_registry'] = InMemoryRateLimiterRegistry(get_rate_limits(known_indexers()))
    dependencies['credential_provider'] = SettingsCredentialProvider()
    dependencies['executor'] = RequestExecutor()

    # 3. Instantiate Core Services (injecting dependencies)
    dependencies['request_service'] = TrackerRequestService(
        limiter_registry=dependencies['limiter_registry'],
        executor=dependencies['executor'],
    )
    dependencies['fetch_service'] = FetchService(
        cache_service=dependencies['cache_service'],
        credential_provider=dependencies['credential_provider'],
        request_service=dependencies['request_service'],
    )

    # 4. Instantiate Command Handler
    dependencies['command_handler'] = CommandHandler(
        fetch_service=dependencies['fetch_service'],
        cache_service=dependencies['cache_service'],
        ui=dependencies['ui'],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies


_dependencies: Optional[Dict[str, Any]] = None
_log_level: Optional[int] = None


def get_dependencies() -> Dict[str, Any]:
    """Returns the wired-up dependencies, creating them on first use."""
    global _dependencies
    if _dependencies is None:
        _dependencies = create_dependencies(log_level=_log_level)
    return _dependencies


def close_dependencies() -> None:
    """Releases the HTTP session and the disk cache, if they were created."""
    global _dependencies
    if _dependencies is None:
        return
    dependencies, _dependencies = _dependencies, None
    try:
        dependencies['executor'].close()
    finally:
        dependencies['cache_service'].close()
    logger.debug("Dependencies closed.")


# --- Typer App Definition ---
app = typer.Typer(
    name="trackercli",
    help="trackercli: rate-limited, cached queries against Gazelle tracker APIs.",
    add_completion=False,
)


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Runs an async handler from a sync Typer command."""
    return asyncio.run(coro)


# --- CLI Commands ---

@app.command()
def fetch(
    indexer: Annotated[str, typer.Argument(help="Indexer to query (see 'indexers').")],
    ids: Annotated[List[int], typer.Argument(help="One or more numeric ids.")],
    action: Annotated[str, typer.Option("--action", "-a", help="API action to request.")] = "torrent",
    credential_ref: Annotated[
        Optional[str],
        typer.Option("--credential-ref", help="Setting holding the API key (default: <indexer>_api_key)."),
    ] = None,
):
    """Fetch data for one or more ids from an indexer."""
    handler: CommandHandler = get_dependencies()['command_handler']
    try:
        ok = run_async(handler.handle_fetch(indexer, ids, action=action, credential_ref=credential_ref))
    finally:
        close_dependencies()
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def indexers():
    """List the known indexers and their API base URLs."""
    handler: CommandHandler = get_dependencies()['command_handler']
    try:
        handler.handle_list_indexers()
    finally:
        close_dependencies()


@app.command(name="clear-cache")
def clear_cache_command(
    level: Annotated[str, typer.Option(help=f"Level ({', '.join(CACHE_LEVELS)}).")] = 'all'
):
    """Clears the response cache."""
    handler: CommandHandler = get_dependencies()['command_handler']
    try:
        ok = handler.handle_clear_cache(level)
    finally:
        close_dependencies()
    if not ok:
        raise typer.Exit(code=1)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Query tracker APIs with per-indexer rate limiting and caching."""
    global _log_level
    if verbose:
        _log_level = logging.DEBUG


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
