"""Configuration commands for the kbview CLI."""

from cyclopts import App

from kbview.config import DEFAULTS, get_config

config_app = App(name="config", help="Manage configuration")

SECRET_KEYS = ("api.key",)


def _display(key: str, value: object) -> str:
    if key in SECRET_KEYS and value:
        return "********"
    return str(value)


@config_app.command
def set(key: str, value: str, global_: bool = False) -> None:
    """Set a configuration value.

    Args:
        key: Configuration key, e.g. api.key, api.url, api.limit, sort, pinned.max
        value: Configuration value
        global_: Write to the global config instead of the local one
    """
    config = get_config(use_global=global_)
    config.set(key, value)
    scope = "global" if global_ else "local"
    print(f"Set {key} = {_display(key, value)} ({scope})")


@config_app.command
def unset(key: str, global_: bool = False) -> None:
    """Unset a configuration value."""
    config = get_config(use_global=global_)
    config.unset(key)
    scope = "global" if global_ else "local"
    print(f"Unset {key} ({scope})")


@config_app.command
def get(key: str, global_: bool = False) -> None:
    """Show a configuration value, including built-in defaults."""
    config = get_config(use_global=global_)
    value = config.get(key)
    if value is None:
        print(f"{key} is not set")
    else:
        print(f"{key} = {_display(key, value)}")


@config_app.command(name="list")
def list_config(global_: bool = False, defaults: bool = False) -> None:
    """List configuration values.

    Args:
        global_: List the global config only
        defaults: Include built-in defaults for keys that are not set
    """
    config = get_config(use_global=global_)
    settings = config.list()
    if defaults:
        settings = {**DEFAULTS, **settings}

    if not settings:
        scope = "global" if global_ else "local"
        print(f"No {scope} configuration settings")
        return

    print("Configuration settings:\n")
    for key, value in settings.items():
        print(f"{key} = {_display(key, value)}")
