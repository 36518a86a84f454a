"""
CLI interface for aliasgen.

Usage:
    aliasgen add notes/Ока.md
    aliasgen add notes/Лес.md --body
    aliasgen config --api-key sk-...
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .api import AliasExtractor
from .config import AliasConfig, get_config_dir, load_config, save_config
from .host import FileHost
from .logging_config import configure_ops_log, configure_quiet_mode, enable_debug_mode


# Configure quiet mode by default (suppress verbose library output)
# Set ALIASGEN_VERBOSE=1 to enable debug mode via environment
if os.environ.get("ALIASGEN_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        print(f"aliasgen {version('aliasgen')}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_json_output = False
_config_dir_override: Optional[Path] = None


def _json_callback(value: bool):
    global _json_output
    _json_output = value


def _get_json_output() -> bool:
    return _json_output


def _config_dir_callback(value: Optional[Path]):
    global _config_dir_override
    _config_dir_override = value


def _get_config_dir() -> Path:
    return _config_dir_override or get_config_dir()


app = typer.Typer(
    name="aliasgen",
    help="Generate note aliases with OpenAI and merge them into YAML frontmatter.",
    no_args_is_help=True,
    rich_markup_mode=None,
)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON",
        callback=_json_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
    config_dir: Annotated[Optional[Path], typer.Option(
        "--config-dir", "-c",
        envvar="ALIASGEN_CONFIG_DIR",
        help="Directory holding aliasgen.toml",
        callback=_config_dir_callback,
        is_eager=True,
    )] = None,
):
    """Generate note aliases with OpenAI and merge them into YAML frontmatter."""


def _load_config_or_exit() -> AliasConfig:
    try:
        return load_config(_get_config_dir())
    except ValueError as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(1)


def _mask_key(key: str) -> str:
    if not key:
        return "(not set)"
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:3]}...{key[-4:]}"


@app.command()
def add(
    path: Annotated[Path, typer.Argument(
        help="Markdown note to add aliases to"
    )],
    body: Annotated[bool, typer.Option(
        "--body", "-b",
        help="Also send an excerpt of the note body to the model"
    )] = False,
    temperature: Annotated[Optional[float], typer.Option(
        "--temperature", "-t",
        min=0.0, max=2.0,
        help="Sampling temperature (default: per mode, from config)"
    )] = None,
):
    """
    Add aliases to a note using OpenAI.

    \b
    Title mode (default) asks for every declension form of the note title.
    Body mode (--body) also sends the first max_body_chars characters of
    the note, frontmatter excluded, and asks for alternate names.
    """
    config = _load_config_or_exit()
    handler = configure_ops_log(config.path)
    try:
        host = FileHost(
            path,
            notifier=(lambda message: None) if _get_json_output() else typer.echo,
        )
        with AliasExtractor(host, config) as extractor:
            result = extractor.add_aliases(use_body=body, temperature=temperature)
    finally:
        logging.getLogger("aliasgen").removeHandler(handler)
        handler.close()

    if _get_json_output():
        typer.echo(json.dumps({
            "state": result.state.value,
            "document": result.document.id if result.document else None,
            "discovered": result.discovered,
            "aliases": result.aliases,
            "message": result.reason,
        }, ensure_ascii=False))

    if not result.ok:
        raise typer.Exit(1)


@app.command("config")
def config_cmd(
    api_key: Annotated[Optional[str], typer.Option(
        "--api-key",
        help="OpenAI API key (sk-...)"
    )] = None,
    max_body_chars: Annotated[Optional[int], typer.Option(
        "--max-body-chars",
        min=1,
        help="Maximum body excerpt length in characters"
    )] = None,
    model: Annotated[Optional[str], typer.Option(
        "--model", "-m",
        help="Chat model identifier"
    )] = None,
):
    """
    Show or update settings.

    \b
    With no options, prints the current settings (key masked).
    """
    config = _load_config_or_exit()
    changed = False
    if api_key is not None:
        config.api_key = api_key.strip()
        changed = True
    if max_body_chars is not None:
        config.max_body_chars = max_body_chars
        changed = True
    if model is not None:
        config.model = model.strip()
        changed = True

    if changed:
        try:
            save_config(config)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
        typer.echo(f"Saved {config.config_path}")

    settings = {
        "config": str(config.config_path),
        "api_key": _mask_key(config.api_key),
        "api_key_source": "file" if config.api_key else ("environment" if config.env_api_key else None),
        "model": config.model,
        "base_url": config.base_url,
        "max_tokens": config.max_tokens,
        "title_temperature": config.title_temperature,
        "body_temperature": config.body_temperature,
        "max_body_chars": config.max_body_chars,
    }
    if _get_json_output():
        typer.echo(json.dumps(settings, ensure_ascii=False))
    else:
        for key, value in settings.items():
            typer.echo(f"{key}: {value if value is not None else '-'}")


def main():
    try:
        app()
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="aliasgen CLI", config_dir=_config_dir_override)
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
