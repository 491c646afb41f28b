"""
Main CLI application for the compatibility gate.

Provides offline classification of sample requests, synthetic body
previews and a command to run the gate service.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import typer
from typing_extensions import Annotated

from compat_gate.api.config import ConfigManager, GateSettings
from compat_gate.gate.classifier import RequestClassification
from compat_gate.gate.core import CompatibilityGate
from compat_gate.gate.options import GateConfig
from compat_gate.gate.templates import synthesize_response
from compat_gate.gate.versioning import compare_versions

app = typer.Typer(
    name="gate-cli",
    help="Compatibility gate CLI - inspect how client requests are classified",
    no_args_is_help=True,
    add_completion=False,
)

CLASSIFICATION_DESCRIPTIONS = {
    RequestClassification.BYPASSED: "always forwarded",
    RequestClassification.CURRENT: "supported client, forwarded",
    RequestClassification.MISSING_VERSION: "no version signal, synthetic response",
    RequestClassification.OUTDATED: "below minimum version, synthetic response",
}


def parse_headers(raw_headers: Optional[List[str]]) -> Dict[str, str]:
    """Parse ``Name: value`` strings into a case-insensitive lookup table."""
    headers: Dict[str, str] = {}
    for raw in raw_headers or []:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Header must look like 'Name: value', got {raw!r}")
        headers[name.strip().lower()] = value.strip()
    return headers


def load_gate_config(
    config_file: Optional[str], min_version: Optional[str] = None
) -> GateConfig:
    """Load settings the same way the server does, with an optional minimum override."""
    try:
        settings: GateSettings = ConfigManager().load_config(config_file)
        if min_version:
            settings = GateSettings(
                **{**settings.model_dump(), "min_supported_version": min_version}
            )
        return settings.to_gate_config()
    except ValueError as e:
        raise typer.BadParameter(str(e))


def emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show gate log messages on stderr")
    ] = False,
):
    """
    Compatibility gate CLI.

    Examples:
      gate-cli classify --path /api/products -H "User-Agent: BenimMarketim/1.9.0"

      gate-cli synthesize --path /api/settings --reason outdated

      gate-cli compare 2.1 2.1.0
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command()
def classify(
    path: Annotated[str, typer.Option("--path", help="Request path, query string allowed")],
    method: Annotated[str, typer.Option("--method", "-X", help="HTTP method")] = "GET",
    header: Annotated[
        Optional[List[str]],
        typer.Option("--header", "-H", help="Request header in 'Name: value' format (repeatable)"),
    ] = None,
    min_version: Annotated[
        Optional[str], typer.Option("--min-version", help="Override minimum supported version")
    ] = None,
    config_file: Annotated[
        Optional[str], typer.Option("--config", help="JSON or TOML config file")
    ] = None,
    show_body: Annotated[
        bool, typer.Option("--body", help="Include the synthetic body when intercepted")
    ] = False,
):
    """
    Classify a sample request the way the gate would.

    Examples:
      gate-cli classify --path /api/orders

      gate-cli classify --path /api/settings -H "X-App-Version: 1.5.0" --body
    """
    headers = parse_headers(header)
    gate = CompatibilityGate(load_gate_config(config_file, min_version))
    decision = gate.evaluate(path, method, lambda name: headers.get(name.lower()))

    result: Dict[str, Any] = {
        "path": decision.path,
        "method": method.upper(),
        "version": decision.version,
        "classification": decision.classification.value,
        "description": CLASSIFICATION_DESCRIPTIONS[decision.classification],
        "intercepted": decision.intercepted,
        "status_code": decision.status_code,
    }
    if show_body and decision.intercepted:
        result["body"] = decision.body
    emit(result)


@app.command()
def synthesize(
    path: Annotated[str, typer.Option("--path", help="Request path to build a body for")],
    reason: Annotated[
        str, typer.Option("--reason", help="missing-version or outdated")
    ] = RequestClassification.MISSING_VERSION.value,
    config_file: Annotated[
        Optional[str], typer.Option("--config", help="JSON or TOML config file")
    ] = None,
):
    """Print the synthetic body an intercepted request to PATH would receive."""
    try:
        classification = RequestClassification(reason)
    except ValueError:
        raise typer.BadParameter(f"Unknown reason {reason!r}")
    if not classification.intercepts:
        raise typer.BadParameter(f"Requests classified {reason!r} are forwarded, not synthesized")

    emit(synthesize_response(path, classification, load_gate_config(config_file)))


@app.command()
def compare(
    current: Annotated[str, typer.Argument(help="Client version")],
    other: Annotated[str, typer.Argument(help="Version to compare against")],
):
    """Compare two dotted versions and print 1, 0 or -1."""
    typer.echo(str(compare_versions(current, other)))


@app.command()
def serve(
    config_file: Annotated[
        Optional[str], typer.Option("--config", help="JSON or TOML config file")
    ] = None,
):
    """Run the compatibility gate service with uvicorn."""
    from compat_gate.api.server import main as run_server

    try:
        settings = ConfigManager().load_config(config_file)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    run_server(settings)


def main():
    app()


if __name__ == "__main__":
    main()
