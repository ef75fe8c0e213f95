"""jsoncontract Command Line Interface.

Entry point for the jsoncontract CLI tool: inspect the contract the resolver
builds for a type.
"""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any

import structlog
import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from jsoncontract import __version__
from jsoncontract.contracts.contract import (
    JsonArrayContract,
    JsonContract,
    JsonDictionaryContract,
    JsonDynamicContract,
    JsonObjectContract,
)
from jsoncontract.contracts.enums import HookKind
from jsoncontract.contracts.errors import ContractConfigurationError
from jsoncontract.contracts.protocols import ContractResolver
from jsoncontract.contracts.property import JsonProperty, PropertyCollection
from jsoncontract.contracts.sentinels import MISSING
from jsoncontract.core.config import JsonContractSettings, load_settings
from jsoncontract.core.logging import configure_logging
from jsoncontract.engine.resolver import DefaultContractResolver

__all__ = [
    "app",
    "load_settings",  # Re-exported from config for convenience
]

# Exit code for a type whose markers cannot produce a contract
EXIT_CONFIGURATION_ERROR = 2

app = typer.Typer(
    name="jsoncontract",
    help="jsoncontract: inspect serializer contracts for Python types.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"jsoncontract version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """jsoncontract: inspect serializer contracts for Python types."""


def import_target(target: str) -> Any:
    """Import ``module:QualName`` (nested names separated by dots).

    Raises:
        ValueError: If target lacks the ':' separator
        ImportError: If the module cannot be imported
        AttributeError: If the qualified name does not exist in the module
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"Target must look like 'package.module:ClassName', got {target!r}")
    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        obj = getattr(obj, part)
    return obj


def _type_label(tp: Any) -> str | None:
    if tp is None:
        return None
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


def _property_summary(prop: JsonProperty) -> dict[str, Any]:
    return {
        "name": prop.property_name,
        "underlying_name": prop.underlying_name,
        "type": _type_label(prop.property_type),
        "order": prop.order,
        "required": prop.required_or_default.value,
        "ignored": prop.ignored,
        "readable": prop.readable,
        "writable": prop.writable,
        "converter": repr(prop.converter) if prop.converter is not None else None,
        "default_value": None if prop.default_value is MISSING else repr(prop.default_value),
    }


def _properties_summary(properties: PropertyCollection) -> list[dict[str, Any]]:
    return [_property_summary(prop) for prop in properties.values()]


def contract_summary(contract: JsonContract) -> dict[str, Any]:
    """JSON-ready description of a resolved contract."""
    summary: dict[str, Any] = {
        "kind": contract.kind.value,
        "underlying_type": _type_label(contract.underlying_type),
        "created_type": _type_label(contract.created_type),
        "converter": repr(contract.converter) if contract.converter is not None else None,
        "internal_converter": repr(contract.internal_converter) if contract.internal_converter is not None else None,
        "is_reference": contract.is_reference,
        "has_default_creator": contract.default_creator is not None,
        "default_creator_non_public": contract.default_creator_non_public,
        "hooks": {kind.value: getattr(contract.hook(kind), "__qualname__", None) for kind in HookKind},
    }
    if isinstance(contract, JsonObjectContract):
        creator = contract.creator
        summary["member_serialization"] = contract.member_serialization.value
        summary["properties"] = _properties_summary(contract.properties)
        summary["constructor"] = creator.name if creator is not None else None
        summary["constructor_parameters"] = _properties_summary(contract.constructor_parameters)
    elif isinstance(contract, JsonDynamicContract):
        summary["properties"] = _properties_summary(contract.properties)
    elif isinstance(contract, JsonArrayContract):
        summary["item_type"] = _type_label(contract.item_type)
    elif isinstance(contract, JsonDictionaryContract):
        summary["key_type"] = _type_label(contract.key_type)
        summary["value_type"] = _type_label(contract.value_type)
    return summary


def _echo_summary(summary: dict[str, Any]) -> None:
    typer.secho(f"{summary['underlying_type']}: {summary['kind']} contract", bold=True)
    for key in ("created_type", "converter", "internal_converter", "is_reference", "member_serialization"):
        if key in summary:
            typer.echo(f"  {key}: {summary[key]}")
    constructor = summary.get("constructor")
    if constructor is not None:
        params = ", ".join(p["name"] for p in summary["constructor_parameters"])
        typer.echo(f"  constructor: {constructor}({params})")
    for kind, hook in summary["hooks"].items():
        if hook is not None:
            typer.echo(f"  {kind}: {hook}")
    for prop in summary.get("properties", []):
        flags = "".join(
            flag for flag, on in (("r", prop["readable"]), ("w", prop["writable"]), ("i", prop["ignored"])) if on
        )
        typer.echo(f"    {prop['name']} <- {prop['underlying_name']}: {prop['type']} [{flags or '-'}]")


def _load(config: Path | None) -> JsonContractSettings:
    try:
        return load_settings(config)
    except (YamlParserError, YamlScannerError) as e:
        typer.echo(f"YAML syntax error in {config}: {e.problem}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {config}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


@app.command()
def describe(
    target: str = typer.Argument(..., help="Type to resolve, as 'package.module:ClassName'."),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a settings file (YAML, TOML or JSON).",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the contract summary as JSON.",
    ),
    non_public: bool = typer.Option(
        False,
        "--non-public",
        help="Include non-public members (overrides the settings file).",
    ),
) -> None:
    """Resolve a type and print its contract."""
    settings = _load(config.expanduser() if config is not None else None)
    configure_logging(json_output=settings.logging.json_output, level=settings.logging.level)

    resolver_settings = settings.resolver
    if non_public:
        resolver_settings = resolver_settings.model_copy(update={"non_public_members": True})

    try:
        object_type = import_target(target)
    except (ValueError, ImportError, AttributeError) as e:
        typer.secho(f"Error: cannot load {target}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None

    resolver: ContractResolver = DefaultContractResolver(resolver_settings)
    try:
        with structlog.contextvars.bound_contextvars(target=target):
            contract = resolver.resolve_contract(object_type)
    except ContractConfigurationError as e:
        typer.secho(f"Contract configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_CONFIGURATION_ERROR) from None

    summary = contract_summary(contract)
    if as_json:
        typer.echo(json.dumps(summary, indent=2))
    else:
        _echo_summary(summary)


@app.command()
def version() -> None:
    """Print the installed version."""
    typer.echo(f"jsoncontract version {__version__}")


if __name__ == "__main__":
    app()
