#!/usr/bin/env python3
"""rowmodel CLI for printing and applying table schemas."""

import argparse
import asyncio
import importlib
import logging
from typing import List, Type

from rich.console import Console

from rowmodel.config import config
from rowmodel.exceptions import RowModelError
from rowmodel.model import Model, migrate

console = Console()


def load_model(path: str) -> Type[Model]:
    """Import a record class from ``package.module:ClassName``."""
    module_name, sep, class_name = path.partition(":")
    if not sep or not module_name or not class_name:
        raise argparse.ArgumentTypeError(f"expected module:Model, got {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise argparse.ArgumentTypeError(f"cannot import {module_name}: {exc}") from None
    except RowModelError as exc:
        # argparse would otherwise report ModelDefinitionError (a TypeError)
        # as a bare "invalid value"
        raise argparse.ArgumentTypeError(f"{module_name}: {exc}") from None
    try:
        model = getattr(module, class_name)
    except AttributeError:
        raise argparse.ArgumentTypeError(f"{module_name} has no attribute {class_name!r}") from None

    if not (isinstance(model, type) and issubclass(model, Model) and hasattr(model, "__meta__")):
        raise argparse.ArgumentTypeError(f"{path} is not a mapped Model")
    return model


def show_schema(models: List[Type[Model]]) -> None:
    """Print the CREATE TABLE statement of each model."""
    for model in models:
        console.print(f"[bold]{model.__name__}[/] -> [cyan]{model.__meta__.table}[/]")
        console.print(f"{model.schema()};", highlight=False, markup=False, soft_wrap=True)


def apply_schema(models: List[Type[Model]]) -> None:
    """Create the tables of the given models against DATABASE_URL."""
    asyncio.run(migrate(models))
    for model in models:
        console.print(f"[green]Created table {model.__meta__.table} (if missing).[/]")


def main(argv: List[str] = None) -> int:
    parser = argparse.ArgumentParser(prog="rowmodel", description="rowmodel CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    schema_parser = subparsers.add_parser("schema", help="Print CREATE TABLE statements")
    schema_parser.add_argument("models", nargs="+", type=load_model, metavar="module:Model")

    migrate_parser = subparsers.add_parser("migrate", help="Create missing tables")
    migrate_parser.add_argument("models", nargs="+", type=load_model, metavar="module:Model")

    args = parser.parse_args(argv)

    logging.basicConfig(level=config.log_level)

    try:
        if args.command == "schema":
            show_schema(args.models)
        elif args.command == "migrate":
            apply_schema(args.models)
    except RowModelError as exc:
        console.print(f"[red]{exc}[/]")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
