from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import typer
import yaml

from src.intent import DeploymentIntent, IntentError, load_intent

from .changes import describe_change
from .dispatcher import process
from .errors import MiddlewareError

app = typer.Typer(help="Apply Quay operator middleware to generated Kubernetes manifests.")

logger = logging.getLogger(__name__)

MANIFEST_SUFFIXES = (".yaml", ".yml")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s" if verbose else "%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _collect_manifests(paths: Iterable[Path]) -> List[Path]:
    """Expand directories to their YAML files; duplicates keep their first position."""

    found: Dict[Path, None] = {}
    for path in paths:
        resolved = path.expanduser().resolve()
        if resolved.is_dir():
            matches = sorted(p for p in resolved.iterdir() if p.is_file() and p.suffix in MANIFEST_SUFFIXES)
            found.update(dict.fromkeys(matches))
        elif resolved.is_file():
            found[resolved] = None
        else:
            raise typer.BadParameter(f"Manifest input not found: {path}")
    return list(found)


def _load_documents(path: Path) -> List[Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return [doc for doc in yaml.safe_load_all(handle) if doc is not None]
    except yaml.YAMLError as exc:
        raise typer.BadParameter(f"Invalid YAML in {path}: {exc}") from exc


def _load_intent(path: Optional[Path]) -> DeploymentIntent:
    if path is None:
        return DeploymentIntent()
    try:
        return load_intent(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Intent file not found: {path}") from exc
    except IntentError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("process")
def run(
    inputs: List[Path] = typer.Option(
        ...,
        "--in",
        "-i",
        help="Manifest file(s) or directories containing *.yaml / *.yml documents.",
    ),
    intent: Optional[Path] = typer.Option(
        None,
        "--intent",
        help="QuayRegistry YAML describing managed components and overrides.",
    ),
    out: Path = typer.Option(
        Path("processed.yaml"),
        "--out",
        "-o",
        help="Where to write the processed manifest stream.",
    ),
    skip_resources: bool = typer.Option(
        False,
        "--skip-resources/--keep-resources",
        help="Strip resource requests and limits from workloads and jobs.",
    ),
    changes_out: Optional[Path] = typer.Option(
        None,
        "--changes-out",
        help="Optional JSON file listing the RFC 6902 patch applied to each object.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every rule decision."),
) -> None:
    _configure_logging(verbose)
    manifests = _collect_manifests(inputs)
    if not manifests:
        raise typer.BadParameter("No manifest files found to process.")
    registry = _load_intent(intent)

    processed: List[Any] = []
    changes: List[dict] = []
    for manifest in manifests:
        for document in _load_documents(manifest):
            try:
                result = process(registry, document, trim_resources=skip_resources)
            except MiddlewareError as exc:
                name = (document.get("metadata") or {}).get("name") if isinstance(document, dict) else None
                typer.echo(f"{manifest}: {name or '<unnamed>'}: {exc}", err=True)
                raise typer.Exit(code=1) from exc
            processed.append(result)
            change = describe_change(document, result)
            if change.changed:
                logger.info("%s/%s: %d change(s)", change.kind, change.name, len(change.patch))
            changes.append(change.to_dict())

    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as handle:
        yaml.safe_dump_all(processed, handle, sort_keys=False)

    if changes_out is not None:
        changes_out.parent.mkdir(parents=True, exist_ok=True)
        changes_out.write_text(json.dumps(changes, indent=2), encoding="utf-8")

    changed = sum(1 for entry in changes if entry["patch"])
    typer.echo(f"Processed {len(processed)} object(s), {changed} changed. Output written to {out.resolve()}")


if __name__ == "__main__":  # pragma: no cover
    app()
