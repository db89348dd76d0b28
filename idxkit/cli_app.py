"""
IdxKit Command-Line Interface.

Provides the ``idxkit`` entry point:

- ``idxkit init``   : write a starter recipe YAML with all defaults
- ``idxkit fetch``  : download and verify every archive of the registry
- ``idxkit inspect``: decode one cached archive and print its dimensions
- ``idxkit batches``: run the full pipeline and summarize the batches
- ``idxkit weights``: fetch and verify the configured network parameters
- ``idxkit preview``: render one record of a split as a PNG

Usage:
    idxkit fetch --recipe recipe.yaml
    idxkit batches --set batching.batch_size=50 --set batching.split=train
    idxkit preview digit.png --index 7
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, NoReturn, Optional

import typer

if TYPE_CHECKING:  # pragma: no cover
    from idxkit.core import Config

app = typer.Typer(
    name="idxkit",
    add_completion=False,
    no_args_is_help=True,
)

RecipeOption = Annotated[
    Optional[Path],
    typer.Option("--recipe", "-r", help="YAML recipe (defaults apply when omitted)."),
]
OverrideOption = Annotated[
    Optional[list[str]],
    typer.Option("--set", help="Override config value (repeatable): key.path=value"),
]
LogDirOption = Annotated[
    Optional[Path],
    typer.Option("--log-dir", help="Also write a rotating log file here."),
]


# ── App callback ────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from importlib.metadata import version as pkg_version

        typer.echo(f"idxkit {pkg_version('idxkit')}")
        raise typer.Exit()


@app.callback()
def main(
    _: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """IdxKit: verified acquisition and batching of IDX datasets."""
    ...  # pragma: no cover


# ── Commands ────────────────────────────────────────────────────────────────


@app.command()
def init(
    output: Annotated[Path, typer.Argument(help="Output YAML file path.")] = Path("recipe.yaml"),
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite existing file.")] = False,
) -> None:
    """Generate a starter recipe with every config field and its default."""
    from idxkit.core import Config, save_config_as_yaml

    if output.exists() and not force:
        typer.echo(f"Error: '{output}' already exists. Use --force to overwrite.", err=True)
        raise typer.Exit(code=1)

    data = Config().model_dump(mode="json")
    data["acquisition"]["data_root"] = "./dataset"
    save_config_as_yaml(data, output)
    typer.echo(f"Recipe created: {output}")


@app.command()
def fetch(
    recipe: RecipeOption = None,
    set_: OverrideOption = None,
    force: Annotated[bool, typer.Option("--force", help="Re-download every archive.")] = False,
    log_dir: LogDirOption = None,
) -> None:
    """Download and verify every archive of the configured registry."""
    from idxkit.data_handler import build_orchestrator
    from idxkit.exceptions import IdxkitError

    cfg = _load_config(recipe, set_, log_dir)
    try:
        report = build_orchestrator(cfg).ensure_cached(force=force)
    except IdxkitError as e:
        _fail(e)

    if report.satisfied:
        typer.echo(f"Cache already complete: {cfg.cache_dir}")
    else:
        typer.echo(f"Fetched {len(report.fetched)} file(s) into {cfg.cache_dir}")


@app.command()
def inspect(
    name: Annotated[str, typer.Argument(help="Registry file name, e.g. t10k-labels-idx1-ubyte.gz")],
    recipe: RecipeOption = None,
    set_: OverrideOption = None,
) -> None:
    """Decode one cached archive and print its kind and dimensions."""
    from idxkit.data_handler import LocalCache, decode_file
    from idxkit.exceptions import IdxkitError

    cfg = _load_config(recipe, set_)
    try:
        descriptor = cfg.registry.get(name)
        dataset = decode_file(LocalCache(cfg.cache_dir), descriptor)
    except (IdxkitError, KeyError) as e:
        _fail(e)

    typer.echo(f"{name}: {dataset.kind} {list(dataset.dimensions)}")


@app.command()
def batches(
    recipe: RecipeOption = None,
    set_: OverrideOption = None,
    log_dir: LogDirOption = None,
) -> None:
    """Run fetch → verify → decode → batch and summarize the result."""
    from idxkit.data_handler import load_batches
    from idxkit.exceptions import IdxkitError

    cfg = _load_config(recipe, set_, log_dir)
    try:
        result = load_batches(cfg)
    except (IdxkitError, KeyError) as e:
        _fail(e)

    width = result[0].features.shape[1] if result else 0
    typer.echo(f"{len(result)} batches of {cfg.batching.batch_size} x {width} ({cfg.batching.split})")


@app.command()
def weights(
    recipe: RecipeOption = None,
    set_: OverrideOption = None,
    log_dir: LogDirOption = None,
) -> None:
    """Fetch, verify and summarize the configured network parameter file."""
    from idxkit.data_handler import load_configured_params
    from idxkit.exceptions import IdxkitError

    cfg = _load_config(recipe, set_, log_dir)
    try:
        params = load_configured_params(cfg)
    except IdxkitError as e:
        _fail(e)

    sizes = " -> ".join(str(s) for s in params.layer_sizes)
    typer.echo(f"{cfg.weights.name}: layers {sizes}")


@app.command()
def preview(
    output: Annotated[Path, typer.Argument(help="Destination PNG file.")],
    index: Annotated[int, typer.Option("--index", "-i", min=0, help="Record index.")] = 0,
    recipe: RecipeOption = None,
    set_: OverrideOption = None,
) -> None:
    """Render one record of the configured split as a grayscale PNG."""
    from idxkit.data_handler import LocalCache, load_records, save_record_image
    from idxkit.exceptions import IdxkitError

    cfg = _load_config(recipe, set_)
    try:
        records = load_records(
            LocalCache(cfg.cache_dir),
            cfg.registry,
            cfg.batching.split,
            normalize=cfg.batching.normalize,
        )
        if index >= len(records):
            raise IndexError(f"Index {index} out of range for {len(records)} records")
        save_record_image(records[index], output, normalized=cfg.batching.normalize)
    except (IdxkitError, KeyError, IndexError) as e:
        _fail(e)

    typer.echo(f"Label {records[index].label} → {output}")


# ── Private helpers ─────────────────────────────────────────────────────────


def _fail(error: Exception) -> NoReturn:
    """Report an error on stderr and exit with status 1."""
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


def _load_config(
    recipe: Path | None, raw_overrides: list[str] | None, log_dir: Path | None = None
) -> Config:
    """Builds the Config and configures logging at its level."""
    from idxkit.core import Config, Logger
    from idxkit.exceptions import IdxkitConfigError

    overrides = _parse_overrides(raw_overrides or [])
    try:
        if recipe is not None:
            if not recipe.exists():
                raise IdxkitConfigError(f"recipe not found: {recipe}")
            cfg = Config.from_recipe(recipe, overrides=overrides or None)
        else:
            cfg = Config.from_dict({}, overrides=overrides or None)
    except IdxkitConfigError as e:
        _fail(e)

    Logger.setup(log_dir=log_dir, level=cfg.log_level)
    return cfg


def _auto_cast(value: str) -> Any:
    """
    Cast a CLI string to the appropriate Python scalar type.

    Args:
        value: Raw string from the command line.

    Returns:
        Converted bool, None, int, float, or the original string.
    """
    low = value.lower()
    if low in ("true", "false"):
        return low == "true"
    if low in ("null", "none"):
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _parse_overrides(raw: list[str]) -> dict[str, Any]:
    """
    Parse ``key.path=value`` strings into a flat override dict.

    Raises:
        typer.BadParameter: If an item has no ``=`` or an empty key.
    """
    overrides: dict[str, Any] = {}
    for item in raw:
        if "=" not in item:
            raise typer.BadParameter(f"Override must use key=value format, got: '{item}'")
        key, _, val = item.partition("=")
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Empty key in override: '{item}'")
        overrides[key] = _auto_cast(val.strip())
    return overrides
