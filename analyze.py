#!/usr/bin/env python3
"""
Undacted CLI

Analyses redaction blocks in a rendered page: auto-detects a block from a
probe point, flags lazy redactions, estimates the hidden length from a
reference word and composites the annotated report image.

Usage:
    python analyze.py run page.png --probe 120,340 --reference 40,330,90,22 \\
        --reference-text Director --profile match.json --output ./output/
"""

import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Optional

import click

from undacted.models import AnalysisParams, Profile, Rect
from undacted.image_io import load_image, save_image
from undacted.pixel_detector import detect_redaction_at_point
from undacted.leakage_detector import analyze_artifacts
from undacted.character_estimator import estimate_hidden_length
from undacted.report_compositor import compose_report
from undacted.overlay import draw_selection_overlay
from undacted.analysis import resolve_redaction_selection, analyze_redaction
from undacted.output_writer import write_analysis_json


logger = logging.getLogger(__name__)


def _parse_ints(value: str, count: int, what: str) -> list[int]:
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != count:
        raise click.BadParameter(f"{what} must be {count} comma-separated integers, got '{value}'")
    try:
        return [int(p) for p in parts]
    except ValueError:
        raise click.BadParameter(f"{what} must contain integers only, got '{value}'")


def parse_rect(ctx, param, value):
    """Parse an 'x,y,w,h' option into a Rect."""
    if value is None:
        return None
    x, y, w, h = _parse_ints(value, 4, "Rect")
    if w < 0 or h < 0:
        raise click.BadParameter(f"Rect width and height must be non-negative, got '{value}'")
    return Rect(x, y, w, h)


def parse_point(ctx, param, value):
    """Parse an 'x,y' option into a tuple."""
    if value is None:
        return None
    x, y = _parse_ints(value, 2, "Point")
    return (x, y)


def load_profile(ctx, param, value):
    """Load the best match from a JSON object or list of objects."""
    if value is None:
        return None
    try:
        with open(value, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise click.BadParameter(f"Cannot read profile file {value}: {e}")

    if isinstance(data, list):
        if not data:
            raise click.BadParameter(f"Profile file {value} contains no matches")
        data = data[0]
    if not isinstance(data, dict):
        raise click.BadParameter(f"Profile file {value} must hold an object or a list of objects")
    return Profile.from_dict(data)


def analysis_options(f):
    """Threshold options shared by the image commands."""
    options = [
        click.option(
            "--dark-threshold",
            default=60.0,
            type=float,
            envvar="UNDACTED_DARK_THRESHOLD",
            help="Luminance below this is part of a redaction block. Default: 60",
        ),
        click.option(
            "--artifact-threshold",
            default=30.0,
            type=float,
            envvar="UNDACTED_ARTIFACT_THRESHOLD",
            help="Luminance above this inside a box is suspicious. Default: 30",
        ),
        click.option(
            "--artifact-ratio",
            default=0.05,
            type=float,
            envvar="UNDACTED_ARTIFACT_RATIO",
            help="Share of suspicious pixels that flags lazy redaction. Default: 0.05",
        ),
        click.option(
            "--page",
            default=0,
            type=int,
            help="Page index when the input is a PDF. Default: 0",
        ),
        click.option(
            "--dpi",
            default=150,
            type=int,
            envvar="UNDACTED_DPI",
            help="DPI for rendering PDF pages. Default: 150",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def build_params(dark_threshold, artifact_threshold, artifact_ratio, dpi) -> AnalysisParams:
    return AnalysisParams(
        dark_threshold=dark_threshold,
        artifact_threshold=artifact_threshold,
        artifact_ratio=artifact_ratio,
        dpi=dpi,
    )


def fail(message: str, verbose: bool = False) -> None:
    click.echo(click.style(message, fg="red"), err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, verbose: bool):
    """Analyse redaction blocks in rendered documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--probe", "-p", required=True, callback=parse_point, help="Probe point as x,y")
@analysis_options
@click.pass_context
def detect(ctx, image, probe, dark_threshold, artifact_threshold, artifact_ratio, page, dpi):
    """Auto-detect the redaction block under a probe point."""
    params = build_params(dark_threshold, artifact_threshold, artifact_ratio, dpi)
    try:
        buffer = load_image(image, page, params.dpi)
    except Exception as e:
        fail(f"Error loading {image}: {e}", ctx.obj["verbose"])

    rect = detect_redaction_at_point(buffer, probe[0], probe[1], params)
    if rect is None:
        click.echo(click.style("No redaction block found at probe point", fg="yellow"))
        return

    click.echo(json.dumps(rect.to_dict()))


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--rect", "-r", required=True, callback=parse_rect, help="Redaction box as x,y,w,h")
@analysis_options
@click.pass_context
def classify(ctx, image, rect, dark_threshold, artifact_threshold, artifact_ratio, page, dpi):
    """Check a redaction box for lazy redaction artifacts."""
    params = build_params(dark_threshold, artifact_threshold, artifact_ratio, dpi)
    try:
        buffer = load_image(image, page, params.dpi)
    except Exception as e:
        fail(f"Error loading {image}: {e}", ctx.obj["verbose"])

    result = analyze_artifacts(buffer, rect, params)
    click.echo(f"Suspicious pixels: {result.artifact_pixels}/{result.total_pixels} "
               f"({result.artifact_ratio:.2%})")
    if result.is_lazy:
        click.echo(click.style("LAZY REDACTION: recoverable data remnants likely", fg="yellow"))
    else:
        click.echo(click.style("Uniform fill", fg="green"))


@cli.command()
@click.option("--redaction-width", required=True, type=float, help="Redaction box width in pixels")
@click.option("--reference-width", required=True, type=float, help="Reference box width in pixels")
@click.option("--reference-text", required=True, help="The word inside the reference box")
def estimate(redaction_width: float, reference_width: float, reference_text: str):
    """Estimate the hidden character count of a redaction."""
    chars = estimate_hidden_length(redaction_width, reference_width, len(reference_text))
    click.echo(str(chars))


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--rect", "-r", required=True, callback=parse_rect, help="Redaction box as x,y,w,h")
@click.option("--profile", required=True, callback=load_profile,
              type=click.Path(exists=True, dir_okay=False), help="JSON file with the matched profile(s)")
@click.option("--output", "-o", "output_path", required=True, type=click.Path(path_type=Path),
              help="Path of the report image to write")
@analysis_options
@click.pass_context
def report(ctx, image, rect, profile, output_path, dark_threshold, artifact_threshold,
           artifact_ratio, page, dpi):
    """Composite the annotated report image."""
    params = build_params(dark_threshold, artifact_threshold, artifact_ratio, dpi)
    try:
        buffer = load_image(image, page, params.dpi)
        composed = compose_report(buffer, rect, profile, params)
        save_image(composed, output_path)
    except Exception as e:
        fail(f"Error composing report: {e}", ctx.obj["verbose"])

    click.echo(f"  {output_path}")


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--redaction", callback=parse_rect, help="Redaction box as x,y,w,h")
@click.option("--probe", callback=parse_point, help="Probe point as x,y (auto-detect the redaction)")
@click.option("--reference", required=True, callback=parse_rect, help="Reference box as x,y,w,h")
@click.option("--reference-text", required=True, help="The word inside the reference box")
@click.option("--profile", callback=load_profile, type=click.Path(exists=True, dir_okay=False),
              default=None, help="JSON file with the matched profile(s)")
@click.option("--output", "-o", "output_dir", required=True, type=click.Path(path_type=Path),
              help="Output directory for analysis.json, preview.png and report.png")
@analysis_options
@click.pass_context
def run(ctx, image, redaction, probe, reference, reference_text, profile: Optional[Profile],
        output_dir: Path, dark_threshold, artifact_threshold, artifact_ratio, page, dpi):
    """
    Run the full analysis on one page.

    \b
    Outputs:
    - analysis.json: Metrics and parameters
    - preview.png: Page with the selection drawn
    - report.png: Annotated report (only with --profile)
    """
    verbose = ctx.obj["verbose"]
    if (redaction is None) == (probe is None):
        raise click.UsageError("Provide exactly one of --redaction or --probe")

    params = build_params(dark_threshold, artifact_threshold, artifact_ratio, dpi)

    try:
        buffer = load_image(image, page, params.dpi)
    except Exception as e:
        fail(f"Error loading {image}: {e}", verbose)

    if redaction is None:
        redaction = resolve_redaction_selection(buffer, probe, probe, params)
        if redaction is None:
            fail("No redaction block found at probe point")
        click.echo(f"Detected redaction: {redaction.to_dict()}")

    summary = analyze_redaction(buffer, redaction, reference, reference_text, params)
    click.echo(summary.format_report())
    if profile is not None:
        click.echo(f"\nTop candidate: {profile.name}")
    click.echo()

    click.echo("Writing output files...")
    output_dir.mkdir(parents=True, exist_ok=True)
    try:
        paths = [
            write_analysis_json(summary, params, output_dir / "analysis.json", profile),
            save_image(
                draw_selection_overlay(buffer, redaction, reference, summary.lazy_redaction_detected),
                output_dir / "preview.png",
            ),
        ]
        if profile is not None:
            paths.append(save_image(
                compose_report(buffer, redaction, profile, params),
                output_dir / "report.png",
            ))
    except Exception as e:
        fail(f"Error writing outputs: {e}", verbose)

    for path in paths:
        click.echo(f"  {path}")

    click.echo()
    click.echo(click.style("Done!", fg="green"))


if __name__ == "__main__":
    cli()
