"""
Command-line interface for fractal generation.
"""

import click
import sys
from pathlib import Path
import logging
import time

from .. import __version__
from ..api import FractalRenderer, RenderConfig
from ..core.precision import detect_precision_need
from ..io.config import ConfigManager, load_config_from_args

logger = logging.getLogger(__name__)


def _fail(ctx, e: Exception):
    click.echo(f"Error: {e}", err=True)
    if ctx.obj.get('verbose'):
        import traceback
        traceback.print_exc()
    sys.exit(1)


def _parse_precision(value):
    if value is None or value in ('double', 'auto'):
        return value
    try:
        return int(value)
    except ValueError:
        raise click.BadParameter("use 'double', 'auto' or a number of digits")


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--config', type=click.Path(exists=True), help='Configuration file path')
@click.option('--preset', help='Configuration preset to use')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, config, preset, verbose, quiet):
    """
    hp-fractal - Mandelbrot set rendering in arbitrary precision.
    """
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"hp-fractal v{__version__}")
        click.echo(f"Python: {sys.version}")
        if ctx.invoked_subcommand is None:
            sys.exit(0)
    elif ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        sys.exit(0)

    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['preset'] = preset
    ctx.obj['verbose'] = verbose


@main.command()
@click.argument('output', type=click.Path(), default='out.png')
@click.option('--width', '-w', type=int, help='Image width')
@click.option('--height', '-h', type=int, help='Image height')
@click.option('--center-x', type=str, help='Real part of the view centre')
@click.option('--center-y', type=str, help='Imaginary part of the view centre')
@click.option('--zoom', type=str, help='Width of the rendered slice of the real axis')
@click.option('--max-iter', 'max_iterations', type=int, help='Maximum iterations')
@click.option('--escape-boundary', type=str, help='Per-component escape boundary')
@click.option('--precision', type=str, help="'double', 'auto' or number of significant digits")
@click.option('--workers', type=int, help='Worker processes for sampling')
@click.option('--no-metadata', is_flag=True, help='Do not embed render metadata')
@click.pass_context
def render(ctx, output, no_metadata, **kwargs):
    """
    Render a single frame.

    OUTPUT: Output image file path (.png, .tiff, .jpg, .ppm)
    """
    try:
        kwargs['precision'] = _parse_precision(kwargs.get('precision'))
        if no_metadata:
            kwargs['save_metadata'] = False

        auto_precision = kwargs['precision'] == 'auto'
        if auto_precision:
            kwargs['precision'] = None

        render_config = load_config_from_args(ctx.obj.get('config_file'),
                                              ctx.obj.get('preset'), kwargs)

        if auto_precision:
            render_config.precision = detect_precision_need(render_config.zoom, render_config.width)
            click.echo(f"Using precision: {render_config.precision}")

        renderer = FractalRenderer(render_config)

        def progress_callback(rows_done, rows_total):
            if ctx.obj.get('verbose'):
                click.echo(f"Progress: {rows_done / rows_total * 100:.1f}%")

        click.echo(f"Rendering {render_config.width}x{render_config.height} frame...")
        start_time = time.time()

        saved = renderer.render_to_file(Path(output), progress_callback)

        click.echo(f"Render complete: {time.time() - start_time:.2f}s")
        click.echo(f"Saved: {saved}")

    except Exception as e:
        _fail(ctx, e)


@main.command()
@click.argument('x', type=str)
@click.argument('y', type=str)
@click.option('--max-iter', 'max_iterations', type=int, help='Maximum iterations')
@click.option('--escape-boundary', type=str, help='Per-component escape boundary')
@click.option('--precision', type=str, help="'double' or number of significant digits")
@click.pass_context
def classify(ctx, x, y, **kwargs):
    """
    Classify a single point X + iY of the complex plane.
    """
    try:
        kwargs['precision'] = _parse_precision(kwargs.get('precision'))
        if kwargs['precision'] == 'auto':
            raise click.BadParameter("'auto' needs a frame; give 'double' or a digit count")

        render_config = load_config_from_args(ctx.obj.get('config_file'),
                                              ctx.obj.get('preset'), kwargs)
        renderer = FractalRenderer(render_config)

        result = renderer.classify_point(x, y)
        color = renderer.color_of(result)

        click.echo(f"{x} + {y}i: {result}")
        click.echo(f"Color: {color.to_tuple()}")

    except Exception as e:
        _fail(ctx, e)


@main.command()
@click.pass_context
def list_presets(ctx):
    """List available configuration presets."""
    try:
        manager = ConfigManager()
        config_dict = manager.load_config(ctx.obj.get('config_file'))
        presets = manager.list_presets(config_dict)

        click.echo("Available presets:")
        for name, preset in presets.items():
            click.echo(f"  {name}")

            if ctx.obj.get('verbose'):
                if '_description' in preset:
                    click.echo(f"    Description: {preset['_description']}")
                for key, value in preset.items():
                    if not key.startswith('_'):
                        click.echo(f"    {key}: {value}")

    except Exception as e:
        _fail(ctx, e)


@main.command()
@click.argument('output', type=click.Path(), default='hp_fractal.yaml')
@click.pass_context
def init_config(ctx, output):
    """
    Create a configuration template file (YAML, or JSON for a .json path).
    """
    try:
        path = ConfigManager().export_config_template(output)
        click.echo(f"Configuration template created: {path}")
    except Exception as e:
        _fail(ctx, e)


if __name__ == '__main__':
    main()
