"""Click CLI commands for plyexport."""

import logging
import pathlib
from typing import Optional, Tuple

import click

from . import constants
from .ply import to_ply_instances, to_ply_pointcloud
from .scene import load_instances, load_point_cloud

logger = logging.getLogger(__name__)


def write_document(document: str, output: str) -> pathlib.Path:
    """Write a PLY document with ``\\n`` line endings."""
    out = pathlib.Path(output)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, 'w', encoding='ascii', newline='\n') as f:
        f.write(document)
    return out


@click.group()
@click.option('--log-level', default=constants.LOG_LEVEL, show_default=True,
              help='Logging level')
def cli(log_level: str):
    """Convert meshes and point clouds to ASCII PLY."""
    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO),
                        format='%(asctime)s - %(levelname)s - %(message)s')


@cli.command()
@click.argument('inputs', nargs=-1, required=True)
@click.option('--output', '-o', default='model.ply', help='Output PLY file path')
@click.option('--local', is_flag=True,
              help='Ignore scene transforms and use each mesh in its own frame')
@click.option('--right-handed', is_flag=True,
              help='Inputs are right-handed (glTF, OBJ, STL); keep their orientation')
@click.option('--precision', '-p', type=int, default=None,
              help='Fractional digits for positions (default: shortest)')
def export(inputs: Tuple[str, ...], output: str, local: bool,
           right_handed: bool, precision: Optional[int]):
    """Merge every mesh in INPUTS into one PLY model."""
    try:
        instances = []
        for path in inputs:
            instances.extend(load_instances(path, right_handed=right_handed))
        if not instances:
            click.echo("No meshes to export")
            return

        document = to_ply_instances(instances, use_world_position=not local,
                                    precision=precision)
        out = write_document(document, output)
        click.echo(f"Exported {len(instances)} meshes to {out}")
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Error exporting meshes: {e}")
        raise click.ClickException(str(e))


@cli.command()
@click.argument('input_path')
@click.option('--output', '-o', default='points.ply', help='Output PLY file path')
@click.option('--right-handed', is_flag=True,
              help='Input is right-handed; keep its orientation')
@click.option('--precision', '-p', type=int, default=None,
              help='Fractional digits for positions (default: shortest)')
def points(input_path: str, output: str, right_handed: bool,
           precision: Optional[int]):
    """Export the vertices of INPUT_PATH as a PLY point cloud."""
    try:
        cloud = load_point_cloud(input_path, right_handed=right_handed)
        document = to_ply_pointcloud(cloud.positions, cloud.colors,
                                     precision=precision)
        out = write_document(document, output)
        click.echo(f"Exported {cloud.n_points} points to {out}")
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Error exporting points: {e}")
        raise click.ClickException(str(e))


if __name__ == '__main__':
    cli()
