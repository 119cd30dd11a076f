# Import modules
import click
import sys
import time

from admatrix import __version__
from admatrix.errors import ALLOCATION_FAILED_EXIT_CODE, AdMatrixError
from admatrix.functions import build_matrix
from admatrix.samples import load_manifest, open_sample_streams
from admatrix.sinks import (
    DEFAULT_COMPRESSION_LEVEL,
    matrix_paths,
    open_matrix_sinks,
    validate_output,
)


def write_matrices(
    manifest: str,
    output_stem: str,
    compression_level: int = DEFAULT_COMPRESSION_LEVEL,
    overwrite: bool = False,
    verbose: bool = False,
    debug: bool = False,
) -> int:
    """Build both allelic-depth matrices for the samples listed in a manifest.

    Args
    ----------
    manifest (str): File listing one single-sample VCF per line.
    output_stem (str): Output prefix; "-ref.tsv.xz" and "-ref+alt.tsv.xz" are appended.
    compression_level (int): xz preset for both outputs.
    overwrite (bool): Replace existing output files.
    verbose (bool): Verbose output and a row counter.
    debug (bool): Print every call and row as it is processed.

    Returns
    ----------
    int: Number of matrix rows written.

    Raises
    ----------
    AdMatrixError: On any manifest, input, parse or output failure.
    """
    sample_paths = load_manifest(manifest)
    print(f"{len(sample_paths)} VCF files.")
    if verbose:
        for path in sample_paths:
            print(f"\t{path}")

    validate_output(output_stem=output_stem, overwrite=overwrite)

    sample_streams = open_sample_streams(sample_paths, debug=debug)
    try:
        ref_sink, ref_alt_sink = open_matrix_sinks(output_stem, compression_level)
        with ref_sink, ref_alt_sink:
            row_count = build_matrix(
                sample_streams,
                ref_sink,
                ref_alt_sink,
                verbose=verbose,
                debug=debug,
            )
    finally:
        for sample_stream in sample_streams:
            sample_stream.close()

    return row_count


@click.command(
    help="Build allelic-depth matrices from the single-sample VCF files listed in MANIFEST. "
    "Writes OUTPUT_STEM-ref.tsv.xz (reference depths) and OUTPUT_STEM-ref+alt.tsv.xz "
    "(all allele depths), one row per site and one column per sample."
)
@click.version_option(version=__version__)
@click.argument("manifest", type=click.Path(dir_okay=False))
@click.argument("output_stem", type=click.Path(dir_okay=False))
@click.option(
    "--compression-level",
    help=f"xz compression preset for both outputs (default = {DEFAULT_COMPRESSION_LEVEL})",
    default=DEFAULT_COMPRESSION_LEVEL,
    type=click.IntRange(0, 9),
)
@click.option("--overwrite", help="Overwrite output files if they exist.", is_flag=True)
@click.option("--verbose", help="Verbose output.", is_flag=True)
@click.option(
    "--debug",
    help="Debug mode (print every call and row as it is processed).",
    is_flag=True,
    type=bool,
)
def main(
    manifest: str,
    output_stem: str,
    compression_level: int,
    overwrite: bool,
    verbose: bool,
    debug: bool,
) -> None:
    """ad-matrix."""
    time_start = time.time()
    ref_path, ref_alt_path = matrix_paths(output_stem)
    if verbose:
        print(f"Manifest: {manifest}")
        print(f"Reference depth matrix: {ref_path}")
        print(f"Reference+alternate depth matrix: {ref_alt_path}")

    try:
        row_count = write_matrices(
            manifest=manifest,
            output_stem=output_stem,
            compression_level=compression_level,
            overwrite=overwrite,
            verbose=verbose,
            debug=debug,
        )
    except AdMatrixError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(e.exit_code)
    except MemoryError:
        click.echo("Error: out of memory", err=True)
        sys.exit(ALLOCATION_FAILED_EXIT_CODE)

    print(f"\nWrote {row_count:,} rows.")
    if verbose:
        print(f"\nTotal time elapsed: {time.time() - time_start:.2f} seconds")
    print("\nRun complete.")


if __name__ == "__main__":
    main(prog_name="ad-matrix")  # pylint: disable=no-value-for-parameter
