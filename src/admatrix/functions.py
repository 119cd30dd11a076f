"""Core functions for ad-matrix."""

from typing import TextIO

# Third party modules
from tqdm import tqdm
from admatrix.errors import GenotypeParseError
from admatrix.samples import SampleStream

# Cell value for a sample with no call at a site
NO_CALL = "."


def split_genotype(payload: str) -> tuple[str, str]:
    """
    Split a sample payload into its reference and reference+alternate depths.

    The payload's first colon-separated field is the comma-separated list of
    per-allele depths; later fields, if any, are ignored. The reference depth
    is the first entry of that list and the reference+alternate depth is the
    whole list, verbatim. No arithmetic is done on either value.

    Args
    -------
        payload: e.g. "5,3", "5,3:8" or "3,2,1:...:6".

    Returns
    -------
        A (reference depth, reference+alternate depth) tuple, e.g. ("5", "5,3").

    Raises
    -------
        GenotypeParseError: If the depths have no "," (e.g. a missing "." AD).
    """
    allele_depths = payload.partition(":")[0]

    ref_depth, comma, _ = allele_depths.partition(",")
    if not comma:
        raise GenotypeParseError(
            f"No ',' in allelic depths '{allele_depths}' of genotype payload '{payload}'"
        )
    if not ref_depth or "\t" in allele_depths or "\n" in allele_depths:
        raise GenotypeParseError(f"Invalid allelic depths '{allele_depths}'")

    return ref_depth, allele_depths


def build_matrix(
    sample_streams: list[SampleStream],
    ref_sink: TextIO,
    ref_alt_sink: TextIO,
    verbose: bool = False,
    debug: bool = False,
) -> int:
    """
    Merge single-sample call streams into reference and reference+alternate depth matrices.

    Every stream must be sorted by (chromosome, position). One row is written
    to each sink per distinct site, in genomic order: chromosome, position,
    then one cell per sample in stream order, each cell followed by a tab.
    A sample without a call at the row's site gets "." in both matrices.
    Streams are read one call at a time and closed at their end of file.

    Args
    -------
        sample_streams: Opened sample streams, in column order.
        ref_sink: Writer for the reference depth matrix.
        ref_alt_sink: Writer for the reference+alternate depth matrix.
        verbose: Show a row counter.
        debug: Print each row key as it is written.

    Returns
    -------
        The number of rows written.

    Raises
    -------
        CallParseError: If a sample record or payload is malformed or out of order.
    """
    # First call from each sample file
    for sample_stream in sample_streams:
        if not sample_stream.advance() and verbose:
            print(f"\t{sample_stream.path} has no calls; its column will be all '{NO_CALL}'")

    open_count = sum(1 for s in sample_streams if s.is_open)
    row_count = 0

    with tqdm(unit=" rows", disable=not verbose) as progress:
        while open_count > 0:
            # Lowest site among the pending calls of all open samples
            low_key = min(s.site_key for s in sample_streams if s.is_open)  # type: ignore
            participants = [
                s for s in sample_streams if s.is_open and s.site_key == low_key
            ]
            low_call = participants[0].call
            assert low_call is not None

            ref_row = [low_call.chrom, str(low_call.pos)]
            ref_alt_row = list(ref_row)
            for sample_stream in sample_streams:
                if sample_stream.is_open and sample_stream.site_key == low_key:
                    try:
                        ref_depth, ref_alt_depth = split_genotype(
                            sample_stream.call.payload  # type: ignore
                        )
                    except GenotypeParseError as exc:
                        raise GenotypeParseError(
                            f"{sample_stream.path} at {low_call.chrom}:{low_call.pos}: {exc}"
                        ) from exc
                    ref_row.append(ref_depth)
                    ref_alt_row.append(ref_alt_depth)
                else:
                    ref_row.append(NO_CALL)
                    ref_alt_row.append(NO_CALL)

            # Rows end with a tab before the newline
            ref_sink.write("\t".join(ref_row) + "\t\n")
            ref_alt_sink.write("\t".join(ref_alt_row) + "\t\n")
            row_count += 1
            progress.update()
            if debug:
                tqdm.write(f"Row {row_count}: {low_call.chrom} {low_call.pos}")

            # Read the next call for each sample that was output
            for sample_stream in participants:
                if not sample_stream.advance():
                    open_count -= 1

    return row_count
