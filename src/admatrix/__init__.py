"""ad-matrix: Build allelic-depth matrices from single-sample VCF files.

ad-matrix merges many single-sample VCF files, each sorted by chromosome and
position, into two dense tab-separated matrices: one row per site seen in any
sample (in genomic order), one column per sample (in manifest order). The
input files are streamed in lockstep, so memory use does not grow with the
size of the inputs.

Main Components:
    build_matrix: The streaming k-way merge that writes the matrix rows.
    split_genotype: Extracts the reference and reference+alternate depths
        from a sample's allelic-depth (AD) field.
    SampleStream: An open single-sample VCF and its pending call.
    CompressedSink: An output file written through an external xz process.

Example:
    Command-line usage::

        $ ad-matrix samples.txt cohort

    Python API usage::

        import io
        from admatrix.functions import build_matrix
        from admatrix.samples import load_manifest, open_sample_streams

        streams = open_sample_streams(load_manifest("samples.txt"))
        ref, ref_alt = io.StringIO(), io.StringIO()
        build_matrix(streams, ref, ref_alt)

Output Format:
    Two xz-compressed tab-separated files, <stem>-ref.tsv.xz and
    <stem>-ref+alt.tsv.xz, with no header row:
    - Column 1 is the chromosome, column 2 the position
    - The remaining columns are one per sample, in manifest order
    - Cells are the reference depth (e.g. 5) or all allele depths (e.g. 5,3),
      or "." where the sample has no call at that site
    - Every row ends with a tab before the newline
"""

__version__ = "1.0"
