"""Shared fixtures: small single-sample VCF files written on the fly."""

import pytest

VCF_HEADER = """##fileformat=VCFv4.2
{contigs}##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">
##FORMAT=<ID=AD,Number=R,Type=Integer,Description="Allelic depths for the ref and alt alleles">
##FORMAT=<ID=DP,Number=1,Type=Integer,Description="Read depth">
##FORMAT=<ID=PL,Number=G,Type=Integer,Description="Phred-scaled genotype likelihoods">
#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\t{samples}
"""

CONTIGS = ["1", "2", "10", "20", "X", "Y", "MT", "chr1", "chr2"]


def vcf_text(calls, samples=("sample",), format_keys="GT:AD:DP") -> str:
    """Render (chrom, pos, sample_value) tuples as a VCF.

    A sample value without a ':' is taken as the AD field and expanded to
    GT:AD:DP, e.g. "5,3" becomes "0/1:5,3:8".
    """
    contigs = "".join(f"##contig=<ID={c}>\n" for c in CONTIGS)
    lines = [VCF_HEADER.format(contigs=contigs, samples="\t".join(samples))]
    for chrom, pos, value in calls:
        alt_count = 1
        if ":" not in value and format_keys == "GT:AD:DP":
            depths = value.split(",")
            total = sum(int(d) for d in depths if d.isdigit())
            alt_count = max(len(depths) - 1, 1)
            value = f"0/1:{value}:{total}"
        alts = ",".join(["C", "G", "T"][:alt_count])
        sample_values = "\t".join([value] * len(samples))
        lines.append(
            f"{chrom}\t{pos}\t.\tA\t{alts}\t50\tPASS\t.\t{format_keys}\t{sample_values}\n"
        )
    return "".join(lines)


@pytest.fixture
def write_vcf(tmp_path):
    """Return a function that writes a VCF into tmp_path and returns its path."""

    def _write_vcf(name, calls, **kwargs) -> str:
        path = tmp_path / name
        path.write_text(vcf_text(calls, **kwargs))
        return str(path)

    return _write_vcf


@pytest.fixture
def write_manifest(tmp_path):
    """Return a function that writes a manifest of paths and returns its path."""

    def _write_manifest(paths, name="manifest.txt") -> str:
        path = tmp_path / name
        path.write_text("".join(f"{p}\n" for p in paths))
        return str(path)

    return _write_manifest
