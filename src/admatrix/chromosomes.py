"""Genomic ordering of chromosome names and site keys."""

# Sex chromosomes and the mitochondrial genome follow the autosomes, in this order
NAMED_CHROMOSOMES = {"X": 0, "Y": 1, "M": 2, "MT": 2}

SiteKey = tuple[tuple[int, int, str, str], int]


def chromosome_sort_key(name: str) -> tuple[int, int, str, str]:
    """Return a key that sorts chromosome names in genomic order.

    An optional "chr" prefix is ignored. Numeric names come first and sort
    numerically, then X, Y and M/MT, then every other contig lexically.
    The raw name is the final tie-breaker, so "chr1" and "1" are distinct.

    Args
    ----------
    name (str): Chromosome name, e.g. "chr1", "X" or "GL000220.1".

    Returns
    ----------
    tuple: A sortable key.
    """
    short_name = name[3:] if name.startswith("chr") else name

    if short_name.isdigit():
        return (0, int(short_name), "", name)
    if short_name in NAMED_CHROMOSOMES:
        return (1, NAMED_CHROMOSOMES[short_name], "", name)
    return (2, 0, short_name, name)


def chromosome_name_cmp(name1: str, name2: str) -> int:
    """Three-way compare of two chromosome names.

    Returns a negative number, zero or a positive number when name1 sorts
    before, equal to or after name2.
    """
    key1 = chromosome_sort_key(name1)
    key2 = chromosome_sort_key(name2)
    return (key1 > key2) - (key1 < key2)


def site_key(chrom: str, pos: int) -> SiteKey:
    """Sort key of a (chromosome, position) site."""
    return (chromosome_sort_key(chrom), pos)


def site_cmp(chrom1: str, pos1: int, chrom2: str, pos2: int) -> int:
    """Three-way compare of two sites: chromosome first, then position."""
    chrom_order = chromosome_name_cmp(chrom1, chrom2)
    if chrom_order != 0:
        return chrom_order
    return (pos1 > pos2) - (pos1 < pos2)
