"""Single-sample VCF streams and the manifest that lists them."""

import os
from typing import NamedTuple, Optional

# Third party modules
import pysam

from tqdm import tqdm
from admatrix.chromosomes import SiteKey, site_cmp, site_key
from admatrix.errors import (
    CallParseError,
    InputOpenError,
    InvalidPathError,
    ManifestFormatError,
    ManifestOpenError,
    UnsortedInputError,
)

# Linux PATH_MAX, including the terminating byte
PATH_MAX = 4096

ALLELIC_DEPTH_KEY = "AD"


class VariantCall(NamedTuple):
    """One call of one sample: a site and the raw genotype payload.

    The payload is the sample's colon-separated FORMAT values starting at
    the allelic depths, e.g. "5,3:8" for FORMAT GT:AD:DP and sample 0/1:5,3:8,
    or "5,3" for FORMAT GT:AD.
    """

    chrom: str
    pos: int
    payload: str


def call_from_record(record: pysam.VariantRecord, path: str) -> VariantCall:
    """Build a VariantCall from a single-sample pysam record.

    Args
    ----------
    record (pysam.VariantRecord): The record to convert.
    path (str): Path of the sample file, for error messages.

    Returns
    ----------
    VariantCall: The record's chromosome, position and payload.

    Raises
    ----------
    CallParseError: If the record has no single sample column or no AD key.
    """
    # Work from the record text so the payload is passed on verbatim
    fields = str(record).rstrip("\n").split("\t")
    if len(fields) != 10:
        raise CallParseError(
            f"{path}: expected exactly one sample column at {record.chrom}:{record.pos}, "
            f"found {max(len(fields) - 9, 0)}"
        )

    format_keys = fields[8].split(":")
    if ALLELIC_DEPTH_KEY not in format_keys:
        raise CallParseError(
            f"{path}: no {ALLELIC_DEPTH_KEY} in FORMAT '{fields[8]}' at {record.chrom}:{record.pos}"
        )
    sample_values = fields[9].split(":")
    payload = ":".join(sample_values[format_keys.index(ALLELIC_DEPTH_KEY) :])

    return VariantCall(record.chrom, record.pos, payload)


class SampleStream:
    """An open single-sample VCF and its pending call.

    The stream is created open with no pending call. advance() reads the next
    call; at end of file the stream closes itself and is never reopened.
    """

    def __init__(self, path: str, debug: bool = False):
        """Open a single-sample VCF, VCF.gz or BCF file.

        Args
        ----------
        path : str
            Path to the sample file.
        debug : bool, optional
            Print every call as it is read.

        Raises
        -------
        InputOpenError
            If the file cannot be opened or is not a VCF/BCF file.
        CallParseError
            If the file does not hold exactly one sample.
        """
        self.path = path
        self.debug = debug
        self.call: Optional[VariantCall] = None
        self.site_key: Optional[SiteKey] = None
        self.is_open = False
        self.variant_file: Optional[pysam.VariantFile] = None

        if not os.access(self.path, os.R_OK):
            raise InputOpenError(f"Cannot open {self.path}: not a readable file")

        # An empty file is an empty stream: open, then closed on its first read
        if os.path.getsize(self.path) == 0:
            self.is_open = True
            return

        try:
            self.variant_file = pysam.VariantFile(self.path)  # pylint: disable=no-member
        except (OSError, ValueError) as exc:
            raise InputOpenError(f"Cannot open {self.path}: {exc}") from exc
        self.is_open = True

        if len(self.variant_file.header.samples) != 1:
            sample_count = len(self.variant_file.header.samples)
            self.close()
            raise CallParseError(
                f"{self.path}: expected a single-sample VCF, found {sample_count} samples"
            )

    def read_call(self) -> Optional[VariantCall]:
        """Read the next call from the file, or return None at end of file.

        Raises
        -------
        CallParseError
            If the next record is malformed.
        """
        if self.variant_file is None:
            return None
        try:
            record = next(self.variant_file, None)
        except (OSError, ValueError) as exc:
            raise CallParseError(
                f"{self.path}: malformed record after {self.describe_site()}: {exc}"
            ) from exc
        if record is None:
            return None
        return call_from_record(record, self.path)

    def advance(self) -> bool:
        """Replace the pending call with the next one from the file.

        Returns
        -------
        bool
            True if a new call is pending, False if the stream reached end of
            file and has been closed.

        Raises
        -------
        UnsortedInputError
            If the new call sorts before the previous one.
        """
        call = self.read_call()
        if call is None:
            self.close()
            return False

        if self.call is not None and site_cmp(
            call.chrom, call.pos, self.call.chrom, self.call.pos
        ) < 0:
            raise UnsortedInputError(
                f"{self.path}: {call.chrom}:{call.pos} follows {self.describe_site()}; "
                "input must be sorted by chromosome and position"
            )

        self.call = call
        self.site_key = site_key(call.chrom, call.pos)
        if self.debug:
            tqdm.write(f"{self.path} {call.chrom} {call.pos} {call.payload}")
        return True

    def describe_site(self) -> str:
        """Return the pending site as "chrom:pos", for messages."""
        if self.call is None:
            return "start of file"
        return f"{self.call.chrom}:{self.call.pos}"

    def close(self) -> None:
        """Close the underlying file. Safe to call more than once."""
        if self.variant_file is not None:
            self.variant_file.close()
            self.variant_file = None
        self.is_open = False


def load_manifest(manifest_path: str) -> list[str]:
    """Read the list of sample file paths from a manifest.

    One path per line, surrounding whitespace stripped. Order is preserved and
    paths are neither deduplicated nor skipped: manifest order is column order.

    Args
    ----------
    manifest_path (str): Path to the manifest file.

    Returns
    ----------
    list: Sample file paths in manifest order.

    Raises
    ----------
    ManifestOpenError: If the manifest cannot be read.
    ManifestFormatError: If the manifest has a blank line.
    InvalidPathError: If a path is longer than PATH_MAX.
    """
    try:
        with open(manifest_path, encoding="utf-8") as f:
            lines = f.readlines()
    except OSError as exc:
        raise ManifestOpenError(f"Cannot open {manifest_path}: {exc.strerror}") from exc
    except UnicodeDecodeError as exc:
        raise ManifestFormatError(f"{manifest_path} is not a text file") from exc

    sample_paths = []
    for line_number, line in enumerate(lines, start=1):
        path = line.strip()
        if not path:
            raise ManifestFormatError(
                f"{manifest_path}, line {line_number}: blank lines are not allowed"
            )
        if len(os.fsencode(path)) >= PATH_MAX:
            raise InvalidPathError(
                f"{manifest_path}, line {line_number}: path exceeds {PATH_MAX - 1} bytes"
            )
        sample_paths.append(path)

    return sample_paths


def open_sample_streams(
    sample_paths: list[str], debug: bool = False
) -> list[SampleStream]:
    """Open one SampleStream per path, in order.

    If any file fails to open, the streams opened so far are closed and the
    error is raised: there is no partial run.
    """
    sample_streams: list[SampleStream] = []
    try:
        for path in sample_paths:
            sample_streams.append(SampleStream(path, debug=debug))
    except Exception:
        for sample_stream in sample_streams:
            sample_stream.close()
        raise
    return sample_streams
