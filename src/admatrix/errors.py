"""Exceptions raised by ad-matrix.

Every exception carries the process exit code the command line uses when it
reports the error. Codes follow the BSD sysexits(3) convention.
"""

EX_DATAERR = 65
EX_NOINPUT = 66
EX_UNAVAILABLE = 69
EX_OSERR = 71
EX_CANTCREAT = 73
EX_IOERR = 74


class AdMatrixError(Exception):
    """Base class for all ad-matrix errors."""

    exit_code = 1


class ManifestOpenError(AdMatrixError):
    """The manifest file itself cannot be read."""

    exit_code = EX_NOINPUT


class ManifestFormatError(AdMatrixError):
    """The manifest contains a blank line."""

    exit_code = EX_DATAERR


class InvalidPathError(ManifestFormatError):
    """A manifest line is longer than the platform path limit."""


class InputOpenError(AdMatrixError):
    """A sample file listed in the manifest cannot be opened."""

    exit_code = EX_UNAVAILABLE


class OutputOpenError(AdMatrixError):
    """An output file or its compressor cannot be created."""

    exit_code = EX_CANTCREAT


class OutputCloseError(AdMatrixError):
    """An output compressor failed while writing or closing."""

    exit_code = EX_IOERR


class CallParseError(AdMatrixError):
    """A sample file contains a record that cannot be used."""

    exit_code = EX_DATAERR


class GenotypeParseError(CallParseError):
    """A sample payload has no allelic-depth field to split."""


class UnsortedInputError(CallParseError):
    """A sample file is not sorted by chromosome and position."""


ALLOCATION_FAILED_EXIT_CODE = EX_OSERR
