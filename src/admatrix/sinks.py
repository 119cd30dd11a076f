"""xz-compressed output matrices written through an external compressor."""

import os
import shutil
import subprocess
from typing import Optional

from admatrix.errors import OutputCloseError, OutputOpenError

COMPRESSOR = "xz"

# A mid-range preset keeps xz ahead of matrix generation
DEFAULT_COMPRESSION_LEVEL = 4

REF_SUFFIX = "-ref.tsv.xz"
REF_ALT_SUFFIX = "-ref+alt.tsv.xz"


def matrix_paths(output_stem: str) -> tuple[str, str]:
    """Return the (reference, reference+alternate) matrix paths for an output stem."""
    return output_stem + REF_SUFFIX, output_stem + REF_ALT_SUFFIX


class CompressedSink:
    """A write-only text stream piped into `xz` and on to a file.

    Use as a context manager, or call close() and let it check the
    compressor's exit status.
    """

    def __init__(self, path: str, compression_level: int = DEFAULT_COMPRESSION_LEVEL):
        """Create the output file and start the compressor.

        Args
        ----------
        path : str
            The compressed output file.
        compression_level : int, optional
            xz preset, 0 (fast) to 9 (small).

        Raises
        -------
        OutputOpenError
            If the file cannot be created or xz cannot be started.
        """
        self.path = path
        self.compression_level = compression_level
        self.process: Optional[subprocess.Popen] = None

        compressor = shutil.which(COMPRESSOR)
        if compressor is None:
            raise OutputOpenError(f"Cannot find '{COMPRESSOR}' on PATH to compress {path}")

        try:
            self.output_file = open(path, "wb")  # pylint: disable=consider-using-with
        except OSError as exc:
            raise OutputOpenError(f"Cannot create {path}: {exc.strerror}") from exc

        try:
            self.process = subprocess.Popen(  # pylint: disable=consider-using-with
                [compressor, f"-{compression_level}", "--stdout"],
                stdin=subprocess.PIPE,
                stdout=self.output_file,
                text=True,
                encoding="utf-8",
            )
        except OSError as exc:
            self.output_file.close()
            raise OutputOpenError(f"Cannot start {COMPRESSOR} for {path}: {exc}") from exc

    def write(self, text: str) -> int:
        """Send text to the compressor."""
        try:
            return self.process.stdin.write(text)  # type: ignore
        except BrokenPipeError as exc:
            raise OutputCloseError(f"{COMPRESSOR} for {self.path} exited early") from exc

    def close(self) -> None:
        """Flush, wait for the compressor and close the file.

        Raises
        -------
        OutputCloseError
            If the compressor fails.
        """
        return_code = self.stop()
        if return_code:
            raise OutputCloseError(
                f"{COMPRESSOR} exited with status {return_code} while writing {self.path}"
            )

    def stop(self) -> Optional[int]:
        """Close the pipe and the file; return the compressor's exit status.

        Returns None if the sink was already closed.
        """
        if self.process is None:
            return None
        process, self.process = self.process, None

        try:
            process.stdin.close()  # type: ignore
        except BrokenPipeError:
            # xz already exited; its status says why
            process.stdin = None
        return_code = process.wait()
        self.output_file.close()
        return return_code

    def __enter__(self) -> "CompressedSink":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if exc_type is None:
            self.close()
        else:
            # Don't mask the original error
            self.stop()


def open_matrix_sinks(
    output_stem: str, compression_level: int = DEFAULT_COMPRESSION_LEVEL
) -> tuple[CompressedSink, CompressedSink]:
    """Open the reference and reference+alternate matrix sinks for an output stem."""
    ref_path, ref_alt_path = matrix_paths(output_stem)
    ref_sink = CompressedSink(ref_path, compression_level)
    try:
        ref_alt_sink = CompressedSink(ref_alt_path, compression_level)
    except OutputOpenError:
        ref_sink.stop()
        raise
    return ref_sink, ref_alt_sink


def validate_output(output_stem: str, overwrite: bool) -> None:
    """Check that both matrix files can be written.

    Raises
    ----------
    OutputOpenError: If an output exists and overwrite is False, or the
        output directory is not writable.
    """
    for output_file in matrix_paths(output_stem):
        if os.path.exists(output_file):
            if overwrite and os.access(output_file, os.W_OK):
                print(
                    f"\tOutput file exists and --overwrite specified. Will overwrite {output_file}"
                )
            else:
                raise OutputOpenError(
                    f"Output file exists and --overwrite not specified or not writable: {output_file}"
                )
        elif not os.access(os.path.dirname(os.path.abspath(output_file)), os.W_OK):
            raise OutputOpenError(f"Output file path is not writable: {output_file}")
