"""Text filter for PDF sources using XPDF's pdftotext.

Produces extracted text suitable for building a search index, not for display
to end users. Requires the configuration key:

    xpdf.path.pdftotext -- path to the "pdftotext" executable
"""

from pathlib import Path

from media_filter.exit_status import ExitStatus
from media_filter.process import ProcessResult
from schemas.descriptor import FilterDescriptor

from .subprocess_filter import COMMAND_PLACEHOLDER, INFILE_PLACEHOLDER, SubprocessFilter


class XPDFTextFilter(SubprocessFilter):
    """Extract text from a PDF by forking pdftotext.

    pdftotext needs random access to the PDF, so the source is staged to a
    temporary file; "-" as the output file sends the text to stdout.
    """

    descriptor = FilterDescriptor(
        name="pdftotext",
        suffix=".txt",
        bundle_name="TEXT",
        format_string="Text",
        description="Extracted Text",
        source_suffixes=(".pdf",),
    )

    command_template = (
        COMMAND_PLACEHOLDER, "-q", "-enc", "UTF-8", INFILE_PLACEHOLDER, "-",
    )
    config_key = "xpdf.path.pdftotext"
    tool_name = "pdftotext"
    staging_suffix = ".pdf"

    def failure_message(self, status: ExitStatus, result: ProcessResult, infile: Path) -> str:
        if status is ExitStatus.INPUT_ERROR:
            return f"pdftotext failed opening input: file={infile}"
        if status is ExitStatus.PERMISSION_DENIED:
            return (
                "pdftotext permission failure (perhaps copying of text from this "
                "document is not allowed - check PDF file's internal permissions): "
                f"file={infile}"
            )
        return f"pdftotext failed, maybe corrupt PDF? status={result.returncode}"
