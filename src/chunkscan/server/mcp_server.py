"""FastMCP server exposing chunkscan analysis."""

from pathlib import Path

from mcp.server.fastmcp import FastMCP

from chunkscan.models import AnalysisOptions
from chunkscan.pipeline import DocumentAnalyzer
from chunkscan.utils import classify_file


def create_mcp_server(options: AnalysisOptions | None = None) -> FastMCP:
    """Create an MCP server that analyzes local documents.

    Args:
        options: Options applied to every analysis request

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="chunkscan",
    )

    analyzer = DocumentAnalyzer(options)

    @mcp.tool()
    def analyze(path: str, chunks: int = 4) -> str:
        """Analyze a spreadsheet or PDF and return the JSON report.

        Args:
            path: Path to the document on the server's filesystem
            chunks: Number of byte-range chunks to split the file into (default: 4)

        Returns:
            Aggregate report as JSON: structure counts, sampled content,
            per-chunk results and a quality tier
        """
        if chunks < 1:
            return "Error: chunks must be at least 1"
        report = analyzer.analyze_path(path, chunks)
        return report.to_json()

    @mcp.tool()
    def detect(path: str) -> str:
        """Identify a file's container format from its leading bytes.

        Args:
            path: Path to the file

        Returns:
            One of zip_package, compound_binary, pdf or fragment
        """
        file_path = Path(path)
        if not file_path.is_file():
            return f"Error: File not found: {path}"
        return classify_file(file_path).value

    return mcp
