"""Merge per-chunk results into a document report."""

import logging
from typing import Iterable

from chunkscan.models import AggregateReport, ChunkResult, ConversionResult, StructureStats

logger = logging.getLogger(__name__)


class ResultAggregator:
    """Order-independent merge of chunk results.

    Structure counts are summed over successful chunks only. Content is
    concatenated by ascending chunk index, with each chunk's OCR text placed
    right after its own content.
    Container metadata is merged in the same order.
    """

    def aggregate(
        self,
        file_path: str,
        results: Iterable[ChunkResult],
        *,
        continue_on_error: bool,
        aborted: bool = False,
        skipped: Iterable[int] = (),
        conversions: Iterable[ConversionResult] = (),
        events: Iterable[object] = (),
    ) -> AggregateReport:
        ordered = sorted(results, key=lambda r: r.chunk_index)
        ocr_text = {}
        ocr_pages = []
        warnings = [str(e) for e in events]

        for conversion in sorted(conversions, key=lambda c: c.chunk_index):
            if conversion.success:
                ocr_pages.extend(conversion.pages)
                if conversion.text:
                    ocr_text[conversion.chunk_index] = conversion.text
            else:
                warnings.append(
                    f"OCR for chunk {conversion.chunk_index} failed: {conversion.error}"
                )
            warnings.extend(conversion.warnings)

        structure = StructureStats.empty()
        sections: list[str] = []
        failed: list[int] = []
        metadata: dict = {}

        for result in ordered:
            warnings.extend(result.warnings)
            if not result.success:
                failed.append(result.chunk_index)
                continue
            structure = structure.merge(result.structure)
            # Later chunks overwrite keys reported by earlier ones
            metadata.update(result.metadata)
            if result.content:
                sections.append(result.content)
            if result.chunk_index in ocr_text:
                sections.append(ocr_text[result.chunk_index])

        success = not aborted and (continue_on_error or not failed)
        if failed:
            logger.info(f"{len(failed)} of {len(ordered)} chunks failed: {failed}")

        return AggregateReport(
            file_path=file_path,
            success=success,
            structure=structure,
            content="\n\n".join(sections),
            chunks=ordered,
            failed_chunks=failed,
            skipped_chunks=sorted(skipped),
            aborted=aborted,
            ocr_pages=ocr_pages,
            warnings=warnings,
            metadata=metadata,
        )
