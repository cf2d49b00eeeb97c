"""
Report generation utilities.
Creates human-readable summaries of render runs.
"""
import json
from collections import Counter
from datetime import datetime

from jewelry_invoice.core.models import BatchResult
from jewelry_invoice.utils.currency import format_indian


def generate_summary_report(batch_result: BatchResult) -> str:
    """
    Generate text summary report from batch results.

    Args:
        batch_result: Batch render results

    Returns:
        Formatted text report
    """
    lines = []
    total = batch_result.total or 1
    elapsed = batch_result.processing_time_seconds or 0.0

    # Header
    lines.append("=" * 70)
    lines.append("INVOICE RENDERING REPORT")
    lines.append("=" * 70)
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("")

    # Summary statistics
    lines.append("SUMMARY STATISTICS")
    lines.append("-" * 70)
    lines.append(f"Orders Processed:          {batch_result.total}")
    lines.append(f"Rendered:                  {batch_result.succeeded} "
                 f"({batch_result.succeeded / total * 100:.1f}%)")
    lines.append(f"Failed:                    {batch_result.failed} "
                 f"({batch_result.failed / total * 100:.1f}%)")
    lines.append(f"Processing Time:           {elapsed:.2f} seconds")
    if elapsed > 0:
        lines.append(f"Throughput:                {batch_result.total / elapsed:.1f} invoices/sec")

    net_total = sum(r.net_amount for r in batch_result.results if r.success and r.net_amount is not None)
    lines.append(f"Net Amount Invoiced:       {format_indian(net_total, decimals=True)}")
    lines.append("")

    succeeded = [r for r in batch_result.results if r.success]
    if succeeded:
        lines.append("BACKENDS USED")
        lines.append("-" * 70)
        for backend, count in Counter(r.backend for r in succeeded).most_common():
            lines.append(f"{backend}: {count}")
        lines.append("")

    # Failed invoices
    failed_results = [r for r in batch_result.results if not r.success]
    if failed_results:
        lines.append("FAILED INVOICES")
        lines.append("-" * 70)

        for result in failed_results[:20]:  # Show first 20
            lines.append(f"Invoice: {result.invoice_no}")
            lines.append(f"  Reason: {result.reason}")
            lines.append("")

        if len(failed_results) > 20:
            lines.append(f"... and {len(failed_results) - 20} more failed invoices")
            lines.append("")

    # Footer
    lines.append("=" * 70)
    lines.append("END OF REPORT")
    lines.append("=" * 70)

    return "\n".join(lines)


def generate_json_report(batch_result: BatchResult, output_path: str):
    """
    Generate JSON report.

    Args:
        batch_result: Batch results
        output_path: Output file path
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(batch_result.model_dump(), f, indent=2, default=str)
