"""
Jewelry Invoice Renderer - Main Entry Point
Command-line interface for rendering invoices from order files.
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from jewelry_invoice.config import RenderConfig
from jewelry_invoice.core.parsers import load_order
from jewelry_invoice.core.repository import load_catalog
from jewelry_invoice.pipeline import FORMAT_HTML, FORMAT_PDF, InvoicePipeline
from jewelry_invoice.processing.concurrent import ConcurrentRenderer
from jewelry_invoice.reports.generator import generate_summary_report


# Configure logging
def setup_logging(config: RenderConfig, verbose: bool = False):
    """Configure application logging"""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def _build_pipeline(args, config: RenderConfig) -> InvoicePipeline:
    catalog = load_catalog(args.catalog)
    if catalog.store is None:
        raise ValueError(f"Catalog {args.catalog} has no store section")
    return InvoicePipeline(catalog, catalog.store, config)


def render_single(args, config: RenderConfig):
    """Handle single order rendering command"""
    order_path = Path(args.order)

    if not order_path.exists():
        logging.error(f"Order file not found: {order_path}")
        return 1

    pipeline = _build_pipeline(args, config)
    order = load_order(order_path)

    logging.info(f"Rendering order {order.order_id} to {args.output} ({args.format})")
    result = pipeline.render_to_file(order, args.output, fmt=args.format)

    print("\n" + "=" * 60)
    print(f"Invoice: {result.invoice_no}")
    print("=" * 60)

    if result.success:
        print("✓ RENDERED")
        print(f"\nFile:       {result.output_path}")
        print(f"Backend:    {result.backend}")
        print(f"Net Amount: {result.net_amount}")
    else:
        print("✗ FAILED")
        print(f"\nReason: {result.reason}")

    print("=" * 60)

    if result.elapsed_ms:
        print(f"Processing time: {result.elapsed_ms:.2f}ms")

    return 0 if result.success else 1


def render_directory(args, config: RenderConfig):
    """Handle directory batch rendering command"""
    input_dir = Path(args.input)
    output_dir = Path(args.output)

    if not input_dir.exists():
        logging.error(f"Input directory not found: {input_dir}")
        return 1

    workers = args.workers or config.max_workers

    logging.info(f"Starting batch: {input_dir}")
    logging.info(f"Pattern: {args.pattern}")
    logging.info(f"Workers: {workers}")

    pipeline = _build_pipeline(args, config)
    renderer = ConcurrentRenderer(pipeline, max_workers=workers)
    result = renderer.render_directory(input_dir, output_dir, fmt=args.format, pattern=args.pattern)

    print("\n" + "=" * 60)
    print("INVOICE RENDERING SUMMARY")
    print("=" * 60)
    print(f"Total Orders:      {result.total}")
    print(f"Rendered:          {result.succeeded}")
    print(f"Failed:            {result.failed}")
    print(f"Processing Time:   {result.processing_time_seconds:.2f}s")
    print("=" * 60)

    output_dir.mkdir(parents=True, exist_ok=True)
    report_path = output_dir / f"summary_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt"
    with open(report_path, 'w', encoding='utf-8') as f:
        f.write(generate_summary_report(result))
    logging.info(f"Summary report saved: {report_path}")

    return 0 if result.failed == 0 else 1


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Jewelry Invoice Renderer - Price orders and render tax invoices'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Single order command
    render_parser = subparsers.add_parser('render', help='Render a single order file')
    render_parser.add_argument('order', help='Path to order file (JSON or XML)')
    render_parser.add_argument('--catalog', required=True, help='Catalog JSON file')
    render_parser.add_argument('--output', '-o', required=True, help='Output file path')
    render_parser.add_argument('--format', '-f', choices=[FORMAT_PDF, FORMAT_HTML], default=FORMAT_PDF)
    render_parser.add_argument('--backend', '-b', action='append',
                               help='Backend to try, in order (repeatable)')
    render_parser.add_argument('--verbose', '-v', action='store_true', help='Verbose logging')

    # Directory command
    batch_parser = subparsers.add_parser('batch', help='Render every order in a directory')
    batch_parser.add_argument('--input', '-i', required=True, help='Input directory path')
    batch_parser.add_argument('--catalog', required=True, help='Catalog JSON file')
    batch_parser.add_argument('--output', '-o', required=True, help='Output directory')
    batch_parser.add_argument('--pattern', '-p', default='*', help='File pattern (default: *)')
    batch_parser.add_argument('--format', '-f', choices=[FORMAT_PDF, FORMAT_HTML], default=FORMAT_PDF)
    batch_parser.add_argument('--backend', '-b', action='append',
                              help='Backend to try, in order (repeatable)')
    batch_parser.add_argument('--workers', '-w', type=int, default=None, help='Number of worker threads')
    batch_parser.add_argument('--verbose', '-v', action='store_true', help='Verbose logging')

    # Parse arguments
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    config = RenderConfig.from_env()
    if args.backend:
        config.backends = [name.strip().lower() for name in args.backend]

    # Setup logging
    setup_logging(config, args.verbose)

    errors = config.validate()
    if errors:
        for error in errors:
            logging.error(f"Configuration error: {error}")
        return 1

    # Execute command
    try:
        if args.command == 'render':
            return render_single(args, config)
        elif args.command == 'batch':
            return render_directory(args, config)
    except KeyboardInterrupt:
        logging.info("Operation cancelled by user")
        return 130
    except Exception as e:
        logging.exception(f"Unexpected error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
