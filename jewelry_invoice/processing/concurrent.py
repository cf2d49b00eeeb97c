"""
Off-thread and concurrent rendering using ThreadPoolExecutor.
"""
import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from jewelry_invoice.core.models import BatchResult, OrderSnapshot, RenderResult
from jewelry_invoice.core.parsers import order_generator
from jewelry_invoice.pipeline import FORMAT_PDF, InvoicePipeline
from jewelry_invoice.utils.decorators import measure_performance

logger = logging.getLogger(__name__)


RenderRequest = Tuple[OrderSnapshot, Union[str, Path]]


class ConcurrentRenderer:
    """
    Runs pipeline renders on worker threads.

    The pipeline keeps no shared mutable state, so one instance serves
    every worker.
    """

    def __init__(self, pipeline: InvoicePipeline, max_workers: Optional[int] = None):
        """
        Args:
            pipeline: Configured invoice pipeline
            max_workers: Maximum number of worker threads (default: executor's choice)
        """
        self.pipeline = pipeline
        self.max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix='invoice-render'
            )
        return self._executor

    def submit(self, order: OrderSnapshot, output_path: Union[str, Path],
               fmt: str = FORMAT_PDF) -> 'Future[RenderResult]':
        """Render one order off the caller's thread"""
        return self._get_executor().submit(self.pipeline.render_to_file, order, output_path, fmt)

    def shutdown(self, wait: bool = True):
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()

    @measure_performance
    def render_batch(self, requests: Sequence[RenderRequest],
                     fmt: str = FORMAT_PDF,
                     callback: Optional[Callable[[RenderResult], None]] = None) -> BatchResult:
        """
        Render many orders concurrently.

        Args:
            requests: (order, output path) pairs
            fmt: Output format for every order
            callback: Optional function called after each render
                     Signature: callback(result: RenderResult) -> None

        Returns:
            BatchResult (result order may differ from input)
        """
        start_time = time.time()
        batch_result = BatchResult()

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_order = {
                executor.submit(self.pipeline.render_to_file, order, path, fmt): order
                for order, path in requests
            }

            for future in as_completed(future_to_order):
                order = future_to_order[future]
                try:
                    result = future.result()
                except Exception as e:
                    logger.error(f"Render failed for order {order.order_id}: {e}")
                    result = RenderResult(
                        invoice_no=order.order_id,
                        success=False,
                        reason=f"Processing error: {str(e)}",
                    )

                batch_result.add_result(result)
                if callback:
                    callback(result)

                if batch_result.total % 100 == 0:
                    logger.info(
                        f"Progress: {batch_result.total}/{len(future_to_order)} "
                        f"({batch_result.succeeded} rendered)"
                    )

        batch_result.processing_time_seconds = time.time() - start_time

        logger.info(
            f"Batch complete: {batch_result.succeeded}/{batch_result.total} "
            f"rendered in {batch_result.processing_time_seconds:.2f}s"
        )
        return batch_result

    def render_directory(self, input_dir: Union[str, Path], output_dir: Union[str, Path],
                         fmt: str = FORMAT_PDF, pattern: str = "*",
                         callback: Optional[Callable[[RenderResult], None]] = None) -> BatchResult:
        """
        Render every order file in a directory into ``output_dir``.
        Output files are named after the source file.
        """
        output_dir = Path(output_dir)
        requests: List[RenderRequest] = [
            (order, output_dir / f"{path.stem}.{fmt}")
            for path, order in order_generator(input_dir, pattern)
        ]
        logger.info(f"Found {len(requests)} orders to render")

        if not requests:
            logger.warning(f"No orders found in {input_dir} matching {pattern}")
            return BatchResult()

        return self.render_batch(requests, fmt, callback)
