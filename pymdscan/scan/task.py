import logging
from collections.abc import Iterable, Sequence
from typing import Union

from ..C import PointStatus
from ..engine import Engine, SingleCoreEngine, Task
from ..model import Model
from ..optimize import Optimizer
from ..result import ScanPoint, ScanResult
from ..sink import MemorySink, ResultSink
from .algorithms import Algorithm, algorithm_from_name
from .options import ScanConfigurationError, ScanOptions
from .scan import multidim_fit

logger = logging.getLogger(__name__)


class ScanTask(Task):
    """
    A scan restricted to one index range.

    Parameters
    ----------
    model:
        The model. Engines that run tasks concurrently work on copies.
    poi_names:
        The scanned POIs.
    algorithm:
        The algorithm.
    options:
        Scan options, carrying the index range.
    optimizer:
        The local optimizer.
    """

    def __init__(
        self,
        model: Model,
        poi_names: Sequence[str],
        algorithm: Algorithm,
        options: ScanOptions,
        optimizer: Optimizer = None,
    ):
        super().__init__()
        self.model = model
        self.poi_names = list(poi_names)
        self.algorithm = algorithm
        self.options = options
        self.optimizer = optimizer

    @property
    def label(self) -> str:
        """Algorithm and index range, e.g. ``grid[0..9]``."""
        first, last = self.options.first_point, self.options.last_point
        if last is None:
            last = ""
        return f"{self.algorithm.name}[{first}..{last}]"

    def execute(self) -> ScanResult:
        """Run the scan into a memory sink."""
        logger.debug(f"Executing {self.label} scan.")
        return multidim_fit(
            model=self.model,
            poi_names=self.poi_names,
            algorithm=self.algorithm,
            options=self.options,
            optimizer=self.optimizer,
            sink=MemorySink(),
        )


def partition_ranges(
    first_point: int, last_point: int, n_jobs: int
) -> list[tuple[int, int]]:
    """
    Split the inclusive index range into contiguous, near-equal ranges.

    Empty ranges are dropped, so fewer than `n_jobs` ranges may result.
    """
    if n_jobs < 1:
        raise ScanConfigurationError("n_jobs must be >= 1.")
    n_indices = last_point - first_point + 1
    ranges = []
    start = first_point
    for job in range(n_jobs):
        size = n_indices // n_jobs + (job < n_indices % n_jobs)
        if size > 0:
            ranges.append((start, start + size - 1))
        start += size
    return ranges


def merge_points(streams: Iterable[Iterable[ScanPoint]]) -> list[ScanPoint]:
    """
    Concatenate the points of several partitions of one scan.

    Every partition commits the best fit; only the first is kept.
    """
    merged = []
    have_best_fit = False
    for stream in streams:
        for point in stream:
            if point.status == PointStatus.BEST_FIT:
                if have_best_fit:
                    continue
                have_best_fit = True
            merged.append(point)
    return merged


def partitioned_fit(
    model: Model,
    poi_names: Sequence[str],
    algorithm: Union[Algorithm, str] = "grid",
    options: Union[ScanOptions, dict] = None,
    optimizer: Optimizer = None,
    n_jobs: int = 2,
    engine: Engine = None,
    sink: ResultSink = None,
    progress_bar: bool = None,
    **algorithm_settings,
) -> ScanResult:
    """
    Split a scan into index ranges and run them on an engine.

    The merged points equal those of the same scan run in one piece.

    Parameters
    ----------
    model, poi_names, algorithm, options, optimizer, algorithm_settings:
        As for :func:`multidim_fit`. The index range of `options` is the
        range that is split.
    n_jobs:
        Number of ranges.
    engine:
        Execution engine. Defaults to sequential execution.
    sink:
        Destination of the merged points, defaults to a new
        :class:`MemorySink`.
    progress_bar:
        Whether to show a progress bar over the jobs.

    Returns
    -------
    Summary of the first range, with the merged points in `sink`. The
    summaries of all ranges are in ``summary["partitions"]``.
    """
    options = ScanOptions.create_instance(options)
    if isinstance(algorithm, str):
        algorithm = algorithm_from_name(algorithm, **algorithm_settings)
    elif algorithm_settings:
        raise ScanConfigurationError(
            "Settings can only be passed with an algorithm name."
        )
    algorithm.check_pois(len(poi_names))

    n_indices = algorithm.n_indices(len(poi_names), options.points)
    if n_indices is None:
        raise ScanConfigurationError(
            f"A {algorithm.name} scan cannot be split into index ranges."
        )
    last_point = n_indices - 1
    if options.last_point is not None:
        last_point = min(last_point, options.last_point)
    ranges = partition_ranges(options.first_point, last_point, n_jobs)
    if not ranges:
        raise ScanConfigurationError(
            f"No points in range {options.first_point}..{last_point}."
        )

    tasks = [
        ScanTask(
            model=model,
            poi_names=poi_names,
            algorithm=algorithm,
            options=options.with_range(first, last),
            optimizer=optimizer,
        )
        for first, last in ranges
    ]
    logger.info(
        f"Running {algorithm.name} scan of {n_indices} points in "
        f"{len(tasks)} jobs."
    )
    if engine is None:
        engine = SingleCoreEngine()
    results = engine.execute(tasks, progress_bar=progress_bar)

    if sink is None:
        sink = MemorySink()
    for task, result in zip(tasks, results):
        logger.debug(
            f"{task.label}: {len(result.sink.scan_points())} points."
        )
    first = results[0]
    sink.initialize(first.sink.poi_names, first.sink.auxiliary_names)
    for point in merge_points(result.sink.points for result in results):
        sink.commit(point)
    sink.finalize()

    return ScanResult(
        algorithm=first.algorithm,
        poi_names=first.poi_names,
        best_fit=first.best_fit,
        nll0=first.nll0,
        n_other_floating=first.n_other_floating,
        sink=sink,
        summary={"partitions": [result.summary for result in results]},
    )
