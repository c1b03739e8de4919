import logging
from collections.abc import Sequence
from typing import Union

import numpy as np

from ..C import ALL_SAVE_SPECIFIED
from ..model import Model
from ..optimize import Optimizer, ScipyOptimizer
from ..result import ScanResult
from ..sink import MemorySink, ResultSink
from .algorithms import Algorithm, algorithm_from_name
from .context import ScanContext
from .options import ScanConfigurationError, ScanOptions

logger = logging.getLogger(__name__)


def multidim_fit(
    model: Model,
    poi_names: Sequence[str],
    algorithm: Union[Algorithm, str] = "grid",
    options: Union[ScanOptions, dict] = None,
    optimizer: Optimizer = None,
    sink: ResultSink = None,
    **algorithm_settings,
) -> ScanResult:
    """
    Explore the objective over the given parameters of interest.

    The model is first fitted globally. The best fit is committed (except
    for the ``none`` algorithm) and the chosen algorithm then commits its
    points to the sink. The model is restored to its initial state
    afterwards.

    Parameters
    ----------
    model:
        The model.
    poi_names:
        Names of the parameters of interest to scan.
    algorithm:
        The algorithm, or its name (see :func:`algorithm_from_name`).
    options:
        Scan options.
    optimizer:
        The local optimizer for the best fit and for profiling. Defaults
        to L-BFGS-B.
    sink:
        Destination of committed points. Defaults to a new
        :class:`MemorySink`.
    algorithm_settings:
        Settings of the algorithm, if given by name.

    Returns
    -------
    Summary of the scan, including the sink.
    """
    options = ScanOptions.create_instance(options)
    if isinstance(algorithm, str):
        algorithm = algorithm_from_name(algorithm, **algorithm_settings)
    elif algorithm_settings:
        raise ScanConfigurationError(
            "Settings can only be passed with an algorithm name."
        )

    poi_names = list(poi_names)
    algorithm.check_pois(len(poi_names))
    if len(set(poi_names)) != len(poi_names):
        raise ScanConfigurationError(f"Duplicate POIs in {poi_names}.")
    for name in poi_names:
        try:
            model.index(name)
        except ValueError:
            raise ScanConfigurationError(
                f"Parameter of interest {name} not in model."
            ) from None

    if optimizer is None:
        optimizer = ScipyOptimizer()
    if sink is None:
        sink = MemorySink()

    other_pois = [name for name in model.poi_names if name not in poi_names]
    auxiliary_names = _auxiliary_names(model, poi_names, other_pois, options)

    with model.scoped_state():
        for name in other_pois:
            if options.float_other_pois:
                model.unfix(name)
            else:
                model.fix(name)
        n_other_floating = sum(
            not model.is_fixed(name) for name in other_pois
        )
        for name in poi_names:
            model.unfix(name)

        nll0 = _best_fit(model, optimizer, options)
        best_fit = dict(zip(model.x_names, model.x))
        logger.info(
            f"Best fit of {algorithm.name} scan: nll0={nll0:.6g}, "
            + ", ".join(f"{name}={best_fit[name]:.6g}" for name in poi_names)
        )

        sink.initialize(poi_names, auxiliary_names)
        context = ScanContext(
            model=model,
            poi_names=poi_names,
            options=options,
            optimizer=optimizer,
            sink=sink,
            nll0=nll0,
            n_other_floating=n_other_floating,
            auxiliary_names=auxiliary_names,
        )
        try:
            if algorithm.commits_best_fit:
                context.commit_best_fit()
            summary = algorithm.run(context)
        finally:
            sink.finalize()

    logger.info(
        f"{algorithm.name} scan done, {context.n_committed} points committed."
    )
    return ScanResult(
        algorithm=algorithm.name,
        poi_names=poi_names,
        best_fit=best_fit,
        nll0=nll0,
        n_other_floating=n_other_floating,
        sink=sink,
        summary=summary,
    )


def _best_fit(
    model: Model, optimizer: Optimizer, options: ScanOptions
) -> float:
    """Fit all free parameters, return the objective at the optimum."""
    if not options.skip_initial_fit:
        result = optimizer.minimize(model)
        if not result.success:
            raise RuntimeError(f"The initial fit failed: {result.message}")
    model.clear_eval_error_log()
    nll0 = model.evaluate()
    if model.n_eval_errors > 0 or not np.isfinite(nll0):
        raise RuntimeError(
            "The objective cannot be evaluated at the best fit: "
            f"{model.objective.last_error}"
        )
    return nll0


def _auxiliary_names(
    model: Model,
    poi_names: list[str],
    other_pois: list[str],
    options: ScanOptions,
) -> list[str]:
    """Resolve the parameters recorded with every point."""
    names = []
    for name in options.save_specified:
        if name == ALL_SAVE_SPECIFIED:
            names.extend(model.nuisance_names)
            continue
        try:
            model.index(name)
        except ValueError:
            raise ScanConfigurationError(
                f"Cannot save unknown parameter {name}."
            ) from None
        names.append(name)
    if options.save_inactive_pois:
        names.extend(other_pois)
    # unique, in order, without the scanned POIs
    return [
        name
        for j, name in enumerate(names)
        if name not in poi_names and name not in names[:j]
    ]
