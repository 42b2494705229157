"""Construction of the configured storm source."""

from common.logging_config import get_logger
from configuration.storm_config import FatalConfigError, StormConfig, StormType
from data_ingestion.loaders import BestTrackLoader, GriddedFieldLoader, StormDataError
from storm_models.base import NullStorm, StormSource
from storm_models.gridded import GriddedStorm
from storm_models.parametric import ParametricStorm
from storm_models.vortex_profiles import VORTEX_MODELS

logger = get_logger(__name__)


def build_storm_source(config: StormConfig) -> StormSource:
    """Build the storm source selected by the configuration.

    Parameters
    ----------
    config : StormConfig
        Parsed configuration.

    Returns
    -------
    StormSource
        NullStorm, ParametricStorm or GriddedStorm.

    Raises
    ------
    FatalConfigError
        If the sub-model is unknown or the storm data cannot be read.
    """
    storm_type = StormType(config.storm_type)

    if storm_type is StormType.NULL:
        logger.info("No storm will be used")
        return NullStorm(config)

    try:
        if storm_type is StormType.PARAMETRIC:
            if config.model_type not in VORTEX_MODELS:
                raise FatalConfigError(
                    f"Invalid parametric storm model {config.model_type}; "
                    f"expected one of {sorted(VORTEX_MODELS)}."
                )
            track = BestTrackLoader(config.storm_file).load()
            return ParametricStorm(track, config)

        if storm_type is StormType.GRIDDED:
            snapshots = GriddedFieldLoader(config.storm_file, config.model_type).load()
            return GriddedStorm(snapshots, config)
    except StormDataError as e:
        raise FatalConfigError(str(e)) from e

    raise FatalConfigError(f"Invalid storm type {storm_type} provided.")
