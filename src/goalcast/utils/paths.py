"""
Helper functions for file and directory paths used in GoalCast.
"""

from pathlib import Path

from goalcast.config import FORECASTS_FILENAME, PROCESSED_DATA_DIR


def get_processed_data_path(filename: str | None = None) -> Path:
    """
    Return the path to a processed data file.

    Parameters
    ----------
    filename : str | None
        Filename within the processed data directory, or None for the
        default forecasts CSV.

    Returns
    -------
    Path
        Full path to the processed data file.
    """
    if filename is None:
        filename = FORECASTS_FILENAME
    return PROCESSED_DATA_DIR / filename
