import logging

import pandas as pd

from audit_config import URL_SCHEME

logger = logging.getLogger(__name__)


class UrlReadError(Exception):
    """Raised when the URL list cannot be read."""
    pass


def normalize_url(value):
    url = value.strip()
    return url if url.startswith(URL_SCHEME) else f"{URL_SCHEME}{url}"


def read_urls(path):
    """
    Read a headerless CSV and return one normalized URL per row.

    Only the first column is used. Rows with an empty first column are
    skipped with a warning naming the data row (blank lines are not
    counted).
    """
    try:
        df = pd.read_csv(
            path,
            header=None,
            usecols=[0],
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return []
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise UrlReadError(f"Could not read URLs from {path}: {e}") from e

    urls = []

    for row_number, value in enumerate(df[0].tolist(), start=1):

        if pd.isna(value) or not value.strip():
            logger.warning("Skipping data row %d of %s: empty first column", row_number, path)
            continue

        urls.append(normalize_url(value))

    logger.info("Loaded %d URLs from %s", len(urls), path)
    return urls
