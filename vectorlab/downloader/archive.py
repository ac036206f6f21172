"""
Downloading of (zipped) vector data archives via HTTP(S).

Copyright (C) 2024 vectorlab contributors

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""
from __future__ import annotations

import requests

from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from vectorlab.config import get_settings
from vectorlab.utils.exceptions import DownloadError

Settings = get_settings()
logger = Settings.logger


def _fname_from_url(url: str) -> str:
    """file name of the resource a URL points to"""
    fname = Path(unquote(urlparse(url).path)).name
    if fname == "":
        raise DownloadError(f"Could not derive a file name from {url}. Pass `fname`")
    return fname


def download_archive(
    url: str,
    download_dir: Optional[Path | str] = None,
    fname: Optional[str] = None,
    overwrite: Optional[bool] = False,
    timeout: Optional[int] = None,
) -> Path:
    """
    Downloads a file (e.g., a zipped shapefile) and writes it to disk in chunks.
    Broken connections and timeouts are retried up to `NUMBER_HTTPS_RETRIES`
    times, HTTP errors are not.

    :param url:
        URL of the archive
    :param download_dir:
        directory where to store the archive. Defaults to the `DATA_DIR`
        setting. Created if it does not exist.
    :param fname:
        file name of the archive. Derived from the URL by default.
    :param overwrite:
        if set to False (default), an existing file is not downloaded again.
        NOTE: The function does not check if the existing file is complete!
    :param timeout:
        timeout in seconds per request. Defaults to the `DOWNLOAD_TIMEOUT`
        setting.
    :returns:
        file-path of the downloaded archive
    """
    if download_dir is None:
        download_dir = Settings.DATA_DIR
    if fname is None:
        fname = _fname_from_url(url)
    if timeout is None:
        timeout = Settings.DOWNLOAD_TIMEOUT

    download_dir = Path(download_dir)
    download_dir.mkdir(parents=True, exist_ok=True)
    fpath = download_dir.joinpath(fname)

    if fpath.exists():
        if not overwrite:
            logger.info(f"{fname} already downloaded - skipping download")
            return fpath
        logger.warning(f"Overwriting {fpath}")

    n_attempts = max(Settings.NUMBER_HTTPS_RETRIES, 1)
    for attempt in range(1, n_attempts + 1):
        logger.info(f"Starting downloading {url} ({attempt}/{n_attempts})")
        try:
            with requests.get(url, stream=True, timeout=timeout) as response:
                response.raise_for_status()
                with open(fpath, "wb") as fd:
                    for chunk in response.iter_content(chunk_size=Settings.CHUNK_SIZE):
                        fd.write(chunk)
        except requests.HTTPError as e:
            fpath.unlink(missing_ok=True)
            logger.error(f"Could not download {url}: {e}")
            raise DownloadError(f"Could not download {url}: {e}")
        except (
            requests.ConnectionError,
            requests.Timeout,
            requests.exceptions.ChunkedEncodingError,
        ) as e:
            # on error (e.g., broken network connection) delete the incomplete
            # file and try again
            fpath.unlink(missing_ok=True)
            logger.warning(f"Downloading {url} was interrupted: {e}")
            continue
        except (requests.RequestException, OSError) as e:
            fpath.unlink(missing_ok=True)
            logger.error(f"Could not download {url}: {e}")
            raise DownloadError(f"Could not download {url}: {e}")
        logger.info(f"Finished downloading {url} to {fpath}")
        return fpath

    logger.error(f"Could not download {url} after {n_attempts} attempts")
    raise DownloadError(f"Could not download {url} after {n_attempts} attempts")
