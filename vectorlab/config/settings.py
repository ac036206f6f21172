"""
Global *vectorlab* settings defining where downloaded archives are stored,
how downloads are carried out and which geometry engine is used for spatial
predicates. In addition, the module exposes a `logger` object for package
wide-logging (console and file output).

The ``Settings`` class uses ``pydantic``. This means all attributes of the class can
be **overwritten** using environmental variables (prefixed by ``VECTORLAB_``) or
a `.env` file.

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

import logging
import tempfile

from datetime import datetime
from functools import lru_cache
from os.path import join
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    The vectorlab setting class. Allows to modify default
    settings and behavior of the package using a .env file
    or environmental variables
    """

    model_config = SettingsConfigDict(
        env_prefix="VECTORLAB_",
        env_file=".env",
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    # directory where downloaded archives are stored and extracted
    DATA_DIR: Path = Path(tempfile.gettempdir()).joinpath("vectorlab")

    # downloads: timeout (seconds) per request and chunk size (bytes)
    DOWNLOAD_TIMEOUT: int = 300
    CHUNK_SIZE: int = 8192

    # maximum number of HTTPS retries
    NUMBER_HTTPS_RETRIES: int = 5

    # name of the boolean attribute written by the spatial predicate join
    INTERSECTS_ATTRIBUTE: str = "intersectsTarget"

    # geometry engine used for spatial predicates and unions
    GEOMETRY_ENGINE: str = "shapely"

    # number of worker threads for the spatial predicate join (1 = serial)
    N_JOBS: int = 1

    # define logger
    CURRENT_TIME: str = datetime.now().strftime("%Y%m%d-%H%M%S")
    LOGGER_NAME: str = "vectorlab"
    LOG_FORMAT: str = "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    LOG_DIR: str = str(Path.home())
    LOG_FILE: str = join(LOG_DIR, f"{CURRENT_TIME}_{LOGGER_NAME}.log")
    LOGGING_LEVEL: int = logging.INFO

    # logger
    logger: logging.Logger = logging.getLogger(LOGGER_NAME)

    def get_logger(self):
        """
        returns a logger object with stream and file handler
        """
        self.logger.setLevel(self.LOGGING_LEVEL)
        # create file handler which logs even debug messages
        fh: logging.FileHandler = logging.FileHandler(self.LOG_FILE, delay=True)
        fh.setLevel(self.LOGGING_LEVEL)
        # create console handler with a higher log level
        ch: logging.StreamHandler = logging.StreamHandler()
        ch.setLevel(self.LOGGING_LEVEL)
        # create formatter and add it to the handlers
        formatter: logging.Formatter = logging.Formatter(self.LOG_FORMAT)
        fh.setFormatter(formatter)
        ch.setFormatter(formatter)
        # add the handlers to the logger
        self.logger.addHandler(fh)
        self.logger.addHandler(ch)


@lru_cache()
def get_settings():
    """
    loads package settings using ``last-recently-used`` cache
    """
    s = Settings()
    s.get_logger()
    return s
