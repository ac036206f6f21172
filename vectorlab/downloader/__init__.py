from .archive import download_archive
from .unzip_datasets import find_vector_files, unzip_archive
