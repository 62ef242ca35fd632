"""Fixed paths and member names of the USPS ZIP+4 national product.

These describe the upstream distribution format. A change here means USPS
changed the product layout, not something to configure at runtime.
"""

from __future__ import annotations

import re

# Top-level directory inside the epf-zip4natl tar
CONTAINER_PREFIX = "epf-zip4natl"

# Tar entries holding the compressed archives
ZIP4_ARCHIVE_PATH = f"{CONTAINER_PREFIX}/zip4/zip4.zip"
CITY_STATE_ARCHIVE_PATH = f"{CONTAINER_PREFIX}/ctystate/ctystate.zip"

# zip4.zip holds one encrypted archive per partition: zip4mst01.zip, zip4mst02.zip, ...
ZIP4_PARTITION_PATTERN = re.compile(r"zip4mst[0-9]+\.zip")

# Each partition archive holds exactly two members, the first being the record file
ZIP4_TEXT_PATTERN = re.compile(r"zip4mst[0-9]+\.txt")
ZIP4_PARTITION_MEMBER_COUNT = 2

# ctystate.zip holds exactly two members, the first being the record file
CITY_STATE_TEXT_NAME = "ctystate.txt"
CITY_STATE_MEMBER_COUNT = 2

# Nesting levels reported in error context
LEVEL_CONTAINER = "container"
LEVEL_ZIP4_ARCHIVE = "zip4_archive"
LEVEL_PARTITION_ARCHIVE = "partition_archive"
LEVEL_CITY_STATE_ARCHIVE = "ctystate_archive"
