"""Shared pytest fixtures and Hypothesis configuration.

This module provides pytest fixtures that build small epf-zip4natl tar
files on disk and configures Hypothesis profiles for the test suite.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from hypothesis import Verbosity, settings

from tests.archives import PASSWORD, make_partition, make_product_tar
from tests.strategies import city_state_header, city_state_record, zip4_header, zip4_record

# Configure Hypothesis settings for the test suite
settings.register_profile("ci", max_examples=200, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.register_profile("debug", max_examples=10, deadline=None, verbosity=Verbosity.verbose)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture
def password() -> str:
    return PASSWORD


@pytest.fixture
def partition_records() -> list[bytes]:
    """Record files of two partitions; ZIP 12345 spans counties 001 and 002."""
    return [
        b"".join(
            [
                zip4_header(),
                zip4_record("12345", "001", plus4_low="0001", plus4_high="0049"),
                zip4_record("12345", "002", plus4_low="0050", plus4_high="0099"),
                zip4_record("12345", "001", plus4_low="0100", plus4_high="01ND"),
                zip4_record("54321", "003"),
            ]
        ),
        b"".join([zip4_header(), zip4_record("67890", "005", state="NJ")]),
    ]


@pytest.fixture
def city_state_records() -> bytes:
    return b"".join(
        [
            city_state_header(),
            city_state_record("12345", "SCHENECTADY", "SCHENECTADY"),
            city_state_record("20500", "WASHINGTON", "DISTRICT OF COLUMBIA", state="DC", county_number="001"),
        ]
    )


@pytest.fixture
def product_tar(tmp_path: Path, partition_records: list[bytes], city_state_records: bytes) -> Path:
    """A well-formed epf-zip4natl tar with two encrypted partitions and ctystate.zip."""
    partitions = [
        make_partition(number, records) for number, records in enumerate(partition_records, 1)
    ]
    return make_product_tar(tmp_path / "epf-zip4natl.tar", partitions, city_state_records)
