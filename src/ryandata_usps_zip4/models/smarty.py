"""Pydantic models for the Smarty US ZIP Code API response.

Only the fields used for county comparison are required to be meaningful;
everything else is optional and unknown keys are ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SmartyAlternateCounty(BaseModel):
    """Additional county reported for a ZIP code that spans counties."""

    model_config = ConfigDict(extra="ignore")

    county_fips: str = ""
    county_name: str = ""
    state_abbreviation: str = ""
    state: str = ""


class SmartyZipcode(BaseModel):
    """One ZIP code entry of a Smarty lookup result."""

    model_config = ConfigDict(extra="ignore")

    zipcode: str = ""
    zipcode_type: str = ""
    default_city: str = ""
    county_fips: str = Field(default="", description="Five digit state+county FIPS code")
    county_name: str = ""
    state_abbreviation: str = ""
    state: str = ""
    latitude: float | None = None
    longitude: float | None = None
    precision: str = ""
    alternate_counties: list[SmartyAlternateCounty] = Field(default_factory=list)


class SmartyResponse(BaseModel):
    """Result for one input of a batch lookup.

    ``status`` and ``reason`` are only set when Smarty could not resolve the input.
    """

    model_config = ConfigDict(extra="ignore")

    input_index: int = 0
    status: str = ""
    reason: str = ""
    zipcodes: list[SmartyZipcode] = Field(default_factory=list)
