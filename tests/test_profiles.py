import os

from hypothesis import settings


def test_selected_profile_is_active() -> None:
    expected = settings.get_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))

    assert settings.default.max_examples == expected.max_examples
    assert settings.default.deadline is None
