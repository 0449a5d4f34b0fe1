"""UI Strings tests — every locale table mirrors the default table.

Tests cover:
    - Same key set for every Locale
    - None falls back to English
    - Returned tables are copies
"""

import pytest

from comic_site.core.domain_types import Locale
from comic_site.core.ui_strings import get_ui_strings


@pytest.mark.parametrize("locale", list(Locale))
def test_locale_tables_have_default_keys(locale):
    assert get_ui_strings(locale).keys() == get_ui_strings(None).keys()


@pytest.mark.parametrize("locale", list(Locale))
def test_locale_tables_are_non_empty(locale):
    assert all(get_ui_strings(locale).values())


def test_default_is_english():
    assert get_ui_strings(None)["submit"] == "Submit"


def test_traditional_differs_from_simplified():
    assert get_ui_strings(Locale.ZH_TW)["site_name"] != get_ui_strings(Locale.ZH_CN)["site_name"]


def test_tables_are_fresh_copies():
    table = get_ui_strings(Locale.ZH_CN)
    table["submit"] = "changed"
    assert get_ui_strings(Locale.ZH_CN)["submit"] != "changed"
