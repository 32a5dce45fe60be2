"""
Test configuration for taxengine tests.

sys.path is configured so 'import taxengine' resolves whether or not the
package is installed, and whether pytest is run from the project root or from
taxengine/tests/.
"""
import json
import sys
from pathlib import Path

import pytest

_tests_dir = Path(__file__).parent                 # .../taxengine/tests/
_project_root = _tests_dir.parent.parent           # project root

if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from taxengine.config import settings  # noqa: E402
from taxengine.rate_tables.loader import get_rate_table, reload_rate_tables  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_rate_table_cache():
    """Every test starts and ends with an empty rate-table cache."""
    reload_rate_tables()
    yield
    reload_rate_tables()


@pytest.fixture
def rate_table():
    """The default (FY2025-26) table shipped with the package."""
    return get_rate_table()


@pytest.fixture
def minimal_table_dict() -> dict:
    """Smallest valid rate-table artifact; tests mutate a copy to break invariants."""
    return {
        "financial_year": "FY2030-31",
        "assessment_year": "AY2031-32",
        "regimes": [
            {
                "name": "NEW",
                "brackets": [
                    {"upper_bound": 100000, "rate": "0"},
                    {"upper_bound": 200000, "rate": "0.10"},
                    {"upper_bound": None, "rate": "0.20"},
                ],
                "cess_rate": "0.04",
                "rebate_threshold": 150000,
                "rebate_cap_amount": 5000,
                "surcharge_bands": [{"income_above": 1000000, "rate": "0.10"}],
            }
        ],
        "tds_sections": [
            {
                "code": "X1",
                "label": "Test section",
                "category": "TDS",
                "base_rate": "0.10",
                "no_pan_rate": "0.20",
                "threshold": 30000,
            }
        ],
    }


@pytest.fixture
def table_dir(tmp_path, minimal_table_dict, monkeypatch):
    """
    A rate-table directory holding only FY2030-31, installed as the configured
    directory and default year for the duration of the test.
    """
    path = tmp_path / "FY2030-31.json"
    path.write_text(json.dumps(minimal_table_dict), encoding="utf-8")
    monkeypatch.setattr(settings, "rate_table_dir", tmp_path)
    monkeypatch.setattr(settings, "default_financial_year", "FY2030-31")
    return tmp_path
