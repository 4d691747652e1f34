from pathlib import Path

import pytest
from openpyxl import Workbook

STORE_HEADER = ["id", "name", "address", "latitude", "longitude", "is_active", "cod_allowed"]
STAFF_HEADER = ["id", "user_id", "store_id", "role", "status"]

STORE_ROWS = [
    ["s-1", "Menteng", "Jl. Menteng 1", "-6.2000000", "106.8166000", True, False],
    ["s-2", "Cikini", "Jl. Cikini 2", "-6.2100000", "106.8166000", True, True],
    ["s-3", "Pasar Minggu", "Jl. Raya 3", "-6.3000000", "106.8166000", True, True],
    ["s-4", "Closed Store", None, "-6.2000000", "106.8170000", False, True],
]

STAFF_ROWS = [
    ["a-1", "u-p1", "s-1", "picker", "online"],
    ["a-2", "u-d1", "s-1", "driver", "online"],
    ["a-3", "u-p2", "s-2", "picker", "online"],
    ["a-4", "u-d2", "s-2", "driver", "offline"],
    ["a-5", "u-p3", "s-3", "picker", "online"],
    ["a-6", "u-d3", "s-3", "driver", "online"],
    ["a-7", "u-p4", "s-4", "picker", "online"],
    ["a-8", "u-d4", "s-4", "driver", "online"],
]


def _write_roster(path: Path, store_rows: list, staff_rows: list) -> Path:
    wb = Workbook()
    stores = wb.active
    stores.title = "stores"
    stores.append(STORE_HEADER)
    for row in store_rows:
        stores.append(row)
    staff = wb.create_sheet("staff")
    staff.append(STAFF_HEADER)
    for row in staff_rows:
        staff.append(row)
    wb.save(path)
    return path


@pytest.fixture
def make_roster(tmp_path: Path):
    """Build a roster workbook; defaults to the seed stores and staff above."""

    def factory(store_rows: list | None = None, staff_rows: list | None = None, name: str = "roster.xlsx") -> Path:
        return _write_roster(
            tmp_path / name,
            STORE_ROWS if store_rows is None else store_rows,
            STAFF_ROWS if staff_rows is None else staff_rows,
        )

    return factory


@pytest.fixture
def roster_file(make_roster, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Seed workbook wired in as the configured roster, with Supabase disabled."""
    from grocery_dispatch.config import settings
    from grocery_dispatch.data import roster_repository

    path = make_roster()
    monkeypatch.setattr(settings, "roster_file", path)
    monkeypatch.setattr(roster_repository, "get_supabase_client", lambda: None)
    return path
