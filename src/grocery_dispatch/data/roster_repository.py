"""Store and staff roster loader: Supabase when configured, seed workbook otherwise.

Nothing here is cached. Staffing status changes continuously, so every read
goes back to the source of truth.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from ..config import settings
from ..db.supabase import SupabaseClientError, get_supabase_client
from ..models.domain import StaffAssignment, StaffRole, StaffStatus, Store

logger = logging.getLogger(__name__)

STORES_SHEET = "stores"
STAFF_SHEET = "staff"
STORE_COLUMNS = {"id", "name", "latitude", "longitude"}
STAFF_COLUMNS = {"id", "user_id", "store_id", "role"}

_workbook_lock = threading.Lock()


class RosterUnavailableError(ConnectionError):
    """The roster data source could not be read or written."""


def _coerce_float(value: Any) -> float:
    if value is None or value == "":
        raise ValueError("missing coordinate")
    return float(str(value).replace(",", ""))


def _coerce_bool(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() in {"true", "t", "yes", "y", "1"}


def _coerce_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _store_from_row(row: dict[str, Any]) -> Store:
    return Store(
        store_id=str(row["id"]).strip(),
        name=str(row["name"]).strip(),
        latitude=_coerce_float(row["latitude"]),
        longitude=_coerce_float(row["longitude"]),
        address=_optional_text(row.get("address")),
        is_active=_coerce_bool(row.get("is_active"), default=True),
        cod_allowed=_coerce_bool(row.get("cod_allowed"), default=True),
    )


def _assignment_from_row(row: dict[str, Any]) -> StaffAssignment:
    return StaffAssignment(
        assignment_id=str(row["id"]).strip(),
        user_id=str(row["user_id"]).strip(),
        store_id=str(row["store_id"]).strip(),
        role=StaffRole(str(row["role"]).strip().lower()),
        status=_optional_text(row.get("status")),
        last_status_change=_coerce_timestamp(row.get("last_status_change")),
    )


def _parse_rows(rows: Iterable[dict[str, Any]], parser, kind: str) -> list:
    parsed = []
    for row in rows:
        try:
            parsed.append(parser(row))
        except (KeyError, ValueError, TypeError) as e:
            # Skip invalid rows but continue processing
            logger.warning(f"Skipping invalid {kind} row {row.get('id')!r}: {e}")
    return parsed


# --- workbook source -------------------------------------------------------


def _workbook_path(source: Path | None) -> Path:
    workbook_path = source or settings.roster_file
    if not workbook_path.exists():
        raise RosterUnavailableError(f"Roster workbook not found: {workbook_path}")
    return workbook_path


def _open_workbook(workbook_path: Path, **kwargs: Any) -> Workbook:
    try:
        return load_workbook(workbook_path, **kwargs)
    except (OSError, BadZipFile, InvalidFileException, KeyError) as exc:
        logger.error(f"Roster workbook '{workbook_path}' is unreadable: {exc}")
        raise RosterUnavailableError(f"Failed to open roster workbook '{workbook_path}': {exc}") from exc


def _sheet(wb: Workbook, sheet_name: str, workbook_path: Path) -> Worksheet:
    try:
        return wb[sheet_name]
    except KeyError as exc:
        raise RosterUnavailableError(f"Roster workbook '{workbook_path}' has no '{sheet_name}' sheet.") from exc


def _read_sheet(sheet_name: str, required: set[str], source: Path | None = None) -> list[dict[str, Any]]:
    workbook_path = _workbook_path(source)
    # Held while reading so a concurrent save is never observed half-written.
    with _workbook_lock:
        wb = _open_workbook(workbook_path, data_only=True, read_only=True)
        try:
            rows = _sheet(wb, sheet_name, workbook_path).iter_rows(min_row=1, values_only=True)
            header = next(rows, None)
            if header is None:
                return []
            columns = [str(name).strip() if name is not None else "" for name in header]
            missing_columns = required - set(columns)
            if missing_columns:
                raise RosterUnavailableError(
                    f"Sheet '{sheet_name}' missing columns: {', '.join(sorted(missing_columns))}"
                )
            records = []
            for row in rows:
                if not any(cell is not None for cell in row):
                    continue
                records.append(dict(zip(columns, row)))
            return records
        finally:
            wb.close()


def _update_sheet_rows(
    sheet_name: str,
    match_column: str,
    match_value: str,
    updates: dict[str, Any],
    source: Path | None = None,
) -> list[dict[str, Any]]:
    """Apply ``updates`` to every row whose ``match_column`` equals ``match_value``.

    The load-modify-save cycle runs under ``_workbook_lock`` so concurrent
    status toggles do not overwrite each other.
    """
    workbook_path = _workbook_path(source)
    with _workbook_lock:
        wb = _open_workbook(workbook_path)
        try:
            sheet = _sheet(wb, sheet_name, workbook_path)
            header = [cell.value for cell in sheet[1]]
            header_map = {str(name).strip(): idx for idx, name in enumerate(header) if name is not None}
            if match_column not in header_map:
                raise RosterUnavailableError(f"Sheet '{sheet_name}' missing column: {match_column}")
            next_index = len(header)
            for column in updates:
                if column not in header_map:
                    header_map[column] = next_index
                    sheet.cell(row=1, column=next_index + 1, value=column)
                    next_index += 1

            touched: list[dict[str, Any]] = []
            for row_cells in sheet.iter_rows(min_row=2):
                cell = row_cells[header_map[match_column]] if header_map[match_column] < len(row_cells) else None
                if cell is None or str(cell.value).strip() != match_value:
                    continue
                row_index = row_cells[0].row
                for column, value in updates.items():
                    sheet.cell(row=row_index, column=header_map[column] + 1, value=value)
                touched.append(
                    {name: sheet.cell(row=row_index, column=idx + 1).value for name, idx in header_map.items()}
                )
            if touched:
                wb.save(workbook_path)
            return touched
        except RosterUnavailableError:
            raise
        except OSError as exc:
            raise RosterUnavailableError(f"Failed to write roster workbook '{workbook_path}': {exc}") from exc
        finally:
            wb.close()


# --- database source -------------------------------------------------------


def _client():
    try:
        return get_supabase_client()
    except SupabaseClientError as exc:
        raise RosterUnavailableError(str(exc)) from exc


def _select(table: str, **filters: str) -> list[dict[str, Any]]:
    supabase = _client()
    try:
        query = supabase.table(table).select("*")
        for column, value in filters.items():
            query = query.eq(column, value)
        response = query.execute()
    except Exception as exc:
        logger.error(f"Roster query on '{table}' failed: {exc}")
        raise RosterUnavailableError(f"Failed to read '{table}' from database: {exc}") from exc
    return list(response.data or [])


def _update(table: str, values: dict[str, Any], **filters: str) -> list[dict[str, Any]]:
    supabase = _client()
    try:
        query = supabase.table(table).update(values)
        for column, value in filters.items():
            query = query.eq(column, value)
        response = query.execute()
    except Exception as exc:
        logger.error(f"Roster update on '{table}' failed: {exc}")
        raise RosterUnavailableError(f"Failed to update '{table}' in database: {exc}") from exc
    return list(response.data or [])


# --- public API --------------------------------------------------------------


def roster_source() -> str:
    return "supabase" if _client() else "workbook"


def load_stores(source: Path | None = None) -> list[Store]:
    """All stores in the roster, active or not."""
    if _client():
        rows = _select("stores")
    else:
        rows = _read_sheet(STORES_SHEET, STORE_COLUMNS, source)
    return _parse_rows(rows, _store_from_row, "store")


def load_active_stores(source: Path | None = None) -> list[Store]:
    return [store for store in load_stores(source) if store.is_active]


def get_store(store_id: str, source: Path | None = None) -> Store | None:
    if _client():
        stores = _parse_rows(_select("stores", id=store_id), _store_from_row, "store")
    else:
        stores = [store for store in load_stores(source) if store.store_id == store_id]
    return stores[0] if stores else None


def load_staff(source: Path | None = None) -> list[StaffAssignment]:
    if _client():
        rows = _select("store_staff")
    else:
        rows = _read_sheet(STAFF_SHEET, STAFF_COLUMNS, source)
    return _parse_rows(rows, _assignment_from_row, "staff")


def load_staff_for_store(store_id: str, source: Path | None = None) -> list[StaffAssignment]:
    if _client():
        return _parse_rows(_select("store_staff", store_id=store_id), _assignment_from_row, "staff")
    return [assignment for assignment in load_staff(source) if assignment.store_id == store_id]


def get_staff_by_user(user_id: str, source: Path | None = None) -> list[StaffAssignment]:
    if _client():
        return _parse_rows(_select("store_staff", user_id=user_id), _assignment_from_row, "staff")
    return [assignment for assignment in load_staff(source) if assignment.user_id == user_id]


def update_staff_status(
    user_id: str,
    status: StaffStatus,
    source: Path | None = None,
) -> list[StaffAssignment]:
    """Set the status of every assignment held by ``user_id``.

    Returns the updated assignments; an empty list means the user has no
    staff record.
    """
    values = {
        "status": status.value,
        "last_status_change": datetime.now(timezone.utc).isoformat(),
    }
    if _client():
        rows = _update("store_staff", values, user_id=user_id)
    else:
        rows = _update_sheet_rows(STAFF_SHEET, "user_id", user_id, values, source)
    updated = _parse_rows(rows, _assignment_from_row, "staff")
    logger.info(f"Staff {user_id} set {status.value} on {len(updated)} assignment(s)")
    return updated


def set_store_active(store_id: str, is_active: bool, source: Path | None = None) -> Store | None:
    """Activate or deactivate a store. Stores are deactivated, never deleted."""
    if _client():
        rows = _update("stores", {"is_active": is_active}, id=store_id)
    else:
        rows = _update_sheet_rows(STORES_SHEET, "id", store_id, {"is_active": is_active}, source)
    stores = _parse_rows(rows, _store_from_row, "store")
    if stores:
        logger.info(f"Store {store_id} is_active={is_active}")
    return stores[0] if stores else None
