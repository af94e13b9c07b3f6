# invitation_service/importer.py
# Loads a guest list (xlsx/csv) and validates each row against the invitation rules.

from typing import Dict, List, Optional, Tuple

import pandas as pd

from invitation_service.models import InvitationTypeEnum

# --- Header aliases (Indonesian spreadsheet headers → API fields) ---
HEADER_ALIASES: Dict[str, str] = {
    "nama": "name",
    "jenis": "type",
    "tipe": "type",
    "jumlah": "qty",
    "kategori": "category",
    "dari": "from",
    "telepon": "phone",
    "hp": "phone",
    "no_hp": "phone",
}
REQUIRED_COLUMNS: List[str] = ["name", "type"]
VALID_TYPES = {e.value for e in InvitationTypeEnum}


def _read_table(
    file_path: str, *, sheet_name: Optional[str] = None, csv_sep: str = ",", csv_encoding: str = "utf-8"
) -> pd.DataFrame:
    """Reads .xlsx/.xls or .csv as strings, blanks instead of NaN."""
    if file_path.lower().endswith((".xlsx", ".xls")):
        return pd.read_excel(file_path, dtype=str, sheet_name=sheet_name or 0).fillna("")
    return pd.read_csv(file_path, dtype=str, sep=csv_sep, encoding=csv_encoding).fillna("")


def normalize_headers(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    cols = df.columns.str.strip().str.lower().str.replace(r"\s+", "_", regex=True)
    df.columns = [HEADER_ALIASES.get(c, c) for c in cols]
    return df


def _parse_int(raw: str) -> Optional[int]:
    """'' → None; '3' / '3.0' → 3; anything else raises ValueError."""
    raw = (raw or "").strip()
    if not raw:
        return None
    number = float(raw)
    if not number.is_integer():
        raise ValueError(raw)
    return int(number)


def validate_rows(df: pd.DataFrame) -> Tuple[List[dict], List[str]]:
    """
    Returns (records, errors). Records are ready to POST to /api/invitations;
    invalid rows are reported in `errors` and left out.
    """
    df = normalize_headers(df)
    missing_cols = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing_cols:
        raise ValueError(f"Kolom wajib tidak ada: {', '.join(missing_cols)}")

    records: List[dict] = []
    errors: List[str] = []

    for idx, row in df.iterrows():
        row_num = idx + 2  # header is row 1 in the sheet
        row_errors: List[str] = []

        name = str(row.get("name", "")).strip()
        inv_type = str(row.get("type", "")).strip().lower()

        if not name:
            row_errors.append("'name' kosong")
        if inv_type not in VALID_TYPES:
            row_errors.append(f"type '{row.get('type')}' tidak valid (digital/cetak)")

        qty = category = None
        try:
            qty = _parse_int(str(row.get("qty", "")))
            if qty is not None and qty < 0:
                row_errors.append("'qty' tidak boleh negatif")
        except ValueError:
            row_errors.append(f"'qty' bukan angka: {row.get('qty')}")
        try:
            category = _parse_int(str(row.get("category", "")))
        except ValueError:
            row_errors.append(f"'category' bukan angka: {row.get('category')}")

        if row_errors:
            errors.append(f"Baris {row_num}: " + "; ".join(row_errors))
            continue

        record = {"name": name, "type": inv_type}
        sender = str(row.get("from", "")).strip()
        phone = str(row.get("phone", "")).strip()
        if sender:
            record["from"] = sender
        if phone:
            record["phone"] = phone
        if qty is not None:
            record["qty"] = qty
        if category is not None:
            record["category"] = category
        records.append(record)

    return records, errors


def load_guest_list(
    file_path: str,
    *,
    sheet_name: Optional[str] = None,
    csv_sep: str = ",",
    csv_encoding: str = "utf-8",
) -> Tuple[List[dict], List[str]]:
    try:
        df = _read_table(file_path, sheet_name=sheet_name, csv_sep=csv_sep, csv_encoding=csv_encoding)
    except FileNotFoundError:
        raise FileNotFoundError(f"File tidak ditemukan: {file_path}")
    return validate_rows(df)
