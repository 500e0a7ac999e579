"""GEDCOM and JSON loading into flat Person records."""

import json
import logging
from pathlib import Path
from typing import Any

from ged4py import GedcomReader
from ged4py.parser import IntegrityError, ParserError

from models import Gender, MarriageStatus, Person

logger = logging.getLogger("genogram.parsing")

GENDER_MAP = {
    "M": Gender.MALE,
    "MALE": Gender.MALE,
    "0": Gender.MALE,
    "F": Gender.FEMALE,
    "FEMALE": Gender.FEMALE,
    "1": Gender.FEMALE,
}


def parse_gender(value: Any) -> Gender:
    """Parse 'M'/'F', 'male'/'female' or the numeric codes 0/1."""
    if isinstance(value, Gender):
        return value
    gender = GENDER_MAP.get(str(value).strip().upper())
    if gender is None:
        raise ValueError(f"Unknown gender: {value!r}")
    return gender


def normalize_xref(xref_id: str) -> str:
    """Strip the '@' delimiters from a GEDCOM pointer like '@I12@'."""
    return xref_id.strip().strip("@")


# ============================================================================
# GEDCOM
# ============================================================================


def parse_gedcom(filepath: Path) -> GedcomReader:
    """Parse a GEDCOM file and return the reader object."""
    return GedcomReader(str(filepath))


def extract_name(indi) -> str:
    """Extract a display name from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return "Unknown"

    name_value = name_rec.value
    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_value, tuple):
        parts = [p for p in name_value if p]
        return " ".join(parts) if parts else "Unknown"

    return str(name_value).replace("/", "").strip() or "Unknown"


def extract_gender(indi) -> Gender:
    """SEX of an individual; anything but 'M' lays out as a woman would."""
    sex_rec = indi.sub_tag("SEX")
    sex = (sex_rec.value if sex_rec else None) or "U"
    if sex.upper() == "M":
        return Gender.MALE
    if sex.upper() != "F":
        logger.info("%s has sex %r; treating as female for layout", indi.xref_id, sex)
    return Gender.FEMALE


def _append_unique(values: list[str], value: str) -> None:
    if value not in values:
        values.append(value)


def load_gedcom(filepath: Path) -> list[Person]:
    """
    Read individuals and families from a GEDCOM file.

    Each FAM record contributes the husband as father and the wife as mother
    of every CHIL, and declares the wife as the husband's spouse. Families
    with a DIV event mark the marriage as divorced.

    Raises ValueError when the file is not valid GEDCOM.
    """
    try:
        return _read_gedcom(filepath)
    except (ParserError, IntegrityError) as exc:
        raise ValueError(f"{filepath}: {exc}") from exc


def _read_gedcom(filepath: Path) -> list[Person]:
    reader = parse_gedcom(filepath)
    people: dict[str, Person] = {}

    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue
        person_id = normalize_xref(rec.xref_id)
        people[person_id] = Person(
            id=person_id,
            name=extract_name(rec),
            gender=extract_gender(rec),
        )

    for rec in reader.records0("FAM"):
        if rec.xref_id is None:
            continue

        husb = rec.sub_tag("HUSB")
        wife = rec.sub_tag("WIFE")
        husb_id = normalize_xref(husb.xref_id) if husb and husb.xref_id else None
        wife_id = normalize_xref(wife.xref_id) if wife and wife.xref_id else None

        if husb_id in people and wife_id in people:
            _append_unique(people[husb_id].spouse_ids, wife_id)
            if rec.sub_tag("DIV") is not None:
                people[husb_id].marriage_statuses[wife_id] = MarriageStatus.DIVORCED

        for child in rec.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            child_id = normalize_xref(child.xref_id)
            if child_id not in people:
                continue
            if husb_id:
                _append_unique(people[child_id].father_ids, husb_id)
            if wife_id:
                _append_unique(people[child_id].mother_ids, wife_id)

    logger.info("Loaded %d people from %s", len(people), filepath)
    return list(people.values())


# ============================================================================
# JSON
# ============================================================================


def _id_list(record: dict, key: str) -> list[str]:
    value = record.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value]
    raise ValueError(f"'{key}' of {record.get('id')!r} must be a string or a list of strings")


def person_from_dict(record: dict) -> Person:
    if not isinstance(record, dict):
        raise ValueError(f"Person record must be an object, got {type(record).__name__}")
    if not record.get("id"):
        raise ValueError(f"Person record without an id: {record!r}")

    person_id = str(record["id"])
    raw_statuses = record.get("marriage_status") or {}
    if not isinstance(raw_statuses, dict):
        raise ValueError(f"'marriage_status' of {person_id!r} must be an object")

    statuses = {}
    for spouse_id, status in raw_statuses.items():
        try:
            statuses[str(spouse_id)] = MarriageStatus(str(status).lower())
        except ValueError:
            raise ValueError(f"Unknown marriage status {status!r} for {person_id!r}") from None

    return Person(
        id=person_id,
        name=str(record.get("name") or person_id),
        gender=parse_gender(record.get("gender")),
        father_ids=_id_list(record, "fathers"),
        mother_ids=_id_list(record, "mothers"),
        spouse_ids=_id_list(record, "spouses"),
        marriage_statuses=statuses,
    )


def persons_from_dicts(records: list[dict]) -> list[Person]:
    return [person_from_dict(record) for record in records]


def load_json(filepath: Path) -> list[Person]:
    """
    Load people from a JSON document.

    Accepts either a bare list of person objects or ``{"people": [...]}``;
    each object has ``id``, ``gender`` and optional ``name``, ``fathers``,
    ``mothers``, ``spouses`` and ``marriage_status`` ({spouse id: status}).
    """
    data = json.loads(Path(filepath).read_text(encoding="utf-8"))
    records = data.get("people") if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise ValueError(f"{filepath}: expected a list of people")

    people = persons_from_dicts(records)
    logger.info("Loaded %d people from %s", len(people), filepath)
    return people
