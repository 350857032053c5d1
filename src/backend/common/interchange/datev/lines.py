from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..models import Line

FORMAT_TAGS = ("EXTF", "DTVF")

# Kopfzeile 1 (header version 700), in file order.
META_HEADER_FIELDS = (
    "Kennzeichen",
    "Versionsnummer",
    "Formatkategorie",
    "Formatname",
    "Formatversion",
    "Erzeugt am",
    "Importiert",
    "Herkunft",
    "Exportiert von",
    "Importiert von",
    "Beraternummer",
    "Mandantennummer",
    "WJ-Beginn",
    "Sachkontenlänge",
    "Datum von",
    "Datum bis",
    "Bezeichnung",
    "Diktatkürzel",
    "Buchungstyp",
    "Rechnungslegungszweck",
    "Festschreibung",
    "WKZ",
    "Reserviert",
    "Derivatskennzeichen",
    "Reserviert",
    "Reserviert",
    "Sachkontenrahmen",
    "ID der Branchenlösung",
    "Reserviert",
    "Reserviert",
    "Anwendungsinformation",
)

CATEGORY_INDEX = 2


@dataclass(frozen=True)
class MetaHeaderLine(Line):
    """First line of a DATEV file; only accepted by the DATEV assembler."""

    def _value(self, index: int) -> Optional[str]:
        f = self.field_at(index)
        return f.value.strip() if f is not None else None

    @property
    def format_tag(self) -> Optional[str]:
        return self._value(0)

    @property
    def version(self) -> Optional[str]:
        return self._value(1)

    @property
    def category_code(self) -> Optional[str]:
        return self._value(CATEGORY_INDEX)

    @property
    def format_name(self) -> Optional[str]:
        return self._value(3)

    def to_dict(self) -> dict[str, str]:
        # Reserved slots share a label; keep them apart by position.
        out: dict[str, str] = {}
        for f in self.fields:
            label = META_HEADER_FIELDS[f.position] if f.position < len(META_HEADER_FIELDS) else str(f.position)
            if label == "Reserviert":
                label = f"Reserviert{f.position + 1}"
            out[label] = f.value
        return out
