"""
Import Row Enrichment

Classifies and decodes the symbol of every row in an import batch before
it is persisted:
- options rows go through the correcting options parser
- registry futures rows go through the futures parser
- stock and stock-futures rows pass through with the extracted code

Rows that fail are collected as RowRejection (row index + diagnostic).
A bad row never aborts the batch.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tradesym.core.enums import InstrumentKind, OptionRight
from tradesym.parser.decoder import SymbolDecoder, get_symbol_decoder
from tradesym.delivery.formatter import SymbolFormatter

logger = logging.getLogger(__name__)


class ImportRow(BaseModel):
    """One raw row as handed over by the importer."""

    row_index: int = Field(ge=0)
    symbol: str
    quantity: float = Field(default=0.0, ge=0)


class EnrichedRow(BaseModel):
    """Row with decoded instrument fields attached."""

    row_index: int
    symbol: str
    instrument_kind: InstrumentKind
    underlying: str
    expiry: Optional[date] = None
    strike: Optional[int] = None
    right: Optional[OptionRight] = None
    quantity: float = 0.0
    lot_size: int = Field(ge=1)
    lot_size_confident: bool = True
    lots: float = 0.0
    message: str = ""

    model_config = ConfigDict(use_enum_values=True)


class RowRejection(BaseModel):
    """Row excluded from the batch."""

    row_index: int
    symbol: str = ""
    error: str


@dataclass
class EnrichmentReport:
    """Outcome of one batch."""

    accepted: List[EnrichedRow] = field(default_factory=list)
    rejected: List[RowRejection] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.accepted) + len(self.rejected)

    @property
    def success_rate(self) -> float:
        return len(self.accepted) / self.total if self.total else 0.0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "accepted": [r.model_dump(mode="json") for r in self.accepted],
            "rejected": [r.model_dump(mode="json") for r in self.rejected],
            "success_rate": round(self.success_rate, 4),
        }


RowInput = Union[ImportRow, Dict[str, Any]]


class SymbolEnricher:
    """Decode symbols for a batch of import rows."""

    def __init__(self, decoder: Optional[SymbolDecoder] = None):
        self.decoder = decoder or get_symbol_decoder()
        self.formatter = SymbolFormatter(self.decoder)

    def enrich(self, rows: Iterable[RowInput]) -> EnrichmentReport:
        """Enrich every row; failures are reported, not raised."""
        report = EnrichmentReport()

        for position, raw in enumerate(rows):
            row, rejection = self._validate(position, raw)
            if rejection is not None:
                report.rejected.append(rejection)
                continue

            try:
                outcome = self.enrich_row(row)
            except Exception as e:
                logger.exception(f"Row {row.row_index}: unexpected enrichment error")
                outcome = RowRejection(row_index=row.row_index, symbol=row.symbol, error=f"Enrichment error: {e}")

            if isinstance(outcome, RowRejection):
                report.rejected.append(outcome)
            else:
                report.accepted.append(outcome)

        logger.info(f"Enriched {report.total} rows: {len(report.accepted)} accepted, {len(report.rejected)} rejected")
        return report

    def enrich_row(self, row: ImportRow) -> Union[EnrichedRow, RowRejection]:
        """Decode a single validated row."""
        symbol = row.symbol.strip()
        if not symbol:
            return RowRejection(row_index=row.row_index, symbol=row.symbol, error="Empty symbol")

        kind = self.decoder.detect_instrument_kind(symbol)

        if kind == InstrumentKind.OPTIONS:
            parsed = self.decoder.parse_nse_options_symbol_with_correction(symbol)
            if not parsed.is_valid:
                return RowRejection(row_index=row.row_index, symbol=row.symbol, error=parsed.error)
            return self._build(
                row, kind, parsed.underlying,
                expiry=parsed.expiry,
                strike=parsed.strike,
                right=parsed.right,
                message=self.formatter.format_options_symbol(parsed),
            )

        if kind == InstrumentKind.FUTURES:
            parsed = self.decoder.parse_futures_symbol(symbol)
            if parsed.is_valid:
                return self._build(row, kind, parsed.underlying, expiry=parsed.expiry,
                                   message=f"FUTURES - {parsed.underlying} {parsed.expiry.isoformat()}")
            if self.decoder.is_index_or_commodity_symbol(symbol):
                return RowRejection(row_index=row.row_index, symbol=row.symbol, error=parsed.error)
            # Stock futures are not decoded, keep the stock code
            underlying = self.decoder.extract_underlying(symbol)
            return self._build(row, kind, underlying, message=f"FUTURES - {symbol}")

        return self._build(row, kind, self.decoder.extract_underlying(symbol), message=f"STOCK - {symbol}")

    def enrich_frame(
        self,
        df: pd.DataFrame,
        symbol_column: str = "symbol",
        quantity_column: str = "quantity",
    ) -> Tuple[pd.DataFrame, List[RowRejection]]:
        """DataFrame adapter. Row index is the positional index in df.

        A missing quantity column or a blank quantity cell counts as 0.
        """
        if symbol_column not in df.columns:
            raise KeyError(f"Missing symbol column: {symbol_column}")

        rows = []
        for position, record in enumerate(df.to_dict("records")):
            quantity = record.get(quantity_column, 0.0) if quantity_column in df.columns else 0.0
            # Blank cells come through as NaN; treat them like a missing column
            if pd.api.types.is_scalar(quantity) and pd.isna(quantity):
                quantity = 0.0
            rows.append({"row_index": position, "symbol": record[symbol_column], "quantity": quantity})

        report = self.enrich(rows)
        columns = list(EnrichedRow.model_fields)
        accepted = pd.DataFrame([r.model_dump() for r in report.accepted], columns=columns)
        return accepted, report.rejected

    def _validate(self, position: int, raw: RowInput) -> Tuple[Optional[ImportRow], Optional[RowRejection]]:
        if isinstance(raw, ImportRow):
            return raw, None
        try:
            data = dict(raw)
        except (TypeError, ValueError):
            return None, RowRejection(
                row_index=position,
                error=f"Invalid row: expected a mapping, got {type(raw).__name__}",
            )
        data.setdefault("row_index", position)
        try:
            return ImportRow.model_validate(data), None
        except ValidationError as e:
            errors = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
            symbol = data.get("symbol")
            row_index = data.get("row_index")
            return None, RowRejection(
                row_index=row_index if isinstance(row_index, int) and row_index >= 0 else position,
                symbol=symbol if isinstance(symbol, str) else "",
                error=f"Invalid row: {errors}",
            )

    def _build(self, row: ImportRow, kind: InstrumentKind, underlying: str, **fields) -> EnrichedRow:
        resolution = self.decoder.resolve_lot_size(underlying)
        lots = round(row.quantity / resolution.lot_size, 2)
        return EnrichedRow(
            row_index=row.row_index,
            symbol=row.symbol,
            instrument_kind=kind,
            underlying=underlying,
            quantity=row.quantity,
            lot_size=resolution.lot_size,
            lot_size_confident=resolution.is_confident,
            lots=lots,
            **fields,
        )
