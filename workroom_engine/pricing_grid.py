"""
Width x drop pricing grids.

Lookup rounds UP to the next grid point on both axes: a 80cm blind on a grid
with columns [100, 150, 200] is priced at the 100 column. Anything beyond the
last column or row has no price.

normalize_grid_data() turns the shapes the grid upload tooling has produced
over time into a PricingGrid in centimeters:

    A  {"widthRanges": [...], "dropRanges": [...], "prices": [[row], ...]}
    B  {"widthColumns": [...], "dropRows": [{"drop": d, "prices": [...]}, ...], "unit": "cm"}
    C  {"widthColumns": [...], "dropRows": [...], "prices": {"100_150": 42.0, ...}}
    D  {"widths": [...], "heights": [...], "prices": [[row], ...]}

A declared unit of "mm" (or, with no declared unit, any dimension at or
above the inference threshold) means the grid is in millimeters.
"""

import logging
import re
from typing import List, Optional

from .calculators.units import format_number, mm_to_cm
from .config import settings
from .schemas import PricingGrid

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")



def lookup_grid_price(grid: Optional[PricingGrid], width_cm: float, drop_cm: float) -> Optional[float]:
    """Price for the smallest column >= width and smallest row >= drop, or None."""
    if grid is None or not grid.width_columns or not grid.drop_rows:
        return None

    column = next((w for w in grid.width_columns if w >= width_cm), None)
    row = next((d for d in grid.drop_rows if d >= drop_cm), None)
    if column is None or row is None:
        logger.debug("Grid miss: %s x %s beyond grid bounds", width_cm, drop_cm)
        return None

    return grid.prices.get(PricingGrid.key(column, row))


def validate_grid(grid: PricingGrid) -> List[str]:
    """
    Problems that make a grid unsafe to quote from. Empty list means the grid
    is complete: every width column has a price on every drop row.
    """
    errors = []
    if not grid.width_columns:
        errors.append("Grid has no width columns")
    if not grid.drop_rows:
        errors.append("Grid has no drop rows")

    for label, values in (("width", grid.width_columns), ("drop", grid.drop_rows)):
        seen = set()
        for value in values:
            if value in seen:
                errors.append("Duplicate %s %s" % (label, format_number(value)))
            seen.add(value)
            if value <= 0:
                errors.append("%s %s must be greater than zero" % (label.capitalize(), format_number(value)))

    for drop in sorted(set(grid.drop_rows)):
        for width in sorted(set(grid.width_columns)):
            if PricingGrid.key(width, drop) not in grid.prices:
                errors.append("Missing price for width %s, drop %s" % (format_number(width), format_number(drop)))
    return errors


def _to_number(value) -> float:
    """
    Grid cells arrive as numbers or strings like '$1,250.00'. A range such as
    '12.5 - 15' reads as its leading number. Unparseable -> 0.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", str(value)))
    if match is None:
        return 0.0
    return float(match.group())


def _infer_is_mm(data: dict, threshold: float) -> bool:
    unit = data.get("unit")
    if unit in ("cm", "mm"):
        return unit == "mm"

    largest = 0.0
    for key in ("widthColumns", "widthRanges", "widths", "dropRows", "dropRanges", "heights"):
        for item in data.get(key) or []:
            if isinstance(item, dict):
                item = item.get("drop")
            largest = max(largest, _to_number(item))
    return largest >= threshold


def _from_matrix(widths, drops, matrix, problems: List[str]) -> dict:
    """
    Rows of price lists, one per drop, one price per width (columns in the
    order given). Rows that do not line up with the headers are reported in
    problems; a repeated drop row overwrites the earlier one.
    """
    if not isinstance(matrix, (list, tuple)):
        problems.append("Prices are not a list of rows")
        return {}
    if len(matrix) != len(drops):
        problems.append("%d price rows for %d drop rows" % (len(matrix), len(drops)))

    prices = {}
    seen_drops = set()
    for drop, row in zip(drops, matrix):
        drop_value = _to_number(drop)
        if not isinstance(row, (list, tuple)):
            problems.append("Drop %s has no price list" % format_number(drop_value))
            continue
        if drop_value in seen_drops:
            problems.append("Duplicate drop %s" % format_number(drop_value))
        seen_drops.add(drop_value)
        if len(row) != len(widths):
            problems.append("Drop %s has %d prices for %d width columns"
                            % (format_number(drop_value), len(row), len(widths)))
        for width, price in zip(widths, row):
            prices[(width, drop_value)] = _to_number(price)
    return prices


def _from_key_dict(widths, drops, raw_prices: dict) -> dict:
    prices = {}
    for width in widths:
        for drop in drops:
            for key in ("%g_%g" % (width, drop), "%g-%g" % (width, drop), "%g_%g" % (drop, width)):
                if key in raw_prices:
                    prices[(width, drop)] = _to_number(raw_prices[key])
                    break
    return prices


def _log_problems(problems: List[str]) -> None:
    for problem in problems:
        logger.warning("Pricing grid: %s", problem)


def normalize_grid_data(data, mm_threshold: float = None) -> Optional[PricingGrid]:
    """
    Build a PricingGrid from any known grid shape. Returns None (with a
    warning) when the data cannot be understood.

    A grid that can be built but has problems (short rows, repeated widths
    or drops, missing cells, non-positive dimensions) is still returned;
    each problem is logged as a warning. Call validate_grid() to check one
    before saving it.
    """
    if isinstance(data, PricingGrid):
        return data
    if not isinstance(data, dict):
        logger.warning("Grid data is not a mapping: %r", type(data).__name__)
        return None
    if "width_columns" in data:
        grid = PricingGrid.model_validate(data)
        _log_problems(validate_grid(grid))
        return grid

    if mm_threshold is None:
        mm_threshold = settings.GRID_MM_INFERENCE_THRESHOLD

    raw_prices = data.get("prices")
    prices = None
    widths = []
    problems = []

    if isinstance(data.get("widthRanges"), list) and isinstance(data.get("dropRanges"), list):
        widths = [_to_number(w) for w in data["widthRanges"]]
        prices = _from_matrix(widths, data["dropRanges"], raw_prices or [], problems)

    elif isinstance(data.get("widths"), list) and isinstance(data.get("heights"), list):
        widths = [_to_number(w) for w in data["widths"]]
        prices = _from_matrix(widths, data["heights"], raw_prices or [], problems)

    elif isinstance(data.get("widthColumns"), list) and isinstance(data.get("dropRows"), list):
        widths = [_to_number(w) for w in data["widthColumns"]]
        rows = data["dropRows"]
        if rows and isinstance(rows[0], dict):
            prices = _from_matrix(
                widths,
                [row.get("drop") for row in rows],
                [row.get("prices") or [] for row in rows],
                problems,
            )
        elif isinstance(raw_prices, dict):
            prices = _from_key_dict(widths, [_to_number(d) for d in rows], raw_prices)
        elif isinstance(raw_prices, list):
            prices = _from_matrix(widths, rows, raw_prices, problems)

    if not prices:
        logger.warning("Could not normalize grid data with keys %s", sorted(data.keys()))
        return None

    seen_widths = set()
    for width in widths:
        if width in seen_widths:
            problems.append("Duplicate width %s" % format_number(width))
        seen_widths.add(width)

    if _infer_is_mm(data, mm_threshold):
        logger.debug("Grid dimensions in mm, converting to cm")
        prices = {(mm_to_cm(w), mm_to_cm(d)): p for (w, d), p in prices.items()}

    grid = PricingGrid(
        width_columns=sorted({w for w, _ in prices}),
        drop_rows=sorted({d for _, d in prices}),
        prices={PricingGrid.key(w, d): p for (w, d), p in prices.items()},
    )
    _log_problems(problems + validate_grid(grid))
    return grid
