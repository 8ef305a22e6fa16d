import re
import math
import logging
from decimal import Decimal, ROUND_HALF_UP

UNKNOWN_POLE = "UNKNOWN_POLE"
NOT_AVAILABLE = "NA"

STRUCTURAL_SOURCE = 'structural'
SURVEY_SOURCE = 'survey'

METERS_TO_FEET = 3.28084

_METRE_UNITS = {'m', 'metre', 'meter', 'metres', 'meters'}
_FOOT_UNITS = {'ft', 'foot', 'feet'}

_POLE_NUMBER_PATTERN = re.compile(r'^(?:PL|P\.|PO|\d+-PL)?\d+$', re.IGNORECASE)


class Utils:
    """Conversion and normalization helpers shared across the application"""

    @staticmethod
    def to_number(value):
        """Parse a JSON scalar as a float, returning None for anything non-numeric"""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, str):
            value = value.strip().rstrip('%').strip()
            if not value:
                return None
        try:
            number = float(value)
        except (ValueError, TypeError):
            return None
        if math.isnan(number) or math.isinf(number):
            return None
        return number

    @staticmethod
    def round_half_up(value):
        return int(math.floor(value + 0.5))

    @staticmethod
    def to_decimal_feet(value, unit):
        """Convert a metre or decimal-foot measurement to decimal feet, or None"""
        number = Utils.to_number(value)
        if number is None:
            return None
        unit_key = str(unit or '').strip().lower()
        if unit_key in _METRE_UNITS:
            return number * METERS_TO_FEET
        if unit_key in _FOOT_UNITS:
            return number
        logging.debug(f"Unknown height unit '{unit}' for value {value!r}")
        return None

    @staticmethod
    def to_feet_inches(value, unit):
        """
        Convert a metre or decimal-foot value to F'-I" format

        Args:
            value: Numeric value (number or numeric string)
            unit (str): Metre or foot unit name, case-insensitive ('m', 'METRE', 'ft', 'FOOT', ...)

        Returns:
            str: Formatted height, or "NA" for missing/invalid input or an unknown unit
        """
        feet_decimal = Utils.to_decimal_feet(value, unit)
        if feet_decimal is None:
            return NOT_AVAILABLE

        feet = int(math.floor(feet_decimal))
        inches = Utils.round_half_up((feet_decimal - feet) * 12)

        # Handle case where inches rounds to 12
        if inches == 12:
            feet += 1
            inches = 0

        return f"{feet}'-{inches}\""

    @staticmethod
    def feet_inches_from_inches(total_inches):
        """Convert a height in inches to F'-I" format.

        Unlike to_feet_inches there is no carry when the remainder rounds to
        12, so 143.6 inches renders as 11'-12".
        """
        number = Utils.to_number(total_inches)
        if number is None:
            return ''
        feet = int(math.floor(number / 12))
        inches = Utils.round_half_up(number % 12)
        return f"{feet}'-{inches}\""

    @staticmethod
    def inches_to_decimal_feet(inches):
        number = Utils.to_number(inches)
        if number is None:
            return None
        return number / 12

    @staticmethod
    def format_percentage(value):
        """Format a number as a 2-decimal percentage string, "NA" if not numeric"""
        number = Utils.to_number(value)
        if number is None:
            return NOT_AVAILABLE
        # Exact binary value, ties away from zero
        rounded = Decimal(number).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return f"{rounded}%"

    @staticmethod
    def format_yes_no_count(count):
        """Return "NO" for a non-positive or non-numeric count, else "YES (n)" """
        number = Utils.to_number(count)
        if number is None:
            return "NO"
        count = int(number)
        if count <= 0:
            return "NO"
        return f"YES ({count})"

    @staticmethod
    def canonicalize_pole_id(raw_id, source):
        """
        Normalize a pole identifier from either export into one comparable key

        Structural labels carry a positional prefix ("1-PL12345"); everything
        up to and including the first hyphen is dropped for that source.

        Args:
            raw_id: Raw identifier (string or number)
            source (str): 'structural' or 'survey'

        Returns:
            str: Canonical pole id, or "UNKNOWN_POLE" for empty/unparseable input
        """
        if isinstance(raw_id, bool) or raw_id is None:
            return UNKNOWN_POLE
        if isinstance(raw_id, (int, float)):
            raw_id = str(raw_id)
        if not isinstance(raw_id, str):
            return UNKNOWN_POLE

        pole_id = raw_id.strip()
        if not pole_id:
            return UNKNOWN_POLE

        if source == STRUCTURAL_SOURCE and '-' in pole_id:
            prefix, remainder = pole_id.split('-', 1)
            if remainder.split('-', 1)[0].strip():
                return remainder.strip()

        return pole_id

    @staticmethod
    def looks_like_pole_number(label):
        """True for bare pole-number labels such as PL123, P.123, 1-PL123 or 123"""
        if not isinstance(label, str):
            return False
        return bool(_POLE_NUMBER_PATTERN.match(label.strip()))

    @staticmethod
    def compass_direction(degrees):
        """Name of the nearest 8-point compass direction for a bearing in degrees"""
        directions = ["North", "North East", "East", "South East", "South", "South West", "West", "North West"]
        normalized = (degrees % 360 + 360) % 360
        return directions[Utils.round_half_up(normalized / 45) % 8]
