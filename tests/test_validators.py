"""
Tests for input validation utilities.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from utils.errors import ValidationError
from utils.validators import (
    validate_availability_flag,
    validate_bool,
    validate_email,
    validate_instant,
    validate_optional_date,
    validate_quantity,
    validate_rate,
    validate_role,
    validate_stock,
    validate_window
)


class TestValidateQuantity:
    """Tests for reservation quantities."""

    def test_positive_integers(self):
        """Test integers and numeric strings are accepted."""
        assert validate_quantity(3) == 3
        assert validate_quantity('2') == 2
        assert validate_quantity(4.0) == 4

    def test_zero_and_negative(self):
        """Test zero and negative quantities are rejected."""
        with pytest.raises(ValidationError) as exc:
            validate_quantity(0)
        assert exc.value.field == 'quantity'

        with pytest.raises(ValidationError):
            validate_quantity(-1)

    def test_non_integers(self):
        """Test fractional, boolean and junk values are rejected."""
        for value in (1.5, True, None, 'three', [1]):
            with pytest.raises(ValidationError):
                validate_quantity(value)

    def test_is_value_error(self):
        """ValidationError is catchable as ValueError."""
        with pytest.raises(ValueError):
            validate_quantity(0)


class TestValidateStockAndRate:
    """Tests for catalog numbers."""

    def test_stock_allows_zero(self):
        """Test zero stock is valid, negative is not."""
        assert validate_stock(0) == 0
        with pytest.raises(ValidationError):
            validate_stock(-2)

    def test_rate_keeps_exact_decimal(self):
        """Test rates are returned as exact decimal text."""
        assert validate_rate('12.50') == '12.50'
        assert validate_rate(8) == '8'
        assert validate_rate(None) == '0'

    def test_invalid_rate(self):
        """Test negative and non-numeric rates are rejected."""
        for value in ('-1', 'abc', 'NaN', True):
            with pytest.raises(ValidationError):
                validate_rate(value)


class TestValidateWindow:
    """Tests for reservation window normalisation."""

    def test_normalises_formats(self):
        """Test strings, dates and datetimes share one stored format."""
        assert validate_window('2024-12-26T10:00', '2024-12-26T14:00') == (
            '2024-12-26T10:00:00', '2024-12-26T14:00:00'
        )
        assert validate_window(date(2024, 12, 26), date(2024, 12, 27)) == (
            '2024-12-26T00:00:00', '2024-12-27T00:00:00'
        )
        assert validate_window(datetime(2024, 12, 26, 9, 30), '2024-12-26 11:00') == (
            '2024-12-26T09:30:00', '2024-12-26T11:00:00'
        )

    def test_offsets_convert_to_utc(self):
        """Test aware values and trailing Z are converted to UTC."""
        start, end = validate_window('2024-12-26T10:00:00+02:00', '2024-12-26T10:00:00Z')
        assert start == '2024-12-26T08:00:00'
        assert end == '2024-12-26T10:00:00'

        aware = datetime(2024, 12, 26, 12, 0, tzinfo=timezone(timedelta(hours=-1)))
        assert validate_window(aware, '2024-12-26T20:00')[0] == '2024-12-26T13:00:00'

    def test_inverted_window(self):
        """Test end before start is rejected."""
        with pytest.raises(ValidationError) as exc:
            validate_window('2024-12-26T14:00', '2024-12-26T10:00')
        assert exc.value.field == 'window_end'

    def test_zero_length_window(self):
        """Test zero-length windows are rejected unless allowed."""
        with pytest.raises(ValidationError):
            validate_window('2024-12-26T10:00', '2024-12-26T10:00')

        assert validate_window('2024-12-26', '2024-12-26', allow_empty=True) == (
            '2024-12-26T00:00:00', '2024-12-26T00:00:00'
        )

    def test_missing_or_unparseable(self):
        """Test missing and garbage boundaries name the bad field."""
        with pytest.raises(ValidationError) as exc:
            validate_window(None, '2024-12-26')
        assert exc.value.field == 'window_start'

        with pytest.raises(ValidationError) as exc:
            validate_window('2024-12-26', 'tomorrow')
        assert exc.value.field == 'window_end'

    def test_early_years_stay_fixed_width(self):
        """Years before 1000 are zero-padded so text order stays chronological."""
        start, end = validate_window('0999-01-01T00:00', '2030-01-01T00:00')

        assert start == '0999-01-01T00:00:00'
        assert start < end
        assert validate_instant(date(5, 3, 1), 'start') == '0005-03-01T00:00:00'

    def test_offset_out_of_range(self):
        """An offset pushing the value before year 1 is a validation error."""
        with pytest.raises(ValidationError) as exc:
            validate_window('0001-01-01T00:00:00+01:00', '2024-12-26')
        assert exc.value.field == 'window_start'

    def test_instant(self):
        """Test a single boundary is normalised."""
        assert validate_instant('2024-12-26', 'start') == '2024-12-26T00:00:00'
        with pytest.raises(ValidationError):
            validate_instant('not a date', 'start')


class TestStaffFields:
    """Tests for staff enumerations and dates."""

    def test_roles(self):
        """Test the three staff roles."""
        for role in ('instructor', 'divemaster', 'boat_staff'):
            assert validate_role(role) == role
        with pytest.raises(ValidationError):
            validate_role('captain')

    def test_availability_flag(self):
        """Test availability flags."""
        assert validate_availability_flag('unavailable') == 'unavailable'
        with pytest.raises(ValidationError):
            validate_availability_flag('busy')

    def test_optional_date(self):
        """Test certification expiry dates."""
        assert validate_optional_date(None, 'certification_expiry') is None
        assert validate_optional_date('2026-03-31', 'certification_expiry') == '2026-03-31'
        with pytest.raises(ValidationError):
            validate_optional_date('31/03/2026', 'certification_expiry')


class TestValidateBool:
    """Tests for boolean flags from JSON and query strings."""

    def test_accepted_values(self):
        """Test JSON booleans and common strings."""
        assert validate_bool(True, 'rentable') is True
        assert validate_bool('false', 'rentable') is False
        assert validate_bool('1', 'rentable') is True
        assert validate_bool(0, 'rentable') is False

    def test_rejected_values(self):
        """Test anything else is a validation error."""
        with pytest.raises(ValidationError):
            validate_bool('maybe', 'rentable')


class TestValidateEmail:
    """Tests for email validation."""

    def test_valid_email(self):
        """Test valid email formats."""
        assert validate_email('user@example.com') is True
        assert validate_email('user+tag@example.co.uk') is True

    def test_invalid_email(self):
        """Test invalid email formats."""
        assert validate_email('') is False
        assert validate_email(None) is False
        assert validate_email('missing@domain') is False
