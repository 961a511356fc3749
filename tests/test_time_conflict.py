from mediscan.schemas.models import Medicine
from mediscan.utils.time_conflict import find_gap_violation, validate_schedule


def test_wrap_around_gap_too_short():
    v = find_gap_violation("Amoxicillin", ["23:30", "06:00"], 8)
    assert v is not None
    assert v.medicine_name == "Amoxicillin"
    assert v.required_gap_hours == 8


def test_twelve_hour_spacing_passes_eight_hour_gap():
    assert find_gap_violation("Amoxicillin", ["08:00", "20:00"], 8) is None


def test_adjacent_gap_too_short():
    v = find_gap_violation("Metformin", ["08:00", "11:00"], 4)
    assert v is not None
    assert v.message == "Doses for Metformin are too close. Please ensure at least a 4-hour gap."


def test_gap_equal_to_minimum_passes():
    assert find_gap_violation("Ibuprofen", ["08:00", "12:00", "16:00"], 4) is None


def test_fewer_than_two_times_always_pass():
    assert find_gap_violation("X", [], 8) is None
    assert find_gap_violation("X", ["08:00"], 8) is None
    assert find_gap_violation("X", ["08:00", "", ""], 8) is None


def test_order_of_input_does_not_matter():
    assert find_gap_violation("X", ["20:00", "08:00", "14:00"], 6) is None
    assert find_gap_violation("X", ["20:00", "08:00", "13:00"], 6) is not None


def test_duplicate_times_violate():
    assert find_gap_violation("X", ["08:00", "08:00"], 1) is not None


def test_fractional_gap_message():
    v = find_gap_violation("X", ["08:00", "10:00"], 7.5)
    assert "7.5-hour gap" in v.message


def test_validate_schedule_uses_default_gap():
    meds = [
        Medicine(name="A", frequency="BD", reminder_times=["08:00", "20:00"]),
        Medicine(name="B", frequency="BD", time_gap_hours=0, reminder_times=["08:00", "10:00"]),
    ]
    v = validate_schedule(meds)
    assert v is not None
    assert v.medicine_name == "B"
    assert v.required_gap_hours == 4


def test_validate_schedule_reports_first_offender_only():
    meds = [
        Medicine(name="A", frequency="TDS", time_gap_hours=8, reminder_times=["08:00", "12:00", "20:00"]),
        Medicine(name="B", frequency="BD", time_gap_hours=12, reminder_times=["08:00", "09:00"]),
    ]
    assert validate_schedule(meds).medicine_name == "A"


def test_validate_schedule_ok():
    meds = [
        Medicine(name="A", frequency="TDS", time_gap_hours=6, reminder_times=["07:00", "13:00", "21:00"]),
        Medicine(name="B", frequency="OD", reminder_times=[""]),
    ]
    assert validate_schedule(meds) is None
