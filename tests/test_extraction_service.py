from datetime import date

from shopsense.services.extraction_service import (
    BookingDirective,
    extract_labor_hours,
    extract_prices,
    extract_time,
    extract_total_price,
    extract_weekday,
    next_business_day,
    next_weekday,
    parse_booking_directive,
    resolve_booking_slot,
)

# 2024-05-15 is a Wednesday.
WEDNESDAY = date(2024, 5, 15)
FRIDAY = date(2024, 5, 17)


class TestPrices:
    def test_single_amount(self):
        assert extract_total_price("That will be $125 all in.") == 125.0

    def test_amount_with_cents_and_thousands(self):
        assert extract_prices("Parts $1,250.50 and labor $160") == [1250.50, 160.0]

    def test_hourly_rate_is_not_a_price(self):
        assert extract_prices("My rate is $80/hr, total $240") == [240.0]
        assert extract_prices("$80 per hour") == []
        assert extract_prices("$80 an hour") == []

    def test_total_is_the_largest_amount(self):
        assert extract_total_price("Labor $160 plus $90 in parts, $250 total") == 250.0

    def test_no_amount(self):
        assert extract_total_price("Let me check on that") is None


class TestLaborHours:
    def test_hours_phrase(self):
        assert extract_labor_hours("About 2 hours of work") == 2.0

    def test_decimal_and_hyphenated(self):
        assert extract_labor_hours("a 1.5-hour job") == 1.5
        assert extract_labor_hours("3 hrs") == 3.0

    def test_defaults_to_one_hour(self):
        assert extract_labor_hours("$125 total") == 1.0


class TestDayAndTime:
    def test_weekday(self):
        assert extract_weekday("How about Thursday morning?") == "thursday"
        assert extract_weekday("tomorrow") is None

    def test_twelve_hour_times(self):
        assert extract_time("see you at 2pm") == "14:00"
        assert extract_time("10:30 am works") == "10:30"
        assert extract_time("12 pm") == "12:00"
        assert extract_time("12am") == "00:00"

    def test_twenty_four_hour_time(self):
        assert extract_time("drop off at 16:45") == "16:45"

    def test_no_time(self):
        assert extract_time("sometime next week") is None

    def test_words_starting_with_am_or_pm_are_not_times(self):
        assert extract_time("my 2 amp fuse blew") is None
        assert extract_time("10 amazing reviews") is None
        assert extract_time("come by at 3pm.") == "15:00"

    def test_next_weekday_is_strictly_after_today(self):
        assert next_weekday("friday", WEDNESDAY) == date(2024, 5, 17)
        assert next_weekday("wednesday", WEDNESDAY) == date(2024, 5, 22)
        assert next_weekday("monday", WEDNESDAY) == date(2024, 5, 20)

    def test_next_business_day_skips_weekend(self):
        assert next_business_day(WEDNESDAY) == date(2024, 5, 16)
        assert next_business_day(FRIDAY) == date(2024, 5, 20)


class TestBookingSlot:
    def test_defaults_to_next_business_day_at_nine(self):
        slot = resolve_booking_slot(["can you fit me in?"], FRIDAY)

        assert slot.date == "2024-05-20"
        assert slot.time == "09:00"

    def test_newest_text_wins(self):
        slot = resolve_booking_slot(["Monday at 9am?", "Actually Thursday at 3pm"], WEDNESDAY)

        assert slot.date == "2024-05-16"
        assert slot.time == "15:00"

    def test_day_and_time_can_come_from_different_messages(self):
        slot = resolve_booking_slot(["Tuesday works", "around 11am"], WEDNESDAY)

        assert slot.date == "2024-05-21"
        assert slot.time == "11:00"

    def test_directive_wins_over_conversation(self):
        directive = BookingDirective(day="Friday", time="1pm")

        slot = resolve_booking_slot(["Monday at 9am"], WEDNESDAY, directive)

        assert slot.date == "2024-05-17"
        assert slot.time == "13:00"


class TestBookingDirective:
    def test_parses_pipe_separated_fields(self):
        directive = parse_booking_directive(
            "BOOKING_CONFIRMED: Jane Doe | +15551234567 | 2015 Honda Civic | Brake pads | Thursday | 2pm"
        )

        assert directive == BookingDirective(
            name="Jane Doe",
            phone="+15551234567",
            vehicle="2015 Honda Civic",
            service="Brake pads",
            day="Thursday",
            time="2pm",
        )

    def test_missing_fields_are_none(self):
        directive = parse_booking_directive("BOOKING_CONFIRMED: Jane | | Civic")

        assert directive.name == "Jane"
        assert directive.phone is None
        assert directive.vehicle == "Civic"
        assert directive.time is None

    def test_no_directive(self):
        assert parse_booking_directive("Ask for vehicle details") is None
