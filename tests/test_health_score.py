from datetime import date, timedelta

import pytest

from health_score import (
    calculate_age,
    classify_condition,
    compute_score,
    explain,
    health_status,
    parse_date,
    recommendations,
)

TODAY = date(2025, 1, 1)


def days_ago(n):
    return (TODAY - timedelta(days=n)).isoformat()


def days_ahead(n):
    return (TODAY + timedelta(days=n)).isoformat()


def healthy_member(**overrides):
    member = {
        "age": 30,
        "conditions": [],
        "medications": 0,
        "lastCheckup": days_ago(30),
        "nextAppointment": days_ahead(30),
    }
    member.update(overrides)
    return member


@pytest.mark.parametrize(
    "age,expected",
    [
        (90, -15), (71, -15), (70.5, -15), (70, -10), (61, -10), (60.5, -10), (60, -5),
        (51, -5), (50.5, -5), (50, 0), (30, 0), (18, 0), (17.5, 5), (17, 5), (0, 5),
    ],
)
def test_age_adjustment_uses_a_single_band(age, expected):
    assert compute_score(healthy_member(age=age), TODAY).age_adjustment == expected


def test_age_from_dob_when_age_missing():
    member = healthy_member(dob="1950-06-01")
    del member["age"]
    breakdown = compute_score(member, TODAY)
    assert calculate_age("1950-06-01", TODAY) == 74
    assert breakdown.age_adjustment == -15


def test_condition_penalties_are_summed_per_entry():
    breakdown = compute_score(healthy_member(conditions=["Diabetes", "Seasonal Allergy"]), TODAY)
    assert breakdown.condition_penalty == -30


@pytest.mark.parametrize(
    "condition,penalty",
    [
        ("Type 2 DIABETES", -20),
        ("Heart disease with asthma", -20),
        ("High Blood Pressure", -15),
        ("Rheumatoid arthritis", -15),
        ("Migraine", -10),
        ("Common cold", -5),
    ],
)
def test_condition_tier_first_match_wins(condition, penalty):
    assert classify_condition(condition)[0] == penalty


def test_duplicate_conditions_are_counted_twice():
    breakdown = compute_score(healthy_member(conditions=["Asthma", "Asthma"]), TODAY)
    assert breakdown.condition_penalty == -30


@pytest.mark.parametrize("count,expected", [(None, 0), (0, 0), (1, 0), (2, -10), (3, -10), (4, -15), (5, -15), (6, -20)])
def test_medication_penalty(count, expected):
    member = healthy_member(medications=count)
    assert compute_score(member, TODAY).medication_penalty == expected


def test_non_numeric_medication_count_is_ignored():
    breakdown = compute_score(healthy_member(medications=["Metformin", "Aspirin", "Statin"]), TODAY)
    assert breakdown.medication_penalty == 0


@pytest.mark.parametrize(
    "last_checkup,expected",
    [(None, -15), ("", -15), (days_ago(100), 10), (days_ago(500), 5), (days_ago(1000), -10), ("not a date", -10)],
)
def test_checkup_bonus(last_checkup, expected):
    assert compute_score(healthy_member(lastCheckup=last_checkup), TODAY).checkup_bonus == expected


@pytest.mark.parametrize(
    "next_appointment,expected",
    [(None, -5), ("", -5), (TODAY.isoformat(), -5), (days_ago(3), -5), (days_ahead(10), 5), (days_ahead(89), 5), (days_ahead(200), 2)],
)
def test_appointment_bonus(next_appointment, expected):
    assert compute_score(healthy_member(nextAppointment=next_appointment), TODAY).appointment_bonus == expected


def test_score_is_clamped_to_zero():
    member = {
        "age": 80,
        "conditions": ["Diabetes", "Heart failure", "Cancer", "Diabetes insipidus", "Heart murmur"],
        "medications": 8,
    }
    breakdown = compute_score(member, TODAY)
    assert breakdown.final_score == 0
    assert isinstance(breakdown.final_score, int)


def test_score_is_clamped_to_hundred():
    assert compute_score(healthy_member(age=10), TODAY).final_score == 100


def test_factors_follow_evaluation_order():
    member = {
        "age": 65,
        "conditions": ["Asthma", "Eczema"],
        "medications": 4,
        "lastCheckup": days_ago(400),
        "nextAppointment": days_ahead(120),
    }
    breakdown = compute_score(member, TODAY)
    assert breakdown.factors == [
        "Age 61-70: -10 points",
        "Asthma: -15 points (chronic condition)",
        "Eczema: -5 points (minor condition)",
        "4 medications: -15 points (moderate medication count)",
        "Checkup within 2 years: +5 points",
        "Future appointment scheduled: +2 points",
    ]
    assert breakdown.final_score == 100 - 10 - 20 - 15 + 5 + 2


@pytest.mark.parametrize(
    "score,status",
    [(100, "excellent"), (90, "excellent"), (89, "good"), (75, "good"), (74, "fair"), (60, "fair"), (59, "poor"), (0, "poor")],
)
def test_status_thresholds(score, status):
    assert health_status(score) == status


def test_healthy_member_gets_only_the_maintenance_recommendation():
    breakdown = compute_score(healthy_member(), TODAY)
    assert recommendations(breakdown) == ["Continue maintaining your current health routine"]


def test_recommendations_for_a_complex_case():
    member = {"age": 72, "conditions": ["Diabetes", "Heart disease"], "medications": 6}
    recs = recommendations(compute_score(member, TODAY))
    assert recs == [
        "Consider consulting with specialists for your medical conditions",
        "Review medications with your doctor to optimize treatment",
        "Schedule a routine health checkup",
        "Book your next preventive care appointment",
        "Focus on lifestyle modifications and regular medical follow-ups",
    ]


def test_explain_lists_score_and_factors():
    text = explain(healthy_member(conditions=["Migraine"]), TODAY)
    assert text.startswith("Health Score: 100% (excellent)")
    assert "Migraine: -10 points (moderate condition)" in text


def test_parse_date_accepts_common_formats():
    assert parse_date("2024-03-05") == date(2024, 3, 5)
    assert parse_date("2024-03-05T10:00:00.000Z") == date(2024, 3, 5)
    assert parse_date("12/31/2024") == date(2024, 12, 31)
    assert parse_date("31/12/2024") == date(2024, 12, 31)
    assert parse_date("soon") is None
