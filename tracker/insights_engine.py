# tracker/insights_engine.py

"""
History and insight calculations over the logged symptom records.

Everything here is a pure function of (records, now). Chart data is
returned as pandas DataFrames ready for st.bar_chart / st.line_chart.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, List

import pandas as pd

from medical_rules import format_duration, is_emergency, severity_class
from tracker.disease_scorer import round_half_up

GROUP_WINDOW_MINUTES = 5
MAX_PATTERNS = 5
MIN_RECORDS_FOR_PREDICTION = 5
MIN_PREDICTION_PROBABILITY = 15
MAX_PREDICTION_PROBABILITY = 95

HISTORY_FILTERS = {"all": None, "today": 0, "week": 7, "month": 30}

# Symptoms the prediction model looks at
POTENTIAL_SYMPTOMS = [
    "headache", "fever", "cough", "fatigue", "nausea",
    "dizziness", "chest-pain", "shortness-of-breath", "stomach-pain", "joint-pain",
]

PREVENTION_ADVICE = {
    "headache": "Stay hydrated, manage stress, ensure adequate sleep, and limit screen time",
    "fever": "Boost immunity with vitamin C, get adequate rest, and avoid crowded places",
    "cough": "Stay hydrated, avoid irritants, consider throat lozenges, and practice good hygiene",
    "fatigue": "Maintain regular sleep schedule, eat balanced meals, and manage stress levels",
    "nausea": "Eat small frequent meals, avoid strong odors, and stay hydrated",
    "dizziness": "Stay hydrated, avoid sudden movements, and ensure adequate nutrition",
    "chest-pain": "Avoid strenuous activity, practice relaxation techniques, and monitor closely",
    "shortness-of-breath": "Avoid allergens, practice breathing exercises, and stay in well-ventilated areas",
    "stomach-pain": "Eat bland foods, avoid spicy/fatty foods, and stay hydrated",
    "joint-pain": "Stay active with gentle exercise, apply heat/cold therapy, and maintain healthy weight",
}
DEFAULT_PREVENTION = "Maintain healthy lifestyle habits and monitor symptoms"

# month number -> extra probability points per symptom
SEASONAL_FACTORS = {
    "winter": {"cough": 8, "fever": 6, "shortness-of-breath": 4},
    "spring": {"headache": 5, "cough": 4, "fatigue": 3},
    "summer": {"headache": 6, "dizziness": 5, "fatigue": 4},
    "fall": {"fatigue": 4, "headache": 3},
}


def _average(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


# ------------------------------
# HISTORY
# ------------------------------
def recent_records(records, days, now=None):
    now = now or datetime.now()
    cutoff = now - timedelta(days=days)
    return [r for r in records if r.timestamp >= cutoff]


def today_records(records, now=None):
    today = (now or datetime.now()).date().isoformat()
    return [r for r in records if r.date == today]


def filter_history(records, history_filter="all", now=None):
    if history_filter not in HISTORY_FILTERS:
        raise ValueError(f"Unknown history filter: {history_filter}")
    days = HISTORY_FILTERS[history_filter]
    if days is None:
        return list(records)
    if days == 0:
        return today_records(records, now)
    return recent_records(records, days, now)


def group_by_time(records, window_minutes=GROUP_WINDOW_MINUTES) -> List[dict]:
    """
    Chronological groups of records logged within `window_minutes` of the
    first record of the group. Returned newest group first.
    """
    ordered = sorted(records, key=lambda r: r.timestamp)
    if not ordered:
        return []

    window = timedelta(minutes=window_minutes)
    groups = [{"timestamp": ordered[0].timestamp, "symptoms": [ordered[0]]}]
    for record in ordered[1:]:
        current = groups[-1]
        if abs(record.timestamp - current["timestamp"]) <= window:
            current["symptoms"].append(record)
        else:
            groups.append({"timestamp": record.timestamp, "symptoms": [record]})

    groups.sort(key=lambda g: g["timestamp"], reverse=True)
    return groups


def summarize_group(group) -> dict:
    records = group["symptoms"]
    avg = round_half_up(_average(r.severity for r in records))
    return {
        "timestamp": group["timestamp"],
        "count": len(records),
        "average_severity": avg,
        "severity_class": severity_class(avg),
        "symptoms": [(r.name, r.severity, severity_class(r.severity)) for r in records],
        "durations": [format_duration(d) for d in dict.fromkeys(r.duration for r in records)],
        "notes": [r.notes for r in records if r.notes],
    }


def history_frame(records) -> pd.DataFrame:
    """Flat table of records, newest first, for display and CSV export."""
    rows = [
        {
            "Date": r.timestamp.strftime("%Y-%m-%d"),
            "Time": r.timestamp.strftime("%H:%M"),
            "Symptom": r.name,
            "Severity": r.severity,
            "Duration": format_duration(r.duration),
            "Notes": r.notes,
        }
        for r in sorted(records, key=lambda r: r.timestamp, reverse=True)
    ]
    return pd.DataFrame(rows, columns=["Date", "Time", "Symptom", "Severity", "Duration", "Notes"])


# ------------------------------
# CHARTS
# ------------------------------
def symptom_counts(records) -> Dict[str, int]:
    return dict(Counter(r.name for r in records))


def frequency_frame(records) -> pd.DataFrame:
    counts = symptom_counts(records)
    df = pd.DataFrame({"Symptom": list(counts), "Count": list(counts.values())})
    return df.set_index("Symptom")


def daily_severity(records, now=None, days=30) -> Dict[str, int]:
    """Rounded average severity per date over the last `days` days, oldest first."""
    by_date = {}
    for r in recent_records(records, days, now):
        by_date.setdefault(r.date, []).append(r.severity)
    return {d: round_half_up(_average(by_date[d])) for d in sorted(by_date)}


def daily_severity_frame(records, now=None, days=30) -> pd.DataFrame:
    daily = daily_severity(records, now, days)
    df = pd.DataFrame({"date": pd.to_datetime(list(daily)), "Average Severity": list(daily.values())})
    return df.set_index("date")


# ------------------------------
# PATTERN ANALYSIS
# ------------------------------
def advanced_patterns(records, now=None) -> List[dict]:
    now = now or datetime.now()
    records = list(records)
    if not records:
        return []

    patterns = []
    month = recent_records(records, 30, now)
    week = recent_records(records, 7, now)
    today = today_records(records, now)
    month_avg = _average(r.severity for r in month)

    counts = Counter(r.name for r in month).most_common()
    if counts and counts[0][1] > 1:
        name, count = counts[0]
        percentage = round_half_up(count / len(month) * 100)
        patterns.append({
            "title": "Dominant Symptom Pattern",
            "description": f"{name} represents {percentage}% of your recent symptoms ({count} occurrences)",
            "recommendation": (
                "Consider consulting a healthcare provider for persistent symptoms"
                if count > 5 else "Monitor frequency and triggers"
            ),
            "priority": "high" if count > 5 else "medium" if count > 3 else "low",
            "confidence": min(95, 60 + count * 5),
            "timeframe": "Last 30 days",
        })

    if len(month) > 3 and week:
        week_avg = _average(r.severity for r in week)
        trend = "increasing" if week_avg > month_avg else "decreasing"
        patterns.append({
            "title": f"Severity Trend: {trend.capitalize()}",
            "description": f"Average severity {trend} from {month_avg:.1f} to {week_avg:.1f} this week",
            "recommendation": (
                "Consider medical consultation for worsening symptoms"
                if trend == "increasing" and week_avg > 6
                else "Continue monitoring and maintain current care routine"
            ),
            "priority": "high" if week_avg > 6 else "medium" if week_avg > 4 else "low",
            "confidence": 85,
            "timeframe": "Weekly trend",
        })

    if len(today) > 1:
        today_avg = _average(r.severity for r in today)
        busy = len(today) > 3 or today_avg > 6
        patterns.append({
            "title": "Multiple Symptoms Today",
            "description": f"{len(today)} symptoms logged today with average severity {today_avg:.1f}",
            "recommendation": (
                "Rest and monitor closely - consider medical advice if symptoms persist"
                if busy else "Stay hydrated and get adequate rest"
            ),
            "priority": "high" if busy else "medium",
            "confidence": 90,
            "timeframe": "Today",
        })

    urgent = [r for r in month if is_emergency(r.severity, r.type)]
    if urgent:
        patterns.append({
            "title": "High-Priority Symptoms Detected",
            "description": f"{len(urgent)} high-severity or emergency symptoms in recent history",
            "recommendation": "Seek immediate medical attention for severe symptoms",
            "priority": "high",
            "confidence": 95,
            "timeframe": "Recent",
        })

    if len(month) > 5:
        cutoff = now - timedelta(days=60)
        old = [r for r in records if r.timestamp < cutoff]
        if old:
            improvement = _average(r.severity for r in old) - month_avg
            if abs(improvement) > 0.5:
                better = improvement > 0
                patterns.append({
                    "title": "Health Improvement Trend" if better else "Health Decline Pattern",
                    "description": (
                        f"{abs(improvement):.1f} point {'improvement' if better else 'decline'} "
                        "in average severity over time"
                    ),
                    "recommendation": (
                        "Great progress! Continue current health practices" if better
                        else "Consider reviewing lifestyle factors and consult healthcare provider"
                    ),
                    "priority": "low" if better else "medium",
                    "confidence": 80,
                    "timeframe": "Long-term trend",
                })

    return patterns[:MAX_PATTERNS]


# ------------------------------
# WELLNESS & STATS
# ------------------------------
def wellness_trend(records, now=None, days=7) -> List[dict]:
    """Daily wellness score: 100 minus twice each logged severity, clamped to 0..100."""
    now = now or datetime.now()
    trend = []
    for offset in range(days - 1, -1, -1):
        day = (now - timedelta(days=offset)).date().isoformat()
        day_records = [r for r in records if r.date == day]
        score = 100 - sum(r.severity * 2 for r in day_records)
        trend.append({"date": day, "score": max(0, min(100, score)), "symptom_count": len(day_records)})
    return trend


def wellness_frame(records, now=None) -> pd.DataFrame:
    df = pd.DataFrame(wellness_trend(records, now))
    df["date"] = pd.to_datetime(df["date"])
    return df.set_index("date")[["score"]]


def most_common_symptom(records) -> str:
    counts = Counter(r.name for r in records).most_common(1)
    return counts[0][0] if counts else "None"


def real_time_stats(records, now=None) -> dict:
    today = today_records(records, now)
    week = recent_records(records, 7, now)
    month = recent_records(records, 30, now)
    return {
        "today_count": len(today),
        "week_count": len(week),
        "month_count": len(month),
        "avg_severity_today": round(_average(r.severity for r in today), 1),
        "avg_severity_week": round(_average(r.severity for r in week), 1),
        "most_common_symptom": most_common_symptom(month),
    }


# ------------------------------
# PREDICTIONS
# ------------------------------
def season_for(month: int) -> str:
    if month in (12, 1, 2):
        return "winter"
    if month in (3, 4, 5):
        return "spring"
    if month in (6, 7, 8):
        return "summer"
    return "fall"


def seasonal_factors(now=None) -> Dict[str, int]:
    return SEASONAL_FACTORS[season_for((now or datetime.now()).month)]


def analyze_history(records) -> dict:
    """Frequency, what-follows-what and day/hour counts per symptom type."""
    ordered = sorted(records, key=lambda r: r.timestamp)
    frequency = Counter(r.type for r in ordered)
    sequences = Counter(f"{a.type}->{b.type}" for a, b in zip(ordered, ordered[1:]))
    time_patterns = {}
    for r in ordered:
        slot = time_patterns.setdefault(r.type, {"days": Counter(), "hours": Counter()})
        slot["days"][r.timestamp.weekday()] += 1
        slot["hours"][r.timestamp.hour] += 1
    return {"frequency": frequency, "sequences": sequences, "time_patterns": time_patterns}


def prevention_advice(symptom_type: str) -> str:
    return PREVENTION_ADVICE.get(symptom_type, DEFAULT_PREVENTION)


def symptom_probability(symptom_type, history, recent, now, seasonal) -> dict:
    probability = 0.0

    frequency = history["frequency"]
    if frequency:
        probability += frequency[symptom_type] / max(frequency.values()) * 40

    sequences = history["sequences"]
    if recent and sequences:
        last = recent[-1].type
        probability += sequences[f"{last}->{symptom_type}"] / max(sequences.values()) * 25

    times = history["time_patterns"].get(symptom_type)
    if times:
        probability += times["days"][now.weekday()] / max(times["days"].values()) * 10
        probability += times["hours"][now.hour] / max(times["hours"].values()) * 10

    probability += seasonal.get(symptom_type, 0)

    if probability > 60:
        timeframe = "Next 1-2 days"
    elif probability > 40:
        timeframe = "Next 3-5 days"
    else:
        timeframe = "Next 7 days"

    return {
        "symptom": " ".join(w.capitalize() for w in symptom_type.split("-")),
        "type": symptom_type,
        "probability": min(round_half_up(probability), MAX_PREDICTION_PROBABILITY),
        "timeframe": timeframe,
        "prevention": prevention_advice(symptom_type),
    }


def symptom_predictions(records, now=None, limit=3) -> List[dict]:
    now = now or datetime.now()
    records = list(records)
    if len(records) < MIN_RECORDS_FOR_PREDICTION:
        return []

    history = analyze_history(records)
    recent = sorted(recent_records(records, 7, now), key=lambda r: r.timestamp)
    seasonal = seasonal_factors(now)

    predictions = [symptom_probability(s, history, recent, now, seasonal) for s in POTENTIAL_SYMPTOMS]
    predictions = [p for p in predictions if p["probability"] > MIN_PREDICTION_PROBABILITY]
    predictions.sort(key=lambda p: p["probability"], reverse=True)
    return predictions[:limit]
