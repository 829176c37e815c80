"""Locale-aware date labels.

Only "ja" and "en" are supported; any other language falls back to English.
Tables are explicit so output does not depend on the host's C locale.
"""

from datetime import date, datetime, timedelta

WEEKDAYS_EN = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
WEEKDAYS_JA = ("月曜日", "火曜日", "水曜日", "木曜日", "金曜日", "土曜日", "日曜日")
MONTHS_EN = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

TODAY = {"ja": "今日", "en": "Today"}
TOMORROW = {"ja": "明日", "en": "Tomorrow"}
NOW = "Now"


def _lang(lang: str) -> str:
    return "ja" if lang == "ja" else "en"


def weekday_name(day: date, lang: str) -> str:
    table = WEEKDAYS_JA if _lang(lang) == "ja" else WEEKDAYS_EN
    return table[day.weekday()]


def relative_label(day: date, today: date, lang: str) -> str:
    """Label ``day`` as today, tomorrow, or its weekday name."""
    lang = _lang(lang)
    if day == today:
        return TODAY[lang]
    if day == today + timedelta(days=1):
        return TOMORROW[lang]
    return weekday_name(day, lang)


def is_today_label(label: str) -> bool:
    return label in TODAY.values()


def format_clock(moment: datetime, lang: str) -> str:
    """Format a local time of day: ``15:00`` (ja) or ``03:00 PM`` (en)."""
    if _lang(lang) == "ja":
        return moment.strftime("%H:%M")
    suffix = "AM" if moment.hour < 12 else "PM"
    hour = moment.hour % 12 or 12
    return f"{hour:02d}:{moment.minute:02d} {suffix}"


def format_long_date(day: date, lang: str) -> str:
    """Format a full date: ``2024年4月1日月曜日`` or ``Monday, April 1, 2024``."""
    if _lang(lang) == "ja":
        return f"{day.year}年{day.month}月{day.day}日{weekday_name(day, 'ja')}"
    return f"{weekday_name(day, 'en')}, {MONTHS_EN[day.month - 1]} {day.day}, {day.year}"
