"""Simple two-language (ko/en) translation helper and clock string formatting."""

from geochron.models import LocalFields

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "세계 시계",
        "en": "Geochron",
    },
    "label_clocks": {
        "ko": "시계",
        "en": "Clocks",
    },
    "label_map": {
        "ko": "낮과 밤 지도",
        "en": "Day/night map",
    },
    "label_subsolar": {
        "ko": "태양 직하점",
        "en": "Subsolar point",
    },
    "label_side": {
        "ko": "낮 쪽",
        "en": "Lit side",
    },
    "no_clocks": {
        "ko": "설정된 시계가 없어요.",
        "en": "No clocks configured.",
    },
    "clock_added": {
        "ko": "시계 #{id} 추가됨 ({timezone})",
        "en": "Added clock #{id} ({timezone})",
    },
    "clock_removed": {
        "ko": "시계 #{id} 삭제됨",
        "en": "Removed clock #{id}",
    },
    "clock_updated": {
        "ko": "시계 #{id} 시간대 변경 ({timezone})",
        "en": "Clock #{id} now shows {timezone}",
    },
    "error_timezone": {
        "ko": "알 수 없는 시간대예요: {timezone}",
        "en": "Unknown timezone: {timezone}",
    },
    "map_saved": {
        "ko": "저장됨: {path}",
        "en": "Saved: {path}",
    },
}

_MONTHS: dict[str, tuple[str, ...]] = {
    "en": (
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
}

_WEEKDAYS: dict[str, tuple[str, ...]] = {
    "en": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
    "ko": ("월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일"),
}

LANGUAGES = ("en", "ko")


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key


class LocaleFormatter:
    """Turns zone-local calendar fields into display strings.

    The clock engine hands over fields only; every string a clock face shows
    comes from here. Unknown languages fall back to English.
    """

    def __init__(self, lang: str = "en") -> None:
        self.lang = lang if lang in LANGUAGES else "en"

    def format_time(self, fields: LocalFields) -> str:
        """24-hour ``HH:MM:SS``."""
        return f"{fields.hour:02d}:{fields.minute:02d}:{fields.second:02d}"

    def format_short_time(self, fields: LocalFields) -> str:
        """24-hour ``HH:MM``, used for world-city labels."""
        return f"{fields.hour:02d}:{fields.minute:02d}"

    def format_date(self, fields: LocalFields) -> str:
        if self.lang == "ko":
            return f"{fields.year}년 {fields.month}월 {fields.day}일"
        return f"{fields.day} {_MONTHS['en'][fields.month - 1]} {fields.year}"

    def format_weekday(self, fields: LocalFields) -> str:
        return _WEEKDAYS[self.lang][fields.weekday]
