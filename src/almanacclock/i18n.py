"""Simple two-language (ko/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "알마낙 시계",
        "en": "AlmanacClock",
    },
    "label_place": {
        "ko": "장소",
        "en": "Location",
    },
    "label_use_coords": {
        "ko": "좌표로 입력",
        "en": "Enter coordinates",
    },
    "label_lat": {
        "ko": "위도",
        "en": "Latitude",
    },
    "label_lng": {
        "ko": "경도",
        "en": "Longitude",
    },
    "label_date": {
        "ko": "날짜",
        "en": "Date",
    },
    "label_time": {
        "ko": "시각",
        "en": "Time",
    },
    "label_events": {
        "ko": "기념일 파일 (JSON)",
        "en": "Events file (JSON)",
    },
    "btn_show_clock": {
        "ko": "✦ 시계 보기",
        "en": "✦ Show Clock",
    },
    "placeholder": {
        "ko": "장소와 시각을 입력하고 시계를 불러오세요",
        "en": "Enter a location and time to see the clock",
    },
    "loading_compute": {
        "ko": "✦ 하늘을 계산하는 중",
        "en": "✦ Computing the sky",
    },
    "error_address": {
        "ko": "주소를 찾을 수 없어요. 더 구체적으로 입력해보세요. ({error})",
        "en": "Address not found. Try a more specific address. ({error})",
    },
    "error_input": {
        "ko": "입력값을 확인해주세요. ({error})",
        "en": "Please check your input. ({error})",
    },
    "sun_times": {
        "ko": "태양",
        "en": "Sun",
    },
    "moon": {
        "ko": "달",
        "en": "Moon",
    },
    "year": {
        "ko": "한 해",
        "en": "Year",
    },
    "day_length": {
        "ko": "낮의 길이",
        "en": "Day length",
    },
    "blue_moon": {
        "ko": "이번 달은 블루문이 뜹니다",
        "en": "Blue Moon month",
    },
    "day_of_year": {
        "ko": "{total}일 중 {day}일째",
        "en": "Day {day} of {total}",
    },
    "eclipses": {
        "ko": "올해 보이는 일식·월식",
        "en": "Eclipses visible this year",
    },
    "none": {
        "ko": "없음",
        "en": "None",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
