import math

WORDS_PER_MINUTE = 200


def calculate_reading_time(content: str):
    words = len((content or "").split()) or 1
    minutes = math.ceil(words / WORDS_PER_MINUTE)

    return {
        "minutes": minutes,
        "text": "1 min read" if minutes == 1 else f"{minutes} min read",
    }
