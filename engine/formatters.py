# engine/formatters.py


def format_hms(seconds: int) -> str:
    """秒数をHH:MM:SS形式にする"""
    seconds = max(0, int(seconds))
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_hours_minutes(seconds: int) -> str:
    """秒数を「Nh Mm」形式にする"""
    seconds = max(0, int(seconds))
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"
