"""Default city choices offered by the city selector."""

DEFAULT_CITIES: list[str] = ["Montreal", "Toronto", "Vancouver"]
