"""The fixed, ordered catalog of time slots in a day."""

from dataclasses import dataclass

from .errors import InvalidInput

DEFAULT_SLOTS: tuple[str, ...] = (
    "08:00", "09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00",
    "16:00", "17:00", "18:00", "19:00", "20:00", "21:00", "22:00", "23:00", "00:00",
)


@dataclass(frozen=True)
class SlotCalendar:
    """Ordered slot labels. Pure, static data."""

    labels: tuple[str, ...] = DEFAULT_SLOTS

    def __post_init__(self):
        labels = tuple(self.labels)
        if not labels:
            raise InvalidInput("Slot calendar must contain at least one slot")
        if any(not label.strip() for label in labels):
            raise InvalidInput("Slot labels must not be blank")
        if len(set(labels)) != len(labels):
            raise InvalidInput(f"Duplicate slot labels: {labels}")
        object.__setattr__(self, "labels", labels)

    @classmethod
    def hourly(cls, start_hour: int = 8, end_hour: int = 24) -> "SlotCalendar":
        """
        Build an hourly calendar from start_hour to end_hour inclusive.

        An end_hour of 24 wraps around to a trailing "00:00" label.
        """
        if not 0 <= start_hour <= end_hour <= 24:
            raise InvalidInput(f"Invalid slot range: {start_hour}-{end_hour}")
        return cls(tuple(f"{hour % 24:02d}:00" for hour in range(start_hour, end_hour + 1)))

    def slots(self) -> tuple[str, ...]:
        return self.labels

    def index_of(self, label: str) -> int | None:
        """Position of a label, or None if it is not in the calendar."""
        try:
            return self.labels.index(label)
        except ValueError:
            return None

    def label_at(self, index: int) -> str | None:
        """Label at a position, or None if out of range."""
        if 0 <= index < len(self.labels):
            return self.labels[index]
        return None

    def __contains__(self, label: object) -> bool:
        return label in self.labels

    def __len__(self) -> int:
        return len(self.labels)
