import re
from collections.abc import Mapping
from dataclasses import dataclass, field

NS_RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
NS_XMP = "http://ns.adobe.com/xap/1.0/"
NS_XMP_MM = "http://ns.adobe.com/xap/1.0/mm/"
NS_ST_EVT = "http://ns.adobe.com/xap/1.0/sType/ResourceEvent#"

_DATE_PATTERN = re.compile(
    r"^(?P<year>-?\d{4})"
    r"(?:-(?P<month>\d{2})"
    r"(?:-(?P<day>\d{2})"
    r"(?:T(?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d+))?)?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})?"
    r")?)?)?$"
)


def qualified_name(namespace: str, name: str) -> str:
    """Build the '{namespace}Name' key used for XMP properties."""
    return f"{{{namespace}}}{name}"


@dataclass(frozen=True)
class XmpDateTime:
    """XMP date with the precision fields kept separately.

    Components absent from the source string are zero.
    """

    year: int
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0
    nanosecond: int = 0
    tz_sign: int = 0
    tz_hour: int = 0
    tz_minute: int = 0

    @classmethod
    def parse(cls, raw: str) -> "XmpDateTime | None":
        """Parse an ISO 8601 / XMP date string, or return None if malformed."""
        match = _DATE_PATTERN.match(raw.strip())
        if match is None:
            return None
        parts = match.groupdict()
        fraction = parts["fraction"] or ""
        tz = parts["tz"]
        tz_sign, tz_hour, tz_minute = 0, 0, 0
        if tz and tz != "Z":
            tz_sign = -1 if tz[0] == "-" else 1
            tz_hour, tz_minute = int(tz[1:3]), int(tz[4:6])
        return cls(
            year=int(parts["year"]),
            month=int(parts["month"] or 0),
            day=int(parts["day"] or 0),
            hour=int(parts["hour"] or 0),
            minute=int(parts["minute"] or 0),
            second=int(parts["second"] or 0),
            nanosecond=int(fraction[:9].ljust(9, "0")) if fraction else 0,
            tz_sign=tz_sign,
            tz_hour=tz_hour,
            tz_minute=tz_minute,
        )

    def to_second(self) -> tuple[int, int, int, int, int, int]:
        """Year through second; sub-second and timezone fields are dropped."""
        return (self.year, self.month, self.day, self.hour, self.minute, self.second)


@dataclass(frozen=True)
class HistoryEvent:
    """Single xmpMM:History entry (stEvt:ResourceEvent)."""

    action: str | None = None
    software_agent: str | None = None
    when: str | None = None


ArrayItem = str | Mapping[str, str]


@dataclass(frozen=True)
class ImageMetadata:
    """XMP properties extracted from one image, plus its container type."""

    container_type: str
    properties: Mapping[str, str] = field(default_factory=dict)
    arrays: Mapping[str, tuple[ArrayItem, ...]] = field(default_factory=dict)

    def get_property(self, namespace: str, name: str) -> str | None:
        return self.properties.get(qualified_name(namespace, name))

    def get_date(self, namespace: str, name: str) -> XmpDateTime | None:
        raw = self.get_property(namespace, name)
        if raw is None:
            return None
        return XmpDateTime.parse(raw)

    def get_array(self, namespace: str, name: str) -> tuple[ArrayItem, ...]:
        return self.arrays.get(qualified_name(namespace, name), ())

    @property
    def creator_tool(self) -> str | None:
        return self.get_property(NS_XMP, "CreatorTool")

    @property
    def create_date(self) -> XmpDateTime | None:
        return self.get_date(NS_XMP, "CreateDate")

    @property
    def modify_date(self) -> XmpDateTime | None:
        return self.get_date(NS_XMP, "ModifyDate")

    @property
    def history(self) -> tuple[HistoryEvent, ...]:
        events: list[HistoryEvent] = []
        for item in self.get_array(NS_XMP_MM, "History"):
            if not isinstance(item, Mapping):
                continue
            events.append(
                HistoryEvent(
                    action=item.get(qualified_name(NS_ST_EVT, "action")),
                    software_agent=item.get(qualified_name(NS_ST_EVT, "softwareAgent")),
                    when=item.get(qualified_name(NS_ST_EVT, "when")),
                )
            )
        return tuple(events)
