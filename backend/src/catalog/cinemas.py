"""Known Lyon cinemas and their locations."""

from dataclasses import dataclass
from urllib.parse import quote

KNOWN_CINEMAS: dict[str, tuple[float, float]] = {
    "Pathé Bellecour": (45.7578, 4.8320),
    "Pathé Carré de Soie": (45.7644, 4.9206),
    "Pathé Vaise": (45.7780, 4.8050),
    "UGC Part-Dieu": (45.7610, 4.8574),
    "UGC Confluence": (45.7430, 4.8180),
    "UGC Internationale": (45.7650, 4.8530),
    "UGC Astoria": (45.7640, 4.8350),
    "CGR Brignais": (45.6730, 4.7540),
    "Ciné Meyzieu": (45.7670, 5.0030),
    "Institut Lumière": (45.7450, 4.8710),
    "Comoedia": (45.7560, 4.8460),
    "Le Zola": (45.7667, 4.8856),
    "Cinéma Opéra": (45.7676, 4.8540),
    "CNP Terreaux": (45.7673, 4.8335),
    "CNP Bellecour": (45.7578, 4.8310),
}


@dataclass(frozen=True)
class Cinema:
    """A cinema, identified by its name in the catalog."""

    name: str

    @property
    def id(self) -> str:
        return self.name

    @property
    def coordinates(self) -> tuple[float, float] | None:
        return KNOWN_CINEMAS.get(self.name)

    @property
    def maps_url(self) -> str | None:
        coords = self.coordinates
        if coords is None:
            return None
        latitude, longitude = coords
        return f"https://maps.apple.com/?q={quote(self.name)}&ll={latitude},{longitude}"


def all_cinemas() -> list[Cinema]:
    return [Cinema(name) for name in sorted(KNOWN_CINEMAS)]


def find_cinemas(query: str) -> list[Cinema]:
    """Known cinemas whose name contains ``query`` (case-insensitive)."""
    query = query.lower()
    return [cinema for cinema in all_cinemas() if query in cinema.name.lower()]
