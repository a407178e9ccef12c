"""Static reference data: seasonal table and spot catalog for Chatham, MA.

The tables are tuples of frozen records wrapped in a FishingCatalog which the
forecast assembler receives as a dependency.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .data_schema import FishingMode, FishingSpot, SeasonalInfo

_LOGGER = logging.getLogger(__name__)

OFFSHORE_SPOTS: Tuple[FishingSpot, ...] = (
    FishingSpot(
        name="Crab Ledge",
        lat=41.72,
        lon=-69.6,
        distance_nm=15,
        type=FishingMode.OFFSHORE,
        notes="Closest tuna spot. Expansive area off Orleans/Chatham. Holds tons of bait. Great early season.",
        best_months=(5, 6, 7, 8, 9),
    ),
    FishingSpot(
        name="BC Buoy",
        lat=41.58,
        lon=-69.35,
        distance_nm=25,
        type=FishingMode.OFFSHORE,
        notes="Shipping lanes area. Big area to cover.",
        best_months=(6, 7, 8, 9, 10),
    ),
    FishingSpot(
        name="Regal Sword",
        lat=41.47,
        lon=-69.34,
        distance_nm=35,
        type=FishingMode.OFFSHORE,
        notes="Multiple wrecks, varied depths (210-230ft). Holds bait all season. Strong currents. Also great for cod.",
        best_months=(7, 8, 9, 10, 11),
    ),
    FishingSpot(
        name="BB Buoy",
        lat=41.26,
        lon=-69.29,
        distance_nm=40,
        type=FishingMode.OFFSHORE,
        notes="Furthest south. Under-fished. Deep water (~200ft). Often where fish show after leaving south of MV.",
        best_months=(6, 7, 8, 9),
    ),
    FishingSpot(
        name="Nauset / Outer Beach",
        lat=41.78,
        lon=-69.9,
        distance_nm=8,
        type=FishingMode.OFFSHORE,
        notes="Run north up the beach from Chatham. Good for smaller boats.",
        best_months=(6, 7, 8, 9),
    ),
    FishingSpot(
        name="Shipping Lanes",
        lat=41.55,
        lon=-69.45,
        distance_nm=25,
        type=FishingMode.OFFSHORE,
        notes="Broad area between spots. Tuna transit through here.",
        best_months=(7, 8, 9, 10),
    ),
)

INSHORE_SPOTS: Tuple[FishingSpot, ...] = (
    FishingSpot(
        name="Bearse Shoals",
        lat=41.605,
        lon=-69.96,
        distance_nm=2,
        type=FishingMode.INSHORE,
        notes="First rips south of Chatham. Good on incoming tide.",
    ),
    FishingSpot(
        name="Stonehorse Shoals",
        lat=41.58,
        lon=-69.95,
        distance_nm=4,
        type=FishingMode.INSHORE,
        notes="Middle shoals. Miles of rips.",
    ),
    FishingSpot(
        name="Handkerchief Shoal",
        lat=41.55,
        lon=-70.0,
        distance_nm=6,
        type=FishingMode.INSHORE,
        notes="Southern shoals. Steep drop-offs. Dangerous in rough weather.",
    ),
    FishingSpot(
        name="Monomoy Point",
        lat=41.56,
        lon=-69.93,
        distance_nm=5,
        type=FishingMode.INSHORE,
        notes="Tip of the island. Extremely strong currents. Expert area.",
    ),
    FishingSpot(
        name="Chatham Harbor Mouth",
        lat=41.67,
        lon=-69.95,
        distance_nm=1,
        type=FishingMode.INSHORE,
        notes="Good on outgoing tide. Strong currents.",
    ),
    FishingSpot(
        name="South Beach (inside)",
        lat=41.65,
        lon=-69.95,
        distance_nm=1.5,
        type=FishingMode.INSHORE,
        notes="Flats fishing. Fly fishing for stripers on incoming tide.",
    ),
    FishingSpot(
        name="Stage Harbor",
        lat=41.66,
        lon=-69.97,
        distance_nm=0.5,
        type=FishingMode.INSHORE,
        notes="Protected. Good for smaller boats.",
    ),
)

_OFF_SEASON_TUNA = "Off season. No tuna until late May."
_OFF_SEASON = "Off season."
_SUMMER_SPECIES = (
    "Striped bass",
    "Bluefish",
    "Bonito",
    "False albacore",
    "Fluke",
    "Scup",
    "Sea bass",
)

SEASONAL_DATA: Tuple[SeasonalInfo, ...] = (
    SeasonalInfo(1, 0.0, _OFF_SEASON_TUNA, (), 0.0, _OFF_SEASON, ()),
    SeasonalInfo(2, 0.0, _OFF_SEASON_TUNA, (), 0.0, _OFF_SEASON, ()),
    SeasonalInfo(3, 0.0, _OFF_SEASON_TUNA, (), 0.0, _OFF_SEASON, ()),
    SeasonalInfo(
        4,
        0.0,
        "Off season. First tuna may show in 4-6 weeks.",
        (),
        0.1,
        "Pre-season. A few early schoolies possible.",
        (),
    ),
    SeasonalInfo(
        5,
        0.3,
        "Early season. First bluefin arriving. Fish are thin, feeding aggressively on herring/mackerel/sand eels.",
        ("Crab Ledge", "BC Buoy"),
        0.5,
        "Stripers arriving. Schoolies first, then keepers. Sand eels and herring as bait.",
        ("Striped bass",),
    ),
    SeasonalInfo(
        6,
        0.7,
        "Strong early season. Schools of bluefin east of Chatham. Great jigging/popping bite.",
        ("Crab Ledge", "BC Buoy", "Nauset / Outer Beach"),
        0.8,
        "Peak rip fishing. Squid run. Blues arriving. Massive bait concentrations on the shoals.",
        ("Striped bass", "Bluefish", "Sea bass"),
    ),
    SeasonalInfo(
        7,
        0.8,
        "Peak early season. Fish also showing south of Martha's Vineyard.",
        ("Crab Ledge", "BC Buoy", "Regal Sword", "BB Buoy"),
        0.9,
        "Bonito and false albacore arriving. Fluke on the shoals. Best variety.",
        _SUMMER_SPECIES,
    ),
    SeasonalInfo(
        8,
        0.85,
        "Good consistent fishing. Variety of sizes. Trolling, jigging, live bait all working.",
        ("Crab Ledge", "BC Buoy", "Regal Sword", "BB Buoy", "Shipping Lanes"),
        0.85,
        "Great variety continues. Peak bonito and albie season.",
        _SUMMER_SPECIES,
    ),
    SeasonalInfo(
        9,
        1.0,
        "BEST MONTH. Fall run begins. Multiple size classes feeding aggressively. Giants come through. Can be incredible.",
        ("Regal Sword", "Crab Ledge", "Shipping Lanes", "BC Buoy", "BB Buoy"),
        0.9,
        "Fall run. Big stripers moving south. Blues aggressive.",
        ("Striped bass (large)", "Bluefish"),
    ),
    SeasonalInfo(
        10,
        0.8,
        "Late season. Largest fish migrating through. Weather windows critical - big fish but rough seas.",
        ("Regal Sword", "Shipping Lanes"),
        0.7,
        "Fall run continues. Big stripers still moving.",
        ("Striped bass (large)", "Bluefish"),
    ),
    SeasonalInfo(
        11,
        0.4,
        "Very late season. Biggest fish but tough weather. Trolling natural baits, chunking.",
        ("Regal Sword", "Shipping Lanes"),
        0.3,
        "Late season. Fish moving out.",
        ("Striped bass (dwindling)",),
    ),
    SeasonalInfo(
        12,
        0.1,
        "Rare but possible. Season effectively over.",
        (),
        0.0,
        _OFF_SEASON,
        (),
    ),
)


@dataclass(frozen=True)
class FishingCatalog:
    """Immutable bundle of the seasonal table and both spot lists."""

    seasonal: Tuple[SeasonalInfo, ...] = SEASONAL_DATA
    offshore_spots: Tuple[FishingSpot, ...] = OFFSHORE_SPOTS
    inshore_spots: Tuple[FishingSpot, ...] = INSHORE_SPOTS

    def seasonal_info(self, month: int) -> SeasonalInfo:
        """Return the row for a month, falling back to the first row."""
        for row in self.seasonal:
            if row.month == month:
                return row
        _LOGGER.debug("No seasonal row for month %s; using month %s", month, self.seasonal[0].month)
        return self.seasonal[0]

    def spots(self, mode: FishingMode) -> Tuple[FishingSpot, ...]:
        return self.offshore_spots if mode == FishingMode.OFFSHORE else self.inshore_spots

    def spot(self, name: str) -> Optional[FishingSpot]:
        for s in self.offshore_spots + self.inshore_spots:
            if s.name == name:
                return s
        return None


DEFAULT_CATALOG = FishingCatalog()
