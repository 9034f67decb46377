"""
Area Management
===============

Utilities for loading and querying the area / stop-duration table.

This module handles:
    - Loading the area table from JSON files
    - Point-in-area queries (first matching area wins)
    - Stop-duration lookup for the timer

All areas are STATIC and loaded at startup. No runtime discovery.

Example:
    from shoal_tracker.geometry import AreaManager

    manager = AreaManager()
    manager.load_from_file("./data/areas/fishing_areas.json")

    area = manager.area_at(Position(2600, 3950))
    duration = manager.stop_duration_for(Position(2600, 3950))
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from shoal_tracker.models.geometry import AreaTable, FishingArea, SpeciesTiming
from shoal_tracker.models.position import Position


logger = logging.getLogger(__name__)


class AreaManager:
    """
    Manager for the area / duration lookup table.

    Attributes:
        table: Loaded area table
        _species: Species timing by name
    """

    def __init__(self, table: Optional[AreaTable] = None) -> None:
        """
        Initialize the manager, optionally with an already validated table.

        Args:
            table: Area table (load later with load_from_file if None)
        """
        self.table: Optional[AreaTable] = None
        self._species: Dict[str, SpeciesTiming] = {}
        if table is not None:
            self.load_table(table)

    def load_from_file(self, path: str) -> None:
        """
        Load the area table from a JSON file.

        Args:
            path: Path to the area JSON file

        Raises:
            FileNotFoundError: If the file does not exist
            pydantic.ValidationError: If the table is malformed
        """
        file_path = Path(path)

        if not file_path.exists():
            raise FileNotFoundError(f"Area table not found: {path}")

        logger.info(f"Loading areas from: {path}")

        with open(file_path, "r") as f:
            data = json.load(f)

        self.load_table(AreaTable.model_validate(data))

    def load_table(self, table: AreaTable) -> None:
        """Install an already validated table."""
        self.table = table
        self._species = {species.name: species for species in table.species}

        logger.info(
            f"Loaded area table: id={table.table_id}, "
            f"areas={len(table.areas)}, species={len(table.species)}"
        )

    @property
    def is_loaded(self) -> bool:
        return self.table is not None

    def area_at(self, position: Position) -> Optional[FishingArea]:
        """
        Find the area containing a position.

        Args:
            position: World position to test

        Returns:
            First area (in table order) whose bounds contain the position
        """
        if self.table is None:
            return None

        for area in self.table.areas:
            if area.bounds.contains(position):
                return area

        return None

    def get_area(self, area_id: str) -> Optional[FishingArea]:
        if self.table is None:
            return None
        for area in self.table.areas:
            if area.id == area_id:
                return area
        return None

    def get_species(self, name: Optional[str]) -> Optional[SpeciesTiming]:
        """Species timing by key (case-insensitive), None if unknown."""
        if name is None:
            return None
        return self._species.get(name) or self._species.get(name.lower())

    def species_at(self, position: Position) -> Optional[SpeciesTiming]:
        area = self.area_at(position)
        if area is None:
            return None
        return self._species.get(area.species)

    def stop_duration_for(self, position: Position) -> Optional[int]:
        """
        Total dwell duration for a stop at the given position.

        Returns:
            Duration in ticks, or None when no area covers the position
        """
        species = self.species_at(position)
        if species is None:
            logger.debug(f"No area covers {position}")
            return None
        return species.stop_duration
