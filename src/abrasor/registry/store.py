import json
import logging
from pathlib import Path
from typing import Optional

from ..domain.models import CalculatorCatalog, CalculatorConfig

logger = logging.getLogger(__name__)


class CalculatorStore:
    """handles calculator persistence to JSON."""

    def __init__(self, catalog_file: Path):
        self.catalog_file = catalog_file

    def load(self) -> CalculatorCatalog:
        """load calculators from JSON file, falling back to the built-in set."""
        if not self.catalog_file.exists():
            return CalculatorCatalog.default()

        try:
            with open(self.catalog_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return CalculatorCatalog(**data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"calculator catalog {self.catalog_file} is corrupted, using defaults: {e}")
            return CalculatorCatalog.default()

    def save(self, catalog: CalculatorCatalog) -> None:
        """save calculators to JSON file."""
        # ensure parent directory exists
        self.catalog_file.parent.mkdir(parents=True, exist_ok=True)

        with open(self.catalog_file, 'w', encoding='utf-8') as f:
            json.dump(catalog.model_dump(exclude_none=True), f, indent=2, ensure_ascii=False)

    def get(self, calculator_id: str) -> Optional[CalculatorConfig]:
        return self.load().calculators.get(calculator_id)

    def put(self, calculator: CalculatorConfig) -> None:
        """add or replace a calculator."""
        catalog = self.load()
        catalog.calculators[calculator.id] = calculator
        self.save(catalog)

    def delete(self, calculator_id: str) -> bool:
        catalog = self.load()
        if calculator_id not in catalog.calculators:
            return False
        del catalog.calculators[calculator_id]
        self.save(catalog)
        return True
