import logging
import uuid
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from ..domain.errors import (
    CalculatorDisabledError,
    CalculatorNotFoundError,
    CalculatorValidationError,
    InvalidDocumentError,
)
from ..domain.models import CalculationResult, CalculatorConfig, CalculatorInput, UnitSystem
from ..formula.evaluator import evaluate
from ..formula.nodes import ExpressionNode, attach_labels, variables
from ..formula.parser import parse_formula
from ..formula.serializer import from_document, to_document
from ..registry.store import CalculatorStore
from ..utils.hash import hash_formula

logger = logging.getLogger(__name__)


class CalculatorService:
    """defines, validates and runs formula calculators."""

    def __init__(self, store: CalculatorStore):
        self.store = store

    def list_calculators(self, include_disabled: bool = True) -> List[CalculatorConfig]:
        calculators = list(self.store.load().calculators.values())
        if not include_disabled:
            calculators = [c for c in calculators if c.enabled]
        return calculators

    def get(self, calculator_id: str) -> CalculatorConfig:
        calculator = self.store.get(calculator_id)
        if calculator is None:
            raise CalculatorNotFoundError(calculator_id)
        return calculator

    def formula_tree(self, calculator: CalculatorConfig) -> Optional[ExpressionNode]:
        """the calculator's formula as a tree, labelled from its declared inputs."""
        if calculator.formula is None:
            return None
        return attach_labels(from_document(calculator.formula), calculator.labels)

    def validate(self, calculator: CalculatorConfig):
        """
        check a calculator definition before it is saved.

        raises:
            CalculatorValidationError: listing every problem found
        """
        problems = []
        if not calculator.name.strip():
            problems.append("Please enter a calculator name")
        if not calculator.categories:
            problems.append("Please select at least one category")
        if not calculator.inputs:
            problems.append("Please add at least one input variable")

        names = [i.name for i in calculator.inputs]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            problems.append(f"Duplicate input names: {', '.join(duplicates)}")

        if calculator.formula is None:
            problems.append("Please build a formula")
        else:
            try:
                tree = from_document(calculator.formula)
            except InvalidDocumentError as e:
                problems.append(str(e))
            else:
                undeclared = [v for v in variables(tree) if v not in names]
                if undeclared:
                    problems.append(f"Formula uses undeclared inputs: {', '.join(undeclared)}")

        if problems:
            raise CalculatorValidationError(problems)

    def save(
        self,
        name: str,
        formula: str,
        inputs: List[CalculatorInput],
        categories: List[str],
        calculator_id: Optional[str] = None,
        description: str = "",
        short_name: Optional[str] = None,
        result_unit: str = "",
        result_unit_metric: Optional[str] = None,
        result_unit_imperial: Optional[str] = None,
        strict: bool = False,
    ) -> CalculatorConfig:
        """
        compile formula text and store the calculator, replacing any with the same id.

        raises:
            FormulaParseError: if the formula text is malformed
            CalculatorValidationError: if the definition is incomplete
        """
        labels = {i.name: i.label for i in inputs}
        tree = parse_formula(formula, strict=strict)
        if tree is not None:
            tree = attach_labels(tree, labels)

        existing = self.store.get(calculator_id) if calculator_id else None
        calculator = CalculatorConfig(
            id=calculator_id or uuid.uuid4().hex[:8],
            name=name,
            short_name=short_name,
            description=description,
            categories=categories,
            enabled=existing.enabled if existing else True,
            usage_count=existing.usage_count if existing else 0,
            inputs=inputs,
            formula=to_document(tree) if tree is not None else None,
            result_unit=result_unit,
            result_unit_metric=result_unit_metric or result_unit,
            result_unit_imperial=result_unit_imperial or result_unit,
        )
        self.validate(calculator)

        if existing:
            if self._formula_hash(existing) == self._formula_hash(calculator):
                logger.debug(f"calculator {calculator.id}: formula unchanged")
                rest = {"formula", "last_modified"}
                if calculator.model_dump(exclude=rest) == existing.model_dump(exclude=rest):
                    calculator.last_modified = existing.last_modified

        self.store.put(calculator)

        action = "updated" if existing else "created"
        logger.info(f"calculator '{calculator.name}' ({calculator.id}) {action}")
        return calculator

    @staticmethod
    def _formula_hash(calculator: CalculatorConfig) -> Optional[str]:
        return hash_formula(calculator.formula) if calculator.formula else None

    def run(
        self,
        calculator_id: str,
        values: Mapping[str, float],
        unit_system: UnitSystem = "metric",
    ) -> CalculationResult:
        """
        evaluate a calculator's formula for the given input values.

        inputs missing from values fall back to their default_value.

        raises:
            CalculatorNotFoundError, CalculatorDisabledError
            FormulaEvalError: unbound variable or division by zero
        """
        calculator = self.get(calculator_id)
        if not calculator.enabled:
            raise CalculatorDisabledError(calculator_id)
        if calculator.formula is None:
            raise CalculatorValidationError(["Calculator has no formula"])

        bindings: Dict[str, float] = {
            i.name: i.default_value for i in calculator.inputs if i.default_value is not None
        }
        bindings.update(values)

        value = evaluate(from_document(calculator.formula), bindings)

        calculator.usage_count += 1
        self.store.put(calculator)
        logger.debug(f"calculator {calculator_id} evaluated to {value}")

        return CalculationResult(
            calculator_id=calculator.id,
            label=calculator.short_name or calculator.name,
            value=value,
            unit=calculator.result_unit_for(unit_system),
            unit_system=unit_system,
        )

    def set_enabled(self, calculator_id: str, enabled: bool) -> CalculatorConfig:
        calculator = self.get(calculator_id)
        calculator.enabled = enabled
        calculator.last_modified = datetime.now().isoformat()
        self.store.put(calculator)
        logger.info(f"calculator '{calculator.name}' {'enabled' if enabled else 'disabled'}")
        return calculator

    def remove(self, calculator_id: str):
        if not self.store.delete(calculator_id):
            raise CalculatorNotFoundError(calculator_id)
        logger.info(f"calculator {calculator_id} removed")
