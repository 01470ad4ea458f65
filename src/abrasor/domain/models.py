from pydantic import BaseModel, Field
from typing import List, Dict, Literal, Optional
from datetime import datetime

from ..formula.serializer import FormulaDocument

UnitSystem = Literal["metric", "imperial"]

CATEGORIES = ["Surface Grinding", "OD Grinding", "ID Grinding", "Centerless", "Creep Feed"]


class CalculatorInput(BaseModel):
    """an input variable a calculator's formula can reference."""
    name: str
    label: str
    unit: str = ""
    unit_metric: Optional[str] = None
    unit_imperial: Optional[str] = None
    placeholder: Optional[str] = None
    default_value: Optional[float] = None

    def unit_for(self, unit_system: UnitSystem) -> str:
        if unit_system == "imperial":
            return self.unit_imperial or self.unit
        return self.unit_metric or self.unit


class CalculatorConfig(BaseModel):
    id: str
    name: str
    short_name: Optional[str] = None
    description: str = ""
    categories: List[str] = Field(default_factory=list)
    enabled: bool = True
    usage_count: int = 0
    last_modified: str = Field(default_factory=lambda: datetime.now().isoformat())
    inputs: List[CalculatorInput] = Field(default_factory=list)
    formula: Optional[FormulaDocument] = None
    result_unit: str = ""
    result_unit_metric: Optional[str] = None
    result_unit_imperial: Optional[str] = None

    @property
    def labels(self) -> Dict[str, str]:
        """input name -> display label."""
        return {i.name: i.label for i in self.inputs}

    def result_unit_for(self, unit_system: UnitSystem) -> str:
        if unit_system == "imperial":
            return self.result_unit_imperial or self.result_unit
        return self.result_unit_metric or self.result_unit


class CalculationResult(BaseModel):
    calculator_id: str
    label: str
    value: float
    unit: str = ""
    unit_system: UnitSystem = "metric"


class CalculatorCatalog(BaseModel):
    calculators: Dict[str, CalculatorConfig] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> "CalculatorCatalog":
        return cls(calculators={})

    @classmethod
    def default(cls) -> "CalculatorCatalog":
        """catalog seeded with the built-in grinding calculators."""
        work_speed = CalculatorInput(name="vw", label="Work Speed", unit="m/min")
        qw = CalculatorConfig(
            id="1",
            name="Specific Material Removal Rate (Qw)",
            short_name="Qw",
            description="Calculate the specific material removal rate",
            categories=["Surface Grinding", "OD Grinding"],
            inputs=[
                work_speed,
                CalculatorInput(name="ae", label="Depth of Cut", unit="mm"),
            ],
            formula=FormulaDocument(
                type="operator",
                value="*",
                children=[
                    FormulaDocument(type="input", value="vw", label="Work Speed"),
                    FormulaDocument(type="input", value="ae", label="Depth of Cut"),
                ],
            ),
            result_unit="mm³/mm·s",
        )
        qs = CalculatorConfig(
            id="2",
            name="Speed Ratio (Qs)",
            short_name="Qs",
            description="Calculate the speed ratio between wheel and workpiece",
            categories=["Surface Grinding", "ID Grinding", "OD Grinding"],
            inputs=[
                CalculatorInput(name="vs", label="Wheel Speed", unit="m/s"),
                work_speed,
            ],
            formula=FormulaDocument(
                type="operator",
                value="/",
                children=[
                    FormulaDocument(type="input", value="vs", label="Wheel Speed"),
                    FormulaDocument(
                        type="operator",
                        value="/",
                        children=[
                            FormulaDocument(type="input", value="vw", label="Work Speed"),
                            FormulaDocument(type="number", value="60"),
                        ],
                    ),
                ],
            ),
        )
        return cls(calculators={qw.id: qw, qs.id: qs})
