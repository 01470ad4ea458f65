import hashlib
import json

from ..formula.serializer import FormulaDocument


def hash_formula(document: FormulaDocument) -> str:
    """
    returns a short sha256 hash of the formula structure.
    labels and legacy ids are left out, so relabelling an input does not change it.
    """
    if not isinstance(document, FormulaDocument):
        raise TypeError(f"expected FormulaDocument, got {type(document).__name__}")

    data = _strip(document.model_dump(exclude_none=True))
    digest = hashlib.sha256(json.dumps(data, sort_keys=True).encode()).hexdigest()
    return digest[:12]  # truncate for readability


def _strip(data: dict) -> dict:
    result = {k: v for k, v in data.items() if k not in ("label", "id")}
    if "children" in result:
        result["children"] = [_strip(c) for c in result["children"]]
    return result
