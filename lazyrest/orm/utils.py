import sys
from typing import Any, ForwardRef

from pydantic.v1.typing import evaluate_forwardref


def get_globals(cls) -> dict[str, Any]:
    if cls.__module__ in sys.modules:
        globalns = sys.modules[cls.__module__].__dict__.copy()
    else:
        globalns = {}
    return globalns


def evaluate_forward_ref(source: type, model: ForwardRef, **localns: Any) -> Any:
    return evaluate_forwardref(model, get_globals(source), {source.__name__: source, **localns})
