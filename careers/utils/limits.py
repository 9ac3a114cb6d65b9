"""Length limits of user-supplied text, read from the model columns."""
from typing import Dict, List, Optional


def column_length(model, column: str) -> Optional[int]:
    """Declared String length of a column; None for Text and JSON."""
    return getattr(model.__table__.c[column].type, 'length', None)


def overlong_fields(model, values: Dict[str, Optional[str]]) -> List[str]:
    """Names of the values longer than their column allows."""
    too_long = []
    for name, value in values.items():
        limit = column_length(model, name)
        if limit and value and len(value) > limit:
            too_long.append(name)
    return too_long
