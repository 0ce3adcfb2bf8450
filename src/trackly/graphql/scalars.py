"""
Custom GraphQL scalars
"""

from typing import NewType

import strawberry

from ..validation import parse_hours

# Accepts numbers or numeric strings; anything unparsable is read as 0 hours.
Hours = strawberry.scalar(
    NewType("Hours", float),
    serialize=float,
    parse_value=parse_hours,
    description="A number of hours. Invalid input is read as 0.",
)
